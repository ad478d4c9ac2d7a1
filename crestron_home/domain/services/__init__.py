"""Domain services: pure aggregation and value translation rules."""

from .device_aggregator import aggregate, resolve_type, with_live_record

__all__ = ["aggregate", "resolve_type", "with_live_record"]
