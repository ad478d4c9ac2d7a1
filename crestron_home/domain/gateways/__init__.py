"""
Gateways Package - Domain Layer

Interfaces for external services the domain depends on.
"""

from .crestron_gateway import ICrestronGateway

__all__ = ["ICrestronGateway"]
