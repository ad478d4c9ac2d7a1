"""
Domain Layer Package

This package contains the core business logic and rules of the bridge:
the device model, the aggregation and translation rules, and the
interfaces of the external services it relies on. It has no dependency
on frameworks or infrastructure.
"""

from crestron_home.domain import entities, gateways, ports, services

__all__ = ["entities", "gateways", "ports", "services"]
