"""
Infrastructure Layer Package

This package contains implementations of interfaces defined in the
domain layer: the HTTP gateway to the controller and session management.
"""

from crestron_home.infrastructure import gateways, services

__all__ = ["gateways", "services"]
