"""
Application Layer Package

This package contains the application-specific rules: the use cases
that drive discovery and commands, the state synchronizer owning the
device snapshot, the capability adapters and the DTOs exchanged with the
presentation layer.
"""

# Re-export submodules
from crestron_home.application import dtos, services, use_cases

__all__ = ["dtos", "services", "use_cases"]
