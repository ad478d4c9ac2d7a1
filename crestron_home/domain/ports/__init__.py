"""Domain ports: protocols implemented outside the domain layer."""

from .capability import DeviceCapability, DeviceStateListener
from .session_manager import ISessionManager

__all__ = ["DeviceCapability", "DeviceStateListener", "ISessionManager"]
