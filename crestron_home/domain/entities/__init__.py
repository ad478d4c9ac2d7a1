"""
Domain Entities Package

This package contains the core domain entities: controller records, the
canonical device model, command intents and the error taxonomy.
"""

from .commands import (
    CommandIntent,
    CommandResult,
    RecallScene,
    SetFanMode,
    SetLightLevel,
    SetLockState,
    SetMode,
    SetSecurityState,
    SetShadePosition,
    SetTemperature,
)
from .device import (
    DOOR_LOCK_TYPE,
    SCENE_TYPE,
    SECURITY_SYSTEM_TYPE,
    SHADE_TYPE,
    THERMOSTAT_TYPE,
    CanonicalDevice,
    ClimateExtension,
    CollectionSnapshot,
    LockExtension,
    OptionalCollection,
    RawDeviceRecord,
    Room,
    Scene,
    SecurityExtension,
    SetPoint,
    ShadeExtension,
)
from .errors import AuthError, CommandError, DiscoveryError, DomainError, TransportError
from .health import ControllerHealth, ServiceStatus
from .session import Session
from .states import FanMode, LockState, SecurityState, SetPointKind, ThermostatMode

__all__ = [
    "AuthError",
    "CanonicalDevice",
    "ClimateExtension",
    "CollectionSnapshot",
    "CommandError",
    "CommandIntent",
    "CommandResult",
    "ControllerHealth",
    "DOOR_LOCK_TYPE",
    "DiscoveryError",
    "DomainError",
    "FanMode",
    "LockExtension",
    "LockState",
    "OptionalCollection",
    "RawDeviceRecord",
    "RecallScene",
    "Room",
    "SCENE_TYPE",
    "SECURITY_SYSTEM_TYPE",
    "SHADE_TYPE",
    "Scene",
    "SecurityExtension",
    "SecurityState",
    "ServiceStatus",
    "Session",
    "SetFanMode",
    "SetLightLevel",
    "SetLockState",
    "SetMode",
    "SetPoint",
    "SetPointKind",
    "SetSecurityState",
    "SetShadePosition",
    "SetTemperature",
    "ShadeExtension",
    "THERMOSTAT_TYPE",
    "ThermostatMode",
    "TransportError",
]
