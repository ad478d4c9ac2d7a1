"""
Application Services Package

Long-lived application objects: the state synchronizer owning the device
snapshot and the capability adapters bound to it.
"""

from .capabilities import (
    BaseCapability,
    DoorLockCapability,
    LightCapability,
    SceneCapability,
    SecuritySystemCapability,
    ShadeCapability,
    ThermostatCapability,
    capability_for,
)
from .state_synchronizer import StateSynchronizer

__all__ = [
    "BaseCapability",
    "DoorLockCapability",
    "LightCapability",
    "SceneCapability",
    "SecuritySystemCapability",
    "ShadeCapability",
    "StateSynchronizer",
    "ThermostatCapability",
    "capability_for",
]
