"""
Domain Entities - Devices

Records read from the controller collections and the canonical device
model built from them. Every entity is immutable: a discovery pass
builds a new set of objects instead of editing the previous ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Generic, Optional, Tuple, TypeVar

# Resolved type tags with a fixed meaning for the allow-list
SHADE_TYPE = "Shade"
SCENE_TYPE = "Scene"
DOOR_LOCK_TYPE = "DoorLock"
THERMOSTAT_TYPE = "Thermostat"
SECURITY_SYSTEM_TYPE = "SecuritySystem"

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Room:
    """A room, used to prefix device names."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class Scene:
    """A scene record from the scenes collection."""

    id: int
    name: str
    scene_type: str
    room_id: Optional[int] = None
    status: bool = False


@dataclass(frozen=True, slots=True)
class RawDeviceRecord:
    """An untyped record from the generic devices collection."""

    id: int
    name: str
    room_id: Optional[int] = None
    declared_type: str = ""
    declared_sub_type: str = ""
    level: Optional[int] = None
    status: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class ShadeExtension:
    """Shade-specific data keyed by device id."""

    id: int
    position: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SetPoint:
    """A thermostat setpoint, temperature in deci-degrees of the source scale."""

    kind: str
    temperature: int


@dataclass(frozen=True, slots=True)
class ClimateExtension:
    """Thermostat data keyed by device id. Absent fields stay ``None``."""

    id: int
    current_temperature: Optional[int] = None
    current_mode: Optional[str] = None
    current_fan_mode: Optional[str] = None
    set_points: Optional[Tuple[SetPoint, ...]] = None
    temperature_units: Optional[str] = None
    scheduler_state: Optional[str] = None
    available_fan_modes: Optional[FrozenSet[str]] = None
    available_system_modes: Optional[FrozenSet[str]] = None
    connection_status: Optional[str] = None

    def set_point(self, kind: str) -> Optional[SetPoint]:
        """Return the first setpoint of the given kind (case-insensitive)."""
        wanted = kind.lower()
        for set_point in self.set_points or ():
            if set_point.kind.lower() == wanted:
                return set_point
        return None


@dataclass(frozen=True, slots=True)
class LockExtension:
    """Door lock data from the dedicated lock collection."""

    id: int
    status: Optional[str] = None
    lock_kind: Optional[str] = None
    connection_status: Optional[str] = None
    name: str = ""
    room_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SecurityExtension:
    """Security panel data from the security devices collection."""

    id: int
    current_state: Optional[str] = None
    available_states: Optional[FrozenSet[str]] = None
    connection_status: Optional[str] = None
    room_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class OptionalCollection(Generic[T]):
    """Result of reading a collection that a controller may not implement."""

    items: Tuple[T, ...] = ()
    supported: bool = True
    reason: Optional[str] = None

    @classmethod
    def not_supported(cls, reason: str) -> "OptionalCollection[T]":
        return cls(items=(), supported=False, reason=reason)


@dataclass(frozen=True, slots=True)
class CollectionSnapshot:
    """All records read during one discovery pass."""

    rooms: Tuple[Room, ...] = ()
    scenes: Tuple[Scene, ...] = ()
    devices: Tuple[RawDeviceRecord, ...] = ()
    shades: Tuple[ShadeExtension, ...] = ()
    thermostats: Tuple[ClimateExtension, ...] = ()
    door_locks: OptionalCollection[LockExtension] = field(
        default_factory=OptionalCollection
    )
    security_devices: OptionalCollection[SecurityExtension] = field(
        default_factory=OptionalCollection
    )


@dataclass(frozen=True, slots=True)
class CanonicalDevice:
    """The normalized device exposed to consumers."""

    id: int
    resolved_type: str
    resolved_sub_type: str
    display_name: str
    name: str = ""
    room_id: Optional[int] = None
    room_name: str = ""
    level: int = 0
    status: bool = False
    position: int = 0
    climate: Optional[ClimateExtension] = None
    lock: Optional[LockExtension] = None
    security: Optional[SecurityExtension] = None
