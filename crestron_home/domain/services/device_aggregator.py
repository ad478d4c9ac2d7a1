"""
Device aggregation - Domain Service

Joins the records of one discovery pass into canonical devices.

Result order is: devices collection order, then scenes, then standalone
door locks. Duplicate ids inside one collection collapse onto the first
position with the last record's values. Ids shared by different
collections are kept as separate devices, except for door locks already
emitted from the devices collection.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, TypeVar, Union

from crestron_home.domain.entities.device import (
    DOOR_LOCK_TYPE,
    SCENE_TYPE,
    SECURITY_SYSTEM_TYPE,
    SHADE_TYPE,
    THERMOSTAT_TYPE,
    CanonicalDevice,
    ClimateExtension,
    CollectionSnapshot,
    LockExtension,
    RawDeviceRecord,
    Scene,
    SecurityExtension,
    ShadeExtension,
)

_LOCK_TYPES = frozenset({"doorlock", "lock"})
_SECURITY_TYPES = frozenset({"security device", "securitysystem"})

_Keyed = TypeVar("_Keyed")

LiveRecord = Union[
    RawDeviceRecord,
    Scene,
    ShadeExtension,
    ClimateExtension,
    LockExtension,
    SecurityExtension,
]


def resolve_type(declared_type: Optional[str], declared_sub_type: Optional[str]) -> str:
    """
    Return the effective type tag of a raw device.

    The sub-type wins over the type. Thermostat and security panel
    variants are normalized to the tags used by the allow-list.
    """
    resolved = declared_sub_type or declared_type or ""
    lowered = resolved.lower()
    if lowered == THERMOSTAT_TYPE.lower():
        return THERMOSTAT_TYPE
    if lowered in _SECURITY_TYPES:
        return SECURITY_SYSTEM_TYPE
    return resolved


def is_climate_type(resolved_type: str) -> bool:
    return resolved_type == THERMOSTAT_TYPE


def is_lock_type(resolved_type: str) -> bool:
    return resolved_type.lower() in _LOCK_TYPES


def is_security_type(resolved_type: str) -> bool:
    return resolved_type == SECURITY_SYSTEM_TYPE


def display_name(room_name: str, name: str) -> str:
    """
    Room name followed by the device name.

    The result is stripped, so a device in an unknown room is named
    ``"Plug"`` rather than ``" Plug"``.
    """
    return f"{room_name} {name}".strip()


def _index_by_id(records: Iterable[_Keyed]) -> Dict[int, _Keyed]:
    indexed: Dict[int, _Keyed] = {}
    for record in records:
        indexed[record.id] = record  # type: ignore[attr-defined]
    return indexed


def _device_from_record(
    record: RawDeviceRecord,
    room_names: Dict[int, str],
    shades: Dict[int, ShadeExtension],
    thermostats: Dict[int, ClimateExtension],
    door_locks: Dict[int, LockExtension],
    security_devices: Dict[int, SecurityExtension],
) -> CanonicalDevice:
    resolved_type = resolve_type(record.declared_type, record.declared_sub_type)
    room_name = room_names.get(record.room_id, "") if record.room_id is not None else ""

    position = 0
    if resolved_type == SHADE_TYPE:
        shade = shades.get(record.id)
        if shade is not None and shade.position is not None:
            position = shade.position

    return CanonicalDevice(
        id=record.id,
        resolved_type=resolved_type,
        resolved_sub_type=resolved_type,
        display_name=display_name(room_name, record.name),
        name=record.name,
        room_id=record.room_id,
        room_name=room_name,
        level=record.level or 0,
        status=bool(record.status),
        position=position,
        climate=thermostats.get(record.id) if is_climate_type(resolved_type) else None,
        lock=door_locks.get(record.id) if is_lock_type(resolved_type) else None,
        security=(
            security_devices.get(record.id) if is_security_type(resolved_type) else None
        ),
    )


def _device_from_scene(scene: Scene, room_names: Dict[int, str]) -> CanonicalDevice:
    room_name = room_names.get(scene.room_id, "") if scene.room_id is not None else ""
    return CanonicalDevice(
        id=scene.id,
        resolved_type=SCENE_TYPE,
        resolved_sub_type=scene.scene_type,
        display_name=display_name(room_name, scene.name),
        name=scene.name,
        room_id=scene.room_id,
        room_name=room_name,
        level=0,
        status=scene.status,
        position=0,
    )


def _device_from_lock(lock: LockExtension, room_names: Dict[int, str]) -> CanonicalDevice:
    room_name = room_names.get(lock.room_id, "") if lock.room_id is not None else ""
    return CanonicalDevice(
        id=lock.id,
        resolved_type=DOOR_LOCK_TYPE,
        resolved_sub_type=lock.lock_kind or "",
        display_name=display_name(room_name, lock.name),
        name=lock.name,
        room_id=lock.room_id,
        room_name=room_name,
        level=0,
        status=lock.status == "locked",
        position=0,
        lock=lock,
    )


def aggregate(
    snapshot: CollectionSnapshot, allowed_types: Iterable[str]
) -> List[CanonicalDevice]:
    """
    Build the canonical device list of one discovery pass.

    Args:
        snapshot: Records of every collection read during the pass
        allowed_types: Resolved type tags to include

    Returns:
        List[CanonicalDevice]: Devices, then scenes, then standalone locks
    """
    allowed: Set[str] = set(allowed_types)
    room_names = {room.id: room.name for room in snapshot.rooms}
    shades = _index_by_id(snapshot.shades)
    thermostats = _index_by_id(snapshot.thermostats)
    door_locks = _index_by_id(snapshot.door_locks.items)
    security_devices = _index_by_id(snapshot.security_devices.items)

    from_devices: Dict[int, CanonicalDevice] = {}
    for record in snapshot.devices:
        device = _device_from_record(
            record, room_names, shades, thermostats, door_locks, security_devices
        )
        if device.resolved_type in allowed:
            from_devices[device.id] = device

    from_scenes: Dict[int, CanonicalDevice] = {}
    if SCENE_TYPE in allowed:
        for scene in snapshot.scenes:
            from_scenes[scene.id] = _device_from_scene(scene, room_names)

    # A lock reported by both collections is emitted once per collection
    from_locks: Dict[int, CanonicalDevice] = {}
    if DOOR_LOCK_TYPE in allowed:
        for lock in snapshot.door_locks.items:
            from_locks[lock.id] = _device_from_lock(lock, room_names)

    return [*from_devices.values(), *from_scenes.values(), *from_locks.values()]


def with_live_record(device: CanonicalDevice, record: LiveRecord) -> CanonicalDevice:
    """Return a copy of ``device`` updated from a freshly read per-id record."""
    if isinstance(record, ClimateExtension):
        return replace(device, climate=record)
    if isinstance(record, SecurityExtension):
        return replace(device, security=record)
    if isinstance(record, LockExtension):
        if device.resolved_type == DOOR_LOCK_TYPE:
            return replace(device, lock=record, status=record.status == "locked")
        return replace(device, lock=record)
    if isinstance(record, ShadeExtension):
        return replace(device, position=record.position or 0)
    if isinstance(record, Scene):
        return replace(device, status=record.status)
    return replace(device, level=record.level or 0, status=bool(record.status))
