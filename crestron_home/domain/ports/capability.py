"""
Domain ports for consumers of the canonical device model.

A presentation layer (HomeKit bridge, REST API, CLI) binds canonical
device fields to its own property model through these interfaces.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable

from crestron_home.domain.entities.device import CanonicalDevice


@runtime_checkable
class DeviceStateListener(Protocol):
    """Receives the fresh device after every successful refresh."""

    device_id: int
    device_type: str

    def update_state(self, device: CanonicalDevice) -> None:
        ...


@runtime_checkable
class DeviceCapability(DeviceStateListener, Protocol):
    """Readable and writable fields of one device kind."""

    fields: Tuple[str, ...]

    def get(self, field: str) -> Any:
        ...

    async def set(self, field: str, value: Any) -> None:
        ...
