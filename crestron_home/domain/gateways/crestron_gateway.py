"""
Crestron Gateway Interface - Domain Layer

This module defines the interface for communicating with a Crestron Home
controller REST API.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from crestron_home.domain.entities.device import (
    ClimateExtension,
    LockExtension,
    RawDeviceRecord,
    Room,
    Scene,
    SecurityExtension,
    ShadeExtension,
)


class ICrestronGateway(ABC):
    """Interface for the Crestron Home REST API."""

    @abstractmethod
    async def get_rooms(self) -> List[Room]:
        """
        Retrieve the rooms collection.

        Raises:
            TransportError: If the request fails
        """
        pass

    @abstractmethod
    async def get_scenes(self) -> List[Scene]:
        pass

    @abstractmethod
    async def get_devices(self) -> List[RawDeviceRecord]:
        pass

    @abstractmethod
    async def get_shades(self) -> List[ShadeExtension]:
        pass

    @abstractmethod
    async def get_thermostats(self) -> List[ClimateExtension]:
        pass

    @abstractmethod
    async def get_door_locks(self) -> List[LockExtension]:
        """Retrieve door locks. Not every controller firmware exposes them."""
        pass

    @abstractmethod
    async def get_security_devices(self) -> List[SecurityExtension]:
        """Retrieve security panels. Not every controller firmware exposes them."""
        pass

    @abstractmethod
    async def get_scene(self, scene_id: int) -> Optional[Scene]:
        pass

    @abstractmethod
    async def get_device(self, device_id: int) -> Optional[RawDeviceRecord]:
        pass

    @abstractmethod
    async def get_shade(self, shade_id: int) -> Optional[ShadeExtension]:
        pass

    @abstractmethod
    async def get_thermostat(self, thermostat_id: int) -> Optional[ClimateExtension]:
        pass

    @abstractmethod
    async def get_door_lock(self, lock_id: int) -> Optional[LockExtension]:
        pass

    @abstractmethod
    async def get_security_device(self, device_id: int) -> Optional[SecurityExtension]:
        pass

    @abstractmethod
    async def post(self, path: str, payload: Any = None) -> Dict[str, Any]:
        """
        Issue a write against the controller.

        Args:
            path: Endpoint path relative to the API base
            payload: JSON body, or None for an empty body

        Returns:
            Dict: Decoded response body (empty when the controller sends none)

        Raises:
            TransportError: If the request fails
        """
        pass
