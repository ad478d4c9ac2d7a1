"""
Collection Fetcher - Application Layer

Reads every collection a discovery pass needs, concurrently.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Dict, List, Optional, Tuple

from dependency_injector.wiring import Provide, inject

from crestron_home.domain.entities.device import (
    CollectionSnapshot,
    OptionalCollection,
)
from crestron_home.domain.entities.errors import DiscoveryError, TransportError
from crestron_home.domain.gateways.crestron_gateway import ICrestronGateway
from crestron_home.domain.services.device_aggregator import LiveRecord
from crestron_home.shared import get_logger

logger = get_logger(__name__)

REQUIRED_COLLECTIONS = ("rooms", "scenes", "devices", "shades", "thermostats")
OPTIONAL_COLLECTIONS = ("doorlocks", "securitydevices")


class RecordKind(str, Enum):
    """Collections that can be read one record at a time."""

    SCENE = "scenes"
    DEVICE = "devices"
    SHADE = "shades"
    THERMOSTAT = "thermostats"
    DOOR_LOCK = "doorlocks"
    SECURITY_DEVICE = "securitydevices"


class CollectionFetcher:
    """
    Fan-out/fan-in reader of the controller collections.

    Rooms, scenes, devices, shades and thermostats are required: a failure
    on any of them aborts the pass. Door locks and security devices are
    optional because not every controller firmware exposes them; their
    failures are reported as unsupported collections instead.
    """

    @inject
    def __init__(
        self,
        crestron_gateway: ICrestronGateway = Provide["crestron_gateway"],
    ):
        self.crestron_gateway = crestron_gateway

    async def fetch_all(self) -> CollectionSnapshot:
        """
        Read all collections of a discovery pass.

        Returns:
            CollectionSnapshot: Records of every collection

        Raises:
            DiscoveryError: If a required collection cannot be read
        """
        gateway = self.crestron_gateway
        reads: Dict[str, Awaitable[Any]] = {
            "rooms": gateway.get_rooms(),
            "scenes": gateway.get_scenes(),
            "devices": gateway.get_devices(),
            "shades": gateway.get_shades(),
            "thermostats": gateway.get_thermostats(),
            "doorlocks": gateway.get_door_locks(),
            "securitydevices": gateway.get_security_devices(),
        }
        results = dict(
            zip(reads, await asyncio.gather(*reads.values(), return_exceptions=True))
        )

        for result in results.values():
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result

        failures: List[Tuple[str, Exception]] = [
            (name, results[name])
            for name in REQUIRED_COLLECTIONS
            if isinstance(results[name], Exception)
        ]
        if failures:
            failed = [name for name, _ in failures]
            logger.error(
                "discovery.collection.failed",
                collections=failed,
                errors={name: str(error) for name, error in failures},
            )
            raise DiscoveryError(
                f"Required collections could not be read: {', '.join(failed)}",
                collections=failed,
                details={name: str(error) for name, error in failures},
            ) from failures[0][1]

        snapshot = CollectionSnapshot(
            rooms=tuple(results["rooms"]),
            scenes=tuple(results["scenes"]),
            devices=tuple(results["devices"]),
            shades=tuple(results["shades"]),
            thermostats=tuple(results["thermostats"]),
            door_locks=self._optional("doorlocks", results["doorlocks"]),
            security_devices=self._optional(
                "securitydevices", results["securitydevices"]
            ),
        )

        logger.info(
            "discovery.collections.fetched",
            rooms=len(snapshot.rooms),
            scenes=len(snapshot.scenes),
            devices=len(snapshot.devices),
            shades=len(snapshot.shades),
            thermostats=len(snapshot.thermostats),
            door_locks=len(snapshot.door_locks.items),
            security_devices=len(snapshot.security_devices.items),
        )
        return snapshot

    async def fetch_record(self, kind: RecordKind, record_id: int) -> Optional[LiveRecord]:
        """Read a single record through the per-id endpoint of a collection."""
        gateway = self.crestron_gateway
        readers = {
            RecordKind.SCENE: gateway.get_scene,
            RecordKind.DEVICE: gateway.get_device,
            RecordKind.SHADE: gateway.get_shade,
            RecordKind.THERMOSTAT: gateway.get_thermostat,
            RecordKind.DOOR_LOCK: gateway.get_door_lock,
            RecordKind.SECURITY_DEVICE: gateway.get_security_device,
        }
        return await readers[RecordKind(kind)](record_id)

    def _optional(self, name: str, result: Any) -> OptionalCollection:
        if not isinstance(result, Exception):
            return OptionalCollection(items=tuple(result))

        if isinstance(result, TransportError) and result.is_not_found:
            logger.info("discovery.collection.unsupported", collection=name)
        else:
            logger.warning(
                "discovery.collection.unavailable", collection=name, error=str(result)
            )
        return OptionalCollection.not_supported(str(result))
