"""
Device Use Cases - Application Layer

Discovery of the canonical device list and live reads of single devices.
"""

from typing import Iterable, List, Optional

from dependency_injector.wiring import Provide, inject

from crestron_home.application.use_cases.collection_fetcher import (
    CollectionFetcher,
    RecordKind,
)
from crestron_home.domain.entities.device import (
    DOOR_LOCK_TYPE,
    SCENE_TYPE,
    SHADE_TYPE,
    CanonicalDevice,
)
from crestron_home.domain.ports.session_manager import ISessionManager
from crestron_home.domain.services.device_aggregator import (
    aggregate,
    is_climate_type,
    is_lock_type,
    is_security_type,
    with_live_record,
)
from crestron_home.shared import get_logger

logger = get_logger(__name__)


class DiscoverDevicesUseCase:
    """Use case running one discovery pass: session, fetch, aggregate."""

    @inject
    def __init__(
        self,
        session_manager: ISessionManager = Provide["session_manager"],
        collection_fetcher: CollectionFetcher = Provide["collection_fetcher"],
        enabled_types: Iterable[str] = Provide["config.crestron.enabled_types"],
    ):
        self.session_manager = session_manager
        self.collection_fetcher = collection_fetcher
        self.enabled_types = frozenset(enabled_types)

    async def execute(self) -> List[CanonicalDevice]:
        """
        Discover the devices of the controller.

        Returns:
            List[CanonicalDevice]: Allow-listed canonical devices

        Raises:
            AuthError: If no session could be established
            DiscoveryError: If a required collection cannot be read
        """
        await self.session_manager.ensure_session()
        snapshot = await self.collection_fetcher.fetch_all()
        devices = aggregate(snapshot, self.enabled_types)

        logger.info(
            "devices.discovered",
            device_count=len(devices),
            enabled_types=sorted(self.enabled_types),
            door_locks_supported=snapshot.door_locks.supported,
            security_supported=snapshot.security_devices.supported,
        )
        return devices


class GetLiveDeviceUseCase:
    """Re-read one device through the per-id endpoints of the controller."""

    @inject
    def __init__(
        self,
        collection_fetcher: CollectionFetcher = Provide["collection_fetcher"],
    ):
        self.collection_fetcher = collection_fetcher

    async def execute(self, device: CanonicalDevice) -> CanonicalDevice:
        """
        Return ``device`` updated with the controller's current records.

        Raises:
            TransportError: If a per-id read fails for a reason other than 404
        """
        live = device
        for kind in self._record_kinds(device):
            record = await self.collection_fetcher.fetch_record(kind, device.id)
            if record is None:
                logger.debug(
                    "devices.live_record_missing", device_id=device.id, kind=kind.value
                )
                continue
            live = with_live_record(live, record)
        return live

    def _record_kinds(self, device: CanonicalDevice) -> List[RecordKind]:
        resolved_type = device.resolved_type
        if resolved_type == SCENE_TYPE:
            return [RecordKind.SCENE]
        if resolved_type == DOOR_LOCK_TYPE and device.lock is not None:
            return [RecordKind.DOOR_LOCK]

        kinds = [RecordKind.DEVICE]
        extension: Optional[RecordKind] = None
        if resolved_type == SHADE_TYPE:
            extension = RecordKind.SHADE
        elif is_climate_type(resolved_type):
            extension = RecordKind.THERMOSTAT
        elif is_lock_type(resolved_type):
            extension = RecordKind.DOOR_LOCK
        elif is_security_type(resolved_type):
            extension = RecordKind.SECURITY_DEVICE
        if extension is not None:
            kinds.append(extension)
        return kinds
