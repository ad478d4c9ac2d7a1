from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from crestron_home.application.services.state_synchronizer import StateSynchronizer
from crestron_home.application.use_cases.collection_fetcher import CollectionFetcher
from crestron_home.application.use_cases.command_use_cases import ApplyCommandUseCase
from crestron_home.application.use_cases.device_use_cases import (
    DiscoverDevicesUseCase,
    GetLiveDeviceUseCase,
)
from crestron_home.domain.entities.device import (
    ClimateExtension,
    LockExtension,
    RawDeviceRecord,
    Room,
    Scene,
    SecurityExtension,
    SetPoint,
    ShadeExtension,
)
from crestron_home.domain.entities.errors import AuthError
from crestron_home.domain.entities.session import Session
from crestron_home.domain.gateways.crestron_gateway import ICrestronGateway
from crestron_home.main.config import AppSettings, CrestronSettings

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

ALL_TYPES = [
    "Dimmer",
    "Switch",
    "Shade",
    "Scene",
    "Thermostat",
    "DoorLock",
    "SecuritySystem",
]


class FakeClock:
    """Monotonic clock driven by the test."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingLogger:
    """Stand-in for a structlog logger that keeps every call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def _record(self, level: str, event: str, **kwargs: Any) -> None:
        self.calls.append((level, event, kwargs))

    def debug(self, event: str, **kwargs: Any) -> None:
        self._record("debug", event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._record("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._record("warning", event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._record("error", event, **kwargs)

    def exception(self, event: str, **kwargs: Any) -> None:
        self._record("exception", event, **kwargs)

    def events(self, level: Optional[str] = None) -> List[str]:
        return [
            event for logged_level, event, _ in self.calls
            if level is None or logged_level == level
        ]


class StubSessionManager:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.ensure_calls = 0
        self.invalidated = False

    async def ensure_session(self) -> Session:
        self.ensure_calls += 1
        if self.fail:
            raise AuthError("login rejected")
        return Session(credential="key", issued_at=0.0)

    def invalidate(self) -> None:
        self.invalidated = True


class StubGateway(ICrestronGateway):
    """In-memory controller; ``errors`` maps a collection name to the error it raises."""

    def __init__(
        self,
        *,
        rooms: Optional[List[Room]] = None,
        scenes: Optional[List[Scene]] = None,
        devices: Optional[List[RawDeviceRecord]] = None,
        shades: Optional[List[ShadeExtension]] = None,
        thermostats: Optional[List[ClimateExtension]] = None,
        door_locks: Optional[List[LockExtension]] = None,
        security_devices: Optional[List[SecurityExtension]] = None,
        errors: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.rooms = rooms or []
        self.scenes = scenes or []
        self.devices = devices or []
        self.shades = shades or []
        self.thermostats = thermostats or []
        self.door_locks = door_locks or []
        self.security_devices = security_devices or []
        self.errors = errors or {}
        self.posts: List[Tuple[str, Any]] = []
        self.post_response: Dict[str, Any] = {}

    def _read(self, name: str, items: List[Any]) -> List[Any]:
        if name in self.errors:
            raise self.errors[name]
        return list(items)

    def _read_one(self, name: str, items: List[Any], record_id: int) -> Any:
        for item in self._read(name, items):
            if item.id == record_id:
                return item
        return None

    async def get_rooms(self) -> List[Room]:
        return self._read("rooms", self.rooms)

    async def get_scenes(self) -> List[Scene]:
        return self._read("scenes", self.scenes)

    async def get_devices(self) -> List[RawDeviceRecord]:
        return self._read("devices", self.devices)

    async def get_shades(self) -> List[ShadeExtension]:
        return self._read("shades", self.shades)

    async def get_thermostats(self) -> List[ClimateExtension]:
        return self._read("thermostats", self.thermostats)

    async def get_door_locks(self) -> List[LockExtension]:
        return self._read("doorlocks", self.door_locks)

    async def get_security_devices(self) -> List[SecurityExtension]:
        return self._read("securitydevices", self.security_devices)

    async def get_scene(self, scene_id: int) -> Optional[Scene]:
        return self._read_one("scenes", self.scenes, scene_id)

    async def get_device(self, device_id: int) -> Optional[RawDeviceRecord]:
        return self._read_one("devices", self.devices, device_id)

    async def get_shade(self, shade_id: int) -> Optional[ShadeExtension]:
        return self._read_one("shades", self.shades, shade_id)

    async def get_thermostat(self, thermostat_id: int) -> Optional[ClimateExtension]:
        return self._read_one("thermostats", self.thermostats, thermostat_id)

    async def get_door_lock(self, lock_id: int) -> Optional[LockExtension]:
        return self._read_one("doorlocks", self.door_locks, lock_id)

    async def get_security_device(self, device_id: int) -> Optional[SecurityExtension]:
        return self._read_one("securitydevices", self.security_devices, device_id)

    async def post(self, path: str, payload: Any = None) -> Dict[str, Any]:
        if "post" in self.errors:
            raise self.errors["post"]
        self.posts.append((path, payload))
        return dict(self.post_response)


def build_synchronizer(
    gateway: StubGateway,
    session_manager: Optional[StubSessionManager] = None,
    enabled_types: Optional[List[str]] = None,
    refresh_interval: float = 30.0,
) -> StateSynchronizer:
    """A synchronizer wired to real use cases over a stub gateway."""
    session_manager = session_manager or StubSessionManager()
    fetcher = CollectionFetcher(crestron_gateway=gateway)
    return StateSynchronizer(
        discover_devices_use_case=DiscoverDevicesUseCase(
            session_manager=session_manager,
            collection_fetcher=fetcher,
            enabled_types=enabled_types or ALL_TYPES,
        ),
        apply_command_use_case=ApplyCommandUseCase(crestron_gateway=gateway),
        get_live_device_use_case=GetLiveDeviceUseCase(collection_fetcher=fetcher),
        session_manager=session_manager,
        refresh_interval=refresh_interval,
    )


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture()
def sample_gateway() -> StubGateway:
    """A small house: a dimmer, a shade, a thermostat, a panel, a scene and a lock."""
    return StubGateway(
        rooms=[Room(id=1, name="Kitchen"), Room(id=2, name="Hall")],
        scenes=[
            Scene(id=200, name="Evening", scene_type="Lighting", room_id=1, status=True)
        ],
        devices=[
            RawDeviceRecord(
                id=10,
                name="Pendants",
                room_id=1,
                declared_type="Dimmer",
                level=32768,
                status=True,
            ),
            RawDeviceRecord(
                id=11, name="Blind", room_id=1, declared_type="Shade", level=0
            ),
            RawDeviceRecord(
                id=12, name="Climate", room_id=2, declared_type="thermostat"
            ),
            RawDeviceRecord(
                id=13,
                name="Panel",
                room_id=2,
                declared_type="security Device",
            ),
        ],
        shades=[ShadeExtension(id=11, position=40000)],
        thermostats=[
            ClimateExtension(
                id=12,
                current_temperature=715,
                current_mode="Cool",
                current_fan_mode="Auto",
                set_points=(
                    SetPoint(kind="Cool", temperature=700),
                    SetPoint(kind="Heat", temperature=680),
                ),
                temperature_units="DeciFahrenheit",
                connection_status="online",
            )
        ],
        door_locks=[
            LockExtension(
                id=300,
                status="locked",
                lock_kind="DoorLock",
                connection_status="online",
                name="Front Door",
                room_id=2,
            )
        ],
        security_devices=[
            SecurityExtension(
                id=13,
                current_state="ArmStay",
                available_states=frozenset({"Disarmed", "ArmStay", "ArmAway"}),
                connection_status="online",
                room_id=2,
            )
        ],
    )


@pytest.fixture()
def app_settings() -> AppSettings:
    return AppSettings(
        crestron=CrestronSettings(host="controller.local", api_token="long-lived-token")
    )
