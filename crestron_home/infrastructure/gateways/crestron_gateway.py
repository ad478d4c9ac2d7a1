"""Crestron Home REST API gateway implementation."""

from __future__ import annotations

from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple, TypeVar

import httpx

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
from crestron_home.domain.entities.errors import TransportError
from crestron_home.domain.gateways.crestron_gateway import ICrestronGateway
from crestron_home.domain.ports.session_manager import ISessionManager
from crestron_home.shared import get_logger
from crestron_home.shared.consts import API_BASE_PATH, AUTH_KEY_HEADER

logger = get_logger(__name__)

R = TypeVar("R")


def build_base_url(host: str) -> str:
    """Return the REST API base URL of a controller."""
    return f"https://{host.strip().rstrip('/')}{API_BASE_PATH}"


class CrestronGateway(ICrestronGateway):
    """HTTP client for the Crestron Home REST API."""

    def __init__(
        self,
        base_url: str,
        session_manager: ISessionManager,
        *,
        timeout: float = 10.0,
        verify_ssl: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            base_url: REST API base URL (see ``build_base_url``)
            session_manager: Provides the session key for every request
            timeout: Timeout applied to every request, in seconds
            verify_ssl: Verify the controller certificate
            transport: Optional httpx transport, used by tests
        """
        self._base_url = base_url.rstrip("/")
        self._session_manager = session_manager
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport

    async def get_rooms(self) -> List[Room]:
        return await self._fetch("/rooms", "rooms", _parse_room)

    async def get_scenes(self) -> List[Scene]:
        return await self._fetch("/scenes", "scenes", _parse_scene)

    async def get_devices(self) -> List[RawDeviceRecord]:
        return await self._fetch("/devices", "devices", _parse_device)

    async def get_shades(self) -> List[ShadeExtension]:
        return await self._fetch("/shades", "shades", _parse_shade)

    async def get_thermostats(self) -> List[ClimateExtension]:
        return await self._fetch("/thermostats", "thermostats", _parse_thermostat)

    async def get_door_locks(self) -> List[LockExtension]:
        return await self._fetch("/doorlocks", "doorLocks", _parse_door_lock)

    async def get_security_devices(self) -> List[SecurityExtension]:
        return await self._fetch(
            "/securitydevices", "securityDevices", _parse_security_device
        )

    async def get_scene(self, scene_id: int) -> Optional[Scene]:
        return await self._fetch_one(f"/scenes/{scene_id}", "scenes", _parse_scene)

    async def get_device(self, device_id: int) -> Optional[RawDeviceRecord]:
        return await self._fetch_one(f"/devices/{device_id}", "devices", _parse_device)

    async def get_shade(self, shade_id: int) -> Optional[ShadeExtension]:
        return await self._fetch_one(f"/Shades/{shade_id}", "shades", _parse_shade)

    async def get_thermostat(self, thermostat_id: int) -> Optional[ClimateExtension]:
        return await self._fetch_one(
            f"/thermostats/{thermostat_id}", "thermostats", _parse_thermostat
        )

    async def get_door_lock(self, lock_id: int) -> Optional[LockExtension]:
        return await self._fetch_one(
            f"/doorlocks/{lock_id}", "doorLocks", _parse_door_lock
        )

    async def get_security_device(self, device_id: int) -> Optional[SecurityExtension]:
        return await self._fetch_one(
            f"/securitydevices/{device_id}", "securityDevices", _parse_security_device
        )

    async def post(self, path: str, payload: Any = None) -> Dict[str, Any]:
        logger.debug("crestron.write.request", path=path)
        return await self._request("POST", path, payload)

    async def _fetch(
        self, path: str, key: str, parser: Callable[[Dict[str, Any]], R]
    ) -> List[R]:
        body = await self._request("GET", path)
        items = body.get(key) or []
        records = [parser(item) for item in items if isinstance(item, dict)]
        logger.debug("crestron.read.response", path=path, count=len(records))
        return records

    async def _fetch_one(
        self, path: str, key: str, parser: Callable[[Dict[str, Any]], R]
    ) -> Optional[R]:
        try:
            records = await self._fetch(path, key, parser)
        except TransportError as exc:
            if exc.is_not_found:
                return None
            raise
        return records[0] if records else None

    async def _request(
        self, method: str, path: str, payload: Any = None
    ) -> Dict[str, Any]:
        session = await self._session_manager.ensure_session()
        headers = {
            "Accept": "application/json",
            AUTH_KEY_HEADER: session.credential,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                verify=self._verify_ssl,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, headers=headers, json=payload
                )
                response.raise_for_status()
                body = response.json() if response.content else {}

        except httpx.HTTPStatusError as e:
            logger.warning(
                "crestron.request.http_error",
                method=method,
                path=path,
                status_code=e.response.status_code,
            )
            raise TransportError(
                f"Controller returned HTTP {e.response.status_code} for "
                f"{method} {path}",
                status_code=e.response.status_code,
                details={"path": path, "response_text": e.response.text},
            ) from e

        except httpx.RequestError as e:
            logger.warning(
                "crestron.request.request_error",
                method=method,
                path=path,
                error=str(e),
            )
            raise TransportError(
                f"Failed to communicate with controller: {e}",
                details={"path": path},
            ) from e

        except ValueError as e:
            raise TransportError(
                f"Controller sent an invalid JSON body for {method} {path}",
                details={"path": path, "error": str(e)},
            ) from e

        if isinstance(body, dict):
            return body
        return {"data": body}


def _opt_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _opt_str_set(value: Any) -> Optional[FrozenSet[str]]:
    if not isinstance(value, list):
        return None
    return frozenset(str(item) for item in value)


def _parse_set_points(value: Any) -> Optional[Tuple[SetPoint, ...]]:
    if not isinstance(value, list):
        return None
    set_points = []
    for item in value:
        if not isinstance(item, dict):
            continue
        temperature = _opt_int(item.get("temperature"))
        if temperature is None:
            continue
        set_points.append(
            SetPoint(kind=str(item.get("type", "")), temperature=temperature)
        )
    return tuple(set_points)


def _parse_room(data: Dict[str, Any]) -> Room:
    return Room(id=int(data["id"]), name=str(data.get("name", "")))


def _parse_scene(data: Dict[str, Any]) -> Scene:
    return Scene(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        scene_type=str(data.get("type") or ""),
        room_id=_opt_int(data.get("roomId")),
        status=bool(data.get("status", False)),
    )


def _parse_device(data: Dict[str, Any]) -> RawDeviceRecord:
    status = data.get("status")
    return RawDeviceRecord(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        room_id=_opt_int(data.get("roomId")),
        declared_type=str(data.get("type") or ""),
        declared_sub_type=str(data.get("subType") or ""),
        level=_opt_int(data.get("level")),
        status=None if status is None else bool(status),
    )


def _parse_shade(data: Dict[str, Any]) -> ShadeExtension:
    return ShadeExtension(id=int(data["id"]), position=_opt_int(data.get("position")))


def _parse_thermostat(data: Dict[str, Any]) -> ClimateExtension:
    return ClimateExtension(
        id=int(data["id"]),
        current_temperature=_opt_int(data.get("currentTemperature")),
        current_mode=_opt_str(data.get("currentMode")),
        current_fan_mode=_opt_str(data.get("currentFanMode")),
        set_points=_parse_set_points(data.get("currentSetPoint")),
        temperature_units=_opt_str(data.get("temperatureUnits")),
        scheduler_state=_opt_str(data.get("schedulerState")),
        available_fan_modes=_opt_str_set(data.get("availableFanModes")),
        available_system_modes=_opt_str_set(data.get("availableSystemModes")),
        connection_status=_opt_str(data.get("connectionStatus")),
    )


def _parse_door_lock(data: Dict[str, Any]) -> LockExtension:
    return LockExtension(
        id=int(data["id"]),
        status=_opt_str(data.get("status")),
        lock_kind=_opt_str(data.get("type")),
        connection_status=_opt_str(data.get("connectionStatus")),
        name=str(data.get("name", "")),
        room_id=_opt_int(data.get("roomId")),
    )


def _parse_security_device(data: Dict[str, Any]) -> SecurityExtension:
    return SecurityExtension(
        id=int(data["id"]),
        current_state=_opt_str(data.get("currentState")),
        available_states=_opt_str_set(data.get("availableStates")),
        connection_status=_opt_str(data.get("connectionStatus")),
        room_id=_opt_int(data.get("roomId")),
    )
