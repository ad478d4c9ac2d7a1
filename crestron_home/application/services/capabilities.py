"""
Capability adapters - Application Layer

Bind canonical device fields to a ``get``/``set`` property model, one
adapter per device kind. A consumer (REST API, HomeKit bridge, CLI)
works with field names and canonical values only; the wire encodings
stay behind the State Synchronizer.

Writes are optimistic: the local value changes first, the command is
applied, and the previous values are restored when the command fails.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional, Tuple

from crestron_home.application.dtos.command_dto import as_finite_float
from crestron_home.application.services.state_synchronizer import StateSynchronizer
from crestron_home.domain.entities.commands import (
    CommandIntent,
    RecallScene,
    SetFanMode,
    SetLightLevel,
    SetLockState,
    SetMode,
    SetSecurityState,
    SetShadePosition,
    SetTemperature,
)
from crestron_home.domain.entities.device import (
    SCENE_TYPE,
    SHADE_TYPE,
    CanonicalDevice,
)
from crestron_home.domain.entities.errors import CommandError
from crestron_home.domain.entities.states import (
    FanMode,
    LockState,
    SecurityState,
    ThermostatMode,
)
from crestron_home.domain.services.device_aggregator import (
    is_climate_type,
    is_lock_type,
    is_security_type,
)
from crestron_home.domain.services.value_translation import (
    MAX_LEVEL,
    celsius_to_deci_fahrenheit,
    commandable_security_states,
    current_heating_cooling_state,
    deci_fahrenheit_to_celsius,
    fan_mode_to_canonical,
    is_alarm_state,
    is_fault,
    lock_status_to_canonical,
    resolve_target_deci_fahrenheit,
    security_state_to_canonical,
    security_state_to_wire,
    set_point_kind_for_mode,
    thermostat_mode_to_canonical,
)
from crestron_home.shared import get_logger

logger = get_logger(__name__)


class BaseCapability:
    """Shared get/set plumbing; subclasses map fields to device data and intents."""

    fields: Tuple[str, ...] = ()
    writable_fields: FrozenSet[str] = frozenset()

    def __init__(self, device: CanonicalDevice, synchronizer: StateSynchronizer):
        self.device_id = device.id
        self.device_type = device.resolved_type
        self.display_name = device.display_name
        self.synchronizer = synchronizer
        self._values: Dict[str, Any] = {}
        self.update_state(device)

    def get(self, field: str) -> Any:
        self._check_field(field)
        return self._values[field]

    def snapshot(self) -> Dict[str, Any]:
        """Current value of every field."""
        return dict(self._values)

    async def set(self, field: str, value: Any) -> None:
        """
        Write a field.

        Raises:
            CommandError: If the field is read-only, the value is invalid or
                the command failed (the local value is reverted)
        """
        self._check_field(field)
        if field not in self.writable_fields:
            raise CommandError(
                f"Field {field} of {self.device_type} is read-only",
                details={"device_id": self.device_id, "field": field},
            )

        try:
            intent = self._intent_for(field, value)
        except (TypeError, ValueError) as e:
            raise CommandError(
                f"Invalid value {value!r} for {field}",
                details={"device_id": self.device_id, "field": field, "error": str(e)},
            ) from e

        previous = dict(self._values)
        self._apply_local(field, value)
        if intent is None:
            return

        result = await self.synchronizer.apply(intent)
        if not result.ok:
            self._values = previous
            logger.warning(
                "capability.write.reverted",
                device_id=self.device_id,
                device_type=self.device_type,
                field=field,
                error=result.error,
            )
            raise CommandError(
                result.error or f"Writing {field} failed",
                details={"device_id": self.device_id, "field": field},
            )

    def update_state(self, device: CanonicalDevice) -> None:
        self.display_name = device.display_name
        self._values = self._read(device)

    def _check_field(self, field: str) -> None:
        if field not in self.fields:
            raise KeyError(f"{type(self).__name__} has no field {field!r}")

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        raise NotImplementedError

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        raise NotImplementedError

    def _apply_local(self, field: str, value: Any) -> None:
        self._values[field] = value


class ThermostatCapability(BaseCapability):
    """Temperatures in Celsius; modes as ThermostatMode/FanMode values."""

    fields = (
        "current_temperature",
        "target_temperature",
        "current_heating_cooling_state",
        "target_heating_cooling_state",
        "fan_mode",
        "temperature_display_units",
        "fault",
    )
    writable_fields = frozenset(
        {
            "target_temperature",
            "target_heating_cooling_state",
            "fan_mode",
            "temperature_display_units",
        }
    )

    def __init__(self, device: CanonicalDevice, synchronizer: StateSynchronizer):
        self._target_deci_fahrenheit: Optional[int] = None
        super().__init__(device, synchronizer)

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        climate = device.climate
        previous = self._values

        current_temperature = previous.get("current_temperature")
        if climate is not None and climate.current_temperature is not None:
            current_temperature = deci_fahrenheit_to_celsius(
                climate.current_temperature
            )

        self._target_deci_fahrenheit = resolve_target_deci_fahrenheit(
            climate.set_points if climate is not None else None,
            previous=self._target_deci_fahrenheit,
        )

        mode = previous.get("target_heating_cooling_state", ThermostatMode.OFF)
        if climate is not None and climate.current_mode:
            mode = thermostat_mode_to_canonical(climate.current_mode)

        fan_mode = previous.get("fan_mode", FanMode.AUTO)
        if climate is not None and climate.current_fan_mode:
            fan_mode = fan_mode_to_canonical(climate.current_fan_mode)

        return {
            "current_temperature": current_temperature,
            "target_temperature": deci_fahrenheit_to_celsius(
                self._target_deci_fahrenheit
            ),
            "current_heating_cooling_state": current_heating_cooling_state(mode),
            "target_heating_cooling_state": mode,
            "fan_mode": fan_mode,
            # The controller has no display unit setting; Celsius is the canonical scale
            "temperature_display_units": previous.get(
                "temperature_display_units", "Celsius"
            ),
            "fault": is_fault(climate.connection_status) if climate else False,
        }

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        if field == "target_temperature":
            mode = self._values["target_heating_cooling_state"]
            return SetTemperature(
                device_id=self.device_id,
                celsius=as_finite_float(value),
                kind=set_point_kind_for_mode(mode),
            )
        if field == "target_heating_cooling_state":
            return SetMode(device_id=self.device_id, mode=ThermostatMode(value))
        if field == "fan_mode":
            return SetFanMode(device_id=self.device_id, fan_mode=FanMode(value))
        return None

    def _apply_local(self, field: str, value: Any) -> None:
        if field == "target_temperature":
            celsius = as_finite_float(value)
            self._values[field] = celsius
            self._target_deci_fahrenheit = celsius_to_deci_fahrenheit(celsius)
        elif field == "target_heating_cooling_state":
            mode = ThermostatMode(value)
            self._values[field] = mode
            self._values["current_heating_cooling_state"] = (
                current_heating_cooling_state(mode)
            )
        elif field == "fan_mode":
            self._values[field] = FanMode(value)
        else:
            self._values[field] = value


class DoorLockCapability(BaseCapability):
    fields = ("current_state", "target_state", "fault")
    writable_fields = frozenset({"target_state"})

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        lock = device.lock
        current = lock_status_to_canonical(lock.status if lock is not None else None)
        target = LockState.SECURED if current == LockState.SECURED else LockState.UNSECURED
        return {
            "current_state": current,
            "target_state": target,
            "fault": is_fault(lock.connection_status) if lock is not None else False,
        }

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        target = LockState(value)
        if target not in (LockState.SECURED, LockState.UNSECURED):
            raise ValueError(f"Lock state {target.value} cannot be commanded")
        return SetLockState(device_id=self.device_id, target=target)

    def _apply_local(self, field: str, value: Any) -> None:
        target = LockState(value)
        self._values["target_state"] = target
        self._values["current_state"] = target


class SecuritySystemCapability(BaseCapability):
    fields = (
        "current_state",
        "target_state",
        "available_targets",
        "alarm_triggered",
        "fault",
    )
    writable_fields = frozenset({"target_state"})

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        security = device.security
        wire_state = security.current_state if security is not None else None
        current = security_state_to_canonical(wire_state)

        targets = commandable_security_states()
        if security is not None and security.available_states is not None:
            available = {state.upper() for state in security.available_states}
            targets = tuple(
                state
                for state in targets
                if security_state_to_wire(state).upper() in available
            )

        # AlarmTriggered is never a target; keep the last commandable one
        target = current
        if current not in commandable_security_states():
            target = self._values.get("target_state", SecurityState.DISARMED)

        return {
            "current_state": current,
            "target_state": target,
            "available_targets": targets,
            "alarm_triggered": is_alarm_state(wire_state),
            "fault": is_fault(security.connection_status) if security else False,
        }

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        target = SecurityState(value)
        if target not in commandable_security_states():
            raise ValueError(f"Security state {target.value} cannot be commanded")
        return SetSecurityState(device_id=self.device_id, target=target)

    def _apply_local(self, field: str, value: Any) -> None:
        self._values["target_state"] = SecurityState(value)


class LightCapability(BaseCapability):
    """Dimmers and switches; ``level`` uses the native 0-65535 scale."""

    fields = ("on", "level")
    writable_fields = frozenset({"on", "level"})

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        return {"on": device.level > 0 or device.status, "level": device.level}

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        return SetLightLevel(device_id=self.device_id, level=self._level_for(field, value))

    def _apply_local(self, field: str, value: Any) -> None:
        level = self._level_for(field, value)
        self._values["level"] = level
        self._values["on"] = level > 0

    def _level_for(self, field: str, value: Any) -> int:
        if field == "on":
            return MAX_LEVEL if value else 0
        return int(value)


class ShadeCapability(BaseCapability):
    fields = ("position",)
    writable_fields = frozenset({"position"})

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        return {"position": device.position}

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        return SetShadePosition(device_id=self.device_id, position=int(value))

    def _apply_local(self, field: str, value: Any) -> None:
        self._values["position"] = int(value)


class SceneCapability(BaseCapability):
    """Setting ``active`` to true recalls the scene; false only resets the flag."""

    fields = ("active",)
    writable_fields = frozenset({"active"})

    def _read(self, device: CanonicalDevice) -> Dict[str, Any]:
        return {"active": device.status}

    def _intent_for(self, field: str, value: Any) -> Optional[CommandIntent]:
        if not value:
            return None
        return RecallScene(device_id=self.device_id)

    def _apply_local(self, field: str, value: Any) -> None:
        self._values["active"] = bool(value)


def capability_for(
    device: CanonicalDevice, synchronizer: StateSynchronizer
) -> BaseCapability:
    """Pick the adapter matching the resolved type of a device."""
    resolved_type = device.resolved_type
    if is_climate_type(resolved_type):
        return ThermostatCapability(device, synchronizer)
    if is_lock_type(resolved_type):
        return DoorLockCapability(device, synchronizer)
    if is_security_type(resolved_type):
        return SecuritySystemCapability(device, synchronizer)
    if resolved_type == SHADE_TYPE:
        return ShadeCapability(device, synchronizer)
    if resolved_type == SCENE_TYPE:
        return SceneCapability(device, synchronizer)
    return LightCapability(device, synchronizer)
