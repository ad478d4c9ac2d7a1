"""
Value translation between the controller's wire encodings and the
canonical representation.

All functions are pure. Unknown enum values never raise: they are logged
as warnings and mapped to a documented default. Targets that cannot be
commanded raise ``CommandError`` before anything is sent.
"""

import math
from typing import Iterable, Optional, Tuple

from crestron_home.domain.entities.device import SetPoint
from crestron_home.domain.entities.errors import CommandError
from crestron_home.domain.entities.states import (
    FanMode,
    LockState,
    SecurityState,
    SetPointKind,
    ThermostatMode,
)
from crestron_home.shared import get_logger

logger = get_logger(__name__)

# 72.0 F, used only when nothing else is known about a thermostat
DEFAULT_TARGET_DECI_FAHRENHEIT = 720

# Native range of light levels and shade positions
MAX_LEVEL = 65535

_MODES_FROM_WIRE = {
    "OFF": ThermostatMode.OFF,
    "HEAT": ThermostatMode.HEAT,
    "COOL": ThermostatMode.COOL,
    "AUTO": ThermostatMode.AUTO,
}
_MODES_TO_WIRE = {mode: wire for wire, mode in _MODES_FROM_WIRE.items()}

_FAN_MODES_FROM_WIRE = {"AUTO": FanMode.AUTO, "ON": FanMode.ON}
_FAN_MODES_TO_WIRE = {mode: wire for wire, mode in _FAN_MODES_FROM_WIRE.items()}

_LOCK_STATES_FROM_WIRE = {
    "locked": LockState.SECURED,
    "unlocked": LockState.UNSECURED,
    "jammed": LockState.JAMMED,
}

_SECURITY_STATES_FROM_WIRE = {
    "DISARMED": SecurityState.DISARMED,
    "ARMSTAY": SecurityState.STAY_ARMED,
    "ARMAWAY": SecurityState.AWAY_ARMED,
    "ARMINSTANT": SecurityState.NIGHT_ARMED,
    "ALARM": SecurityState.ALARM_TRIGGERED,
    "FIRE": SecurityState.ALARM_TRIGGERED,
    # Delay states are presented as still armed
    "ENTRYDELAY": SecurityState.AWAY_ARMED,
    "EXITDELAY": SecurityState.AWAY_ARMED,
}
_SECURITY_STATES_TO_WIRE = {
    SecurityState.DISARMED: "Disarmed",
    SecurityState.STAY_ARMED: "ArmStay",
    SecurityState.AWAY_ARMED: "ArmAway",
    SecurityState.NIGHT_ARMED: "ArmInstant",
}
_ALARM_WIRE_STATES = frozenset({"ALARM", "FIRE"})


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def deci_fahrenheit_to_celsius(deci_fahrenheit: float) -> float:
    """Convert tenths of a degree Fahrenheit to Celsius rounded to 0.1."""
    celsius = (deci_fahrenheit / 10 - 32) * 5 / 9
    return _round_half_up(celsius * 10) / 10


def celsius_to_deci_fahrenheit(celsius: float) -> int:
    """
    Convert Celsius to the nearest whole tenth of a degree Fahrenheit.

    Raises:
        CommandError: If the temperature is NaN or infinite
    """
    if not math.isfinite(celsius):
        raise CommandError(
            f"Temperature must be a finite number, got {celsius}",
            details={"celsius": str(celsius)},
        )
    return _round_half_up(((celsius * 9 / 5) + 32) * 10)


def resolve_target_deci_fahrenheit(
    set_points: Optional[Iterable[SetPoint]],
    previous: Optional[int] = None,
) -> int:
    """
    Pick the single target temperature of a thermostat, in deci-Fahrenheit.

    The cooling setpoint wins over the heating one. Without setpoints the
    previously known target is kept; the 72 F default applies only when
    there is no context at all.
    """
    cool: Optional[int] = None
    heat: Optional[int] = None
    for set_point in set_points or ():
        kind = set_point.kind.lower()
        if kind == "cool" and cool is None:
            cool = set_point.temperature
        elif kind == "heat" and heat is None:
            heat = set_point.temperature
    for candidate in (cool, heat, previous):
        if candidate is not None:
            return candidate
    return DEFAULT_TARGET_DECI_FAHRENHEIT


def thermostat_mode_to_canonical(wire_mode: Optional[str]) -> ThermostatMode:
    """Map a wire mode (case-insensitive) to a canonical mode; unknown -> Off."""
    if not wire_mode:
        return ThermostatMode.OFF
    mode = _MODES_FROM_WIRE.get(wire_mode.upper())
    if mode is None:
        logger.warning("translation.unknown_mode", wire_value=wire_mode, default="Off")
        return ThermostatMode.OFF
    return mode


def thermostat_mode_to_wire(mode: ThermostatMode) -> str:
    return _MODES_TO_WIRE[ThermostatMode(mode)]


def current_heating_cooling_state(mode: ThermostatMode) -> ThermostatMode:
    """Auto exists only as a target; the current state reports it as Off."""
    if mode == ThermostatMode.AUTO:
        return ThermostatMode.OFF
    return mode


def set_point_kind_for_mode(mode: ThermostatMode) -> SetPointKind:
    """Choose which setpoint a target-temperature write updates."""
    if mode == ThermostatMode.HEAT:
        return SetPointKind.HEAT
    if mode == ThermostatMode.AUTO:
        return SetPointKind.AUTO
    return SetPointKind.COOL


def fan_mode_to_canonical(wire_mode: Optional[str]) -> FanMode:
    if not wire_mode:
        return FanMode.AUTO
    fan_mode = _FAN_MODES_FROM_WIRE.get(wire_mode.upper())
    if fan_mode is None:
        logger.warning(
            "translation.unknown_fan_mode", wire_value=wire_mode, default="Auto"
        )
        return FanMode.AUTO
    return fan_mode


def fan_mode_to_wire(fan_mode: FanMode) -> str:
    return _FAN_MODES_TO_WIRE[FanMode(fan_mode)]


def lock_status_to_canonical(wire_status: Optional[str]) -> LockState:
    """Map ``locked|unlocked|jammed``; anything else is Unknown."""
    if not wire_status:
        return LockState.UNKNOWN
    return _LOCK_STATES_FROM_WIRE.get(wire_status.lower(), LockState.UNKNOWN)


def lock_action_for(target: LockState) -> str:
    """Return the imperative lock action (``lock``/``unlock``) for a target."""
    if target == LockState.SECURED:
        return "lock"
    if target == LockState.UNSECURED:
        return "unlock"
    raise CommandError(
        f"Lock state {LockState(target).value} cannot be commanded",
        details={"target": LockState(target).value},
    )


def security_state_to_canonical(wire_state: Optional[str]) -> SecurityState:
    """Map a panel state (case-insensitive); unknown values become Disarmed."""
    if not wire_state:
        return SecurityState.DISARMED
    state = _SECURITY_STATES_FROM_WIRE.get(wire_state.upper())
    if state is None:
        logger.warning(
            "translation.unknown_security_state",
            wire_value=wire_state,
            default="Disarmed",
        )
        return SecurityState.DISARMED
    return state


def security_state_to_wire(target: SecurityState) -> str:
    """Return the wire command for a commandable security target."""
    wire_state = _SECURITY_STATES_TO_WIRE.get(SecurityState(target))
    if wire_state is None:
        raise CommandError(
            f"Security state {SecurityState(target).value} cannot be commanded",
            details={"target": SecurityState(target).value},
        )
    return wire_state


def commandable_security_states() -> Tuple[SecurityState, ...]:
    """Targets that may be offered to a user."""
    return tuple(_SECURITY_STATES_TO_WIRE)


def is_alarm_state(wire_state: Optional[str]) -> bool:
    return bool(wire_state) and wire_state.upper() in _ALARM_WIRE_STATES


def is_fault(connection_status: Optional[str]) -> bool:
    """A device reporting a connection status other than ``online`` is faulted."""
    if connection_status is None:
        return False
    return connection_status.lower() != "online"
