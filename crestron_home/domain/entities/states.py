"""
Canonical state enumerations.

These are the values the rest of the system works with; the controller's
wire strings are translated into them by
``crestron_home.domain.services.value_translation``.
"""

from enum import Enum


class ThermostatMode(str, Enum):
    """Heating/cooling mode of a thermostat."""

    OFF = "Off"
    HEAT = "Heat"
    COOL = "Cool"
    AUTO = "Auto"


class FanMode(str, Enum):
    """Thermostat fan mode."""

    AUTO = "Auto"
    ON = "On"


class SetPointKind(str, Enum):
    """Kind of a thermostat setpoint."""

    COOL = "Cool"
    HEAT = "Heat"
    AUTO = "Auto"


class LockState(str, Enum):
    """Door lock state as reported by the controller."""

    SECURED = "Secured"
    UNSECURED = "Unsecured"
    JAMMED = "Jammed"
    UNKNOWN = "Unknown"


class SecurityState(str, Enum):
    """Security panel state."""

    STAY_ARMED = "StayArmed"
    AWAY_ARMED = "AwayArmed"
    NIGHT_ARMED = "NightArmed"
    DISARMED = "Disarmed"
    ALARM_TRIGGERED = "AlarmTriggered"
