"""
Domain Entities - Commands

Typed write requests. Values are in canonical units; translation to the
controller's encodings happens when the command is dispatched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from crestron_home.domain.entities.states import (
    FanMode,
    LockState,
    SecurityState,
    SetPointKind,
    ThermostatMode,
)


@dataclass(frozen=True, slots=True)
class CommandIntent:
    """Base class for all commands; carries the target device id."""

    device_id: int


@dataclass(frozen=True, slots=True)
class SetTemperature(CommandIntent):
    """Set a thermostat setpoint, in degrees Celsius."""

    celsius: float
    kind: SetPointKind = SetPointKind.COOL


@dataclass(frozen=True, slots=True)
class SetMode(CommandIntent):
    mode: ThermostatMode


@dataclass(frozen=True, slots=True)
class SetFanMode(CommandIntent):
    fan_mode: FanMode


@dataclass(frozen=True, slots=True)
class SetLockState(CommandIntent):
    """Lock or unlock a door. Only SECURED and UNSECURED are valid targets."""

    target: LockState


@dataclass(frozen=True, slots=True)
class SetSecurityState(CommandIntent):
    """Arm or disarm a security panel."""

    target: SecurityState


@dataclass(frozen=True, slots=True)
class SetShadePosition(CommandIntent):
    position: int


@dataclass(frozen=True, slots=True)
class SetLightLevel(CommandIntent):
    level: int
    time: int = 0


@dataclass(frozen=True, slots=True)
class RecallScene(CommandIntent):
    pass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a dispatched command."""

    intent: CommandIntent
    ok: bool
    response: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
