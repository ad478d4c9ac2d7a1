"""
Command DTOs - Application Layer

Request and response bodies of the command endpoint. Values are given in
canonical units (Celsius, canonical enum values, native 0-65535 levels).
"""

import math
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from crestron_home.domain.entities.commands import (
    CommandIntent,
    CommandResult,
    RecallScene,
    SetFanMode,
    SetLightLevel,
    SetLockState,
    SetMode,
    SetSecurityState,
    SetShadePosition,
    SetTemperature,
)
from crestron_home.domain.entities.states import (
    FanMode,
    LockState,
    SecurityState,
    SetPointKind,
    ThermostatMode,
)


class CommandName(str, Enum):
    SET_TEMPERATURE = "set_temperature"
    SET_MODE = "set_mode"
    SET_FAN_MODE = "set_fan_mode"
    SET_LOCK_STATE = "set_lock_state"
    SET_SECURITY_STATE = "set_security_state"
    SET_SHADE_POSITION = "set_shade_position"
    SET_LIGHT_LEVEL = "set_light_level"
    RECALL_SCENE = "recall_scene"


class CommandRequestDTO(BaseModel):
    """DTO for a command sent to one device."""

    command: CommandName = Field(description="Command to send")
    value: Optional[Union[bool, int, float, str]] = Field(
        default=None, description="Target value in canonical units"
    )
    set_point_kind: Optional[SetPointKind] = Field(
        default=None, description="Setpoint to change for set_temperature"
    )
    time: int = Field(default=0, ge=0, description="Ramp time for set_light_level")

    model_config = {
        "json_schema_extra": {
            "example": {"command": "set_temperature", "value": 21.5}
        }
    }

    def to_intent(self, device_id: int) -> CommandIntent:
        """
        Build the command intent.

        Raises:
            ValueError: If the value is missing or not valid for the command
        """
        if self.command == CommandName.RECALL_SCENE:
            return RecallScene(device_id=device_id)

        if self.value is None:
            raise ValueError(f"Command {self.command.value} requires a value")
        value = self.value

        if self.command == CommandName.SET_TEMPERATURE:
            return SetTemperature(
                device_id=device_id,
                celsius=as_finite_float(value),
                kind=self.set_point_kind or SetPointKind.COOL,
            )
        if self.command == CommandName.SET_MODE:
            return SetMode(device_id=device_id, mode=ThermostatMode(value))
        if self.command == CommandName.SET_FAN_MODE:
            return SetFanMode(device_id=device_id, fan_mode=FanMode(value))
        if self.command == CommandName.SET_LOCK_STATE:
            return SetLockState(device_id=device_id, target=LockState(value))
        if self.command == CommandName.SET_SECURITY_STATE:
            return SetSecurityState(device_id=device_id, target=SecurityState(value))
        if self.command == CommandName.SET_SHADE_POSITION:
            return SetShadePosition(device_id=device_id, position=_as_int(value))
        return SetLightLevel(device_id=device_id, level=_as_int(value), time=self.time)


class CommandResultDTO(BaseModel):
    """DTO for the outcome of a command."""

    device_id: int
    command: str = Field(description="Intent type that was dispatched")
    ok: bool
    response: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, result: CommandResult) -> "CommandResultDTO":
        return cls(
            device_id=result.intent.device_id,
            command=type(result.intent).__name__,
            ok=result.ok,
            response=result.response,
            error=result.error,
        )


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Expected a number, got a boolean")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Expected a whole number, got {value}")
    return int(value)


def as_finite_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("Expected a number, got a boolean")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Expected a finite number, got {value}")
    return number
