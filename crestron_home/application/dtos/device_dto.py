"""
Device DTOs - Application Layer

This module defines Data Transfer Objects (DTOs) for canonical devices.
Temperatures are exposed in Celsius and states as canonical enum values;
the controller's wire encodings never leave the application layer.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from crestron_home.domain.entities.device import (
    CanonicalDevice,
    ClimateExtension,
    LockExtension,
    SecurityExtension,
)
from crestron_home.domain.entities.states import (
    FanMode,
    LockState,
    SecurityState,
    ThermostatMode,
)
from crestron_home.domain.services.value_translation import (
    current_heating_cooling_state,
    deci_fahrenheit_to_celsius,
    fan_mode_to_canonical,
    is_alarm_state,
    is_fault,
    lock_status_to_canonical,
    resolve_target_deci_fahrenheit,
    security_state_to_canonical,
    thermostat_mode_to_canonical,
)


class SetPointDTO(BaseModel):
    kind: str = Field(description="Setpoint kind (Cool, Heat, Auto)")
    temperature_celsius: float = Field(description="Setpoint in degrees Celsius")


class ClimateDTO(BaseModel):
    """Thermostat state; absent controller fields stay null."""

    current_temperature_celsius: Optional[float] = Field(
        default=None, description="Measured temperature in degrees Celsius"
    )
    target_temperature_celsius: float = Field(
        description="Single target temperature in degrees Celsius"
    )
    current_state: ThermostatMode = Field(description="Current heating/cooling state")
    target_mode: ThermostatMode = Field(description="Target heating/cooling mode")
    fan_mode: FanMode = Field(description="Fan mode")
    set_points: Optional[List[SetPointDTO]] = Field(
        default=None, description="Setpoints reported by the controller"
    )
    scheduler_state: Optional[str] = Field(default=None)
    available_fan_modes: Optional[List[str]] = Field(default=None)
    available_system_modes: Optional[List[str]] = Field(default=None)
    connection_status: Optional[str] = Field(default=None)
    fault: bool = Field(default=False, description="Connection is not online")

    @classmethod
    def from_entity(cls, climate: ClimateExtension) -> "ClimateDTO":
        mode = thermostat_mode_to_canonical(climate.current_mode)
        current = climate.current_temperature
        return cls(
            current_temperature_celsius=(
                deci_fahrenheit_to_celsius(current) if current is not None else None
            ),
            target_temperature_celsius=deci_fahrenheit_to_celsius(
                resolve_target_deci_fahrenheit(climate.set_points)
            ),
            current_state=current_heating_cooling_state(mode),
            target_mode=mode,
            fan_mode=fan_mode_to_canonical(climate.current_fan_mode),
            set_points=(
                [
                    SetPointDTO(
                        kind=set_point.kind,
                        temperature_celsius=deci_fahrenheit_to_celsius(
                            set_point.temperature
                        ),
                    )
                    for set_point in climate.set_points
                ]
                if climate.set_points is not None
                else None
            ),
            scheduler_state=climate.scheduler_state,
            available_fan_modes=_sorted_or_none(climate.available_fan_modes),
            available_system_modes=_sorted_or_none(climate.available_system_modes),
            connection_status=climate.connection_status,
            fault=is_fault(climate.connection_status),
        )


class LockDTO(BaseModel):
    state: LockState = Field(description="Canonical lock state")
    lock_kind: Optional[str] = Field(default=None)
    connection_status: Optional[str] = Field(default=None)
    fault: bool = Field(default=False)

    @classmethod
    def from_entity(cls, lock: LockExtension) -> "LockDTO":
        return cls(
            state=lock_status_to_canonical(lock.status),
            lock_kind=lock.lock_kind,
            connection_status=lock.connection_status,
            fault=is_fault(lock.connection_status),
        )


class SecurityDTO(BaseModel):
    state: SecurityState = Field(description="Canonical panel state")
    alarm_triggered: bool = Field(default=False)
    available_states: Optional[List[str]] = Field(default=None)
    connection_status: Optional[str] = Field(default=None)
    fault: bool = Field(default=False)

    @classmethod
    def from_entity(cls, security: SecurityExtension) -> "SecurityDTO":
        return cls(
            state=security_state_to_canonical(security.current_state),
            alarm_triggered=is_alarm_state(security.current_state),
            available_states=_sorted_or_none(security.available_states),
            connection_status=security.connection_status,
            fault=is_fault(security.connection_status),
        )


class DeviceDTO(BaseModel):
    """DTO for a canonical device."""

    id: int = Field(description="Controller device id")
    type: str = Field(description="Resolved type tag")
    sub_type: str = Field(description="Resolved sub-type")
    display_name: str = Field(description="Room name followed by the device name")
    name: str = Field(description="Device name")
    room_id: Optional[int] = Field(default=None)
    room_name: str = Field(default="")
    level: int = Field(default=0, description="Light level, 0-65535")
    status: bool = Field(default=False)
    position: int = Field(default=0, description="Shade position, 0-65535")
    climate: Optional[ClimateDTO] = Field(default=None)
    lock: Optional[LockDTO] = Field(default=None)
    security: Optional[SecurityDTO] = Field(default=None)

    @classmethod
    def from_entity(cls, device: CanonicalDevice) -> "DeviceDTO":
        return cls(
            id=device.id,
            type=device.resolved_type,
            sub_type=device.resolved_sub_type,
            display_name=device.display_name,
            name=device.name,
            room_id=device.room_id,
            room_name=device.room_name,
            level=device.level,
            status=device.status,
            position=device.position,
            climate=ClimateDTO.from_entity(device.climate) if device.climate else None,
            lock=LockDTO.from_entity(device.lock) if device.lock else None,
            security=(
                SecurityDTO.from_entity(device.security) if device.security else None
            ),
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": 1001,
                "type": "Dimmer",
                "sub_type": "Dimmer",
                "display_name": "Kitchen Pendants",
                "name": "Pendants",
                "room_id": 1,
                "room_name": "Kitchen",
                "level": 32768,
                "status": True,
                "position": 0,
                "climate": None,
                "lock": None,
                "security": None,
            }
        }
    }


class DevicesResponseDTO(BaseModel):
    """DTO for the current device snapshot."""

    count: int = Field(description="Total number of devices")
    refreshed_at: Optional[datetime] = Field(
        default=None, description="End of the last successful discovery pass"
    )
    last_error: Optional[str] = Field(
        default=None, description="Error of the last pass, if it failed"
    )
    devices: List[DeviceDTO] = Field(description="Canonical devices")


class CapabilityDTO(BaseModel):
    """Field view of a device, as bound by its capability adapter."""

    device_id: int
    device_type: str
    display_name: str
    field_values: Dict[str, Any] = Field(description="Current value of every field")
    writable_fields: List[str] = Field(default_factory=list)


class FieldWriteDTO(BaseModel):
    value: Any = Field(description="New value in canonical units")


def _sorted_or_none(values) -> Optional[List[str]]:
    if values is None:
        return None
    return sorted(values)
