"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .command_dto import CommandName, CommandRequestDTO, CommandResultDTO
from .device_dto import (
    CapabilityDTO,
    ClimateDTO,
    DeviceDTO,
    DevicesResponseDTO,
    FieldWriteDTO,
    LockDTO,
    SecurityDTO,
    SetPointDTO,
)
from .health_dto import ControllerHealthDTO

__all__ = [
    "CapabilityDTO",
    "ClimateDTO",
    "CommandName",
    "CommandRequestDTO",
    "CommandResultDTO",
    "ControllerHealthDTO",
    "DeviceDTO",
    "DevicesResponseDTO",
    "FieldWriteDTO",
    "LockDTO",
    "SecurityDTO",
    "SetPointDTO",
]
