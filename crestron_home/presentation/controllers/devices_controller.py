"""
Devices Router - Presentation Layer

This module defines the FastAPI router for device endpoints: the current
snapshot, live reads, manual refreshes, commands and capability fields.
"""

from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from crestron_home.application.dtos.command_dto import (
    CommandRequestDTO,
    CommandResultDTO,
)
from crestron_home.application.dtos.device_dto import (
    CapabilityDTO,
    DeviceDTO,
    DevicesResponseDTO,
    FieldWriteDTO,
)
from crestron_home.application.services.capabilities import (
    BaseCapability,
    capability_for,
)
from crestron_home.application.services.state_synchronizer import StateSynchronizer
from crestron_home.domain.entities.device import CanonicalDevice
from crestron_home.domain.entities.errors import CommandError, DomainError
from crestron_home.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/devices", tags=["Devices"])

DeviceTypeQuery = Query(
    default=None,
    alias="type",
    description="Resolved type, to pick one device when ids are shared across types",
)


def _snapshot_response(synchronizer: StateSynchronizer) -> DevicesResponseDTO:
    devices = synchronizer.devices
    last_error = synchronizer.last_error
    return DevicesResponseDTO(
        count=len(devices),
        refreshed_at=synchronizer.last_refreshed_at,
        last_error=last_error.message if last_error is not None else None,
        devices=[DeviceDTO.from_entity(device) for device in devices],
    )


def _require_device(
    synchronizer: StateSynchronizer, device_id: int, device_type: Optional[str]
) -> CanonicalDevice:
    device = synchronizer.get_device(device_id, device_type)
    if device is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Device {device_id} not found",
        )
    return device


def _capability_response(capability: BaseCapability) -> CapabilityDTO:
    return CapabilityDTO(
        device_id=capability.device_id,
        device_type=capability.device_type,
        display_name=capability.display_name,
        field_values=capability.snapshot(),
        writable_fields=sorted(capability.writable_fields),
    )


@router.get("/", response_model=DevicesResponseDTO)
@inject
async def get_devices(
    device_type: Optional[str] = Query(
        default=None, alias="type", description="Only devices of this resolved type"
    ),
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> DevicesResponseDTO:
    """
    Get the current device snapshot.

    The snapshot is served from memory; it is refreshed by the periodic
    discovery pass and never blocks on the controller.
    """
    response = _snapshot_response(state_synchronizer)
    if device_type is not None:
        response.devices = [d for d in response.devices if d.type == device_type]
        response.count = len(response.devices)

    logger.debug("devices.listed", device_count=response.count, type=device_type)
    return response


@router.post("/refresh", response_model=DevicesResponseDTO)
@inject
async def refresh_devices(
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> DevicesResponseDTO:
    """
    Run a discovery pass now.

    Raises:
        HTTPException: 502 if the pass failed; the previous snapshot is kept
    """
    await state_synchronizer.refresh()
    last_error = state_synchronizer.last_error
    if last_error is not None:
        logger.warning("devices.refresh_failed", error=last_error.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Discovery failed: {last_error.message}",
        )
    return _snapshot_response(state_synchronizer)


@router.get("/{device_id}", response_model=DeviceDTO)
@inject
async def get_device(
    device_id: int = Path(description="Controller device id"),
    device_type: Optional[str] = DeviceTypeQuery,
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> DeviceDTO:
    """Get one device from the current snapshot."""
    device = _require_device(state_synchronizer, device_id, device_type)
    return DeviceDTO.from_entity(device)


@router.get("/{device_id}/live", response_model=DeviceDTO)
@inject
async def get_live_device(
    device_id: int = Path(description="Controller device id"),
    device_type: Optional[str] = DeviceTypeQuery,
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> DeviceDTO:
    """
    Read one device directly from the controller.

    The shared snapshot is not modified.
    """
    _require_device(state_synchronizer, device_id, device_type)
    try:
        device = await state_synchronizer.refresh_device(device_id, device_type)
    except DomainError as e:
        logger.error("devices.live_read_failed", device_id=device_id, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to read device {device_id}: {e.message}",
        ) from e

    if device is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Device {device_id} not found",
        )
    return DeviceDTO.from_entity(device)


@router.post("/{device_id}/commands", response_model=CommandResultDTO)
@inject
async def send_command(
    request: CommandRequestDTO,
    device_id: int = Path(description="Controller device id"),
    device_type: Optional[str] = DeviceTypeQuery,
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> CommandResultDTO:
    """
    Send one command to a device.

    Raises:
        HTTPException: 404 for an unknown device, 422 for an invalid value,
            502 when the controller rejects or does not receive the command
    """
    _require_device(state_synchronizer, device_id, device_type)

    try:
        intent = request.to_intent(device_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    result = await state_synchronizer.apply(intent)
    if not result.ok:
        logger.warning(
            "devices.command_failed",
            device_id=device_id,
            command=request.command.value,
            error=result.error,
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=result.error,
        )

    logger.info("devices.command_sent", device_id=device_id, command=request.command.value)
    return CommandResultDTO.from_domain(result)


@router.get("/{device_id}/fields", response_model=CapabilityDTO)
@inject
async def get_device_fields(
    device_id: int = Path(description="Controller device id"),
    device_type: Optional[str] = DeviceTypeQuery,
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> CapabilityDTO:
    """Get the device as seen through its capability adapter."""
    device = _require_device(state_synchronizer, device_id, device_type)
    return _capability_response(capability_for(device, state_synchronizer))


@router.put("/{device_id}/fields/{field}", response_model=CapabilityDTO)
@inject
async def set_device_field(
    body: FieldWriteDTO,
    device_id: int = Path(description="Controller device id"),
    field: str = Path(description="Capability field to write"),
    device_type: Optional[str] = DeviceTypeQuery,
    state_synchronizer: StateSynchronizer = Depends(Provide["state_synchronizer"]),
) -> CapabilityDTO:
    """
    Write one capability field.

    Returns the optimistic field values after the write.
    """
    device = _require_device(state_synchronizer, device_id, device_type)
    capability = capability_for(device, state_synchronizer)

    if field not in capability.fields:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{device.resolved_type} has no field {field}",
        )
    if field not in capability.writable_fields:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Field {field} is read-only",
        )

    try:
        await capability.set(field, body.value)
    except CommandError as e:
        invalid_value = isinstance(e.__cause__, (TypeError, ValueError))
        raise HTTPException(
            status_code=(
                status.HTTP_422_UNPROCESSABLE_ENTITY
                if invalid_value
                else status.HTTP_502_BAD_GATEWAY
            ),
            detail=e.message,
        ) from e

    return _capability_response(capability)
