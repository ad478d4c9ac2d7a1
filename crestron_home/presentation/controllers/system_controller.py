"""System endpoints exposing health."""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from crestron_home.application.dtos.health_dto import ControllerHealthDTO
from crestron_home.application.use_cases.health_use_cases import (
    GetHealthStatusUseCase,
)
from crestron_home.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health", response_model=ControllerHealthDTO)
@inject
async def health(
    get_health_status_use_case: GetHealthStatusUseCase = Depends(
        Provide["get_health_status_use_case"]
    ),
) -> ControllerHealthDTO:
    """Return the health of the controller link and the device snapshot."""
    health_status = await get_health_status_use_case.execute()
    logger.debug("health.check.success", status=health_status.status.value)
    return health_status
