"""Use case for the health endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crestron_home.application.dtos.health_dto import ControllerHealthDTO
from crestron_home.domain.entities.health import ControllerHealth, ServiceStatus

if TYPE_CHECKING:
    from crestron_home.application.services.state_synchronizer import (
        StateSynchronizer,
    )


class GetHealthStatusUseCase:
    """
    Use case reporting how current the device snapshot is.

    ``up`` after a successful pass, ``degraded`` while serving a snapshot
    kept from an earlier pass, ``down`` when no pass ever succeeded.
    """

    def __init__(self, state_synchronizer: "StateSynchronizer") -> None:
        self._synchronizer = state_synchronizer

    async def execute(self) -> ControllerHealthDTO:
        synchronizer = self._synchronizer
        last_error = synchronizer.last_error

        if synchronizer.last_refreshed_at is None:
            status = ServiceStatus.DOWN
        elif last_error is not None:
            status = ServiceStatus.DEGRADED
        else:
            status = ServiceStatus.UP

        health = ControllerHealth(
            status=status,
            device_count=len(synchronizer.devices),
            running=synchronizer.is_running,
            last_refreshed_at=synchronizer.last_refreshed_at,
            last_error=last_error.message if last_error is not None else None,
        )
        return ControllerHealthDTO.from_domain(health)
