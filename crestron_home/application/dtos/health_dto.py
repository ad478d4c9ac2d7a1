"""DTO for the system health response."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from crestron_home.domain.entities.health import ControllerHealth, ServiceStatus


class ControllerHealthDTO(BaseModel):
    """DTO representing the /health response payload."""

    status: ServiceStatus = Field(description="Overall controller link status")
    device_count: int = Field(default=0, description="Devices in the snapshot")
    running: bool = Field(default=False, description="Refresh timer is running")
    last_refreshed_at: Optional[datetime] = Field(
        default=None, description="End of the last successful discovery pass"
    )
    last_error: Optional[str] = Field(
        default=None, description="Error of the last discovery pass"
    )
    checked_at: datetime = Field(description="Timestamp of the check")

    @classmethod
    def from_domain(cls, health: ControllerHealth) -> "ControllerHealthDTO":
        return cls(
            status=health.status,
            device_count=health.device_count,
            running=health.running,
            last_refreshed_at=health.last_refreshed_at,
            last_error=health.last_error,
            checked_at=health.checked_at,
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "up",
                "device_count": 42,
                "running": True,
                "last_refreshed_at": "2024-09-09T12:00:00Z",
                "last_error": None,
                "checked_at": "2024-09-09T12:00:05Z",
            }
        }
    }
