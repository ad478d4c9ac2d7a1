"""
Health domain entities.

Value objects describing how well the bridge currently tracks the
controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ServiceStatus(str, Enum):
    """High-level availability of the controller link."""

    UP = "up"
    DEGRADED = "degraded"
    DOWN = "down"


@dataclass(slots=True)
class ControllerHealth:
    """Health of the synchronizer and its last discovery pass."""

    status: ServiceStatus
    device_count: int = 0
    running: bool = False
    last_refreshed_at: Optional[datetime] = None
    last_error: Optional[str] = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
