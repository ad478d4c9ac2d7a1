"""Session value object for the controller's short-lived auth key."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# The controller expires a session key after ten minutes.
DEFAULT_SESSION_TTL = 600.0
DEFAULT_SAFETY_MARGIN = 60.0


@dataclass(frozen=True, slots=True)
class Session:
    """An authenticated session. Renewal replaces the whole object."""

    credential: str
    issued_at: float
    ttl: float = DEFAULT_SESSION_TTL
    version: Optional[str] = None

    def age(self, now: float) -> float:
        return now - self.issued_at

    def is_valid(self, now: float, safety_margin: float = DEFAULT_SAFETY_MARGIN) -> bool:
        """A session stays usable while its age is below ``ttl - safety_margin``."""
        return self.age(now) < self.ttl - safety_margin
