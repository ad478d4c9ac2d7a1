"""Domain port for session management."""

from __future__ import annotations

from typing import Protocol

from crestron_home.domain.entities.session import Session


class ISessionManager(Protocol):
    """Provides an authenticated session for every outbound call."""

    async def ensure_session(self) -> Session:
        """Return a usable session, renewing it first when it is about to expire."""
        ...

    def invalidate(self) -> None:
        """Forget the cached session."""
        ...
