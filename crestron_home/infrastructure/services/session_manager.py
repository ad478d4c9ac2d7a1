"""Session management for the Crestron Home REST API."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

import httpx

from crestron_home.domain.entities.errors import AuthError
from crestron_home.domain.entities.session import (
    DEFAULT_SAFETY_MARGIN,
    DEFAULT_SESSION_TTL,
    Session,
)
from crestron_home.domain.ports.session_manager import ISessionManager
from crestron_home.shared import get_logger
from crestron_home.shared.consts import AUTH_TOKEN_HEADER

logger = get_logger(__name__)

# Seconds during which a failed renewal is not retried
DEFAULT_RETRY_BACKOFF = 5.0


class SessionManager(ISessionManager):
    """
    Owns the controller session key.

    The key is exchanged for the long-lived API token on first use and
    renewed lazily once it gets within ``safety_margin`` of its TTL. There
    is no background renewal. When a renewal fails the previous, possibly
    expired, session is handed out again without a new exchange for
    ``retry_backoff`` seconds, so the concurrent reads of one discovery
    pass share a single failed attempt.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        *,
        ttl: float = DEFAULT_SESSION_TTL,
        safety_margin: float = DEFAULT_SAFETY_MARGIN,
        timeout: float = 10.0,
        verify_ssl: bool = False,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._ttl = ttl
        self._safety_margin = safety_margin
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._retry_backoff = retry_backoff
        self._transport = transport
        self._clock = clock
        self._session: Optional[Session] = None
        self._failed_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def session(self) -> Optional[Session]:
        """The cached session, without triggering a renewal."""
        return self._session

    async def ensure_session(self) -> Session:
        """
        Return a valid session, renewing it when needed.

        Returns:
            Session: The cached session or a freshly exchanged one

        Raises:
            AuthError: If the exchange fails and no previous session exists
        """
        async with self._lock:
            current = self._session
            if current is not None and current.is_valid(
                self._clock(), self._safety_margin
            ):
                return current
            if current is not None and self._in_backoff():
                return current

            try:
                renewed = await self._login()
            except AuthError as exc:
                if current is None:
                    raise
                self._failed_at = self._clock()
                logger.error(
                    "crestron.session.renewal_failed",
                    error=exc.message,
                    session_age=current.age(self._clock()),
                )
                return current

            self._session = renewed
            self._failed_at = None
            logger.info("crestron.session.renewed", version=renewed.version)
            return renewed

    def invalidate(self) -> None:
        self._session = None
        self._failed_at = None

    def _in_backoff(self) -> bool:
        if self._failed_at is None:
            return False
        return self._clock() - self._failed_at < self._retry_backoff

    async def _login(self) -> Session:
        headers = {
            "Accept": "application/json",
            AUTH_TOKEN_HEADER: self._api_token,
        }
        logger.debug("crestron.session.login", base_url=self._base_url)

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                verify=self._verify_ssl,
                transport=self._transport,
            ) as client:
                response = await client.get("/login", headers=headers)
                response.raise_for_status()
                payload = response.json()

        except httpx.HTTPStatusError as e:
            raise AuthError(
                f"Login rejected with HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise AuthError(f"Login request failed: {e}") from e
        except ValueError as e:
            raise AuthError(f"Login response is not valid JSON: {e}") from e

        auth_key = payload.get("authkey") if isinstance(payload, dict) else None
        if not auth_key:
            raise AuthError("Login response did not contain an auth key")

        return Session(
            credential=str(auth_key),
            issued_at=self._clock(),
            ttl=self._ttl,
            version=payload.get("version"),
        )
