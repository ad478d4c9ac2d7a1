"""
Domain Errors

Error taxonomy of the bridge. None of these errors is allowed to stop
the refresh loop; they are raised to the immediate caller, which decides
whether to degrade (keep the last known state) or surface the failure.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthError(DomainError):
    """Raised when the credential exchange with the controller fails."""


class TransportError(DomainError):
    """Raised on network failures, timeouts and non-success HTTP responses."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)

    @property
    def is_not_found(self) -> bool:
        """Whether the controller reported the endpoint or record as missing."""
        return self.status_code == 404


class DiscoveryError(DomainError):
    """Raised when a required collection could not be read."""

    def __init__(
        self,
        message: str,
        collections: Optional[list] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.collections = list(collections or [])
        super().__init__(message, details)


class CommandError(DomainError):
    """Raised when a write to the controller cannot be translated or fails."""
