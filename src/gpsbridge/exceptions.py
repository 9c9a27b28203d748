"""Custom exception hierarchy for gpsbridge."""

from __future__ import annotations


class GpsBridgeError(Exception):
    """Base exception for all gpsbridge errors."""


class ConfigError(GpsBridgeError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        self.missing = missing
        super().__init__(message)


class TransportError(GpsBridgeError):
    """HTTP-level failure (network error, non-2xx status, unreadable body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    @property
    def is_auth_failure(self) -> bool:
        """Whether the server rejected the request's credentials."""
        return self.status_code in (401, 403)


class DecodeError(GpsBridgeError):
    """Vendor envelope or inner JSON could not be decoded."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class AuthError(GpsBridgeError):
    """Vendor login failed or the token could not be extracted."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class SessionExpiredError(AuthError):
    """Vendor stopped honouring the cached token.

    Raised when a post-login call comes back without the expected data
    or with an HTTP auth status. The orchestrator drops the cached token
    so the next cycle logs in again.
    """


class PublishError(GpsBridgeError):
    """A state write to the automation platform (or forwarder) failed."""

    def __init__(
        self,
        message: str,
        *,
        entity_id: str = "",
        status_code: int | None = None,
    ) -> None:
        self.entity_id = entity_id
        self.status_code = status_code
        super().__init__(message)
