"""Vendor session token management."""

from __future__ import annotations

import logging

from gpsbridge._api.login import fetch_token
from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.models.token import AuthToken

_logger = logging.getLogger(__name__)


class TokenManager:
    """Lazily acquires the vendor token and keeps it until invalidated.

    The vendor gives no expiry, so the token is reused across cycles
    until a call shows it is no longer accepted and
    :meth:`invalidate` is called.
    """

    def __init__(self, config: SyncConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport
        self._token: AuthToken | None = None

    @property
    def token(self) -> AuthToken | None:
        return self._token

    @property
    def has_token(self) -> bool:
        return self._token is not None

    async def get_token(self) -> AuthToken:
        """Return the cached token, logging in first when there is none.

        Raises
        ------
        AuthError
            If the login fails; the cache stays empty.
        """
        if self._token is not None:
            return self._token
        token = await fetch_token(self._config, self._transport)
        _logger.info("Obtained vendor session token")
        self._token = token
        return token

    def invalidate(self) -> None:
        """Force the next :meth:`get_token` call to log in again."""
        if self._token is not None:
            _logger.info("Discarding vendor session token")
        self._token = None
