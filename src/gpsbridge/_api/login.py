"""Vendor login endpoint.

The login body is configured verbatim (it already carries the account
credentials); the token comes back at ``userInfo.key2018`` inside the
XML envelope.
"""

from __future__ import annotations

import logging
from typing import Any

from gpsbridge._constants import LOGIN_TOKEN_PATH
from gpsbridge._envelope import decode_object
from gpsbridge._redact import redact_for_log, redact_url
from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import AuthError, DecodeError, TransportError
from gpsbridge.models.token import AuthToken

_logger = logging.getLogger(__name__)


def parse_login_response(decoded: dict[str, Any], *, endpoint: str = "") -> AuthToken:
    """Extract the session token from a decoded login response.

    Raises
    ------
    AuthError
        If any level of ``userInfo.key2018`` is missing or empty.
    """
    parent: Any = decoded
    for part in LOGIN_TOKEN_PATH[:-1]:
        parent = parent.get(part) if isinstance(parent, dict) else None
    key = parent.get(LOGIN_TOKEN_PATH[-1]) if isinstance(parent, dict) else None

    if key is None or not str(key).strip():
        raise AuthError(
            f"Login response missing {'.'.join(LOGIN_TOKEN_PATH)}",
            endpoint=endpoint,
        )
    return AuthToken(key=str(key).strip(), raw=parent)


async def fetch_token(config: SyncConfig, transport: Transport) -> AuthToken:
    """Log in once and return the session token.

    Transport and decode failures are folded into :class:`AuthError`.
    """
    endpoint = config.login_url
    try:
        text = await transport.post_form(endpoint, config.login_data)
        decoded = decode_object(text, endpoint=endpoint)
    except (TransportError, DecodeError) as exc:
        raise AuthError(f"Login to {redact_url(endpoint)} failed: {exc}", endpoint=endpoint) from exc

    _logger.debug("Login response decoded parsed=%s", redact_for_log(decoded))
    return parse_login_response(decoded, endpoint=endpoint)
