"""HTTP transport for the vendor, platform, geocoding and forwarding endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from gpsbridge._constants import FORM_CONTENT_TYPE, USER_AGENT
from gpsbridge._redact import redact_for_log, redact_url
from gpsbridge.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def post_form(self, url: str, body: str) -> str:
        ...

    async def request_text(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        payload: Any = None,
    ) -> str:
        ...

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        payload: Any = None,
    ) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport.

    Every failure (network error, timeout, non-2xx status, unreadable
    JSON) is raised as :class:`TransportError` carrying the status code
    when one was received.
    """

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 30.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def post_form(self, url: str, body: str) -> str:
        """POST a pre-encoded form body and return the response text."""
        return await self._send("POST", url, headers={"content-type": FORM_CONTENT_TYPE}, data=body)

    async def request_text(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        payload: Any = None,
    ) -> str:
        """Send a request (JSON body when *payload* is given) and return the text."""
        request_headers: dict[str, str] = dict(headers or {})
        body: str | None = None
        if payload is not None:
            body = json.dumps(payload, separators=(",", ":"))
            request_headers["content-type"] = "application/json"

        _logger.debug("%s payload=%s", method, redact_for_log(payload))
        return await self._send(method, url, headers=request_headers, params=params, data=body)

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        payload: Any = None,
    ) -> Any:
        """Like :meth:`request_text` but JSON-decode the body.

        An empty response body decodes to ``None``.
        """
        text = await self.request_text(method, url, headers=headers, params=params, payload=payload)
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {method} {redact_url(url)}: {text[:200]}",
                endpoint=url,
            ) from exc

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None = None,
        data: str | None = None,
    ) -> str:
        request_headers = {"user-agent": USER_AGENT, **headers}
        _logger.debug("%s %s headers=%s", method, redact_url(url), redact_for_log(request_headers))

        try:
            async with self._http.request(
                method,
                url,
                headers=request_headers,
                params=params,
                data=data,
                timeout=self._timeout,
            ) as resp:
                try:
                    text = await resp.text()
                except (UnicodeDecodeError, LookupError) as exc:
                    raise TransportError(
                        f"Undecodable body from {method} {redact_url(url)} (HTTP {resp.status}): {exc}",
                        status_code=resp.status,
                        endpoint=url,
                    ) from exc
                if not 200 <= resp.status < 300:
                    raise TransportError(
                        f"HTTP {resp.status} from {method} {redact_url(url)}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=url,
                    )
        except TransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(
                f"{method} {redact_url(url)} failed: {exc!r}",
                endpoint=url,
            ) from exc

        return text
