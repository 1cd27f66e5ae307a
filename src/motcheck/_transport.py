"""HTTP transport for the token and vehicle endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import aiohttp

from motcheck._constants import USER_AGENT
from motcheck._redact import redact_for_log
from motcheck.config import MotCheckConfig
from motcheck.exceptions import MotTransportError, UpstreamTimeoutError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and body text of a completed request."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the endpoint modules.

    Status codes are returned, not raised: each endpoint module decides which
    error kind a non-2xx answer maps to.
    """

    async def post_form(self, url: str, form: Mapping[str, str]) -> HttpResponse:
        ...

    async def get(self, url: str, headers: Mapping[str, str]) -> HttpResponse:
        ...


class AiohttpTransport:
    """Transport backed by a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, config: MotCheckConfig, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def post_form(self, url: str, form: Mapping[str, str]) -> HttpResponse:
        """POST *form* as ``application/x-www-form-urlencoded``."""
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        _logger.debug("POST %s form=%s", url, redact_for_log(dict(form)))
        return await self._send("POST", url, headers=headers, data=dict(form))

    async def get(self, url: str, headers: Mapping[str, str]) -> HttpResponse:
        merged = {"user-agent": USER_AGENT, **headers}
        _logger.debug("GET %s headers=%s", url, redact_for_log(merged))
        return await self._send("GET", url, headers=merged)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        data: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        try:
            async with self._http.request(
                method,
                url,
                headers=dict(headers),
                data=data,
                timeout=self._timeout,
            ) as resp:
                try:
                    text = await resp.text()
                except UnicodeDecodeError as exc:
                    raise MotTransportError(
                        f"{method} {url} returned a body that is not valid text",
                        status_code=resp.status,
                        endpoint=url,
                        body=await resp.text(errors="replace"),
                    ) from exc
                _logger.debug("%s %s -> HTTP %s (%d bytes)", method, url, resp.status, len(text))
                return HttpResponse(status=resp.status, text=text)
        except TimeoutError as exc:
            raise UpstreamTimeoutError(
                f"{method} {url} timed out after {self._timeout.total}s",
                endpoint=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise MotTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc
