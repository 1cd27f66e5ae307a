"""Bearer token acquisition and reuse."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from motcheck._api.token import build_token_form, parse_token_response
from motcheck._transport import Transport
from motcheck.config import MotCheckConfig
from motcheck.models.token import AccessToken

_logger = logging.getLogger(__name__)


class TokenManager:
    """Owns the single held :class:`AccessToken` of a proxy.

    ``ensure_token`` is safe to call before every upstream request.  The
    check-then-refresh sequence runs under an :class:`asyncio.Lock`, so at
    most one token exchange is in flight.  Callers that queued on the lock
    while another caller refreshed get that refreshed token back instead of
    starting their own exchange.
    """

    def __init__(
        self,
        config: MotCheckConfig,
        transport: Transport,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._transport = transport
        self._clock = clock
        self._token: AccessToken | None = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> AccessToken | None:
        """Currently held token, expired or not."""
        return self._token

    async def ensure_token(self) -> AccessToken:
        """Return a token that is valid by the local clock.

        Raises
        ------
        UpstreamAuthError
            If the token endpoint rejected the exchange.
        MalformedTokenResponseError
            If the token endpoint answered without a usable ``access_token``.
        MotTransportError
            On network failure or timeout.
        """
        held = self._token
        if held is not None and not held.is_expired(self._clock()):
            return held

        async with self._lock:
            current = self._token
            if current is not None and current is not held:
                # Installed by the refresh this caller was waiting on.
                return current
            if current is not None and not current.is_expired(self._clock()):
                return current

            token = await self._exchange()
            self._token = token
            return token

    def invalidate(self, token: AccessToken | None = None) -> None:
        """Drop the held token; the next ``ensure_token`` performs an exchange.

        When *token* is given, the held token is dropped only if it is that
        token, so a rejection of an old token cannot discard a newer one.
        """
        if token is None or self._token is token:
            self._token = None

    async def _exchange(self) -> AccessToken:
        url = self._config.token_url
        _logger.debug("Requesting access token from %s", url)
        response = await self._transport.post_form(url, build_token_form(self._config))
        token = parse_token_response(response, url, self._clock())
        if token.expires_in is None:
            _logger.warning("Token response carried no usable expires_in; token will be refreshed on next use")
        else:
            _logger.info("Obtained access token valid for %.0fs", token.expires_in)
        return token
