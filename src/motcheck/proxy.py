"""Vehicle lookup proxy: normalize, cache, authenticate, fetch, map."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import aiohttp

from motcheck._api.vehicle import fetch_vehicle_document
from motcheck._transport import AiohttpTransport, Transport
from motcheck.auth import TokenManager
from motcheck.cache import ResultCache
from motcheck.config import MotCheckConfig
from motcheck.exceptions import MalformedUpstreamResponseError, MotCheckError, UpstreamHttpError
from motcheck.mapping import map_vehicle_document
from motcheck.models.vehicle import VehicleRecord
from motcheck.registration import normalize_registration

_logger = logging.getLogger(__name__)


class VehicleLookupProxy:
    """Async proxy in front of the DVSA MOT history API.

    Usage::

        async with VehicleLookupProxy(MotCheckConfig.from_env()) as proxy:
            record = await proxy.get_vehicle_details("ab12 cde")

    Parameters
    ----------
    config : MotCheckConfig
        Endpoint URLs and credentials.
    session : aiohttp.ClientSession, optional
        Shared HTTP session.  When omitted the proxy opens one on
        ``__aenter__`` and closes it on ``__aexit__``.
    transport : Transport, optional
        Replaces the aiohttp transport entirely (test doubles).
    token_manager : TokenManager, optional
        Externally owned token manager.  By default one is built on the
        proxy's transport.
    cache : ResultCache, optional
        Result cache; a fresh one using *clock* by default.
    clock : callable
        Monotonic seconds source shared by the default cache and token
        manager.
    """

    def __init__(
        self,
        config: MotCheckConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        token_manager: TokenManager | None = None,
        cache: ResultCache | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._clock = clock
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._token_manager = token_manager
        self._cache = cache if cache is not None else ResultCache(clock=clock)
        self._owns_transport = False
        self._owns_token_manager = False
        if self._transport is not None and self._token_manager is None:
            self._token_manager = TokenManager(config, self._transport, clock=clock)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> VehicleLookupProxy:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = AiohttpTransport(self._config, self._http_session)
            self._owns_transport = True
        if self._token_manager is None:
            self._token_manager = TokenManager(self._config, self._transport, clock=self._clock)
            self._owns_token_manager = True
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if the proxy opened it."""
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._owns_transport:
            self._transport = None
            self._owns_transport = False
        if self._owns_token_manager:
            self._token_manager = None
            self._owns_token_manager = False

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def token_manager(self) -> TokenManager | None:
        return self._token_manager

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def get_vehicle_details(self, raw_registration: str | None) -> VehicleRecord:
        """Look up a vehicle by registration.

        A cached result younger than the cache TTL is returned without any
        network call.  Otherwise a token is ensured, the vehicle document is
        fetched and mapped, and the record is cached before it is returned.
        Nothing is cached when any step fails.

        Raises
        ------
        InvalidRegistrationError
            If *raw_registration* is empty or has unsupported characters.
        UpstreamAuthError, MalformedTokenResponseError
            From the token exchange.
        VehicleNotFoundError, UpstreamHttpError
            If the vehicle endpoint answered with a non-2xx status.
        UpstreamTimeoutError, MotTransportError
            On timeout or network failure.
        MalformedUpstreamResponseError
            If the vehicle document is malformed (including
            ``MalformedDateError`` / ``MalformedMileageError``).
        """
        key = normalize_registration(raw_registration)

        cached = self._cache.get(key)
        if cached is not None:
            _logger.info("Cache hit for registration %s", key)
            return cached

        _logger.info("Cache miss for registration %s", key)
        transport = self._require_transport()
        token_manager = self._require_token_manager()

        token = await token_manager.ensure_token()
        try:
            document = await fetch_vehicle_document(self._config, transport, key, token)
        except UpstreamHttpError as exc:
            if exc.status_code == 401:
                # Rejected token: the next lookup fetches a new one.
                token_manager.invalidate(token)
            raise

        record = map_vehicle_document(document)
        if record.registration != key:
            raise MalformedUpstreamResponseError(
                f"Vehicle response is for {record.registration}, requested {key}",
                field="registration",
            )

        self._cache.put(key, record)
        return record

    async def fetch_raw_document(self, raw_registration: str | None) -> Any:
        """Fetch the undecoded upstream document, bypassing the cache.

        Meant for diagnostics: nothing is mapped or cached.
        """
        key = normalize_registration(raw_registration)
        token = await self._require_token_manager().ensure_token()
        return await fetch_vehicle_document(self._config, self._require_transport(), key, token)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise MotCheckError("Proxy not initialized. Use 'async with VehicleLookupProxy(...) as proxy:'")
        return self._transport

    def _require_token_manager(self) -> TokenManager:
        if self._token_manager is None:
            raise MotCheckError("Proxy not initialized. Use 'async with VehicleLookupProxy(...) as proxy:'")
        return self._token_manager
