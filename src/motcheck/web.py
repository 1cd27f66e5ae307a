"""aiohttp.web front for :class:`VehicleLookupProxy`.

Routes:
  - ``GET /vehicles/{registration}`` -> vehicle record as JSON
  - ``GET /health``

Errors are rendered as ``{"error": "<message>"}`` with a status derived from
the error kind (see :func:`status_for_error`).  Upstream failures get a fixed
message; their detail, which may quote upstream response bodies, is only
logged.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from http import HTTPStatus

import aiohttp_cors
from aiohttp import web

from motcheck.config import MotCheckConfig
from motcheck.exceptions import (
    InvalidRegistrationError,
    MalformedTokenResponseError,
    MalformedUpstreamResponseError,
    MotCheckError,
    MotConfigError,
    MotTransportError,
    UpstreamTimeoutError,
    VehicleNotFoundError,
)
from motcheck.proxy import VehicleLookupProxy

_logger = logging.getLogger(__name__)

PROXY_KEY = web.AppKey("proxy", VehicleLookupProxy)

_UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
_UPSTREAM_ERROR_MESSAGES: dict[HTTPStatus, str] = {
    HTTPStatus.BAD_GATEWAY: "The MOT history service returned an unusable response",
    HTTPStatus.GATEWAY_TIMEOUT: "The MOT history service did not respond in time",
}

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def status_for_error(exc: BaseException) -> HTTPStatus:
    """HTTP status for an error raised by the proxy."""
    if isinstance(exc, InvalidRegistrationError):
        return HTTPStatus.BAD_REQUEST
    if isinstance(exc, VehicleNotFoundError):
        return HTTPStatus.NOT_FOUND
    if isinstance(exc, UpstreamTimeoutError):
        return HTTPStatus.GATEWAY_TIMEOUT
    if isinstance(exc, (MotTransportError, MalformedTokenResponseError, MalformedUpstreamResponseError)):
        return HTTPStatus.BAD_GATEWAY
    return HTTPStatus.INTERNAL_SERVER_ERROR


def _error_response(status: HTTPStatus, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status.value)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except MotCheckError as exc:
        status = status_for_error(exc)
        if status == HTTPStatus.INTERNAL_SERVER_ERROR:
            _logger.exception("An error occurred processing request %s", request.path)
            return _error_response(status, _UNEXPECTED_ERROR_MESSAGE)
        if status in _UPSTREAM_ERROR_MESSAGES:
            _logger.error("Upstream failure processing request %s: %s", request.path, exc)
            return _error_response(status, _UPSTREAM_ERROR_MESSAGES[status])
        _logger.info("Rejected request %s: %s", request.path, exc)
        return _error_response(status, str(exc))
    except Exception:
        _logger.exception("An error occurred processing request %s", request.path)
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, _UNEXPECTED_ERROR_MESSAGE)


async def get_vehicle(request: web.Request) -> web.Response:
    proxy = request.app[PROXY_KEY]
    record = await proxy.get_vehicle_details(request.match_info["registration"])
    return web.json_response(record.to_json_dict())


async def health(_request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "service": "motcheck"})


def create_app(proxy: VehicleLookupProxy, *, cors_origins: Sequence[str] = ()) -> web.Application:
    """Build the application around an already-opened proxy.

    Every route accepts cross-origin GET requests from *cors_origins*.
    """
    app = web.Application(middlewares=[error_middleware])
    app[PROXY_KEY] = proxy
    app.router.add_get("/vehicles/{registration}", get_vehicle)
    app.router.add_get("/health", health)

    if cors_origins:
        cors = aiohttp_cors.setup(
            app,
            defaults={
                origin: aiohttp_cors.ResourceOptions(allow_headers="*", allow_methods=["GET"])
                for origin in cors_origins
            },
        )
        for route in list(app.router.routes()):
            cors.add(route)
    return app


def create_app_from_config(config: MotCheckConfig) -> web.Application:
    """Build the application and bind the proxy lifecycle to it."""
    proxy = VehicleLookupProxy(config)
    app = create_app(proxy, cors_origins=config.cors_origins)

    async def _proxy_ctx(_app: web.Application) -> AsyncIterator[None]:
        async with proxy:
            yield

    app.cleanup_ctx.append(_proxy_ctx)
    return app


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve MOT vehicle lookups over HTTP.")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on (default: 8080)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = MotCheckConfig.from_env()
    except MotConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    web.run_app(create_app_from_config(config), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
