from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from motcheck._transport import AiohttpTransport
from motcheck.config import MotCheckConfig
from motcheck.exceptions import MotTransportError, UpstreamTimeoutError
from motcheck.proxy import VehicleLookupProxy


def _config(base_url: str = "http://upstream.invalid", **overrides: Any) -> MotCheckConfig:
    kwargs: dict[str, Any] = {
        "client_id": "client-id",
        "client_secret": "client-secret",
        "api_key": "api-key",
        "token_url": f"{base_url}/oauth2/token",
        "scope_url": "https://tapi.example/.default",
        "base_url": base_url,
    }
    kwargs.update(overrides)
    return MotCheckConfig(**kwargs)


def _upstream_app(received: dict[str, Any], *, vehicle_delay: float = 0.0) -> web.Application:
    async def token(request: web.Request) -> web.Response:
        received.setdefault("token_forms", []).append(dict(await request.post()))
        received["token_content_type"] = request.content_type
        return web.json_response({"access_token": "live-token", "expires_in": 3600})

    async def vehicle(request: web.Request) -> web.Response:
        received.setdefault("vehicle_headers", []).append(dict(request.headers))
        await asyncio.sleep(vehicle_delay)
        registration = request.match_info["registration"]
        if registration != "AB12CDE":
            return web.json_response({"errorMessage": "not found"}, status=404)
        return web.json_response(
            {
                "registration": "AB12CDE",
                "make": "TOYOTA",
                "model": "COROLLA",
                "primaryColour": "SILVER",
                "motTests": [{"expiryDate": "2024-01-01", "odometerValue": "50000"}],
            }
        )

    app = web.Application()
    app.router.add_post("/oauth2/token", token)
    app.router.add_get("/v1/trade/vehicles/registration/{registration}", vehicle)
    return app


@pytest.mark.asyncio
async def test_post_form_sends_urlencoded_body() -> None:
    received: dict[str, Any] = {}
    async with TestServer(_upstream_app(received)) as server, aiohttp.ClientSession() as session:
        transport = AiohttpTransport(_config(), session)

        url = str(server.make_url("/oauth2/token"))
        response = await transport.post_form(url, {"grant_type": "client_credentials"})

    assert response.ok
    assert response.status == 200
    assert '"live-token"' in response.text
    assert received["token_content_type"] == "application/x-www-form-urlencoded"
    assert received["token_forms"] == [{"grant_type": "client_credentials"}]


@pytest.mark.asyncio
async def test_get_returns_non_2xx_status_without_raising() -> None:
    async with TestServer(_upstream_app({})) as server, aiohttp.ClientSession() as session:
        transport = AiohttpTransport(_config(), session)

        response = await transport.get(str(server.make_url("/v1/trade/vehicles/registration/NOPE")), {})

    assert response.status == 404
    assert not response.ok


@pytest.mark.asyncio
async def test_undecodable_body_raises_transport_error() -> None:
    async def binary(request: web.Request) -> web.Response:
        return web.Response(
            body=b'{"registration": "\xff\xfe"}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )

    app = web.Application()
    app.router.add_get("/vehicle", binary)
    async with TestServer(app) as server, aiohttp.ClientSession() as session:
        transport = AiohttpTransport(_config(), session)

        with pytest.raises(MotTransportError) as exc_info:
            await transport.get(str(server.make_url("/vehicle")), {})

    assert exc_info.value.status_code == 200
    assert "\ufffd" in exc_info.value.body
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


@pytest.mark.asyncio
async def test_slow_upstream_raises_timeout_error() -> None:
    async with TestServer(_upstream_app({}, vehicle_delay=1.0)) as server, aiohttp.ClientSession() as session:
        transport = AiohttpTransport(_config(request_timeout=0.05), session)

        with pytest.raises(UpstreamTimeoutError):
            await transport.get(str(server.make_url("/v1/trade/vehicles/registration/AB12CDE")), {})


@pytest.mark.asyncio
async def test_connection_failure_is_wrapped() -> None:
    async with TestServer(_upstream_app({})) as server:
        url = str(server.make_url("/oauth2/token"))
    # Server is closed now; nothing listens on its port.
    async with aiohttp.ClientSession() as session:
        transport = AiohttpTransport(_config(), session)

        with pytest.raises(MotTransportError) as exc_info:
            await transport.post_form(url, {})

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_proxy_against_live_test_server() -> None:
    received: dict[str, Any] = {}
    async with TestServer(_upstream_app(received)) as server:
        config = _config(str(server.make_url("/")).rstrip("/"))
        async with VehicleLookupProxy(config) as proxy:
            record = await proxy.get_vehicle_details("ab12 cde")
            again = await proxy.get_vehicle_details("AB12CDE")

    assert record.mot_expiry_date == date(2024, 1, 1)
    assert again == record
    assert received["token_forms"] == [
        {
            "grant_type": "client_credentials",
            "client_id": "client-id",
            "client_secret": "client-secret",
            "scope": "https://tapi.example/.default",
        }
    ]
    assert len(received["vehicle_headers"]) == 1
    headers = received["vehicle_headers"][0]
    assert headers["Authorization"] == "Bearer live-token"
    assert headers["X-API-Key"] == "api-key"
