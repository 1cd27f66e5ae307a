from __future__ import annotations

import pytest

from motcheck.config import MotCheckConfig
from motcheck.exceptions import MotConfigError

_ENV = {
    "MOT_CLIENT_ID": "client-id",
    "MOT_CLIENT_SECRET": "client-secret",
    "MOT_API_KEY": "api-key",
    "MOT_TOKEN_URL": "https://auth.example/token",
    "MOT_SCOPE_URL": "https://tapi.example/.default",
    "MOT_BASE_URL": "https://history.example",
}


@pytest.fixture
def mot_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (*_ENV, "MOT_VEHICLE_PATH", "MOT_REQUEST_TIMEOUT", "MOT_CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)
    for key, value in _ENV.items():
        monkeypatch.setenv(key, value)


def test_from_env_reads_required_values(mot_env: None) -> None:
    config = MotCheckConfig.from_env()

    assert config.client_id == "client-id"
    assert config.client_secret == "client-secret"
    assert config.api_key == "api-key"
    assert config.token_url == "https://auth.example/token"
    assert config.scope_url == "https://tapi.example/.default"
    assert config.base_url == "https://history.example"
    assert config.request_timeout == 30.0


def test_from_env_overrides_take_precedence(mot_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MOT_REQUEST_TIMEOUT", "5")

    config = MotCheckConfig.from_env(api_key="override-key")

    assert config.api_key == "override-key"
    assert config.request_timeout == 5.0


def test_from_env_missing_value_is_fatal(mot_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MOT_CLIENT_SECRET")

    with pytest.raises(MotConfigError, match="client_secret"):
        MotCheckConfig.from_env()


def test_from_env_rejects_non_numeric_timeout(mot_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MOT_REQUEST_TIMEOUT", "soon")

    with pytest.raises(MotConfigError, match="MOT_REQUEST_TIMEOUT"):
        MotCheckConfig.from_env()


def test_blank_required_value_is_rejected() -> None:
    with pytest.raises(MotConfigError, match="api_key"):
        MotCheckConfig(
            client_id="id",
            client_secret="secret",
            api_key="   ",
            token_url="https://auth.example/token",
            scope_url="scope",
            base_url="https://history.example",
        )


def test_vehicle_path_requires_placeholder() -> None:
    with pytest.raises(MotConfigError, match="registration"):
        MotCheckConfig(
            client_id="id",
            client_secret="secret",
            api_key="key",
            token_url="https://auth.example/token",
            scope_url="scope",
            base_url="https://history.example",
            vehicle_path="/v1/trade/vehicles",
        )


def test_vehicle_url_joins_base_and_path() -> None:
    config = MotCheckConfig(
        client_id="id",
        client_secret="secret",
        api_key="key",
        token_url="https://auth.example/token",
        scope_url="scope",
        base_url="https://history.example/",
    )

    assert config.vehicle_url("AB12CDE") == "https://history.example/v1/trade/vehicles/registration/AB12CDE"


def test_from_env_reads_cors_origins(mot_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    assert MotCheckConfig.from_env().cors_origins == ()

    monkeypatch.setenv("MOT_CORS_ORIGINS", "https://front.example, http://localhost:5000,")

    config = MotCheckConfig.from_env()

    assert config.cors_origins == ("https://front.example", "http://localhost:5000")
