"""Client configuration for motcheck."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from motcheck._constants import DEFAULT_REQUEST_TIMEOUT, DEFAULT_VEHICLE_PATH
from motcheck.exceptions import MotConfigError

_REQUIRED_FIELDS: tuple[str, ...] = (
    "client_id",
    "client_secret",
    "api_key",
    "token_url",
    "scope_url",
    "base_url",
)


@dataclasses.dataclass(frozen=True)
class MotCheckConfig:
    """Proxy configuration.

    Parameters
    ----------
    client_id : str
        OAuth2 client id registered with the DVSA identity provider.
    client_secret : str
        OAuth2 client secret.
    api_key : str
        Value sent in the ``X-API-Key`` header of every vehicle request.
    token_url : str
        Client-credentials token endpoint.
    scope_url : str
        OAuth2 scope requested with the token
        (e.g. ``"https://tapi.dvsa.gov.uk/.default"``).
    base_url : str
        Vehicle API base URL (e.g. ``"https://history.mot.api.gov.uk"``).
    vehicle_path : str
        Path template appended to ``base_url``; ``{registration}`` is
        replaced by the normalized registration.
    request_timeout : float
        Total timeout in seconds applied to each token and vehicle request.
    cors_origins : tuple of str
        Browser origins allowed to call the HTTP front (e.g.
        ``("https://motcheck.example",)``).  Empty disables CORS.

    Raises
    ------
    MotConfigError
        If any of the six required values is missing or blank.
    """

    client_id: str
    client_secret: str
    api_key: str
    token_url: str
    scope_url: str
    base_url: str
    vehicle_path: str = DEFAULT_VEHICLE_PATH
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    cors_origins: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        missing = [name for name in _REQUIRED_FIELDS if not str(getattr(self, name) or "").strip()]
        if missing:
            raise MotConfigError(f"Missing required configuration: {', '.join(missing)}")
        if "{registration}" not in self.vehicle_path:
            raise MotConfigError("vehicle_path must contain a '{registration}' placeholder")
        if self.request_timeout <= 0:
            raise MotConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    def vehicle_url(self, registration: str) -> str:
        """Full vehicle endpoint URL for an already-normalized registration."""
        return f"{self.base_url.rstrip('/')}{self.vehicle_path.format(registration=registration)}"

    @classmethod
    def from_env(cls, **overrides: Any) -> MotCheckConfig:
        """Create configuration from environment variables.

        Reads ``MOT_CLIENT_ID``, ``MOT_CLIENT_SECRET``, ``MOT_API_KEY``,
        ``MOT_TOKEN_URL``, ``MOT_SCOPE_URL``, ``MOT_BASE_URL`` and the
        optional ``MOT_VEHICLE_PATH``, ``MOT_REQUEST_TIMEOUT`` and
        ``MOT_CORS_ORIGINS`` (comma separated). Explicit
        keyword arguments override environment values.

        Raises
        ------
        MotConfigError
            If a required value is absent from both the environment and
            *overrides*, or a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "MOT_CLIENT_ID": "client_id",
            "MOT_CLIENT_SECRET": "client_secret",
            "MOT_API_KEY": "api_key",
            "MOT_TOKEN_URL": "token_url",
            "MOT_SCOPE_URL": "scope_url",
            "MOT_BASE_URL": "base_url",
            "MOT_VEHICLE_PATH": "vehicle_path",
        }
        config_kwargs: dict[str, Any] = {name: "" for name in _REQUIRED_FIELDS}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("MOT_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise MotConfigError(f"MOT_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        origins_env = env.get("MOT_CORS_ORIGINS")
        if origins_env is not None:
            config_kwargs["cors_origins"] = tuple(o.strip() for o in origins_env.split(",") if o.strip())

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
