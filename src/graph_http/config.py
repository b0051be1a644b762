"""Explicit client configuration, passed to the Graph HTTP clients."""

from __future__ import annotations

import os
from types import MappingProxyType
from typing import Any, Callable, Mapping
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .transport import AsyncHttpxFetchClient, HttpxFetchClient


BASE_URL_ENV_VAR = "GRAPH_HTTP_BASE_URL"
ACCESS_TOKEN_ENV_VAR = "GRAPH_HTTP_ACCESS_TOKEN"

_LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class GraphConfig(BaseModel):
    """Default headers, transport factories and connection settings.

    The configuration is read once when a client is constructed; build a new
    client to pick up a different configuration. ``headers`` is exposed as a
    read-only mapping.
    """

    model_config = ConfigDict(frozen=True)

    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    base_url: str | None = None
    access_token: str | None = None
    timeout: float = 30.0
    follow_redirects: bool = True
    allow_http: bool = False
    fetch_client_factory: Callable[..., Any] = HttpxFetchClient
    async_fetch_client_factory: Callable[..., Any] = AsyncHttpxFetchClient

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_headers(cls, value: Any) -> dict[str, str]:
        if not value:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("headers must be a mapping")
        return {str(key): str(item) for key, item in value.items()}

    @field_validator("headers")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than 0")
        return float(value)

    @model_validator(mode="after")
    def _check_base_url(self) -> "GraphConfig":
        if self.base_url is None:
            return self
        parsed = urlparse(self.base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {self.base_url!r}")
        # plain http only reaches loopback unless explicitly allowed
        if parsed.scheme == "http" and not self.allow_http and (parsed.hostname or "") not in _LOOPBACK_HOSTS:
            raise ValueError("base_url uses http; pass allow_http=True to permit it")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "GraphConfig":
        """Build a configuration from environment variables plus keyword overrides."""
        values: dict[str, Any] = {}
        base_url = os.getenv(BASE_URL_ENV_VAR)
        if base_url:
            values["base_url"] = base_url
        token = os.getenv(ACCESS_TOKEN_ENV_VAR)
        if token:
            values["access_token"] = token
        values.update(overrides)
        return cls(**values)

    def default_headers(self) -> dict[str, str]:
        merged = dict(self.headers)
        has_authorization = any(key.lower() == "authorization" for key in merged)
        if self.access_token and not has_authorization:
            merged["Authorization"] = f"Bearer {self.access_token}"
        return merged
