"""Synchronous and asynchronous Graph HTTP clients with retry on transient failures."""

from __future__ import annotations

import asyncio
import dataclasses
import time
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from ._version import __version__
from .config import GraphConfig
from .log import get_logger, redact_headers
from .request_options import RequestOptions
from .transport import AsyncFetchClient, FetchClient


logger = get_logger(__name__)

SDK_VERSION = f"graph-http-python/{__version__}"


@dataclass
class RetryContext:
    """Mutable state for the attempts of one logical request."""

    attempts: int = 0
    delay: float = 0.1
    retry_count: int = 7


def merge_headers(target: httpx.Headers, source: Mapping[str, str] | None) -> None:
    """Copy ``source`` into ``target``, replacing values for existing names."""
    if not source:
        return
    for key, value in source.items():
        target[str(key)] = str(value)


def failure_status(exc: BaseException) -> int | None:
    """Return the HTTP status carried by a transport failure, if any."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status
    return None


class _BaseGraphHttpClient:
    retry_count = 7
    retry_initial_delay = 0.1
    retryable_status_codes = frozenset({429, 503, 504})

    def __init__(self, config: GraphConfig | None = None) -> None:
        self.config = config or GraphConfig()
        self._default_headers = self.config.default_headers()

    def _prepare(self, options: RequestOptions | None) -> RequestOptions:
        options = options or RequestOptions()
        headers = httpx.Headers()
        # globals first so that per-call headers override them
        merge_headers(headers, self._default_headers)
        merge_headers(headers, options.headers)
        if "Content-Type" not in headers:
            headers["Content-Type"] = "application/json"
        if "SdkVersion" not in headers:
            headers["SdkVersion"] = SDK_VERSION
        return dataclasses.replace(options, headers=headers)

    def _prepare_raw(self, url: str, options: RequestOptions | None) -> tuple[str, RequestOptions]:
        options = options or RequestOptions()
        raw_headers = httpx.Headers()
        merge_headers(raw_headers, options.headers)
        return self._resolve_url(url), dataclasses.replace(options, headers=raw_headers)

    def _resolve_url(self, url: str) -> str:
        # without a base_url the fetch client gets the url exactly as given
        if not self.config.base_url or httpx.URL(url).is_absolute_url:
            return url
        return f"{self.config.base_url}/{url.lstrip('/')}"

    def _new_retry_context(self) -> RetryContext:
        return RetryContext(delay=self.retry_initial_delay, retry_count=self.retry_count)

    def _next_delay(self, ctx: RetryContext, exc: Exception, url: str) -> float | None:
        """Advance ``ctx`` after a failure; return the wait before the next attempt or None to give up."""
        status = failure_status(exc)
        if status not in self.retryable_status_codes:
            logger.debug("request_failed", url=url, status_code=status, attempts=ctx.attempts + 1)
            return None
        if ctx.attempts >= ctx.retry_count:
            logger.error("request_retries_exhausted", url=url, status_code=status, attempts=ctx.attempts + 1)
            return None

        delay = ctx.delay
        ctx.delay *= 2
        ctx.attempts += 1
        logger.warning(
            "request_retry_scheduled",
            url=url,
            status_code=status,
            attempt=ctx.attempts,
            delay_seconds=delay,
        )
        return delay

    @staticmethod
    def _log_dispatch(url: str, options: RequestOptions, ctx: RetryContext) -> None:
        logger.debug(
            "request_dispatched",
            method=options.method,
            url=url,
            attempt=ctx.attempts + 1,
            headers=redact_headers(options.headers or {}),
        )


class GraphHttpClient(_BaseGraphHttpClient):
    """Synchronous client."""

    def __init__(self, config: GraphConfig | None = None, *, fetch_client: FetchClient | None = None) -> None:
        super().__init__(config)
        self._impl = fetch_client or self.config.fetch_client_factory(self.config)

    def __enter__(self) -> "GraphHttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._impl.close()

    def fetch(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return self.fetch_raw(url, self._prepare(options))

    def fetch_raw(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        url, options = self._prepare_raw(url, options)
        ctx = self._new_retry_context()
        while True:
            self._log_dispatch(url, options, ctx)
            try:
                return self._impl.fetch(url, options)
            except Exception as exc:
                delay = self._next_delay(ctx, exc, url)
                if delay is None:
                    raise
            time.sleep(delay)

    def get(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return self.fetch(url, _with_method(options, "GET"))

    def post(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return self.fetch(url, _with_method(options, "POST"))

    def put(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return self.fetch(url, _with_method(options, "PUT"))

    def patch(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return self.fetch(url, _with_method(options, "PATCH"))

    def delete(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return self.fetch(url, _with_method(options, "DELETE"))


class AsyncGraphHttpClient(_BaseGraphHttpClient):
    """Asynchronous client."""

    def __init__(
        self,
        config: GraphConfig | None = None,
        *,
        fetch_client: AsyncFetchClient | None = None,
    ) -> None:
        super().__init__(config)
        self._impl = fetch_client or self.config.async_fetch_client_factory(self.config)

    async def __aenter__(self) -> "AsyncGraphHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._impl.aclose()

    async def fetch(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return await self.fetch_raw(url, self._prepare(options))

    async def fetch_raw(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        url, options = self._prepare_raw(url, options)
        ctx = self._new_retry_context()
        while True:
            self._log_dispatch(url, options, ctx)
            try:
                return await self._impl.fetch(url, options)
            except Exception as exc:
                delay = self._next_delay(ctx, exc, url)
                if delay is None:
                    raise
            await asyncio.sleep(delay)

    async def get(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return await self.fetch(url, _with_method(options, "GET"))

    async def post(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return await self.fetch(url, _with_method(options, "POST"))

    async def put(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return await self.fetch(url, _with_method(options, "PUT"))

    async def patch(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return await self.fetch(url, _with_method(options, "PATCH"))

    async def delete(self, url: str, options: RequestOptions | None = None) -> httpx.Response:
        return await self.fetch(url, _with_method(options, "DELETE"))


def _with_method(options: RequestOptions | None, method: str) -> RequestOptions:
    return dataclasses.replace(options or RequestOptions(), method=method)
