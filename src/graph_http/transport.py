"""Default httpx-backed fetch clients.

A fetch client performs exactly one HTTP exchange. A response with status 400
or above is raised as a status-coded :class:`~graph_http.exceptions.GraphHTTPError`
so that the retrying clients can decide whether to try again.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Mapping, Protocol

import httpx

from .exceptions import GraphHTTPError, GraphNetworkError, GraphTimeoutError
from .request_options import RequestOptions

if TYPE_CHECKING:
    from .config import GraphConfig


DEFAULT_TIMEOUT = 30.0


class FetchClient(Protocol):
    def fetch(self, url: str, options: RequestOptions) -> httpx.Response: ...

    def close(self) -> None: ...


class AsyncFetchClient(Protocol):
    async def fetch(self, url: str, options: RequestOptions) -> httpx.Response: ...

    async def aclose(self) -> None: ...


def _coerce_query_params(query: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if query is None:
        return None
    normalized: dict[str, Any] = {}
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            normalized[key] = ["" if v is None else v for v in value]
            continue
        if isinstance(value, datetime):
            normalized[key] = value.isoformat()
            continue
        normalized[key] = value
    return normalized or None


def raise_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    raise GraphHTTPError.from_response(response)


class _BaseHttpxFetchClient:
    def __init__(self, config: GraphConfig | None = None) -> None:
        self.timeout = config.timeout if config is not None else DEFAULT_TIMEOUT
        self._client_kwargs = {
            "timeout": self.timeout,
            "follow_redirects": config.follow_redirects if config is not None else True,
            "trust_env": False,
        }

    def _request_kwargs(self, url: str, options: RequestOptions) -> dict[str, Any]:
        return {
            "method": options.method.upper(),
            "url": url,
            "headers": options.headers,
            "params": _coerce_query_params(options.query),
            "content": options.content,
            "json": options.json,
            "timeout": options.timeout if options.timeout is not None else self.timeout,
        }


class HttpxFetchClient(_BaseHttpxFetchClient):
    """Synchronous fetch client."""

    def __init__(self, config: GraphConfig | None = None, *, httpx_client: httpx.Client | None = None) -> None:
        super().__init__(config)
        self._httpx = httpx_client or httpx.Client(**self._client_kwargs)

    def close(self) -> None:
        self._httpx.close()

    def fetch(self, url: str, options: RequestOptions) -> httpx.Response:
        try:
            response = self._httpx.request(**self._request_kwargs(url, options))
        except httpx.TimeoutException as exc:
            raise GraphTimeoutError(f"{options.method.upper()} {url} timed out") from exc
        except httpx.NetworkError as exc:
            raise GraphNetworkError(f"{options.method.upper()} {url} failed: {exc}") from exc
        raise_for_status(response)
        return response


class AsyncHttpxFetchClient(_BaseHttpxFetchClient):
    """Asynchronous fetch client."""

    def __init__(
        self,
        config: GraphConfig | None = None,
        *,
        httpx_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config)
        self._httpx = httpx_client or httpx.AsyncClient(**self._client_kwargs)

    async def aclose(self) -> None:
        await self._httpx.aclose()

    async def fetch(self, url: str, options: RequestOptions) -> httpx.Response:
        try:
            response = await self._httpx.request(**self._request_kwargs(url, options))
        except httpx.TimeoutException as exc:
            raise GraphTimeoutError(f"{options.method.upper()} {url} timed out") from exc
        except httpx.NetworkError as exc:
            raise GraphNetworkError(f"{options.method.upper()} {url} failed: {exc}") from exc
        raise_for_status(response)
        return response
