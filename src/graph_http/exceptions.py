"""Failures raised by the default fetch clients.

The retrying clients never wrap these: whatever a fetch client raises is what
the caller sees. ``GraphHTTPError.status_code`` is the field the retry loop
inspects.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx


class GraphError(Exception):
    """Base exception for graph-http failures."""


class GraphHTTPError(GraphError):
    """A response outside the 1xx-3xx range.

    ``code`` and ``message`` come from the Graph error envelope
    ``{"error": {"code": ..., "message": ..., "innerError": {...}}}`` when the
    body has one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        code: str | None = None,
        request_id: str | None = None,
        body: Any = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.request_id = request_id
        self.body = body
        self.response = response

    def __str__(self) -> str:
        if self.code:
            return f"{self.status_code} {self.code}: {self.message}"
        return f"{self.status_code}: {self.message}"

    @classmethod
    def from_response(cls, response: httpx.Response) -> "GraphHTTPError":
        """Build the error for ``response``, picking the subclass by status."""
        body = _read_body(response)
        message = response.reason_phrase or "request failed"
        code = None
        inner: Mapping[str, Any] = {}

        error = body.get("error") if isinstance(body, Mapping) else None
        if isinstance(error, Mapping):
            message = error.get("message") or message
            code = error.get("code")
            inner = error.get("innerError") or error.get("innererror") or {}
        elif isinstance(error, str):
            message = error
        elif isinstance(body, str) and body:
            message = body

        request_id = (
            response.headers.get("request-id")
            or response.headers.get("client-request-id")
            or (inner.get("request-id") if isinstance(inner, Mapping) else None)
        )
        error_cls = _STATUS_ERRORS.get(response.status_code, GraphHTTPError)
        return error_cls(
            str(message),
            status_code=response.status_code,
            code=code if isinstance(code, str) else None,
            request_id=request_id,
            body=body,
            response=response,
        )


class GraphAuthError(GraphHTTPError):
    """401 or 403."""


class GraphThrottledError(GraphHTTPError):
    """429; the service is throttling this caller."""


class GraphTransportError(GraphError):
    """No response was received. The httpx exception is chained as ``__cause__``."""


class GraphNetworkError(GraphTransportError):
    pass


class GraphTimeoutError(GraphTransportError):
    pass


_STATUS_ERRORS: dict[int, type[GraphHTTPError]] = {
    401: GraphAuthError,
    403: GraphAuthError,
    429: GraphThrottledError,
}


def _read_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    if "json" in response.headers.get("content-type", "").lower():
        try:
            return response.json()
        except ValueError:
            pass
    return response.text
