"""HTTP request layer with transient-failure retry, plus a pluggable logging facade."""

from ._version import __version__
from .client import AsyncGraphHttpClient, GraphHttpClient, RetryContext, merge_headers
from .config import GraphConfig
from .exceptions import (
    GraphAuthError,
    GraphError,
    GraphHTTPError,
    GraphNetworkError,
    GraphThrottledError,
    GraphTimeoutError,
    GraphTransportError,
)
from .listeners import ConsoleListener, FunctionListener, StructlogListener
from .log import get_logger, setup_logging
from .logger import LogEntry, Logger, LogLevel, LogListener
from .request_options import RequestOptions
from .transport import AsyncHttpxFetchClient, HttpxFetchClient

__all__ = [
    "AsyncGraphHttpClient",
    "AsyncHttpxFetchClient",
    "ConsoleListener",
    "FunctionListener",
    "GraphAuthError",
    "GraphConfig",
    "GraphError",
    "GraphHTTPError",
    "GraphHttpClient",
    "GraphNetworkError",
    "GraphThrottledError",
    "GraphTimeoutError",
    "GraphTransportError",
    "HttpxFetchClient",
    "LogEntry",
    "LogLevel",
    "LogListener",
    "Logger",
    "RequestOptions",
    "RetryContext",
    "StructlogListener",
    "get_logger",
    "merge_headers",
    "setup_logging",
    "__version__",
]
