"""Per-request options passed to the Graph HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class RequestOptions:
    method: str = "GET"
    headers: Mapping[str, str] | None = None
    query: Mapping[str, object] | None = None
    content: str | bytes | None = None
    json: object | None = None
    timeout: float | None = None
