# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across wirecall."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import httpx

QueryItem = tuple[str, str | None]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class Endpoint:
    """
    Immutable description of a resource: URL template, ordered query items and method.

    `query_items` accepts any iterable of `(name, value)` pairs or a mapping; it is frozen
    into a tuple so the descriptor can be shared freely between calls.
    """

    url: str
    query_items: tuple[QueryItem, ...] = ()
    method: HttpMethod = HttpMethod.GET

    def __post_init__(self) -> None:
        items: Iterable[QueryItem] | Mapping[str, str | None] = self.query_items or ()
        if isinstance(items, Mapping):
            items = items.items()
        object.__setattr__(self, "query_items", tuple((str(name), value) for name, value in items))
        object.__setattr__(self, "method", HttpMethod(self.method))


@dataclass
class HttpRequest:
    """Fully built request consumed by HttpClient implementations."""

    url: str
    method: str = HttpMethod.GET.value
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes | None = None
    timeout: float | None = None


@dataclass(frozen=True)
class ResponseMetadata:
    """Status metadata of an HTTP response, returned for raw and bodiless calls."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    url: str | None = None
    reason_phrase: str = ""
    http_version: str = "HTTP/1.1"

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ResponseMetadata":
        return cls(
            status_code=response.status_code,
            headers=httpx.Headers(response.headers),
            url=str(response.url),
            reason_phrase=response.reason_phrase,
            http_version=response.http_version,
        )


@dataclass
class HttpResponse:
    """Response envelope: status metadata plus raw body, or the transport failure details."""

    ok: bool
    metadata: ResponseMetadata | None = None
    content: bytes = b""
    error_category: str | None = None
    error_message: str | None = None
    error_type: str | None = None

    @property
    def status_code(self) -> int | None:
        return self.metadata.status_code if self.metadata is not None else None


__all__ = [
    "Endpoint",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "QueryItem",
    "ResponseMetadata",
]
