# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factories."""

from __future__ import annotations

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """Minimal protocol for issuing HTTP requests."""

    async def send(self, request: HttpRequest) -> HttpResponse: ...

    async def aclose(self) -> None:  # pragma: no cover - optional for adapters
        ...


_shared_client: HttpClient | None = None


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings())


def get_default_http_client() -> HttpClient:
    """Return the process-wide shared client, creating it on first use."""
    global _shared_client
    if _shared_client is None:
        _shared_client = create_default_http_client()
    return _shared_client


async def close_default_http_client() -> None:
    """Close and forget the shared client; the next call to get_default_http_client builds a new one."""
    global _shared_client
    client, _shared_client = _shared_client, None
    if client is not None:
        await client.aclose()


__all__ = [
    "HttpClient",
    "close_default_http_client",
    "create_default_http_client",
    "get_default_http_client",
]
