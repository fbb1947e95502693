# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse, ResponseMetadata

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """Asynchronous httpx client wrapper, safe to share between concurrent requests."""

    def __init__(self, settings: HttpSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    async def send(self, request: HttpRequest) -> HttpResponse:
        headers = httpx.Headers(request.headers)
        headers.setdefault("User-Agent", self.settings.user_agent)

        try:
            timeout = request.timeout if request.timeout is not None else self.settings.timeout
            resp = await self._client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
            )
            return HttpResponse(
                ok=True,
                metadata=ResponseMetadata.from_httpx(resp),
                content=resp.content,
            )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.debug("%s %s failed: %s (%s)", request.method, request.url, exc, category.value)
            return HttpResponse(
                ok=False,
                error_category=category.value,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
            )

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["HttpxClient"]
