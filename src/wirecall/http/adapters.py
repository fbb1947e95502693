# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import asyncio

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses are keyed by full request URL. A non-zero `delay` keeps each request in flight
    for that many seconds so callers can observe cancellation; aborted requests are recorded
    in `cancelled`.
    """

    def __init__(self, responses: dict[str, HttpResponse] | None = None, *, delay: float = 0.0):
        self._responses = responses or {}
        self.delay = delay
        self.requests: list[HttpRequest] = []
        self.cancelled: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if self.delay > 0:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled.append(request)
                raise
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(ok=False, error_message="No stubbed response configured")

    async def aclose(self) -> None:
        self.closed = True


__all__ = ["StubHttpClient"]
