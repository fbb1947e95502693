# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request execution in awaited and streaming mode.

Both modes share one pipeline: build_request -> HttpClient.send -> projection. The
`response` argument picks the projection:

- a type: the body is decoded into it
- ResponseMetadata: the status metadata is returned untouched
- None: nothing is expected back; the status metadata is returned as confirmation
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar, overload, runtime_checkable

from ..config import HttpSettings
from ..errors import RequestError, Stage, TransportErrorCategory, TransportFailed, translate_exception
from .auth import NO_AUTH, AuthType
from .builder import build_request
from .client import HttpClient, create_default_http_client, get_default_http_client
from .codec import JsonCodec, default_codec
from .models import Endpoint, HttpRequest, HttpResponse, ResponseMetadata
from .stream import RequestStream

logger = logging.getLogger(__name__)

R = TypeVar("R")


@runtime_checkable
class RequestPerformer(Protocol):
    """What domain clients depend on; RequestExecutor is the production implementation."""

    async def perform_request(
        self,
        endpoint: Endpoint,
        auth: AuthType = ...,
        payload: Any = ...,
        response: Any = ...,
    ) -> Any: ...

    def request_stream(
        self,
        endpoint: Endpoint,
        auth: AuthType = ...,
        payload: Any = ...,
        response: Any = ...,
    ) -> RequestStream[Any]: ...


class RequestExecutor:
    """
    Builds, dispatches and decodes requests for endpoint descriptors.

    Without an explicit client the process-wide shared client is used. Passing `settings`
    instead creates a dedicated client that this executor owns and closes in `aclose()`.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        settings: HttpSettings | None = None,
        codec: JsonCodec | None = None,
    ):
        self._owns_client = http_client is None and settings is not None
        if http_client is not None:
            self.http_client = http_client
        elif settings is not None:
            self.http_client = create_default_http_client(settings)
        else:
            self.http_client = get_default_http_client()
        self.codec = codec or default_codec

    async def __aenter__(self) -> "RequestExecutor":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    @overload
    async def perform_request(
        self,
        endpoint: Endpoint,
        auth: AuthType = ...,
        payload: Any = ...,
        response: None = ...,
    ) -> ResponseMetadata: ...

    @overload
    async def perform_request(
        self,
        endpoint: Endpoint,
        auth: AuthType = ...,
        payload: Any = ...,
        *,
        response: type[R],
    ) -> R: ...

    async def perform_request(
        self,
        endpoint: Endpoint,
        auth: AuthType = NO_AUTH,
        payload: Any = None,
        response: Any = None,
    ) -> Any:
        """Perform one request and return its projection; raises a RequestError on failure."""
        try:
            request = build_request(endpoint, auth, payload, codec=self.codec)
            return await self._execute(request, response)
        except RequestError as exc:
            logger.debug("%s %s failed: %r", endpoint.method.value, endpoint.url, exc)
            raise

    @overload
    def request_stream(
        self,
        endpoint: Endpoint,
        auth: AuthType = ...,
        payload: Any = ...,
        response: None = ...,
    ) -> RequestStream[ResponseMetadata]: ...

    @overload
    def request_stream(
        self,
        endpoint: Endpoint,
        auth: AuthType = ...,
        payload: Any = ...,
        *,
        response: type[R],
    ) -> RequestStream[R]: ...

    def request_stream(
        self,
        endpoint: Endpoint,
        auth: AuthType = NO_AUTH,
        payload: Any = None,
        response: Any = None,
    ) -> RequestStream[Any]:
        """
        Return a cold stream for the request. Each subscription builds and sends its own
        request; build failures arrive as the stream's terminal error.
        """
        return RequestStream(lambda: self.perform_request(endpoint, auth, payload, response))

    async def _execute(self, request: HttpRequest, response: Any) -> Any:
        envelope = await self._dispatch(request)
        return self._project(envelope, response)

    async def _dispatch(self, request: HttpRequest) -> HttpResponse:
        try:
            envelope = await self.http_client.send(request)
        except Exception as exc:  # noqa: BLE001
            raise translate_exception(exc, Stage.TRANSPORT) from exc

        if not isinstance(envelope, HttpResponse):
            raise TransportFailed(f"Transport returned {type(envelope).__name__}, not an HttpResponse")
        if not envelope.ok:
            raise TransportFailed(
                envelope.error_message or "Request failed",
                _transport_category(envelope.error_category),
            )
        return envelope

    def _project(self, envelope: HttpResponse, response: Any) -> Any:
        if response is None or response is ResponseMetadata:
            if envelope.metadata is None:
                raise TransportFailed("Response carried no HTTP status metadata")
            return envelope.metadata
        return self.codec.decode(envelope.content, response)


def _transport_category(value: str | None) -> TransportErrorCategory:
    try:
        return TransportErrorCategory(value)
    except ValueError:
        return TransportErrorCategory.UNKNOWN_ERROR


__all__ = ["RequestExecutor", "RequestPerformer"]
