# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request construction: URL resolution, fixed headers, authorization and payload attachment.

Nothing here touches the network; every failure is raised before dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from ..errors import InvalidURL, Stage, translate_exception
from .auth import AUTHORIZATION_HEADER, NO_AUTH, AuthType, authorize
from .codec import JsonCodec, default_codec
from .models import Endpoint, HttpRequest, QueryItem

logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = "Content-Type"
JSON_CONTENT_TYPE = "application/json"


def encode_query(items: Iterable[QueryItem]) -> str:
    """Percent-encode query items in order; a None value yields a bare name."""
    parts: list[str] = []
    for name, value in items:
        encoded = quote(str(name), safe="")
        if value is not None:
            encoded = f"{encoded}={quote(str(value), safe='')}"
        parts.append(encoded)
    return "&".join(parts)


def make_url(endpoint: Endpoint) -> str:
    """
    Resolve an endpoint's URL template and query items into an absolute URL.

    Supplied query items replace any query string already present on the template.
    Raises InvalidURL when the result is not a syntactically valid absolute URL.
    """
    template = endpoint.url
    if not template:
        raise InvalidURL("Endpoint URL is empty")

    try:
        parts = urlsplit(template)
    except ValueError as exc:
        raise InvalidURL(f"{exc}: {template!r}") from exc
    if not parts.scheme or not parts.netloc:
        raise InvalidURL(f"Endpoint URL is not absolute: {template!r}")

    query = encode_query(endpoint.query_items) if endpoint.query_items else parts.query
    raw = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidURL(f"{exc}: {template!r}") from exc
    if not url.host:
        raise InvalidURL(f"Endpoint URL has no host: {template!r}")
    return str(url)


def build_request(
    endpoint: Endpoint,
    auth: AuthType = NO_AUTH,
    payload: Any = None,
    *,
    codec: JsonCodec | None = None,
) -> HttpRequest:
    """Build a request for `endpoint`, authorized with `auth`, carrying `payload` as JSON when given."""
    request = HttpRequest(url=make_url(endpoint), method=endpoint.method.value, timeout=None)
    request.headers[CONTENT_TYPE_HEADER] = JSON_CONTENT_TYPE

    try:
        authorize(request.headers, auth)
    except (TypeError, ValueError) as exc:
        raise translate_exception(exc, Stage.BUILD) from exc

    if payload is not None:
        request.body = (codec or default_codec).encode(payload)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Built %s %s headers=%s body_bytes=%d",
            request.method,
            request.url,
            redact_headers(request.headers),
            len(request.body or b""),
        )
    return request


def redact_headers(headers: httpx.Headers) -> dict[str, str]:
    """Return a loggable copy of `headers` with credentials masked."""
    out = dict(headers.items())
    for key in out:
        if key.lower() == AUTHORIZATION_HEADER.lower():
            scheme, _, _ = out[key].partition(" ")
            out[key] = f"{scheme} ***"
    return out


__all__ = [
    "CONTENT_TYPE_HEADER",
    "JSON_CONTENT_TYPE",
    "build_request",
    "encode_query",
    "make_url",
    "redact_headers",
]
