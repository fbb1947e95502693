# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
wirecall package entrypoint.

A generic HTTP request layer for domain clients: endpoint descriptors and an
authorization strategy go in, typed responses or status metadata come out, either
awaited or through a cancelable single-event stream. Transport is abstracted behind
an injectable client interface and every failure surfaces as one of four
RequestError kinds.
"""

from .config import HttpSettings, load_http_settings
from .errors import (
    DecodingFailed,
    EncodingFailed,
    ErrorKind,
    InvalidURL,
    RequestError,
    TransportErrorCategory,
    TransportFailed,
)
from .http import (
    NO_AUTH,
    AuthType,
    BasicAuth,
    BearerAuth,
    Endpoint,
    HttpClient,
    HttpMethod,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    NoAuth,
    RequestExecutor,
    RequestPerformer,
    RequestStream,
    ResponseMetadata,
    Subscription,
    build_request,
    create_default_http_client,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "NO_AUTH",
    "AuthType",
    "BasicAuth",
    "BearerAuth",
    "DecodingFailed",
    "EncodingFailed",
    "Endpoint",
    "ErrorKind",
    "HttpClient",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "InvalidURL",
    "NoAuth",
    "RequestError",
    "RequestExecutor",
    "RequestPerformer",
    "RequestStream",
    "ResponseMetadata",
    "Subscription",
    "TransportErrorCategory",
    "TransportFailed",
    "build_request",
    "create_default_http_client",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
