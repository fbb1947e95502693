# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request layer exports."""

from .adapters import StubHttpClient
from .auth import NO_AUTH, AuthType, BasicAuth, BearerAuth, NoAuth
from .builder import build_request, make_url
from .client import HttpClient, close_default_http_client, create_default_http_client, get_default_http_client
from .codec import JsonCodec, decode, encode
from .executor import RequestExecutor, RequestPerformer
from .httpx_client import HttpxClient
from .models import Endpoint, HttpMethod, HttpRequest, HttpResponse, ResponseMetadata
from .stream import RequestStream, Subscription

__all__ = [
    "NO_AUTH",
    "AuthType",
    "BasicAuth",
    "BearerAuth",
    "Endpoint",
    "HttpClient",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "JsonCodec",
    "NoAuth",
    "RequestExecutor",
    "RequestPerformer",
    "RequestStream",
    "ResponseMetadata",
    "StubHttpClient",
    "Subscription",
    "build_request",
    "close_default_http_client",
    "create_default_http_client",
    "decode",
    "encode",
    "get_default_http_client",
    "make_url",
]
