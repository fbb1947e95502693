# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception translation.

Every failure in the request pipeline surfaces as one of four `RequestError` kinds.
Native httpx/pydantic exceptions are only ever attached as `__cause__`.
"""

from __future__ import annotations

import logging
import socket
import ssl as ssl_module
from enum import Enum

import httpx
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    INVALID_URL = "INVALID_URL"
    ENCODING_FAILED = "ENCODING_FAILED"
    DECODING_FAILED = "DECODING_FAILED"
    TRANSPORT_FAILED = "TRANSPORT_FAILED"


class TransportErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class Stage(str, Enum):
    """Pipeline stage a failure originated from."""

    BUILD = "BUILD"
    ENCODE = "ENCODE"
    TRANSPORT = "TRANSPORT"
    DECODE = "DECODE"


class RequestError(Exception):
    """Base class for every failure surfaced by the request layer."""

    kind: ErrorKind

    def __init__(self, reason: str = ""):
        super().__init__(reason or self.kind.value)
        self.reason = reason

    def __repr__(self) -> str:
        return f"{type(self).__name__}(reason={self.reason!r})"


class InvalidURL(RequestError):
    kind = ErrorKind.INVALID_URL


class EncodingFailed(RequestError):
    kind = ErrorKind.ENCODING_FAILED


class DecodingFailed(RequestError):
    kind = ErrorKind.DECODING_FAILED


class TransportFailed(RequestError):
    kind = ErrorKind.TRANSPORT_FAILED

    def __init__(
        self,
        reason: str = "",
        category: TransportErrorCategory = TransportErrorCategory.UNKNOWN_ERROR,
    ):
        super().__init__(reason)
        self.category = category

    def __repr__(self) -> str:
        return f"TransportFailed(reason={self.reason!r}, category={self.category.value})"


def categorize_exception(exc: BaseException) -> TransportErrorCategory:
    """
    Map Python/httpx exceptions to TransportErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError)):
        return TransportErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return TransportErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return TransportErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        cause = exc.__cause__ or exc.__context__
        if cause is not None and cause is not exc:
            nested = categorize_exception(cause)
            if nested is not TransportErrorCategory.UNKNOWN_ERROR:
                return nested
        return TransportErrorCategory.CONNECTION_ERROR

    if isinstance(exc, ConnectionError):
        return TransportErrorCategory.CONNECTION_ERROR

    return TransportErrorCategory.UNKNOWN_ERROR


def _describe(exc: BaseException) -> str:
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors(include_url=False):
            loc = ".".join(str(item) for item in err.get("loc", ())) or "<root>"
            parts.append(f"{loc}: {err.get('msg')}")
        return "; ".join(parts) or str(exc)
    return str(exc) or type(exc).__name__


def translate_exception(exc: BaseException, stage: Stage) -> RequestError:
    """
    Normalize an exception raised at `stage` into one of the four request error kinds.

    RequestErrors pass through unchanged so inner stages keep their classification.
    """
    if isinstance(exc, RequestError):
        return exc

    reason = _describe(exc)
    error: RequestError
    if stage is Stage.BUILD:
        if isinstance(exc, httpx.InvalidURL):
            error = InvalidURL(reason)
        else:
            error = TransportFailed(reason)
    elif stage is Stage.ENCODE:
        error = EncodingFailed(reason)
    elif stage is Stage.DECODE:
        error = DecodingFailed(reason)
    else:
        error = TransportFailed(reason, categorize_exception(exc))
    error.__cause__ = exc
    logger.debug("Translated %s at %s stage into %r", type(exc).__name__, stage.value, error)
    return error


__all__ = [
    "DecodingFailed",
    "EncodingFailed",
    "ErrorKind",
    "InvalidURL",
    "RequestError",
    "Stage",
    "TransportErrorCategory",
    "TransportFailed",
    "categorize_exception",
    "translate_exception",
]
