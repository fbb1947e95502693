# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authorization strategies applied to built requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import httpx

AUTHORIZATION_HEADER = "Authorization"


@dataclass(frozen=True)
class NoAuth:
    pass


@dataclass(frozen=True)
class BasicAuth:
    """Basic credentials. `value` is sent as-is; callers pre-encode it."""

    value: str


@dataclass(frozen=True)
class BearerAuth:
    token: str


AuthType = Union[NoAuth, BasicAuth, BearerAuth]

NO_AUTH = NoAuth()


def authorize(headers: httpx.Headers, auth: AuthType) -> None:
    """Set the Authorization header for `auth`, replacing any existing value."""
    if isinstance(auth, NoAuth):
        return
    if isinstance(auth, BasicAuth):
        headers[AUTHORIZATION_HEADER] = f"Basic {_credential(auth.value)}"
    elif isinstance(auth, BearerAuth):
        headers[AUTHORIZATION_HEADER] = f"Bearer {_credential(auth.token)}"
    else:
        raise TypeError(f"Unsupported authorization strategy: {type(auth).__name__}")


def _credential(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Credential must be a string, got {type(value).__name__}")
    if any(ch in value for ch in "\r\n\0"):
        raise ValueError("Credential contains characters not allowed in a header value")
    return value


__all__ = [
    "AUTHORIZATION_HEADER",
    "AuthType",
    "BasicAuth",
    "BearerAuth",
    "NO_AUTH",
    "NoAuth",
    "authorize",
]
