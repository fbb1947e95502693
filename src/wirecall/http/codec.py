# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON codec for request payloads and typed responses.

Dates travel as ISO-8601 extended strings with a UTC offset (`2022-05-20T10:00:00Z`);
naive datetimes are taken to be UTC when encoding. Payloads are serialized in pydantic's
JSON mode, so a type's own JSON rules (field serializers, `ser_json_*` settings) apply.
"""

from __future__ import annotations

import dataclasses
import math
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, TypeVar, cast

from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..errors import Stage, translate_exception

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _prepare(value: Any) -> Any:
    """
    Stamp naive datetimes as UTC and reject non-finite floats, rebuilding only what changed.

    Returns `value` itself when nothing needed stamping.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite float {value!r} cannot be represented in JSON")
        return value
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, BaseModel):
        changes = _changed_attrs(value, type(value).model_fields)
        return value.model_copy(update=changes) if changes else value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        names = [f.name for f in dataclasses.fields(value) if f.init]
        changes = _changed_attrs(value, names)
        return dataclasses.replace(value, **changes) if changes else value
    if isinstance(value, dict):
        items = {key: _prepare(item) for key, item in value.items()}
        if all(items[key] is item for key, item in value.items()):
            return value
        return items
    if isinstance(value, (list, tuple, set, frozenset)):
        prepared = [_prepare(item) for item in value]
        if all(new is old for new, old in zip(prepared, value)):
            return value
        if isinstance(value, tuple) and hasattr(value, "_fields"):
            return type(value)(*prepared)
        return type(value)(prepared)
    return value


def _changed_attrs(obj: Any, names: Any) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for name in names:
        old = getattr(obj, name)
        new = _prepare(old)
        if new is not old:
            changes[name] = new
    return changes


class JsonCodec:
    """
    Serializes payloads to JSON bytes and validates JSON bytes into caller-supplied types.

    `decode(encode(v), type(v)) == v` holds for timezone-aware datetimes; a naive datetime
    comes back as the equivalent aware UTC value.
    """

    def encode(self, payload: Any) -> bytes:
        try:
            return _adapter(type(payload)).dump_json(_prepare(payload), by_alias=True)
        except (PydanticSchemaGenerationError, PydanticSerializationError, TypeError, ValueError) as exc:
            raise translate_exception(exc, Stage.ENCODE) from exc

    def decode(self, data: bytes | str, as_type: type[T]) -> T:
        try:
            return cast(T, _adapter(as_type).validate_json(data or b"null"))
        except (PydanticSchemaGenerationError, ValidationError, TypeError, ValueError) as exc:
            raise translate_exception(exc, Stage.DECODE) from exc


default_codec = JsonCodec()


def encode(payload: Any) -> bytes:
    return default_codec.encode(payload)


def decode(data: bytes | str, as_type: type[T]) -> T:
    return default_codec.decode(data, as_type)


__all__ = ["JsonCodec", "decode", "default_codec", "encode"]
