# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cancelable single-event streams over request coroutines.

A RequestStream is cold: nothing happens until it is subscribed to or iterated, and every
subscription runs its own request. Each run delivers exactly one terminal event, either
a value followed by completion or a RequestError.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Generic, TypeVar

from ..errors import RequestError, Stage, translate_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

# Strong references to running subscriptions; the event loop only keeps weak ones.
_inflight: set[asyncio.Task[None]] = set()


class Subscription:
    """Handle to a running stream subscription."""

    def __init__(self, task: asyncio.Task[None]):
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    def cancel(self) -> None:
        """Abort the in-flight request. No callback fires afterwards; a no-op once finished."""
        if not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """
        Wait until the subscription has delivered its terminal event or been cancelled.

        Cancelling the subscription ends the wait normally; cancelling the waiter raises
        CancelledError in the waiter and leaves the subscription running.
        """
        await asyncio.wait({self._task})


class RequestStream(Generic[T]):
    """A stream producing at most one value or one RequestError, then completing."""

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory

    async def _resolve(self) -> T:
        try:
            return await self._factory()
        except RequestError:
            raise
        except Exception as exc:
            raise translate_exception(exc, Stage.TRANSPORT) from exc

    def subscribe(
        self,
        on_value: Callable[[T], object],
        on_error: Callable[[RequestError], object] | None = None,
        on_complete: Callable[[], object] | None = None,
    ) -> Subscription:
        """
        Start the request on the running event loop and deliver its outcome to the callbacks.

        Must be called from within a running loop.
        """
        task = asyncio.get_running_loop().create_task(self._deliver(on_value, on_error, on_complete))
        _inflight.add(task)
        task.add_done_callback(_inflight.discard)
        return Subscription(task)

    async def _deliver(
        self,
        on_value: Callable[[T], object],
        on_error: Callable[[RequestError], object] | None,
        on_complete: Callable[[], object] | None,
    ) -> None:
        try:
            value = await self._resolve()
        except RequestError as exc:
            if on_error is None:
                logger.debug("Unhandled stream failure: %r", exc)
                return
            _invoke(on_error, exc)
            return
        _invoke(on_value, value)
        if on_complete is not None:
            _invoke(on_complete)

    def map(self, transform: Callable[[T], U]) -> "RequestStream[U]":
        """Return a stream whose value is `transform` applied to this stream's value."""

        async def mapped() -> U:
            return transform(await self._resolve())

        return RequestStream(mapped)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        yield await self._resolve()


def _invoke(callback: Callable[..., object], *args: object) -> None:
    try:
        callback(*args)
    except Exception:
        logger.exception("Stream subscriber callback %r failed", callback)


__all__ = ["RequestStream", "Subscription"]
