# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio

import pytest
from pydantic import BaseModel

from wirecall.errors import DecodingFailed, InvalidURL, RequestError, TransportFailed
from wirecall.http.adapters import StubHttpClient
from wirecall.http.executor import RequestExecutor
from wirecall.http.models import Endpoint, HttpMethod, HttpResponse, ResponseMetadata
from wirecall.http.stream import RequestStream

ITEMS_URL = "https://api.example.com/items"
ITEMS = Endpoint(url=ITEMS_URL)


class Item(BaseModel):
    id: str
    name: str


def ok(body: bytes, status: int = 200) -> HttpResponse:
    return HttpResponse(ok=True, metadata=ResponseMetadata(status_code=status, url=ITEMS_URL), content=body)


class Recorder:
    def __init__(self):
        self.events: list[tuple[str, object]] = []

    def on_value(self, value):
        self.events.append(("value", value))

    def on_error(self, error):
        self.events.append(("error", error))

    def on_complete(self):
        self.events.append(("complete", None))


@pytest.mark.asyncio
async def test_subscribe_delivers_value_then_completion():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')})
    recorder = Recorder()
    stream = RequestExecutor(client).request_stream(ITEMS, response=Item)
    assert client.requests == []

    subscription = stream.subscribe(recorder.on_value, recorder.on_error, recorder.on_complete)
    await subscription.wait()

    assert recorder.events == [("value", Item(id="1", name="Widget")), ("complete", None)]
    assert subscription.done is True
    assert len(client.requests) == 1


@pytest.mark.asyncio
async def test_decoding_failure_is_single_terminal_error():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":1}')})
    recorder = Recorder()
    subscription = RequestExecutor(client).request_stream(ITEMS, response=Item).subscribe(
        recorder.on_value, recorder.on_error, recorder.on_complete
    )
    await subscription.wait()

    assert len(recorder.events) == 1
    kind, error = recorder.events[0]
    assert kind == "error"
    assert isinstance(error, DecodingFailed)


@pytest.mark.asyncio
async def test_build_failure_arrives_as_stream_error():
    client = StubHttpClient()
    recorder = Recorder()
    stream = RequestExecutor(client).request_stream(Endpoint(url=""), response=Item)
    await stream.subscribe(recorder.on_value, recorder.on_error, recorder.on_complete).wait()

    assert [kind for kind, _ in recorder.events] == ["error"]
    assert isinstance(recorder.events[0][1], InvalidURL)
    assert client.requests == []


@pytest.mark.asyncio
async def test_cancel_before_response_delivers_nothing_and_aborts():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')}, delay=10)
    recorder = Recorder()
    subscription = RequestExecutor(client).request_stream(ITEMS, response=Item).subscribe(
        recorder.on_value, recorder.on_error, recorder.on_complete
    )
    await asyncio.sleep(0)
    assert len(client.requests) == 1

    subscription.cancel()
    await subscription.wait()

    assert subscription.cancelled is True
    assert recorder.events == []
    assert client.cancelled == client.requests


@pytest.mark.asyncio
async def test_cancel_after_completion_is_noop():
    client = StubHttpClient({ITEMS_URL: ok(b"", status=204)})
    recorder = Recorder()
    subscription = RequestExecutor(client).request_stream(
        Endpoint(url=ITEMS_URL, method=HttpMethod.DELETE)
    ).subscribe(recorder.on_value, recorder.on_error, recorder.on_complete)
    await subscription.wait()

    subscription.cancel()
    await subscription.wait()

    assert subscription.cancelled is False
    assert [kind for kind, _ in recorder.events] == ["value", "complete"]
    assert recorder.events[0][1].status_code == 204


@pytest.mark.asyncio
async def test_cancelling_the_waiter_propagates_even_if_subscription_is_cancelled():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')}, delay=10)
    subscription = RequestExecutor(client).request_stream(ITEMS, response=Item).subscribe(lambda _: None)
    waiter = asyncio.get_running_loop().create_task(subscription.wait())
    await asyncio.sleep(0)

    subscription.cancel()
    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert waiter.cancelled() is True

    await subscription.wait()
    assert subscription.cancelled is True


@pytest.mark.asyncio
async def test_cancelling_the_waiter_leaves_subscription_running():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')}, delay=0.01)
    recorder = Recorder()
    subscription = RequestExecutor(client).request_stream(ITEMS, response=Item).subscribe(
        recorder.on_value, recorder.on_error, recorder.on_complete
    )
    waiter = asyncio.get_running_loop().create_task(subscription.wait())
    await asyncio.sleep(0)

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    await subscription.wait()
    assert recorder.events == [("value", Item(id="1", name="Widget")), ("complete", None)]


@pytest.mark.asyncio
async def test_each_subscription_runs_its_own_request():
    client = StubHttpClient({ITEMS_URL: ok(b"{}")})
    stream = RequestExecutor(client).request_stream(ITEMS, payload={"a": 1}, response=ResponseMetadata)
    first = stream.subscribe(lambda _: None)
    second = stream.subscribe(lambda _: None)
    await first.wait()
    await second.wait()
    assert len(client.requests) == 2
    assert client.requests[0] is not client.requests[1]


@pytest.mark.asyncio
async def test_async_iteration_yields_single_value():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')})
    values = [item async for item in RequestExecutor(client).request_stream(ITEMS, response=Item)]
    assert values == [Item(id="1", name="Widget")]


@pytest.mark.asyncio
async def test_async_iteration_raises_terminal_error():
    client = StubHttpClient()
    with pytest.raises(TransportFailed):
        async for _ in RequestExecutor(client).request_stream(ITEMS, response=Item):
            pass


@pytest.mark.asyncio
async def test_map_transforms_value():
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')})
    names = RequestExecutor(client).request_stream(ITEMS, response=Item).map(lambda item: item.name)
    assert [name async for name in names] == ["Widget"]


@pytest.mark.asyncio
async def test_foreign_exceptions_are_translated():
    async def boom():
        raise RuntimeError("socket closed")

    recorder = Recorder()
    await RequestStream(boom).subscribe(recorder.on_value, recorder.on_error).wait()
    kind, error = recorder.events[0]
    assert kind == "error"
    assert isinstance(error, TransportFailed)
    assert isinstance(error, RequestError)
    assert error.reason == "socket closed"


@pytest.mark.asyncio
async def test_failing_callback_does_not_produce_second_event(caplog):
    client = StubHttpClient({ITEMS_URL: ok(b'{"id":"1","name":"Widget"}')})
    recorder = Recorder()

    def explode(_value):
        raise ValueError("subscriber bug")

    await RequestExecutor(client).request_stream(ITEMS, response=Item).subscribe(
        explode, recorder.on_error, recorder.on_complete
    ).wait()

    assert recorder.events == [("complete", None)]
    assert "subscriber bug" in caplog.text


def test_subscribe_requires_running_loop():
    stream = RequestStream(lambda: asyncio.sleep(0))
    with pytest.raises(RuntimeError):
        stream.subscribe(lambda _: None)
