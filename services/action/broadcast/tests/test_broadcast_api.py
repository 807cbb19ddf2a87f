"""Transport tests for the broadcast WebSocket route."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Iterator

import pytest
from fastapi import APIRouter, WebSocketDisconnect
from fastapi.testclient import TestClient

from packages.beacon_shared.http import create_app
from services.action.broadcast import (
    BroadcastSettings,
    DefaultBroadcastChannel,
    SubscriberRegistry,
)
from services.action.broadcast.api import WebSocketSubscriber, register_routes


@pytest.fixture
def channel() -> Iterator[DefaultBroadcastChannel]:
    """Build a channel and close it after the test."""
    built = DefaultBroadcastChannel(
        settings=BroadcastSettings(websocket_path="/v1/events"),
        registry=SubscriberRegistry(),
    )
    yield built
    built.close(timeout_seconds=1.0)


@pytest.fixture
def client(channel: DefaultBroadcastChannel) -> Iterator[TestClient]:
    """Serve the WebSocket route for ``channel`` in-process."""
    app = create_app(title="beacon-test")
    router = APIRouter()
    register_routes(router=router, service=channel)
    app.include_router(router)
    with TestClient(app) as test_client:
        yield test_client


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll ``predicate`` until true or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_websocket_subscriber_receives_ack_then_events(
    client: TestClient, channel: DefaultBroadcastChannel
) -> None:
    """A connected socket should be acknowledged and then receive publishes."""
    with client.websocket_connect("/v1/events") as websocket:
        ack = websocket.receive_json()
        assert ack["event"] == "subscribed"
        assert ack["data"]["subscriber_id"]
        assert channel.registry.count() == 1

        channel.publish(event_name="entity_updated", payload={"id": "d1"})

        assert websocket.receive_json() == {
            "event": "entity_updated",
            "data": {"id": "d1"},
        }


def test_every_connected_socket_receives_the_event(
    client: TestClient, channel: DefaultBroadcastChannel
) -> None:
    """Fan-out should reach each open WebSocket."""
    with client.websocket_connect("/v1/events") as first:
        first.receive_json()
        with client.websocket_connect("/v1/events") as second:
            second.receive_json()

            channel.publish(event_name="tick", payload=1)

            assert first.receive_json() == {"event": "tick", "data": 1}
            assert second.receive_json() == {"event": "tick", "data": 1}


def test_disconnect_unregisters_subscriber(
    client: TestClient, channel: DefaultBroadcastChannel
) -> None:
    """Closing the socket should remove its subscriber."""
    with client.websocket_connect("/v1/events") as websocket:
        websocket.receive_json()
        websocket.send_text("ignored")
        assert channel.registry.count() == 1

    assert _wait_for(lambda: channel.registry.count() == 0)


class _RecordingWebSocket:
    """Minimal WebSocket stand-in recording frames and close codes."""

    def __init__(self, *, fail_sends: bool = False) -> None:
        self.frames: list[str] = []
        self.close_codes: list[int] = []
        self._fail_sends = fail_sends

    async def send_text(self, message: str) -> None:
        if self._fail_sends and self.frames:
            raise RuntimeError("transport broken")
        self.frames.append(message)

    async def close(self, code: int = 1000) -> None:
        self.close_codes.append(code)


def test_events_published_during_handshake_follow_the_ack() -> None:
    """Frames sent before the ack should wait and arrive after it."""

    async def scenario() -> list[str]:
        websocket = _RecordingWebSocket()
        handle = WebSocketSubscriber(
            websocket=websocket,
            loop=asyncio.get_running_loop(),
            send_timeout_seconds=2.0,
        )
        pending = asyncio.create_task(asyncio.to_thread(handle.send_text, "early"))
        await asyncio.sleep(0.05)
        assert websocket.frames == []
        await handle.acknowledge("sub-1")
        await pending
        return websocket.frames

    frames = asyncio.run(scenario())

    assert json.loads(frames[0]) == {
        "event": "subscribed",
        "data": {"subscriber_id": "sub-1"},
    }
    assert frames[1] == "early"


def test_failed_send_closes_socket_with_internal_error() -> None:
    """A send failure should raise to the worker and close the transport."""

    async def scenario() -> list[int]:
        websocket = _RecordingWebSocket(fail_sends=True)
        handle = WebSocketSubscriber(
            websocket=websocket,
            loop=asyncio.get_running_loop(),
            send_timeout_seconds=2.0,
        )
        await handle.acknowledge("sub-1")
        with pytest.raises(RuntimeError, match="transport broken"):
            await asyncio.to_thread(handle.send_text, "first")
        await asyncio.sleep(0.05)
        return websocket.close_codes

    assert asyncio.run(scenario()) == [1011]


def test_dropped_socket_receives_close_frame(
    client: TestClient,
    channel: DefaultBroadcastChannel,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A subscriber dropped for a failed send should be disconnected."""

    async def broken_send(self: WebSocketSubscriber, message: str) -> None:
        raise RuntimeError("transport broken")

    monkeypatch.setattr(WebSocketSubscriber, "_send", broken_send)

    with client.websocket_connect("/v1/events") as websocket:
        websocket.receive_json()
        channel.publish(event_name="first", payload=1)
        assert channel.flush(timeout_seconds=2.0)
        assert channel.registry.count() == 0

        with pytest.raises(WebSocketDisconnect) as exc_info:
            websocket.receive_json()

    assert exc_info.value.code == 1011
