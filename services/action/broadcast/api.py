"""FastAPI WebSocket transport for Broadcast Service subscribers."""

from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from packages.beacon_shared.logging import fields, get_logger
from services.action.broadcast.domain import SUBSCRIBED, SubscriberHandle
from services.action.broadcast.service import BroadcastService

_LOGGER = get_logger(__name__)


class WebSocketSubscriber(SubscriberHandle):
    """Subscriber handle bridging the delivery worker onto the server loop.

    Frames wait behind the ``subscribed`` ack, so an event published during
    the handshake never reaches the client first. A failed or timed-out send
    closes the socket with 1011 so the client sees that it was dropped.
    """

    def __init__(
        self,
        *,
        websocket: WebSocket,
        loop: asyncio.AbstractEventLoop,
        send_timeout_seconds: float,
    ) -> None:
        self._websocket = websocket
        self._loop = loop
        self._send_timeout_seconds = send_timeout_seconds
        self._acknowledged = asyncio.Event()
        self._dropped = False

    async def acknowledge(self, subscriber_id: str) -> None:
        """Send the ``subscribed`` frame, then release queued events."""
        await self._websocket.send_text(
            json.dumps({"event": SUBSCRIBED, "data": {"subscriber_id": subscriber_id}})
        )
        self._acknowledged.set()

    def send_text(self, message: str) -> None:
        """Send one frame from a worker thread, waiting at most the timeout."""
        future = asyncio.run_coroutine_threadsafe(self._send(message), self._loop)
        try:
            future.result(timeout=self._send_timeout_seconds)
        except Exception:
            future.cancel()
            self._drop()
            raise

    async def _send(self, message: str) -> None:
        await self._acknowledged.wait()
        await self._websocket.send_text(message)

    def _drop(self) -> None:
        """Schedule the server-side close once."""
        if self._dropped:
            return
        self._dropped = True
        asyncio.run_coroutine_threadsafe(self._close(), self._loop)

    async def _close(self) -> None:
        try:
            await self._websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        except (RuntimeError, WebSocketDisconnect) as exc:
            # The socket already closed from the client side.
            _LOGGER.debug("websocket close skipped: %s", exc)


def register_routes(*, router: APIRouter, service: BroadcastService) -> None:
    """Register the subscriber WebSocket route on one router."""
    path = service.settings.websocket_path

    @router.websocket(path)
    async def subscribe(websocket: WebSocket) -> None:
        await websocket.accept()
        handle = WebSocketSubscriber(
            websocket=websocket,
            loop=asyncio.get_running_loop(),
            send_timeout_seconds=service.settings.send_timeout_seconds,
        )
        subscriber = service.register_subscriber(handle=handle)
        try:
            await handle.acknowledge(subscriber.subscriber_id)
            # Inbound frames carry no meaning; wait for the disconnect.
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            service.unregister_subscriber(handle=handle)
            _LOGGER.debug(
                "websocket subscriber left",
                extra={fields.SUBSCRIBER_ID: subscriber.subscriber_id},
            )
