"""Broadcast fan-out of hall and booking mutations.

Every subscribed listener receives every event. Delivery is best-effort and
at-most-once: nothing is queued for listeners that are absent, and a
listener that raises is logged and skipped. Publishing never blocks the
caller; coroutine listeners are scheduled on the application's event loop.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from .models import Booking, Hall
from .schemas import BookingRead, ChangeEvent, HallRead

logger = logging.getLogger(__name__)

HALL_CREATED = "hall:created"
HALL_DELETED = "hall:deleted"
BOOKING_CREATED = "booking:created"
BOOKING_UPDATED = "booking:updated"
BOOKING_CANCELLED = "booking:cancelled"

Listener = Callable[[ChangeEvent], Union[None, Awaitable[None]]]


class ChangeNotifier:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def bind_loop(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        """Set the loop that runs coroutine listeners; ``None`` unbinds it."""
        self._loop = loop

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: str, data: Dict[str, Any]) -> None:
        message = ChangeEvent(event=event, data=jsonable_encoder(data))
        with self._lock:
            listeners = list(self._listeners)
        logger.debug("Publishing %s to %d listener(s)", event, len(listeners))
        for listener in listeners:
            self._dispatch(listener, message)

    def _dispatch(self, listener: Listener, message: ChangeEvent) -> None:
        try:
            result = listener(message)
        except Exception:
            logger.warning("Listener %r failed on %s", listener, message.event, exc_info=True)
            return
        if inspect.isawaitable(result):
            self._schedule(result, message.event)

    def _schedule(self, awaitable: Awaitable[None], event: str) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.warning("No running event loop bound; dropping %s", event)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        guarded = self._guard(awaitable, event)
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            loop.create_task(guarded)
        else:
            asyncio.run_coroutine_threadsafe(guarded, loop)

    @staticmethod
    async def _guard(awaitable: Awaitable[None], event: str) -> None:
        try:
            await awaitable
        except Exception:
            logger.warning("Async listener failed on %s", event, exc_info=True)

    def hall_created(self, hall: Hall) -> None:
        self.publish(HALL_CREATED, HallRead.model_validate(hall).model_dump(mode="json", by_alias=True))

    def hall_deleted(self, hall_id: str) -> None:
        self.publish(HALL_DELETED, {"id": hall_id})

    def booking_created(self, booking: Booking) -> None:
        self.publish(BOOKING_CREATED, BookingRead.model_validate(booking).model_dump(mode="json", by_alias=True))

    def booking_updated(self, booking: Booking) -> None:
        self.publish(BOOKING_UPDATED, BookingRead.model_validate(booking).model_dump(mode="json", by_alias=True))

    def booking_cancelled(self, booking_id: str) -> None:
        self.publish(BOOKING_CANCELLED, {"id": booking_id})


class WebSocketConnectionManager:
    """Holds open sockets and relays every change event to all of them."""

    def __init__(self) -> None:
        self.connections: Set[WebSocket] = set()
        self._send_lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.discard(websocket)

    def _lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._send_lock is None or self._lock_loop is not loop:
            self._send_lock = asyncio.Lock()
            self._lock_loop = loop
        return self._send_lock

    async def broadcast(self, message: ChangeEvent) -> None:
        """Send one event to every socket; events leave in the order they were broadcast."""
        payload = message.model_dump()
        disconnected = []
        async with self._lock():
            for websocket in list(self.connections):
                try:
                    await websocket.send_json(payload)
                except Exception:
                    disconnected.append(websocket)

        for websocket in disconnected:
            logger.info("Dropping unreachable observer after failed %s delivery", message.event)
            self.disconnect(websocket)

    @property
    def size(self) -> int:
        return len(self.connections)


notifier = ChangeNotifier()
connection_manager = WebSocketConnectionManager()


def get_notifier() -> ChangeNotifier:
    return notifier
