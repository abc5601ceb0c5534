"""WebSocket room registry used to push events to interested clients.

Sockets subscribe to named rooms (`topic_{tid}`, `uid_{uid}`); `publish` fans an event
out to every socket in a room. Any object with a matching `publish` coroutine satisfies
`Notifier`, so services depend on the protocol rather than on WebSockets.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Protocol, Set

from fastapi import WebSocket

from forum.core.config import settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def publish(self, room: str, event: str, payload: dict) -> None: ...


def topic_room(tid: Any) -> str:
    return f"topic_{tid}"


def user_room(uid: Any) -> str:
    return f"uid_{uid}"


class ConnectionManager:
    """Tracks which WebSockets listen to which rooms and broadcasts into rooms.

    A per-socket room limit prevents a single client from subscribing to an
    unbounded number of rooms.
    """

    def __init__(self, *, max_rooms_per_socket: int = 50) -> None:
        self.rooms: Dict[str, List[WebSocket]] = {}
        self._memberships: Dict[WebSocket, Set[str]] = {}
        self._lock = asyncio.Lock()
        self.max_rooms_per_socket = max_rooms_per_socket

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the socket and register it with no room memberships."""
        await websocket.accept()
        async with self._lock:
            self._memberships.setdefault(websocket, set())
        logger.info("WebSocket connected (sockets=%s)", len(self._memberships))

    async def join(self, websocket: WebSocket, room: str) -> bool:
        """Subscribe `websocket` to `room`; False when the socket hit its room limit."""
        async with self._lock:
            joined = self._memberships.setdefault(websocket, set())
            if room in joined:
                return True
            if len(joined) >= self.max_rooms_per_socket:
                logger.warning(
                    "Room join rejected (limit=%s)",
                    self.max_rooms_per_socket,
                    extra={"room": room},
                )
                return False
            joined.add(room)
            self.rooms.setdefault(room, []).append(websocket)
        logger.debug("Socket joined room", extra={"room": room})
        return True

    async def leave(self, websocket: WebSocket, room: str) -> None:
        async with self._lock:
            self._remove_from_room(websocket, room)
            self._memberships.get(websocket, set()).discard(room)

    async def disconnect(
        self, websocket: WebSocket, *, reason: str = "client_disconnected"
    ) -> None:
        """Drop the socket from every room it joined."""
        async with self._lock:
            for room in self._memberships.pop(websocket, set()):
                self._remove_from_room(websocket, room)
        logger.info(
            "WebSocket disconnected (reason=%s, sockets=%s)",
            reason,
            len(self._memberships),
        )

    async def publish(self, room: str, event: str, payload: dict) -> None:
        """Send `{"event", "data"}` to every socket in `room`."""
        message = {"event": event, "data": payload}
        broken: List[WebSocket] = []
        for connection in list(self.rooms.get(room, [])):
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.error(
                    "Error sending %s: %s", event, exc, extra={"room": room}
                )
                broken.append(connection)

        for connection in broken:
            await self.disconnect(connection, reason="send_failure_cleanup")

    def _remove_from_room(self, websocket: WebSocket, room: str) -> None:
        members = self.rooms.get(room)
        if not members:
            return
        if websocket in members:
            members.remove(websocket)
        if not members:
            self.rooms.pop(room, None)

    def metrics(self) -> dict:
        """Return a snapshot suitable for logging/metrics exporters."""
        return {
            "sockets": len(self._memberships),
            "rooms": {room: len(members) for room, members in self.rooms.items()},
        }


manager = ConnectionManager(max_rooms_per_socket=settings.MAX_ROOMS_PER_SOCKET)


__all__ = ["ConnectionManager", "Notifier", "manager", "topic_room", "user_room"]
