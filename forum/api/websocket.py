"""WebSocket endpoint for room subscriptions.

Clients connect to `/ws/rooms?room=topic_1&room=uid_3` and then receive every event
published into those rooms. Messages `{"action": "join" | "leave", "room": "..."}`
change subscriptions on an open socket; each is acknowledged with
`{"event": "room:<action>", "data": {"room": ..., "ok": bool}}`.
"""

from __future__ import annotations

import json
import logging
import re
from typing import List

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from starlette.websockets import WebSocketState

from forum.modules.notifications import manager

router = APIRouter()
logger = logging.getLogger(__name__)

ROOM_PATTERN = re.compile(r"^(topic|uid)_\d+$")


def is_valid_room(room: object) -> bool:
    return isinstance(room, str) and bool(ROOM_PATTERN.match(room))


async def _close_if_open(websocket: WebSocket, code: int) -> None:
    if websocket.application_state != WebSocketState.CONNECTED:
        return
    try:
        await websocket.close(code=code)
    except (RuntimeError, OSError) as exc:
        logger.debug("WebSocket already closed: %s", exc)


@router.websocket("/ws/rooms")
async def rooms_endpoint(
    websocket: WebSocket,
    room: List[str] = Query(default=[]),
):
    """Subscribe a socket to rooms and keep it open until the client leaves."""
    await manager.connect(websocket)
    for name in room:
        if is_valid_room(name):
            await manager.join(websocket, name)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                message = None
            action = message.get("action") if isinstance(message, dict) else None
            target = message.get("room") if isinstance(message, dict) else None
            if action not in ("join", "leave") or not is_valid_room(target):
                await websocket.send_json(
                    {"event": "error", "data": {"message": "invalid room request"}}
                )
                continue
            if action == "join":
                ok = await manager.join(websocket, target)
            else:
                await manager.leave(websocket, target)
                ok = True
            await websocket.send_json(
                {"event": f"room:{action}", "data": {"room": target, "ok": ok}}
            )
    except WebSocketDisconnect as exc:
        await manager.disconnect(
            websocket, reason=f"disconnect:{getattr(exc, 'code', 'unknown')}"
        )
    except Exception as exc:
        logger.exception("WebSocket error: %s", exc)
        await manager.disconnect(websocket, reason="error")
        await _close_if_open(websocket, status.WS_1011_INTERNAL_ERROR)


__all__ = ["router", "is_valid_room"]
