"""Post translation status events.

Every event goes to the post's topic room and to the author's room, so an author who
has not joined the topic room yet (fresh topic) still sees the update.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .realtime import Notifier, topic_room, user_room

logger = logging.getLogger(__name__)

TRANSLATION_STATUS_EVENT = "event:post_translation_status"
POST_EDITED_EVENT = "event:post_edited"

STATUS_PENDING = "pending"
STATUS_SUCCESS = "success"
STATUS_FAIL = "fail"


async def _publish_to_post_rooms(
    notifier: Optional[Notifier], *, tid: Any, uid: Any, event: str, payload: dict
) -> None:
    if notifier is None:
        return
    for room in (topic_room(tid), user_room(uid)):
        try:
            await notifier.publish(room, event, payload)
        except Exception:
            logger.exception(
                "Failed to publish %s", event, extra={"room": room, "event": event}
            )


async def emit_translation_pending(notifier, *, pid, tid, uid) -> None:
    await _publish_to_post_rooms(
        notifier,
        tid=tid,
        uid=uid,
        event=TRANSLATION_STATUS_EVENT,
        payload={"pid": pid, "tid": tid, "status": STATUS_PENDING},
    )


async def emit_translation_success(
    notifier, *, pid, tid, uid, is_english: bool, translated_content: str
) -> None:
    await _publish_to_post_rooms(
        notifier,
        tid=tid,
        uid=uid,
        event=TRANSLATION_STATUS_EVENT,
        payload={
            "pid": pid,
            "tid": tid,
            "status": STATUS_SUCCESS,
            "isEnglish": is_english,
            "translatedContent": translated_content,
        },
    )


async def emit_translation_fail(notifier, *, pid, tid, uid, error: str) -> None:
    await _publish_to_post_rooms(
        notifier,
        tid=tid,
        uid=uid,
        event=TRANSLATION_STATUS_EVENT,
        payload={"pid": pid, "tid": tid, "status": STATUS_FAIL, "error": error},
    )


async def emit_post_edited(
    notifier,
    *,
    pid,
    tid,
    uid,
    content: str,
    is_english: bool,
    translated_content: str,
) -> None:
    """Generic edit event for listeners that only re-render on post edits."""
    await _publish_to_post_rooms(
        notifier,
        tid=tid,
        uid=uid,
        event=POST_EDITED_EVENT,
        payload={
            "post": {
                "pid": pid,
                "tid": tid,
                "content": content,
                "isEnglish": is_english,
                "translatedContent": translated_content,
                "deleted": False,
                "changed": False,
            },
            "topic": {"tid": tid},
        },
    )


__all__ = [
    "POST_EDITED_EVENT",
    "STATUS_FAIL",
    "STATUS_PENDING",
    "STATUS_SUCCESS",
    "TRANSLATION_STATUS_EVENT",
    "emit_post_edited",
    "emit_translation_fail",
    "emit_translation_pending",
    "emit_translation_success",
]
