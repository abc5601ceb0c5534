"""Post creation with non-blocking translation.

Two paths:
- Content already translated (cache hit): the translation is applied before the post
  is stored, so the first response already carries it and no events are needed.
- Otherwise the post is stored with default translation fields, a `pending` status is
  published, and translation continues in a background task that updates the post and
  publishes `success` (plus a generic edit event) or `fail` when it finishes.

Post creation never waits on the translator.
"""

from __future__ import annotations

import asyncio
import logging
import time
from functools import lru_cache
from typing import Any, Coroutine, Dict, Optional, Set

from forum.core.config import settings
from forum.core.exceptions import (
    InvalidPidException,
    InvalidUidException,
    ResourceNotFoundException,
)
from forum.modules.notifications import Notifier, manager
from forum.modules.notifications.translation import (
    emit_post_edited,
    emit_translation_fail,
    emit_translation_pending,
    emit_translation_success,
)
from forum.modules.posts.schemas import PostCreate
from forum.modules.posts.store import PostStore, SqlPostStore
from forum.modules.translate import (
    FALLBACK_OUTCOME,
    TranslationService,
    get_translation_service,
)

logger = logging.getLogger(__name__)


class PostService:
    """Creates posts and coordinates their translation."""

    def __init__(
        self,
        store: PostStore,
        translator: TranslationService,
        notifier: Optional[Notifier] = None,
        *,
        track_ip: bool = False,
    ) -> None:
        self.store = store
        self.translator = translator
        self.notifier = notifier
        self.track_ip = track_ip
        self._background: Set[asyncio.Task] = set()

    async def create_post(self, data: PostCreate) -> Dict[str, Any]:
        uid = data.uid
        if uid is None:
            raise InvalidUidException()
        if data.to_pid is not None:
            self._check_to_pid(data.to_pid)

        content = str(data.content)
        timestamp = data.timestamp or int(time.time() * 1000)
        is_english, translated_content = FALLBACK_OUTCOME

        cached = self.translator.is_cached(content)
        if cached:
            try:
                is_english, translated_content = await self.translator.translate(content)
            except Exception as exc:
                logger.error(
                    "[translator] Cached translation retrieval failed: %s",
                    exc,
                    extra={"tid": data.tid},
                )

        values: Dict[str, Any] = {
            "uid": uid,
            "tid": data.tid,
            "content": content,
            "source_content": data.source_content,
            "timestamp": timestamp,
            "is_english": is_english,
            "translated_content": translated_content,
        }
        if data.pid is not None:
            values["pid"] = data.pid
        if data.to_pid is not None:
            values["to_pid"] = data.to_pid
        if data.ip and self.track_ip:
            values["ip"] = data.ip
        if data.handle and not uid:
            values["handle"] = data.handle

        post = self.store.create(values)
        if data.to_pid is not None:
            self.store.add_reply(data.to_pid)

        if not cached:
            await emit_translation_pending(
                self.notifier, pid=post["pid"], tid=post["tid"], uid=uid
            )
            self._spawn(
                self._translate_in_background(
                    pid=post["pid"], tid=post["tid"], uid=uid, content=content
                )
            )

        post["is_main"] = data.is_main
        return post

    def get_post(self, pid: int) -> Dict[str, Any]:
        post = self.store.get(pid)
        if post is None:
            raise ResourceNotFoundException("Post", pid)
        return post

    async def drain(self) -> None:
        """Wait for every outstanding background translation."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    @property
    def background_count(self) -> int:
        return len(self._background)

    def _check_to_pid(self, to_pid: int) -> None:
        parent = self.store.get_post_fields(to_pid, ["pid", "deleted"])
        if not parent.get("pid") or parent.get("deleted"):
            raise InvalidPidException(to_pid)

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _translate_in_background(
        self, *, pid: int, tid: int, uid: int, content: str
    ) -> None:
        log_extra = {"pid": pid, "tid": tid}
        try:
            is_english, translated_content = await self.translator.translate(content)
            self.store.set_post_fields(
                pid,
                {"is_english": is_english, "translated_content": translated_content},
            )
        except Exception as exc:
            logger.error(
                "[translator] Background translation failed: %s", exc, extra=log_extra
            )
            await emit_translation_fail(
                self.notifier, pid=pid, tid=tid, uid=uid, error=str(exc)
            )
            return

        logger.info(
            "Post translation applied", extra={**log_extra, "status": "success"}
        )
        await emit_translation_success(
            self.notifier,
            pid=pid,
            tid=tid,
            uid=uid,
            is_english=is_english,
            translated_content=translated_content,
        )
        await emit_post_edited(
            self.notifier,
            pid=pid,
            tid=tid,
            uid=uid,
            content=content,
            is_english=is_english,
            translated_content=translated_content,
        )


@lru_cache
def get_post_service() -> PostService:
    """Process-wide post service (FastAPI dependency)."""
    return PostService(
        SqlPostStore(),
        get_translation_service(),
        manager,
        track_ip=settings.track_ip_per_post,
    )


__all__ = ["PostService", "get_post_service"]
