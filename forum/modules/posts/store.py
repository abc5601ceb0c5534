"""Durable post storage.

`PostStore` is what the post service needs from persistence; `SqlPostStore` satisfies
it with SQLAlchemy. Each call opens its own short-lived session because background
translation updates land after the creating request has finished.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Protocol

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from forum.core.database import SessionLocal
from forum.core.exceptions import ResourceNotFoundException

from .models import Post


class PostStore(Protocol):
    def create(self, values: Dict[str, Any]) -> Dict[str, Any]: ...

    def get(self, pid: int) -> Optional[Dict[str, Any]]: ...

    def get_post_fields(self, pid: int, fields: Iterable[str]) -> Dict[str, Any]: ...

    def set_post_fields(self, pid: int, values: Dict[str, Any]) -> None: ...

    def add_reply(self, to_pid: int) -> None: ...

    def count(self) -> int: ...


class SqlPostStore:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a post; the database assigns `pid` when none is given."""
        with self._session_factory() as db:
            post = Post(**values)
            db.add(post)
            db.commit()
            db.refresh(post)
            return post.to_dict()

    def get(self, pid: int) -> Optional[Dict[str, Any]]:
        with self._session_factory() as db:
            post = db.get(Post, pid)
            return post.to_dict() if post else None

    def get_post_fields(self, pid: int, fields: Iterable[str]) -> Dict[str, Any]:
        """Return the requested columns, or an empty dict when the post is missing."""
        post = self.get(pid)
        if post is None:
            return {}
        return {field: post.get(field) for field in fields}

    def set_post_fields(self, pid: int, values: Dict[str, Any]) -> None:
        with self._session_factory() as db:
            result = db.execute(update(Post).where(Post.pid == pid).values(**values))
            if result.rowcount == 0:
                db.rollback()
                raise ResourceNotFoundException("Post", pid)
            db.commit()

    def add_reply(self, to_pid: int) -> None:
        with self._session_factory() as db:
            db.execute(
                update(Post)
                .where(Post.pid == to_pid)
                .values(replies=Post.replies + 1)
            )
            db.commit()

    def count(self) -> int:
        with self._session_factory() as db:
            return db.scalar(select(func.count()).select_from(Post)) or 0


__all__ = ["PostStore", "SqlPostStore"]
