"""Pydantic schemas for post creation and retrieval."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    # Optional so a missing uid reaches the service and yields invalid_uid.
    uid: Optional[int] = None
    tid: int
    content: str = Field(..., min_length=1)
    pid: Optional[int] = None
    to_pid: Optional[int] = None
    timestamp: Optional[int] = None
    is_main: bool = False
    source_content: Optional[str] = None
    ip: Optional[str] = None
    handle: Optional[str] = None


class PostOut(BaseModel):
    pid: int
    uid: int
    tid: int
    content: str
    source_content: Optional[str] = None
    timestamp: int
    is_english: bool
    translated_content: str
    to_pid: Optional[int] = None
    ip: Optional[str] = None
    handle: Optional[str] = None
    replies: int = 0
    deleted: bool = False
    is_main: bool = False

    model_config = ConfigDict(from_attributes=True)


__all__ = ["PostCreate", "PostOut"]
