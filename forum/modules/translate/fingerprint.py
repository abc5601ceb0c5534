"""Content fingerprints used as translation cache keys."""

from __future__ import annotations

import hashlib
from typing import Any, Mapping

from forum.core.exceptions import TranslationInputException


def fingerprint(content: str) -> str:
    """Return the hex MD5 digest of the UTF-8 encoded content."""
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def content_of(post_like: Any) -> str:
    """Extract translatable content from a mapping or an object with `content`.

    Raises TranslationInputException when no content is present.
    """
    if isinstance(post_like, str):
        return post_like
    if isinstance(post_like, Mapping):
        content = post_like.get("content")
    else:
        content = getattr(post_like, "content", None)
    if content is None:
        raise TranslationInputException()
    return content if isinstance(content, str) else str(content)


__all__ = ["fingerprint", "content_of"]
