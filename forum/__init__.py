"""Forum package init."""

from forum.core.config import Settings, settings

__all__ = ["settings", "Settings"]
