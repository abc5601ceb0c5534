"""Real-time notification helpers."""

from .realtime import ConnectionManager, Notifier, manager, topic_room, user_room

__all__ = ["ConnectionManager", "Notifier", "manager", "topic_room", "user_room"]
