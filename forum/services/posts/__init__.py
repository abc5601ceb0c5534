"""Posts service exports."""

from forum.services.posts.post_service import PostService, get_post_service

__all__ = ["PostService", "get_post_service"]
