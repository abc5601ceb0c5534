"""Centralized API router registration."""

from fastapi import APIRouter

from forum.routers import post, translate

api_router = APIRouter()

api_router.include_router(post.router)
api_router.include_router(translate.router)

__all__ = ["api_router"]
