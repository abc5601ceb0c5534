"""Application factory helpers to keep forum/main.py lightweight."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from forum.api.router import api_router
from forum.api.websocket import router as websocket_router
from forum.core.config import settings
from forum.core.database import init_db
from forum.core.error_handlers import register_exception_handlers
from forum.core.logging_config import setup_logging
from forum.core.middleware import LoggingMiddleware
from forum.modules.notifications import manager
from forum.modules.translate import get_translation_service
from forum.services.posts import get_post_service

logger = logging.getLogger(__name__)


def _configure_app(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)

    origins = settings.cors_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(websocket_router)


def _register_routes(app: FastAPI) -> None:
    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "ok",
            "translation": get_translation_service().stats(),
            "realtime": manager.metrics(),
        }


def _lifespan_factory():
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        init_db()
        app.state.connection_manager = manager

        yield

        # Shutdown: let in-flight translations land before closing the client.
        await get_post_service().drain()
        await get_translation_service().aclose()
        get_translation_service.cache_clear()
        get_post_service.cache_clear()

    return lifespan


def create_app() -> FastAPI:
    """
    Application Factory to create and configure the FastAPI application.
    Integrates Logging, Error Handling and Middleware.
    """
    setup_logging(
        log_level=getattr(settings, "log_level", "INFO"),
        log_dir=getattr(settings, "log_dir", None),
        app_name="forum",
        use_json=getattr(settings, "use_json_logs", False),
        use_colors=settings.environment.lower() != "production",
    )

    app = FastAPI(
        title="Forum API",
        description="Forum posts with asynchronous machine translation",
        version="1.0.0",
        lifespan=_lifespan_factory(),
        default_response_class=ORJSONResponse,
    )
    app.state.environment = settings.environment

    _configure_app(app)
    _register_routes(app)
    register_exception_handlers(app)

    logger.info("Application startup complete")
    return app


__all__ = ["create_app"]
