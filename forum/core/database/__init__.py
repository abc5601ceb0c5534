"""Core database access helpers.

Provides an engine + SessionLocal for app use, plus `init_db` for schema creation.
SQLite URLs get thread-agnostic connections because background translation
updates run outside the request that created the post.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from forum.core.config import settings
from forum.core.database.base import Base


def build_engine(database_url: str) -> Engine:
    """Construct a SQLAlchemy engine with pooling tuned per backend."""
    url = make_url(database_url)
    if url.drivername.startswith("sqlite"):
        return create_engine(
            database_url,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return create_engine(
        database_url,
        pool_size=20,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=False,
    )


# Application engine
engine = build_engine(str(settings.database_url))

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = None) -> None:
    """Create all known tables; safe to call repeatedly."""
    # Models must be imported so they register on Base.metadata.
    from forum.modules.posts import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


__all__ = ["Base", "SessionLocal", "build_engine", "engine", "init_db"]
