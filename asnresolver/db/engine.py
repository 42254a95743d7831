"""Engine and session helpers for the override store."""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..settings import DatabaseSettings
from .base import Base

_SQLITE_MEMORY_IDENTIFIERS = {":memory:", "file::memory:"}


def _is_postgresql_url(url: str) -> bool:
    return url.startswith("postgresql://") or url.startswith("postgres://")


def _is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite:")


def _needs_static_pool(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///"} or any(identifier in url for identifier in _SQLITE_MEMORY_IDENTIFIERS)


def create_engine_from_settings(settings: DatabaseSettings) -> Engine:
    """Create a SQLAlchemy engine configured for the target backend."""
    url = settings.url

    # Use the psycopg driver explicitly for PostgreSQL URLs
    if _is_postgresql_url(url) and not url.startswith("postgresql+psycopg://"):
        url = url.replace("postgresql://", "postgresql+psycopg://").replace("postgres://", "postgresql+psycopg://")

    engine_kwargs: dict[str, Any] = {
        "echo": settings.echo,
        "pool_pre_ping": True,
    }

    if settings.pool_size:
        engine_kwargs["pool_size"] = settings.pool_size
    if settings.pool_timeout is not None:
        engine_kwargs["pool_timeout"] = settings.pool_timeout

    connect_args: dict[str, Any] = {}

    if _is_sqlite_url(url):
        # Resolver worker threads share the engine
        connect_args["check_same_thread"] = False
        if _needs_static_pool(url):
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs.pop("pool_timeout", None)
            engine_kwargs.pop("pool_size", None)

    return create_engine(url, connect_args=connect_args, **engine_kwargs)


def create_session_maker(engine: Engine) -> sessionmaker[Session]:
    """Return a configured session factory for the given engine."""
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def init_schema(engine: Engine) -> None:
    """Create the override table if it does not exist yet."""
    Base.metadata.create_all(bind=engine)


__all__ = ["create_engine_from_settings", "create_session_maker", "init_schema"]
