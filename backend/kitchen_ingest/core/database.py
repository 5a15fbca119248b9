"""Database configuration and session management.

This module constructs an asynchronous SQLAlchemy engine and session
factory for the application from ``settings.DATABASE_URL``.  Plain
``sqlite://`` and ``postgresql://`` URLs are upgraded to their async
drivers (aiosqlite and psycopg) so the same value can be shared with
synchronous tooling.
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base

from kitchen_ingest.core.config import settings

logger = logging.getLogger(__name__)


def normalise_database_url(url: str) -> str:
    """Return ``url`` with an async driver selected."""
    url_obj = make_url(url)
    driver = url_obj.drivername or ""
    if driver == "sqlite":
        url_obj = url_obj.set(drivername="sqlite+aiosqlite")
    elif driver in {"postgresql", "postgres", "postgresql+psycopg2"}:
        url_obj = url_obj.set(drivername="postgresql+psycopg")
    return url_obj.render_as_string(hide_password=False)


def build_engine(url: str) -> AsyncEngine:
    engine_kwargs: dict[str, Any] = dict(echo=False, pool_pre_ping=True)
    return create_async_engine(normalise_database_url(url), **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.DATABASE_URL)

# Create session factory
AsyncSessionLocal = build_session_factory(engine)

# Declarative base
Base = declarative_base()


async def init_db(target: AsyncEngine | None = None) -> None:
    """Create all tables defined on the declarative ``Base``.

    Typically called during application startup.
    """
    target = target or engine
    async with target.begin() as conn:
        # Import all models to ensure metadata is populated
        from kitchen_ingest.models import tables  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[db] tables ensured url=%s", get_db_debug_info(target).get("url"))


def get_db_debug_info(target: AsyncEngine | None = None) -> Dict[str, Any]:
    """Return non-sensitive information about the current DB engine for debugging."""
    target = target or engine
    info: Dict[str, Any] = {"environment": (settings.ENVIRONMENT or "development")}
    try:
        url_obj = target.url
        info.update(
            {
                "drivername": url_obj.drivername,
                "host": url_obj.host,
                "database": url_obj.database,
                "url": url_obj.render_as_string(hide_password=True),
            }
        )
    except Exception as ex:
        info.update({"error": f"unable to parse engine url: {ex}"})
    return info
