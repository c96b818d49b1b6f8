"""
SQLite engine and session scopes for signal persistence.

The file lives at Settings.sqlite_path, or backend/data/clon.db by default.
Routes take a session from `get_db`; the watchlist driver and scripts use
`get_db_context`. Both commit on success and roll back on error.
"""

import os
import logging
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from clon.db.models import Base
from clon.core.config import settings

logger = logging.getLogger(__name__)

BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_SQLITE_PATH = os.path.join(BACKEND_DIR, "data", "clon.db")


def resolve_sqlite_path(configured: Optional[str] = None) -> str:
    return os.path.abspath(configured or DEFAULT_SQLITE_PATH)


def build_engine(sqlite_path: str, echo: bool = False) -> AsyncEngine:
    """aiosqlite engine; one shared connection since SQLite serialises writes anyway."""
    return create_async_engine(
        f"sqlite+aiosqlite:///{sqlite_path}",
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # expire_on_commit=False: rows are serialised after the session commits
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


SQLITE_PATH = resolve_sqlite_path(settings.sqlite_path)
engine = build_engine(SQLITE_PATH, echo=settings.debug)
AsyncSessionLocal = build_session_factory(engine)


async def init_db() -> None:
    """Create the data directory and the signals table. Run at startup."""
    os.makedirs(os.path.dirname(SQLITE_PATH), exist_ok=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(f"Could not create signal tables in {SQLITE_PATH}: {e}")
        raise
    logger.info(f"Signal store ready at {SQLITE_PATH}")


async def close_db() -> None:
    await engine.dispose()
    logger.info("Signal store closed")


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Session scope for code outside a request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async with get_db_context() as session:
        yield session
