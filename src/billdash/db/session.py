# src/billdash/db/session.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from billdash.core.config import settings

log = logging.getLogger("billdash.db")


def _mask(url: str) -> str:
    import re
    return re.sub(r'//([^:@/]+)(?::[^@/]+)?@', r'//\1:*****@', url)


def _enable_sqlite_fks(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_conn, _record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, *, echo: bool = False, testing: bool = False) -> AsyncEngine:
    kwargs: dict = {"echo": echo, "pool_pre_ping": True}
    # NullPool in tests avoids sharing one connection across event loops
    if testing:
        kwargs["poolclass"] = NullPool

    engine = create_async_engine(url, **kwargs)
    if make_url(url).get_backend_name() == "sqlite":
        _enable_sqlite_fks(engine)
    return engine


@lru_cache
def get_engine() -> AsyncEngine:
    url = settings.DATABASE_URL
    log.info("DB: using DATABASE_URL=%s", _mask(url))
    return build_engine(url, echo=settings.DB_ECHO, testing=settings.TESTING)


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the app-wide async sessionmaker."""
    return async_sessionmaker(bind=get_engine(), expire_on_commit=False, class_=AsyncSession)


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_sessionmaker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
