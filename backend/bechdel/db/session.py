"""Async SQLAlchemy engine/session initialization and lifecycle management."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..config import BaseConfig
from .base import Base


class Database:
    def __init__(self) -> None:
        self.engine = None
        self.Session = None  # type: ignore[assignment]
        # held for a whole session when every session shares one connection
        self.lock: Optional[asyncio.Lock] = None

    def init_app(self, config: BaseConfig) -> None:
        url: str = config.DATABASE_URL
        kwargs: Dict[str, Any] = {"echo": config.SQL_ECHO, "pool_pre_ping": True}
        self.lock = None
        if url.startswith("sqlite"):
            # one shared connection, otherwise every checkout sees its own empty in-memory db
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                kwargs["poolclass"] = StaticPool
                kwargs["connect_args"] = {"check_same_thread": False}
                self.lock = asyncio.Lock()
        else:
            kwargs["pool_size"] = config.POOL_SIZE
            kwargs["max_overflow"] = config.MAX_OVERFLOW

        self.engine = create_async_engine(url, **kwargs)
        self.Session = async_sessionmaker(bind=self.engine, expire_on_commit=False, autoflush=False)

    async def create_all(self) -> None:
        # register the models on Base.metadata
        from .models import comment, submission  # noqa: F401

        assert self.engine is not None, "Database is not initialized"
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


db = Database()
