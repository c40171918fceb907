"""Repository factory for submissions and comments (sqlalchemy|supabase)."""
from __future__ import annotations

from contextlib import asynccontextmanager, nullcontext
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .comment_repo import CommentRepository
from .comment_repo_supabase import CommentRepositorySupabase
from .submission_repo import SubmissionRepository
from .submission_repo_supabase import SubmissionRepositorySupabase
from ..session import Database
from ...integrations.supabase_client import supabase_ext


def _backend(backend: Optional[str]) -> str:
    return (backend or "sqlalchemy").lower()


def _supabase_client():
    client = supabase_ext.service or supabase_ext.anon
    if client is None:
        raise RuntimeError("Supabase client is not initialized; set SUPABASE_URL and a key.")
    return client


def submission_repo(backend: Optional[str], session: Optional[AsyncSession] = None):
    if _backend(backend) == "supabase":
        return SubmissionRepositorySupabase(_supabase_client())
    if session is None:
        raise RuntimeError("SQLAlchemy repo requires a session")
    return SubmissionRepository(session)


def comment_repo(backend: Optional[str], session: Optional[AsyncSession] = None):
    if _backend(backend) == "supabase":
        return CommentRepositorySupabase(_supabase_client())
    if session is None:
        raise RuntimeError("SQLAlchemy repo requires a session")
    return CommentRepository(session)


class Repositories:
    """Hands out repositories bound to a fresh unit of work for each use."""

    def __init__(self, backend: Optional[str], database: Optional[Database] = None) -> None:
        self.backend = _backend(backend)
        self.database = database

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[Optional[AsyncSession]]:
        if self.backend == "supabase":
            yield None
            return
        if self.database is None or self.database.Session is None:
            raise RuntimeError("SQLAlchemy repo requires an initialized database")
        async with self.database.lock or nullcontext():
            async with self.database.Session() as session:
                yield session

    @asynccontextmanager
    async def submissions(self) -> AsyncIterator[SubmissionRepository | SubmissionRepositorySupabase]:
        async with self._session() as session:
            yield submission_repo(self.backend, session)

    @asynccontextmanager
    async def comments(self) -> AsyncIterator[CommentRepository | CommentRepositorySupabase]:
        async with self._session() as session:
            yield comment_repo(self.backend, session)
