"""Shared fixtures: in-memory SQLite store, fake identity and fake classifier."""
from __future__ import annotations

import asyncio
from typing import List, Optional

import pytest

from bechdel.classifier.core import ClassificationRequest
from bechdel.config import BaseConfig
from bechdel.db.repositories.factory import Repositories
from bechdel.db.session import Database
from bechdel.domain.submission import Classification, Verdict


class FakeIdentity:
    def __init__(self, user_id: Optional[str] = "user-1") -> None:
        self.user_id = user_id
        self.calls = 0

    async def current_user(self) -> Optional[str]:
        self.calls += 1
        return self.user_id


class FakeClassifier:
    """Returns a fixed verdict; can be told to fail or to wait on an event first."""

    def __init__(self, verdict: Verdict = Verdict.PASS, explanation: str = "Two named women talk about work.") -> None:
        self.result = Classification(verdict=verdict, explanation=explanation)
        self.error: Optional[BaseException] = None
        self.gate: Optional[asyncio.Event] = None
        self.started = asyncio.Event()
        self.requests: List[ClassificationRequest] = []
        self.timeouts: List[Optional[float]] = []
        self.closed = False

    async def classify(self, request: ClassificationRequest, timeout: Optional[float] = None) -> Classification:
        self.requests.append(request)
        self.timeouts.append(timeout)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> BaseConfig:
    return BaseConfig(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        REPO_BACKEND="sqlalchemy",
        SUPABASE_URL=None,
        SUPABASE_ANON_KEY=None,
        SUPABASE_SERVICE_ROLE_KEY=None,
        JWT_SECRET="bechdel-test-secret-at-least-32-bytes-long",
        JWT_ALG="HS256",
        JWT_AUDIENCE=None,
        CLASSIFIER_URL=None,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def database(config):
    database = Database()
    database.init_app(config)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def repos(database) -> Repositories:
    return Repositories("sqlalchemy", database)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()
