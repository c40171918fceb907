"""Application factory and router registration."""
from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import BaseConfig
from .db.session import db
from .db.repositories.factory import Repositories
from .api.health.routes import router as health_router
from .api.submissions.routes import router as submissions_router
from .api.comments.routes import router as comments_router
from .auth.jwt import BearerIdentity
from .classifier.core import Classifier, get_classifier
from .errors import ClassificationError, ClassificationErrorKind, register_error_handlers
from .integrations.supabase_client import supabase_ext
from .services.submission_service import SubmissionOrchestrator, SubmissionSessions


class UnconfiguredClassifier:
    """Stands in when no classifier endpoint is configured; every call fails cleanly."""

    async def classify(self, request, timeout=None):
        raise ClassificationError(
            ClassificationErrorKind.SERVICE_FAILURE,
            "No analysis service is configured; set CLASSIFIER_URL or SUPABASE_URL.",
        )

    async def aclose(self) -> None:
        return None


def build_classifier(config: BaseConfig) -> Classifier:
    url = config.classifier_url()
    if not url:
        logger.warning("no classifier endpoint configured; submissions will fail")
        return UnconfiguredClassifier()
    kwargs = {"url": url, "api_key": config.classifier_key(), "timeout": config.CLASSIFIER_TIMEOUT}
    if config.CLASSIFIER_BACKEND.lower() == "chat":
        kwargs["model"] = config.CLASSIFIER_MODEL
    return get_classifier(config.CLASSIFIER_BACKEND, **kwargs)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def create_app(config: BaseConfig | None = None, classifier: Optional[Classifier] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or BaseConfig()
    configure_logging(config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await supabase_ext.init_app(config)
        if config.REPO_BACKEND.lower() == "sqlalchemy" and config.DATABASE_URL.startswith("sqlite"):
            await db.create_all()
        logger.info("backend ready (repo={}, classifier={})", config.REPO_BACKEND, config.CLASSIFIER_BACKEND)
        yield
        if owns_classifier:
            await classifier.aclose()
        await supabase_ext.aclose()
        await db.dispose()

    app = FastAPI(title="Bechdel Analyzer Backend", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Init extensions
    db.init_app(config)

    repos = Repositories(config.REPO_BACKEND, db)
    identity = BearerIdentity(config)
    owns_classifier = classifier is None
    if classifier is None:
        classifier = build_classifier(config)
    app.state.config = config
    app.state.repos = repos
    app.state.identity = identity
    app.state.classifier = classifier
    app.state.sessions = SubmissionSessions(lambda: SubmissionOrchestrator(identity, classifier, repos))

    # Register routers
    app.include_router(health_router, prefix="/api/health")
    app.include_router(submissions_router, prefix="/api/submissions")
    app.include_router(comments_router, prefix="/api")

    # Global error handlers
    register_error_handlers(app)
    return app
