"""Submission pipeline: identity -> classification -> persistence.

One `SubmissionOrchestrator` belongs to one caller session and owns that
session's in-flight flag. A second `submit` while one is running is rejected
with BusyError instead of being queued, so a double click never produces two
records.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from loguru import logger

from ..auth.jwt import IdentityGate
from ..classifier.core import ClassificationRequest, Classifier
from ..db.repositories.factory import Repositories
from ..domain.submission import NewSubmission, Submission, Verdict
from ..errors import (
    AuthenticationError,
    BechdelError,
    BusyError,
    ClassificationError,
    ClassificationErrorKind,
    PersistenceError,
    ValidationError,
)


def _require_text(value: Optional[str], field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must not be empty.")
    return value


class SubmissionOrchestrator:
    def __init__(self, identity: IdentityGate, classifier: Classifier, repos: Repositories) -> None:
        self.identity = identity
        self.classifier = classifier
        self.repos = repos
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(
        self,
        title: str,
        source_text: str,
        year: Optional[int] = None,
        *,
        poster_ref: Optional[str] = None,
        external_ref: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Submission:
        title = _require_text(title, "Title").strip()
        source_text = _require_text(source_text, "Script text")
        if year is not None and (isinstance(year, bool) or not isinstance(year, int) or year <= 0):
            raise ValidationError("Year must be a positive whole number.")

        # no await between the check and the set
        if self._in_flight:
            logger.warning("rejected concurrent submission of {!r}", title)
            raise BusyError()
        self._in_flight = True
        try:
            owner_id = await self.identity.current_user()
            if owner_id is None:
                raise AuthenticationError()

            request = ClassificationRequest(title=title, source_text=source_text, year=year)
            try:
                result = await self.classifier.classify(request, timeout=timeout)
            except ClassificationError as e:
                logger.warning("classification of {!r} failed: {}", title, e.error_kind.value)
                raise
            except Exception as e:
                logger.exception("classifier raised unexpectedly")
                raise ClassificationError(ClassificationErrorKind.SERVICE_FAILURE, cause=e) from e
            logger.info("{!r} classified as {}", title, result.verdict.value)

            record = NewSubmission(
                title=title,
                source_text=source_text,
                verdict=result.verdict,
                explanation=result.explanation,
                owner_id=owner_id,
                year=year,
                poster_ref=poster_ref,
                external_ref=external_ref,
            )
            try:
                async with self.repos.submissions() as repo:
                    created = await repo.create(record)
            except BechdelError:
                raise
            except Exception as e:
                logger.exception("submission store raised unexpectedly")
                raise PersistenceError() from e
            logger.info("stored submission {} for user {}", created.id, owner_id)
            return created
        finally:
            self._in_flight = False


class SubmissionSessions:
    """One orchestrator per authenticated subject while it has a submission running.

    Anonymous callers get a throwaway orchestrator. An entry is dropped as soon
    as its orchestrator goes idle, so the registry only holds in-flight callers.
    """

    def __init__(self, factory: Callable[[], SubmissionOrchestrator]) -> None:
        self.factory = factory
        self._sessions: Dict[str, SubmissionOrchestrator] = {}

    def for_subject(self, subject: Optional[str]) -> SubmissionOrchestrator:
        if subject is None:
            return self.factory()
        orchestrator = self._sessions.get(subject)
        if orchestrator is None:
            orchestrator = self._sessions[subject] = self.factory()
        return orchestrator

    async def submit(self, subject: Optional[str], *args: Any, **kwargs: Any) -> Submission:
        orchestrator = self.for_subject(subject)
        try:
            return await orchestrator.submit(*args, **kwargs)
        finally:
            if not orchestrator.in_flight and self._sessions.get(subject) is orchestrator:
                del self._sessions[subject]

    def __len__(self) -> int:
        return len(self._sessions)


def verdict_message(submission: Submission) -> str:
    verb = "passes" if submission.verdict == Verdict.PASS else "fails"
    return f"{submission.title} {verb} the Bechdel Test."
