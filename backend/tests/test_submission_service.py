import asyncio
from contextlib import asynccontextmanager

import pytest

from bechdel.domain.submission import Verdict
from bechdel.errors import (
    AuthenticationError,
    BusyError,
    ClassificationError,
    ClassificationErrorKind,
    PersistenceError,
    ValidationError,
)
from bechdel.services.listing_service import ListingService
from bechdel.services.submission_service import SubmissionOrchestrator, SubmissionSessions, verdict_message

from conftest import FakeClassifier, FakeIdentity


class BrokenStore:
    """Repositories stand-in whose submission insert always fails."""

    class _Repo:
        async def create(self, data):
            raise PersistenceError()

    @asynccontextmanager
    async def submissions(self):
        yield self._Repo()


@pytest.fixture
def orchestrator(identity, classifier, repos):
    return SubmissionOrchestrator(identity, classifier, repos)


async def test_submit_stores_classified_submission(orchestrator, classifier, repos):
    created = await orchestrator.submit("Example Film", "Alice and Beth discuss the heist.", 2001)

    assert created.id
    assert created.verdict is Verdict.PASS
    assert created.explanation == classifier.result.explanation
    assert created.owner_id == "user-1"
    assert created.year == 2001
    assert created.source_text == "Alice and Beth discuss the heist."

    listed = await ListingService(repos).list()
    assert [s.id for s in listed] == [created.id]
    assert listed[0].verdict is Verdict.PASS
    assert orchestrator.in_flight is False


async def test_submit_sends_title_text_and_year_to_classifier(orchestrator, classifier):
    await orchestrator.submit("  Alien ", "Ripley and Lambert talk.", 1979, timeout=5.0)

    request = classifier.requests[0]
    assert request.title == "Alien"
    assert request.source_text == "Ripley and Lambert talk."
    assert request.year == 1979
    assert classifier.timeouts == [5.0]


async def test_new_submission_moves_to_front(orchestrator, repos):
    first = await orchestrator.submit("First", "text one")
    second = await orchestrator.submit("Second", "text two")

    listed = await ListingService(repos).list()
    assert [s.id for s in listed] == [second.id, first.id]


async def test_pass_through_refs_are_stored(orchestrator, repos):
    created = await orchestrator.submit("Heat", "summary", poster_ref="/heat.jpg", external_ref="949")

    stored = await ListingService(repos).get(created.id)
    assert stored.poster_ref == "/heat.jpg"
    assert stored.external_ref == "949"


@pytest.mark.parametrize(
    "title,text",
    [("Example Film", ""), ("Example Film", "   \n"), ("", "some text"), ("  ", "some text")],
)
async def test_empty_fields_are_rejected_before_classification(orchestrator, classifier, identity, repos, title, text):
    with pytest.raises(ValidationError):
        await orchestrator.submit(title, text)

    assert classifier.requests == []
    assert identity.calls == 0
    assert await ListingService(repos).list() == []


@pytest.mark.parametrize("year", [0, -3, True])
async def test_invalid_year_is_rejected(orchestrator, classifier, year):
    with pytest.raises(ValidationError):
        await orchestrator.submit("Title", "text", year)
    assert classifier.requests == []


async def test_unauthenticated_submit_has_no_side_effects(classifier, repos):
    orchestrator = SubmissionOrchestrator(FakeIdentity(None), classifier, repos)

    with pytest.raises(AuthenticationError):
        await orchestrator.submit("Example Film", "text")

    assert classifier.requests == []
    assert await ListingService(repos).list() == []
    assert orchestrator.in_flight is False


@pytest.mark.parametrize(
    "kind",
    [
        ClassificationErrorKind.TIMEOUT,
        ClassificationErrorKind.SERVICE_FAILURE,
        ClassificationErrorKind.MALFORMED_RESPONSE,
    ],
)
async def test_classification_failure_writes_nothing(orchestrator, classifier, repos, kind):
    classifier.error = ClassificationError(kind)

    with pytest.raises(ClassificationError) as excinfo:
        await orchestrator.submit("Example Film", "text")

    assert excinfo.value.error_kind is kind
    assert await ListingService(repos).list() == []
    assert orchestrator.in_flight is False


async def test_unexpected_classifier_error_is_wrapped(orchestrator, classifier):
    boom = RuntimeError("socket closed")
    classifier.error = boom

    with pytest.raises(ClassificationError) as excinfo:
        await orchestrator.submit("Example Film", "text")

    assert excinfo.value.error_kind is ClassificationErrorKind.SERVICE_FAILURE
    assert excinfo.value.cause is boom


async def test_persistence_failure_clears_flag_and_allows_resubmit(identity, classifier, repos):
    orchestrator = SubmissionOrchestrator(identity, classifier, BrokenStore())

    with pytest.raises(PersistenceError):
        await orchestrator.submit("Example Film", "text")
    assert orchestrator.in_flight is False

    orchestrator.repos = repos
    created = await orchestrator.submit("Example Film", "text")
    assert created.id
    # the failed attempt is not reused; resubmitting classifies again
    assert len(classifier.requests) == 2


async def test_concurrent_submit_from_same_caller_is_rejected(orchestrator, classifier, repos):
    classifier.gate = asyncio.Event()

    first = asyncio.create_task(orchestrator.submit("Example Film", "text"))
    await classifier.started.wait()
    assert orchestrator.in_flight is True

    with pytest.raises(BusyError):
        await orchestrator.submit("Example Film", "text")

    classifier.gate.set()
    created = await first

    assert len(classifier.requests) == 1
    listed = await ListingService(repos).list()
    assert [s.id for s in listed] == [created.id]
    assert orchestrator.in_flight is False


async def test_separate_sessions_do_not_block_each_other(classifier, repos):
    classifier.gate = asyncio.Event()
    alice = SubmissionOrchestrator(FakeIdentity("alice"), classifier, repos)
    bob = SubmissionOrchestrator(FakeIdentity("bob"), classifier, repos)

    tasks = [
        asyncio.create_task(alice.submit("A", "text")),
        asyncio.create_task(bob.submit("B", "text")),
    ]
    while len(classifier.requests) < 2:
        await asyncio.sleep(0)
    classifier.gate.set()
    done = await asyncio.gather(*tasks)

    assert {s.owner_id for s in done} == {"alice", "bob"}


def test_sessions_are_shared_per_subject(identity, classifier, repos):
    sessions = SubmissionSessions(lambda: SubmissionOrchestrator(identity, classifier, repos))

    assert sessions.for_subject("alice") is sessions.for_subject("alice")
    assert sessions.for_subject("alice") is not sessions.for_subject("bob")
    assert sessions.for_subject(None) is not sessions.for_subject(None)
    assert len(sessions) == 2


async def test_verdict_message(orchestrator, classifier):
    passed = await orchestrator.submit("Alien", "text")
    classifier.result = type(classifier.result)(verdict=Verdict.FAIL, explanation="Only one woman speaks.")
    failed = await orchestrator.submit("Dunkirk", "text")

    assert verdict_message(passed) == "Alien passes the Bechdel Test."
    assert verdict_message(failed) == "Dunkirk fails the Bechdel Test."


async def test_registry_drops_subject_once_idle(identity, classifier, repos):
    sessions = SubmissionSessions(lambda: SubmissionOrchestrator(identity, classifier, repos))

    await sessions.submit("alice", "A", "text")

    assert len(sessions) == 0
    assert await ListingService(repos).list() != []


async def test_registry_rejects_overlap_for_one_subject(identity, classifier, repos):
    sessions = SubmissionSessions(lambda: SubmissionOrchestrator(identity, classifier, repos))
    classifier.gate = asyncio.Event()

    first = asyncio.create_task(sessions.submit("alice", "A", "text"))
    await classifier.started.wait()
    with pytest.raises(BusyError):
        await sessions.submit("alice", "A", "text")
    assert len(sessions) == 1

    classifier.gate.set()
    await first
    assert len(sessions) == 0
    assert len(classifier.requests) == 1
