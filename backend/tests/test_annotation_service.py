import pytest

from bechdel.domain.submission import NewSubmission, Verdict
from bechdel.errors import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from bechdel.services.annotation_service import AnnotationService

from conftest import FakeIdentity


@pytest.fixture
async def submission_id(repos):
    async with repos.submissions() as repo:
        s = await repo.create(
            NewSubmission(title="Alien", source_text="text", verdict=Verdict.PASS, explanation="x", owner_id="owner")
        )
    return s.id


def _service(repos, user="user-1"):
    return AnnotationService(FakeIdentity(user), repos)


async def test_no_comments_is_empty_list(repos, submission_id):
    assert await _service(repos).list(submission_id) == []


async def test_create_and_list_newest_first(repos, submission_id):
    svc = _service(repos)
    first = await svc.create(submission_id, "  first  ")
    second = await svc.create(submission_id, "second")

    listed = await svc.list(submission_id)

    assert [c.id for c in listed] == [second.id, first.id]
    assert listed[1].body == "first"
    assert all(c.author_id == "user-1" for c in listed)
    assert all(c.submission_id == submission_id for c in listed)


async def test_identical_comments_are_allowed(repos, submission_id):
    svc = _service(repos)
    await svc.create(submission_id, "same")
    await svc.create(submission_id, "same")

    assert [c.body for c in await svc.list(submission_id)] == ["same", "same"]


async def test_threads_are_scoped_to_their_submission(repos, submission_id):
    async with repos.submissions() as repo:
        other = await repo.create(
            NewSubmission(title="Heat", source_text="t", verdict=Verdict.FAIL, explanation="x", owner_id="owner")
        )
    svc = _service(repos)
    await svc.create(submission_id, "on alien")
    await svc.create(other.id, "on heat")

    assert [c.body for c in await svc.list(submission_id)] == ["on alien"]
    assert [c.body for c in await svc.list(other.id)] == ["on heat"]


async def test_create_unauthenticated_leaves_thread_unchanged(repos, submission_id):
    with pytest.raises(AuthenticationError):
        await _service(repos, None).create(submission_id, "hello")

    assert await _service(repos).list(submission_id) == []


@pytest.mark.parametrize("body", ["", "   ", "\n\t"])
async def test_create_rejects_blank_body(repos, submission_id, body):
    with pytest.raises(ValidationError):
        await _service(repos).create(submission_id, body)

    assert await _service(repos).list(submission_id) == []


async def test_create_on_unknown_submission(repos):
    with pytest.raises(NotFoundError):
        await _service(repos).create("missing", "hello")


async def test_author_can_delete(repos, submission_id):
    svc = _service(repos, "alice")
    keep = await svc.create(submission_id, "keep")
    drop = await svc.create(submission_id, "drop")

    await svc.delete(drop.id)

    assert [c.id for c in await svc.list(submission_id)] == [keep.id]


async def test_other_user_cannot_delete(repos, submission_id):
    comment = await _service(repos, "alice").create(submission_id, "mine")

    with pytest.raises(AuthorizationError):
        await _service(repos, "mallory").delete(comment.id)

    assert [c.id for c in await _service(repos).list(submission_id)] == [comment.id]


async def test_authorization_is_checked_before_store_delete(repos, submission_id):
    comment = await _service(repos, "alice").create(submission_id, "mine")
    deleted = []

    class SpyRepos:
        def __init__(self, inner):
            self.inner = inner

        def comments(self):
            inner = self.inner.comments()

            class _Ctx:
                async def __aenter__(self_):
                    repo = await inner.__aenter__()
                    original = repo.delete

                    async def spy(comment_id):
                        deleted.append(comment_id)
                        return await original(comment_id)

                    repo.delete = spy
                    return repo

                async def __aexit__(self_, *exc):
                    return await inner.__aexit__(*exc)

            return _Ctx()

    with pytest.raises(AuthorizationError):
        await AnnotationService(FakeIdentity("mallory"), SpyRepos(repos)).delete(comment.id)
    assert deleted == []


async def test_delete_unauthenticated(repos, submission_id):
    comment = await _service(repos).create(submission_id, "mine")

    with pytest.raises(AuthenticationError):
        await _service(repos, None).delete(comment.id)

    assert len(await _service(repos).list(submission_id)) == 1


async def test_delete_unknown_comment(repos, submission_id):
    with pytest.raises(NotFoundError):
        await _service(repos).delete("missing")


async def test_delete_twice(repos, submission_id):
    svc = _service(repos)
    comment = await svc.create(submission_id, "once")
    await svc.delete(comment.id)

    with pytest.raises(NotFoundError):
        await svc.delete(comment.id)
