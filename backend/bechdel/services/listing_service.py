"""Read-only query surface over submissions (public, newest first)."""
from __future__ import annotations

from typing import List

from ..db.repositories.factory import Repositories
from ..domain.submission import Submission, SubmissionSummary
from ..errors import NotFoundError


class ListingService:
    def __init__(self, repos: Repositories) -> None:
        self.repos = repos

    async def list(self) -> List[SubmissionSummary]:
        async with self.repos.submissions() as repo:
            return await repo.list_summaries()

    async def get(self, submission_id: str) -> Submission:
        async with self.repos.submissions() as repo:
            found = await repo.get(submission_id)
        if found is None:
            raise NotFoundError("That analysis does not exist.")
        return found
