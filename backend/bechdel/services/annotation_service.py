"""Comment threads on submissions: create, list and owner-only delete."""
from __future__ import annotations

from typing import List

from loguru import logger

from ..auth.jwt import IdentityGate
from ..db.repositories.factory import Repositories
from ..domain.comment import Comment
from ..errors import AuthenticationError, AuthorizationError, NotFoundError, ValidationError


class AnnotationService:
    def __init__(self, identity: IdentityGate, repos: Repositories) -> None:
        self.identity = identity
        self.repos = repos

    async def _require_user(self) -> str:
        user_id = await self.identity.current_user()
        if user_id is None:
            raise AuthenticationError()
        return user_id

    async def list(self, submission_id: str) -> List[Comment]:
        async with self.repos.comments() as repo:
            return await repo.list_for(submission_id)

    async def create(self, submission_id: str, body: str) -> Comment:
        user_id = await self._require_user()
        if not isinstance(body, str) or not body.strip():
            raise ValidationError("Comment text must not be empty.")

        async with self.repos.submissions() as submissions:
            if not await submissions.exists(submission_id):
                raise NotFoundError("That analysis does not exist.")
        async with self.repos.comments() as repo:
            comment = await repo.create(submission_id=submission_id, author_id=user_id, body=body.strip())
        logger.info("user {} commented on {}", user_id, submission_id)
        return comment

    async def delete(self, comment_id: str) -> None:
        user_id = await self._require_user()
        async with self.repos.comments() as repo:
            comment = await repo.get(comment_id)
            if comment is None:
                raise NotFoundError("That comment does not exist.")
            if comment.author_id != user_id:
                logger.warning("user {} tried to delete comment {} of {}", user_id, comment_id, comment.author_id)
                raise AuthorizationError()
            if not await repo.delete(comment_id):
                # removed by its author between the read and the delete
                raise NotFoundError("That comment does not exist.")
        logger.info("user {} deleted comment {}", user_id, comment_id)
