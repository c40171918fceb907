"""SQLAlchemy-backed Comment repository returning dataclasses."""
from __future__ import annotations

import uuid
from typing import List, Optional

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.comment import CommentModel
from ...domain.comment import Comment
from ...errors import PersistenceError


def _to_dc(m: CommentModel) -> Comment:
    return Comment(
        id=m.id,
        seq=m.seq,
        submission_id=m.submission_id,
        author_id=m.author_id,
        body=m.body,
        created_at=m.created_at,
    )


class CommentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for(self, submission_id: str) -> List[Comment]:
        stmt = (
            select(CommentModel)
            .where(CommentModel.submission_id == submission_id)
            .order_by(CommentModel.created_at.desc(), CommentModel.seq.desc())
        )
        try:
            return [_to_dc(m) for m in (await self.session.scalars(stmt)).all()]
        except SQLAlchemyError as e:
            raise PersistenceError() from e

    async def get(self, comment_id: str) -> Optional[Comment]:
        stmt = select(CommentModel).where(CommentModel.id == comment_id).limit(1)
        try:
            m = (await self.session.scalars(stmt)).first()
        except SQLAlchemyError as e:
            raise PersistenceError() from e
        return _to_dc(m) if m else None

    async def create(self, *, submission_id: str, author_id: str, body: str) -> Comment:
        m = CommentModel(id=str(uuid.uuid4()), submission_id=submission_id, author_id=author_id, body=body)
        try:
            self.session.add(m)
            await self.session.commit()
            await self.session.refresh(m)
        except SQLAlchemyError as e:
            logger.error("comment insert failed: {}", e)
            await self.session.rollback()
            raise PersistenceError() from e
        return _to_dc(m)

    async def delete(self, comment_id: str) -> bool:
        try:
            res = await self.session.execute(delete(CommentModel).where(CommentModel.id == comment_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error("comment delete failed: {}", e)
            await self.session.rollback()
            raise PersistenceError() from e
        return bool(res.rowcount)
