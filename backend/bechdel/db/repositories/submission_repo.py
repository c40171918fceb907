"""SQLAlchemy-backed Submission repository returning dataclasses (append-only)."""
from __future__ import annotations

import uuid
from typing import List, Optional

from loguru import logger
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.submission import SubmissionModel
from ...domain.submission import NewSubmission, Submission, SubmissionSummary, stored_verdict
from ...errors import PersistenceError


def _to_dc(m: SubmissionModel) -> Submission:
    return Submission(
        id=m.id,
        seq=m.seq,
        title=m.title,
        source_text=m.source_text,
        verdict=stored_verdict(m.verdict),
        explanation=m.explanation or "",
        owner_id=m.owner_id,
        created_at=m.created_at,
        year=m.year,
        poster_ref=m.poster_ref,
        external_ref=m.external_ref,
    )


class SubmissionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_summaries(self) -> List[SubmissionSummary]:
        stmt: Select = select(
            SubmissionModel.id,
            SubmissionModel.title,
            SubmissionModel.year,
            SubmissionModel.verdict,
            SubmissionModel.created_at,
            SubmissionModel.poster_ref,
        ).order_by(SubmissionModel.created_at.desc(), SubmissionModel.seq.desc())
        try:
            rows = (await self.session.execute(stmt)).all()
        except SQLAlchemyError as e:
            raise PersistenceError() from e
        return [
            SubmissionSummary(
                id=r.id,
                title=r.title,
                year=r.year,
                verdict=stored_verdict(r.verdict),
                created_at=r.created_at,
                poster_ref=r.poster_ref,
            )
            for r in rows
        ]

    async def get(self, submission_id: str) -> Optional[Submission]:
        stmt = select(SubmissionModel).where(SubmissionModel.id == submission_id).limit(1)
        try:
            m = (await self.session.scalars(stmt)).first()
        except SQLAlchemyError as e:
            raise PersistenceError() from e
        return _to_dc(m) if m else None

    async def exists(self, submission_id: str) -> bool:
        stmt = select(SubmissionModel.seq).where(SubmissionModel.id == submission_id).limit(1)
        try:
            return (await self.session.scalars(stmt)).first() is not None
        except SQLAlchemyError as e:
            raise PersistenceError() from e

    async def create(self, data: NewSubmission) -> Submission:
        m = SubmissionModel(
            id=str(uuid.uuid4()),
            title=data.title,
            year=data.year,
            source_text=data.source_text,
            verdict=data.verdict.value,
            explanation=data.explanation,
            poster_ref=data.poster_ref,
            external_ref=data.external_ref,
            owner_id=data.owner_id,
        )
        try:
            self.session.add(m)
            await self.session.commit()
            await self.session.refresh(m)
        except SQLAlchemyError as e:
            logger.error("submission insert failed: {}", e)
            await self.session.rollback()
            raise PersistenceError() from e
        return _to_dc(m)
