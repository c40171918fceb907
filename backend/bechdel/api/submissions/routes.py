"""Submissions router: submit for classification, list, detail."""
from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends

from ..deps import listing, sessions, subject
from ...errors import ok
from ...services.listing_service import ListingService
from ...services.submission_service import SubmissionSessions, verdict_message
from .schemas import SubmissionCreateIn, SubmissionCreatedOut, SubmissionOut, SubmissionSummaryOut


router = APIRouter(tags=["Submissions"])


@router.post("/")
async def create_submission(
    payload: SubmissionCreateIn,
    user: Optional[str] = Depends(subject),
    registry: SubmissionSessions = Depends(sessions),
):
    created = await registry.submit(
        user,
        payload.title,
        payload.source_text,
        payload.year,
        poster_ref=payload.poster_ref,
        external_ref=payload.external_ref,
    )
    out = SubmissionCreatedOut(id=created.id, verdict=created.verdict, message=verdict_message(created))
    return ok(out.model_dump(mode="json"), 201)


@router.get("/")
async def list_submissions(svc: ListingService = Depends(listing)):
    items = [SubmissionSummaryOut.model_validate(asdict(s)).model_dump(mode="json") for s in await svc.list()]
    return ok(items)


@router.get("/{submission_id}")
async def get_submission(submission_id: str, svc: ListingService = Depends(listing)):
    s = await svc.get(submission_id)
    return ok(SubmissionOut.model_validate(asdict(s)).model_dump(mode="json"))
