"""Comments router; threads hang off a submission, deletes are by comment id."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from ..deps import annotations
from ...errors import ok
from ...services.annotation_service import AnnotationService
from .schemas import CommentCreateIn, CommentOut


router = APIRouter(tags=["Comments"])


@router.get("/submissions/{submission_id}/comments")
async def list_comments(submission_id: str, svc: AnnotationService = Depends(annotations)):
    items = [CommentOut.model_validate(asdict(c)).model_dump(mode="json") for c in await svc.list(submission_id)]
    return ok(items)


@router.post("/submissions/{submission_id}/comments")
async def create_comment(submission_id: str, payload: CommentCreateIn, svc: AnnotationService = Depends(annotations)):
    c = await svc.create(submission_id, payload.body)
    return ok(CommentOut.model_validate(asdict(c)).model_dump(mode="json"), 201)


@router.delete("/comments/{comment_id}")
async def delete_comment(comment_id: str, svc: AnnotationService = Depends(annotations)):
    await svc.delete(comment_id)
    return ok({"deleted": True})
