"""FastAPI dependencies resolving the services stored on app.state."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from ..auth.jwt import BearerIdentity, bind_request_token
from ..services.annotation_service import AnnotationService
from ..services.listing_service import ListingService
from ..services.submission_service import SubmissionSessions


async def identity(request: Request, _token: str | None = Depends(bind_request_token)) -> BearerIdentity:
    return request.app.state.identity


async def subject(gate: BearerIdentity = Depends(identity)) -> Optional[str]:
    return await gate.current_user()


def sessions(request: Request) -> SubmissionSessions:
    return request.app.state.sessions


def listing(request: Request) -> ListingService:
    return ListingService(request.app.state.repos)


async def annotations(request: Request, gate: BearerIdentity = Depends(identity)) -> AnnotationService:
    return AnnotationService(gate, request.app.state.repos)
