"""Pydantic request/response schemas for Submissions API."""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from ...domain.submission import Verdict


class SubmissionCreateIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    source_text: str = Field(..., min_length=1)
    year: Optional[int] = Field(default=None, gt=0)
    poster_ref: Optional[str] = Field(default=None, max_length=500)
    external_ref: Optional[str] = Field(default=None, max_length=64)


class SubmissionSummaryOut(BaseModel):
    id: str
    title: str
    year: Optional[int]
    verdict: Union[Verdict, str]
    created_at: datetime
    poster_ref: Optional[str]


class SubmissionOut(SubmissionSummaryOut):
    source_text: str
    explanation: str
    owner_id: str
    external_ref: Optional[str]


class SubmissionCreatedOut(BaseModel):
    id: str
    verdict: Verdict
    message: str
