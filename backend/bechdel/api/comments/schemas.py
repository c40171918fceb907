"""Pydantic request/response schemas for Comments API."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreateIn(BaseModel):
    body: str = Field(..., min_length=1, max_length=5000)


class CommentOut(BaseModel):
    id: str
    submission_id: str
    author_id: str
    body: str
    created_at: datetime
