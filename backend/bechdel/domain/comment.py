"""Domain dataclass for comments attached to a submission."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Comment:
    id: str
    seq: int
    submission_id: str
    author_id: str
    body: str
    created_at: datetime
