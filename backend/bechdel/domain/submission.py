"""Domain dataclasses for classified submissions (DB-agnostic)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class Verdict(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"

    @classmethod
    def parse(cls, value: object) -> "Verdict":
        """Case-insensitive lookup; raises ValueError for anything outside the rubric."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"unknown verdict: {value!r}")


# rows written by other clients may carry labels outside Pass/Fail
StoredVerdict = Union[Verdict, str]


def stored_verdict(value: object) -> StoredVerdict:
    """Verdict read back from the store; unknown labels are kept as written."""
    try:
        return Verdict.parse(value)
    except ValueError:
        return str(value or "")


def verdict_label(verdict: StoredVerdict) -> str:
    return verdict.value if isinstance(verdict, Verdict) else verdict


@dataclass(slots=True, frozen=True)
class Classification:
    verdict: Verdict
    explanation: str


@dataclass(slots=True, frozen=True)
class NewSubmission:
    """Fields written by the orchestrator; id, seq and created_at come from the store."""

    title: str
    source_text: str
    verdict: Verdict
    explanation: str
    owner_id: str
    year: Optional[int] = None
    poster_ref: Optional[str] = None
    external_ref: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Submission:
    id: str
    seq: int
    title: str
    source_text: str
    verdict: StoredVerdict
    explanation: str
    owner_id: str
    created_at: datetime
    year: Optional[int] = None
    poster_ref: Optional[str] = None
    external_ref: Optional[str] = None


@dataclass(slots=True, frozen=True)
class SubmissionSummary:
    id: str
    title: str
    year: Optional[int]
    verdict: StoredVerdict
    created_at: datetime
    poster_ref: Optional[str] = None
