"""Submission ORM model; column names match the hosted `movie_analyses` table."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


class SubmissionModel(Base):
    __tablename__ = "movie_analyses"

    # insertion sequence, tie-break for equal created_at
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, index=True)  # UUID string

    title: Mapped[str] = mapped_column("movie_title", String(500), nullable=False)
    year: Mapped[Optional[int]] = mapped_column("movie_year", Integer, default=None)
    source_text: Mapped[str] = mapped_column("script_text", Text, nullable=False)
    verdict: Mapped[str] = mapped_column("bechdel_result", String(20), nullable=False)
    explanation: Mapped[str] = mapped_column(Text, default="")
    poster_ref: Mapped[Optional[str]] = mapped_column("poster_path", String(500), default=None)
    external_ref: Mapped[Optional[str]] = mapped_column("tmdb_id", String(64), default=None)
    owner_id: Mapped[str] = mapped_column("user_id", String(36), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(default=func.now(), nullable=False)
