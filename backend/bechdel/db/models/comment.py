"""Comment ORM model; `analysis_id` references movie_analyses.id."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


class CommentModel(Base):
    __tablename__ = "comments"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, index=True)
    submission_id: Mapped[str] = mapped_column(
        "analysis_id", String(36), ForeignKey("movie_analyses.id"), nullable=False, index=True
    )
    author_id: Mapped[str] = mapped_column("user_id", String(36), nullable=False)
    body: Mapped[str] = mapped_column("content", Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=func.now(), nullable=False)
