"""Supabase-backed Submission repository.

Expects the `movie_analyses` table with an identity column `seq` next to the
UUID primary key; `seq` and `created_at` are assigned by the database.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from .supabase_common import parse_ts, run
from ...domain.submission import NewSubmission, Submission, SubmissionSummary, stored_verdict
from ...errors import PersistenceError

SUMMARY_COLUMNS = "id, movie_title, movie_year, bechdel_result, created_at, poster_path"


def _row_to_dc(row: Dict[str, Any]) -> Submission:
    return Submission(
        id=str(row.get("id")),
        seq=int(row.get("seq") or 0),
        title=row.get("movie_title", ""),
        source_text=row.get("script_text", ""),
        verdict=stored_verdict(row.get("bechdel_result")),
        explanation=row.get("explanation") or "",
        owner_id=str(row.get("user_id")),
        created_at=parse_ts(row.get("created_at")),
        year=row.get("movie_year"),
        poster_ref=row.get("poster_path"),
        external_ref=row.get("tmdb_id"),
    )


class SubmissionRepositorySupabase:
    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def list_summaries(self) -> List[SubmissionSummary]:
        q = (
            self.client.table("movie_analyses")
            .select(SUMMARY_COLUMNS)
            .order("created_at", desc=True)
            .order("seq", desc=True)
        )
        rows = await run(q.execute(), "select movie_analyses")
        return [
            SubmissionSummary(
                id=str(r.get("id")),
                title=r.get("movie_title", ""),
                year=r.get("movie_year"),
                verdict=stored_verdict(r.get("bechdel_result")),
                created_at=parse_ts(r.get("created_at")),
                poster_ref=r.get("poster_path"),
            )
            for r in rows
        ]

    async def get(self, submission_id: str) -> Optional[Submission]:
        q = self.client.table("movie_analyses").select("*").eq("id", submission_id).limit(1)
        rows = await run(q.execute(), "select movie_analyses")
        return _row_to_dc(rows[0]) if rows else None

    async def exists(self, submission_id: str) -> bool:
        q = self.client.table("movie_analyses").select("id").eq("id", submission_id).limit(1)
        return bool(await run(q.execute(), "select movie_analyses"))

    async def create(self, data: NewSubmission) -> Submission:
        row = {
            "id": str(uuid.uuid4()),
            "user_id": data.owner_id,
            "movie_title": data.title,
            "movie_year": data.year,
            "tmdb_id": data.external_ref,
            "poster_path": data.poster_ref,
            "script_text": data.source_text,
            "bechdel_result": data.verdict.value,
            "explanation": data.explanation,
        }
        rows = await run(self.client.table("movie_analyses").insert(row).execute(), "insert movie_analyses")
        if not rows:
            raise PersistenceError("The result could not be saved: the store returned no record.")
        return _row_to_dc(rows[0])
