"""Supabase-backed Comment repository."""
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from .supabase_common import parse_ts, run
from ...domain.comment import Comment
from ...errors import PersistenceError


def _row_to_dc(row: Dict[str, Any]) -> Comment:
    return Comment(
        id=str(row.get("id")),
        seq=int(row.get("seq") or 0),
        submission_id=str(row.get("analysis_id")),
        author_id=str(row.get("user_id")),
        body=row.get("content", ""),
        created_at=parse_ts(row.get("created_at")),
    )


class CommentRepositorySupabase:
    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def list_for(self, submission_id: str) -> List[Comment]:
        q = (
            self.client.table("comments")
            .select("*")
            .eq("analysis_id", submission_id)
            .order("created_at", desc=True)
            .order("seq", desc=True)
        )
        return [_row_to_dc(r) for r in await run(q.execute(), "select comments")]

    async def get(self, comment_id: str) -> Optional[Comment]:
        q = self.client.table("comments").select("*").eq("id", comment_id).limit(1)
        rows = await run(q.execute(), "select comments")
        return _row_to_dc(rows[0]) if rows else None

    async def create(self, *, submission_id: str, author_id: str, body: str) -> Comment:
        row = {"id": str(uuid.uuid4()), "analysis_id": submission_id, "user_id": author_id, "content": body}
        rows = await run(self.client.table("comments").insert(row).execute(), "insert comments")
        if not rows:
            raise PersistenceError("The comment could not be saved: the store returned no record.")
        return _row_to_dc(rows[0])

    async def delete(self, comment_id: str) -> bool:
        rows = await run(self.client.table("comments").delete().eq("id", comment_id).execute(), "delete comments")
        return bool(rows)
