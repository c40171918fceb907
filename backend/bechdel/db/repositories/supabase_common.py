"""Shared helpers for the Supabase-backed repositories (supabase-py v2 async client)."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Awaitable, Dict, List

import httpx
from loguru import logger
from postgrest.exceptions import APIError

from ...errors import PersistenceError


def parse_ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


async def run(query: Awaitable[Any], what: str) -> List[Dict[str, Any]]:
    """Await a postgrest request and return its rows, mapping transport/API errors."""
    try:
        res = await query
    except (APIError, httpx.HTTPError) as e:
        logger.error("supabase {} failed: {}", what, e)
        raise PersistenceError() from e
    return list(res.data or [])
