"""Health check endpoints."""
from __future__ import annotations

from fastapi import APIRouter

from ...errors import ok
from ...integrations.supabase_client import supabase_ext


router = APIRouter(tags=["Health"])


@router.get("/")
async def alive():
    return ok({"status": "ok"})


@router.get("/supabase")
async def supabase_status():
    return ok({
        "anon_initialized": bool(supabase_ext.anon is not None),
        "service_initialized": bool(supabase_ext.service is not None),
    })
