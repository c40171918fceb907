"""Supabase async client initialization as an application extension."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from supabase import AsyncClient, acreate_client

from ..config import BaseConfig


@dataclass
class _SBClients:
    anon: Optional[AsyncClient] = None
    service: Optional[AsyncClient] = None


class SupabaseExt:
    def __init__(self) -> None:
        self.clients = _SBClients()

    async def init_app(self, config: BaseConfig) -> None:
        url = config.SUPABASE_URL
        anon_key = config.SUPABASE_ANON_KEY
        service_key = config.SUPABASE_SERVICE_ROLE_KEY
        self.clients = _SBClients()
        if url and anon_key:
            self.clients.anon = await acreate_client(url, anon_key)
        if url and service_key:
            self.clients.service = await acreate_client(url, service_key)
        if url and not (anon_key or service_key):
            logger.warning("SUPABASE_URL is set but no key is configured; Supabase clients stay disabled")

    async def aclose(self) -> None:
        # the repositories only talk to PostgREST
        for client in (self.clients.anon, self.clients.service):
            if client is not None:
                await client.postgrest.aclose()
        self.clients = _SBClients()

    @property
    def anon(self) -> Optional[AsyncClient]:
        return self.clients.anon

    @property
    def service(self) -> Optional[AsyncClient]:
        return self.clients.service


supabase_ext = SupabaseExt()
