"""Application configuration objects."""
from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class BaseConfig:
    SECRET_KEY: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "change-me"))

    # Database
    DATABASE_URL: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./bechdel.db")
    )
    SQL_ECHO: bool = field(default_factory=lambda: _env_bool("SQL_ECHO"))
    POOL_SIZE: int = field(default_factory=lambda: int(os.getenv("POOL_SIZE", 10)))
    MAX_OVERFLOW: int = field(default_factory=lambda: int(os.getenv("MAX_OVERFLOW", 20)))

    # Repository backend
    REPO_BACKEND: str = field(default_factory=lambda: os.getenv("REPO_BACKEND", "sqlalchemy"))

    # Supabase
    SUPABASE_URL: str | None = field(default_factory=lambda: os.getenv("SUPABASE_URL") or None)
    SUPABASE_ANON_KEY: str | None = field(default_factory=lambda: os.getenv("SUPABASE_ANON_KEY") or None)
    SUPABASE_SERVICE_ROLE_KEY: str | None = field(
        default_factory=lambda: os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None
    )

    # JWT (Supabase access tokens are HS256 signed with the project JWT secret)
    JWT_SECRET: str = field(default_factory=lambda: os.getenv("JWT_SECRET", "change-me"))
    JWT_ALG: str = field(default_factory=lambda: os.getenv("JWT_ALG", "HS256"))
    JWT_AUDIENCE: str | None = field(default_factory=lambda: os.getenv("JWT_AUDIENCE") or None)

    # Classifier
    CLASSIFIER_BACKEND: str = field(default_factory=lambda: os.getenv("CLASSIFIER_BACKEND", "edge_function"))
    CLASSIFIER_URL: str | None = field(default_factory=lambda: os.getenv("CLASSIFIER_URL") or None)
    CLASSIFIER_API_KEY: str | None = field(default_factory=lambda: os.getenv("CLASSIFIER_API_KEY") or None)
    CLASSIFIER_MODEL: str = field(default_factory=lambda: os.getenv("CLASSIFIER_MODEL", "gpt-4o-mini"))
    CLASSIFIER_TIMEOUT: float = field(default_factory=lambda: float(os.getenv("CLASSIFIER_TIMEOUT", 60)))

    # HTTP
    FRONTEND_ORIGIN: str = field(default_factory=lambda: os.getenv("FRONTEND_ORIGIN", "http://localhost:5173"))
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def classifier_url(self) -> str | None:
        """Classifier endpoint; the edge function defaults to the Supabase project's one."""
        if self.CLASSIFIER_URL:
            return self.CLASSIFIER_URL
        if self.CLASSIFIER_BACKEND == "edge_function" and self.SUPABASE_URL:
            return f"{self.SUPABASE_URL.rstrip('/')}/functions/v1/analyze-bechdel"
        return None

    def classifier_key(self) -> str | None:
        return self.CLASSIFIER_API_KEY or self.SUPABASE_ANON_KEY
