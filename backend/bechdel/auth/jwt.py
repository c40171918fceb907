"""JWT helpers and the bearer-token identity gate.

The token of the request being served lives in a context variable, so every
asyncio task (one per request) sees its own caller.
"""
from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional, Protocol

import jwt
from fastapi import Request
from loguru import logger

from ..config import BaseConfig

_bearer_token: ContextVar[Optional[str]] = ContextVar("bearer_token", default=None)


class IdentityGate(Protocol):
    async def current_user(self) -> Optional[str]: ...


def encode(config: BaseConfig, payload: Dict[str, Any]) -> str:
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALG)


def decode(config: BaseConfig, token: str) -> Dict[str, Any]:
    options = {} if config.JWT_AUDIENCE else {"verify_aud": False}
    return jwt.decode(
        token,
        config.JWT_SECRET,
        algorithms=[config.JWT_ALG],
        audience=config.JWT_AUDIENCE,
        options=options,
    )


def bind_token(token: Optional[str]) -> None:
    _bearer_token.set(token or None)


def token_from_header(authorization: str) -> Optional[str]:
    if not authorization.startswith("Bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def subject(config: BaseConfig, token: Optional[str]) -> Optional[str]:
    """User id carried by `token`, or None when the token is absent or invalid."""
    if not token:
        return None
    try:
        claims = decode(config, token)
    except jwt.PyJWTError as e:
        logger.info("rejected bearer token: {}", e)
        return None
    sub = claims.get("sub")
    return str(sub) if sub else None


class BearerIdentity:
    """Resolves the current user from the bearer token bound to this context."""

    def __init__(self, config: BaseConfig) -> None:
        self.config = config

    async def current_user(self) -> Optional[str]:
        return subject(self.config, _bearer_token.get())


async def bind_request_token(request: Request) -> Optional[str]:
    """FastAPI dependency: binds the request's bearer token and returns it.

    Must stay async so the binding happens in the task that serves the request.
    """
    token = token_from_header(request.headers.get("Authorization", ""))
    bind_token(token)
    return token
