"""HTTP adapter for the hosted `analyze-bechdel` function."""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .core import DEFAULT_TIMEOUT, ClassificationRequest, bounded, decode_json, headers_for, parse_verdict
from ..domain.submission import Classification


class EdgeFunctionClassifier:
    """Posts `{movieTitle, scriptText, movieYear}` and reads `{result, explanation}`."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not url:
            raise ValueError("edge function classifier needs a url")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def classify(self, request: ClassificationRequest, timeout: Optional[float] = None) -> Classification:
        payload: Dict[str, Any] = {"movieTitle": request.title, "scriptText": request.source_text}
        if request.year is not None:
            payload["movieYear"] = request.year
        logger.info("classifying {!r} via edge function", request.title)
        resp = await bounded(
            self.client.post(self.url, json=payload, headers=headers_for(self.api_key)),
            self.timeout if timeout is None else timeout,
        )
        return parse_verdict(decode_json(resp))

    async def aclose(self) -> None:
        await self.client.aclose()
