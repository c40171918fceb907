"""OpenAI-compatible chat-completions adapter (OpenRouter, vLLM, OpenAI...)."""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from json_repair import repair_json
from loguru import logger

from .core import DEFAULT_TIMEOUT, ClassificationRequest, bounded, decode_json, headers_for, parse_verdict
from .prompts import bechdel_system_prompt, bechdel_user_prompt
from ..domain.submission import Classification
from ..errors import ClassificationError, ClassificationErrorKind


def llm_result_postprocess(content: str) -> Any:
    # models like to wrap the JSON in prose or code fences
    return repair_json(content, return_objects=True)


class ChatCompletionClassifier:
    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not url:
            raise ValueError("chat classifier needs a base url")
        self.base = url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def classify(self, request: ClassificationRequest, timeout: Optional[float] = None) -> Classification:
        payload: Dict[str, Any] = {
            "model": self.model,
            "temperature": 0.0,
            "messages": [
                {"role": "system", "content": bechdel_system_prompt},
                {"role": "user", "content": bechdel_user_prompt(request.title, request.source_text, request.year)},
            ],
        }
        logger.info("classifying {!r} with {}", request.title, self.model)
        resp = await bounded(
            self.client.post(f"{self.base}/chat/completions", json=payload, headers=headers_for(self.api_key)),
            self.timeout if timeout is None else timeout,
        )
        body = decode_json(resp)
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ClassificationError(ClassificationErrorKind.MALFORMED_RESPONSE, cause=e) from e
        if not isinstance(content, str) or not content.strip():
            raise ClassificationError(ClassificationErrorKind.MALFORMED_RESPONSE)
        return parse_verdict(llm_result_postprocess(content))

    async def aclose(self) -> None:
        await self.client.aclose()
