"""Abstract classifier interface, shared response handling and factory."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Optional, Protocol

import httpx

from ..domain.submission import Classification, Verdict
from ..errors import ClassificationError, ClassificationErrorKind

DEFAULT_TIMEOUT = 60.0


@dataclass(slots=True, frozen=True)
class ClassificationRequest:
    title: str
    source_text: str
    year: Optional[int] = None


class Classifier(Protocol):
    async def classify(self, request: ClassificationRequest, timeout: Optional[float] = None) -> Classification: ...

    async def aclose(self) -> None: ...


def parse_verdict(payload: Any, verdict_key: str = "result") -> Classification:
    """Turn a decoded classifier answer into a Classification or raise MalformedResponse."""
    if not isinstance(payload, dict) or not payload:
        raise ClassificationError(ClassificationErrorKind.MALFORMED_RESPONSE)
    raw = payload.get(verdict_key, payload.get("verdict"))
    try:
        verdict = Verdict.parse(raw)
    except ValueError as e:
        raise ClassificationError(ClassificationErrorKind.MALFORMED_RESPONSE, cause=e) from e
    explanation = payload.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        raise ClassificationError(ClassificationErrorKind.MALFORMED_RESPONSE)
    return Classification(verdict=verdict, explanation=explanation.strip())


def decode_json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise ClassificationError(ClassificationErrorKind.MALFORMED_RESPONSE, cause=e) from e


async def bounded(call: Awaitable[httpx.Response], timeout: float) -> httpx.Response:
    """Await an HTTP call under a wall-clock bound, mapping failures to ClassificationError."""
    try:
        resp = await asyncio.wait_for(call, timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise ClassificationError(ClassificationErrorKind.TIMEOUT, cause=e) from e
    except httpx.HTTPError as e:
        raise ClassificationError(ClassificationErrorKind.SERVICE_FAILURE, cause=e) from e
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ClassificationError(
            ClassificationErrorKind.SERVICE_FAILURE,
            f"The analysis service answered with HTTP {resp.status_code}.",
            cause=e,
        ) from e
    return resp


def get_classifier(kind: str, **kwargs) -> Classifier:
    kind = kind.lower()
    if kind == "edge_function":
        from .edge_function_client import EdgeFunctionClassifier
        return EdgeFunctionClassifier(**kwargs)
    if kind == "chat":
        from .chat_client import ChatCompletionClassifier
        return ChatCompletionClassifier(**kwargs)
    raise ValueError(f"unsupported classifier backend: {kind}")


def headers_for(api_key: Optional[str]) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers
