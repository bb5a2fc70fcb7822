from __future__ import annotations

import logging
from typing import Any

import httpx

from talentscout.logging_utils import structured_log
from talentscout.services.enrichment.errors import (
    GenerationConfigError,
    GenerationEmptyResponseError,
    GenerationHTTPError,
    GenerationNetworkError,
    GenerationTimeoutError,
)
from talentscout.settings import settings

logger = logging.getLogger(__name__)


def extract_candidate_text(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts") or []
    if not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class GeminiClient:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = settings.gemini_timeout_seconds if timeout_seconds is None else float(timeout_seconds)
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        """Send one prompt to ``generateContent`` and return the first candidate's text."""
        if not self.api_key:
            raise GenerationConfigError("GEMINI_API_KEY is not configured")

        body = {"contents": [{"parts": [{"text": prompt}]}]}
        structured_log(logger, "debug", "gemini.request_started", model=self.model, prompt_chars=len(prompt))
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException as exc:
            raise GenerationTimeoutError(f"Gemini request timed out after {self.timeout:.1f}s") from exc
        except httpx.HTTPError as exc:
            raise GenerationNetworkError(f"Gemini request failed: {type(exc).__name__}") from exc

        if response.status_code >= 400:
            structured_log(
                logger,
                "warning",
                "gemini.http_error",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise GenerationHTTPError(
                f"Gemini API error {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise GenerationEmptyResponseError("Gemini returned a non-JSON body") from exc

        text = extract_candidate_text(payload)
        if text is None:
            structured_log(
                logger,
                "warning",
                "gemini.empty_content",
                finish_reason=_finish_reason(payload),
            )
            raise GenerationEmptyResponseError("Empty response from Gemini")
        return text


def _finish_reason(payload: Any) -> str | None:
    try:
        return payload["candidates"][0].get("finishReason")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
