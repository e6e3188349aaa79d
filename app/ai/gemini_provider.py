"""Agate AI — Google Gemini generateContent Provider.

Talks to the REST endpoint directly with httpx and unwraps the
`candidates[0].content.parts[0].text` envelope.
"""

from typing import Any, Dict, Optional

import httpx

from app.ai.base_provider import (
    AIProvider,
    GenerationFailedError,
    InvalidProviderResponseError,
)
from app.config import settings
from app.core.logging import get_logger

logger = get_logger("ai.gemini")

BLOCKED_FINISH_REASONS = {"SAFETY", "RECITATION", "OTHER"}


class GeminiProvider(AIProvider):
    """Single-prompt `generateContent` provider."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.model = model or settings.ai_model
        self._client = http_client

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{settings.gemini_base_url}/models/{self.model}:generateContent"

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": settings.ai_temperature,
                "maxOutputTokens": settings.gemini_max_output_tokens,
            },
        }

    async def _post(self, prompt: str) -> httpx.Response:
        headers = {"x-goog-api-key": self.api_key or ""}
        if self._client is not None:
            return await self._client.post(
                self.url, json=self._payload(prompt), headers=headers
            )
        async with httpx.AsyncClient(timeout=settings.ai_timeout_seconds) as client:
            return await client.post(
                self.url, json=self._payload(prompt), headers=headers
            )

    async def generate(self, prompt: str) -> str:
        if not self.is_available():
            raise GenerationFailedError("Gemini provider not configured")

        try:
            resp = await self._post(prompt)
        except httpx.RequestError as e:
            logger.error(f"Gemini request failed: {e}")
            raise GenerationFailedError(f"Gemini request failed: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.error(f"Gemini API error: {resp.status_code} - {resp.text[:500]}")
            raise GenerationFailedError(
                f"Gemini API returned {resp.status_code}: {resp.text[:500]}",
                resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise InvalidProviderResponseError(
                f"Gemini API returned invalid JSON: {resp.text[:200]}"
            ) from e

        return extract_gemini_text(body)


def extract_gemini_text(body: Any) -> str:
    """Pull the generated text out of a generateContent response body."""
    if not isinstance(body, dict):
        raise InvalidProviderResponseError(
            f"Unexpected Gemini API response structure: {str(body)[:500]}"
        )

    candidates = body.get("candidates")
    if isinstance(candidates, list) and candidates:
        candidate = candidates[0] or {}

        reason = candidate.get("finishReason")
        if reason in BLOCKED_FINISH_REASONS:
            logger.warning(f"Gemini API blocked response: {reason}")
            if "safetyRatings" in candidate:
                raise InvalidProviderResponseError(
                    f"Gemini API blocked response due to: {reason}"
                )
            raise InvalidProviderResponseError(
                f"Gemini API returned finishReason: {reason}"
            )

        parts = (candidate.get("content") or {}).get("parts")
        if isinstance(parts, list) and parts and "text" in (parts[0] or {}):
            text = parts[0].get("text") or ""
            if not text.strip():
                raise InvalidProviderResponseError("Gemini API returned empty response")
            return text

    error = body.get("error")
    if error is not None:
        message = error.get("message") if isinstance(error, dict) else None
        logger.error(f"Gemini API error: {message or 'Unknown error'}")
        raise InvalidProviderResponseError(
            f"Gemini API error: {message or 'Unknown error'}"
        )

    logger.error("Unexpected Gemini API response structure")
    raise InvalidProviderResponseError(
        f"Unexpected Gemini API response structure. Response: {str(body)[:500]}"
    )
