"""Agate AI — OpenAI Chat-Completion Provider."""

from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from app.ai.base_provider import (
    AIProvider,
    GenerationFailedError,
    InvalidProviderResponseError,
)
from app.config import settings
from app.core.logging import get_logger

logger = get_logger("ai.openai")

SYSTEM_PROMPT = (
    "You are a helpful marketing and creative assistant for an advertising agency."
)


class OpenAIProvider(AIProvider):
    """Chat-completion shaped provider (`choices[0].message.content`)."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.model = model or settings.ai_model
        self.client = (
            AsyncOpenAI(
                api_key=self.api_key,
                base_url=settings.openai_base_url,
                timeout=settings.ai_timeout_seconds,
                max_retries=0,
                http_client=http_client,
            )
            if self.api_key
            else None
        )

    def is_available(self) -> bool:
        return self.client is not None and bool(self.api_key)

    async def generate(self, prompt: str) -> str:
        if not self.is_available():
            raise GenerationFailedError("OpenAI provider not configured")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=settings.ai_temperature,
                max_tokens=settings.openai_max_tokens,
            )
        except openai.APIStatusError as e:
            logger.error(f"OpenAI API error: {e.status_code} - {e.message}")
            raise GenerationFailedError(
                f"OpenAI API returned {e.status_code}: {e.message}", e.status_code
            ) from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI generation failed: {e}")
            raise GenerationFailedError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise InvalidProviderResponseError("OpenAI API returned no choices")

        content = response.choices[0].message.content or ""
        if not content.strip():
            raise InvalidProviderResponseError("OpenAI API returned empty response")
        return content
