"""Agate AI — Text Generation Front Door.

Selects the configured provider once and turns every outcome into text the
parser can consume:

* no API key      → canned mock JSON (mock mode)
* provider error  → canned mock JSON (degraded, logged)
* live output     → generated text with code fences stripped

Degrading to mock output on provider failure is deliberate: the caller always
gets a structured answer, clearly labelled as placeholder content when it is
one. Do not change this to propagate provider errors.
"""

from typing import Dict, Optional, Type

from app.ai.base_provider import AIProvider, GenerationFailedError
from app.ai.gemini_provider import GeminiProvider
from app.ai.openai_provider import OpenAIProvider
from app.config import settings
from app.core.logging import get_logger

logger = get_logger("ai.generator")

PROVIDERS: Dict[str, Type[AIProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
}

MOCK_MARKER = "This is a mock response"

MOCK_RESPONSE = """{
  "summary": "This is a mock response. Configure AI_API_KEY to get real AI responses.",
  "content": "This is a mock response. Configure AI_API_KEY to get real AI responses.",
  "strengths": ["Mock strength 1", "Mock strength 2"],
  "weaknesses": ["Mock weakness 1"],
  "recommendations": ["Configure API key", "Test with real data"],
  "ideas": [
    {
      "title": "Mock Campaign Idea",
      "description": "This is a placeholder idea. Configure your API key for real suggestions.",
      "category": "strategy",
      "priority": 2
    }
  ],
  "suggestions": ["Configure API key", "Test endpoint"]
}"""


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def build_provider(provider_name: Optional[str] = None) -> Optional[AIProvider]:
    """Instantiate the configured provider, or None when no API key is set."""
    if settings.mock_mode:
        return None
    name = provider_name or settings.ai_provider
    if name not in PROVIDERS:
        raise ValueError(f"Unknown AI provider: {name}")
    return PROVIDERS[name]()


class TextGenerator:
    """Prompt in, JSON-ish text out. Never raises on provider failure."""

    def __init__(self, provider: Optional[AIProvider] = None):
        self.provider = provider

    @property
    def mock_mode(self) -> bool:
        return self.provider is None or not self.provider.is_available()

    async def generate(self, prompt: str, context: Optional[dict] = None) -> str:
        if self.mock_mode:
            logger.warning("AI API key not configured. Returning mock response.")
            return MOCK_RESPONSE

        try:
            raw = await self.provider.generate(prompt)
        except GenerationFailedError as e:
            logger.error(
                f"Error calling AI API, falling back to mock response: {e}",
                extra={
                    "provider": self.provider.name,
                    "campaign_id": (context or {}).get("campaign_id"),
                },
            )
            return MOCK_RESPONSE
        except Exception:
            logger.exception(
                "Unexpected AI provider failure, falling back to mock response",
                extra={"provider": self.provider.name},
            )
            return MOCK_RESPONSE

        return strip_code_fences(raw)


def get_text_generator() -> TextGenerator:
    """Dependency — generator bound to the configured provider."""
    return TextGenerator(build_provider())
