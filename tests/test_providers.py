"""Provider envelope handling and mock-fallback tests.

Falling back to mock output on provider failure is intended behaviour:
a caller always receives structured content.
"""
import asyncio
import json

import httpx
import pytest

from app.ai.base_provider import GenerationFailedError, InvalidProviderResponseError
from app.ai.gemini_provider import GeminiProvider, extract_gemini_text
from app.ai.generator import (
    MOCK_MARKER,
    MOCK_RESPONSE,
    TextGenerator,
    build_provider,
    strip_code_fences,
)
from app.ai.openai_provider import OpenAIProvider
from tests.conftest import FakeProvider


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------

def test_gemini_sends_single_prompt_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": '{"summary": "hi"}'}]}}]}
        )

    provider = GeminiProvider(api_key="k", model="gemini-test", http_client=_client(handler))
    text = asyncio.run(provider.generate("PROMPT"))

    assert text == '{"summary": "hi"}'
    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "k"
    assert seen["body"]["contents"] == [{"parts": [{"text": "PROMPT"}]}]
    assert seen["body"]["generationConfig"]["maxOutputTokens"] == 4096


def test_gemini_non_2xx_raises_generation_failed():
    provider = GeminiProvider(
        api_key="k", http_client=_client(lambda r: httpx.Response(503, text="overloaded"))
    )
    with pytest.raises(GenerationFailedError) as exc:
        asyncio.run(provider.generate("p"))
    assert exc.value.status_code == 503
    assert not isinstance(exc.value, InvalidProviderResponseError)


def test_gemini_safety_block_is_invalid_response():
    body = {"candidates": [{"finishReason": "SAFETY", "safetyRatings": []}]}
    with pytest.raises(InvalidProviderResponseError, match="SAFETY"):
        extract_gemini_text(body)


def test_gemini_empty_text_is_invalid_response():
    body = {"candidates": [{"content": {"parts": [{"text": "   "}]}}]}
    with pytest.raises(InvalidProviderResponseError, match="empty"):
        extract_gemini_text(body)


def test_gemini_error_envelope_is_invalid_response():
    with pytest.raises(InvalidProviderResponseError, match="quota exceeded"):
        extract_gemini_text({"error": {"message": "quota exceeded"}})


def test_gemini_unknown_shape_is_invalid_response():
    with pytest.raises(InvalidProviderResponseError, match="Unexpected"):
        extract_gemini_text({"something": "else"})


def test_gemini_stop_finish_reason_is_accepted():
    body = {"candidates": [{"finishReason": "STOP", "content": {"parts": [{"text": "{}"}]}}]}
    assert extract_gemini_text(body) == "{}"


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------

def _chat_completion(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-test",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def test_openai_sends_chat_completion_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_chat_completion('{"content": "ok"}'))

    provider = OpenAIProvider(api_key="sk-test", model="gpt-test", http_client=_client(handler))
    text = asyncio.run(provider.generate("PROMPT"))

    assert text == '{"content": "ok"}'
    assert seen["path"].endswith("/chat/completions")
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-test"
    assert seen["body"]["max_tokens"] == 2000
    assert [m["role"] for m in seen["body"]["messages"]] == ["system", "user"]
    assert seen["body"]["messages"][1]["content"] == "PROMPT"


def test_openai_http_error_raises_generation_failed():
    provider = OpenAIProvider(
        api_key="sk-test",
        http_client=_client(lambda r: httpx.Response(500, json={"error": {"message": "boom"}})),
    )
    with pytest.raises(GenerationFailedError) as exc:
        asyncio.run(provider.generate("p"))
    assert exc.value.status_code == 500


def test_openai_empty_content_is_invalid_response():
    provider = OpenAIProvider(
        api_key="sk-test",
        http_client=_client(lambda r: httpx.Response(200, json=_chat_completion(""))),
    )
    with pytest.raises(InvalidProviderResponseError):
        asyncio.run(provider.generate("p"))


# ---------------------------------------------------------------------------
# TextGenerator
# ---------------------------------------------------------------------------

def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_no_api_key_means_mock_mode():
    assert build_provider() is None
    generator = TextGenerator(None)
    assert generator.mock_mode
    text = asyncio.run(generator.generate("p"))
    assert text == MOCK_RESPONSE
    assert MOCK_MARKER in json.loads(text)["summary"]


def test_provider_failure_degrades_to_mock():
    provider = FakeProvider(error=GenerationFailedError("down", 502))
    text = asyncio.run(TextGenerator(provider).generate("p"))
    assert text == MOCK_RESPONSE
    assert provider.prompts == ["p"]


def test_invalid_provider_response_degrades_to_mock():
    provider = FakeProvider(error=InvalidProviderResponseError("blocked"))
    assert asyncio.run(TextGenerator(provider).generate("p")) == MOCK_RESPONSE


def test_live_output_has_fences_stripped():
    provider = FakeProvider(text='```json\n{"summary": "live"}\n```')
    assert asyncio.run(TextGenerator(provider).generate("p")) == '{"summary": "live"}'
