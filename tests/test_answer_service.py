import json

import httpx
import pytest

from app.schemas.config import AIConfig, ResumeContext
from app.services.answer_service import AnswerGenerationError, build_prompt, generate_answer


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_build_prompt_includes_context_sections():
    prompt = build_prompt(
        "What is React",
        "Be brief.",
        ResumeContext(resume_text="Built dashboards", job_description="Frontend role"),
    )
    assert prompt.startswith("Be brief.")
    assert "Candidate's Resume:\nBuilt dashboards" in prompt
    assert "Job Description:\nFrontend role" in prompt
    assert prompt.endswith("Interview Question: What is React\n\nProvide a concise, professional answer:")


def test_build_prompt_defaults_without_context():
    prompt = build_prompt("Why here", None)
    assert prompt.startswith("You are a helpful interview assistant.")
    assert "Resume" not in prompt
    assert "Job Description" not in prompt


@pytest.mark.asyncio
async def test_openai_request_shape_and_answer():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "  Use STAR.  "}}]})

    config = AIConfig(llm_provider="openai", llm_api_key="sk-test", llm_model=None)
    async with _client(handler) as client:
        answer = await generate_answer("Tell me about yourself", config, client=client)

    assert answer == "Use STAR."
    assert seen["url"] == "https://api.openai.com/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-4o-mini"
    assert seen["body"]["max_tokens"] == 500
    assert seen["body"]["messages"][0]["role"] == "user"
    assert "Interview Question: Tell me about yourself" in seen["body"]["messages"][0]["content"]


@pytest.mark.asyncio
async def test_anthropic_request_shape_and_answer():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-api-key")
        seen["version"] = request.headers.get("anthropic-version")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"content": [{"type": "text", "text": "Answer"}]})

    config = AIConfig(llm_provider="anthropic", llm_api_key="ak", llm_model="")
    async with _client(handler) as client:
        answer = await generate_answer("Why this company", config, client=client)

    assert answer == "Answer"
    assert seen["url"] == "https://api.anthropic.com/v1/messages"
    assert seen["key"] == "ak"
    assert seen["version"] == "2023-06-01"
    assert seen["body"]["model"] == "claude-3-5-sonnet-20241022"


@pytest.mark.asyncio
async def test_ollama_uses_configured_url():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "local answer"})

    config = AIConfig(llm_provider="ollama", llm_model="llama3", ollama_url="http://gpu-box:11434/")
    async with _client(handler) as client:
        answer = await generate_answer("What is Docker", config, client=client)

    assert answer == "local answer"
    assert seen["url"] == "http://gpu-box:11434/api/generate"
    assert seen["body"]["stream"] is False
    assert seen["body"]["model"] == "llama3"


@pytest.mark.asyncio
async def test_missing_key_fails_before_any_request():
    def handler(request):
        raise AssertionError("Unexpected request")

    async with _client(handler) as client:
        with pytest.raises(AnswerGenerationError, match="OpenAI API key not configured"):
            await generate_answer("q q q", AIConfig(llm_provider="openai"), client=client)
        with pytest.raises(AnswerGenerationError, match="Anthropic API key not configured"):
            await generate_answer("q q q", AIConfig(llm_provider="anthropic"), client=client)


@pytest.mark.asyncio
async def test_provider_error_status_is_reported():
    def handler(request):
        return httpx.Response(401, json={"error": "bad key"})

    config = AIConfig(llm_provider="openai", llm_api_key="sk-bad")
    async with _client(handler) as client:
        with pytest.raises(AnswerGenerationError, match="OpenAI API error: Unauthorized"):
            await generate_answer("What is React", config, client=client)


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    config = AIConfig(llm_provider="ollama")
    async with _client(handler) as client:
        with pytest.raises(AnswerGenerationError, match="Ollama request failed"):
            await generate_answer("What is React", config, client=client)


@pytest.mark.asyncio
async def test_unexpected_body_is_an_error():
    def handler(request):
        return httpx.Response(200, json={"choices": []})

    config = AIConfig(llm_provider="openai", llm_api_key="sk")
    async with _client(handler) as client:
        with pytest.raises(AnswerGenerationError):
            await generate_answer("What is React", config, client=client)


@pytest.mark.asyncio
async def test_exported_base_url_does_not_leak_into_tests(monkeypatch, reset_settings_env):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"content": [{"type": "text", "text": "ok"}]})

    monkeypatch.setenv("ANTHROPIC_BASE_URL", "http://127.0.0.1:8271")
    reset_settings_env()
    async with _client(handler) as client:
        await generate_answer("Why this company", AIConfig(llm_provider="anthropic", llm_api_key="ak"), client=client)

    assert seen["url"] == "https://api.anthropic.com/v1/messages"
