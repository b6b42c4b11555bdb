"""
Answer generation for detected interview questions.

Builds one prompt from the system prompt, resume, job description and the
question, then routes it to the configured provider:

- openai:    POST {OPENAI_BASE_URL}/chat/completions
- anthropic: POST {ANTHROPIC_BASE_URL}/messages
- ollama:    POST {ollama_url}/api/generate (stream=false)

Every failure (missing key, transport error, non-2xx, unexpected body) is
raised as AnswerGenerationError so callers can scope it to one turn.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import get_settings
from app.schemas.config import AIConfig, ResumeContext

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "You are a helpful interview assistant."

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-20241022",
    "ollama": "llama2",
}

_PROVIDER_LABELS = {"openai": "OpenAI", "anthropic": "Anthropic", "ollama": "Ollama"}


class AnswerGenerationError(RuntimeError):
    """Provider call failed or returned nothing usable."""


def build_prompt(question: str, system_prompt: str | None, context: ResumeContext | None = None) -> str:
    """System prompt + optional resume/job description + the question, as one user message."""
    parts = [system_prompt or DEFAULT_PROMPT]
    if context and context.resume_text:
        parts.append(f"Candidate's Resume:\n{context.resume_text}")
    if context and context.job_description:
        parts.append(f"Job Description:\n{context.job_description}")
    parts.append(f"Interview Question: {question}\n\nProvide a concise, professional answer:")
    return "\n\n".join(parts)


async def _post_json(
    client: httpx.AsyncClient,
    provider: str,
    url: str,
    payload: dict[str, Any],
    headers: dict[str, str],
) -> dict[str, Any]:
    label = _PROVIDER_LABELS[provider]
    try:
        resp = await client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        raise AnswerGenerationError(f"{label} request failed: {e}") from e
    if not resp.is_success:
        raise AnswerGenerationError(f"{label} API error: {resp.reason_phrase or resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise AnswerGenerationError(f"{label} returned invalid JSON") from e


async def _generate_openai(client: httpx.AsyncClient, config: AIConfig, prompt: str) -> str:
    if not config.llm_api_key:
        raise AnswerGenerationError("OpenAI API key not configured")
    settings = get_settings()
    payload = {
        "model": config.llm_model or DEFAULT_MODELS["openai"],
        "messages": [{"role": "user", "content": prompt}],
        "temperature": settings.LLM_TEMPERATURE,
        "max_tokens": settings.LLM_MAX_TOKENS,
    }
    data = await _post_json(
        client,
        "openai",
        f"{settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions",
        payload,
        {"Authorization": f"Bearer {config.llm_api_key}", "Content-Type": "application/json"},
    )
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as e:
        raise AnswerGenerationError("OpenAI response had no message content") from e


async def _generate_anthropic(client: httpx.AsyncClient, config: AIConfig, prompt: str) -> str:
    if not config.llm_api_key:
        raise AnswerGenerationError("Anthropic API key not configured")
    settings = get_settings()
    payload = {
        "model": config.llm_model or DEFAULT_MODELS["anthropic"],
        "max_tokens": settings.LLM_MAX_TOKENS,
        "messages": [{"role": "user", "content": prompt}],
    }
    data = await _post_json(
        client,
        "anthropic",
        f"{settings.ANTHROPIC_BASE_URL.rstrip('/')}/messages",
        payload,
        {
            "x-api-key": config.llm_api_key,
            "anthropic-version": settings.ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        },
    )
    try:
        return data["content"][0]["text"] or ""
    except (KeyError, IndexError, TypeError) as e:
        raise AnswerGenerationError("Anthropic response had no text content") from e


async def _generate_ollama(client: httpx.AsyncClient, config: AIConfig, prompt: str) -> str:
    settings = get_settings()
    base = (config.ollama_url or settings.OLLAMA_DEFAULT_URL).rstrip("/")
    payload = {
        "model": config.llm_model or DEFAULT_MODELS["ollama"],
        "prompt": prompt,
        "stream": False,
    }
    data = await _post_json(client, "ollama", f"{base}/api/generate", payload, {"Content-Type": "application/json"})
    response = data.get("response") if isinstance(data, dict) else None
    if response is None:
        raise AnswerGenerationError("Ollama response had no text")
    return response


_GENERATORS = {
    "openai": _generate_openai,
    "anthropic": _generate_anthropic,
    "ollama": _generate_ollama,
}


async def generate_answer(
    question: str,
    config: AIConfig,
    context: ResumeContext | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    Generate an answer for one interview question. Returns the provider's text, stripped.
    Pass `client` to reuse a connection pool (or a MockTransport in tests); it is not closed here.
    """
    generator = _GENERATORS.get(config.llm_provider)
    if generator is None:
        raise AnswerGenerationError("Invalid LLM provider")
    prompt = build_prompt(question, config.system_prompt, context)
    logger.info(
        "Answer request: provider=%s model=%s prompt_len=%s",
        config.llm_provider, config.llm_model or DEFAULT_MODELS[config.llm_provider], len(prompt),
    )
    if client is not None:
        answer = await generator(client, config, prompt)
    else:
        async with httpx.AsyncClient(timeout=get_settings().LLM_TIMEOUT_SECONDS) as own_client:
            answer = await generator(own_client, config, prompt)
    return (answer or "").strip()
