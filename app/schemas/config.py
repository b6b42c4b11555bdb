"""
Schemas for the stored AI configuration and interview context.

Both are read once per session start from the profile store; the session
never writes them back.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_SYSTEM_PROMPT = (
    "You are an AI interview assistant. Provide concise, professional answers to "
    "interview questions. Use the STAR method when appropriate."
)


def _mask(secret: str | None) -> str | None:
    if not secret:
        return None
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"


class AIConfig(BaseModel):
    """Provider selection and credentials for answer generation and speech-to-text."""

    llm_provider: Literal["openai", "anthropic", "ollama"] = Field("openai", description="Answer generator backend")
    llm_api_key: str | None = Field(None, description="API key for OpenAI / Anthropic (unused for Ollama)")
    llm_model: str | None = Field("gpt-4o-mini", description="Model name; provider default when empty")
    ollama_url: str | None = Field(None, description="Ollama base URL, e.g. http://localhost:11434")
    stt_provider: Literal["browser", "deepgram"] = Field("browser", description="Speech source used by the client")
    stt_api_key: str | None = Field(None, description="Deepgram API key when stt_provider=deepgram")
    system_prompt: str | None = Field(DEFAULT_SYSTEM_PROMPT, description="System prompt prepended to every question")

    def missing_credential(self) -> str | None:
        """Human-readable reason the config cannot be used, or None when it can."""
        if self.llm_provider == "openai" and not self.llm_api_key:
            return "OpenAI API key not configured"
        if self.llm_provider == "anthropic" and not self.llm_api_key:
            return "Anthropic API key not configured"
        if self.stt_provider == "deepgram" and not self.stt_api_key:
            return "Deepgram API key not configured"
        return None

    def public_dict(self) -> dict:
        data = self.model_dump()
        data["llm_api_key"] = _mask(self.llm_api_key)
        data["stt_api_key"] = _mask(self.stt_api_key)
        return data


class ResumeContext(BaseModel):
    """Candidate resume and target job description appended to the prompt."""

    resume_text: str | None = Field(None, description="Candidate's resume as plain text")
    job_description: str | None = Field(None, description="Job description as plain text")
