"""Pydantic schemas for API request/response and WebSocket events."""
from app.schemas.answer import (
    AnswerRequest,
    AnswerResponse,
    ClassifyRequest,
    ClassifyResponse,
)
from app.schemas.config import AIConfig, ResumeContext

__all__ = [
    "AIConfig",
    "AnswerRequest",
    "AnswerResponse",
    "ClassifyRequest",
    "ClassifyResponse",
    "ResumeContext",
]
