"""Schemas for one-shot HTTP endpoints: question classification and manual answer generation."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ClassifyRequest(BaseModel):
    text: str = Field(..., description="Transcribed utterance to classify")


class ClassifyResponse(BaseModel):
    text: str
    normalized: str = Field(..., description="Lowercased, trimmed, filler-stripped text")
    word_count: int
    is_question: bool


class AnswerRequest(BaseModel):
    """Request body for POST /api/answer. Uses the stored AI config and resume context."""

    question: str = Field(..., description="Interview question to answer")


class AnswerResponse(BaseModel):
    question: str
    answer: str
