"""
Utterance and conversation-turn structures for the segmentation pipeline.

- Utterance: settled transcript text, frozen when the silence window elapses.
- ConversationTurn: one finalized, non-duplicate utterance plus its
  classification and the pause flag captured at finalization time.
- AnswerState: per-turn answer lifecycle, owned by the answer tracker, not the segmenter.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from app.transcript.question import normalize_question_text, word_count


def _unix_ms() -> int:
    return int(time.time() * 1000)


def new_turn_id() -> str:
    return uuid.uuid4().hex[:12]


class AnswerStatus(str, Enum):
    NOT_QUESTION = "not_question"
    SKIPPED_PAUSED = "skipped_paused"
    PENDING = "pending"
    ANSWERED = "answered"
    ERROR = "error"


@dataclass(frozen=True)
class Utterance:
    raw_text: str
    normalized_text: str
    word_count: int
    finalized_at: int  # unix_ms

    @classmethod
    def from_text(cls, raw_text: str, finalized_at: int | None = None) -> "Utterance":
        normalized = normalize_question_text(raw_text)
        return cls(
            raw_text=raw_text,
            normalized_text=normalized,
            word_count=word_count(normalized),
            finalized_at=finalized_at if finalized_at is not None else _unix_ms(),
        )


@dataclass(frozen=True)
class ConversationTurn:
    """
    Derived from exactly one utterance. `paused` is the session's pause flag at
    the moment the utterance was finalized; it decides whether an answer is
    requested, regardless of later pause/resume.
    """

    utterance: Utterance
    is_question: bool
    paused: bool
    index: int
    turn_id: str = field(default_factory=new_turn_id)
    is_duplicate: bool = False

    @property
    def text(self) -> str:
        return self.utterance.raw_text

    @property
    def answer_requested(self) -> bool:
        return self.is_question and not self.paused

    @property
    def initial_status(self) -> AnswerStatus:
        if not self.is_question:
            return AnswerStatus.NOT_QUESTION
        if self.paused:
            return AnswerStatus.SKIPPED_PAUSED
        return AnswerStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "turn_id": self.turn_id,
            "index": self.index,
            "text": self.text,
            "is_question": self.is_question,
            "is_duplicate": self.is_duplicate,
            "paused": self.paused,
            "finalized_at": self.utterance.finalized_at,
        }


@dataclass
class AnswerState:
    turn_id: str
    status: AnswerStatus
    answer: str | None = None
    error: str | None = None
    updated_at: int = field(default_factory=_unix_ms)

    def to_dict(self) -> dict:
        return {
            "turn_id": self.turn_id,
            "status": self.status.value,
            "answer": self.answer,
            "error": self.error,
            "updated_at": self.updated_at,
        }
