"""
WebSocket message schemas for /ws/interview.

Client -> server:
  { "type": "transcript", "text": "..." }   current best transcript of the utterance in progress
  { "type": "pause" } | { "type": "resume" } | { "type": "stop" }

Server -> client: session, turn, answer, state, error, stopped (see models below).
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ClientMessage(BaseModel):
    type: Literal["transcript", "pause", "resume", "stop"]
    text: str | None = Field(None, description="Required for type=transcript")


class SessionEvent(BaseModel):
    type: Literal["session"] = "session"
    session_id: str
    silence_window: float
    paused: bool = False
    warning: str | None = Field(None, description="Config problem that will make answer requests fail")


class TurnEvent(BaseModel):
    type: Literal["turn"] = "turn"
    turn_id: str
    index: int
    text: str
    is_question: bool
    is_duplicate: bool = False
    paused: bool = Field(False, description="Pause flag at finalization; question turns are skipped when true")
    status: str = Field(..., description="not_question | skipped_paused | pending")


class AnswerEvent(BaseModel):
    type: Literal["answer"] = "answer"
    turn_id: str
    status: str = Field(..., description="answered | error")
    answer: str | None = None
    error: str | None = None


class StateEvent(BaseModel):
    type: Literal["state"] = "state"
    recording: bool
    paused: bool


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


class StoppedEvent(BaseModel):
    type: Literal["stopped"] = "stopped"
    session_id: str
    full_transcript: str
