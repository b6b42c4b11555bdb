"""
Live interview sessions by id, for the status endpoint.

Ids are minted by the WebSocket handler; an entry lives exactly as long as its
connection. Nothing is persisted.
"""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.interview.session import InterviewSession

_live_sessions: dict[str, "InterviewSession"] = {}


def generate_session_id() -> str:
    return uuid.uuid4().hex[:12]


def get_session(session_id: str) -> "InterviewSession | None":
    return _live_sessions.get(session_id)


def set_session(session_id: str, session: "InterviewSession") -> None:
    _live_sessions[session_id] = session


def delete_session(session_id: str) -> bool:
    """Forget a session. False if it was not registered."""
    return _live_sessions.pop(session_id, None) is not None
