"""
AnswerTracker: per-turn answer state keyed by turn_id.

Each question turn that was not paused at finalization gets its own
generation task. Tasks may finish in any order; a result only ever updates
the state of the turn that started it. A failure marks that one turn as
error and leaves the session and other turns untouched.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Awaitable, Callable, Optional, Union

from app.transcript.models import AnswerState, AnswerStatus, ConversationTurn

logger = logging.getLogger(__name__)

AnswerGenerator = Callable[[str], Awaitable[str]]
UpdateHandler = Callable[[AnswerState], Union[Awaitable[None], None]]


class AnswerTracker:
    def __init__(self, generator: AnswerGenerator, on_update: Optional[UpdateHandler] = None) -> None:
        self._generator = generator
        self._on_update = on_update
        self._states: dict[str, AnswerState] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def register(self, turn: ConversationTurn) -> AnswerState:
        """Record the turn's initial state; start generation when an answer is requested."""
        state = AnswerState(turn_id=turn.turn_id, status=turn.initial_status)
        self._states[turn.turn_id] = state
        if turn.answer_requested:
            task = asyncio.get_running_loop().create_task(self._run(turn))
            self._tasks[turn.turn_id] = task
            task.add_done_callback(lambda _t, tid=turn.turn_id: self._tasks.pop(tid, None))
        return state

    def get(self, turn_id: str) -> AnswerState | None:
        return self._states.get(turn_id)

    def states(self) -> list[AnswerState]:
        """States in registration (finalization) order."""
        return list(self._states.values())

    @property
    def pending_count(self) -> int:
        return sum(1 for s in self._states.values() if s.status is AnswerStatus.PENDING)

    def detach(self) -> None:
        """Stop surfacing results; in-flight tasks keep running and still record their state."""
        self._on_update = None

    async def wait_idle(self) -> None:
        """Wait until every in-flight generation task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def _run(self, turn: ConversationTurn) -> None:
        try:
            answer = await self._generator(turn.text)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("Answer generation failed for turn %s: %s", turn.turn_id, message)
            self._update(turn.turn_id, AnswerStatus.ERROR, error=message)
        else:
            self._update(turn.turn_id, AnswerStatus.ANSWERED, answer=answer)
        await self._notify(turn.turn_id)

    def _update(self, turn_id: str, status: AnswerStatus, answer: str | None = None, error: str | None = None) -> None:
        state = self._states[turn_id]
        state.status = status
        state.answer = answer
        state.error = error
        state.updated_at = int(time.time() * 1000)

    async def _notify(self, turn_id: str) -> None:
        handler = self._on_update
        if handler is None:
            return
        try:
            result = handler(self._states[turn_id])
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Answer update handler failed for turn %s", turn_id)
