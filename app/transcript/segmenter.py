"""
TranscriptSegmenter: turns a stream of transcript updates into conversation turns.

Each update is the speech source's current best guess for the utterance in
progress (a growing re-transcription or a fresh piece of text). Every update
replaces the accumulated text and re-arms a single silence timer; when the
timer fires the settled text is finalized:

- empty after trim -> nothing
- identical to the last finalized text -> duplicate, dropped
- otherwise -> classified and emitted as one ConversationTurn

Pause only changes the flag stamped on the emitted turn; finalization and
deduplication always run. All methods must be called on the event loop thread.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from app.config import get_settings
from app.transcript.models import ConversationTurn, Utterance
from app.transcript.question import is_question

logger = logging.getLogger(__name__)


class TranscriptSegmenter:
    def __init__(
        self,
        on_turn: Callable[[ConversationTurn], None],
        silence_window: float | None = None,
        classifier: Callable[[str], bool] = is_question,
    ) -> None:
        if silence_window is None:
            silence_window = get_settings().SILENCE_WINDOW_SECONDS
        if silence_window <= 0:
            raise ValueError("silence_window must be > 0")
        self._on_turn = on_turn
        self._silence_window = float(silence_window)
        self._classify = classifier

        self._pending_text: str = ""
        self._last_finalized: str = ""
        self._timer: asyncio.TimerHandle | None = None
        self._paused = False
        self._active = True
        self._turns: list[ConversationTurn] = []

    @property
    def silence_window(self) -> float:
        return self._silence_window

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def active(self) -> bool:
        return self._active

    @property
    def has_pending(self) -> bool:
        return self._timer is not None

    @property
    def pending_text(self) -> str:
        return self._pending_text

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def start(self) -> None:
        """Begin a fresh session: no memory of earlier dedup history or turns."""
        self._cancel_timer()
        self._pending_text = ""
        self._last_finalized = ""
        self._turns = []
        self._paused = False
        self._active = True

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def push(self, text: str) -> None:
        """Replace the accumulated text and restart the silence timer."""
        if not self._active:
            logger.debug("Ignoring transcript update after stop")
            return
        self._pending_text = text or ""
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._silence_window, self._on_silence)

    def flush(self) -> ConversationTurn | None:
        """Finalize the accumulated text now instead of waiting for silence."""
        self._cancel_timer()
        return self._finalize()

    def stop(self, flush: bool = False) -> ConversationTurn | None:
        """Cancel the timer and clear per-session state. Later updates are ignored."""
        turn = self.flush() if flush and self._active else None
        self._cancel_timer()
        self._pending_text = ""
        self._last_finalized = ""
        self._active = False
        return turn

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_silence(self) -> None:
        self._timer = None
        self._finalize()

    def _finalize(self) -> ConversationTurn | None:
        text = self._pending_text.strip()
        if not text:
            return None
        self._pending_text = ""
        if text == self._last_finalized:
            logger.debug("Duplicate utterance dropped: %r", text[:80])
            return None
        self._last_finalized = text

        utterance = Utterance.from_text(text)
        turn = ConversationTurn(
            utterance=utterance,
            is_question=self._classify(text),
            paused=self._paused,
            index=len(self._turns),
        )
        self._turns.append(turn)
        logger.info(
            "Turn %s #%s finalized (question=%s, paused=%s, words=%s)",
            turn.turn_id, turn.index, turn.is_question, turn.paused, utterance.word_count,
        )
        try:
            self._on_turn(turn)
        except Exception:
            logger.exception("Turn handler failed for turn %s", turn.turn_id)
        return turn
