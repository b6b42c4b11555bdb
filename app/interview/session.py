"""
InterviewSession: one recording session (start recording -> stop recording).

Wires the segmenter to the answer tracker and the append-only transcript
file, and reports everything the client needs as plain event dicts:

  turn    emitted once per finalized, non-duplicate utterance
  answer  emitted when a requested answer resolves (answered | error)
  state   emitted on pause/resume/stop

Config and context are captured at construction (read once per session start).
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from app.config import get_settings
from app.interview.answers import AnswerGenerator, AnswerTracker
from app.schemas.config import AIConfig, ResumeContext
from app.schemas.interview import AnswerEvent, StateEvent, TurnEvent
from app.services.answer_service import generate_answer
from app.transcript.models import AnswerState, ConversationTurn
from app.transcript.segmenter import TranscriptSegmenter
from app.transcript.writer import NoOpTranscriptWriter, TranscriptWriterBase

logger = logging.getLogger(__name__)

EventSink = Callable[[dict], None]


class InterviewSession:
    def __init__(
        self,
        session_id: str,
        config: AIConfig,
        context: Optional[ResumeContext] = None,
        notify: Optional[EventSink] = None,
        generator: Optional[AnswerGenerator] = None,
        silence_window: Optional[float] = None,
        writer: Optional[TranscriptWriterBase] = None,
    ) -> None:
        self.session_id = session_id
        self.config = config
        self.context = context or ResumeContext()
        self.started_at = int(time.time() * 1000)
        self._notify = notify
        self._recording = False
        self._transcript_lines: list[str] = []
        self._writer = writer or NoOpTranscriptWriter()

        if generator is None:
            async def generator(question: str) -> str:
                return await generate_answer(question, self.config, self.context)

        self._generator = generator
        self._segmenter = TranscriptSegmenter(on_turn=self._on_turn, silence_window=silence_window)
        self._tracker = AnswerTracker(generator, on_update=self._on_answer)

    @property
    def recording(self) -> bool:
        return self._recording

    @property
    def paused(self) -> bool:
        return self._segmenter.paused

    @property
    def silence_window(self) -> float:
        return self._segmenter.silence_window

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return self._segmenter.turns

    @property
    def answers(self) -> AnswerTracker:
        return self._tracker

    @property
    def transcript_lines(self) -> list[str]:
        return list(self._transcript_lines)

    @property
    def full_transcript(self) -> str:
        return "\n".join(self._transcript_lines)

    def warning(self) -> str | None:
        return self.config.missing_credential()

    async def start(self) -> None:
        """Begin recording. After a stop this is a fresh session: no turns, answers or transcript carry over."""
        if self._recording:
            return
        self._segmenter.start()
        self._transcript_lines = []
        self._tracker = AnswerTracker(self._generator, on_update=self._on_answer)
        await self._writer.start()
        self._recording = True
        logger.info(
            "Session %s started (provider=%s, silence_window=%.2fs)",
            self.session_id, self.config.llm_provider, self.silence_window,
        )

    def feed(self, text: str) -> None:
        """One transcript update from the speech source."""
        if not self._recording:
            return
        self._segmenter.push(text)

    def pause(self) -> None:
        self._segmenter.pause()
        self._emit(StateEvent(recording=self._recording, paused=True).model_dump())

    def resume(self) -> None:
        self._segmenter.resume()
        self._emit(StateEvent(recording=self._recording, paused=False).model_dump())

    async def stop(self, wait_answers: bool = False) -> None:
        """
        Cancel the silence timer and clear segmentation state. In-flight answers are
        not cancelled; unless wait_answers is set their results are no longer reported.
        """
        if not self._recording:
            return
        self._segmenter.stop(flush=get_settings().FLUSH_ON_STOP)
        self._recording = False
        if wait_answers:
            await self._tracker.wait_idle()
        self._tracker.detach()
        await self._writer.close()
        logger.info("Session %s stopped (%s turns)", self.session_id, len(self.turns))

    def snapshot(self) -> dict:
        turns = []
        for turn in self._segmenter.turns:
            item = turn.to_dict()
            state = self._tracker.get(turn.turn_id)
            if state is not None:
                item["answer"] = state.to_dict()
            turns.append(item)
        return {
            "session_id": self.session_id,
            "recording": self._recording,
            "paused": self.paused,
            "silence_window": self.silence_window,
            "turns": turns,
            "full_transcript": self.full_transcript,
        }

    def _on_turn(self, turn: ConversationTurn) -> None:
        self._transcript_lines.append(turn.text)
        self._writer.append_turn(turn)
        state = self._tracker.register(turn)
        self._emit(
            TurnEvent(
                turn_id=turn.turn_id,
                index=turn.index,
                text=turn.text,
                is_question=turn.is_question,
                is_duplicate=turn.is_duplicate,
                paused=turn.paused,
                status=state.status.value,
            ).model_dump()
        )

    def _on_answer(self, state: AnswerState) -> None:
        self._emit(
            AnswerEvent(
                turn_id=state.turn_id,
                status=state.status.value,
                answer=state.answer,
                error=state.error,
            ).model_dump()
        )

    def _emit(self, event: dict) -> None:
        if self._notify is None:
            return
        try:
            self._notify(event)
        except Exception:
            logger.exception("Session %s event sink failed", self.session_id)
