"""
Session transcript file: finalized turns only, appended in finalization order.

Interim transcript updates never reach disk. A line looks like

    [01:15.50] [Q] What is React

where the timestamp is optional (TRANSCRIPT_ADD_TIMESTAMPS), [Q] marks a
question and [paused] marks a question finalized while answering was paused.
Reopening the same session id appends to the existing file.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional

from app.config import get_settings
from app.transcript.models import ConversationTurn

logger = logging.getLogger(__name__)

# Turns waiting for the worker; beyond this the session is outrunning the disk.
MAX_PENDING_TURNS = 1000


def format_turn_line(
    turn: ConversationTurn,
    session_start_ms: int,
    add_timestamps: bool,
) -> str:
    tags: list[str] = []
    if add_timestamps:
        offset = max(0, turn.utterance.finalized_at - session_start_ms) / 1000.0
        minutes, seconds = divmod(offset, 60)
        tags.append(f"[{int(minutes):02d}:{seconds:05.2f}]")
    if turn.is_question:
        tags.append("[Q]")
        if turn.paused:
            tags.append("[paused]")
    return " ".join(tags + [turn.text.strip()])


class TranscriptWriterBase(ABC):
    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    def append_turn(self, turn: ConversationTurn) -> None:
        """Queue one turn. Must not block the event loop."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Write what is queued and release the file. Safe to call twice."""
        ...


class NoOpTranscriptWriter(TranscriptWriterBase):
    async def start(self) -> None:
        pass

    def append_turn(self, turn: ConversationTurn) -> None:
        pass

    async def close(self) -> None:
        pass


class TranscriptWriter(TranscriptWriterBase):
    """<transcript_dir>/<session_id>.txt, written by a background task."""

    def __init__(
        self,
        session_id: str,
        session_start_ms: int,
        transcript_dir: Optional[str] = None,
        add_timestamps: Optional[bool] = None,
    ) -> None:
        settings = get_settings()
        if add_timestamps is None:
            add_timestamps = settings.TRANSCRIPT_ADD_TIMESTAMPS
        self.session_id = session_id
        self.session_start_ms = session_start_ms
        self.add_timestamps = add_timestamps
        self._path = Path(transcript_dir or settings.TRANSCRIPT_DIR) / f"{session_id}.txt"
        self._fh: Optional[IO[str]] = None
        self._pending: asyncio.Queue[Optional[ConversationTurn]] = asyncio.Queue(maxsize=MAX_PENDING_TURNS)
        self._task: Optional[asyncio.Task] = None
        self._closed = False
        self.turns_written = 0

    @property
    def path(self) -> str:
        return str(self._path)

    async def start(self) -> None:
        """Open the file and start the worker. After close() this reopens in append mode."""
        if self._task is not None:
            return
        self._closed = False
        self._pending = asyncio.Queue(maxsize=MAX_PENDING_TURNS)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self._path.open("a", encoding="utf-8")
        except OSError as e:
            # Keep the session running without a file; turns are dropped by the worker.
            logger.warning("Cannot open transcript %s: %s", self._path, e)
        self._task = asyncio.create_task(self._drain())

    def append_turn(self, turn: ConversationTurn) -> None:
        if self._closed or not turn.text.strip():
            return
        try:
            self._pending.put_nowait(turn)
        except asyncio.QueueFull:
            logger.warning("Transcript backlog full for session %s, turn %s not saved", self.session_id, turn.turn_id)

    async def close(self) -> None:
        task = self._task
        if task is None:
            return
        self._task = None
        self._closed = True
        if task.done():
            if not task.cancelled() and task.exception() is not None:
                logger.error("Transcript writer for session %s stopped early: %s", self.session_id, task.exception())
            self._release()
            return
        try:
            self._pending.put_nowait(None)
            await asyncio.wait_for(task, timeout=5.0)
        except (asyncio.QueueFull, asyncio.TimeoutError):
            logger.warning("Transcript writer for session %s did not finish, closing file", self.session_id)
            task.cancel()
            self._release()
        except Exception:
            logger.exception("Transcript writer for session %s failed", self.session_id)
            self._release()

    async def _drain(self) -> None:
        done = False
        while not done:
            batch = [await self._pending.get()]
            while not self._pending.empty():
                batch.append(self._pending.get_nowait())
            if None in batch:
                done = True
                batch = batch[: batch.index(None)]
            self._write(batch)
        self._release()

    def _write(self, turns: list[ConversationTurn]) -> None:
        if not turns or self._fh is None:
            return
        lines = [format_turn_line(t, self.session_start_ms, self.add_timestamps) for t in turns]
        try:
            self._fh.write("".join(line + "\n" for line in lines))
            self._fh.flush()
        except OSError as e:
            logger.warning("Transcript write failed for %s: %s", self._path, e)
            return
        self.turns_written += len(lines)

    def _release(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.close()
        except OSError as e:
            logger.warning("Transcript close failed for %s: %s", self._path, e)
        self._fh = None


def create_transcript_writer(session_id: str, session_start_ms: int) -> TranscriptWriterBase:
    if not get_settings().TRANSCRIPT_SAVE_ENABLED:
        return NoOpTranscriptWriter()
    return TranscriptWriter(session_id, session_start_ms)
