"""
WebSocketManager: one WebSocket = one recording session.

The browser runs speech-to-text and sends its current best transcript as
JSON text frames; the session segments it into turns and answers questions.
Outgoing events go through a queue drained by a sender task so that
synchronous segmenter callbacks never await the socket, and events reach
the client in the order they were produced (a turn always before its answer).
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

from fastapi import WebSocket
from pydantic import ValidationError

from app.interview.answers import AnswerGenerator
from app.interview.session import InterviewSession
from app.schemas.config import AIConfig, ResumeContext
from app.schemas.interview import ClientMessage, ErrorEvent, SessionEvent, StoppedEvent
from app.session_store import delete_session, generate_session_id, set_session
from app.transcript.writer import create_transcript_writer

logger = logging.getLogger(__name__)


class WebSocketManager:
    def __init__(
        self,
        websocket: WebSocket,
        config: AIConfig,
        context: ResumeContext | None = None,
        silence_window: float | None = None,
        generator: AnswerGenerator | None = None,
    ) -> None:
        self._ws = websocket
        self._closed = False
        self._outbox: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()
        self._sender_task: asyncio.Task[Any] | None = None

        self._session_id = generate_session_id()
        self._session = InterviewSession(
            session_id=self._session_id,
            config=config,
            context=context,
            notify=self._enqueue,
            generator=generator,
            silence_window=silence_window,
            writer=create_transcript_writer(self._session_id, int(time.time() * 1000)),
        )

    @property
    def session(self) -> InterviewSession:
        return self._session

    def _enqueue(self, event: dict[str, Any]) -> None:
        if self._closed:
            return
        self._outbox.put_nowait(event)

    async def _send_json(self, event: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._ws.send_text(json.dumps(event))
        except Exception:
            self._closed = True

    async def _sender(self) -> None:
        while True:
            event = await self._outbox.get()
            if event is None:
                break
            await self._send_json(event)

    def _parse(self, raw: str) -> ClientMessage | None:
        try:
            return ClientMessage.model_validate_json(raw)
        except ValidationError as e:
            logger.debug("Bad client message on %s: %s", self._session_id, e)
            self._enqueue(ErrorEvent(message="Invalid message: expected {type: transcript|pause|resume|stop}").model_dump())
            return None

    def _handle(self, message: ClientMessage) -> bool:
        """Apply one client message. Returns False when the session should stop."""
        if message.type == "transcript":
            if message.text is None:
                self._enqueue(ErrorEvent(message="transcript message requires text").model_dump())
            else:
                self._session.feed(message.text)
        elif message.type == "pause":
            self._session.pause()
        elif message.type == "resume":
            self._session.resume()
        elif message.type == "stop":
            return False
        return True

    async def run(self) -> None:
        """Main loop: receive transcript updates and control messages until stop or disconnect."""
        await self._session.start()
        set_session(self._session_id, self._session)
        self._sender_task = asyncio.create_task(self._sender())
        self._enqueue(
            SessionEvent(
                session_id=self._session_id,
                silence_window=self._session.silence_window,
                paused=self._session.paused,
                warning=self._session.warning(),
            ).model_dump()
        )

        try:
            while not self._closed:
                try:
                    msg = await self._ws.receive()
                except Exception:
                    break
                if msg.get("type") == "websocket.disconnect":
                    self._closed = True
                    break
                raw = msg.get("text")
                if raw is None:
                    continue
                message = self._parse(raw)
                if message is not None and not self._handle(message):
                    break
        finally:
            await self._session.stop()
            delete_session(self._session_id)
            self._enqueue(
                StoppedEvent(
                    session_id=self._session_id,
                    full_transcript=self._session.full_transcript,
                ).model_dump()
            )
            self._outbox.put_nowait(None)
            if self._sender_task:
                try:
                    await asyncio.wait_for(self._sender_task, timeout=5.0)
                except asyncio.TimeoutError:
                    self._sender_task.cancel()
                    try:
                        await self._sender_task
                    except asyncio.CancelledError:
                        pass
            self._closed = True
