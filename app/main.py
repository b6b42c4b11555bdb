"""
FastAPI app: WebSocket endpoint for live interview sessions;
HTTP API: AI config and resume context, question classification, manual answers, session status.

Client sends JSON text frames: { "type": "transcript", "text": "..." } (plus pause/resume/stop).
Server responds with JSON events: session, turn, answer, state, error, stopped.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from app.config import get_settings
from app.logging_setup import configure_logging
from app.profile_store import ProfileStore, get_profile_store
from app.schemas.answer import AnswerRequest, AnswerResponse, ClassifyRequest, ClassifyResponse
from app.schemas.config import AIConfig, ResumeContext
from app.services.answer_service import AnswerGenerationError, generate_answer
from app.session_store import get_session
from app.transcript.question import is_question, normalize_question_text, word_count
from app.websocket_manager import WebSocketManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)
    logger.info(
        "Interview assist starting (silence_window=%.2fs, transcripts=%s)",
        settings.SILENCE_WINDOW_SECONDS,
        settings.TRANSCRIPT_DIR if settings.TRANSCRIPT_SAVE_ENABLED else "off",
    )
    yield


app = FastAPI(
    title="Interview Assist",
    description="Live question detection and AI answer generation over streamed transcripts",
    lifespan=lifespan,
)


@app.websocket("/ws/interview")
async def websocket_interview(
    websocket: WebSocket,
    store: ProfileStore = Depends(get_profile_store),
) -> None:
    """
    WebSocket: one connection = one recording session.
    Config and resume context are read once here, at session start.
    """
    await websocket.accept()
    manager = WebSocketManager(websocket, store.get_config(), store.get_context())
    try:
        await manager.run()
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Interview session %s crashed", manager.session.session_id)
        try:
            await websocket.close()
        except Exception:
            pass


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/api/config")
async def read_config(store: ProfileStore = Depends(get_profile_store)) -> dict:
    """Stored AI config with API keys masked."""
    return store.get_config().public_dict()


@app.put("/api/config")
async def save_config(config: AIConfig, store: ProfileStore = Depends(get_profile_store)) -> dict:
    store.save_config(config)
    logger.info("AI config saved (provider=%s, stt=%s)", config.llm_provider, config.stt_provider)
    return config.public_dict()


@app.get("/api/context", response_model=ResumeContext)
async def read_context(store: ProfileStore = Depends(get_profile_store)) -> ResumeContext:
    return store.get_context()


@app.put("/api/context", response_model=ResumeContext)
async def save_context(context: ResumeContext, store: ProfileStore = Depends(get_profile_store)) -> ResumeContext:
    return store.save_context(context)


@app.post("/api/classify", response_model=ClassifyResponse)
async def classify(request: ClassifyRequest) -> ClassifyResponse:
    normalized = normalize_question_text(request.text)
    return ClassifyResponse(
        text=request.text,
        normalized=normalized,
        word_count=word_count(normalized),
        is_question=is_question(request.text),
    )


@app.post("/api/answer", response_model=AnswerResponse)
async def answer(request: AnswerRequest, store: ProfileStore = Depends(get_profile_store)) -> AnswerResponse:
    """Generate an answer for one question with the stored config and context."""
    question = request.question.strip()
    if not question:
        raise HTTPException(status_code=400, detail="question is required")
    if not store.has_config():
        raise HTTPException(status_code=400, detail="Please configure your AI settings first")
    config = store.get_config()
    problem = config.missing_credential()
    if problem:
        raise HTTPException(status_code=400, detail=problem)
    try:
        text = await generate_answer(question, config, store.get_context())
    except AnswerGenerationError as e:
        logger.warning("Manual answer failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return AnswerResponse(question=question, answer=text)


@app.get("/api/sessions/{session_id}")
async def session_status(session_id: str) -> dict:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session.snapshot()
