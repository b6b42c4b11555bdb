import asyncio

import pytest

from app.interview.answers import AnswerTracker
from app.transcript.models import AnswerStatus, ConversationTurn, Utterance


def _turn(text, index, is_question=True, paused=False):
    return ConversationTurn(
        utterance=Utterance.from_text(text),
        is_question=is_question,
        paused=paused,
        index=index,
    )


@pytest.mark.asyncio
async def test_slow_first_answer_does_not_overwrite_faster_second():
    release_a = asyncio.Event()
    updates = []

    async def generator(question):
        if question.startswith("A"):
            await release_a.wait()
        return f"answer to {question}"

    tracker = AnswerTracker(generator, on_update=updates.append)
    turn_a = _turn("A: what is your biggest weakness", 0)
    turn_b = _turn("B: why do you want this job", 1)

    tracker.register(turn_a)
    tracker.register(turn_b)
    await asyncio.sleep(0.01)

    assert tracker.get(turn_b.turn_id).status is AnswerStatus.ANSWERED
    assert tracker.get(turn_b.turn_id).answer == "answer to B: why do you want this job"
    assert tracker.get(turn_a.turn_id).status is AnswerStatus.PENDING
    assert tracker.pending_count == 1

    release_a.set()
    await tracker.wait_idle()

    assert tracker.get(turn_a.turn_id).answer == "answer to A: what is your biggest weakness"
    assert tracker.get(turn_b.turn_id).answer == "answer to B: why do you want this job"
    assert [u.turn_id for u in updates] == [turn_b.turn_id, turn_a.turn_id]
    assert [s.turn_id for s in tracker.states()] == [turn_a.turn_id, turn_b.turn_id]


@pytest.mark.asyncio
async def test_failure_is_scoped_to_one_turn():
    async def generator(question):
        if "fail" in question:
            raise RuntimeError("OpenAI API error: Unauthorized")
        return "fine"

    tracker = AnswerTracker(generator)
    bad = _turn("why did this fail today", 0)
    good = _turn("what went well today", 1)
    tracker.register(bad)
    tracker.register(good)
    await tracker.wait_idle()

    assert tracker.get(bad.turn_id).status is AnswerStatus.ERROR
    assert tracker.get(bad.turn_id).error == "OpenAI API error: Unauthorized"
    assert tracker.get(bad.turn_id).answer is None
    assert tracker.get(good.turn_id).status is AnswerStatus.ANSWERED


@pytest.mark.asyncio
async def test_error_without_message_uses_exception_name():
    async def generator(question):
        raise TimeoutError()

    tracker = AnswerTracker(generator)
    turn = _turn("how do you handle stress", 0)
    tracker.register(turn)
    await tracker.wait_idle()

    assert tracker.get(turn.turn_id).error == "TimeoutError"


@pytest.mark.asyncio
async def test_paused_and_non_question_turns_make_no_request():
    calls = []

    async def generator(question):
        calls.append(question)
        return "x"

    tracker = AnswerTracker(generator)
    paused = tracker.register(_turn("what are your strengths", 0, paused=True))
    statement = tracker.register(_turn("I like building things", 1, is_question=False))
    await tracker.wait_idle()

    assert calls == []
    assert paused.status is AnswerStatus.SKIPPED_PAUSED
    assert statement.status is AnswerStatus.NOT_QUESTION


@pytest.mark.asyncio
async def test_detach_keeps_recording_results():
    release = asyncio.Event()
    updates = []

    async def generator(question):
        await release.wait()
        return "late answer"

    async def on_update(state):
        updates.append(state)

    tracker = AnswerTracker(generator, on_update=on_update)
    turn = _turn("tell me about yourself", 0)
    tracker.register(turn)
    tracker.detach()
    release.set()
    await tracker.wait_idle()

    assert updates == []
    assert tracker.get(turn.turn_id).answer == "late answer"
