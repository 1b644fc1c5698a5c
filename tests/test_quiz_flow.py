import asyncio
import random

import pytest
from quiz.history import InMemoryHistoryRepository
from quiz.quiz_flow import QuizSession, finish_session, start_chapter_session, start_retry_session
from quiz.types import QuestionRef, RawQuestion


def _question(qid: int, chapter: str) -> RawQuestion:
    return RawQuestion(
        id=qid,
        chapter=chapter,
        question=f"{chapter} {qid}",
        options=("1. A", "2. B", "3. C", "4. D", "5. E"),
        correct_answer="2",
    )


BANK = [_question(i, "ch1") for i in range(1, 6)] + [_question(11, "ch2"), _question(12, "ch2")]


def test_chapter_session_then_retry_of_mistakes():
    async def _run():
        repo = InMemoryHistoryRepository()
        rng = random.Random(8)
        session = start_chapter_session(BANK, {"ch1", "ch2"}, 4, rng)
        assert len(session.questions) == 4
        wrong_ref = session.questions[0].ref
        for q in session.questions[1:]:
            session.answer(q.id, q.correct_answer_text)
        session.answer(wrong_ref.id, "A")
        assert session.is_complete

        outcome = await finish_session(session, repo, now=lambda: 42)
        assert outcome.score == 3
        assert outcome.wrong_questions == (wrong_ref,)
        assert await repo.read() == [outcome]

        retry = await start_retry_session(BANK, repo, rng)
        assert retry.mode == "retry"
        assert [q.ref for q in retry.questions] == [wrong_ref]

        retry.answer(wrong_ref.id, "B")
        await finish_session(retry, repo)
        again = await start_retry_session(BANK, repo)
        assert again.is_empty
    asyncio.run(_run())

def test_last_answer_wins():
    session = start_chapter_session(BANK, {"ch2"}, 1, random.Random(0))
    qid = session.questions[0].id
    session.answer(qid, "A")
    session.answer(qid, "B")
    assert session.answers == {qid: "B"}

def test_answer_for_unknown_question_is_rejected():
    session = QuizSession(questions=[])
    with pytest.raises(KeyError):
        session.answer(1, "A")
    assert session.is_empty
    assert session.is_complete

def test_unanswered_questions_are_graded_wrong():
    async def _run():
        session = start_chapter_session(BANK, {"ch2"}, 5, random.Random(1))
        outcome = await finish_session(session, InMemoryHistoryRepository())
        assert outcome.score == 0
        assert {r.key for r in outcome.wrong_questions} == {("ch2", 11), ("ch2", 12)}
    asyncio.run(_run())

def test_retry_session_tracks_chapter_and_id():
    async def _run():
        repo = InMemoryHistoryRepository()
        session = start_chapter_session(BANK, {"ch2"}, 5, random.Random(1))
        await finish_session(session, repo)
        retry = await start_retry_session(BANK, repo)
        assert {q.ref for q in retry.questions} == {QuestionRef(11, "ch2"), QuestionRef(12, "ch2")}
    asyncio.run(_run())
