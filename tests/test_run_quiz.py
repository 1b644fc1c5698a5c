import asyncio
import json
import pytest

sqlalchemy = pytest.importorskip("sqlalchemy")

from quiz.config import Settings
from tools.run_quiz import run

def _payload(qid: int, chapter: str) -> dict:
    return {
        "id": qid,
        "chapter": chapter,
        "question": f"Q{qid}",
        "options": ["1. A", "2. B", "3. C", "4. D", "5. E"],
        "correctAnswer": "2",
        "explanation": "B is right",
    }

def _settings(tmp_path, question_count=2) -> Settings:
    chapters = tmp_path / "chapters"
    chapters.mkdir(exist_ok=True)
    (chapters / "a.json").write_text(
        json.dumps([_payload(1, "A"), _payload(2, "A"), _payload(3, "A")]), encoding="utf-8"
    )
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'quiz.db'}",
        chapters_dir=str(chapters),
        question_count=question_count,
    )

def test_session_size_comes_from_settings_then_retry_replays_mistakes(tmp_path):
    settings = _settings(tmp_path)
    lines: list[str] = []

    async def _run():
        first = await run(settings, ask=lambda _: "", out=lines.append)
        assert (first.score, first.total) == (0, 2)
        retry = await run(settings, retry=True, ask=lambda _: "", out=lines.append)
        assert {r.key for r in retry.wrong_questions} == {r.key for r in first.wrong_questions}
        bigger = await run(settings, count=3, ask=lambda _: "", out=lines.append)
        assert bigger.total == 3
    asyncio.run(_run())
    assert any("correct: B" in line for line in lines)

def test_invalid_choice_is_asked_again(tmp_path):
    settings = _settings(tmp_path, question_count=1)
    replies = iter(["9", "x", "2"])
    lines: list[str] = []

    async def _run():
        return await run(settings, ask=lambda _: next(replies), out=lines.append)
    outcome = asyncio.run(_run())
    assert outcome.total == 1
    assert sum("Enter 1-5" in line for line in lines) == 2

def test_retry_without_history_has_nothing_to_ask(tmp_path):
    settings = _settings(tmp_path)
    lines: list[str] = []

    async def _run():
        return await run(settings, retry=True, out=lines.append)
    assert asyncio.run(_run()) is None
    assert lines == ["No mistakes left to retry."]
