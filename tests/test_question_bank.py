import asyncio
import json
import pytest

sqlalchemy = pytest.importorskip("sqlalchemy")
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from quiz.db import ensure_schema
from quiz.errors import InvalidQuestionPayload, QuestionBankError
from quiz.question_bank import (
    InMemoryUserQuestionRepository,
    SqlUserQuestionRepository,
    load_packaged_questions,
    load_question_bank,
    parse_question_payload,
)
from quiz.types import RawQuestion

def _payload(qid: int, chapter: str) -> dict:
    return {
        "id": qid,
        "chapter": chapter,
        "question": f"Q{qid}",
        "options": ["1. A", "2. B", "3. C", "4. D", "5. E"],
        "correctAnswer": "2",
        "explanation": "B is right",
    }

async def _setup_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    await ensure_schema(engine)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    return engine, Session

def test_parse_question_payload():
    questions = parse_question_payload(json.dumps([_payload(1, "Basics"), _payload(2, "Basics")]))
    assert [q.id for q in questions] == [1, 2]
    assert questions[0].correct_answer == "2"
    assert questions[0].to_dict() == _payload(1, "Basics")

@pytest.mark.parametrize(
    "text",
    ["{not json", json.dumps({"id": 1}), json.dumps([{"id": 1, "chapter": "x"}]), json.dumps(["oops"])],
)
def test_parse_question_payload_rejects(text):
    with pytest.raises(InvalidQuestionPayload):
        parse_question_payload(text)

def test_load_packaged_questions(tmp_path, caplog):
    (tmp_path / "b_chapter.json").write_text(json.dumps([_payload(3, "B")]), encoding="utf-8")
    (tmp_path / "a_chapter.json").write_text(json.dumps([_payload(1, "A"), {"id": 2}]), encoding="utf-8")
    (tmp_path / "meta.json").write_text(json.dumps({"title": "not a chapter"}), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    questions = load_packaged_questions(tmp_path)
    assert [q.ref.key for q in questions] == [("A", 1), ("B", 3)]
    assert "invalid_question" in caplog.text
    assert "chapter_file_not_array" in caplog.text

def test_load_packaged_questions_missing_dir_is_fatal(tmp_path):
    with pytest.raises(QuestionBankError):
        load_packaged_questions(tmp_path / "nope")

def test_load_packaged_questions_unreadable_file_is_fatal(tmp_path):
    (tmp_path / "bad.json").write_text("[{", encoding="utf-8")
    with pytest.raises(QuestionBankError):
        load_packaged_questions(tmp_path)

def test_sql_user_questions_replace_append_delete():
    async def _run():
        engine, Session = await _setup_session()
        repo = SqlUserQuestionRepository(Session)
        first = [RawQuestion.from_dict(_payload(1, "A")), RawQuestion.from_dict(_payload(2, "A"))]
        await repo.write(first)
        assert await repo.read() == first

        extra = [RawQuestion.from_dict(_payload(1, "B"))]
        await repo.write(extra, append=True)
        assert [q.ref.key for q in await repo.read()] == [("A", 1), ("A", 2), ("B", 1)]

        assert await repo.delete_chapter("A") == 2
        assert await repo.read() == extra

        await repo.write(first)
        assert await repo.read() == first
        await repo.clear()
        assert await repo.read() == []
        await engine.dispose()
    asyncio.run(_run())

def test_load_question_bank_merges_user_questions(tmp_path):
    (tmp_path / "ch.json").write_text(json.dumps([_payload(1, "Packaged")]), encoding="utf-8")

    async def _run():
        user_repo = InMemoryUserQuestionRepository([RawQuestion.from_dict(_payload(1, "Mine"))])
        bank = await load_question_bank(tmp_path, user_repo)
        assert [q.chapter for q in bank] == ["Packaged", "Mine"]
        assert await load_question_bank(tmp_path) == bank[:1]
    asyncio.run(_run())

def test_in_memory_user_questions():
    async def _run():
        repo = InMemoryUserQuestionRepository()
        q = RawQuestion.from_dict(_payload(1, "A"))
        await repo.write([q], append=True)
        await repo.write([q], append=True)
        assert len(await repo.read()) == 2
        assert await repo.delete_chapter("A") == 2
        assert await repo.delete_chapter("A") == 0
    asyncio.run(_run())
