from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .errors import InvalidQuestionPayload, InvalidQuestionRecord, QuestionBankError
from .models import UserQuestion
from .types import RawQuestion

logger = logging.getLogger(__name__)


def parse_question_payload(text: str) -> list[RawQuestion]:
    """Parse an import payload: a JSON array of question objects."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidQuestionPayload(f"invalid JSON: {exc}") from None
    if not isinstance(data, list):
        raise InvalidQuestionPayload("payload must be a JSON array")
    questions: list[RawQuestion] = []
    for idx, item in enumerate(data, start=1):
        try:
            questions.append(RawQuestion.from_dict(item))
        except InvalidQuestionRecord as exc:
            raise InvalidQuestionPayload(f"item {idx}: {exc}") from None
    return questions


def load_packaged_questions(directory: str | Path) -> list[RawQuestion]:
    """Concatenate every chapter file (a JSON array) under ``directory``."""
    root = Path(directory)
    if not root.exists():
        raise QuestionBankError(f"chapters directory not found: {root}")
    questions: list[RawQuestion] = []
    for path in sorted(root.glob("*.json")):
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise QuestionBankError(f"failed to read {path}: {exc}") from exc
        if not isinstance(data, list):
            logger.warning("chapter_file_not_array path=%s", path)
            continue
        loaded = 0
        for idx, item in enumerate(data, start=1):
            try:
                questions.append(RawQuestion.from_dict(item))
                loaded += 1
            except InvalidQuestionRecord as exc:
                logger.warning("invalid_question path=%s item=%s err=%s", path, idx, exc)
        logger.info("chapter_file_loaded path=%s questions=%s", path, loaded)
    return questions


class UserQuestionRepository(Protocol):
    async def read(self) -> list[RawQuestion]: ...

    async def write(self, questions: Iterable[RawQuestion], *, append: bool = False) -> None: ...

    async def delete_chapter(self, chapter: str) -> int: ...

    async def clear(self) -> None: ...


def _row_to_question(row: UserQuestion) -> RawQuestion:
    try:
        options = json.loads(row.options_json or "[]")
    except json.JSONDecodeError as exc:
        raise InvalidQuestionRecord(f"invalid options JSON: {exc}") from None
    return RawQuestion.from_dict(
        {
            "id": row.question_id,
            "chapter": row.chapter,
            "question": row.question,
            "options": options,
            "correctAnswer": row.correct_answer,
            "explanation": row.explanation,
        }
    )


class SqlUserQuestionRepository:
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    async def read(self) -> list[RawQuestion]:
        try:
            async with self.sessionmaker() as s:
                rows = (
                    await s.execute(select(UserQuestion).order_by(UserQuestion.position, UserQuestion.id))
                ).scalars().all()
        except SQLAlchemyError as exc:
            raise QuestionBankError(f"failed to read user questions: {exc}") from exc
        out: list[RawQuestion] = []
        for row in rows:
            try:
                out.append(_row_to_question(row))
            except InvalidQuestionRecord as exc:
                logger.warning("invalid_user_question row=%s err=%s", row.id, exc)
        return out

    async def write(self, questions: Iterable[RawQuestion], *, append: bool = False) -> None:
        async with self.sessionmaker() as s:
            start = 0
            if append:
                current = (await s.execute(select(func.max(UserQuestion.position)))).scalar()
                start = (current or 0) + 1
            else:
                await s.execute(delete(UserQuestion))
            count = 0
            for offset, q in enumerate(questions):
                s.add(
                    UserQuestion(
                        position=start + offset,
                        question_id=q.id,
                        chapter=q.chapter,
                        question=q.question,
                        options_json=json.dumps(list(q.options), ensure_ascii=False),
                        correct_answer=q.correct_answer,
                        explanation=q.explanation,
                    )
                )
                count += 1
            await s.commit()
        logger.info("user_questions_written count=%s append=%s", count, append)

    async def delete_chapter(self, chapter: str) -> int:
        async with self.sessionmaker() as s:
            result = await s.execute(delete(UserQuestion).where(UserQuestion.chapter == chapter))
            await s.commit()
        deleted = result.rowcount or 0
        logger.info("user_chapter_deleted chapter=%s count=%s", chapter, deleted)
        return deleted

    async def clear(self) -> None:
        async with self.sessionmaker() as s:
            await s.execute(delete(UserQuestion))
            await s.commit()


class InMemoryUserQuestionRepository:
    def __init__(self, questions: list[RawQuestion] | None = None):
        self.questions: list[RawQuestion] = list(questions or [])

    async def read(self) -> list[RawQuestion]:
        return list(self.questions)

    async def write(self, questions: Iterable[RawQuestion], *, append: bool = False) -> None:
        if append:
            self.questions.extend(questions)
        else:
            self.questions = list(questions)

    async def delete_chapter(self, chapter: str) -> int:
        before = len(self.questions)
        self.questions = [q for q in self.questions if q.chapter != chapter]
        return before - len(self.questions)

    async def clear(self) -> None:
        self.questions = []


async def load_question_bank(
    chapters_dir: str | Path,
    user_repo: UserQuestionRepository | None = None,
) -> list[RawQuestion]:
    """Packaged chapters followed by user-authored questions, as one flat bank."""
    bank = load_packaged_questions(chapters_dir)
    if user_repo is not None:
        bank.extend(await user_repo.read())
    logger.info("question_bank_loaded questions=%s", len(bank))
    return bank
