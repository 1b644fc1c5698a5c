from __future__ import annotations

import json
import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .errors import HistoryReadError, MalformedHistoryRecord
from .models import HistoryRecord
from .types import SessionOutcome

logger = logging.getLogger(__name__)


class HistoryRepository(Protocol):
    async def read(self) -> list[SessionOutcome]: ...

    async def append(self, outcome: SessionOutcome) -> None: ...

    async def clear(self) -> None: ...


def _row_to_outcome(row: HistoryRecord) -> SessionOutcome:
    try:
        wrong = json.loads(row.wrong_questions_json or "[]")
        correct = json.loads(row.correct_questions_json or "[]")
    except json.JSONDecodeError as exc:
        raise MalformedHistoryRecord(f"invalid JSON: {exc}") from None
    return SessionOutcome.from_dict(
        {
            "score": row.score,
            "total": row.total,
            "wrongQuestions": wrong,
            "correctQuestions": correct,
            "timestamp": row.timestamp,
        }
    )


class SqlHistoryRepository:
    """Append-only session log in the quiz_history table, oldest row first."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    async def read(self) -> list[SessionOutcome]:
        try:
            async with self.sessionmaker() as s:
                rows = (
                    await s.execute(select(HistoryRecord).order_by(HistoryRecord.id))
                ).scalars().all()
        except SQLAlchemyError as exc:
            raise HistoryReadError(f"failed to read history: {exc}") from exc
        out: list[SessionOutcome] = []
        for row in rows:
            try:
                out.append(_row_to_outcome(row))
            except MalformedHistoryRecord as exc:
                logger.warning("malformed_history_row id=%s err=%s", row.id, exc)
        return out

    async def append(self, outcome: SessionOutcome) -> None:
        async with self.sessionmaker() as s:
            s.add(
                HistoryRecord(
                    score=outcome.score,
                    total=outcome.total,
                    wrong_questions_json=json.dumps(
                        [q.to_dict() for q in outcome.wrong_questions], ensure_ascii=False
                    ),
                    correct_questions_json=json.dumps(
                        [q.to_dict() for q in outcome.correct_questions], ensure_ascii=False
                    ),
                    timestamp=outcome.timestamp,
                )
            )
            await s.commit()
        logger.info(
            "history_appended score=%s total=%s wrong=%s",
            outcome.score,
            outcome.total,
            len(outcome.wrong_questions),
        )

    async def clear(self) -> None:
        async with self.sessionmaker() as s:
            result = await s.execute(delete(HistoryRecord))
            await s.commit()
        logger.info("history_cleared rows=%s", result.rowcount or 0)


class InMemoryHistoryRepository:
    def __init__(self, outcomes: list[SessionOutcome] | None = None):
        self.outcomes: list[SessionOutcome] = list(outcomes or [])

    async def read(self) -> list[SessionOutcome]:
        return list(self.outcomes)

    async def append(self, outcome: SessionOutcome) -> None:
        self.outcomes.append(outcome)

    async def clear(self) -> None:
        self.outcomes.clear()
