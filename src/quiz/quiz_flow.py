from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Collection, Sequence

from .grader import grade_session, now_millis
from .history import HistoryRepository
from .mistakes import distinct_incorrect
from .preparer import prepare_questions
from .selector import select_by_chapters, select_by_keys
from .types import PreparedQuestion, RawQuestion, SessionOutcome

logger = logging.getLogger(__name__)


@dataclass
class QuizSession:
    questions: list[PreparedQuestion]
    mode: str = "chapters"  # chapters | retry
    answers: dict[int, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.questions

    @property
    def is_complete(self) -> bool:
        return all(q.id in self.answers for q in self.questions)

    def answer(self, question_id: int, option_text: str) -> None:
        if not any(q.id == question_id for q in self.questions):
            raise KeyError(f"question {question_id} is not part of this session")
        self.answers[question_id] = option_text


def start_chapter_session(
    bank: Sequence[RawQuestion],
    chapters: Collection[str],
    count: int,
    rng: random.Random | None = None,
) -> QuizSession:
    selected = select_by_chapters(bank, chapters, count, rng)
    session = QuizSession(questions=prepare_questions(selected, rng), mode="chapters")
    logger.info("session_started mode=chapters questions=%s", len(session.questions))
    return session


async def start_retry_session(
    bank: Sequence[RawQuestion],
    history_repo: HistoryRepository,
    rng: random.Random | None = None,
) -> QuizSession:
    keys = distinct_incorrect(await history_repo.read())
    selected = select_by_keys(bank, keys)
    session = QuizSession(questions=prepare_questions(selected, rng), mode="retry")
    logger.info(
        "session_started mode=retry mistakes=%s questions=%s",
        len(keys),
        len(session.questions),
    )
    return session


async def finish_session(
    session: QuizSession,
    history_repo: HistoryRepository,
    *,
    now: Callable[[], int] = now_millis,
) -> SessionOutcome:
    outcome = grade_session(session.questions, session.answers, now=now)
    await history_repo.append(outcome)
    logger.info(
        "session_finished mode=%s score=%s total=%s",
        session.mode,
        outcome.score,
        outcome.total,
    )
    return outcome
