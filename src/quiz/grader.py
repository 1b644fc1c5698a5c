from __future__ import annotations

import time
from typing import Callable, Iterable, Mapping

from .normalize import clean_option
from .types import GradeResult, PreparedQuestion, QuestionRef, SessionOutcome


def now_millis() -> int:
    return int(time.time() * 1000)


def _legacy_display_text(question: PreparedQuestion) -> str:
    label = question.correct_answer
    if not label:
        return label
    # an exact "N." or "N)" label beats a longer number that shares the digit
    for marker in (".", ")"):
        for opt in question.source_options:
            if opt.startswith(label + marker):
                return clean_option(opt)
    for opt in question.source_options:
        if opt.startswith(label):
            return clean_option(opt)
    return label


def _legacy_is_correct(question: PreparedQuestion, submitted: str | None) -> bool:
    # Prefix match against the label; only reachable when resolution failed.
    if not submitted:
        return False
    return submitted.startswith(question.correct_answer)


def grade_question(question: PreparedQuestion, submitted: str | None) -> GradeResult:
    if question.correct_answer_text is not None:
        return GradeResult(
            is_correct=submitted == question.correct_answer_text,
            canonical_correct_text=question.correct_answer_text,
        )
    return GradeResult(
        is_correct=_legacy_is_correct(question, submitted),
        canonical_correct_text=_legacy_display_text(question),
    )


def grade_session(
    questions: Iterable[PreparedQuestion],
    answers: Mapping[int, str],
    *,
    now: Callable[[], int] = now_millis,
) -> SessionOutcome:
    score = 0
    total = 0
    wrong: list[QuestionRef] = []
    correct: list[QuestionRef] = []
    for q in questions:
        total += 1
        result = grade_question(q, answers.get(q.id))
        if result.is_correct:
            score += 1
            correct.append(q.ref)
        else:
            wrong.append(q.ref)
    return SessionOutcome(
        score=score,
        total=total,
        wrong_questions=tuple(wrong),
        correct_questions=tuple(correct),
        timestamp=now(),
    )


def score_percentage(outcome: SessionOutcome) -> int:
    if outcome.total <= 0:
        return 0
    # round half up
    return int(outcome.score * 100 / outcome.total + 0.5)
