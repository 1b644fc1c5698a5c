from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Mapping

from .errors import MalformedHistoryRecord
from .types import QuestionRef, SessionOutcome

logger = logging.getLogger(__name__)


def _as_outcome(record: Any) -> SessionOutcome:
    if isinstance(record, SessionOutcome):
        return record
    if isinstance(record, Mapping):
        return SessionOutcome.from_dict(record)
    raise MalformedHistoryRecord(f"unsupported history record type {type(record).__name__}")


def distinct_incorrect(history: Iterable[SessionOutcome | Mapping[str, Any]]) -> list[QuestionRef]:
    """Questions whose latest appearance in history was a wrong answer.

    History is folded oldest first. Within one session wrong answers are
    applied before correct ones, so a key listed in both ends up removed.
    """
    failing: dict[tuple[str, int], QuestionRef] = {}
    for idx, record in enumerate(history):
        try:
            outcome = _as_outcome(record)
        except MalformedHistoryRecord as exc:
            logger.warning("malformed_history_record index=%s err=%s", idx, exc)
            continue
        for ref in outcome.wrong_questions:
            failing[ref.key] = ref
        for ref in outcome.correct_questions:
            failing.pop(ref.key, None)
    return list(failing.values())


def mistake_counts_by_chapter(history: Iterable[SessionOutcome | Mapping[str, Any]]) -> dict[str, int]:
    counts = Counter(ref.chapter for ref in distinct_incorrect(history))
    return dict(sorted(counts.items()))
