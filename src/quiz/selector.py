from __future__ import annotations

import logging
import random
from typing import Collection, Iterable, Sequence

from .shuffle import shuffle_in_place
from .types import QuestionRef, RawQuestion

logger = logging.getLogger(__name__)


def available_chapters(bank: Iterable[RawQuestion]) -> list[str]:
    return sorted({q.chapter for q in bank})


def select_by_chapters(
    bank: Sequence[RawQuestion],
    chapters: Collection[str],
    count: int,
    rng: random.Random | None = None,
) -> list[RawQuestion]:
    wanted = set(chapters)
    pool = [q for q in bank if q.chapter in wanted]
    shuffle_in_place(pool, rng)
    selected = pool[: max(count, 0)]
    if not selected:
        logger.info("empty_selection mode=chapters chapters=%s count=%s", sorted(wanted), count)
    return selected


def select_by_keys(
    bank: Sequence[RawQuestion],
    keys: Iterable[QuestionRef],
) -> list[RawQuestion]:
    """Exact (chapter, id) matches in bank order. No shuffle, no truncation."""
    wanted = {k.key for k in keys}
    selected = [q for q in bank if q.ref.key in wanted]
    if not selected:
        logger.info("empty_selection mode=keys keys=%s", len(wanted))
    return selected
