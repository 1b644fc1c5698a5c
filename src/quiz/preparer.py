from __future__ import annotations

import logging
import random
from typing import Iterable

from .normalize import clean_option, option_has_prefix
from .shuffle import shuffle_in_place
from .types import PreparedQuestion, RawQuestion

logger = logging.getLogger(__name__)


def resolve_correct_answer_text(raw: RawQuestion) -> str | None:
    for opt in raw.options:
        if option_has_prefix(opt, raw.correct_answer):
            return clean_option(opt)
    return None


def prepare_question(raw: RawQuestion, rng: random.Random | None = None) -> PreparedQuestion:
    """Resolve the correct option text, then clean and shuffle the options.

    The correct text is resolved from the prefixed options before anything is
    reordered, so grading compares by text and never by position.
    """
    source_options = tuple(raw.options)
    correct_text = resolve_correct_answer_text(raw)
    if correct_text is None:
        logger.warning(
            "correct_answer_unresolved id=%s chapter=%s correct_answer=%r",
            raw.id,
            raw.chapter,
            raw.correct_answer,
        )
    cleaned = [clean_option(opt) for opt in source_options]
    shuffle_in_place(cleaned, rng)
    return PreparedQuestion(
        id=raw.id,
        chapter=raw.chapter,
        question=raw.question,
        options=tuple(cleaned),
        correct_answer=raw.correct_answer,
        explanation=raw.explanation,
        correct_answer_text=correct_text,
        source_options=source_options,
    )


def prepare_questions(
    raw_questions: Iterable[RawQuestion],
    rng: random.Random | None = None,
) -> list[PreparedQuestion]:
    return [prepare_question(q, rng) for q in raw_questions]
