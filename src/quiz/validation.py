from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .normalize import clean_option, option_has_prefix
from .types import coerce_question_id

REQUIRED_FIELDS = ("id", "chapter", "question", "options", "correctAnswer")
EXPECTED_OPTION_COUNT = 5


@dataclass(frozen=True)
class ValidationIssue:
    severity: str  # "error" | "warning"
    message: str
    chapter: str | None = None
    question_id: int | str | None = None
    item_index: int | None = None


def _iter_questions(payload) -> Iterable:
    if isinstance(payload, list):
        return payload
    return []


def validate_questions(payload) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    seen_keys: set[tuple[str, int]] = set()
    for idx, item in enumerate(_iter_questions(payload), start=1):
        if not isinstance(item, dict):
            issues.append(ValidationIssue("error", "question is not an object", item_index=idx))
            continue
        chapter = item.get("chapter")
        qid = item.get("id")

        def issue(severity: str, message: str) -> None:
            issues.append(ValidationIssue(severity, message, chapter, qid, idx))

        missing = [name for name in REQUIRED_FIELDS if item.get(name) in (None, "")]
        for name in missing:
            issue("error", f"missing {name}")
        options = item.get("options")
        if options is not None and not isinstance(options, list):
            issue("error", "options must be a list")
            continue
        if missing:
            continue

        try:
            key = (str(chapter), coerce_question_id(qid))
        except ValueError:
            issue("error", "id must be an integer")
            continue
        if key in seen_keys:
            issue("warning", "duplicate (chapter, id)")
        seen_keys.add(key)

        options = [str(x) for x in options]
        if len(options) != EXPECTED_OPTION_COUNT:
            issue("warning", f"expected {EXPECTED_OPTION_COUNT} options, got {len(options)}")
        if any(clean_option(opt) == opt for opt in options):
            issue("warning", "option without '<n>. ' prefix")
        label = str(item.get("correctAnswer")).strip()
        if not any(option_has_prefix(opt, label) for opt in options):
            issue("warning", "correctAnswer matches no option prefix")
        cleaned = [clean_option(opt) for opt in options]
        if len(set(cleaned)) != len(cleaned):
            issue("warning", "duplicate option text after cleaning")
    return issues


def has_errors(issues: Iterable[ValidationIssue]) -> bool:
    return any(issue.severity == "error" for issue in issues)
