from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import InvalidQuestionRecord, MalformedHistoryRecord


def coerce_question_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("question id must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    raise ValueError("question id must be an integer")


@dataclass(frozen=True)
class QuestionRef:
    """Identity of a question across chapters: (chapter, id)."""

    id: int
    chapter: str

    @property
    def key(self) -> tuple[str, int]:
        return (self.chapter, self.id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "chapter": self.chapter}

    @classmethod
    def from_dict(cls, data: Any) -> "QuestionRef":
        if not isinstance(data, Mapping):
            raise MalformedHistoryRecord("question ref is not an object")
        if "id" not in data or "chapter" not in data:
            raise MalformedHistoryRecord("question ref needs id and chapter")
        try:
            qid = coerce_question_id(data["id"])
        except ValueError as exc:
            raise MalformedHistoryRecord(str(exc)) from None
        return cls(id=qid, chapter=str(data["chapter"]))


@dataclass(frozen=True)
class RawQuestion:
    id: int
    chapter: str
    question: str
    options: tuple[str, ...]
    correct_answer: str
    explanation: str = ""

    @property
    def ref(self) -> QuestionRef:
        return QuestionRef(id=self.id, chapter=self.chapter)

    @classmethod
    def from_dict(cls, data: Any) -> "RawQuestion":
        if not isinstance(data, Mapping):
            raise InvalidQuestionRecord("question is not an object")
        for name in ("id", "chapter", "question", "options", "correctAnswer"):
            if name not in data or data[name] is None:
                raise InvalidQuestionRecord(f"missing {name}")
        options = data["options"]
        if not isinstance(options, list):
            raise InvalidQuestionRecord("options must be a list")
        try:
            qid = coerce_question_id(data["id"])
        except ValueError as exc:
            raise InvalidQuestionRecord(str(exc)) from None
        correct_answer = str(data["correctAnswer"]).strip()
        if not correct_answer:
            raise InvalidQuestionRecord("correctAnswer must not be blank")
        return cls(
            id=qid,
            chapter=str(data["chapter"]),
            question=str(data["question"]),
            options=tuple(str(x) for x in options),
            correct_answer=correct_answer,
            explanation=str(data.get("explanation") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "chapter": self.chapter,
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class PreparedQuestion:
    id: int
    chapter: str
    question: str
    options: tuple[str, ...]           # cleaned, shuffled
    correct_answer: str
    explanation: str
    correct_answer_text: str | None    # None when correct_answer matched no option
    source_options: tuple[str, ...] = field(default=(), repr=False)  # original prefixed order

    @property
    def ref(self) -> QuestionRef:
        return QuestionRef(id=self.id, chapter=self.chapter)


@dataclass(frozen=True)
class GradeResult:
    is_correct: bool
    canonical_correct_text: str


@dataclass(frozen=True)
class SessionOutcome:
    score: int
    total: int
    wrong_questions: tuple[QuestionRef, ...]
    correct_questions: tuple[QuestionRef, ...]
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "total": self.total,
            "wrongQuestions": [q.to_dict() for q in self.wrong_questions],
            "correctQuestions": [q.to_dict() for q in self.correct_questions],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SessionOutcome":
        if not isinstance(data, Mapping):
            raise MalformedHistoryRecord("session outcome is not an object")
        if "wrongQuestions" not in data and "correctQuestions" not in data:
            raise MalformedHistoryRecord("session outcome has no question lists")
        wrong = data.get("wrongQuestions", [])
        correct = data.get("correctQuestions", [])
        if not isinstance(wrong, list) or not isinstance(correct, list):
            raise MalformedHistoryRecord("wrongQuestions/correctQuestions must be lists")
        try:
            score = int(data.get("score", 0))
            total = int(data.get("total", len(wrong) + len(correct)))
            timestamp = int(data.get("timestamp", 0))
        except (TypeError, ValueError):
            raise MalformedHistoryRecord("score, total and timestamp must be integers") from None
        return cls(
            score=score,
            total=total,
            wrong_questions=tuple(QuestionRef.from_dict(q) for q in wrong),
            correct_questions=tuple(QuestionRef.from_dict(q) for q in correct),
            timestamp=timestamp,
        )
