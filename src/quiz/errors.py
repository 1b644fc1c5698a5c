from __future__ import annotations


class QuizError(Exception):
    pass


class QuestionBankError(QuizError):
    """The question bank could not be read; no session can start without it."""


class HistoryReadError(QuizError):
    """The history storage itself could not be read."""


class InvalidQuestionRecord(QuizError):
    pass


class InvalidQuestionPayload(QuizError):
    pass


class MalformedHistoryRecord(QuizError):
    """A single stored session outcome is unusable. Aggregation skips it."""
