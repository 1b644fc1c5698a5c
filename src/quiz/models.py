from __future__ import annotations
from sqlalchemy import String, Integer, BigInteger, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base

class HistoryRecord(Base):
    __tablename__ = "quiz_history"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)  # append order
    score: Mapped[int] = mapped_column(Integer)
    total: Mapped[int] = mapped_column(Integer)
    wrong_questions_json: Mapped[str] = mapped_column(Text, default="[]")    # JSON list of {id, chapter}
    correct_questions_json: Mapped[str] = mapped_column(Text, default="[]")  # JSON list of {id, chapter}
    timestamp: Mapped[int] = mapped_column(BigInteger)                      # epoch milliseconds

class UserQuestion(Base):
    __tablename__ = "user_questions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    position: Mapped[int] = mapped_column(Integer, index=True)  # order within the user bank
    question_id: Mapped[int] = mapped_column(Integer)
    chapter: Mapped[str] = mapped_column(String(128), index=True)
    question: Mapped[str] = mapped_column(Text)
    options_json: Mapped[str] = mapped_column(Text)             # JSON list, "<n>. " prefixed
    correct_answer: Mapped[str] = mapped_column(String(16))
    explanation: Mapped[str] = mapped_column(Text, default="")

    __table_args__ = (Index("ix_user_questions_chapter_qid", "chapter", "question_id"),)
