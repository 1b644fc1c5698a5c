from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise RuntimeError(f"{name} must be an integer") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive")
    return value

@dataclass(frozen=True)
class Settings:
    database_url: str
    chapters_dir: str
    question_count: int = 20
    log_level: str = "INFO"

def load_settings() -> Settings:
    load_dotenv()
    database_url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/quiz.db").strip()
    chapters_dir = os.getenv("CHAPTERS_DIR", "data/chapters").strip()
    question_count = _positive_int("QUESTION_COUNT", os.getenv("QUESTION_COUNT", "20"))
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError("LOG_LEVEL must be a logging level name (DEBUG, INFO, WARNING, ...)")

    return Settings(
        database_url=database_url,
        chapters_dir=chapters_dir,
        question_count=question_count,
        log_level=log_level,
    )
