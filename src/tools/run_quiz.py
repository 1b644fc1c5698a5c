import argparse
import asyncio
import logging
import sys
from typing import Callable
from quiz.config import Settings, load_settings
from quiz.db import ensure_schema, make_engine, make_sessionmaker
from quiz.grader import grade_question, score_percentage
from quiz.history import SqlHistoryRepository
from quiz.question_bank import SqlUserQuestionRepository, load_question_bank
from quiz.quiz_flow import QuizSession, finish_session, start_chapter_session, start_retry_session
from quiz.selector import available_chapters
from quiz.types import SessionOutcome

def _ask_choice(options: tuple[str, ...], ask: Callable[[str], str], out: Callable[[str], None]) -> str | None:
    while True:
        raw = ask("> ").strip()
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1]
        out(f"Enter 1-{len(options)}, or leave blank to skip.")

def _play(session: QuizSession, ask: Callable[[str], str], out: Callable[[str], None]) -> None:
    total = len(session.questions)
    for n, q in enumerate(session.questions, start=1):
        out(f"\n[{n}/{total}] ({q.chapter}) {q.question}")
        for idx, opt in enumerate(q.options, start=1):
            out(f"  {idx}. {opt}")
        choice = _ask_choice(q.options, ask, out)
        if choice is not None:
            session.answer(q.id, choice)

async def run(
    settings: Settings,
    *,
    chapters: list[str] | None = None,
    retry: bool = False,
    count: int | None = None,
    ask: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> SessionOutcome | None:
    engine = make_engine(settings)
    try:
        await ensure_schema(engine)
        sessionmaker = make_sessionmaker(engine)
        history_repo = SqlHistoryRepository(sessionmaker)
        bank = await load_question_bank(settings.chapters_dir, SqlUserQuestionRepository(sessionmaker))
        if retry:
            session = await start_retry_session(bank, history_repo)
        else:
            wanted = chapters or available_chapters(bank)
            session = start_chapter_session(bank, wanted, count or settings.question_count)
        if session.is_empty:
            out("No questions to ask." if not retry else "No mistakes left to retry.")
            return None

        _play(session, ask, out)
        outcome = await finish_session(session, history_repo)
    finally:
        await engine.dispose()

    out(f"\nScore: {outcome.score}/{outcome.total} ({score_percentage(outcome)}%)")
    for q in session.questions:
        result = grade_question(q, session.answers.get(q.id))
        if not result.is_correct:
            out(f"  ✗ {q.question}\n    correct: {result.canonical_correct_text}")
            if q.explanation:
                out(f"    {q.explanation}")
    return outcome

def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Run a quiz session in the terminal.")
    parser.add_argument("--chapter", action="append", dest="chapters", help="chapter to include (repeatable)")
    parser.add_argument("--count", type=int, default=None, help="questions per session (default QUESTION_COUNT)")
    parser.add_argument("--retry", action="store_true", help="retry questions still answered wrong")
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    outcome = asyncio.run(run(settings, chapters=args.chapters, retry=args.retry, count=args.count))
    return 0 if outcome is not None else 1

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
