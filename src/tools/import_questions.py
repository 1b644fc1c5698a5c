import argparse
import asyncio
import logging
import sys
from quiz.config import load_settings
from quiz.db import ensure_schema, make_engine, make_sessionmaker
from quiz.errors import InvalidQuestionPayload
from quiz.question_bank import SqlUserQuestionRepository, parse_question_payload

async def run(path: str, append: bool) -> int:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    with open(path, "r", encoding="utf-8") as handle:
        payload = handle.read()
    try:
        questions = parse_question_payload(payload)
    except InvalidQuestionPayload as exc:
        print(f"ERROR: {exc}")
        return 1

    engine = make_engine(settings)
    await ensure_schema(engine)
    repo = SqlUserQuestionRepository(make_sessionmaker(engine))
    await repo.write(questions, append=append)
    await engine.dispose()
    print(f"{'Appended' if append else 'Replaced with'} {len(questions)} questions")
    return 0

def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Import user questions from a JSON array file.")
    parser.add_argument("path")
    parser.add_argument("--append", action="store_true", help="append instead of replacing")
    args = parser.parse_args(argv)
    return asyncio.run(run(args.path, args.append))

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
