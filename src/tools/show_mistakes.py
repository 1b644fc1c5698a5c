import asyncio
import logging
from quiz.config import load_settings
from quiz.db import ensure_schema, make_engine, make_sessionmaker
from quiz.history import SqlHistoryRepository
from quiz.mistakes import distinct_incorrect, mistake_counts_by_chapter

async def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    engine = make_engine(settings)
    await ensure_schema(engine)
    repo = SqlHistoryRepository(make_sessionmaker(engine))
    history = await repo.read()
    await engine.dispose()

    mistakes = distinct_incorrect(history)
    print(f"{len(history)} sessions, {len(mistakes)} questions to retry")
    for chapter, count in mistake_counts_by_chapter(history).items():
        ids = sorted(ref.id for ref in mistakes if ref.chapter == chapter)
        print(f"{chapter} ({count}): {', '.join(f'#{i}' for i in ids)}")

if __name__ == "__main__":
    asyncio.run(main())
