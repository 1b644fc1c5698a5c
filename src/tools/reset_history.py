import asyncio
import logging
import sys
from quiz.config import load_settings
from quiz.db import ensure_schema, make_engine, make_sessionmaker
from quiz.history import SqlHistoryRepository

async def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    engine = make_engine(settings)
    await ensure_schema(engine)
    await SqlHistoryRepository(make_sessionmaker(engine)).clear()
    await engine.dispose()

if __name__ == "__main__":
    if "--yes" not in sys.argv[1:]:
        print("Usage: python -m tools.reset_history --yes  (deletes all quiz history)")
        raise SystemExit(2)
    asyncio.run(main())
