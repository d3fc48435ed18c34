"""Throwaway SQLite database for service and API tests."""
import tempfile
from pathlib import Path

from sqlalchemy.pool import NullPool

from database import build_engine, build_sessionmaker, init_db


class TempDatabase:
    def __init__(self):
        self._dir = tempfile.TemporaryDirectory()
        url = f"sqlite+aiosqlite:///{Path(self._dir.name) / 'test.db'}"
        # NullPool: every session opens its own connection on the running loop
        self.engine = build_engine(url, poolclass=NullPool)
        self.sessionmaker = build_sessionmaker(self.engine)

    async def create(self):
        await init_db(self.engine)

    async def dispose(self):
        await self.engine.dispose()
        self._dir.cleanup()

    async def get_db(self):
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
