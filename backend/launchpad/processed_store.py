"""Membership store for processed mention ids.

In-memory by default. Uses PostgreSQL (asyncpg) when DATABASE_URL is set so
dedup survives restarts. The table is created by migrations/0001_processed_mentions.py.
"""
import logging
import os
from typing import Optional, Protocol, Set

import asyncpg
from yoyo import get_backend, read_migrations

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "..", "migrations")


def apply_migrations(database_url: str) -> int:
    """Apply pending yoyo migrations. Blocking; run it off the event loop."""
    backend = get_backend(database_url)
    migrations = read_migrations(MIGRATIONS_DIR)
    with backend.lock():
        pending = backend.to_apply(migrations)
        backend.apply_migrations(pending)
    logger.info("Applied %d migration(s)", len(pending))
    return len(pending)


class ProcessedStore(Protocol):
    async def contains(self, mention_id: str) -> bool:
        ...

    async def add(self, mention_id: str) -> None:
        ...

    async def count(self) -> int:
        ...


class InMemoryProcessedStore:
    def __init__(self):
        self._ids: Set[str] = set()

    async def contains(self, mention_id: str) -> bool:
        return mention_id in self._ids

    async def add(self, mention_id: str) -> None:
        self._ids.add(mention_id)

    async def count(self) -> int:
        return len(self._ids)


class PostgresProcessedStore:
    def __init__(self, database_url: str, ssl: Optional[str] = "require"):
        self.database_url = database_url
        self.ssl = ssl
        self._pool: Optional[asyncpg.Pool] = None

    async def get_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            self._pool = await asyncpg.create_pool(self.database_url, min_size=1, max_size=5, ssl=self.ssl)
        return self._pool

    async def contains(self, mention_id: str) -> bool:
        pool = await self.get_pool()
        row = await pool.fetchval("SELECT 1 FROM processed_mentions WHERE mention_id = $1", mention_id)
        return row is not None

    async def add(self, mention_id: str) -> None:
        pool = await self.get_pool()
        await pool.execute(
            "INSERT INTO processed_mentions (mention_id) VALUES ($1) ON CONFLICT (mention_id) DO NOTHING",
            mention_id,
        )

    async def count(self) -> int:
        pool = await self.get_pool()
        return await pool.fetchval("SELECT COUNT(*) FROM processed_mentions")

    async def close(self):
        if self._pool is not None:
            await self._pool.close()
            self._pool = None


def build_processed_store(database_url: str = ""):
    if database_url:
        logger.info("Using PostgreSQL processed-mention store")
        return PostgresProcessedStore(database_url)
    logger.info("Using in-memory processed-mention store")
    return InMemoryProcessedStore()
