"""
Team Cook API: Persistent TTL Cache Service
=============================================

What:  Durable key → value store with per-entry expiration.
How:   One row per key in the `cache` table. `get` filters on
       `expires_at > now` inside the query; `set` is an upsert.
Who:   The cache handler (read + write on miss) and the ingredient handler
       (pre-warming single-recipe keys from list responses).
When:  Once per cacheable request, plus once per recipe in a list response.

Expiration Semantics:
    - An entry is visible only while now < expires_at (strictly).
    - Nothing sweeps expired rows. They are invisible to readers and are
      replaced by the next `set` for the same key.
    - `set` is unconditional: the last writer for a key wins regardless of
      whether the previous entry had expired.

Concurrency:
    Every operation opens its own session and runs one statement in one
    transaction. The write is a single INSERT ... ON CONFLICT DO UPDATE, so
    two coroutines writing the same key never collide on the primary key.
"""

import logging
import time
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from teamcook_api.models.cache_entry import CacheEntry

logger = logging.getLogger(__name__)

# 24 hours
DEFAULT_CACHE_TTL_SECONDS = 60 * 60 * 24

_UPSERT_BY_DIALECT = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def _epoch_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


class CacheService:
    """
    Async TTL cache backed by a SQL table.

    Args:
        session_factory: async_sessionmaker bound to the cache engine
        default_ttl:     TTL in seconds used when `set` is called without one
        clock:           returns the current time in epoch seconds; injectable
                         so tests can move time forward
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._session_factory = session_factory
        self.default_ttl = default_ttl
        self._clock = clock

    async def get(self, key: str) -> Optional[str]:
        """
        Return the cached value for `key`, or None when absent or expired.

        The expiry comparison uses the time of this read, not of any earlier
        write, so an entry written with ttl=0 is never visible.
        """
        now_ms = _epoch_ms(self._clock)
        stmt = select(CacheEntry.value).where(
            CacheEntry.key == key,
            CacheEntry.expires_at > now_ms,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        """
        Store `value` under `key` until now + ttl seconds (upsert).
        """
        ttl_seconds = self.default_ttl if ttl is None else ttl
        expires_at = _epoch_ms(self._clock) + int(ttl_seconds * 1000)

        async with self._session_factory() as session:
            stmt = self._upsert_statement(session, key, value, expires_at)
            await session.execute(stmt)
            await session.commit()

        logger.debug("Cached %s (expires_at=%d)", key, expires_at)

    @staticmethod
    def _upsert_statement(session: AsyncSession, key: str, value: str, expires_at: int):
        """Builds INSERT ... ON CONFLICT (key) DO UPDATE for the bound dialect."""
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Cache store does not support the '{dialect}' dialect")

        stmt = insert(CacheEntry).values(key=key, value=value, expires_at=expires_at)
        return stmt.on_conflict_do_update(
            index_elements=[CacheEntry.key],
            set_={"value": stmt.excluded.value, "expires_at": stmt.excluded.expires_at},
        )
