"""Cohort assignment lock backed by asyncio and PostgreSQL advisory locks."""

import asyncio
import zlib
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from weakref import WeakKeyDictionary

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from enrollment_gateway.domain.interfaces import CohortLock

logger = structlog.get_logger(__name__)

# One asyncio.Lock per event loop; a lock bound to a closed loop is unusable
_process_locks: "WeakKeyDictionary[asyncio.AbstractEventLoop, dict[str, asyncio.Lock]]" = (
    WeakKeyDictionary()
)


def _process_lock(name: str) -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    locks = _process_locks.setdefault(loop, {})
    if name not in locks:
        locks[name] = asyncio.Lock()
    return locks[name]


def advisory_key(name: str) -> int:
    """Stable integer key for ``pg_advisory_xact_lock``."""
    return zlib.crc32(name.encode("utf-8"))


class AdvisoryCohortLock(CohortLock):
    """
    Serializes cohort assignment.

    Within a process an ``asyncio.Lock`` orders coroutines. When the
    session talks to PostgreSQL, a transaction-scoped advisory lock
    also orders workers in other processes; it is released by the
    commit that publishes the batch assignment.

    Args:
        session: Session whose transaction carries the advisory lock.
            Without one only the process-local lock is taken.
    """

    def __init__(self, session: AsyncSession | None = None):
        self._session = session

    @asynccontextmanager
    async def hold(self) -> AsyncGenerator[None, None]:
        async with _process_lock(self.name):
            if self._uses_advisory_lock():
                await self._session.execute(
                    text("SELECT pg_advisory_xact_lock(:key)"),
                    {"key": advisory_key(self.name)},
                )
            logger.debug("cohort_lock_acquired", lock=self.name)
            try:
                yield
            finally:
                logger.debug("cohort_lock_released", lock=self.name)

    def _uses_advisory_lock(self) -> bool:
        if self._session is None or self._session.bind is None:
            return False
        return self._session.bind.dialect.name == "postgresql"
