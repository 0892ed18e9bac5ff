"""Shared plumbing for SQLAlchemy-backed repositories."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from enrollment_gateway.domain.exceptions import RecordStoreUnavailableException

logger = structlog.get_logger(__name__)


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Drop tzinfo so timestamps read back match the UTC-naive entities."""
    if value is None or value.tzinfo is None:
        return value
    return value.replace(tzinfo=None) - value.utcoffset()


class SqlAlchemyRepository:
    """
    Base class holding the request's AsyncSession.

    Every repository built on the same session shares one unit of
    work, so ``commit`` on any of them publishes all pending writes.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @property
    def dialect_name(self) -> str:
        bind = self._session.bind
        return bind.dialect.name if bind is not None else ""

    async def commit(self) -> None:
        async with self._store_operation("commit"):
            await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    @asynccontextmanager
    async def _store_operation(self, operation: str) -> AsyncGenerator[None, None]:
        """Translate connectivity failures into a transient domain error."""
        try:
            yield
        except IntegrityError:
            # constraint violations are mapped by the caller
            raise
        except DBAPIError as e:
            logger.error("record_store_error", operation=operation, error=str(e))
            await self._session.rollback()
            raise RecordStoreUnavailableException(operation, detail=str(e)) from e
