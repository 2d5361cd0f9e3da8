from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import PersistenceError
from .engine import DBEngine

logger = logging.getLogger(__name__)


class UnitOfWork:
    """One session per request; commits on success, rolls back otherwise."""

    def __init__(self, engine: DBEngine, *, commit_on_success: bool = True):
        self._engine = engine
        self._commit_on_success = commit_on_success
        self.session: AsyncSession | None = None
        self._session_cm = None

    async def __aenter__(self) -> "UnitOfWork":
        self._session_cm = self._engine.session()
        self.session = await self._session_cm.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if exc_type is None and self._commit_on_success:
                try:
                    await self.session.commit()
                except SQLAlchemyError as e:
                    logger.error("Commit failed: %s", e)
                    await self.session.rollback()
                    raise PersistenceError() from e
            else:
                await self.session.rollback()
        finally:
            await self._session_cm.__aexit__(exc_type, exc, tb)
