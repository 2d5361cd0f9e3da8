from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.repository import Repository
from ..exceptions import PersistenceError
from ..models import Dataset, Teammate

logger = logging.getLogger(__name__)


class TeammateRepository(Repository[Teammate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Teammate)

    async def get_by_name(self, name: str) -> Optional[Teammate]:
        stmt = select(Teammate).where(Teammate.name == name)
        return (await self.session.execute(stmt)).scalars().first()

    async def list_teammates(self) -> Sequence[Teammate]:
        """All teammates in seed order."""
        stmt = select(Teammate).order_by(Teammate.position, Teammate.id)
        return (await self.session.execute(stmt)).scalars().all()

    async def ensure(self, name: str, passcode: str, position: int) -> tuple[Teammate, bool]:
        """Insert the teammate if missing. Existing rows are left untouched."""
        existing = await self.get_by_name(name)
        if existing is not None:
            return existing, False
        return await self.create(name=name, passcode=passcode, position=position), True


class DatasetRepository(Repository[Dataset]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Dataset)

    def _newest_first(self, uploader_name: str | None = None):
        stmt = select(Dataset).order_by(Dataset.created_at.desc(), Dataset.id.desc())
        if uploader_name:
            stmt = stmt.where(Dataset.uploaded_by.has(Teammate.name == uploader_name))
        return stmt

    async def list_datasets(self, uploader_name: str | None = None) -> Sequence[Dataset]:
        """Every dataset, newest first, with `uploaded_by` loaded. Unbounded."""
        return (await self.session.execute(self._newest_first(uploader_name))).scalars().all()

    async def recent_datasets(self, limit: int = 5) -> Sequence[Dataset]:
        stmt = self._newest_first().limit(limit)
        return (await self.session.execute(stmt)).scalars().all()

    async def count_datasets(self) -> int:
        return await self.count()

    async def count_by_teammate(self) -> list[tuple[str, int]]:
        """(name, count) for every teammate, zeros included, in seed order."""
        stmt = (
            select(Teammate.name, func.count(Dataset.id))
            .outerjoin(Dataset, Dataset.teammate_id == Teammate.id)
            .group_by(Teammate.id, Teammate.name, Teammate.position)
            .order_by(Teammate.position, Teammate.id)
        )
        rows = (await self.session.execute(stmt)).all()
        return [(name, int(count)) for name, count in rows]

    async def create_many(self, rows: Iterable[dict[str, Any]]) -> int:
        """Insert all rows in one flush. Either every row lands or none does."""
        objs = [Dataset(**row) for row in rows]
        self.session.add_all(objs)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Bulk insert of %d dataset(s) failed: %s", len(objs), e)
            raise PersistenceError("Failed to upload datasets") from e
        return len(objs)
