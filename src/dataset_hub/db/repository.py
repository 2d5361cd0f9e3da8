from __future__ import annotations

from typing import Any, Generic, Optional, Type, TypeVar, cast

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class Repository(Generic[T]):
    """Async SQLAlchemy repository bound to one model.

    Domain repositories subclass it and add their own queries.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    async def get(self, id: Any) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return int((await self.session.execute(stmt)).scalar_one())

    async def create(self, **data) -> T:
        obj = cast(Any, self.model)(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj
