from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Awaitable, Callable, Optional

from fastapi import Depends, FastAPI, Request

from .engine import DBEngine
from .settings import DBSettings, get_db_settings
from .uow import UnitOfWork

logger = logging.getLogger(__name__)

StartupHook = Callable[[DBEngine], Awaitable[None]]


def attach_db(
    app: FastAPI,
    settings: Optional[DBSettings] = None,
    *,
    on_startup: Optional[StartupHook] = None,
) -> DBEngine:
    settings = settings or get_db_settings()
    engine = DBEngine(settings)
    app.state.db_engine = engine  # type: ignore[attr-defined]

    existing = getattr(app.router, "lifespan_context", None)  # type: ignore[attr-defined]

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        try:
            url = engine.engine.url
            logger.info(
                "DB attached: url=%s driver=%s",
                url.render_as_string(hide_password=True),
                url.get_backend_name(),
            )
            if settings.create_schema:
                await engine.create_schema()
            if on_startup is not None:
                await on_startup(engine)
            if existing:
                async with existing(_app):  # type: ignore[misc]
                    yield
            else:
                yield
        finally:
            await engine.dispose()

    app.router.lifespan_context = composed_lifespan  # type: ignore[attr-defined]
    return engine


def get_engine(request: Request) -> DBEngine:
    return request.app.state.db_engine  # type: ignore[attr-defined]


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    engine: DBEngine = get_engine(request)
    async with UnitOfWork(engine) as uow:
        yield uow


EngineDep = Annotated[DBEngine, Depends(get_engine)]
UoWDep = Annotated[UnitOfWork, Depends(get_uow)]
