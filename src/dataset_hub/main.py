"""
Application factory.

Run with:
    uvicorn dataset_hub.main:create_app --factory
or:
    dataset-hub serve
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from .api import CatchAllExceptionMiddleware, health_router, register_error_handlers
from .api import router as api_router
from .app.env import get_env
from .app.logging import setup_logging
from .app.settings import AppSettings, get_app_settings
from .datasets.service import seed_teammates
from .db.engine import DBEngine
from .db.integration import attach_db
from .db.settings import DBSettings, get_db_settings
from .web import router as pages_router

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[AppSettings] = None,
    db_settings: Optional[DBSettings] = None,
    *,
    configure_logging: bool = True,
) -> FastAPI:
    if configure_logging:
        setup_logging()

    app_settings = app_settings or get_app_settings()
    db_settings = db_settings or get_db_settings()

    app = FastAPI(title=app_settings.name, version=app_settings.version)
    app.state.settings = app_settings

    app.add_middleware(CatchAllExceptionMiddleware)
    register_error_handlers(app)

    async def _seed(engine: DBEngine) -> None:
        if app_settings.seed_on_startup:
            created = await seed_teammates(engine, app_settings.teammates)
            logger.info("Teammates ready (%d new of %d configured)", created, len(app_settings.teammates))

    attach_db(app, db_settings, on_startup=_seed)

    app.include_router(api_router)
    app.include_router(health_router)
    app.include_router(pages_router)

    logger.info(f"{app_settings.version} version of {app_settings.name} initialized [env: {get_env().value}]")
    return app
