from .base import Base, CreatedAtMixin, utcnow
from .engine import DBEngine
from .health import db_healthcheck
from .integration import EngineDep, UoWDep, attach_db, get_engine, get_uow
from .repository import Repository
from .settings import DBSettings, get_db_settings
from .uow import UnitOfWork

__all__ = [
    "Base",
    "CreatedAtMixin",
    "utcnow",
    "DBEngine",
    "db_healthcheck",
    "EngineDep",
    "UoWDep",
    "attach_db",
    "get_engine",
    "get_uow",
    "Repository",
    "DBSettings",
    "get_db_settings",
    "UnitOfWork",
]
