from .errors import CatchAllExceptionMiddleware, register_error_handlers
from .routes import health_router, router

__all__ = [
    "CatchAllExceptionMiddleware",
    "register_error_handlers",
    "health_router",
    "router",
]
