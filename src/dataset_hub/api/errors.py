from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from ..exceptions import DatasetHubError, PersistenceError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"{type(exc).__name__} on {request.url.path} (500): {exc}",
                exc_info=True,
                extra={"http_method": request.method, "path": request.url.path, "status_code": 500},
            )
            return error_response(500, "Internal server error")


async def _hub_error_handler(request: Request, exc: DatasetHubError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s on %s (%d): %s",
        type(exc).__name__,
        request.url.path,
        exc.status_code,
        exc.message,
        extra={"http_method": request.method, "path": request.url.path, "status_code": exc.status_code},
    )
    return error_response(exc.status_code, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "Invalid request"
    if problems:
        message = f"{message}: " + "; ".join(problems)
    return error_response(400, message)


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s: %s", request.url.path, exc, exc_info=exc)
    return error_response(500, PersistenceError.default_message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DatasetHubError, _hub_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
