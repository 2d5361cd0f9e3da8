"""JSON API: upload, listing, stats and teammates."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Response, status
from sqlalchemy.exc import SQLAlchemyError

from ..datasets.repository import DatasetRepository, TeammateRepository
from ..datasets.schemas import (
    DatasetRead,
    ErrorResponse,
    StatsRead,
    TeammateCount,
    TeammateRead,
    UploadRequest,
    UploadResponse,
)
from ..datasets.service import upload_datasets
from ..db.health import db_healthcheck
from ..db.integration import EngineDep, UoWDep
from ..db.uow import UnitOfWork
from ..exceptions import PersistenceError

router = APIRouter(prefix="/api", tags=["datasets"])

_errors = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/datasets", response_model=UploadResponse, responses=_errors)
async def create_datasets(body: UploadRequest, engine: EngineDep) -> UploadResponse:
    """Store a batch of records for one teammate.

    Example:
        ```bash
        curl -X POST http://localhost:8000/api/datasets \\
          -H "Content-Type: application/json" \\
          -d '{"teammateId": 1, "passcode": "pass1",
               "datasets": [{"instruction": "...", "input": "...", "output": "..."}]}'
        ```
    """
    # own unit of work so a failed commit is reported through the handlers
    async with UnitOfWork(engine) as uow:
        result = await upload_datasets(uow, body)
    return UploadResponse(success=True, count=result.count, message=result.message)


@router.get("/datasets", response_model=list[DatasetRead], responses={500: {"model": ErrorResponse}})
async def list_datasets(uow: UoWDep, uploader: Optional[str] = None) -> list[DatasetRead]:
    try:
        rows = await DatasetRepository(uow.session).list_datasets(uploader)
    except SQLAlchemyError as e:
        raise PersistenceError("Failed to fetch datasets") from e
    return [DatasetRead.model_validate(row) for row in rows]


@router.get("/stats", response_model=StatsRead, responses={500: {"model": ErrorResponse}})
async def get_stats(uow: UoWDep) -> StatsRead:
    repo = DatasetRepository(uow.session)
    try:
        total = await repo.count_datasets()
        counts = await repo.count_by_teammate()
    except SQLAlchemyError as e:
        raise PersistenceError("Failed to fetch stats") from e
    return StatsRead(
        total=total,
        by_teammate=[TeammateCount(name=name, count=count) for name, count in counts],
    )


@router.get("/teammates", response_model=list[TeammateRead], responses={500: {"model": ErrorResponse}})
async def list_teammates(uow: UoWDep) -> list[TeammateRead]:
    try:
        rows = await TeammateRepository(uow.session).list_teammates()
    except SQLAlchemyError as e:
        raise PersistenceError("Failed to fetch teammates") from e
    return [TeammateRead.model_validate(row) for row in rows]


health_router = APIRouter(tags=["internal"])


@health_router.get("/_db/health", include_in_schema=False)
async def db_health(engine: EngineDep):
    async with engine.session() as s:
        ok = await db_healthcheck(s)
    return Response(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE
    )
