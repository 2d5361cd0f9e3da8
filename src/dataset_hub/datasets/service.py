from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from ..app.settings import TeammateSeed
from ..db.engine import DBEngine
from ..db.uow import UnitOfWork
from ..exceptions import AuthError, FormatError, NotFoundError, ValidationError
from ..models import Teammate
from ..security.passcodes import verify_passcode
from .repository import DatasetRepository, TeammateRepository
from .schemas import DatasetInput, UploadRequest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("instruction", "input", "output")
MISSING_FIELDS_MESSAGE = "Each dataset must have instruction, input, and output fields"


@dataclass
class UploadResult:
    count: int
    teammate: str

    @property
    def message(self) -> str:
        return f"Successfully uploaded {self.count} dataset(s)"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _record_is_complete(record: DatasetInput) -> bool:
    return all(not _is_blank(getattr(record, field)) for field in REQUIRED_FIELDS)


def check_upload_shape(request: UploadRequest) -> list[DatasetInput]:
    """Structural checks that need no database access."""
    if _is_blank(request.teammate_id) or _is_blank(request.passcode) or not request.datasets:
        raise ValidationError("Missing required fields")
    if not all(_record_is_complete(r) for r in request.datasets):
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    return request.datasets


async def resolve_teammate(repo: TeammateRepository, teammate_id: int | str) -> Teammate:
    try:
        key = int(str(teammate_id).strip())
    except ValueError:
        raise NotFoundError() from None
    # ids are signed 64-bit columns; anything wider cannot match a row
    if not -(2**63) <= key < 2**63:
        raise NotFoundError()
    teammate = await repo.get(key)
    if teammate is None:
        raise NotFoundError()
    return teammate


async def upload_datasets(uow: UnitOfWork, request: UploadRequest) -> UploadResult:
    """Validate an upload and store one row per record.

    Raises ValidationError, NotFoundError or AuthError before anything is
    written; PersistenceError if the bulk insert fails.
    """
    records = check_upload_shape(request)

    teammate = await resolve_teammate(TeammateRepository(uow.session), request.teammate_id)
    if not verify_passcode(teammate.passcode, request.passcode):
        logger.warning("Rejected upload: bad passcode", extra={"teammate": teammate.name})
        raise AuthError()

    count = await DatasetRepository(uow.session).create_many(
        {
            "instruction": r.instruction,
            "input": r.input,
            "output": r.output,
            "teammate_id": teammate.id,
        }
        for r in records
    )
    logger.info("Stored %d dataset(s)", count, extra={"teammate": teammate.name})
    return UploadResult(count=count, teammate=teammate.name)


def parse_dataset_json(raw: str) -> list[DatasetInput]:
    """Parse the upload form's JSON text: one object or an array of objects."""
    if _is_blank(raw):
        raise FormatError("Invalid JSON format: no content")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid JSON format: {e.msg}") from e

    items = parsed if isinstance(parsed, list) else [parsed]
    if not items:
        raise FormatError("Invalid JSON format: no datasets found")
    try:
        records = [DatasetInput.model_validate(item) for item in items]
    except PydanticValidationError as e:
        raise FormatError(f"Invalid JSON format: {MISSING_FIELDS_MESSAGE}") from e
    if not all(_record_is_complete(r) for r in records):
        raise FormatError(f"Invalid JSON format: {MISSING_FIELDS_MESSAGE}")
    return records


async def seed_teammates(engine: DBEngine, seeds: Iterable[TeammateSeed]) -> int:
    """Make sure every configured teammate exists. Returns how many were created."""
    created = 0
    async with UnitOfWork(engine) as uow:
        repo = TeammateRepository(uow.session)
        for position, seed in enumerate(seeds):
            _, was_created = await repo.ensure(seed.name, seed.passcode, position)
            if was_created:
                created += 1
                logger.info("Seeded teammate %s", seed.name)
    return created
