"""Pydantic schemas for API serialization/validation.

Field names are snake_case in Python and camelCase on the wire
(`teammateId`, `createdAt`, `byTeammate`).
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Upload
# ============================================================================


class DatasetInput(CamelModel):
    """One submitted record. Presence is checked by the upload validator."""

    instruction: str | None = None
    input: str | None = None
    output: str | None = None


class UploadRequest(CamelModel):
    """Body of POST /api/datasets.

    Everything is optional here so that missing fields surface as a 400
    from the validator instead of a schema error.
    """

    teammate_id: int | str | None = Field(default=None, description="Teammate id")
    passcode: str | None = Field(default=None, description="Teammate passcode")
    datasets: list[DatasetInput] | None = Field(default=None, description="Records to store")


class UploadResponse(CamelModel):
    success: bool
    count: int
    message: str


# ============================================================================
# Read models
# ============================================================================


class TeammateRead(CamelModel):
    id: int
    name: str


class DatasetRead(CamelModel):
    id: int
    instruction: str
    input: str
    output: str
    created_at: datetime
    teammate_id: int
    uploaded_by: TeammateRead

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values; rows are always stamped in UTC
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TeammateCount(CamelModel):
    name: str
    count: int


class StatsRead(CamelModel):
    total: int
    by_teammate: list[TeammateCount]


class ErrorResponse(BaseModel):
    error: str
