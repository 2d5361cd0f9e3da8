from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Iterable

DOCUMENT_TITLE = "Financial AI Training Datasets"
FILENAME_PREFIX = "training-datasets"

INSTRUCTION_LABEL = "INSTRUCTION"
INPUT_LABEL = "USER PERSONA"
OUTPUT_LABEL = "AI RESPONSE"


@dataclass(frozen=True)
class ExportRecord:
    """The slice of a dataset an export needs."""

    instruction: str
    input: str
    output: str
    uploader: str
    created_at: dt.datetime


def to_export_records(datasets: Iterable[Any]) -> list[ExportRecord]:
    """Accepts ORM `Dataset` rows or `DatasetRead` models, keeps their order."""
    return [
        ExportRecord(
            instruction=ds.instruction,
            input=ds.input,
            output=ds.output,
            uploader=ds.uploaded_by.name,
            created_at=ds.created_at,
        )
        for ds in datasets
    ]


def format_short_date(value: dt.date | dt.datetime) -> str:
    """Day/month/year without padding, e.g. 5/3/2026."""
    return f"{value.day}/{value.month}/{value.year}"


def export_filename(extension: str, exported_on: dt.date) -> str:
    return f"{FILENAME_PREFIX}-{exported_on.isoformat()}.{extension}"


def attribution(record: ExportRecord) -> str:
    return f"{record.uploader} | {format_short_date(record.created_at)}"
