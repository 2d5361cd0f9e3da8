"""Export engine: dataset records -> downloadable .docx / .pdf payloads.

Both formats are pure functions of the records and the export date.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable

from ..exceptions import ExportError
from . import pdf, word
from .common import ExportRecord, export_filename, format_short_date, to_export_records

logger = logging.getLogger(__name__)


class ExportFormat(StrEnum):
    DOCX = "docx"
    PDF = "pdf"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: bytes


_BUILDERS = {
    ExportFormat.DOCX: (word.build_docx, word.MEDIA_TYPE),
    ExportFormat.PDF: (pdf.build_pdf, pdf.MEDIA_TYPE),
}


def render_export(
    fmt: ExportFormat | str,
    datasets: Iterable[Any],
    exported_on: dt.date | None = None,
) -> ExportFile:
    """Render `datasets` (ORM rows, read models or ExportRecords) in order."""
    fmt = ExportFormat(fmt)
    exported_on = exported_on or dt.date.today()
    items = list(datasets)
    records = items if all(isinstance(i, ExportRecord) for i in items) else to_export_records(items)

    build, media_type = _BUILDERS[fmt]
    try:
        content = build(records, exported_on)
    except Exception as e:
        logger.error("%s export of %d dataset(s) failed: %s", fmt.value, len(records), e, exc_info=True)
        raise ExportError(f"Failed to export as {fmt.value.upper()}") from e
    logger.info("Exported %d dataset(s) as %s", len(records), fmt.value)
    return ExportFile(export_filename(fmt.value, exported_on), media_type, content)


__all__ = [
    "ExportFile",
    "ExportFormat",
    "ExportRecord",
    "export_filename",
    "format_short_date",
    "render_export",
    "to_export_records",
]
