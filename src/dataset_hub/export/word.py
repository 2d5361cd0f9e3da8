"""Word (.docx) export.

Every record is written in full: instruction, input and output are never
truncated here, unlike the PDF preview.
"""

from __future__ import annotations

import datetime as dt
import io
import re
import zipfile
from typing import Sequence

from docx import Document
from docx.shared import Pt

from .common import (
    DOCUMENT_TITLE,
    INPUT_LABEL,
    INSTRUCTION_LABEL,
    OUTPUT_LABEL,
    ExportRecord,
    attribution,
    format_short_date,
)

DIVIDER = "─" * 50
MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# characters XML 1.0 cannot carry; python-docx raises on them
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def _xml_safe(text: str) -> str:
    return _XML_ILLEGAL.sub("", text)


def _spaced(paragraph, *, before: int = 0, after: int = 0):
    fmt = paragraph.paragraph_format
    fmt.space_before = Pt(before)
    fmt.space_after = Pt(after)
    return paragraph


def _pin_zip_timestamps(data: bytes, when: dt.date) -> bytes:
    """Rewrite the package with fixed member timestamps so output is repeatable."""
    stamp = (when.year, when.month, when.day, 0, 0, 0)
    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as src, zipfile.ZipFile(out, "w") as dst:
        for info in src.infolist():
            pinned = zipfile.ZipInfo(info.filename, date_time=stamp)
            pinned.compress_type = zipfile.ZIP_DEFLATED
            pinned.external_attr = info.external_attr
            dst.writestr(pinned, src.read(info.filename))
    return out.getvalue()


def build_docx(records: Sequence[ExportRecord], exported_on: dt.date) -> bytes:
    doc = Document()
    props = doc.core_properties
    props.title = DOCUMENT_TITLE
    props.created = props.modified = dt.datetime(exported_on.year, exported_on.month, exported_on.day)

    _spaced(doc.add_heading(DOCUMENT_TITLE, level=0), after=20)

    summary = _spaced(doc.add_paragraph(), after=20)
    summary.add_run(f"Total Datasets: {len(records)}").bold = True
    summary.add_run(f" | Exported: {format_short_date(exported_on)}")

    for index, record in enumerate(records, start=1):
        _spaced(doc.add_heading(f"Dataset {index}", level=1), before=20, after=10)

        byline = _spaced(doc.add_paragraph(), after=10)
        byline.add_run("Uploaded by: ").bold = True
        byline.add_run(_xml_safe(attribution(record)))

        sections = (
            (INSTRUCTION_LABEL, record.instruction, 10),
            (INPUT_LABEL, record.input, 10),
            (OUTPUT_LABEL, record.output, 20),
        )
        for label, text, after in sections:
            _spaced(doc.add_heading(label, level=2), before=10, after=5)
            _spaced(doc.add_paragraph(_xml_safe(text)), after=after)

        _spaced(doc.add_paragraph(DIVIDER), after=20)

    buf = io.BytesIO()
    doc.save(buf)
    return _pin_zip_timestamps(buf.getvalue(), exported_on)
