"""PDF export.

Layout is measured in millimetres from the top of an A4 page. Instruction and
input are printed in full; the AI response is only previewed (first
PREVIEW_CHARS characters, at most PREVIEW_MAX_LINES wrapped lines) to keep
files compact.
"""

from __future__ import annotations

import datetime as dt
import io
from typing import Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .common import (
    DOCUMENT_TITLE,
    INPUT_LABEL,
    INSTRUCTION_LABEL,
    OUTPUT_LABEL,
    ExportRecord,
    format_short_date,
)

MEDIA_TYPE = "application/pdf"

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_MM = 20
TOP_MM = 20
BREAK_AT_MM = 250  # section starts past this line go to a new page
BOTTOM_MM = PAGE_HEIGHT / mm - 15
TEXT_WIDTH = PAGE_WIDTH - 2 * MARGIN_MM * mm

PREVIEW_CHARS = 1000
PREVIEW_MAX_LINES = 30
ELLIPSIS = "..."

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"

BODY_SIZE = 10
PREVIEW_SIZE = 9

# The standard fonts only cover cp1252.
_SUBSTITUTES = {"₹": "Rs.", "\t": "    "}


def pdf_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    for char, replacement in _SUBSTITUTES.items():
        text = text.replace(char, replacement)
    text = "".join(c for c in text if c == "\n" or c >= " ")
    return text.encode("cp1252", errors="replace").decode("cp1252")


def response_preview(output: str, limit: int = PREVIEW_CHARS) -> str:
    """First `limit` characters of the response, with an ellipsis if cut."""
    if len(output) <= limit:
        return output
    return output[:limit] + ELLIPSIS


def wrap(text: str, font: str, size: float, width: float = TEXT_WIDTH) -> list[str]:
    return simpleSplit(pdf_text(text), font, size, width)


def preview_lines(output: str) -> list[str]:
    return wrap(response_preview(output), REGULAR, PREVIEW_SIZE)[:PREVIEW_MAX_LINES]


class _PdfWriter:
    """Top-down cursor over a reportlab canvas."""

    def __init__(self, buf: io.BytesIO):
        # invariant=1 pins creation date and document id
        self.canvas = canvas.Canvas(buf, pagesize=A4, invariant=1)
        self.canvas.setTitle(DOCUMENT_TITLE)
        self.y = TOP_MM
        self._font = (REGULAR, BODY_SIZE)
        self.pages = 1

    def font(self, name: str, size: float) -> None:
        self._font = (name, size)
        self.canvas.setFont(name, size)

    def new_page(self) -> None:
        self.canvas.showPage()
        self.pages += 1
        self.y = TOP_MM
        # showPage resets the graphics state
        self.canvas.setFont(*self._font)

    def break_if_low(self) -> None:
        if self.y > BREAK_AT_MM:
            self.new_page()

    def text(self, line: str, advance: float) -> None:
        self.canvas.drawString(MARGIN_MM * mm, PAGE_HEIGHT - self.y * mm, line)
        self.y += advance

    def lines(self, lines: Sequence[str], pitch: float) -> None:
        for line in lines:
            if self.y > BOTTOM_MM:
                self.new_page()
            self.text(line, pitch)

    def rule(self) -> None:
        self.canvas.setStrokeGray(200 / 255)
        y = PAGE_HEIGHT - self.y * mm
        self.canvas.line(MARGIN_MM * mm, y, PAGE_WIDTH - MARGIN_MM * mm, y)

    def finish(self) -> None:
        self.canvas.save()


def _section(writer: _PdfWriter, label: str, lines: Sequence[str], *, size: float, pitch: float) -> None:
    writer.font(BOLD, 11)
    writer.text(label, 6)
    writer.font(REGULAR, size)
    writer.lines(lines, pitch)


def build_pdf(records: Sequence[ExportRecord], exported_on: dt.date) -> bytes:
    buf = io.BytesIO()
    writer = _PdfWriter(buf)

    writer.font(BOLD, 20)
    writer.text(DOCUMENT_TITLE, 10)
    writer.font(REGULAR, BODY_SIZE)
    writer.text(f"Total: {len(records)} datasets | Exported: {format_short_date(exported_on)}", 15)

    for index, record in enumerate(records, start=1):
        writer.break_if_low()
        writer.font(BOLD, 14)
        writer.text(f"Dataset {index}", 7)
        writer.font(REGULAR, PREVIEW_SIZE)
        writer.text(pdf_text(f"By: {record.uploader} | {format_short_date(record.created_at)}"), 10)

        _section(writer, INSTRUCTION_LABEL, wrap(record.instruction, REGULAR, BODY_SIZE), size=BODY_SIZE, pitch=5)
        writer.y += 8

        writer.break_if_low()
        _section(writer, INPUT_LABEL, wrap(record.input, REGULAR, BODY_SIZE), size=BODY_SIZE, pitch=5)
        writer.y += 8

        writer.break_if_low()
        _section(writer, f"{OUTPUT_LABEL} (Preview)", preview_lines(record.output), size=PREVIEW_SIZE, pitch=4)
        writer.y += 15

        writer.rule()
        writer.y += 10

    writer.finish()
    return buf.getvalue()
