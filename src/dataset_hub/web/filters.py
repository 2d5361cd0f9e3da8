"""Jinja filters used by the page templates."""

from __future__ import annotations

import datetime as dt

from markdown_it import MarkdownIt
from markupsafe import Markup

from ..datasets.persona import parse_persona
from ..export.common import format_short_date

# raw HTML in uploaded markdown is escaped, not rendered
_md = MarkdownIt("commonmark", {"html": False}).enable("table")


def render_markdown(text: str | None) -> Markup:
    return Markup(_md.render(text or ""))


def clip(text: str | None, length: int = 200) -> str:
    text = text or ""
    return text[:length] + "..." if len(text) > length else text


def card_datetime(value: dt.datetime | None) -> str:
    """e.g. '19 Oct 2026, 02:30 PM'."""
    if value is None:
        return ""
    return value.strftime("%d %b %Y, %I:%M %p")


def card_date(value: dt.datetime | None) -> str:
    """e.g. '19 Oct 2026'."""
    if value is None:
        return ""
    return value.strftime("%d %b %Y")


def register_filters(env) -> None:
    env.filters["markdown"] = render_markdown
    env.filters["clip"] = clip
    env.filters["card_datetime"] = card_datetime
    env.filters["card_date"] = card_date
    env.filters["short_date"] = format_short_date
    env.filters["persona"] = parse_persona
