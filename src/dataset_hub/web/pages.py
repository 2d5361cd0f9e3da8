"""Server-rendered pages: dashboard, browse (+ export downloads) and upload."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from ..app.settings import AppSettings
from ..datasets.repository import DatasetRepository, TeammateRepository
from ..datasets.schemas import UploadRequest
from ..datasets.service import parse_dataset_json, upload_datasets
from ..db.integration import EngineDep, UoWDep
from ..db.uow import UnitOfWork
from ..exceptions import DatasetHubError, ExportError
from ..export import ExportFormat, render_export
from .filters import register_filters

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
register_filters(templates.env)

SAMPLE_JSON = """{
  "instruction": "I am a 29-year-old software engineer in Bengaluru earning ₹15 Lakhs per annum...",
  "input": "User persona: [Age: 29, Income: ₹15 LPA, City: Tier 1 (Bengaluru), Risk Appetite: Moderate-Aggressive, Goal: Home Down Payment (7 years)]",
  "output": "Namaste. Let us break down your financial journey..."
}"""

router = APIRouter(tags=["pages"], include_in_schema=False)


def _settings(request: Request) -> AppSettings:
    return request.app.state.settings


def teammate_bars(counts: list[tuple[str, int]]) -> list[dict[str, Any]]:
    """Bar widths relative to the busiest teammate, never thinner than 5%."""
    max_count = max([count for _, count in counts] + [1])
    return [
        {"name": name, "count": count, "width": max(count / max_count * 100, 5)}
        for name, count in counts
    ]


def average_per_member(total: int, members: int) -> int:
    if total <= 0 or members <= 0:
        return 0
    # half rounds up
    return math.floor(total / members + 0.5)


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, uow: UoWDep):
    repo = DatasetRepository(uow.session)
    counts = await repo.count_by_teammate()
    total = await repo.count_datasets()
    recent = await repo.recent_datasets(_settings(request).recent_limit)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "total": total,
            "members": len(counts),
            "average": average_per_member(total, len(counts)),
            "bars": teammate_bars(counts),
            "recent": recent,
        },
    )


async def _browse_context(uow: UnitOfWork, uploader: Optional[str]) -> dict[str, Any]:
    datasets = await DatasetRepository(uow.session).list_datasets(uploader)
    teammates = await TeammateRepository(uow.session).list_teammates()
    return {
        "datasets": datasets,
        "teammates": [t.name for t in teammates],
        "uploader": uploader,
        "export_query": f"?{urlencode({'uploader': uploader})}" if uploader else "",
    }


@router.get("/datasets", response_class=HTMLResponse)
async def browse(request: Request, uow: UoWDep, uploader: Optional[str] = None):
    context = await _browse_context(uow, uploader or None)
    return templates.TemplateResponse(request, "datasets.html", context)


@router.get("/datasets/export.{fmt}")
async def export(request: Request, fmt: ExportFormat, uow: UoWDep, uploader: Optional[str] = None):
    uploader = uploader or None
    datasets = await DatasetRepository(uow.session).list_datasets(uploader)
    try:
        file = render_export(fmt, datasets)
    except ExportError as e:
        context = await _browse_context(uow, uploader)
        context["error"] = e.message
        return templates.TemplateResponse(request, "datasets.html", context, status_code=e.status_code)
    return Response(
        content=file.content,
        media_type=file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{file.filename}"'},
    )


async def _upload_page(request: Request, uow: UnitOfWork, status_code: int = 200, **extra: Any):
    teammates = await TeammateRepository(uow.session).list_teammates()
    context = {
        "teammates": teammates,
        "sample_json": SAMPLE_JSON,
        "selected": None,
        "payload": "",
        "error": None,
        "success": None,
    }
    context.update(extra)
    return templates.TemplateResponse(request, "upload.html", context, status_code=status_code)


@router.get("/upload", response_class=HTMLResponse)
async def upload_form(request: Request, uow: UoWDep):
    return await _upload_page(request, uow)


@router.post("/upload", response_class=HTMLResponse)
async def upload_submit(
    request: Request,
    engine: EngineDep,
    uow: UoWDep,
    teammate_id: str = Form(default=""),
    passcode: str = Form(default=""),
    payload: str = Form(default=""),
):
    sticky = {"selected": teammate_id, "payload": payload}
    if not teammate_id.strip() or not passcode or not payload.strip():
        return await _upload_page(request, uow, 400, error="Please fill in all fields", **sticky)

    try:
        records = parse_dataset_json(payload)
        body = UploadRequest(teammate_id=teammate_id, passcode=passcode, datasets=records)
        async with UnitOfWork(engine) as write_uow:
            result = await upload_datasets(write_uow, body)
    except DatasetHubError as e:
        return await _upload_page(request, uow, e.status_code, error=e.message, **sticky)

    return await _upload_page(
        request,
        uow,
        success=f"Successfully uploaded {result.count} dataset(s)!",
        selected=teammate_id,
    )
