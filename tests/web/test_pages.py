from __future__ import annotations

import datetime as dt
import io
import json

import pytest
from docx import Document

from dataset_hub import export as export_mod
from dataset_hub.export import ExportFormat
from dataset_hub.web.pages import average_per_member, teammate_bars


async def _upload(client, teammate_id, passcode, *records):
    res = await client.post(
        "/api/datasets",
        json={"teammateId": teammate_id, "passcode": passcode, "datasets": list(records)},
    )
    assert res.status_code == 200, res.text


# ---------------------------------------------------------------------------
# dashboard
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_dashboard_empty(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert 'id="total-datasets">0<' in res.text
    assert "No datasets yet" in res.text


@pytest.mark.asyncio
async def test_dashboard_counts_and_recent(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1))

    res = await client.get("/")
    assert 'id="total-datasets">1<' in res.text
    for name in ("atu", "saha", "mich", "hars", "pree"):
        assert name in res.text
    assert record_factory(1)["instruction"] in res.text


@pytest.mark.asyncio
async def test_dashboard_recent_is_limited(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", *[record_factory(n) for n in range(1, 8)])
    res = await client.get("/")
    assert res.text.count('class="dataset-card"') == 5


def test_teammate_bars():
    bars = teammate_bars([("atu", 4), ("saha", 0), ("mich", 2)])
    assert [b["width"] for b in bars] == [100, 5, 50]
    assert teammate_bars([("atu", 0)])[0]["width"] == 5


@pytest.mark.parametrize("total, members, expected", [(0, 5, 0), (7, 5, 1), (8, 5, 2), (5, 2, 3), (3, 0, 0)])
def test_average_per_member(total, members, expected):
    assert average_per_member(total, members) == expected


# ---------------------------------------------------------------------------
# browse
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_browse_renders_cards(client, teammate_ids, sample_record):
    await _upload(client, teammate_ids["atu"], "pass1", sample_record)

    res = await client.get("/datasets")
    assert res.status_code == 200
    assert "Showing 1 dataset" in res.text
    # persona pills
    assert "<strong>Age:</strong> 21" in res.text
    # markdown response
    assert "<h2>Plan 1</h2>" in res.text
    assert "<strong>emergency fund</strong>" in res.text


@pytest.mark.asyncio
async def test_browse_filter_by_uploader(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1))
    await _upload(client, teammate_ids["saha"], "pass2", record_factory(2))

    res = await client.get("/datasets", params={"uploader": "saha"})
    assert "Showing 1 dataset by saha" in res.text
    assert record_factory(2)["instruction"] in res.text
    assert record_factory(1)["instruction"] not in res.text
    assert "/datasets/export.pdf?uploader=saha" in res.text


@pytest.mark.asyncio
async def test_browse_empty_filter(client):
    res = await client.get("/datasets", params={"uploader": "mich"})
    assert "No datasets uploaded by mich yet." in res.text


@pytest.mark.asyncio
async def test_raw_input_shown_without_brackets(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1, input="Salaried, 35, wants to retire early"))
    res = await client.get("/datasets")
    assert 'class="raw-input">Salaried, 35, wants to retire early<' in res.text


@pytest.mark.asyncio
async def test_uploaded_html_is_escaped(client, teammate_ids, record_factory):
    evil = record_factory(1, instruction="<img src=x onerror=alert(1)>", output="<script>alert(1)</script>")
    await _upload(client, teammate_ids["atu"], "pass1", evil)
    res = await client.get("/datasets")
    assert "<script>alert(1)</script>" not in res.text
    assert "<img src=x" not in res.text


# ---------------------------------------------------------------------------
# export downloads
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_docx_download(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1), record_factory(2))

    res = await client.get("/datasets/export.docx")
    assert res.status_code == 200
    assert res.headers["content-type"] == (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    today = dt.date.today().isoformat()
    assert res.headers["content-disposition"] == f'attachment; filename="training-datasets-{today}.docx"'

    text = [p.text for p in Document(io.BytesIO(res.content)).paragraphs]
    assert text[1].startswith("Total Datasets: 2 | Exported: ")
    # newest first
    assert text.index(record_factory(2)["instruction"]) < text.index(record_factory(1)["instruction"])


@pytest.mark.asyncio
async def test_pdf_download_respects_filter(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1))

    res = await client.get("/datasets/export.pdf", params={"uploader": "atu"})
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_export_of_filtered_empty_set(client, teammate_ids, record_factory):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1))
    res = await client.get("/datasets/export.docx", params={"uploader": "pree"})
    text = [p.text for p in Document(io.BytesIO(res.content)).paragraphs]
    assert text[1].startswith("Total Datasets: 0")


@pytest.mark.asyncio
async def test_export_failure_shows_alert(client, teammate_ids, record_factory, monkeypatch):
    await _upload(client, teammate_ids["atu"], "pass1", record_factory(1))

    def explode(records, exported_on):
        raise RuntimeError("boom")

    monkeypatch.setitem(export_mod._BUILDERS, ExportFormat.PDF, (explode, "application/pdf"))
    res = await client.get("/datasets/export.pdf")
    assert res.status_code == 500
    assert "Failed to export as PDF" in res.text
    assert res.headers["content-type"].startswith("text/html")


@pytest.mark.asyncio
async def test_unknown_export_format(client):
    res = await client.get("/datasets/export.odt")
    assert res.status_code == 400


# ---------------------------------------------------------------------------
# upload form
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_upload_form_lists_teammates(client, teammate_ids):
    res = await client.get("/upload")
    assert res.status_code == 200
    for name, tid in teammate_ids.items():
        assert f'<option value="{tid}">{name}</option>' in res.text
    assert "pass1" not in res.text


@pytest.mark.asyncio
async def test_upload_form_success(client, teammate_ids, record_factory):
    payload = json.dumps([record_factory(1), record_factory(2)])
    res = await client.post(
        "/upload",
        data={"teammate_id": str(teammate_ids["hars"]), "passcode": "pass4", "payload": payload},
    )
    assert res.status_code == 200
    assert "Successfully uploaded 2 dataset(s)!" in res.text
    assert 'http-equiv="refresh"' in res.text

    stats = (await client.get("/api/stats")).json()
    assert {c["name"]: c["count"] for c in stats["byTeammate"]}["hars"] == 2


@pytest.mark.asyncio
async def test_upload_form_requires_all_fields(client, teammate_ids):
    res = await client.post("/upload", data={"teammate_id": str(teammate_ids["atu"]), "passcode": "", "payload": "{}"})
    assert res.status_code == 400
    assert "Please fill in all fields" in res.text


@pytest.mark.asyncio
async def test_upload_form_bad_json_keeps_input(client, teammate_ids):
    res = await client.post(
        "/upload",
        data={"teammate_id": str(teammate_ids["atu"]), "passcode": "pass1", "payload": "{oops"},
    )
    assert res.status_code == 400
    assert "Invalid JSON format" in res.text
    assert "{oops</textarea>" in res.text
    assert f'<option value="{teammate_ids["atu"]}" selected>' in res.text


@pytest.mark.asyncio
async def test_upload_form_wrong_passcode(client, teammate_ids, sample_record):
    res = await client.post(
        "/upload",
        data={"teammate_id": str(teammate_ids["atu"]), "passcode": "nope", "payload": json.dumps(sample_record)},
    )
    assert res.status_code == 401
    assert "Invalid passcode" in res.text
    assert (await client.get("/api/stats")).json()["total"] == 0
