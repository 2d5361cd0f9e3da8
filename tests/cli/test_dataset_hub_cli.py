from __future__ import annotations

import asyncio
import datetime as dt
import io

from docx import Document
from typer.testing import CliRunner

from dataset_hub.cli import app as cli_app
from dataset_hub.datasets.repository import DatasetRepository, TeammateRepository
from dataset_hub.db.engine import DBEngine
from dataset_hub.db.settings import DBSettings
from dataset_hub.db.uow import UnitOfWork

runner = CliRunner()


def _url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'hub.sqlite3'}"


def _add_dataset(url: str, uploader: str, instruction: str) -> None:
    async def go():
        engine = DBEngine(DBSettings(database_url=url))
        try:
            async with UnitOfWork(engine) as uow:
                teammate = await TeammateRepository(uow.session).get_by_name(uploader)
                await DatasetRepository(uow.session).create_many(
                    [{"instruction": instruction, "input": "in", "output": "out", "teammate_id": teammate.id}]
                )
        finally:
            await engine.dispose()

    asyncio.run(go())


def test_root_help_shows_commands():
    result = runner.invoke(cli_app, ["--help"])
    assert result.exit_code == 0
    for command in ("seed", "serve", "export"):
        assert command in result.stdout


def test_seed_twice(tmp_path):
    first = runner.invoke(cli_app, ["seed", "--database-url", _url(tmp_path)])
    assert first.exit_code == 0, first.output
    assert "Seeded 5 new teammate(s)" in first.stdout

    again = runner.invoke(cli_app, ["seed", "--database-url", _url(tmp_path)])
    assert again.exit_code == 0
    assert "Seeded 0 new teammate(s)" in again.stdout


def test_export_docx_to_explicit_path(tmp_path):
    url = _url(tmp_path)
    assert runner.invoke(cli_app, ["seed", "--database-url", url]).exit_code == 0
    _add_dataset(url, "atu", "from atu")
    _add_dataset(url, "saha", "from saha")

    target = tmp_path / "atu.docx"
    result = runner.invoke(
        cli_app,
        ["export", "--format", "docx", "--uploader", "atu", "--output", str(target), "--database-url", url],
    )
    assert result.exit_code == 0, result.output
    text = [p.text for p in Document(io.BytesIO(target.read_bytes())).paragraphs]
    assert "from atu" in text
    assert "from saha" not in text
    assert text[1].startswith("Total Datasets: 1")


def test_export_pdf_default_filename(tmp_path, monkeypatch):
    url = _url(tmp_path)
    assert runner.invoke(cli_app, ["seed", "--database-url", url]).exit_code == 0
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli_app, ["export", "--format", "pdf", "--database-url", url])
    assert result.exit_code == 0, result.output
    expected = tmp_path / f"training-datasets-{dt.date.today().isoformat()}.pdf"
    assert expected.read_bytes().startswith(b"%PDF")


def test_export_rejects_unknown_format(tmp_path):
    result = runner.invoke(cli_app, ["export", "--format", "odt", "--database-url", _url(tmp_path)])
    assert result.exit_code != 0
