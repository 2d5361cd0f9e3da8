from __future__ import annotations

import asyncio
import datetime as dt
from pathlib import Path
from typing import Optional

import typer

from .app.logging import setup_logging
from .app.settings import get_app_settings
from .datasets.repository import DatasetRepository
from .datasets.service import seed_teammates
from .db.engine import DBEngine
from .db.settings import DBSettings, get_db_settings
from .db.uow import UnitOfWork
from .exceptions import DatasetHubError
from .export import ExportFormat, render_export

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Financial AI training dataset hub")


def _db_settings(database_url: Optional[str]) -> DBSettings:
    if database_url:
        return DBSettings(database_url=database_url)
    return get_db_settings()


async def _seed(settings: DBSettings) -> int:
    engine = DBEngine(settings)
    try:
        await engine.create_schema()
        return await seed_teammates(engine, get_app_settings().teammates)
    finally:
        await engine.dispose()


async def _export(settings: DBSettings, fmt: ExportFormat, uploader: Optional[str], exported_on: dt.date):
    engine = DBEngine(settings)
    try:
        async with UnitOfWork(engine, commit_on_success=False) as uow:
            datasets = await DatasetRepository(uow.session).list_datasets(uploader)
            return render_export(fmt, datasets, exported_on)
    finally:
        await engine.dispose()


@app.command("seed")
def seed(
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="Overrides DB_DATABASE_URL / DATABASE_URL for this command."
    ),
):
    """Create the schema and make sure the configured teammates exist."""
    setup_logging()
    created = asyncio.run(_seed(_db_settings(database_url)))
    typer.echo(f"Seeded {created} new teammate(s)")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
):
    """Run the web app with uvicorn."""
    import uvicorn

    uvicorn.run("dataset_hub.main:create_app", factory=True, host=host, port=port, reload=reload)


@app.command("export")
def export(
    fmt: ExportFormat = typer.Option(ExportFormat.DOCX, "--format", help="Document format."),
    uploader: Optional[str] = typer.Option(None, "--uploader", help="Only datasets by this teammate."),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Output file; defaults to training-datasets-<date>.<ext>."
    ),
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="Overrides DB_DATABASE_URL / DATABASE_URL for this command."
    ),
):
    """Export stored datasets (newest first) as a Word or PDF document."""
    setup_logging()
    try:
        file = asyncio.run(_export(_db_settings(database_url), fmt, uploader, dt.date.today()))
    except DatasetHubError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)

    target = output or Path(file.filename)
    target.write_bytes(file.content)
    typer.echo(str(target))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
