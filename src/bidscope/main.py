from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from bidscope.config import settings
from bidscope.data.import_service import ImportService
from bidscope.data.repositories import SqliteRecordSource
from bidscope.data.storage import Database
from bidscope.exceptions import BidScopeError
from bidscope.services import BidAnalyticsService

cli = typer.Typer(help="BidScope CLI")


@cli.command()
def version() -> None:
    """Print runtime version."""
    typer.echo(f"BidScope {settings.app.version}")


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload for local development"),
) -> None:
    """Run the BidScope API server."""
    uvicorn.run(
        "bidscope.api.main:app",
        host=host,
        port=port,
        reload=reload,
        app_dir="src",
    )


@cli.command("import-records")
def import_records(
    path: Path = typer.Argument(..., exists=True, help="JSON, CSV or XLSX file with bids and/or tenders"),
    kind: Optional[str] = typer.Option(None, help="Force 'bids' or 'tenders' for single-kind files"),
) -> None:
    """Load bid/tender records into the local store."""
    try:
        report = ImportService().import_file(path, kind=kind)
    except BidScopeError as exc:
        typer.echo(f"Import failed: {exc}", err=True)
        raise typer.Exit(code=1)
    if report.skipped:
        typer.echo(f"{path} already imported")
    else:
        typer.echo(f"Imported {report.bids} bids and {report.tenders} tenders from {path}")


@cli.command()
def report(
    company_id: str = typer.Argument(..., help="Company to report on"),
    months: int = typer.Option(settings.analytics.default_months, min=1, help="Months in the time series"),
    timeframe: str = typer.Option(settings.analytics.default_timeframe, help="day|week|month|quarter|year"),
) -> None:
    """Print every company aggregate as JSON."""
    svc = BidAnalyticsService(source=SqliteRecordSource(Database(settings.paths.db_path)))
    try:
        payload = svc.company_report(company_id, months=months, timeframe=timeframe)
    except BidScopeError as exc:
        typer.echo(f"Report failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    cli()
