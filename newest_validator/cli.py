"""Typer CLI: validate a newest-items listing from the command line."""

import asyncio

import typer
from pydantic import ValidationError

from newest_validator.config import (
    DEFAULT_MAX_PAGES,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    RunConfig,
)
from newest_validator.logs import configure_logging
from newest_validator.models import DEFAULT_TARGET, DEFAULT_URL
from newest_validator.report import exit_code, render_report
from newest_validator.runner import run_validation

app = typer.Typer(help="Check that a newest-items listing is ordered newest first.")


@app.command()
def check(
    url: str = typer.Option(DEFAULT_URL, "--url", help="Listing page to paginate."),
    target: int = typer.Option(DEFAULT_TARGET, "--target", "-n", help="Number of items to validate."),
    max_pages: int = typer.Option(DEFAULT_MAX_PAGES, "--max-pages", help="Give up after this many 'More' clicks."),
    static: bool = typer.Option(False, "--static", help="Fetch pages over plain HTTP instead of a browser."),
    headless: bool = typer.Option(True, "--headless/--headful", help="Run Chromium headless."),
    timeout_ms: int = typer.Option(DEFAULT_NAVIGATION_TIMEOUT_MS, "--timeout-ms", help="Per-navigation timeout."),
    as_json: bool = typer.Option(False, "--json", help="Print the run report as JSON."),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging."),
) -> None:
    configure_logging(debug)
    try:
        config = RunConfig(
            url=url,
            target=target,
            max_pages=max_pages,
            static=static,
            headless=headless,
            navigation_timeout_ms=timeout_ms,
        )
    except ValidationError as exc:
        typer.echo(f"Invalid options: {exc}", err=True)
        raise typer.Exit(2) from exc

    report = asyncio.run(run_validation(config))
    if as_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        typer.echo(render_report(report))
    raise typer.Exit(exit_code(report))


if __name__ == "__main__":
    app()
