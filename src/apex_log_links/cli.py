"""Command line entrypoint."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import httpx
import typer

from apex_log_links import __version__
from apex_log_links.app import (
    build_app_context,
    build_credential_source,
    create_client,
    load_session_cookies,
)
from apex_log_links.config import load_settings
from apex_log_links.logging_utils import configure_logging
from apex_log_links.page.document import Page
from apex_log_links.tooling.errors import ToolingError

logger = logging.getLogger(__name__)

app = typer.Typer(help="Find and download the Apex debug logs of asynchronous jobs.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    configure_logging()


async def _fetch(origin: str, job_id: str, download: bool) -> list[dict]:
    settings = load_settings()
    cookies = load_session_cookies(settings)
    source = build_credential_source(settings, cookies)
    async with create_client(settings, cookies) as client:
        ctx = build_app_context(origin, client, source, settings)
        logs = await ctx.lookup.for_job(job_id)
        results = []
        for record in logs:
            item = record.to_dict()
            if download and record.log_length:
                item["href"] = await ctx.links.resolve(record)
            results.append(item)
        return results


async def _augment(page: Page, fetch: bool) -> int:
    settings = load_settings()
    cookies = load_session_cookies(settings)
    source = build_credential_source(settings, cookies)
    async with create_client(settings, cookies) as client:
        ctx = build_app_context(page.url, client, source, settings)
        watcher = ctx.watcher(page)
        bound = watcher.scan()
        if fetch:
            await ctx.augmenter().activate_all(page.document)
        return bound


@app.command()
def fetch(
    origin: str = typer.Argument(..., help="Org URL, e.g. https://acme.lightning.force.com"),
    job_id: str = typer.Argument(..., help="AsyncApexJob id (707...)"),
    download: bool = typer.Option(False, "--download", help="Resolve a download URL per log."),
) -> None:
    """Print the debug logs written while a job ran, as JSON."""
    try:
        results = asyncio.run(_fetch(origin, job_id, download))
    except (ToolingError, httpx.HTTPError) as exc:
        typer.echo(str(exc) or type(exc).__name__, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(results, indent=2))


@app.command()
def augment(
    page_url: str = typer.Argument(..., help="URL the saved page was loaded from"),
    html_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write here instead of stdout."),
    fetch_logs: bool = typer.Option(False, "--fetch", help="Fetch logs for every bound row."),
) -> None:
    """Add the Logs column to a saved Apex Jobs page."""
    page = Page.from_html(page_url, html_file.read_text(encoding="utf-8"))
    bound = asyncio.run(_augment(page, fetch_logs))
    logger.info("Augmented %d row(s) from %s", bound, html_file)
    if output is None:
        typer.echo(page.render())
    else:
        output.write_text(page.render(), encoding="utf-8")
