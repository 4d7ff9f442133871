"""Link list rendering for fetched logs."""

from __future__ import annotations

import asyncio
import logging

from bs4 import BeautifulSoup, Tag

from apex_log_links.tooling.download import DownloadLinkResolver
from apex_log_links.tooling.logs import LogRecord

logger = logging.getLogger(__name__)

NO_LOGS_TEXT = "No logs found"


def format_bytes(size: int | None) -> str:
    if size is None:
        return ""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def link_label(record: LogRecord) -> str:
    return f"{record.operation or 'Apex'} ({format_bytes(record.log_length)})"


def set_text(container: Tag, text: str) -> None:
    container.clear()
    container.append(text)


async def _href_for(links: DownloadLinkResolver, record: LogRecord) -> str:
    try:
        return await links.resolve(record)
    except Exception as exc:
        logger.warning("Resolving download for log %s failed: %s", record.id, exc)
        return links.console_url(record)


async def render_links(
    document: BeautifulSoup,
    container: Tag,
    logs: list[LogRecord],
    links: DownloadLinkResolver,
) -> list[Tag]:
    """Replace the container content with one link per non-empty log."""
    container.clear()
    if not logs:
        container.append(NO_LOGS_TEXT)
        return []

    downloadable = [record for record in logs if record.log_length]
    hrefs = await asyncio.gather(*(_href_for(links, record) for record in downloadable))

    listing = document.new_tag("div", attrs={"class": "sflogs-list"})
    anchors: list[Tag] = []
    for record, href in zip(downloadable, hrefs):
        anchor = document.new_tag(
            "a",
            attrs={"href": href, "target": "_blank", "rel": "noopener"},
        )
        anchor.string = link_label(record)
        listing.append(anchor)
        anchors.append(anchor)

    container.append(listing)
    return anchors
