"""Add a "Logs" column with an on-demand fetch action to the jobs table."""

from __future__ import annotations

import asyncio
import logging

from bs4 import BeautifulSoup, Tag

from apex_log_links.page.document import normalize_text
from apex_log_links.page.render import render_links, set_text
from apex_log_links.page.table import TableHandle, own_rows, row_cells
from apex_log_links.tooling.download import DownloadLinkResolver
from apex_log_links.tooling.errors import ToolingError
from apex_log_links.tooling.logs import LogLookup
from apex_log_links.tooling.soql import JOB_ID_PATTERN, is_job_id

logger = logging.getLogger(__name__)

BOUND_ATTR = "data-sf-logs-bound"
JOB_ID_ATTR = "data-job-id"
LOGS_HEADER = "Logs"
PLACEHOLDER = "—"
BUTTON_TEXT = "Fetch logs"
LOADING_TEXT = "Loading…"
ERROR_TEXT = "Error fetching logs"
BUTTON_CLASS = "sflogs-btn"
CONTAINER_CLASS = "sflogs-container"


def is_bound(row: Tag) -> bool:
    return row.get(BOUND_ATTR) == "1"


def data_rows(handle: TableHandle) -> list[Tag]:
    """Rows of the table that hold at least one data cell."""
    return [
        row
        for row in own_rows(handle.table)
        if row is not handle.header_row and row.find("td", recursive=False) is not None
    ]


def extract_job_id(row: Tag, job_id_index: int | None) -> str | None:
    """Job id from the job-id column, else from anywhere in the row text."""
    cells = row_cells(row)
    if job_id_index is not None and 0 <= job_id_index < len(cells):
        match = JOB_ID_PATTERN.match(normalize_text(cells[job_id_index]))
        if match:
            return match.group(0)

    match = JOB_ID_PATTERN.search(row.get_text(" "))
    return match.group(0) if match else None


class RowAugmenter:
    def __init__(self, lookup: LogLookup, links: DownloadLinkResolver) -> None:
        self._lookup = lookup
        self._links = links

    def augment(self, document: BeautifulSoup, handle: TableHandle) -> list[Tag]:
        """Bind every new row of the table. Returns the buttons added."""
        try:
            self.ensure_header(document, handle)
        except Exception:
            logger.exception("Adding the Logs header failed")

        buttons: list[Tag] = []
        for row in data_rows(handle):
            try:
                button = self.ensure_row(document, row, handle.job_id_index)
            except Exception:
                logger.exception("Augmenting row failed")
                continue
            if button is not None:
                buttons.append(button)
        return buttons

    def ensure_header(self, document: BeautifulSoup, handle: TableHandle) -> None:
        for cell in row_cells(handle.header_row):
            if normalize_text(cell).lower() == LOGS_HEADER.lower():
                return
        # Appended, never inserted, so existing columns keep their positions.
        header = document.new_tag("th", attrs={"class": "dataCell"})
        header.string = LOGS_HEADER
        handle.header_row.append(header)

    def ensure_row(
        self, document: BeautifulSoup, row: Tag, job_id_index: int | None
    ) -> Tag | None:
        if is_bound(row):
            return None
        if row.find("td", recursive=False) is None:
            return None

        job_id = extract_job_id(row, job_id_index)
        logs_cell = document.new_tag("td")
        row.append(logs_cell)
        row[BOUND_ATTR] = "1"

        if job_id is None:
            logs_cell.string = PLACEHOLDER
            return None

        container = document.new_tag("div", attrs={"class": CONTAINER_CLASS})
        button = document.new_tag(
            "button",
            attrs={"type": "button", "class": BUTTON_CLASS, JOB_ID_ATTR: job_id},
        )
        button.string = BUTTON_TEXT
        container.append(button)
        logs_cell.append(container)
        return button

    def pending_buttons(self, document: BeautifulSoup) -> list[Tag]:
        return [
            button
            for button in document.find_all("button", attrs={JOB_ID_ATTR: True})
            if not button.has_attr("disabled")
        ]

    async def activate(self, document: BeautifulSoup, button: Tag) -> None:
        """Run the fetch bound to ``button``; the button is gone afterwards."""
        if button.has_attr("disabled"):
            return
        job_id = str(button.get(JOB_ID_ATTR) or "")
        container = button.parent
        if container is None or not is_job_id(job_id):
            return

        button["disabled"] = "disabled"
        button.string = LOADING_TEXT
        try:
            logs = await self._lookup.for_job(job_id)
            await render_links(document, container, logs, self._links)
        except ToolingError as exc:
            logger.warning("Fetching logs for %s failed: %s", job_id, exc)
            set_text(container, str(exc) or ERROR_TEXT)
        except Exception as exc:
            logger.exception("Fetching logs for %s failed", job_id)
            set_text(container, str(exc) or ERROR_TEXT)
        finally:
            button.extract()

    async def activate_all(self, document: BeautifulSoup) -> int:
        buttons = self.pending_buttons(document)
        await asyncio.gather(*(self.activate(document, button) for button in buttons))
        return len(buttons)
