"""Locate the Apex jobs table by its header text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from apex_log_links.page.document import normalize_text

logger = logging.getLogger(__name__)

JOB_ID_HEADER = re.compile(r"apex\s*job\s*id", re.IGNORECASE)
HEADER_ROW_CLASS = "headerRow"


@dataclass
class TableHandle:
    table: Tag
    header_row: Tag
    headers: list[Tag]
    job_id_index: int


def own_rows(table: Tag) -> list[Tag]:
    """Rows of ``table`` itself, skipping rows of nested tables."""
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def row_cells(row: Tag) -> list[Tag]:
    return row.find_all(["td", "th"], recursive=False)


def find_header_row(table: Tag) -> Tag | None:
    rows = own_rows(table)
    for row in rows:
        if HEADER_ROW_CLASS in (row.get("class") or []):
            return row
    for row in rows:
        if row.find_parent("thead") is not None and row.find("th", recursive=False):
            return row
    for row in rows:
        if row.find("th", recursive=False):
            return row
    return None


class TableDetector:
    """Find the first table whose header row has an "Apex Job ID" column.

    Nothing is remembered between calls; the page re-renders its tables.
    """

    def locate(self, document: BeautifulSoup) -> TableHandle | None:
        for table in document.find_all("table"):
            header_row = find_header_row(table)
            if header_row is None:
                continue
            headers = row_cells(header_row)
            for index, cell in enumerate(headers):
                # a layout cell wrapping another table is not a header
                if cell.find("table") is not None:
                    continue
                if JOB_ID_HEADER.search(normalize_text(cell)):
                    return TableHandle(
                        table=table,
                        header_row=header_row,
                        headers=headers,
                        job_id_index=index,
                    )
        logger.debug("No Apex jobs table on page")
        return None
