"""Parsed page wrapper."""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from apex_log_links.utils.hosts import page_origin

PARSER = "html.parser"


@dataclass
class Page:
    url: str
    document: BeautifulSoup

    @classmethod
    def from_html(cls, url: str, html: str) -> "Page":
        return cls(url=url, document=BeautifulSoup(html, PARSER))

    @property
    def origin(self) -> str:
        return page_origin(self.url)

    def render(self) -> str:
        return str(self.document)


def normalize_text(tag) -> str:
    """Visible text of ``tag`` with whitespace collapsed to single spaces."""
    return " ".join(tag.get_text(" ").split())
