"""Re-run detection and augmentation whenever the page changes."""

from __future__ import annotations

import logging
from typing import AsyncIterable

from apex_log_links.page.augment import RowAugmenter
from apex_log_links.page.document import Page
from apex_log_links.page.table import TableDetector

logger = logging.getLogger(__name__)


class MutationWatcher:
    """Full re-scan on every change notification.

    Notification payloads are ignored; rows already bound are skipped by the
    augmenter, so repeated scans are cheap and never double-bind.
    """

    def __init__(self, page: Page, detector: TableDetector, augmenter: RowAugmenter) -> None:
        self._page = page
        self._detector = detector
        self._augmenter = augmenter
        self.scans = 0

    def scan(self) -> int:
        """Detect and augment once. Returns the number of fetch buttons added."""
        self.scans += 1
        try:
            handle = self._detector.locate(self._page.document)
            if handle is None:
                return 0
            added = self._augmenter.augment(self._page.document, handle)
        except Exception:
            logger.exception("Page scan failed")
            return 0
        if added:
            logger.info("Bound %d job row(s)", len(added))
        return len(added)

    def notify(self, *_mutations: object) -> int:
        return self.scan()

    async def run(self, notifications: AsyncIterable[object]) -> None:
        """Scan now, then once per notification until the source is exhausted."""
        self.scan()
        async for mutation in notifications:
            self.notify(mutation)
