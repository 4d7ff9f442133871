"""Job table detection and augmentation."""

from apex_log_links.page.augment import RowAugmenter
from apex_log_links.page.document import Page
from apex_log_links.page.table import TableDetector, TableHandle
from apex_log_links.page.watcher import MutationWatcher

__all__ = ["MutationWatcher", "Page", "RowAugmenter", "TableDetector", "TableHandle"]
