"""Salesforce Tooling API access for Apex job logs."""

from apex_log_links.tooling.download import DownloadLinkResolver
from apex_log_links.tooling.errors import (
    InvalidJobIdError,
    InvalidJobRecordError,
    JobNotFoundError,
    QueryError,
    ToolingError,
)
from apex_log_links.tooling.logs import JobRecord, LogLookup, LogRecord
from apex_log_links.tooling.query import QueryService

__all__ = [
    "DownloadLinkResolver",
    "InvalidJobIdError",
    "InvalidJobRecordError",
    "JobNotFoundError",
    "JobRecord",
    "LogLookup",
    "LogRecord",
    "QueryError",
    "QueryService",
    "ToolingError",
]
