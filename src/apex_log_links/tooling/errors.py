"""Tooling API error types."""

from __future__ import annotations


class ToolingError(Exception):
    """Base error carrying a short machine-readable code."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class QueryError(ToolingError):
    """Raised when a query is rejected after the bearer retry."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Query failed ({status_code}): {body}", "query_rejected")
        self.status_code = status_code
        self.body = body


class JobNotFoundError(ToolingError):
    """Raised when no AsyncApexJob matches the requested id."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Apex job not found: {job_id}", "job_not_found")
        self.job_id = job_id


class InvalidJobIdError(ToolingError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"Not an Apex job id: {job_id!r}", "invalid_job_id")
        self.job_id = job_id


class InvalidJobRecordError(ToolingError):
    """Raised when a job's lifetime bounds cannot be used in a log query."""

    def __init__(self, job_id: str, detail: str) -> None:
        super().__init__(f"Unusable Apex job record {job_id}: {detail}", "invalid_job_record")
        self.job_id = job_id
