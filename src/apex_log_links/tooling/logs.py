"""Map an Apex job id to the debug logs written while it ran.

ApexLog rows carry no reference to the job that produced them. They are
joined through the job owner (``CreatedById`` -> ``LogUserId``) and the job's
own lifetime (``CreatedDate`` .. ``CompletedDate``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from apex_log_links.tooling import soql
from apex_log_links.tooling.errors import (
    InvalidJobIdError,
    InvalidJobRecordError,
    JobNotFoundError,
)
from apex_log_links.tooling.query import QueryService
from apex_log_links.utils.time import parse_sf_datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobRecord:
    id: str
    created_by_id: str
    created_date: str
    completed_date: str | None
    status: str | None = None
    job_type: str | None = None
    apex_class_name: str | None = None

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "JobRecord":
        apex_class = record.get("ApexClass") or {}
        return cls(
            id=str(record.get("Id") or ""),
            created_by_id=str(record.get("CreatedById") or ""),
            created_date=str(record.get("CreatedDate") or ""),
            completed_date=record.get("CompletedDate") or None,
            status=record.get("Status"),
            job_type=record.get("JobType"),
            apex_class_name=apex_class.get("Name") if isinstance(apex_class, dict) else None,
        )


@dataclass(frozen=True)
class LogRecord:
    id: str
    start_time: str
    log_user_id: str
    operation: str | None
    status: str | None
    log_length: int
    request: str | None

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "LogRecord":
        try:
            log_length = int(record.get("LogLength") or 0)
        except (TypeError, ValueError):
            log_length = 0
        return cls(
            id=str(record.get("Id") or ""),
            start_time=str(record.get("StartTime") or ""),
            log_user_id=str(record.get("LogUserId") or ""),
            operation=record.get("Operation"),
            status=record.get("Status"),
            log_length=log_length,
            request=record.get("Request"),
        )

    @property
    def started_at(self) -> datetime | None:
        return parse_sf_datetime(self.start_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time,
            "log_user_id": self.log_user_id,
            "operation": self.operation,
            "status": self.status,
            "log_length": self.log_length,
            "request": self.request,
        }


class LogLookup:
    def __init__(self, queries: QueryService) -> None:
        self._queries = queries

    async def job(self, job_id: str) -> JobRecord:
        """Fetch the job's owner and lifetime. Raises ``JobNotFoundError``."""
        job_id = job_id.strip()
        if not soql.is_job_id(job_id):
            raise InvalidJobIdError(job_id)

        records = await self._queries.query(soql.job_query(job_id))
        if not records:
            raise JobNotFoundError(job_id)
        return JobRecord.from_api(records[0])

    async def for_job(self, job_id: str) -> list[LogRecord]:
        job = await self.job(job_id)
        if not job.created_by_id or not job.created_date:
            raise JobNotFoundError(job_id)

        try:
            statement = soql.log_query(job.created_by_id, job.created_date, job.completed_date)
        except ValueError as exc:
            raise InvalidJobRecordError(job.id or job_id, str(exc)) from exc
        records = [LogRecord.from_api(r) for r in await self._queries.query(statement)]
        logs = _within_window(records, job)
        logger.info("Job %s: %d log(s) in window", job.id or job_id, len(logs))
        return logs


def _within_window(records: list[LogRecord], job: JobRecord) -> list[LogRecord]:
    """Keep records inside the job window, ordered by start time.

    Timestamps that do not parse are left alone: the server already applied
    the same window and ordering.
    """
    start = parse_sf_datetime(job.created_date)
    end = parse_sf_datetime(job.completed_date)
    if start is None or any(r.started_at is None for r in records):
        return records

    kept = [
        r
        for r in records
        if r.started_at >= start and (end is None or r.started_at <= end)
    ]
    return sorted(kept, key=lambda r: r.started_at)
