"""SOQL statement builders for job and log lookups."""

from __future__ import annotations

import re

JOB_ID_PREFIX = "707"
JOB_ID_PATTERN = re.compile(
    rf"(?<![A-Za-z0-9]){JOB_ID_PREFIX}[A-Za-z0-9]{{12,18}}(?![A-Za-z0-9])"
)
_JOB_ID_FULL = re.compile(rf"{JOB_ID_PREFIX}[A-Za-z0-9]{{12,18}}")
_WHITESPACE = re.compile(r"\s+")
_DATETIME_LITERAL = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:?\d{2})"
)

JOB_FIELDS = (
    "Id",
    "ApexClass.Name",
    "CreatedDate",
    "CompletedDate",
    "Status",
    "JobType",
    "CreatedById",
)
LOG_FIELDS = ("Id", "StartTime", "LogUserId", "Operation", "Status", "LogLength", "Request")


def is_job_id(value: str) -> bool:
    return bool(_JOB_ID_FULL.fullmatch(value))


def quote(value: str) -> str:
    """Quote a string literal for SOQL."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def datetime_literal(value: str) -> str:
    """Validate a datetime literal before it is embedded unquoted."""
    text = value.strip()
    if not _DATETIME_LITERAL.fullmatch(text):
        raise ValueError(f"Not a SOQL datetime literal: {value!r}")
    return text


def compact(statement: str) -> str:
    return _WHITESPACE.sub(" ", statement).strip()


def job_query(job_id: str) -> str:
    fields = ", ".join(JOB_FIELDS)
    return compact(
        f"""
        SELECT {fields}
        FROM AsyncApexJob
        WHERE Id = {quote(job_id)}
        """
    )


def log_query(user_id: str, start: str, end: str | None) -> str:
    """Logs owned by ``user_id`` started within ``[start, end]``.

    ``start`` and ``end`` are datetime literals exactly as the API returned
    them. An ``end`` of ``None`` leaves the window open.
    """
    conditions = [
        f"LogUserId = {quote(user_id)}",
        f"StartTime >= {datetime_literal(start)}",
    ]
    if end:
        conditions.append(f"StartTime <= {datetime_literal(end)}")
    fields = ", ".join(LOG_FIELDS)
    where = " AND ".join(conditions)
    return compact(
        f"""
        SELECT {fields}
        FROM ApexLog
        WHERE {where}
        ORDER BY StartTime
        """
    )
