"""Time helpers."""

from __future__ import annotations

import re
from datetime import datetime, timezone

# Salesforce renders offsets without a colon, e.g. 2024-01-01T00:00:00.000+0000
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_sf_datetime(value: str | None) -> datetime | None:
    """Parse a Salesforce/ISO-8601 timestamp.

    Returns ``None`` for empty or unparseable values. Naive results are
    assumed to be UTC.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _COMPACT_OFFSET.sub(r"\1:\2", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
