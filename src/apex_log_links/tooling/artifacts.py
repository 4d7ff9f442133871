"""Local storage for downloaded log bodies."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_-]")


@dataclass(frozen=True)
class LogArtifact:
    log_id: str
    location: str
    size: int

    @property
    def uri(self) -> str:
        return Path(self.location).as_uri()


class LogArtifactStore:
    def __init__(self, base_path: str) -> None:
        self._base = Path(base_path).resolve()
        self._base.mkdir(parents=True, exist_ok=True)

    def write_log(self, log_id: str, data: bytes) -> LogArtifact:
        """Store one log body. A later fetch of the same log replaces it."""
        safe_id = _UNSAFE_NAME.sub("_", log_id) or "log"
        path = self._base / f"{safe_id}.log"
        path.write_bytes(data)
        return LogArtifact(log_id=log_id, location=str(path), size=len(data))
