"""Download URL resolution for individual ApexLog records."""

from __future__ import annotations

import asyncio
import logging

from apex_log_links.tooling.artifacts import LogArtifactStore
from apex_log_links.tooling.logs import LogRecord
from apex_log_links.tooling.query import QueryService, bearer_headers
from apex_log_links.utils.hosts import to_my_domain

logger = logging.getLogger(__name__)

CONSOLE_DOWNLOAD_PATH = "/_ui/system/api/console/apexLogDownload.apexp"


class DownloadLinkResolver:
    """Turns a log record into a URL the user can open.

    With a bearer credential the body is fetched through the REST endpoint
    and stored locally. Otherwise the classic console download route on the
    My Domain host is returned; it relies on the browser session and may
    fail at click time.
    """

    def __init__(self, queries: QueryService, store: LogArtifactStore) -> None:
        self._queries = queries
        self._store = store

    def console_url(self, record: LogRecord) -> str:
        return f"{to_my_domain(self._queries.origin)}{CONSOLE_DOWNLOAD_PATH}?id={record.id}"

    async def resolve(self, record: LogRecord) -> str:
        token = await self._queries.credentials.resolve(self._queries.origin)
        if token:
            url = self._queries.endpoint(f"sobjects/ApexLog/{record.id}/Body")
            response = await self._queries.client.get(url, headers=bearer_headers(token))
            if response.is_success:
                artifact = await asyncio.to_thread(
                    self._store.write_log, record.id, response.content
                )
                logger.debug("Stored log %s (%d bytes)", record.id, artifact.size)
                return artifact.uri
            logger.info(
                "Log body fetch for %s failed (%d); using console route",
                record.id,
                response.status_code,
            )
        return self.console_url(record)
