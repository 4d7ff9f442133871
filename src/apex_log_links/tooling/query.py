"""Tooling API query client."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from apex_log_links.credentials.resolver import CredentialResolver
from apex_log_links.tooling.errors import QueryError
from apex_log_links.utils.hosts import page_origin

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "62.0"
_AUTH_REJECTED = frozenset({401, 403})


def bearer_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class QueryService:
    """Runs Tooling API queries against the page origin.

    The first attempt relies on the ambient session carried by ``client``
    (its cookies). A 401/403 triggers exactly one retry with the resolved
    bearer credential.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        page_url: str,
        credentials: CredentialResolver,
        api_version: str = DEFAULT_API_VERSION,
    ) -> None:
        self._client = client
        self._page_url = page_url
        self._credentials = credentials
        self._api_version = api_version

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def credentials(self) -> CredentialResolver:
        return self._credentials

    @property
    def origin(self) -> str:
        return page_origin(self._page_url)

    def endpoint(self, path: str) -> str:
        """Absolute URL of a Tooling API resource under the page origin."""
        return f"{self.origin}/services/data/v{self._api_version}/tooling/{path.lstrip('/')}"

    async def query(self, statement: str) -> list[dict[str, Any]]:
        url = f"{self.endpoint('query')}?q={quote(statement, safe='')}"

        response = await self._client.get(url)
        if response.status_code in _AUTH_REJECTED:
            logger.info(
                "Query rejected with %d using the session; retrying with bearer credential",
                response.status_code,
            )
            token = await self._credentials.resolve(self.origin)
            if token:
                response = await self._client.get(url, headers=bearer_headers(token))
            else:
                logger.info("No bearer credential available; not retrying")

        if not response.is_success:
            text = response.text or response.reason_phrase
            logger.warning("Query failed (%d): %s", response.status_code, text[:500])
            raise QueryError(response.status_code, text)

        data = response.json()
        records = data.get("records") if isinstance(data, dict) else None
        return list(records or [])
