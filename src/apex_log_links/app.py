"""Application context assembly."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from apex_log_links.config import Settings, load_settings
from apex_log_links.credentials.resolver import CredentialResolver, CredentialSource
from apex_log_links.credentials.sources import (
    CookieJarCredentialSource,
    StaticCredentialSource,
    load_cookie_file,
)
from apex_log_links.page.augment import RowAugmenter
from apex_log_links.page.document import Page
from apex_log_links.page.table import TableDetector
from apex_log_links.page.watcher import MutationWatcher
from apex_log_links.tooling.artifacts import LogArtifactStore
from apex_log_links.tooling.download import DownloadLinkResolver
from apex_log_links.tooling.logs import LogLookup
from apex_log_links.tooling.query import QueryService


@dataclass
class AppContext:
    """Wiring for one page: query, lookup and link resolution share a client."""

    settings: Settings
    credentials: CredentialResolver
    queries: QueryService
    lookup: LogLookup
    links: DownloadLinkResolver
    store: LogArtifactStore

    def augmenter(self) -> RowAugmenter:
        return RowAugmenter(self.lookup, self.links)

    def watcher(self, page: Page) -> MutationWatcher:
        return MutationWatcher(page, TableDetector(), self.augmenter())


def load_session_cookies(settings: Settings) -> httpx.Cookies:
    if settings.session.cookie_file:
        return load_cookie_file(settings.session.cookie_file)
    return httpx.Cookies()


def build_credential_source(
    settings: Settings, cookies: httpx.Cookies
) -> CredentialSource | None:
    """Static session id first, then the session cookie jar."""
    if settings.session.session_id:
        return StaticCredentialSource(settings.session.session_id)
    if settings.session.cookie_file:
        return CookieJarCredentialSource(cookies, settings.salesforce.session_cookie)
    return None


def create_client(settings: Settings, cookies: httpx.Cookies) -> httpx.AsyncClient:
    timeout = settings.salesforce.http_timeout_seconds
    return httpx.AsyncClient(cookies=cookies, timeout=timeout, follow_redirects=False)


def build_app_context(
    page_url: str,
    client: httpx.AsyncClient,
    source: CredentialSource | None,
    settings: Settings | None = None,
) -> AppContext:
    settings = settings or load_settings()
    credentials = CredentialResolver(source)
    queries = QueryService(
        client,
        page_url,
        credentials,
        api_version=settings.salesforce.api_version,
    )
    store = LogArtifactStore(settings.storage.artifact_path)
    return AppContext(
        settings=settings,
        credentials=credentials,
        queries=queries,
        lookup=LogLookup(queries),
        links=DownloadLinkResolver(queries, store),
        store=store,
    )
