"""Tests for download link resolution and log storage."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from apex_log_links.credentials.resolver import CredentialResolver
from apex_log_links.tooling.artifacts import LogArtifactStore
from apex_log_links.tooling.download import DownloadLinkResolver
from apex_log_links.tooling.logs import LogRecord
from apex_log_links.tooling.query import QueryService
from conftest import MY_DOMAIN, ORG_URL, FakeSource, mock_client

RECORD = LogRecord(
    id="07L5e00000ABCDE",
    start_time="2024-01-01T00:01:00Z",
    log_user_id="005xx",
    operation="BatchApex",
    status="Success",
    log_length=12,
    request="Api",
)
BODY_PATH = "/services/data/v62.0/tooling/sobjects/ApexLog/07L5e00000ABCDE/Body"
CONSOLE_URL = f"{MY_DOMAIN}/_ui/system/api/console/apexLogDownload.apexp?id=07L5e00000ABCDE"


def _resolver(
    client: httpx.AsyncClient, source: FakeSource, tmp_path: Path
) -> DownloadLinkResolver:
    queries = QueryService(client, f"{ORG_URL}/lightning/page", CredentialResolver(source))
    return DownloadLinkResolver(queries, LogArtifactStore(str(tmp_path)))


class TestDownloadLinkResolver:
    @pytest.mark.asyncio
    async def test_authenticated_fetch_stores_body(self, tmp_path: Path) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"USER_DEBUG|x")

        async with mock_client(handler) as client:
            href = await _resolver(client, FakeSource({ORG_URL: "tok"}), tmp_path).resolve(RECORD)

        assert href.startswith("file://")
        assert (tmp_path / "07L5e00000ABCDE.log").read_bytes() == b"USER_DEBUG|x"
        assert seen[0].url.path == BODY_PATH
        assert seen[0].headers["authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_no_credential_uses_console_route(self, tmp_path: Path) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"unexpected")

        async with mock_client(handler) as client:
            href = await _resolver(client, FakeSource(), tmp_path).resolve(RECORD)

        assert href == CONSOLE_URL
        assert seen == []

    @pytest.mark.asyncio
    async def test_failed_fetch_uses_console_route(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json=[{"errorCode": "NOT_FOUND"}])

        async with mock_client(handler) as client:
            href = await _resolver(client, FakeSource({ORG_URL: "tok"}), tmp_path).resolve(RECORD)

        assert href == CONSOLE_URL
        assert list(tmp_path.iterdir()) == []


class TestLogArtifactStore:
    def test_write_log(self, tmp_path: Path) -> None:
        store = LogArtifactStore(str(tmp_path / "logs"))
        artifact = store.write_log("07L1", b"body")

        assert artifact.size == 4
        assert artifact.uri == Path(artifact.location).as_uri()
        assert Path(artifact.location).read_bytes() == b"body"
        assert Path(artifact.location).parent == (tmp_path / "logs").resolve()

    def test_unsafe_id_is_sanitised(self, tmp_path: Path) -> None:
        store = LogArtifactStore(str(tmp_path))
        artifact = store.write_log("../../etc/passwd", b"x")

        assert Path(artifact.location).parent == tmp_path.resolve()

    def test_rewrite_replaces_body(self, tmp_path: Path) -> None:
        store = LogArtifactStore(str(tmp_path))
        store.write_log("07L1", b"old")
        artifact = store.write_log("07L1", b"new")

        assert Path(artifact.location).read_bytes() == b"new"
        assert artifact.size == 3
