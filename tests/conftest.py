from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import Callable

import httpx
import pytest

from apex_log_links import config

ORG_URL = "https://acme.lightning.force.com"
MY_DOMAIN = "https://acme.my.salesforce.com"
QUERY_PATH = "/services/data/v62.0/tooling/query"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    for key in config.ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ARTIFACT_PATH", str(tmp_path / "logs"))
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


@pytest.fixture(autouse=True)
def _close_default_event_loop() -> None:
    yield
    policy = asyncio.get_event_loop_policy()
    local = getattr(policy, "_local", None)
    loop = getattr(local, "_loop", None) if local is not None else None
    if loop is not None and not loop.is_running() and not loop.is_closed():
        with contextlib.suppress(Exception):
            loop.close()
    if loop is not None:
        with contextlib.suppress(Exception):
            policy.set_event_loop(None)


class FakeSource:
    """Credential source backed by a URL -> token mapping."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self.tokens = tokens or {}
        self.calls: list[str] = []

    async def get_credential_for_origin(self, url: str) -> str | None:
        self.calls.append(url)
        return self.tokens.get(url)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def query_text(request: httpx.Request) -> str:
    return request.url.params.get("q", "")
