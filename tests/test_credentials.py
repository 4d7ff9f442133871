"""Tests for credential resolution and sources."""

from __future__ import annotations

import asyncio
import time
from http.cookiejar import Cookie, CookieJar
from pathlib import Path

import httpx
import pytest

from apex_log_links.credentials.resolver import CredentialResolver, CredentialSource
from apex_log_links.credentials.sources import (
    CookieJarCredentialSource,
    StaticCredentialSource,
    load_cookie_file,
)
from conftest import FakeSource


def _cookie(name: str, value: str, domain: str, expires: int | None = None) -> Cookie:
    return Cookie(
        version=0,
        name=name,
        value=value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=domain.startswith("."),
        domain_initial_dot=domain.startswith("."),
        path="/",
        path_specified=True,
        secure=True,
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest={},
    )


class TestCredentialResolver:
    @pytest.mark.asyncio
    async def test_exact_origin_wins(self) -> None:
        source = FakeSource(
            {
                "https://acme.lightning.force.com": "exact",
                "https://acme.my.salesforce.com/": "sibling",
            }
        )
        resolver = CredentialResolver(source)

        token = await resolver.resolve("https://acme.lightning.force.com/lightning/page")

        assert token == "exact"
        assert source.calls == ["https://acme.lightning.force.com"]

    @pytest.mark.asyncio
    async def test_falls_back_to_sibling_host(self) -> None:
        source = FakeSource({"https://acme.my.salesforce.com/": "sibling"})
        resolver = CredentialResolver(source)

        token = await resolver.resolve("https://acme.lightning.force.com")

        assert token == "sibling"
        assert "https://acme.my.salesforce.com/" in source.calls

    @pytest.mark.asyncio
    async def test_lightning_sibling_of_my_domain(self) -> None:
        source = FakeSource({"https://acme.lightning.force.com/": "lightning"})
        resolver = CredentialResolver(source)

        assert await resolver.resolve("https://acme.my.salesforce.com") == "lightning"

    @pytest.mark.asyncio
    async def test_absent_everywhere_returns_none(self) -> None:
        source = FakeSource()
        resolver = CredentialResolver(source)

        assert await resolver.resolve("https://acme.lightning.force.com") is None
        # exact origin plus the my-domain variant; the bare https host is the origin itself
        assert source.calls == [
            "https://acme.lightning.force.com",
            "https://acme.my.salesforce.com/",
        ]

    @pytest.mark.asyncio
    async def test_never_caches(self) -> None:
        source = FakeSource({"https://acme.lightning.force.com": "one"})
        resolver = CredentialResolver(source)

        assert await resolver.resolve("https://acme.lightning.force.com") == "one"
        source.tokens["https://acme.lightning.force.com"] = "two"
        assert await resolver.resolve("https://acme.lightning.force.com") == "two"

    @pytest.mark.asyncio
    async def test_first_non_empty_variant_wins_concurrently(self) -> None:
        class SlowSource:
            async def get_credential_for_origin(self, url: str) -> str | None:
                if url == "https://acme.lightning.force.com:8443":
                    return None
                if url == "https://acme.lightning.force.com/":
                    await asyncio.sleep(0.05)
                    return "slow"
                if url == "https://acme.my.salesforce.com/":
                    return "fast"
                return None

        resolver = CredentialResolver(SlowSource())

        assert await resolver.resolve("https://acme.lightning.force.com:8443") == "fast"

    @pytest.mark.asyncio
    async def test_source_error_counts_as_absent(self) -> None:
        class BrokenSource:
            async def get_credential_for_origin(self, url: str) -> str | None:
                raise RuntimeError("channel closed")

        resolver = CredentialResolver(BrokenSource())

        assert await resolver.resolve("https://acme.lightning.force.com") is None

    @pytest.mark.asyncio
    async def test_without_source(self) -> None:
        assert await CredentialResolver(None).resolve("https://acme.lightning.force.com") is None

    def test_sources_satisfy_protocol(self) -> None:
        assert isinstance(FakeSource(), CredentialSource)
        assert isinstance(StaticCredentialSource("t"), CredentialSource)


class TestCookieJarCredentialSource:
    @pytest.mark.asyncio
    async def test_reads_host_only_cookie(self) -> None:
        jar = CookieJar()
        jar.set_cookie(_cookie("sid", "session-1", "acme.my.salesforce.com"))
        jar.set_cookie(_cookie("other", "x", "acme.lightning.force.com"))
        source = CookieJarCredentialSource(jar)

        assert await source.get_credential_for_origin("https://acme.my.salesforce.com/") == "session-1"
        assert await source.get_credential_for_origin("https://acme.lightning.force.com") is None

    @pytest.mark.asyncio
    async def test_reads_domain_cookie_and_skips_expired(self) -> None:
        jar = CookieJar()
        jar.set_cookie(_cookie("sid", "old", ".salesforce.com", expires=int(time.time()) - 60))
        jar.set_cookie(_cookie("sid", "fresh", ".my.salesforce.com", expires=int(time.time()) + 600))
        source = CookieJarCredentialSource(httpx.Cookies(jar))

        assert await source.get_credential_for_origin("https://acme.my.salesforce.com") == "fresh"

    @pytest.mark.asyncio
    async def test_resolver_finds_cookie_on_sibling_host(self) -> None:
        jar = CookieJar()
        jar.set_cookie(_cookie("sid", "from-my-domain", "acme.my.salesforce.com"))
        resolver = CredentialResolver(CookieJarCredentialSource(jar))

        assert await resolver.resolve("https://acme.lightning.force.com") == "from-my-domain"

    def test_load_cookie_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cookies.txt"
        path.write_text(
            "# Netscape HTTP Cookie File\n"
            "acme.my.salesforce.com\tFALSE\t/\tTRUE\t0\tsid\tsession-2\n",
            encoding="utf-8",
        )

        cookies = load_cookie_file(str(path))

        assert cookies.get("sid") == "session-2"

    def test_load_cookie_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="Failed to load cookie file"):
            load_cookie_file(str(tmp_path / "missing.txt"))


@pytest.mark.asyncio
async def test_static_source() -> None:
    source = StaticCredentialSource("abc")
    assert await source.get_credential_for_origin("https://any.example.com") == "abc"
    assert "abc" not in repr(source)
