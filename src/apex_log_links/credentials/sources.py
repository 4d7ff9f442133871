"""Concrete credential sources."""

from __future__ import annotations

import logging
from http.cookiejar import CookieJar, LoadError, MozillaCookieJar
from pathlib import Path
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)


def load_cookie_file(path: str) -> httpx.Cookies:
    """Load a Netscape ``cookies.txt`` export into ``httpx.Cookies``.

    Session cookies (no expiry) are kept, since the Salesforce ``sid``
    cookie is one.
    """
    jar = MozillaCookieJar(str(Path(path)))
    try:
        jar.load(ignore_discard=True, ignore_expires=False)
    except (OSError, LoadError) as exc:
        raise RuntimeError(f"Failed to load cookie file {path}: {exc}") from exc
    logger.info("Loaded %d cookies from %s", len(jar), path)
    return httpx.Cookies(jar)


def _domain_matches(hostname: str, cookie_domain: str) -> bool:
    domain = cookie_domain.lower()
    if domain.startswith("."):
        return hostname == domain[1:] or hostname.endswith(domain)
    return hostname == domain


class CookieJarCredentialSource:
    """Reads the session cookie for a URL from a cookie jar."""

    def __init__(self, cookies: httpx.Cookies | CookieJar, cookie_name: str = "sid") -> None:
        self._jar = cookies.jar if isinstance(cookies, httpx.Cookies) else cookies
        self._cookie_name = cookie_name

    async def get_credential_for_origin(self, url: str) -> str | None:
        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
        path = parsed.path or "/"
        if not hostname:
            return None

        for cookie in self._jar:
            if cookie.name != self._cookie_name or not cookie.value:
                continue
            if cookie.is_expired():
                continue
            if not _domain_matches(hostname, cookie.domain):
                continue
            if not path.startswith(cookie.path or "/"):
                continue
            return cookie.value
        return None


class StaticCredentialSource:
    """Returns one configured session id for every origin."""

    def __init__(self, token: str) -> None:
        self._token = token

    async def get_credential_for_origin(self, url: str) -> str | None:
        return self._token or None

    def __repr__(self) -> str:
        return "StaticCredentialSource(token=***)"
