"""Origin and sibling-host helpers.

Salesforce serves the same org under two naming conventions: the Lightning
host (``*.lightning.force.com``) and the My Domain host
(``*.my.salesforce.com``). Session cookies and the classic console routes may
live on either one.
"""

from __future__ import annotations

from urllib.parse import urlparse

LIGHTNING_SUFFIX = ".lightning.force.com"
MY_DOMAIN_SUFFIX = ".my.salesforce.com"


def page_origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for a page URL.

    Raises ``ValueError`` when the URL has no scheme or host.
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"URL has no origin: {url!r}")
    host = parsed.hostname.lower()
    port = f":{parsed.port}" if parsed.port else ""
    return f"{parsed.scheme.lower()}://{host}{port}"


def _swap_suffix(hostname: str, old: str, new: str) -> str:
    if hostname.endswith(old):
        return hostname[: -len(old)] + new
    return hostname


def to_my_domain_host(hostname: str) -> str:
    return _swap_suffix(hostname.lower(), LIGHTNING_SUFFIX, MY_DOMAIN_SUFFIX)


def to_lightning_host(hostname: str) -> str:
    return _swap_suffix(hostname.lower(), MY_DOMAIN_SUFFIX, LIGHTNING_SUFFIX)


def to_my_domain(origin: str) -> str:
    """Rewrite a Lightning origin to its My Domain sibling.

    Origins on any other host are returned normalized but otherwise unchanged.
    """
    try:
        parsed = urlparse(page_origin(origin))
    except ValueError:
        return origin
    port = f":{parsed.port}" if parsed.port else ""
    return f"{parsed.scheme}://{to_my_domain_host(parsed.hostname or '')}{port}"


def sibling_candidates(url: str) -> list[str]:
    """Candidate URLs where a session cookie for ``url`` may be scoped.

    The bare https host comes first, followed by both rewrite directions.
    Duplicates are dropped while keeping the order.
    """
    hostname = (urlparse(url.strip()).hostname or "").lower()
    if not hostname:
        return []
    hosts = [hostname, to_my_domain_host(hostname), to_lightning_host(hostname)]
    candidates: list[str] = []
    for host in hosts:
        candidate = f"https://{host}/"
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates
