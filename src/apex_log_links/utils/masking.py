"""Sensitive value masking for log output."""

from __future__ import annotations


def mask_token(token: str | None, *, visible: int = 4, mask: str = "***") -> str:
    """Return a log-safe rendering of a bearer token.

    Session ids carry the org id as a prefix, so only a few leading
    characters are kept.
    """
    if not token:
        return "<none>"
    if len(token) <= visible * 2:
        return mask
    return f"{token[:visible]}{mask}"
