"""Bearer credential resolution with sibling-host fallback."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

from apex_log_links.utils.hosts import page_origin, sibling_candidates
from apex_log_links.utils.masking import mask_token

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialSource(Protocol):
    """Privileged store that knows the session credential for an origin."""

    async def get_credential_for_origin(self, url: str) -> str | None: ...


class CredentialResolver:
    """Resolve the session credential for a page origin.

    The exact origin is asked first. When it has nothing, the sibling host
    variants are asked concurrently and the first non-empty answer wins.
    Nothing is cached: every call goes back to the source.
    """

    def __init__(self, source: CredentialSource | None) -> None:
        self._source = source

    async def resolve(self, origin_url: str) -> str | None:
        source = self._source
        if source is None:
            return None

        origin = page_origin(origin_url)
        token = await self._lookup(source, origin)
        if token:
            logger.debug("Credential found for %s (%s)", origin, mask_token(token))
            return token

        candidates = [c for c in sibling_candidates(origin) if c.rstrip("/") != origin]
        if not candidates:
            return None

        tasks = [asyncio.create_task(self._lookup(source, candidate)) for candidate in candidates]
        try:
            for next_done in asyncio.as_completed(tasks):
                token = await next_done
                if token:
                    logger.debug(
                        "Credential for %s found on sibling host (%s)",
                        origin,
                        mask_token(token),
                    )
                    return token
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        logger.info("No credential available for %s; continuing unauthenticated", origin)
        return None

    async def _lookup(self, source: CredentialSource, url: str) -> str | None:
        try:
            token = await source.get_credential_for_origin(url)
        except Exception as exc:
            logger.warning("Credential lookup failed for %s: %s", url, exc)
            return None
        return token or None
