"""Free DuckDuckGo search fallback, no API key required."""

from __future__ import annotations

import asyncio
import logging
import time

from ddgs import DDGS

logger = logging.getLogger(__name__)

# Serialise DDG requests: the free backends answer 429 to bursts.
_ddg_lock: asyncio.Lock | None = None
_ddg_lock_loop: asyncio.AbstractEventLoop | None = None
_last_request_time: float = 0
_DDG_MIN_INTERVAL = 1.0  # seconds between requests


def _get_lock() -> asyncio.Lock:
    """Get or create the DDG lock for the current event loop."""
    global _ddg_lock, _ddg_lock_loop
    loop = asyncio.get_running_loop()
    if _ddg_lock is None or _ddg_lock_loop is not loop:
        _ddg_lock = asyncio.Lock()
        _ddg_lock_loop = loop
    return _ddg_lock


async def search_ddg(query: str, num_results: int = 10) -> list[dict] | None:
    """Search DuckDuckGo and return results in Tavily's shape.

    Returns a list of {title, url, content} dicts, or None on failure.
    """
    global _last_request_time

    async with _get_lock():
        elapsed = time.monotonic() - _last_request_time
        if elapsed < _DDG_MIN_INTERVAL:
            await asyncio.sleep(_DDG_MIN_INTERVAL - elapsed)

        try:
            raw = await asyncio.to_thread(_ddg_search_sync, query, num_results)
        except Exception as e:
            logger.warning("DuckDuckGo search error for '%s': %s", query[:80], e)
            return None
        finally:
            _last_request_time = time.monotonic()

    return [
        {
            "title": item.get("title", ""),
            "url": item.get("href", ""),
            "content": item.get("body", ""),
        }
        for item in raw
        if item.get("href")
    ]


def _ddg_search_sync(query: str, num_results: int) -> list[dict]:
    """Run the synchronous DDG search in a thread."""
    with DDGS() as ddgs:
        return list(ddgs.text(query, max_results=num_results))
