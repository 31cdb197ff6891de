"""Async Tavily web search client."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"


async def search_tavily(
    query: str,
    api_key: str,
    num_results: int = 10,
    timeout: int = 30,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict] | None:
    """Run an advanced-depth Tavily search.

    Returns the provider's result list ({title, url, content} dicts).
    Returns None on any failure so callers can carry on without context.
    """
    payload = {
        "api_key": api_key,
        "query": query,
        "search_depth": "advanced",
        "include_answer": True,
        "max_results": num_results,
    }

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(TAVILY_SEARCH_URL, json=payload)
            response.raise_for_status()
            data = response.json()

            results = data.get("results") if isinstance(data, dict) else None
            if not isinstance(results, list):
                logger.warning("Tavily returned no result list for query: %s", query[:80])
                return None
            return results

    except httpx.TimeoutException:
        logger.warning("Tavily timeout for query: %s", query[:80])
        return None
    except httpx.HTTPStatusError as e:
        logger.warning("Tavily HTTP %d for query: %s", e.response.status_code, query[:80])
        return None
    except Exception as e:
        logger.warning("Tavily error for query '%s': %s", query[:80], e)
        return None
