"""Async fan-out of search -> extract batches and merging of their leads."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator

from lead_finder.analysis.extraction import extract_leads
from lead_finder.config import Config
from lead_finder.leads.merger import LeadMerger
from lead_finder.models import BatchResult, EnhancedQuery, Lead, SearchFilters
from lead_finder.search.duckduckgo_client import search_ddg
from lead_finder.search.tavily_client import search_tavily

logger = logging.getLogger(__name__)


class LeadSearchPipeline:
    """Runs independent search -> extract batches concurrently.

    Batches share no state. Each one reports success or failure through a
    BatchResult instead of raising, so one failing batch never takes the
    others down. A batch keeps at most batch_size leads. Nothing is retried.
    """

    def __init__(self, config: Config):
        self.config = config

    async def run(
        self,
        enhanced: EnhancedQuery,
        filters: SearchFilters,
        num_batches: int | None = None,
        batch_size: int | None = None,
    ) -> list[Lead]:
        """Run all batches, then merge their leads in batch order."""
        num_batches = num_batches or self.config.search_batches
        batch_size = batch_size or self.config.batch_size

        started = time.monotonic()
        logger.info(
            "Starting %d batches in parallel for query: %s", num_batches, enhanced.text,
        )

        tasks = [
            self._process_batch_safe(i, enhanced, filters, num_batches, batch_size)
            for i in range(num_batches)
        ]
        results = await asyncio.gather(*tasks)

        all_leads = collect_leads(results)
        merged = LeadMerger(filters).merge(all_leads)

        succeeded = sum(1 for r in results if r.success)
        logger.info(
            "Batches complete in %.1fs: %d/%d succeeded, %d leads, %d after merge",
            time.monotonic() - started, succeeded, num_batches, len(all_leads), len(merged),
        )
        return merged

    async def stream(
        self,
        enhanced: EnhancedQuery,
        filters: SearchFilters,
        num_batches: int | None = None,
        batch_size: int | None = None,
    ) -> AsyncIterator[dict]:
        """Yield one {batch, leads, progress} payload per batch as it settles.

        A single merger is shared by all batches of the stream, so a company
        already sent in an earlier event is not sent again.
        """
        num_batches = num_batches or self.config.stream_batches
        batch_size = batch_size or self.config.batch_size
        merger = LeadMerger(filters)

        tasks = [
            asyncio.create_task(
                self._process_batch_safe(i, enhanced, filters, num_batches, batch_size)
            )
            for i in range(num_batches)
        ]

        settled = 0
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                settled += 1
                leads = merger.merge(result.leads) if result.success else []
                yield {
                    "batch": result.index + 1,
                    "leads": [lead.to_wire() for lead in leads],
                    "progress": round(settled / num_batches * 100),
                }
        finally:
            # Client went away mid-stream
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def _process_batch_safe(
        self,
        index: int,
        enhanced: EnhancedQuery,
        filters: SearchFilters,
        num_batches: int,
        batch_size: int,
    ) -> BatchResult:
        """Run one batch, converting any unexpected error into a failed result."""
        try:
            return await self._process_batch(index, enhanced, filters, num_batches, batch_size)
        except Exception:
            logger.exception("Batch %d/%d failed", index + 1, num_batches)
            return BatchResult(index=index, success=False)

    async def _process_batch(
        self,
        index: int,
        enhanced: EnhancedQuery,
        filters: SearchFilters,
        num_batches: int,
        batch_size: int,
    ) -> BatchResult:
        batch_num = index + 1
        logger.debug("Batch %d/%d starting", batch_num, num_batches)

        search_results = await self._search(enhanced.text)
        logger.info(
            "Batch %d: %d search results",
            batch_num, len(search_results) if search_results else 0,
        )

        extraction = await extract_leads(
            enhanced,
            filters,
            search_results,
            self.config,
            batch_index=index,
            num_batches=num_batches,
            batch_size=batch_size,
        )
        if not extraction.success:
            logger.warning("Batch %d failed, continuing with other batches", batch_num)
            return BatchResult(index=index, success=False)

        leads = extraction.leads
        if len(leads) > batch_size:
            logger.info(
                "Batch %d returned %d leads, keeping the first %d",
                batch_num, len(leads), batch_size,
            )
            leads = leads[:batch_size]
        logger.info("Batch %d complete: %d leads", batch_num, len(leads))

        return BatchResult(index=index, success=True, leads=leads)

    async def _search(self, query: str) -> list[dict] | None:
        """Search with Tavily when a key is configured, else DuckDuckGo."""
        if self.config.tavily_api_key:
            return await search_tavily(
                query,
                self.config.tavily_api_key,
                num_results=self.config.max_search_results,
                timeout=self.config.search_timeout,
            )
        return await search_ddg(query, num_results=self.config.max_search_results)


def collect_leads(results: list[BatchResult]) -> list[Lead]:
    """Concatenate leads of successful batches in batch-index order."""
    leads: list[Lead] = []
    for result in sorted(results, key=lambda r: r.index):
        if result.success:
            leads.extend(result.leads)
    return leads
