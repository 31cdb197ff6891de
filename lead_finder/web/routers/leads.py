"""Lead search API: one-shot JSON, SSE streaming, CSV export, health."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from lead_finder.models import ExportRequest, SearchFilters, SearchLeadsRequest
from lead_finder.output.csv_export import default_filename, leads_to_csv
from lead_finder.pipeline import LeadSearchPipeline
from lead_finder.search.query_enhancer import EmptyQueryError, enhance_query
from lead_finder.web.deps import get_pipeline

logger = logging.getLogger(__name__)
router = APIRouter(tags=["leads"])

DONE_SENTINEL = "[DONE]"


@router.post("/search-leads")
async def search_leads(
    req: SearchLeadsRequest,
    pipeline: LeadSearchPipeline = Depends(get_pipeline),
):
    """Run every batch, merge, and return the full lead list."""
    logger.info("Search request: %r filters=%s", req.search_query, req.filters.model_dump())

    try:
        enhanced = enhance_query(req.search_query, req.filters)
    except EmptyQueryError as e:
        return {"success": False, "error": str(e), "leads": []}

    logger.info(
        "Enhanced query: %s (funding=%s, startup=%s)",
        enhanced.text, enhanced.funding_intent, enhanced.startup_intent,
    )

    try:
        leads = await pipeline.run(enhanced, req.filters)
    except Exception as e:
        logger.exception("Error in search-leads")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {
        "success": True,
        "leads": [lead.to_wire() for lead in leads],
        "totalFound": len(leads),
    }


@router.get("/search-stream")
async def search_stream(
    search_query: str = Query("", alias="searchQuery"),
    filters: str = Query("", alias="filters"),
    pipeline: LeadSearchPipeline = Depends(get_pipeline),
):
    """SSE stream: one event per settled batch, then a [DONE] sentinel."""
    return EventSourceResponse(stream_events(search_query, filters, pipeline))


async def stream_events(
    search_query: str,
    filters_json: str,
    pipeline: LeadSearchPipeline,
) -> AsyncIterator[dict]:
    """Produce the SSE messages for one streaming search.

    Errors become a single {error} event; [DONE] is always sent last.
    """
    try:
        filters = parse_filters(filters_json)
        enhanced = enhance_query(search_query, filters)
        logger.info("Streaming search: %s", enhanced.text)
        async for payload in pipeline.stream(enhanced, filters):
            yield {"data": json.dumps(payload)}
    except ValueError as e:
        # Empty query or malformed filters
        yield {"data": json.dumps({"error": str(e)})}
    except Exception as e:
        logger.exception("Error in search-stream")
        yield {"data": json.dumps({"error": str(e)})}

    yield {"data": DONE_SENTINEL}


def parse_filters(filters_json: str | None) -> SearchFilters:
    """Decode the URL-supplied filters JSON. Raises ValueError if malformed."""
    try:
        raw = json.loads(filters_json or "{}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid filters: {e.msg}") from e
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("Invalid filters: expected a JSON object")
    try:
        return SearchFilters.model_validate(raw)
    except ValidationError as e:
        raise ValueError("Invalid filters") from e


@router.post("/export-csv")
async def export_csv(req: ExportRequest):
    """Return the given leads as a downloadable CSV file."""
    return Response(
        content=leads_to_csv(req.leads),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{default_filename()}"'},
    )


@router.get("/health")
async def health():
    return {"status": "ok", "message": "Lead Finder API is running"}
