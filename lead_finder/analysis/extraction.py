"""Structured lead extraction from web search results via an LLM."""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from lead_finder.analysis.llm_client import llm_complete
from lead_finder.analysis.prompts import NO_RESULTS_CONTEXT, build_lead_prompt
from lead_finder.config import Config
from lead_finder.models import EnhancedQuery, ExtractionResult, Lead, SearchFilters

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def _first_json_object(text: str) -> str:
    """Return the first balanced top-level {...} span, or the text unchanged."""
    start = text.find("{")
    if start == -1:
        return text

    depth = 0
    in_string = False
    escape = False
    for i in range(start, len(text)):
        c = text[i]
        if escape:
            escape = False
            continue
        if c == "\\":
            escape = True
            continue
        if c == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    # Unbalanced (e.g. truncated by max_tokens): hand back the tail and let
    # json.loads report it
    return text[start:]


def clean_json_text(text: str) -> str:
    """Normalise an LLM reply into something json.loads can parse.

    Strips code fences, isolates the first JSON object, drops trailing
    commas before } or ] and collapses newlines.
    """
    cleaned = _CODE_FENCE.sub("", text).strip()
    cleaned = _first_json_object(cleaned)
    cleaned = _TRAILING_COMMA.sub(r"\1", cleaned)
    cleaned = cleaned.replace("\r", "").replace("\n", " ")
    return cleaned.strip()


def parse_leads_response(response_text: str) -> ExtractionResult:
    """Parse the LLM reply into leads. Never raises."""
    cleaned = clean_json_text(response_text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("JSON parse error: %s\nResponse preview: %s", e, cleaned[:200])
        return ExtractionResult.failed()

    raw_leads = data.get("leads") if isinstance(data, dict) else None
    if not isinstance(raw_leads, list):
        logger.warning("Response has no 'leads' array")
        return ExtractionResult.failed()

    leads = []
    for i, item in enumerate(raw_leads):
        if not isinstance(item, dict):
            logger.warning("Skipping lead %d: not an object", i)
            continue
        try:
            leads.append(Lead.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping lead %d: %s", i, e.errors()[0].get("msg", e))

    return ExtractionResult(success=True, leads=leads)


def build_search_context(search_results: list[dict] | None) -> str:
    """Serialise search results for the prompt."""
    if search_results is None:
        return NO_RESULTS_CONTEXT
    return json.dumps(search_results, ensure_ascii=False)


async def extract_leads(
    enhanced: EnhancedQuery,
    filters: SearchFilters,
    search_results: list[dict] | None,
    config: Config,
    batch_index: int = 0,
    num_batches: int = 1,
    batch_size: int = 10,
) -> ExtractionResult:
    """Ask the LLM to turn one batch of search results into leads.

    Returns a failed, empty result on any error; never raises.
    """
    prompt = build_lead_prompt(
        enhanced,
        filters,
        build_search_context(search_results),
        batch_index=batch_index,
        num_batches=num_batches,
        batch_size=batch_size,
    )

    try:
        response_text = await llm_complete(
            prompt=prompt,
            api_key_anthropic=config.anthropic_api_key,
            api_key_openai=config.openai_api_key,
            model_anthropic=config.extraction_model,
            model_openai=config.openai_extraction_model,
            max_tokens=config.extraction_max_tokens,
            timeout=config.llm_timeout,
        )
    except Exception as e:
        logger.error("Extraction failed for batch %d: %s", batch_index + 1, e)
        return ExtractionResult.failed()

    logger.debug("Batch %d response: %d chars", batch_index + 1, len(response_text))
    return parse_leads_response(response_text)
