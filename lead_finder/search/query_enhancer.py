"""Keyword-driven enhancement of the user's search query."""

from __future__ import annotations

from lead_finder.models import EnhancedQuery, SearchFilters

FUNDING_KEYWORDS = [
    "funded",
    "funding",
    "raised",
    "investment",
    "series",
    "seed",
    "venture",
    "capital",
]

STARTUP_KEYWORDS = ["startup", "startups"]

FUNDING_SUFFIX = "funding investment raised capital 2024 2025"
STARTUP_SUFFIX = "startup entrepreneurship"

EMPTY_QUERY_MESSAGE = "Please enter a search query"


class EmptyQueryError(ValueError):
    """Raised when the search query is blank."""

    def __init__(self, message: str = EMPTY_QUERY_MESSAGE):
        super().__init__(message)


def enhance_query(raw_query: str | None, filters: SearchFilters) -> EnhancedQuery:
    """Append filter- and intent-derived terms to the user's query.

    Terms are only ever appended, in this order: industry, "in <country>",
    funding stage + funding terms (funding searches only), startup terms
    (startup searches only). The user's own words are never reordered.

    e.g. "Seed fintech companies" -> "Seed fintech companies funding investment raised capital 2024 2025"
    """
    query = (raw_query or "").strip()
    if not query:
        raise EmptyQueryError()

    lowered = query.lower()
    funding_intent = (
        any(keyword in lowered for keyword in FUNDING_KEYWORDS)
        or bool(filters.funding_stage)
    )
    startup_intent = any(keyword in lowered for keyword in STARTUP_KEYWORDS)

    parts = [query]
    if filters.industry:
        parts.append(filters.industry)
    if filters.country:
        parts.append(f"in {filters.country}")
    if funding_intent:
        if filters.funding_stage:
            parts.append(filters.funding_stage)
        parts.append(FUNDING_SUFFIX)
    if startup_intent:
        parts.append(STARTUP_SUFFIX)

    return EnhancedQuery(
        text=" ".join(parts),
        funding_intent=funding_intent,
        startup_intent=startup_intent,
    )
