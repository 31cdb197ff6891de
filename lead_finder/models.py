"""Pydantic data models for the lead search pipeline."""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

NOT_AVAILABLE = "N/A"

SignalType = Literal[
    "funding",
    "hiring",
    "product_launch",
    "expansion",
    "partnership",
    "press_mention",
    "acquisition",
    "regulatory_filing",
    "none",
]
SIGNAL_TYPES: tuple[str, ...] = get_args(SignalType)

# Short names the model sometimes uses instead of the canonical tags
_SIGNAL_ALIASES = {
    "product": "product_launch",
    "launch": "product_launch",
    "press": "press_mention",
    "regulatory": "regulatory_filing",
    "filing": "regulatory_filing",
}


class _CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class SearchFilters(_CamelModel):
    """Optional search constraints. Empty string means unconstrained."""
    icp: str = ""
    funding_stage: str = ""
    industry: str = ""
    country: str = ""
    timeframe: str = ""
    company_age: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_blank(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class SearchLeadsRequest(_CamelModel):
    """Body of POST /api/search-leads."""
    search_query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)

    @field_validator("search_query", mode="before")
    @classmethod
    def coerce_query(cls, v):
        return "" if v is None else v

    @field_validator("filters", mode="before")
    @classmethod
    def coerce_filters(cls, v):
        return {} if v is None else v


# ---------------------------------------------------------------------------
# Lead model
# ---------------------------------------------------------------------------

class Lead(_CamelModel):
    """One candidate company returned to the user.

    Fields the model omits fall back to defaults; keys outside the schema
    are kept and echoed back unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow",
    )

    company_name: str
    description: str = ""
    industry: str = ""
    country: str = ""
    employee_count: str = ""
    funding_stage: str = NOT_AVAILABLE
    funding_amount: str = NOT_AVAILABLE
    funding_date: str = NOT_AVAILABLE
    activity_date: str = NOT_AVAILABLE
    founded_year: str = NOT_AVAILABLE
    signal_type: SignalType = "none"
    signal_data: dict[str, Any] = Field(default_factory=dict)
    signal_date: str = NOT_AVAILABLE
    lead_score: int = 0
    website: str = NOT_AVAILABLE
    source: str = ""

    @field_validator("company_name", mode="before")
    @classmethod
    def require_name(cls, v):
        name = "" if v is None else str(v)
        if not name.strip():
            raise ValueError("companyName is required")
        return name

    @field_validator(
        "description", "industry", "country", "employee_count", "source",
        mode="before",
    )
    @classmethod
    def coerce_to_str(cls, v):
        if v is None:
            return ""
        return str(v)

    @field_validator(
        "funding_stage", "funding_amount", "funding_date", "activity_date",
        "founded_year", "signal_date", "website",
        mode="before",
    )
    @classmethod
    def coerce_optional_str(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return NOT_AVAILABLE
        return str(v)

    @field_validator("signal_type", mode="before")
    @classmethod
    def coerce_signal_type(cls, v):
        if not isinstance(v, str):
            return "none"
        tag = v.strip().lower().replace("-", "_").replace(" ", "_")
        tag = _SIGNAL_ALIASES.get(tag, tag)
        return tag if tag in SIGNAL_TYPES else "none"

    @field_validator("signal_data", mode="before")
    @classmethod
    def coerce_signal_data(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator("lead_score", mode="before")
    @classmethod
    def coerce_score(cls, v):
        if isinstance(v, bool) or v is None:
            return 0
        if isinstance(v, (int, float)):
            return int(v)
        try:
            return int(float(str(v).strip().rstrip("%")))
        except ValueError:
            return 0

    def to_wire(self) -> dict[str, Any]:
        """Serialise with camelCase keys, as the UI expects."""
        return self.model_dump(by_alias=True)


class ExportRequest(BaseModel):
    """Body of POST /api/export-csv."""
    leads: list[Lead] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pipeline models
# ---------------------------------------------------------------------------

class EnhancedQuery(BaseModel):
    """User query augmented with filter- and intent-derived terms."""
    text: str
    funding_intent: bool = False
    startup_intent: bool = False


class ExtractionResult(BaseModel):
    """Outcome of one LLM extraction call."""
    success: bool = False
    leads: list[Lead] = Field(default_factory=list)

    @classmethod
    def failed(cls) -> ExtractionResult:
        return cls(success=False, leads=[])


class BatchResult(BaseModel):
    """Outcome of one search -> extract batch, tagged with its position."""
    index: int
    success: bool = False
    leads: list[Lead] = Field(default_factory=list)
