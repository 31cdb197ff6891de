"""LLM prompt templates for lead extraction from web search results."""

from __future__ import annotations

from datetime import date, timedelta

from lead_finder.models import EnhancedQuery, SearchFilters

# Rolling windows accepted by the timeframe filter, in days
TIMEFRAME_WINDOWS: dict[str, int] = {
    "24h": 1,
    "48h": 2,
    "7d": 7,
    "30d": 30,
    "90d": 90,
}

# (trigger words in the query, industry filter value, publications)
INDUSTRY_SOURCES: list[tuple[tuple[str, ...], str, str]] = [
    (("fintech",), "FinTech", "FinTech Futures, Finextra, The Fintech Times, Banking Dive"),
    (("health",), "HealthTech", "MedCity News, Healthcare IT News, MobiHealthNews, Becker's Hospital Review"),
    (("saas",), "SaaS", "SaaS Mag, G2, Capterra, Software World"),
    (("restaurant", "food"), "", "QSR Magazine, Restaurant Business, Nation's Restaurant News, FSR Magazine"),
    (("retail", "store"), "", "Retail Dive, Chain Store Age, Retail TouchPoints, Progressive Grocer"),
    (("manufacturing",), "", "Manufacturing.net, Industry Week, Modern Manufacturing, Plant Engineering"),
    (("construction", "contractor"), "", "ENR, Construction Dive, Builder Magazine, Contractor Magazine"),
    (("automotive", "car"), "", "Automotive News, WardsAuto, Auto Remarketing"),
]

NO_RESULTS_CONTEXT = "No search results available."


# ---------------------------------------------------------------------------
# Static sections
# ---------------------------------------------------------------------------

WEBSITE_RULES = """================================================================================
CRITICAL REMINDER

website = THE COMPANY'S OWN WEBSITE - ROOT DOMAIN ONLY
  CORRECT: "openai.com", "stripe.com", "acme-ai.com"
  WRONG:   "https://openai.com", "www.stripe.com", "acme-ai.com/about"

source = WHERE YOU FOUND THEM - the FULL URL of the article or database page
  Example: "https://techcrunch.com/2024/03/01/acme-raises-5m"

Domain-only formatting:
- No protocols (http://, https://)
- No "www." prefix
- No paths (/blog, /about, /news/article)
- No query params or fragments (?id=123, #team)

NEVER put a news site, database, social network or blog platform in the website
field (techcrunch.com, crunchbase.com, linkedin.com, medium.com, wikipedia.org...).
Placeholder domains (example.com, company.com) are never acceptable.
If you cannot find the company's homepage, use "N/A" - it is better than a guess.
================================================================================"""

ROLE = """You are a sales lead researcher finding relevant companies based on search criteria.

Your job is to find companies that match what the user is looking for, which may include:
- Recently funded companies (if the user asks for funding)
- Companies of any age (new startups to established businesses)
- Companies in specific industries or locations
- Companies matching specific criteria (size, type, stage)

DO NOT require that companies have recent funding unless the user specifically asks for it."""

SIGNAL_TAXONOMY = """**BUSINESS SIGNALS**

A signal is evidence that a company is active or growing. Tag every lead with exactly
one signalType from this list:

- "funding": raised capital or announced a funding round
- "hiring": actively hiring, job postings, recruiting drives
- "product_launch": launched a product or feature (Product Hunt, launch posts)
- "expansion": new office or location, entered a new market
- "partnership": strategic partnership or integration
- "press_mention": featured in publications, won awards
- "acquisition": acquired another company or was acquired
- "regulatory_filing": SEC filings (Form D, Reg D), IPO preparation
- "none": no specific signal found

Put the signal details in signalData (e.g. stage, amount, investors, positions,
product name, partner) and the date of the signal in signalDate."""

SCORING_RUBRIC = """**LEAD SCORE (integer 0-100)**

1. Match with search criteria (40 max): industry +15, location +10, company size +10,
   overall relevance +5
2. Signal strength and relevance (30 max): a signal the user asked for scores highest;
   for general searches with no signal use +15
3. Signal recency (20 max): last 48 hours +20, 7 days +18, 30 days +15, 90 days +12,
   6 months +8, 1 year +5, older +2, no date +5
4. Data quality (10 max): all fields complete +10, 1-2 N/A +8, 3-4 N/A +6, 5+ N/A +3"""

OUTPUT_FORMAT = """Return ONLY valid JSON (no markdown, no explanations):

{{
  "leads": [
    {{
      "companyName": "Exact name from results",
      "description": "Specific description of what they do",
      "fundingStage": {funding_stage_example},
      "fundingAmount": {funding_amount_example},
      "fundingDate": {funding_date_example},
      "activityDate": "2024-11-25" or "N/A",
      "foundedYear": "2010" or "N/A",
      "signalType": "funding",
      "signalData": {{"stage": "Seed", "amount": "$5M", "investors": ["Acme Ventures"]}},
      "signalDate": "March 2024",
      "industry": "AI/ML",
      "country": "United States",
      "website": "acme-ai.com",
      "employeeCount": "10-50",
      "source": "https://techcrunch.com/2024/03/01/acme-raises-5m",
      "leadScore": 85
    }}
  ]
}}"""


LEAD_PROMPT = """{website_rules}

{role}

Search results from the web:
{search_context}

TARGET: Find exactly {batch_size} companies matching the criteria below.

**SEARCH CRITERIA**
- Query: "{query}"
- Funding Stage: {funding_stage}
- Industry: {industry}
- Country: {country}
- Company Size: {icp}
- {funding_date_rule}

{batch_instructions}

**QUERY TYPE**
- Is this query about STARTUPS? {startup_flag}
- Is this query about FUNDING? {funding_flag}
- Query type: {query_type}

{funding_section}

{timeframe_section}

{company_age_section}

{industry_sources}

{signal_taxonomy}

{scoring_rubric}

{output_format}

CRITICAL: {batch_size} companies, all criteria matched, unique companies, real websites or "N/A"."""


# ---------------------------------------------------------------------------
# Conditional sections
# ---------------------------------------------------------------------------

def _or_any(value: str, note: str) -> str:
    return f"{value} <- {note}" if value else "Any"


def _funding_section(funding_required: bool) -> str:
    if funding_required:
        return (
            "**FUNDING FIELDS**\n"
            "This IS a funding-focused search: fundingStage, fundingAmount and fundingDate "
            "must have real values, and funding must be from 2024 or 2025."
        )
    return (
        "**FUNDING FIELDS**\n"
        "Funding is OPTIONAL for this search. \"N/A\" is acceptable for fundingStage, "
        "fundingAmount and fundingDate; bootstrapped and self-funded companies are fine."
    )


def _timeframe_section(timeframe: str, today: date) -> str:
    label = timeframe or "Any Time"
    header = f"**TIMEFRAME**: {label} (today is {today.isoformat()})"

    if timeframe in TIMEFRAME_WINDOWS:
        cutoff = today - timedelta(days=TIMEFRAME_WINDOWS[timeframe])
        return (
            f"{header}\n"
            f"- Include ONLY activity, announcements or filings dated {cutoff.isoformat()} or later\n"
            "- Be very strict about dates; set activityDate for every lead\n"
            "- Prefer press releases, news and company blogs with timestamps"
        )
    if timeframe == "before-2015":
        return (
            f"{header}\n"
            "- Find companies FOUNDED before 2015 (10+ years of history)\n"
            "- Do NOT require recent activity; set foundedYear for every lead"
        )
    if timeframe and timeframe != "Any Time":
        return (
            f"{header}\n"
            f"- Include only companies or activity from {timeframe}\n"
            "- Verify the year before including a company"
        )
    return (
        f"{header}\n"
        "- No time restriction: include companies and activity from any date\n"
        "- Do not favour recent over old; focus on relevance"
    )


_AGE_RULES = {
    "new": ("NEW companies (0-2 years)", "founded {y2} or later"),
    "growing": ("GROWING companies (3-5 years)", "founded {y5}-{y3}"),
    "established": ("ESTABLISHED companies (6-10 years)", "founded {y10}-{y6}"),
    "mature": ("MATURE companies (10+ years)", "founded {y11} or earlier"),
}


def _company_age_section(company_age: str, today: date) -> str:
    header = f"**COMPANY AGE**: {company_age or 'Any'}"
    rule = _AGE_RULES.get(company_age.lower()) if company_age else None
    if rule is None:
        return (
            f"{header}\n"
            "- Include companies of all ages; mix new startups with mature businesses"
        )

    years = {f"y{n}": today.year - n for n in (2, 3, 5, 6, 10, 11)}
    description, window = rule
    return (
        f"{header}\n"
        f"- Find {description}: {window.format(**years)}\n"
        "- Company age is about WHEN THE COMPANY WAS FOUNDED, not when it raised money\n"
        "- Set foundedYear for every lead"
    )


def _industry_sources(query: str, industry: str) -> str:
    lowered = query.lower()
    lines = [
        f"- {publications}"
        for triggers, industry_value, publications in INDUSTRY_SOURCES
        if (industry_value and industry == industry_value)
        or any(trigger in lowered for trigger in triggers)
    ]
    if not lines:
        return ""
    return "**INDUSTRY SOURCES WORTH CHECKING**\n" + "\n".join(lines)


def _batch_instructions(batch_index: int, num_batches: int, batch_size: int) -> str:
    if batch_index == 0:
        return ""
    return (
        f"**BATCH {batch_index + 1} OF {num_batches}**\n"
        "Previous batches already returned other companies. "
        f"You MUST return {batch_size} DIFFERENT companies: look for lesser-known "
        "companies, other regions or sub-categories, and other sources."
    )


def _query_type(enhanced: EnhancedQuery) -> str:
    if enhanced.startup_intent:
        return "STARTUP-FOCUSED"
    if enhanced.funding_intent:
        return "FUNDING-FOCUSED"
    return "GENERAL BUSINESS SEARCH - do NOT require startup status or funding"


def build_lead_prompt(
    enhanced: EnhancedQuery,
    filters: SearchFilters,
    search_context: str,
    batch_index: int = 0,
    num_batches: int = 1,
    batch_size: int = 10,
    today: date | None = None,
) -> str:
    """Assemble the full extraction prompt for one batch."""
    today = today or date.today()
    funding_required = enhanced.funding_intent or bool(filters.funding_stage)

    if funding_required:
        examples = {
            "funding_stage_example": '"Seed"',
            "funding_amount_example": '"$5M"',
            "funding_date_example": '"March 2024"',
        }
        funding_date_rule = "Funding Date: 2024 or 2025 ONLY (the user is searching for funding)"
    else:
        examples = {
            "funding_stage_example": '"Seed" or "N/A"',
            "funding_amount_example": '"$5M" or "N/A"',
            "funding_date_example": '"March 2024" or "N/A"',
        }
        funding_date_rule = "Funding Date: any year, or N/A (funding is OPTIONAL for this search)"

    return LEAD_PROMPT.format(
        website_rules=WEBSITE_RULES,
        role=ROLE,
        search_context=search_context or NO_RESULTS_CONTEXT,
        batch_size=batch_size,
        query=enhanced.text,
        funding_stage=_or_any(filters.funding_stage, "EXACT MATCH (filter overrides query)"),
        industry=_or_any(filters.industry, "EXACT industry, no drift to adjacent ones"),
        country=_or_any(filters.country, "EXACT location match"),
        icp=filters.icp or "Any",
        funding_date_rule=funding_date_rule,
        batch_instructions=_batch_instructions(batch_index, num_batches, batch_size),
        startup_flag="YES" if enhanced.startup_intent else "NO",
        funding_flag="YES" if enhanced.funding_intent else "NO",
        query_type=_query_type(enhanced),
        funding_section=_funding_section(funding_required),
        timeframe_section=_timeframe_section(filters.timeframe, today),
        company_age_section=_company_age_section(filters.company_age, today),
        industry_sources=_industry_sources(enhanced.text, filters.industry),
        signal_taxonomy=SIGNAL_TAXONOMY,
        scoring_rubric=SCORING_RUBRIC,
        output_format=OUTPUT_FORMAT.format(**examples),
    )
