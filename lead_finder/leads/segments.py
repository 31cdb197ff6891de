"""Company-size (ICP) segment matching on free-text employee counts."""

from __future__ import annotations

import math
import re

# (label substring in the filter value, min employees, max employees)
SEGMENTS: list[tuple[str, float, float]] = [
    ("Enterprise", 1000, math.inf),
    ("Mid-Market", 200, 999),
    ("SMB", 50, 199),
    ("Startup", 1, 49),
]

# "1,000" / "5k" / "10.5K" style numbers
_NUMBER = re.compile(r"(\d+(?:,\d{3})*(?:\.\d+)?)\s*([kK])?")
_YEAR = re.compile(r"(?:19|20)\d\d")
# What may follow a 4-digit number that is a headcount rather than a year
_COUNT_CONTEXT = re.compile(r"\s*(?:\+|-|–|to\b|employees|employee|staff|people|emp)", re.IGNORECASE)


def segment_range(icp: str) -> tuple[float, float] | None:
    """Return the employee range for an ICP filter value, or None if unknown.

    Filter values are labels such as "SMB (50-199 employees)".
    """
    for label, low, high in SEGMENTS:
        if label.lower() in icp.lower():
            return low, high
    return None


def parse_employee_count(text: str) -> tuple[float, float] | None:
    """Parse an employee count like "10-50", "1,000+" or "5k" into (low, high).

    Year-like numbers ("since 2019") are ignored when the text has another
    number, unless a range dash, a "+" or a headcount word sits next to them.
    Returns None when the text carries no number.
    """
    text = text or ""
    numbers = []
    years = []
    for match in _NUMBER.finditer(text):
        digits, thousands = match.groups()
        value = float(digits.replace(",", ""))
        if thousands:
            value *= 1000
        if not thousands and _looks_like_year(text, match):
            years.append(value)
        else:
            numbers.append(value)

    numbers = numbers or years
    if not numbers:
        return None

    low, high = min(numbers), max(numbers)
    if "+" in text:
        high = math.inf
    return low, high


def matches_segment(employee_count: str, icp: str) -> bool:
    """True when the lead's employee range overlaps the ICP bucket.

    Unknown ICP values never exclude a lead.
    """
    bucket = segment_range(icp)
    if bucket is None:
        return True

    parsed = parse_employee_count(employee_count)
    if parsed is None:
        return False

    low, high = parsed
    return low <= bucket[1] and high >= bucket[0]


def _looks_like_year(text: str, match: re.Match) -> bool:
    if not _YEAR.fullmatch(match.group(1)):
        return False
    before = text[:match.start()].rstrip()
    if before.endswith(("-", "–", "to")):
        return False
    return not _COUNT_CONTEXT.match(text, match.end())
