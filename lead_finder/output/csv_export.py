"""CSV export of lead lists."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path

from lead_finder.models import Lead

CSV_COLUMNS: list[tuple[str, str]] = [
    ("Company Name", "company_name"),
    ("Description", "description"),
    ("Funding Stage", "funding_stage"),
    ("Funding Amount", "funding_amount"),
    ("Funding Date", "funding_date"),
    ("Industry", "industry"),
    ("Country", "country"),
    ("Company Size", "employee_count"),
    ("Lead Score", "lead_score"),
    ("Source", "source"),
    ("Website", "website"),
]


def leads_to_csv(leads: list[Lead]) -> str:
    """Render leads as CSV text with a header row.

    Fields containing commas, quotes or newlines are double-quoted with
    embedded quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([header for header, _ in CSV_COLUMNS])
    for lead in leads:
        writer.writerow([getattr(lead, attr) for _, attr in CSV_COLUMNS])
    return buffer.getvalue()


def default_filename(today: date | None = None) -> str:
    return f"leads_{(today or date.today()).isoformat()}.csv"


def write_csv(leads: list[Lead], output_path: str | Path) -> Path:
    """Write leads to a UTF-8 CSV file and return its path."""
    path = Path(output_path)
    path.write_text(leads_to_csv(leads), encoding="utf-8")
    return path
