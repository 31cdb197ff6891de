from __future__ import annotations

import pytest

from lead_finder.config import Config
from lead_finder.models import ExtractionResult, Lead


@pytest.fixture
def config() -> Config:
    return Config(
        tavily_api_key="tvly-test",
        anthropic_api_key="sk-ant-test",
        search_batches=5,
        stream_batches=2,
        batch_size=10,
    )


def make_lead(name: str, **fields) -> Lead:
    data = {"companyName": name, "website": "N/A", "employeeCount": "10-50"}
    data.update(fields)
    return Lead.model_validate(data)


@pytest.fixture
def fake_search():
    """Search stub that records queries and returns one result."""
    calls: list[str] = []

    async def _search(query, api_key, num_results=10, timeout=30):
        calls.append(query)
        return [{"title": "Result", "url": "https://news.example.org/a", "content": "snippet"}]

    _search.calls = calls
    return _search


def extraction_stub(per_batch: dict[int, list[str] | None]):
    """Build an extract_leads stand-in.

    per_batch maps batch index -> company names; None means the batch fails.
    Batches not listed return no leads.
    """

    async def _extract(enhanced, filters, search_results, config,
                       batch_index=0, num_batches=1, batch_size=10):
        names = per_batch.get(batch_index, [])
        if names is None:
            return ExtractionResult.failed()
        return ExtractionResult(success=True, leads=[make_lead(n) for n in names])

    return _extract
