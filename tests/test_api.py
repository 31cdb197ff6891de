from __future__ import annotations

import asyncio
import csv
import io
import json

import pytest
from fastapi.testclient import TestClient

from lead_finder import pipeline as pipeline_module
from lead_finder.models import ExtractionResult, Lead
from lead_finder.pipeline import LeadSearchPipeline
from lead_finder.web.app import app
from lead_finder.web.deps import get_pipeline
from lead_finder.web.routers.leads import stream_events


@pytest.fixture
def client(config):
    app.dependency_overrides[get_pipeline] = lambda: LeadSearchPipeline(config)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def no_upstream(monkeypatch):
    async def forbidden(*args, **kwargs):
        raise AssertionError("upstream must not be called")

    monkeypatch.setattr(pipeline_module, "search_tavily", forbidden)
    monkeypatch.setattr(pipeline_module, "search_ddg", forbidden)
    monkeypatch.setattr(pipeline_module, "extract_leads", forbidden)


def _ten_leads() -> list[Lead]:
    leads = [
        Lead.model_validate({
            "companyName": f"Restaurant {i}",
            "website": f"https://www.restaurant{i}.com/menu",
            "employeeCount": "10-50",
            "leadScore": 70 + i,
        })
        for i in range(10)
    ]
    leads[3].website = "techcrunch.com"
    return leads


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Lead Finder API is running"}


def test_home_page_renders(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Lead Finder" in response.text
    assert "Series A" in response.text


@pytest.mark.parametrize("query", ["", "   "])
def test_empty_query_makes_no_upstream_calls(client, no_upstream, query):
    response = client.post("/api/search-leads", json={"searchQuery": query, "filters": {}})

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "error": "Please enter a search query",
        "leads": [],
    }


def test_end_to_end_rewrites_source_website(client, monkeypatch, fake_search):
    async def fake_extract(enhanced, filters, search_results, config,
                           batch_index=0, num_batches=1, batch_size=10):
        assert search_results
        return ExtractionResult(success=True, leads=_ten_leads())

    monkeypatch.setattr(pipeline_module, "search_tavily", fake_search)
    monkeypatch.setattr(pipeline_module, "extract_leads", fake_extract)

    response = client.post(
        "/api/search-leads",
        json={"searchQuery": "restaurants in NYC", "filters": {}},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["totalFound"] == 10
    assert len(body["leads"]) == 10
    assert body["leads"][3]["website"] == "N/A"
    assert body["leads"][0]["website"] == "restaurant0.com"
    assert body["leads"][0]["companyName"] == "Restaurant 0"
    assert body["leads"][0]["leadScore"] == 70
    assert fake_search.calls[0] == "restaurants in NYC"


def test_filters_flow_into_enhanced_query(client, monkeypatch, fake_search):
    async def fake_extract(*args, **kwargs):
        return ExtractionResult(success=True, leads=[])

    monkeypatch.setattr(pipeline_module, "search_tavily", fake_search)
    monkeypatch.setattr(pipeline_module, "extract_leads", fake_extract)

    response = client.post("/api/search-leads", json={
        "searchQuery": "AI companies",
        "filters": {"industry": "AI/ML", "country": "Canada", "icp": "", "fundingStage": ""},
    })

    assert response.json() == {"success": True, "leads": [], "totalFound": 0}
    assert fake_search.calls[0] == "AI companies AI/ML in Canada"


def test_unhandled_error_returns_500(client, monkeypatch):
    async def exploding_run(self, enhanced, filters, num_batches=None, batch_size=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(LeadSearchPipeline, "run", exploding_run)

    response = client.post("/api/search-leads", json={"searchQuery": "AI", "filters": {}})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "boom"}


def test_export_csv(client):
    response = client.post("/api/export-csv", json={"leads": [
        {"companyName": "Acme", "description": 'Makes "smart", fast widgets', "leadScore": 88,
         "website": "acme.com", "employeeCount": "10-50"},
    ]})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=\"leads_" in response.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0][0] == "Company Name"
    assert rows[1][0] == "Acme"
    assert rows[1][1] == 'Makes "smart", fast widgets'
    assert rows[1][7] == "10-50"
    assert rows[1][8] == "88"


def _collect_stream(search_query, filters_json, pipeline):
    async def collect():
        return [e["data"] async for e in stream_events(search_query, filters_json, pipeline)]
    return asyncio.run(collect())


def test_stream_events_end_with_done(monkeypatch, fake_search, config):
    async def fake_extract(enhanced, filters, search_results, config,
                           batch_index=0, num_batches=1, batch_size=10):
        return ExtractionResult(success=True, leads=[
            Lead(company_name=f"Batch{batch_index} Co", website="techcrunch.com"),
        ])

    monkeypatch.setattr(pipeline_module, "search_tavily", fake_search)
    monkeypatch.setattr(pipeline_module, "extract_leads", fake_extract)

    messages = _collect_stream("AI startups", json.dumps({"country": "India"}), LeadSearchPipeline(config))

    assert messages[-1] == "[DONE]"
    events = [json.loads(m) for m in messages[:-1]]
    assert len(events) == 2
    assert {e["batch"] for e in events} == {1, 2}
    assert all(e["leads"][0]["website"] == "N/A" for e in events)
    assert fake_search.calls[0].startswith("AI startups in India")


def test_stream_empty_query(no_upstream, config):
    messages = _collect_stream("  ", "{}", LeadSearchPipeline(config))
    assert messages == [json.dumps({"error": "Please enter a search query"}), "[DONE]"]


def test_stream_malformed_filters(no_upstream, config):
    messages = _collect_stream("AI companies", "{not json", LeadSearchPipeline(config))

    assert len(messages) == 2
    assert json.loads(messages[0])["error"].startswith("Invalid filters")
    assert messages[1] == "[DONE]"
