"""FastAPI application for Lead Finder."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from lead_finder.web.deps import get_config
from lead_finder.web.routers.leads import router as leads_router

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

FUNDING_STAGES = ["Pre-Seed", "Seed", "Series A", "Series B", "Series C", "Series D+"]
INDUSTRIES = [
    "SaaS", "FinTech", "HealthTech", "E-commerce", "AI/ML",
    "DeepTech", "EdTech", "CleanTech", "Cybersecurity", "Marketing Tech",
]
COUNTRIES = [
    "United States", "United Kingdom", "Canada", "Germany", "France",
    "India", "Singapore", "Australia", "Israel", "Netherlands",
]
ICP_OPTIONS = [
    "Enterprise (1000+ employees)",
    "Mid-Market (200-999 employees)",
    "SMB (50-199 employees)",
    "Startup (1-49 employees)",
]
EXAMPLE_SEARCHES = ["AI startups Series A", "Seed fintech companies", "Early-stage SaaS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown: configure logging from config."""
    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Lead Finder...")
    yield
    logger.info("Lead Finder shut down.")


app = FastAPI(
    title="Lead Finder",
    description="Search the web for company leads and extract them with an LLM",
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

app.include_router(leads_router, prefix="/api")


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {
        "funding_stages": FUNDING_STAGES,
        "industries": INDUSTRIES,
        "countries": COUNTRIES,
        "icp_options": ICP_OPTIONS,
        "example_searches": EXAMPLE_SEARCHES,
    })
