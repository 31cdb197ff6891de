"""Configuration management via environment variables and .env file."""

from __future__ import annotations

import os
import sys

from dotenv import load_dotenv
from pydantic import BaseModel


class Config(BaseModel):
    """Application configuration loaded from environment."""

    # API keys (tavily optional, falls back to DuckDuckGo)
    tavily_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # LLM models
    extraction_model: str = "claude-sonnet-4-20250514"
    openai_extraction_model: str = "gpt-4o"
    extraction_max_tokens: int = 12000
    llm_timeout: int = 120  # seconds per LLM call

    # Search settings
    max_search_results: int = 10
    search_timeout: int = 30

    # Batching
    batch_size: int = 10       # Leads requested per batch
    search_batches: int = 5    # One-shot endpoint
    stream_batches: int = 2    # SSE endpoint (hosting platforms cap request time)

    # Web server
    web_host: str = "0.0.0.0"
    web_port: int = 3001
    log_level: str = "INFO"


def load_config() -> Config:
    """Load configuration from .env file and environment variables.

    Environment variables override .env values. Missing keys are reported
    but not fatal: without an LLM key every batch fails and the search
    returns no leads.
    """
    load_dotenv()

    tavily_key = os.getenv("TAVILY_API_KEY", "")
    anthropic_key = os.getenv("ANTHROPIC_API_KEY", "")
    openai_key = os.getenv("OPENAI_API_KEY", "")

    if not anthropic_key and not openai_key:
        print(
            "  Note: neither ANTHROPIC_API_KEY nor OPENAI_API_KEY is set, "
            "lead extraction will fail",
            file=sys.stderr,
        )
    if not tavily_key:
        print("  Note: TAVILY_API_KEY not set, using free DuckDuckGo search", file=sys.stderr)

    return Config(
        tavily_api_key=tavily_key,
        anthropic_api_key=anthropic_key,
        openai_api_key=openai_key,
        extraction_model=os.getenv("EXTRACTION_MODEL", "claude-sonnet-4-20250514"),
        openai_extraction_model=os.getenv("OPENAI_EXTRACTION_MODEL", "gpt-4o"),
        extraction_max_tokens=int(os.getenv("EXTRACTION_MAX_TOKENS", "12000")),
        llm_timeout=int(os.getenv("LLM_TIMEOUT", "120")),
        max_search_results=int(os.getenv("MAX_SEARCH_RESULTS", "10")),
        search_timeout=int(os.getenv("SEARCH_TIMEOUT", "30")),
        batch_size=int(os.getenv("BATCH_SIZE", "10")),
        search_batches=int(os.getenv("SEARCH_BATCHES", "5")),
        stream_batches=int(os.getenv("STREAM_BATCHES", "2")),
        web_host=os.getenv("HOST", "0.0.0.0"),
        web_port=int(os.getenv("PORT", "3001")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
