"""Lead Finder: web search + LLM extraction of company leads."""

__version__ = "0.1.0"
