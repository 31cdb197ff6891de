"""Dependency injection for FastAPI: shared config and pipeline."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from lead_finder.config import Config, load_config
from lead_finder.pipeline import LeadSearchPipeline


@lru_cache
def get_config() -> Config:
    return load_config()


def get_pipeline(config: Config = Depends(get_config)) -> LeadSearchPipeline:
    return LeadSearchPipeline(config)
