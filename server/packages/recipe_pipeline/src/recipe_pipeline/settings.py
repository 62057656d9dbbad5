"""Runtime settings for the recipe pipeline, read from the environment."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from ingredient_extractor.constants import (
    CONFIDENCE_THRESHOLD,
    MAX_CORPUS_CHARS,
    MAX_CORPUS_TOKENS,
    MIN_REGEX_INGREDIENTS,
    SECTION_RUN_CAP,
    VERIFICATION_ACCEPT_THRESHOLD,
    VERIFICATION_REJECT_THRESHOLD,
    VERIFICATION_WARN_THRESHOLD,
)
from ingredient_extractor.providers.llm_client import DEFAULT_LLM_ENDPOINT, DEFAULT_LLM_TIMEOUT
from page_fetcher.fetcher import DEFAULT_TIMEOUT

DEFAULT_CACHE_CAPACITY = 50
DEFAULT_BATCH_SUCCESS_THRESHOLD = 0.5


class PipelineSettings(BaseModel):
    """Every tunable of a pipeline run"""
    llm_endpoint: str = Field(default=DEFAULT_LLM_ENDPOINT, description="LLM backend URL")
    llm_api_key: Optional[str] = Field(default=None, description="Bearer token for the LLM backend")
    fetch_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    llm_timeout: float = Field(default=DEFAULT_LLM_TIMEOUT, gt=0)
    cache_capacity: int = Field(default=DEFAULT_CACHE_CAPACITY, ge=1)
    confidence_threshold: int = Field(default=CONFIDENCE_THRESHOLD, ge=0, le=100)
    verification_reject_threshold: int = Field(default=VERIFICATION_REJECT_THRESHOLD, ge=0, le=100)
    verification_warn_threshold: int = Field(default=VERIFICATION_WARN_THRESHOLD, ge=0, le=100)
    verification_accept_threshold: int = Field(default=VERIFICATION_ACCEPT_THRESHOLD, ge=0, le=100)
    min_regex_ingredients: int = Field(default=MIN_REGEX_INGREDIENTS, ge=1)
    max_corpus_chars: int = Field(default=MAX_CORPUS_CHARS, ge=1)
    max_corpus_tokens: int = Field(default=MAX_CORPUS_TOKENS, ge=1)
    section_run_cap: int = Field(default=SECTION_RUN_CAP, ge=1)
    batch_success_threshold: float = Field(default=DEFAULT_BATCH_SUCCESS_THRESHOLD, ge=0, le=1)
    allow_partial_regex: bool = Field(default=True, description="Use partial regex results when the LLM fails")

    @model_validator(mode="after")
    def _check_verification_order(self) -> "PipelineSettings":
        if not (
            self.verification_reject_threshold
            <= self.verification_warn_threshold
            <= self.verification_accept_threshold
        ):
            raise ValueError("Verification thresholds must satisfy reject <= warn <= accept")
        return self

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """Build settings from RECIPE_* environment variables, keeping defaults for unset ones."""
        values = {}
        env_map = {
            "llm_endpoint": "RECIPE_LLM_ENDPOINT",
            "llm_api_key": "RECIPE_LLM_API_KEY",
            "fetch_timeout": "RECIPE_FETCH_TIMEOUT",
            "llm_timeout": "RECIPE_LLM_TIMEOUT",
            "cache_capacity": "RECIPE_CACHE_CAPACITY",
            "confidence_threshold": "RECIPE_CONFIDENCE_THRESHOLD",
            "verification_reject_threshold": "RECIPE_VERIFICATION_REJECT",
            "verification_warn_threshold": "RECIPE_VERIFICATION_WARN",
            "verification_accept_threshold": "RECIPE_VERIFICATION_ACCEPT",
        }
        for field_name, env_var in env_map.items():
            value = os.getenv(env_var)
            if value:
                values[field_name] = value
        return cls(**values)


def load_settings() -> PipelineSettings:
    """Load a .env file if there is one, then read the settings from the environment."""
    load_dotenv()
    return PipelineSettings.from_env()
