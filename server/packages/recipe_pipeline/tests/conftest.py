from unittest.mock import AsyncMock, MagicMock

import pytest

from page_fetcher import PageContent
from recipe_pipeline.settings import PipelineSettings


@pytest.fixture
def settings():
    """Default settings, independent of the RECIPE_* variables of the machine running the tests."""
    return PipelineSettings(
        confidence_threshold=70,
        verification_reject_threshold=30,
        verification_warn_threshold=60,
        verification_accept_threshold=80,
    )


@pytest.fixture
def make_fetcher():
    """Build a fetcher mock serving one page for every URL."""
    def _make(html: str, text: str = "") -> MagicMock:
        fetcher = MagicMock()
        fetcher.fetch = AsyncMock(side_effect=lambda url: PageContent(
            url=url,
            final_url=url,
            status_code=200,
            html=html,
            text=text,
        ))
        fetcher.aclose = AsyncMock()
        return fetcher
    return _make


@pytest.fixture
def make_llm():
    def _make(content=None, error=None) -> MagicMock:
        client = MagicMock()
        client.complete = AsyncMock(return_value=content, side_effect=error)
        return client
    return _make

