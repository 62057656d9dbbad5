"""
Concurrent batch processing of recipe URLs.

All URLs run at once; each run is independent, a failing URL neither cancels
its siblings nor is retried. Ingredients of successful runs are appended in
completion order, so the merged list order can differ between two runs of
the same batch.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from ingredient_extractor.models.recipe import Ingredient, ParseResult

from .pipeline import RecipePipeline
from .settings import DEFAULT_BATCH_SUCCESS_THRESHOLD

logger = logging.getLogger(__name__)


class IngredientCollector:
    """Shared ingredient list that concurrent runs append to."""

    def __init__(self):
        self._ingredients: List[Ingredient] = []
        self._lock = asyncio.Lock()

    async def add(self, ingredients: Iterable[Ingredient]) -> None:
        async with self._lock:
            self._ingredients.extend(ingredients)

    @property
    def ingredients(self) -> List[Ingredient]:
        return list(self._ingredients)

    def __len__(self) -> int:
        return len(self._ingredients)


class BatchSummary(BaseModel):
    """Aggregate outcome of a batch."""
    total: int
    succeeded: int
    failed: int
    success_threshold: float = DEFAULT_BATCH_SUCCESS_THRESHOLD
    errors: Dict[str, str] = Field(default_factory=dict, description="URL -> error message")
    results: List[ParseResult] = Field(default_factory=list, description="Results in completion order")

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 0.0

    @property
    def is_acceptable(self) -> bool:
        """True when at least the threshold share of URLs succeeded (boundary included)."""
        return self.total > 0 and self.success_rate >= self.success_threshold

    def failure_message(self) -> str:
        if self.failed == 0:
            return ""
        noun = "recipe" if self.total == 1 else "recipes"
        return f"Failed to import {self.failed} of {self.total} {noun}"


class BatchRunner:
    """Fans a list of URLs out to the pipeline and gathers the results."""

    def __init__(
        self,
        pipeline: RecipePipeline,
        collector: Optional[IngredientCollector] = None,
        success_threshold: Optional[float] = None,
    ):
        self.pipeline = pipeline
        self.collector = collector if collector is not None else IngredientCollector()
        if success_threshold is None:
            success_threshold = pipeline.settings.batch_success_threshold
        self.success_threshold = success_threshold
        self._completed: List[Tuple[str, ParseResult]] = []

    async def _run_one(self, url: str) -> None:
        try:
            result = await self.pipeline.parse(url)
        except Exception as e:
            # a run never aborts its siblings
            logger.exception(f"Unexpected error while parsing {url}")
            result = ParseResult.failure(url, f"Unexpected error: {e}")
        if result.success:
            await self.collector.add(result.recipe.ingredients)
            logger.info(f"Imported {len(result.recipe.ingredients)} ingredients from {url}")
        else:
            logger.warning(f"Import failed for {url}: {result.error}")
        self._completed.append((url, result))

    async def run(self, urls: List[str]) -> BatchSummary:
        """
        Process every URL concurrently.

        Args:
            urls: Recipe URLs submitted together

        Returns:
            BatchSummary with counts, per-URL errors and the results
        """
        self._completed = []
        logger.info(f"Processing batch of {len(urls)} URLs")
        await asyncio.gather(*(self._run_one(url) for url in urls))

        errors = {url: result.error or "Unknown error" for url, result in self._completed if not result.success}
        succeeded = sum(1 for _, result in self._completed if result.success)
        summary = BatchSummary(
            total=len(urls),
            succeeded=succeeded,
            failed=len(urls) - succeeded,
            success_threshold=self.success_threshold,
            errors=errors,
            results=[result for _, result in self._completed],
        )
        logger.info(f"Batch done: {summary.succeeded}/{summary.total} succeeded")
        return summary
