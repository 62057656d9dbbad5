"""
recipe_pipeline package for turning batches of recipe URLs into ingredient lists.
"""

from .batch import BatchRunner, BatchSummary, IngredientCollector
from .cache import ParseResultCache, cache_key
from .pipeline import RecipePipeline
from .settings import PipelineSettings, load_settings
from .stats import PerformanceStats

__all__ = [
    "BatchRunner",
    "BatchSummary",
    "IngredientCollector",
    "ParseResultCache",
    "PerformanceStats",
    "PipelineSettings",
    "RecipePipeline",
    "cache_key",
    "load_settings",
]
