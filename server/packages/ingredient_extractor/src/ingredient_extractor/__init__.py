"""Ingredient extractor package for turning recipe page HTML into a shopping-ready ingredient list."""

from .exceptions import (
    AmountParseError,
    ExtractionError,
    FetchFailedError,
    InvalidURLError,
    LLMError,
    LowConfidenceError,
    LowVerificationError,
    NoContentFoundError,
    ParseFailedError,
)
from .models.recipe import (
    CacheEntry,
    Category,
    ExtractionSource,
    Ingredient,
    ParseResult,
    Recipe,
    ValidationOutcome,
    VerificationOutcome,
)
from .providers.llm_client import LLMClient
from .services.amounts import parse_amount, parse_amount_or_default
from .services.llm_fallback import LLMParseOutcome, extract_with_llm, parse_llm_response
from .services.locator import CorpusStrategy, LocatedCorpus, locate_ingredient_corpus
from .services.normalizer import format_ingredient, normalize_ingredient, normalize_ingredients
from .services.regex_parser import parse_corpus, parse_ingredient_line
from .services.structured_data import extract_recipe_title, extract_structured_recipe, is_likely_recipe_page
from .services.validation import calculate_confidence_score, validate_ingredient, validate_ingredients
from .services.verification import VerificationBand, classify_verification, verify_ingredients

__all__ = [
    "AmountParseError",
    "CacheEntry",
    "Category",
    "CorpusStrategy",
    "ExtractionError",
    "ExtractionSource",
    "FetchFailedError",
    "Ingredient",
    "InvalidURLError",
    "LLMClient",
    "LLMError",
    "LLMParseOutcome",
    "LocatedCorpus",
    "LowConfidenceError",
    "LowVerificationError",
    "NoContentFoundError",
    "ParseFailedError",
    "ParseResult",
    "Recipe",
    "ValidationOutcome",
    "VerificationBand",
    "VerificationOutcome",
    "calculate_confidence_score",
    "classify_verification",
    "extract_recipe_title",
    "extract_structured_recipe",
    "extract_with_llm",
    "format_ingredient",
    "is_likely_recipe_page",
    "locate_ingredient_corpus",
    "normalize_ingredient",
    "normalize_ingredients",
    "parse_amount",
    "parse_amount_or_default",
    "parse_corpus",
    "parse_ingredient_line",
    "parse_llm_response",
    "validate_ingredient",
    "validate_ingredients",
    "verify_ingredients",
]
