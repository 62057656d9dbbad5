from .recipe import (
    CacheEntry,
    Category,
    ExtractionSource,
    Ingredient,
    ParseResult,
    Recipe,
    ValidationOutcome,
    VerificationOutcome,
)

__all__ = [
    "CacheEntry",
    "Category",
    "ExtractionSource",
    "Ingredient",
    "ParseResult",
    "Recipe",
    "ValidationOutcome",
    "VerificationOutcome",
]
