from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Grocery aisle an ingredient is shopped from."""
    PRODUCE = "Produce"
    MEAT_SEAFOOD = "Meat & Seafood"
    DELI = "Deli"
    BAKERY = "Bakery"
    FROZEN = "Frozen"
    PANTRY = "Pantry"
    DAIRY = "Dairy"
    BEVERAGES = "Beverages"


class ExtractionSource(str, Enum):
    """Which stage of the pipeline produced a recipe."""
    STRUCTURED_DATA = "structured_data"
    REGEX = "regex"
    LLM = "llm"


class Ingredient(BaseModel):
    """A single shopping-ready ingredient line"""
    name: str = Field(description="Cleaned ingredient name, without preparation words")
    amount: float = Field(default=1.0, ge=0, description="Decimal quantity, never a fraction or range")
    unit: str = Field(default="", description="Standardized unit, empty for count items")
    category: Category = Field(default=Category.PANTRY, description="Grocery category")
    checked: bool = False
    removed: bool = False


class Recipe(BaseModel):
    """Outcome of one extraction attempt for a source URL"""
    model_config = ConfigDict(frozen=True)

    source_url: str
    name: Optional[str] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    parsed: bool = False
    parsing_error: Optional[str] = None


class ParseResult(BaseModel):
    """What a single pipeline run hands back to its caller (and what gets cached)."""
    recipe: Recipe
    success: bool
    error: Optional[str] = None
    source: Optional[ExtractionSource] = None
    confidence_score: Optional[int] = None
    verification_score: Optional[int] = None
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def failure(cls, url: str, error: str) -> "ParseResult":
        """Build a failed result with an unparsed recipe carrying the error."""
        return cls(
            recipe=Recipe(source_url=url, parsed=False, parsing_error=error),
            success=False,
            error=error,
        )


class ValidationOutcome(BaseModel):
    is_valid: bool
    reason: str


class VerificationOutcome(BaseModel):
    verified_ingredients: List[Ingredient] = Field(default_factory=list)
    unverified_ingredients: List[Ingredient] = Field(default_factory=list)
    verification_score: int = Field(default=0, ge=0, le=100)
    notes: List[str] = Field(default_factory=list)


class CacheEntry(BaseModel):
    key: str
    value: ParseResult
    inserted_at: datetime = Field(default_factory=datetime.now)


# ═══════════════════════════════════════════════════════════════════
# LLM CONTRACT
# ═══════════════════════════════════════════════════════════════════

class LLMIngredient(BaseModel):
    """One ingredient entry as the LLM is asked to return it"""
    name: str = Field(description="Ingredient name without preparation words")
    amount: float = Field(default=1.0, description="Decimal amount exactly as written in the recipe; null means 1")
    unit: str = Field(default="", description="Standardized unit or empty string; null means no unit")
    category: str = Field(description="One of the eight grocery categories")

    @field_validator("amount", mode="before")
    @classmethod
    def default_missing_amount(cls, value):
        return 1.0 if value is None else value

    @field_validator("unit", mode="before")
    @classmethod
    def empty_missing_unit(cls, value):
        return "" if value is None else value


class LLMRecipe(BaseModel):
    """Strict JSON object the LLM must answer with"""
    recipeName: str = Field(default="", description="Name of the recipe")
    ingredients: List[dict] = Field(description="List of ingredient objects")


class LLMEnvelope(BaseModel):
    """Response envelope of the LLM backend"""
    success: bool = False
    content: Optional[str] = None
    error: Optional[str] = None
