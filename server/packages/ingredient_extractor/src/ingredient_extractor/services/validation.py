"""
Validator & confidence scorer.

Each ingredient is checked on its own; the confidence score then rates the
list as a whole:

    100
    - 10 per invalid ingredient
    - 20 if fewer than 3 ingredients      (likely under-extraction)
    - 30 if more than 50 ingredients      (likely over-extraction)
    + 10 if between 5 and 20 ingredients  (typical recipe)
    +  5 if 2+ pantry staples are present
    clamped to [0, 100]
"""

import logging
from typing import Iterable, List, Optional, Sequence

from ..constants import MAX_INGREDIENT_AMOUNT
from ..models.recipe import Ingredient, ValidationOutcome
from .vocabulary import NON_INGREDIENT_RE, PANTRY_STAPLES, VALID_UNITS

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
FEW_INGREDIENTS = 3
MANY_INGREDIENTS = 50
TYPICAL_RANGE = (5, 20)
MIN_STAPLES = 2


def validate_ingredient(ingredient: Ingredient) -> ValidationOutcome:
    """Check one ingredient's name, amount and unit."""
    name = ingredient.name.strip()
    if len(name) < MIN_NAME_LENGTH:
        return ValidationOutcome(is_valid=False, reason=f"Name too short: '{name}'")

    match = NON_INGREDIENT_RE.search(name)
    if match:
        return ValidationOutcome(is_valid=False, reason=f"Name contains non-ingredient word '{match.group(0)}'")

    if ingredient.amount <= 0:
        return ValidationOutcome(is_valid=False, reason=f"Non-positive amount: {ingredient.amount}")
    if ingredient.amount > MAX_INGREDIENT_AMOUNT:
        return ValidationOutcome(is_valid=False, reason=f"Implausibly large amount: {ingredient.amount}")

    unit = ingredient.unit.strip().lower()
    if unit and unit not in VALID_UNITS:
        return ValidationOutcome(is_valid=False, reason=f"Unrecognized unit: '{ingredient.unit}'")

    return ValidationOutcome(is_valid=True, reason="ok")


def validate_ingredients(ingredients: Iterable[Ingredient]) -> List[ValidationOutcome]:
    return [validate_ingredient(ingredient) for ingredient in ingredients]


def count_pantry_staples(ingredients: Iterable[Ingredient]) -> int:
    """Number of distinct staples that appear inside at least one ingredient name."""
    names = [ingredient.name.lower() for ingredient in ingredients]
    return sum(1 for staple in PANTRY_STAPLES if any(staple in name for name in names))


def calculate_confidence_score(
    ingredients: Sequence[Ingredient],
    outcomes: Optional[Sequence[ValidationOutcome]] = None,
) -> int:
    """
    Rate how plausible a parsed ingredient list is.

    Args:
        ingredients: The normalized ingredient list
        outcomes: Validation results for the same list; computed when omitted

    Returns:
        Integer score between 0 and 100
    """
    if outcomes is None:
        outcomes = validate_ingredients(ingredients)

    errors = [outcome for outcome in outcomes if not outcome.is_valid]
    for outcome in errors:
        logger.debug(f"Validation error: {outcome.reason}")

    count = len(ingredients)
    score = 100 - 10 * len(errors)
    if count < FEW_INGREDIENTS:
        score -= 20
    if count > MANY_INGREDIENTS:
        score -= 30
    if TYPICAL_RANGE[0] <= count <= TYPICAL_RANGE[1]:
        score += 10
    if count_pantry_staples(ingredients) >= MIN_STAPLES:
        score += 5

    score = max(0, min(100, score))
    logger.info(f"Confidence score {score} ({count} ingredients, {len(errors)} validation errors)")
    return score
