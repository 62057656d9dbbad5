"""
Regex Ingredient Parser: the no-network path.

Splits each condensed ingredient line into (amount, unit, name):
  "2 cups all-purpose flour, sifted"   -> 2.0, "cups", "all-purpose flour"
  "1 (14.5 oz) can diced tomatoes"     -> 14.5, "ounces", "diced tomatoes"
  "2-3 cloves garlic"                  -> 3.0, "cloves", "garlic"
  "Salt to taste"                      -> 1.0, "", "Salt to taste"
"""

import logging
import re
from typing import Iterable, List, Optional

from ..constants import MIN_REGEX_INGREDIENTS
from ..models.recipe import Ingredient
from .amounts import parse_amount, parse_amount_or_default, replace_unicode_fractions
from .normalizer import categorize_ingredient, standardize_unit
from .vocabulary import (
    INGREDIENT_WORD_RE,
    LEADING_BULLET_RE,
    PARSER_UNIT_PATTERN,
    QUANTITY_PATTERN,
)

logger = logging.getLogger(__name__)

_CONTAINER_RE = re.compile(
    r"^(?P<count>\d+)\s*\(\s*(?P<size>\d+(?:\.\d+)?)[\s-]*(?P<unit>oz|ounces?|fl\.? oz|lbs?|pounds?|g|grams?|ml|milliliters?)\.?\s*\)"
    r"\s*(?:(?:cans?|jars?|packages?|pkgs?|bags?|bottles?|boxes?|cartons?|tins?)\b\.?\s*)?(?P<name>.+)$",
    re.IGNORECASE,
)
_LINE_RE = re.compile(
    rf"^(?P<qty>{QUANTITY_PATTERN})\s*"
    rf"(?:(?P<unit>{PARSER_UNIT_PATTERN})\.?(?=[\s,(]|$))?"
    r"\s*(?:of\s+)?(?P<name>.*)$",
    re.IGNORECASE,
)
_HEADER_RE = re.compile(r"^[^\d]{0,40}:$")


def _trailing_clause_cut(name: str) -> str:
    """Keep the part of the name before the first top-level comma."""
    depth = 0
    for i, ch in enumerate(name):
        if ch == "(":
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
        elif ch == "," and depth == 0:
            return name[:i].strip()
    return name.strip()


def parse_ingredient_line(line: str) -> Optional[Ingredient]:
    """
    Parse one ingredient line.

    Args:
        line: A single candidate line from the condensed corpus

    Returns:
        The Ingredient, or None when the line is not recognized as one
    """
    text = LEADING_BULLET_RE.sub("", replace_unicode_fractions(line.strip()))
    text = re.sub(r"\s+", " ", text).strip()
    if not text or _HEADER_RE.match(text):
        return None

    match = _CONTAINER_RE.match(text)
    if match:
        count = parse_amount(match.group("count"))
        size = parse_amount(match.group("size"))
        name = _trailing_clause_cut(match.group("name"))
        if not name:
            return None
        return Ingredient(
            name=name,
            amount=count * size,
            unit=standardize_unit(match.group("unit").replace(".", "")),
            category=categorize_ingredient(name),
        )

    match = _LINE_RE.match(text)
    if match:
        name = _trailing_clause_cut(match.group("name"))
        if not name or not re.search(r"[a-zA-Z]", name):
            return None
        return Ingredient(
            name=name,
            amount=parse_amount_or_default(match.group("qty")),
            unit=standardize_unit(match.group("unit")),
            category=categorize_ingredient(name),
        )

    # No leading quantity: only trusted when it names a known ingredient
    if INGREDIENT_WORD_RE.search(text) and len(text.split()) <= 8:
        name = _trailing_clause_cut(text)
        return Ingredient(name=name, amount=1.0, unit="", category=categorize_ingredient(name))

    logger.debug(f"Regex parser skipped line: {text[:80]}")
    return None


def parse_ingredient_lines(lines: Iterable[str]) -> List[Ingredient]:
    """Parse every line, keeping only the recognized ones in their original order."""
    ingredients = []
    for line in lines:
        ingredient = parse_ingredient_line(line)
        if ingredient is not None:
            ingredients.append(ingredient)
    return ingredients


def parse_corpus(corpus: str, min_ingredients: int = MIN_REGEX_INGREDIENTS) -> Optional[List[Ingredient]]:
    """
    Parse a newline-separated corpus.

    Returns:
        The recognized ingredients, or None if fewer than min_ingredients lines were recognized
    """
    ingredients = parse_ingredient_lines(corpus.splitlines())
    if len(ingredients) < min_ingredients:
        logger.info(f"Regex parser recognized {len(ingredients)} lines (need {min_ingredients})")
        return None
    logger.info(f"Regex parser recognized {len(ingredients)} ingredients")
    return ingredients
