"""
Ingredient Normalizer shared by every extraction path.

Unit standardization, amount rounding, name cleaning and categorization are
all fixed points on their own output, so normalizing an already normalized
ingredient returns it unchanged.
"""

import html
import logging
import re
from typing import Iterable, List, Optional

from ..constants import AMOUNT_DECIMALS, DISPLAY_FRACTION_TOLERANCE
from ..models.recipe import Category, Ingredient
from .vocabulary import (
    CATEGORY_KEYWORDS,
    CATEGORY_OVERRIDES,
    DISPLAY_FRACTIONS,
    GENERIC_SIZE_RE,
    PREPARATION_PHRASE_RE,
    PREPARATION_WORD_RE,
    SIZE_IDENTITY_NOUNS,
    UNIT_TABLE,
    word_pattern,
)

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════
# UNITS AND AMOUNTS
# ═══════════════════════════════════════════════════════════════════

# Canonical plural -> singular, used for display only
_SINGULAR_UNITS = {
    "teaspoons": "teaspoon", "tablespoons": "tablespoon", "cups": "cup", "pints": "pint",
    "quarts": "quart", "gallons": "gallon", "fluid ounces": "fluid ounce",
    "milliliters": "milliliter", "liters": "liter", "ounces": "ounce", "pounds": "pound",
    "grams": "gram", "kilograms": "kilogram", "cloves": "clove", "slices": "slice",
    "cans": "can", "jars": "jar", "bottles": "bottle", "packages": "package", "bags": "bag",
    "bunches": "bunch", "heads": "head", "leaves": "leaf", "sprigs": "sprig",
    "stalks": "stalk", "sticks": "stick", "pinches": "pinch", "dashes": "dash",
}


def standardize_unit(unit: Optional[str]) -> str:
    """Map a raw unit to its canonical plural form; unknown units are lowercased and kept."""
    if not unit:
        return ""
    clean = re.sub(r"\s+", " ", str(unit).strip().lower()).rstrip(".")
    return UNIT_TABLE.get(clean, clean)


def round_amount(amount: float) -> float:
    return round(float(amount), AMOUNT_DECIMALS)


def convert_to_standard_units(amount: float, unit: str) -> tuple[float, str]:
    """Promote large metric quantities: 1500 grams -> 1.5 kilograms, 1000 milliliters -> 1 liters."""
    if unit == "grams" and amount >= 1000:
        return round_amount(amount / 1000), "kilograms"
    if unit == "milliliters" and amount >= 1000:
        return round_amount(amount / 1000), "liters"
    return amount, unit


# ═══════════════════════════════════════════════════════════════════
# NAME CLEANING
# ═══════════════════════════════════════════════════════════════════

_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)?")
_LEADING_JUNK_RE = re.compile(r"^[\s,;:.\-–—*•]+")
_TRAILING_JUNK_RE = re.compile(r"[\s,;:.\-–—*•]+$")
_DANGLING_CONNECTOR_RE = re.compile(r"(?:^(?:and|or|of|with)\b\s*)|(?:\s*\b(?:and|or|of|with|into)$)", re.IGNORECASE)


def _first_top_level_comma(text: str) -> int:
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
        elif ch == "," and depth == 0:
            return i
    return -1


def _strip_generic_sizes(name: str) -> str:
    """Drop size adjectives unless they grade the item itself ("large eggs")."""
    def _sub(match: re.Match) -> str:
        rest = name[match.end():].strip().lower()
        following = rest.split(" ", 1)[0] if rest else ""
        return match.group(0) if following in SIZE_IDENTITY_NOUNS else ""

    return GENERIC_SIZE_RE.sub(_sub, name)


def clean_ingredient_name(name: str) -> str:
    """
    Reduce an ingredient name to what you would write on a shopping list.

    Drops parentheticals, the trailing descriptive clause after the first
    top-level comma, preparation/cooking-state words and generic size words.
    """
    cleaned = html.unescape(str(name or "")).replace("’", "'").strip()
    comma = _first_top_level_comma(cleaned)
    if comma > 0:
        cleaned = cleaned[:comma]
    cleaned = _PARENTHETICAL_RE.sub(" ", cleaned)
    cleaned = PREPARATION_PHRASE_RE.sub(" ", cleaned)
    cleaned = PREPARATION_WORD_RE.sub(" ", cleaned)
    cleaned = _strip_generic_sizes(cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = _LEADING_JUNK_RE.sub("", cleaned)
        cleaned = _TRAILING_JUNK_RE.sub("", cleaned)
        cleaned = _DANGLING_CONNECTOR_RE.sub("", cleaned).strip()

    return cleaned.lower()


# ═══════════════════════════════════════════════════════════════════
# CATEGORIES
# ═══════════════════════════════════════════════════════════════════

_OVERRIDE_PATTERNS = [(word_pattern([phrase]), category) for phrase, category in CATEGORY_OVERRIDES]
_KEYWORD_PATTERNS = [(word_pattern(words), category) for category, words in CATEGORY_KEYWORDS.items()]


def categorize_ingredient(name: str) -> Category:
    """Pick a grocery category from the name; overrides win over the keyword table, Pantry is the default."""
    for pattern, category in _OVERRIDE_PATTERNS:
        if pattern.search(name):
            return category
    for pattern, category in _KEYWORD_PATTERNS:
        if pattern.search(name):
            return category
    return Category.PANTRY


# ═══════════════════════════════════════════════════════════════════
# INGREDIENTS
# ═══════════════════════════════════════════════════════════════════

def normalize_ingredient(ingredient: Ingredient, categorize: bool = False) -> Ingredient:
    """
    Apply unit, amount and name normalization to one ingredient.

    Args:
        ingredient: The raw ingredient from any extraction path
        categorize: Recompute the category from the cleaned name (for paths
            that do not supply one)

    Returns:
        A new, normalized Ingredient
    """
    unit = standardize_unit(ingredient.unit)
    amount, unit = convert_to_standard_units(round_amount(ingredient.amount), unit)
    name = clean_ingredient_name(ingredient.name) or ingredient.name.strip().lower()
    category = categorize_ingredient(name) if categorize else ingredient.category
    return ingredient.model_copy(
        update={"name": name, "amount": round_amount(amount), "unit": unit, "category": category}
    )


def normalize_ingredients(ingredients: Iterable[Ingredient], categorize: bool = False) -> List[Ingredient]:
    """Normalize a list and drop exact duplicates (same name, unit and amount), keeping order."""
    result: List[Ingredient] = []
    seen = set()
    for ingredient in ingredients:
        normalized = normalize_ingredient(ingredient, categorize=categorize)
        if not normalized.name:
            continue
        key = (normalized.name, normalized.unit, normalized.amount)
        if key in seen:
            logger.debug(f"Dropping duplicate ingredient: {normalized.name}")
            continue
        seen.add(key)
        result.append(normalized)
    return result


# ═══════════════════════════════════════════════════════════════════
# DISPLAY
# ═══════════════════════════════════════════════════════════════════

def format_amount(amount: float) -> str:
    """Render an amount for display: "2", "1½", "⅓", or one decimal when no common fraction is close."""
    whole = int(amount)
    fraction = amount - whole
    if abs(fraction) < 1e-9:
        return str(whole)

    value, glyph = min(DISPLAY_FRACTIONS, key=lambda item: abs(item[0] - fraction))
    if abs(value - fraction) <= DISPLAY_FRACTION_TOLERANCE:
        return f"{whole}{glyph}" if whole else glyph
    return f"{amount:.1f}"


def format_unit(unit: str, amount: float) -> str:
    """Singular unit when the amount is at most one, plural otherwise."""
    if amount <= 1.0:
        return _SINGULAR_UNITS.get(unit, unit)
    return unit


def format_ingredient(ingredient: Ingredient) -> str:
    parts = [format_amount(ingredient.amount), format_unit(ingredient.unit, ingredient.amount), ingredient.name]
    return " ".join(part for part in parts if part)
