"""
Content verification: look for each parsed ingredient in the page it came from.

Matching goes from strict to loose and stops at the first hit:
  1. exact phrase   "2 cups flour", "2 c flour", "flour 2 cups", "2 cups of flour" ...
  2. proximity      the name appears with a numeral shortly before it
  3. fuzzy          at least half of the name's significant words appear anywhere
"""

import logging
import re
from enum import Enum
from fractions import Fraction
from typing import Iterable, List, Optional, Set

from ..constants import (
    VERIFICATION_ACCEPT_THRESHOLD,
    VERIFICATION_REJECT_THRESHOLD,
    VERIFICATION_WARN_THRESHOLD,
)
from ..models.recipe import Ingredient, VerificationOutcome
from .amounts import replace_unicode_fractions
from .vocabulary import UNIT_TABLE

logger = logging.getLogger(__name__)

PROXIMITY_WINDOW = 40
FUZZY_WORD_RATIO = 0.5
SIGNIFICANT_WORD_LENGTH = 2


class VerificationBand(str, Enum):
    """Pipeline decision for a verification score."""
    REJECT = "reject"
    LOW = "low"
    MEDIUM = "medium"
    ACCEPT = "accept"


def normalize_source_text(text: str) -> str:
    """Lowercase, fraction glyphs as N/D and single spaces, so phrases can be searched directly."""
    text = replace_unicode_fractions(text.lower()).replace("’", "'")
    return re.sub(r"\s+", " ", text)


def _amount_variants(amount: float) -> Set[str]:
    variants = {f"{amount:g}"}
    if float(amount).is_integer():
        variants.add(str(int(amount)))
    fraction = Fraction(amount).limit_denominator(8)
    if abs(float(fraction) - amount) < 0.01 and fraction.denominator > 1:
        whole, rest = divmod(fraction.numerator, fraction.denominator)
        variants.add(f"{rest}/{fraction.denominator}" if not whole else f"{whole} {rest}/{fraction.denominator}")
    return variants


def _unit_variants(unit: str) -> Set[str]:
    if not unit:
        return {""}
    return {unit} | {raw for raw, canonical in UNIT_TABLE.items() if canonical == unit}


def _exact_phrases(ingredient: Ingredient) -> Iterable[str]:
    name = ingredient.name.lower()
    for amount in _amount_variants(ingredient.amount):
        for unit in _unit_variants(ingredient.unit):
            if unit:
                yield f"{amount} {unit} {name}"
                yield f"{amount} {unit}. {name}"
                yield f"{amount} {unit} of {name}"
                yield f"{amount}{unit} {name}"
                yield f"{name} {amount} {unit}"
                yield f"{name}, {amount} {unit}"
            else:
                yield f"{amount} {name}"


def _exact_match(ingredient: Ingredient, source: str) -> bool:
    return any(phrase in source for phrase in _exact_phrases(ingredient))


def _proximity_match(ingredient: Ingredient, source: str) -> bool:
    name = re.escape(ingredient.name.lower())
    pattern = re.compile(rf"\d[^\n]{{0,{PROXIMITY_WINDOW}}}?\b{name}")
    return bool(pattern.search(source))


def _fuzzy_match(ingredient: Ingredient, source: str) -> bool:
    words = [w for w in re.findall(r"[a-z']+", ingredient.name.lower()) if len(w) > SIGNIFICANT_WORD_LENGTH]
    if not words:
        return False
    found = sum(1 for word in words if re.search(rf"\b{re.escape(word)}", source))
    return found / len(words) >= FUZZY_WORD_RATIO


def is_ingredient_in_source(ingredient: Ingredient, source: str) -> bool:
    """Run the three matchers in order against an already normalized source text."""
    return (
        _exact_match(ingredient, source)
        or _proximity_match(ingredient, source)
        or _fuzzy_match(ingredient, source)
    )


def verify_ingredients(ingredients: List[Ingredient], source_text: str) -> VerificationOutcome:
    """
    Check every ingredient against the original page text.

    Args:
        ingredients: Parsed, normalized ingredients
        source_text: Visible text (or raw HTML) of the source page

    Returns:
        VerificationOutcome with score = verified * 100 // total (0 for an empty list)
    """
    source = normalize_source_text(source_text)
    verified: List[Ingredient] = []
    unverified: List[Ingredient] = []
    notes: List[str] = []

    for ingredient in ingredients:
        if is_ingredient_in_source(ingredient, source):
            verified.append(ingredient)
        else:
            unverified.append(ingredient)
            notes.append(f"Ingredient '{ingredient.name}' not found in source content")

    score = (len(verified) * 100) // len(ingredients) if ingredients else 0
    logger.info(f"Verification score {score} ({len(verified)}/{len(ingredients)} found in source)")
    return VerificationOutcome(
        verified_ingredients=verified,
        unverified_ingredients=unverified,
        verification_score=score,
        notes=notes,
    )


def classify_verification(
    score: int,
    reject_below: int = VERIFICATION_REJECT_THRESHOLD,
    warn_below: int = VERIFICATION_WARN_THRESHOLD,
    accept_from: int = VERIFICATION_ACCEPT_THRESHOLD,
) -> VerificationBand:
    if score < reject_below:
        return VerificationBand.REJECT
    if score < warn_below:
        return VerificationBand.LOW
    if score < accept_from:
        return VerificationBand.MEDIUM
    return VerificationBand.ACCEPT


def verification_warning(score: int, band: VerificationBand) -> Optional[str]:
    """User-facing annotation for accepted results that were only partly verified."""
    if band is VerificationBand.LOW:
        return f"Low verification score ({score}): several ingredients were not found on the page"
    if band is VerificationBand.MEDIUM:
        return f"Partial verification ({score}): some ingredients were not found on the page"
    return None
