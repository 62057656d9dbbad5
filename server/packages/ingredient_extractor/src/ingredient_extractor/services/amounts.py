"""
Amount parsing: turns the quantity text of an ingredient line into a decimal.

Rules, in priority order:
  1. mixed number  "W N/D"  -> W + N/D
  2. fraction      "N/D"    -> N/D
  3. literal       "3", "0.5"
  4. anything else raises AmountParseError; callers that must not fail use
     parse_amount_or_default(), which falls back to 1.0.
"""

import logging
import re
from fractions import Fraction

from ..exceptions import AmountParseError
from .vocabulary import UNICODE_FRACTIONS

logger = logging.getLogger(__name__)

_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_LITERAL_RE = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)$")
_RANGE_RE = re.compile(r"^(.+?)\s*(?:-|–|—|\bto\b)\s*(.+)$")
_HYPHEN_MIXED_RE = re.compile(r"^(\d+)\s*-\s*(\d+)\s*/\s*(\d+)$")
_UNICODE_FRACTION_RE = re.compile(r"(\d*)\s*([" + "".join(UNICODE_FRACTIONS) + r"])")
_JSON_AMOUNT_FRACTION_RE = re.compile(r'("amount"\s*:\s*)(\d+(?:\s+\d+)?\s*/\s*\d+)(?=\s*[,}\]])')


def replace_unicode_fractions(text: str) -> str:
    """Rewrite vulgar fraction glyphs as N/D text: "1½" -> "1 1/2", "¾" -> "3/4"."""
    def _sub(match: re.Match) -> str:
        whole, glyph = match.group(1), match.group(2)
        fraction = UNICODE_FRACTIONS[glyph]
        return f"{whole} {fraction}" if whole else fraction

    return _UNICODE_FRACTION_RE.sub(_sub, text)


def parse_amount(text: str) -> float:
    """
    Parse an amount string into a float.

    Args:
        text: Quantity text such as "1 1/2", "3/4", "2" or "0.5"

    Returns:
        The decimal value, computed exactly through Fraction

    Raises:
        AmountParseError: If the text is not a mixed number, fraction or literal
    """
    clean = replace_unicode_fractions(str(text)).strip().replace(",", ".")

    match = _MIXED_RE.match(clean)
    if match:
        whole, numerator, denominator = (int(g) for g in match.groups())
        if denominator == 0:
            raise AmountParseError(f"Zero denominator in amount: {text!r}")
        return float(whole + Fraction(numerator, denominator))

    match = _FRACTION_RE.match(clean)
    if match:
        numerator, denominator = (int(g) for g in match.groups())
        if denominator == 0:
            raise AmountParseError(f"Zero denominator in amount: {text!r}")
        return float(Fraction(numerator, denominator))

    if _LITERAL_RE.match(clean):
        return float(clean)

    raise AmountParseError(f"Unparsable amount: {text!r}")


def parse_quantity(text: str) -> float:
    """
    Parse an amount that may be a range ("2 to 3", "2-3"); ranges resolve to the upper bound.

    "1-1/2" is the hyphenated mixed number 1.5, not the range 1 to 1/2.
    """
    clean = replace_unicode_fractions(str(text)).strip()
    match = _HYPHEN_MIXED_RE.match(clean)
    if match:
        whole, numerator, denominator = (int(g) for g in match.groups())
        if 0 < numerator < denominator:
            return float(whole + Fraction(numerator, denominator))
    match = _RANGE_RE.match(clean)
    if match and not _MIXED_RE.match(clean) and not _FRACTION_RE.match(clean):
        low, high = parse_amount(match.group(1)), parse_amount(match.group(2))
        return max(low, high)
    return parse_amount(clean)


def parse_amount_or_default(text: str, default: float = 1.0) -> float:
    """Parse a quantity, falling back to the default instead of failing the pipeline."""
    try:
        return parse_quantity(text)
    except AmountParseError as e:
        logger.debug(f"{e}; defaulting to {default}")
        return default


def convert_fractions_to_decimals(json_text: str) -> str:
    """Rewrite textual fractions used as JSON amount values ("amount": 1/2) into decimals."""
    def _sub(match: re.Match) -> str:
        value = parse_amount(match.group(2))
        return f"{match.group(1)}{round(value, 3)}"

    return _JSON_AMOUNT_FRACTION_RE.sub(_sub, json_text)
