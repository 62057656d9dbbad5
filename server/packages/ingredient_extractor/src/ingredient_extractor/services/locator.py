"""
Heuristic Content Locator.

Finds the ingredient list inside an arbitrary recipe page and condenses it
into a small corpus of candidate lines for the parsers.

Line classification always checks the markup/styling denylist first: a line
that looks like CSS or script is noise even when it also mentions
"ingredients" or a measurement.

Strategies are plain functions tried in a fixed order; the first one that
yields at least MIN_CANDIDATE_LINES lines wins:
  1. StructuralList     <ul>/<ol> lists holding measurement items
  2. PositionalSection  lines between an entry marker and an exit marker
  3. AggressiveScan     every measurement-looking line in the document
"""

import copy
import functools
import logging
import re
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup, Comment, Tag
from pydantic import BaseModel

from ..constants import (
    CHARS_PER_TOKEN,
    MAX_CORPUS_CHARS,
    MAX_CORPUS_TOKENS,
    MIN_CANDIDATE_LINES,
    SECTION_RUN_CAP,
    TRUNCATION_MARKER,
)
from .vocabulary import (
    BULLET_GLYPHS,
    CSS_DECLARATION_RE,
    CSS_DOTTED_SELECTOR_RE,
    CSS_SELECTOR_BLOCK_RE,
    INGREDIENT_WORD_RE,
    LEADING_BULLET_RE,
    LIST_START_TAG_RE,
    MEASUREMENT_UNIT_PATTERN,
    NOISE_KEYWORDS,
    NON_QUANTITY_WORDS,
    SECTION_ENTRY_MARKERS,
    SECTION_EXIT_RE,
    UNICODE_FRACTIONS,
)

logger = logging.getLogger(__name__)

_NOISE_TAGS = ["script", "style", "noscript", "head", "meta", "link", "svg", "iframe", "template", "button", "form"]
_BLOCK_TAGS = ["p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "tr", "section", "article", "br", "dt", "dd", "label"]

_NUMERAL = r"(?:\d*\s?[" + "".join(UNICODE_FRACTIONS) + r"]|\d+(?:[.,/]\d+)?)"
_MEASUREMENT_RE = re.compile(
    rf"(?<![\w.]){_NUMERAL}(?:\s+\d+/\d+)?(?:\s*(?:-|–|to)\s*{_NUMERAL})?\s*"
    rf"(?:\(\s*\d+(?:\.\d+)?\s*(?:oz|ounces?|g|grams?|ml|lbs?)\.?\s*\)\s*)?"
    rf"(?:{MEASUREMENT_UNIT_PATTERN})\.?(?![\w-])",
    re.IGNORECASE,
)
# "3 eggs", "2 limes": a bare count followed by a short noun phrase
_COUNT_ONLY_RE = re.compile(r"^\s*(?:[•◦▪▢☐✓·*\-–]\s*)?\d+\s+([a-z][a-z\-\s']*)$", re.IGNORECASE)
_NUMERAL_RE = re.compile(r"\d|[" + "".join(UNICODE_FRACTIONS) + r"]")
_NON_QUANTITY_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in NON_QUANTITY_WORDS) + r")\b", re.IGNORECASE
)
_INGREDIENT_CLASS_RE = re.compile(r"ingredient", re.IGNORECASE)

MAX_CANDIDATE_LINE_LENGTH = 160


class LineKind(str, Enum):
    NOISE = "noise"
    SECTION_ENTRY = "section_entry"
    SECTION_EXIT = "section_exit"
    CANDIDATE = "candidate"
    OTHER = "other"


class CorpusStrategy(str, Enum):
    STRUCTURAL_LIST = "StructuralList"
    POSITIONAL_SECTION = "PositionalSection"
    AGGRESSIVE_SCAN = "AggressiveScan"


class LocatedCorpus(BaseModel):
    """Condensed ingredient lines and how they were found"""
    strategy: CorpusStrategy
    lines: List[str]
    text: str
    truncated: bool = False

    @property
    def estimated_tokens(self) -> int:
        return estimate_token_count(self.text)


# ═══════════════════════════════════════════════════════════════════
# LINE CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════

def is_noise_line(line: str) -> bool:
    """True for CSS, script and markup residue; checked before any positive signal."""
    lower = line.lower()
    if CSS_DECLARATION_RE.search(lower):
        return True
    if CSS_DOTTED_SELECTOR_RE.search(lower) or ("{" in lower and CSS_SELECTOR_BLOCK_RE.search(lower)):
        return True
    if "." in lower and "{" in lower:
        return True
    return any(keyword in lower for keyword in NOISE_KEYWORDS)


def has_measurement(line: str) -> bool:
    """A numeral followed by a unit word, or a bare count of a short noun phrase."""
    if _MEASUREMENT_RE.search(line):
        return True
    match = _COUNT_ONLY_RE.match(line)
    if match and len(match.group(1).split()) <= 5:
        return not _NON_QUANTITY_RE.search(match.group(1))
    return False


def is_ingredient_like(line: str) -> bool:
    """Ingredient vocabulary co-occurring with a numeral, outside time/yield phrases."""
    if not INGREDIENT_WORD_RE.search(line) or not _NUMERAL_RE.search(line):
        return False
    return not _NON_QUANTITY_RE.search(line)


def is_section_entry(line: str) -> bool:
    """An entry marker combined with a colon, a bullet glyph or a list tag, or a bare marker heading."""
    lower = line.lower().replace("’", "'").strip()
    if not any(marker in lower for marker in SECTION_ENTRY_MARKERS):
        return False
    if ":" in lower or LIST_START_TAG_RE.search(lower):
        return True
    if any(glyph in lower for glyph in BULLET_GLYPHS):
        return True
    # Bare headings such as "Ingredients" or "For the sauce"
    words = " ".join(re.sub(r"[^\w'\s]", " ", lower).split())
    return 0 < len(words.split()) <= 5 and words.startswith(SECTION_ENTRY_MARKERS)


def is_section_exit(line: str) -> bool:
    return bool(SECTION_EXIT_RE.search(line)) and not has_measurement(line)


def classify_line(line: str) -> LineKind:
    """
    Classify a single text line.

    NOISE is decided first and always wins: a line carrying both a CSS
    declaration and the word "ingredients" is noise.
    """
    stripped = line.strip()
    if not stripped:
        return LineKind.OTHER
    if is_noise_line(stripped):
        return LineKind.NOISE
    if has_measurement(stripped) or is_ingredient_like(stripped):
        return LineKind.CANDIDATE
    if is_section_entry(stripped):
        return LineKind.SECTION_ENTRY
    if is_section_exit(stripped):
        return LineKind.SECTION_EXIT
    return LineKind.OTHER


# ═══════════════════════════════════════════════════════════════════
# HTML PREPARATION
# ═══════════════════════════════════════════════════════════════════

def make_soup(html: Union[str, BeautifulSoup]) -> BeautifulSoup:
    """Parse the page (or copy an already parsed one) and drop elements that never hold visible recipe text."""
    soup = BeautifulSoup(html, "html.parser") if isinstance(html, str) else copy.copy(html)
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    return soup


def soup_to_lines(soup: BeautifulSoup) -> List[str]:
    """Render visible text as lines, one per block element; list items get a bullet glyph."""
    rendered = copy.copy(soup)
    for tag in rendered.find_all(_BLOCK_TAGS):
        if tag.name == "li":
            tag.insert(0, "• ")
        tag.insert_before("\n")
        tag.insert_after("\n")
    lines = []
    for line in rendered.get_text().splitlines():
        text = re.sub(r"\s+", " ", line).strip()
        if text and text != "•":
            lines.append(text)
    return lines


def html_to_text(html: Union[str, BeautifulSoup]) -> str:
    """Visible page text, one block per line."""
    return "\n".join(soup_to_lines(make_soup(html)))


# ═══════════════════════════════════════════════════════════════════
# STRATEGIES
# ═══════════════════════════════════════════════════════════════════

def _clean_candidate(line: str) -> str:
    return re.sub(r"\s+", " ", LEADING_BULLET_RE.sub("", line)).strip()


def _starts_with_measurement(item: str) -> bool:
    item = LEADING_BULLET_RE.sub("", item)
    return bool(_MEASUREMENT_RE.match(item)) or (bool(_COUNT_ONLY_RE.match(item)) and has_measurement(item))


def _list_items(list_tag: Tag) -> List[str]:
    items = list_tag.find_all("li", recursive=False) or list_tag.find_all("li")
    return [_clean_candidate(item.get_text(" ", strip=True)) for item in items]


def _has_ingredient_hint(tag: Tag) -> bool:
    for node in [tag, *tag.parents][:4]:
        if not isinstance(node, Tag):
            continue
        attributes = " ".join(node.get("class", []) or []) + " " + (node.get("id") or "")
        if _INGREDIENT_CLASS_RE.search(attributes):
            return True
    return False


def structural_list_strategy(soup: BeautifulSoup, lines: Sequence[str]) -> Optional[List[str]]:
    """Whole <ul>/<ol> lists in which at least one item starts with a measurement."""
    hinted: List[str] = []
    plain: List[str] = []
    for list_tag in soup.find_all(["ul", "ol"]):
        if list_tag.find_parent(["ul", "ol"]) is not None:
            continue
        items = [item for item in _list_items(list_tag) if item and not is_noise_line(item)]
        # Measurements only mid-sentence mean a list of instructions
        if not any(_starts_with_measurement(item) for item in items):
            continue
        target = hinted if _has_ingredient_hint(list_tag) else plain
        target.extend(items)
    return hinted or plain or None


def positional_section_strategy(
    soup: BeautifulSoup,
    lines: Sequence[str],
    run_cap: int = SECTION_RUN_CAP,
) -> Optional[List[str]]:
    """Lines retained between section entry and exit triggers."""
    collected: List[str] = []
    in_section = False
    misses = 0
    for line in lines:
        kind = classify_line(line)
        if kind == LineKind.SECTION_ENTRY:
            in_section = True
            misses = 0
            continue
        if not in_section:
            # "• 1 cup flour for the crust" both opens a section and belongs to it
            if kind == LineKind.CANDIDATE and is_section_entry(line):
                in_section = True
                misses = 0
                collected.append(_clean_candidate(line))
            continue
        if kind == LineKind.CANDIDATE:
            collected.append(_clean_candidate(line))
            misses = 0
        elif kind == LineKind.SECTION_EXIT:
            logger.debug(f"Leaving ingredient section at: {line[:60]}")
            in_section = False
        else:
            misses += 1
            if misses >= run_cap:
                logger.debug("Leaving ingredient section after run-length cap")
                in_section = False
    return collected or None


def aggressive_scan_strategy(soup: BeautifulSoup, lines: Sequence[str]) -> Optional[List[str]]:
    """Every short non-noise line in the document that looks like an ingredient."""
    collected = [
        _clean_candidate(line)
        for line in lines
        if len(line) <= MAX_CANDIDATE_LINE_LENGTH
        and classify_line(line) == LineKind.CANDIDATE
    ]
    return collected or None


Strategy = Callable[[BeautifulSoup, Sequence[str]], Optional[List[str]]]

STRATEGIES: List[Tuple[CorpusStrategy, Strategy]] = [
    (CorpusStrategy.STRUCTURAL_LIST, structural_list_strategy),
    (CorpusStrategy.POSITIONAL_SECTION, positional_section_strategy),
    (CorpusStrategy.AGGRESSIVE_SCAN, aggressive_scan_strategy),
]


def select_strategy(
    soup: BeautifulSoup,
    lines: Sequence[str],
    strategies: Sequence[Tuple[CorpusStrategy, Strategy]] = STRATEGIES,
    min_lines: int = MIN_CANDIDATE_LINES,
) -> Optional[Tuple[CorpusStrategy, List[str]]]:
    """Run the strategies in order and return the first that yields enough lines."""
    for name, strategy in strategies:
        candidates = strategy(soup, lines)
        count = len(candidates) if candidates else 0
        logger.debug(f"Strategy {name.value} produced {count} lines")
        if candidates and count >= min_lines:
            return name, _dedupe(candidates)
    return None


def _dedupe(lines: Sequence[str]) -> List[str]:
    seen = set()
    result = []
    for line in lines:
        key = line.lower()
        if key not in seen:
            seen.add(key)
            result.append(line)
    return result


# ═══════════════════════════════════════════════════════════════════
# BUDGET
# ═══════════════════════════════════════════════════════════════════

def estimate_token_count(text: str) -> int:
    return len(text) // CHARS_PER_TOKEN


def truncate_corpus(
    text: str,
    max_chars: int = MAX_CORPUS_CHARS,
    max_tokens: int = MAX_CORPUS_TOKENS,
) -> Tuple[str, bool]:
    """
    Bound the corpus by characters and estimated tokens.

    Returns:
        The possibly truncated text (with a visible marker appended) and whether it was cut
    """
    limit = min(max_chars, max_tokens * CHARS_PER_TOKEN)
    if len(text) <= limit:
        return text, False
    cut = text.rfind("\n", 0, limit)
    if cut <= 0:
        cut = limit
    logger.info(f"Truncating corpus from {len(text)} to {cut} characters")
    return text[:cut] + TRUNCATION_MARKER, True


def locate_ingredient_corpus(
    html: str,
    max_chars: int = MAX_CORPUS_CHARS,
    max_tokens: int = MAX_CORPUS_TOKENS,
    section_run_cap: int = SECTION_RUN_CAP,
    soup: Optional[BeautifulSoup] = None,
) -> Optional[LocatedCorpus]:
    """
    Locate and condense the ingredient lines of a page.

    Args:
        html: Raw page HTML (plain text also works, it just has no lists)
        max_chars: Character budget of the corpus
        max_tokens: Estimated-token budget of the corpus
        section_run_cap: Consecutive misses that close a positional section
        soup: The page already parsed; it is copied, never modified

    Returns:
        The LocatedCorpus, or None if no strategy produced enough lines
    """
    soup = make_soup(html if soup is None else soup)
    lines = soup_to_lines(soup)
    strategies = STRATEGIES
    if section_run_cap != SECTION_RUN_CAP:
        strategies = [
            (name, functools.partial(positional_section_strategy, run_cap=section_run_cap))
            if name == CorpusStrategy.POSITIONAL_SECTION else (name, strategy)
            for name, strategy in STRATEGIES
        ]
    selected = select_strategy(soup, lines, strategies)
    if selected is None:
        logger.info("No ingredient section located")
        return None

    strategy, candidates = selected
    text, truncated = truncate_corpus("\n".join(candidates), max_chars, max_tokens)
    logger.info(f"Located {len(candidates)} candidate lines with {strategy.value}")
    return LocatedCorpus(strategy=strategy, lines=candidates, text=text, truncated=truncated)
