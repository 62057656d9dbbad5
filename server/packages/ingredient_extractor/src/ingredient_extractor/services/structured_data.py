"""
Structured-Data Extractor.

Reads schema.org Recipe objects embedded as JSON-LD. When one is present the
rest of the pipeline is skipped: its recipeIngredient strings go through the
same line splitter as the regex path.
"""

import html
import json
import logging
import re
from typing import Any, Iterator, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..models.recipe import Recipe
from .normalizer import normalize_ingredients
from .regex_parser import parse_ingredient_line
from .vocabulary import NON_RECIPE_DOMAINS, RECIPE_MARKUP_HINTS

logger = logging.getLogger(__name__)

_LD_JSON_TYPE_RE = re.compile(r"^\s*application/ld\+json\s*$", re.IGNORECASE)
_TITLE_SUFFIX_RE = re.compile(r"\s+[|\-–—]\s+.*$")
_TITLE_NOISE_RE = re.compile(r"\b(?:recipe|how to make|easy|best|delicious|homemade)\b", re.IGNORECASE)


def _is_recipe(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if isinstance(item_type, str):
        type_matches = item_type.lower() == "recipe"
    elif isinstance(item_type, list):
        type_matches = any(isinstance(t, str) and t.lower() == "recipe" for t in item_type)
    else:
        type_matches = False
    return type_matches or isinstance(item.get("recipeIngredient"), list)


def _walk_json_ld(data: Any) -> Iterator[dict]:
    """Yield every object in a JSON-LD document: top-level lists, @graph arrays and nested objects."""
    stack = [data]
    while stack:
        node = stack.pop(0)
        if isinstance(node, list):
            stack.extend(node)
        elif isinstance(node, dict):
            yield node
            if isinstance(node.get("@graph"), list):
                stack.extend(node["@graph"])
            if isinstance(node.get("mainEntity"), (dict, list)):
                stack.append(node["mainEntity"])


def _as_soup(html_text: str, soup: Optional[BeautifulSoup]) -> BeautifulSoup:
    return soup if soup is not None else BeautifulSoup(html_text, "html.parser")


def find_recipe_json_ld(html_text: str, soup: Optional[BeautifulSoup] = None) -> Optional[dict]:
    """
    Find the first embedded JSON-LD recipe object.

    Args:
        html_text: Raw page HTML
        soup: The page already parsed; html_text is not parsed again when given

    Returns:
        The recipe object as a dict, or None when absent or malformed
    """
    scripts = _as_soup(html_text, soup).find_all("script", attrs={"type": _LD_JSON_TYPE_RE})
    logger.debug(f"Found {len(scripts)} JSON-LD scripts")

    for idx, script in enumerate(scripts):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse JSON-LD script {idx}: {e}")
            continue
        for item in _walk_json_ld(data):
            if _is_recipe(item):
                logger.debug(f"Found recipe data in JSON-LD script {idx}")
                return item
    return None


def _ingredient_strings(recipe_data: dict) -> List[str]:
    raw = recipe_data.get("recipeIngredient")
    if raw is None:
        raw = recipe_data.get("ingredients")
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    return [html.unescape(entry).strip() for entry in raw if isinstance(entry, str) and entry.strip()]


def extract_structured_recipe(
    html_text: str,
    source_url: str = "",
    soup: Optional[BeautifulSoup] = None,
) -> Optional[Recipe]:
    """
    Build a Recipe from embedded JSON-LD data.

    Never raises: a missing block, malformed JSON or an empty ingredient list
    all return None so the caller can fall back to the heuristic path.
    """
    recipe_data = find_recipe_json_ld(html_text, soup)
    if recipe_data is None:
        return None

    ingredients = []
    for line in _ingredient_strings(recipe_data):
        ingredient = parse_ingredient_line(line)
        if ingredient is not None:
            ingredients.append(ingredient)

    ingredients = normalize_ingredients(ingredients, categorize=True)
    if not ingredients:
        logger.info("JSON-LD recipe found but it has no usable ingredients")
        return None

    name = recipe_data.get("name")
    logger.info(f"Structured data yielded {len(ingredients)} ingredients")
    return Recipe(
        source_url=source_url,
        name=clean_recipe_title(html.unescape(name)) if isinstance(name, str) else None,
        ingredients=ingredients,
        parsed=True,
    )


# ═══════════════════════════════════════════════════════════════════
# TITLE AND PAGE DETECTION
# ═══════════════════════════════════════════════════════════════════

def clean_recipe_title(title: str) -> str:
    """Drop the site suffix and marketing words: "Best Easy Banana Bread Recipe | Site" -> "Banana Bread"."""
    cleaned = _TITLE_SUFFIX_RE.sub("", title.strip())
    cleaned = _TITLE_NOISE_RE.sub(" ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" -|:")
    return cleaned or title.strip()


def extract_recipe_title(html_text: str, soup: Optional[BeautifulSoup] = None) -> Optional[str]:
    """Recipe title from JSON-LD name, then og:title, then <title>, then the first <h1>."""
    soup = _as_soup(html_text, soup)
    recipe_data = find_recipe_json_ld(html_text, soup)
    if recipe_data and isinstance(recipe_data.get("name"), str) and recipe_data["name"].strip():
        return clean_recipe_title(html.unescape(recipe_data["name"]))

    og = soup.find("meta", attrs={"property": "og:title"})
    if og and og.get("content", "").strip():
        return clean_recipe_title(og["content"])

    if soup.title and soup.title.get_text(strip=True):
        return clean_recipe_title(soup.title.get_text(strip=True))

    h1 = soup.find("h1")
    if h1 and h1.get_text(strip=True):
        return clean_recipe_title(h1.get_text(strip=True))
    return None


def is_likely_recipe_page(url: str, html_text: str, soup: Optional[BeautifulSoup] = None) -> bool:
    """Cheap signal that a page holds a recipe; non-recipe pages are annotated and never sent to the LLM."""
    host = (urlparse(url).hostname or "").lower()
    if any(host == domain or host.endswith("." + domain) for domain in NON_RECIPE_DOMAINS):
        return False

    lower = html_text.lower()
    if find_recipe_json_ld(html_text, soup) is not None:
        return True
    if any(hint in lower for hint in RECIPE_MARKUP_HINTS):
        return True
    return "ingredient" in lower and ("instruction" in lower or "direction" in lower or "method" in lower)
