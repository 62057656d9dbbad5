"""
LLM fallback: prompt the backend with the condensed corpus and decode its JSON answer.
"""

import json
import logging
import math
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..exceptions import AmountParseError, ParseFailedError
from ..models.recipe import Category, Ingredient, LLMIngredient, LLMRecipe, Recipe
from ..prompts.ingredients import build_prompt
from ..providers.llm_client import LLMClient
from .amounts import convert_fractions_to_decimals, parse_quantity
from .normalizer import normalize_ingredients

logger = logging.getLogger(__name__)

_CATEGORY_LOOKUP = {category.value.lower(): category for category in Category}
_CATEGORY_LOOKUP.update({"meat&seafood": Category.MEAT_SEAFOOD, "meat and seafood": Category.MEAT_SEAFOOD})


class LLMParseOutcome(BaseModel):
    """Decoded LLM answer plus notes about the entries that had to be dropped"""
    recipe: Recipe
    notes: List[str] = Field(default_factory=list)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text.replace("```json", "", 1)
        text = text.replace("```", "", 1)
    elif text.startswith("```"):
        text = text.replace("```", "", 2)
    return text.strip()


def _json_payload(text: str) -> str:
    """Cut the response down to the outermost {...} block."""
    json_start = text.find("{")
    if json_start == -1:
        raise ParseFailedError(f"No JSON object found in LLM response: {text[:100]!r}")
    json_end = text.rfind("}")
    if json_end < json_start:
        raise ParseFailedError("No closing brace found in LLM response")
    return text[json_start:json_end + 1]


def _unescape(text: str) -> str:
    return text.replace("\\n", "\n").replace('\\"', '"').replace("\\t", "\t")


def _decode(payload: str) -> dict:
    """Decode the payload, retrying once with literal escape sequences undone."""
    payload = convert_fractions_to_decimals(payload)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        try:
            data = json.loads(convert_fractions_to_decimals(_unescape(payload)))
        except json.JSONDecodeError as e:
            raise ParseFailedError(f"LLM response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseFailedError("LLM response is not a JSON object")
    return data


def _to_category(value: str) -> Optional[Category]:
    return _CATEGORY_LOOKUP.get(str(value).strip().lower())


def parse_llm_response(text: str, source_url: str = "", title_hint: Optional[str] = None) -> LLMParseOutcome:
    """
    Decode the LLM answer into a normalized Recipe.

    Args:
        text: Raw completion text
        source_url: URL the recipe came from
        title_hint: Recipe name to use when the response has none

    Returns:
        LLMParseOutcome with the recipe and one note per dropped entry

    Raises:
        ParseFailedError: If the response is not JSON or lacks the required keys
    """
    data = _decode(_json_payload(_strip_code_fence(text)))
    try:
        llm_recipe = LLMRecipe.model_validate(data)
    except ValidationError as e:
        raise ParseFailedError(f"LLM response is missing required fields: {e.errors()[0]['loc']}") from e

    notes: List[str] = []
    ingredients: List[Ingredient] = []
    for idx, entry in enumerate(llm_recipe.ingredients):
        if isinstance(entry.get("amount"), str):
            try:
                entry = {**entry, "amount": parse_quantity(entry["amount"])}
            except AmountParseError:
                entry = {**entry, "amount": 1.0}
        try:
            item = LLMIngredient.model_validate(entry)
        except ValidationError as e:
            notes.append(f"Ingredient {idx} dropped: invalid fields {[err['loc'][0] for err in e.errors()]}")
            continue

        category = _to_category(item.category)
        if category is None:
            notes.append(f"Ingredient '{item.name}' dropped: unknown category '{item.category}'")
            continue
        if not math.isfinite(item.amount):
            notes.append(f"Ingredient '{item.name}' dropped: non-finite amount {item.amount}")
            continue
        if item.amount < 0:
            notes.append(f"Ingredient '{item.name}' dropped: negative amount {item.amount}")
            continue

        try:
            ingredients.append(Ingredient(name=item.name, amount=item.amount, unit=item.unit, category=category))
        except ValidationError as e:
            notes.append(f"Ingredient '{item.name}' dropped: {e.errors()[0]['msg']}")

    for note in notes:
        logger.warning(note)

    recipe = Recipe(
        source_url=source_url,
        name=llm_recipe.recipeName.strip() or title_hint,
        ingredients=normalize_ingredients(ingredients),
        parsed=True,
    )
    logger.info(f"LLM response decoded: {len(recipe.ingredients)} ingredients, {len(notes)} dropped")
    return LLMParseOutcome(recipe=recipe, notes=notes)


async def extract_with_llm(
    client: LLMClient,
    corpus: str,
    source_url: str = "",
    title_hint: Optional[str] = None,
) -> LLMParseOutcome:
    """Run the full fallback: build the prompt, call the backend, decode the answer."""
    prompt = build_prompt(corpus, title_hint)
    content = await client.complete(prompt)
    return parse_llm_response(content, source_url=source_url, title_hint=title_hint)
