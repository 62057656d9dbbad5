"""
Tests for the LLM fallback: prompt building and response decoding.

The backend itself is mocked; see test_llm_client.py for the transport.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ingredient_extractor.exceptions import LLMError, ParseFailedError
from ingredient_extractor.models.recipe import Category
from ingredient_extractor.prompts.ingredients import build_prompt
from ingredient_extractor.services.llm_fallback import extract_with_llm, parse_llm_response


def _make_response(ingredients, name: str = "Pancakes") -> str:
    return json.dumps({"recipeName": name, "ingredients": ingredients})


PANCAKE_INGREDIENTS = [
    {"name": "flour", "amount": 1.5, "unit": "cups", "category": "Pantry"},
    {"name": "milk", "amount": 1.25, "unit": "cups", "category": "Dairy"},
    {"name": "eggs", "amount": 2, "unit": "", "category": "Dairy"},
]


# ═══════════════════════════════════════════════════════════════════
# PROMPT
# ═══════════════════════════════════════════════════════════════════

class TestBuildPrompt:

    def test_contains_corpus_and_categories(self):
        prompt = build_prompt("2 cups flour\n1 cup sugar")

        assert prompt.rstrip().endswith("2 cups flour\n1 cup sugar")
        assert "CONTENT:" in prompt
        for category in Category:
            assert category.value in prompt

    def test_title_hint(self):
        assert "RECIPE TITLE: Lemon Cake" in build_prompt("2 cups flour", title_hint="Lemon Cake")
        assert "RECIPE TITLE" not in build_prompt("2 cups flour")


# ═══════════════════════════════════════════════════════════════════
# RESPONSE DECODING
# ═══════════════════════════════════════════════════════════════════

class TestParseLLMResponse:

    def test_plain_json(self):
        outcome = parse_llm_response(_make_response(PANCAKE_INGREDIENTS), source_url="https://example.com/p")
        recipe = outcome.recipe

        assert recipe.parsed
        assert recipe.name == "Pancakes"
        assert recipe.source_url == "https://example.com/p"
        assert [(i.name, i.amount, i.unit) for i in recipe.ingredients] == [
            ("flour", 1.5, "cups"),
            ("milk", 1.25, "cups"),
            ("eggs", 2.0, ""),
        ]
        assert outcome.notes == []

    def test_code_fence(self):
        text = "```json\n" + _make_response(PANCAKE_INGREDIENTS) + "\n```"
        assert len(parse_llm_response(text).recipe.ingredients) == 3

    def test_prose_around_json(self):
        text = "Here is the shopping list:\n" + _make_response(PANCAKE_INGREDIENTS) + "\nEnjoy!"
        assert len(parse_llm_response(text).recipe.ingredients) == 3

    def test_fraction_amounts(self):
        """Textual fractions are turned into decimals before decoding."""
        text = '{"recipeName": "Tea", "ingredients": [{"name": "sugar", "amount": 1/2, "unit": "tsp", "category": "Pantry"}]}'
        ingredient = parse_llm_response(text).recipe.ingredients[0]
        assert (ingredient.amount, ingredient.unit) == (0.5, "teaspoons")

    def test_escaped_payload(self):
        text = (
            r'{\"recipeName\": \"Toast\", \"ingredients\": [{\"name\": \"bread\", '
            r'\"amount\": 2, \"unit\": \"slices\", \"category\": \"Bakery\"}]}'
        )
        recipe = parse_llm_response(text).recipe

        assert recipe.name == "Toast"
        assert recipe.ingredients[0].category == Category.BAKERY

    def test_string_amounts(self):
        text = _make_response([
            {"name": "garlic", "amount": "2-3", "unit": "cloves", "category": "Produce"},
            {"name": "basil", "amount": "a handful", "unit": "", "category": "Produce"},
        ])
        amounts = [i.amount for i in parse_llm_response(text).recipe.ingredients]
        assert amounts == [3.0, 1.0]

    def test_category_case_insensitive(self):
        text = _make_response([
            {"name": "onion", "amount": 1, "unit": "", "category": "produce"},
            {"name": "shrimp", "amount": 200, "unit": "g", "category": "meat and seafood"},
        ])
        assert [i.category for i in parse_llm_response(text).recipe.ingredients] == [
            Category.PRODUCE, Category.MEAT_SEAFOOD,
        ]

    def test_names_and_units_normalized(self):
        text = _make_response([{"name": "Finely Chopped Onion", "amount": 1, "unit": "Tbsp", "category": "Produce"}])
        ingredient = parse_llm_response(text).recipe.ingredients[0]
        assert (ingredient.name, ingredient.unit) == ("onion", "tablespoons")

    def test_unknown_category_dropped_with_note(self):
        text = _make_response(PANCAKE_INGREDIENTS + [
            {"name": "chips", "amount": 1, "unit": "bags", "category": "Snacks"},
        ])
        outcome = parse_llm_response(text)

        assert [i.name for i in outcome.recipe.ingredients] == ["flour", "milk", "eggs"]
        assert outcome.notes == ["Ingredient 'chips' dropped: unknown category 'Snacks'"]

    def test_invalid_entries_dropped(self):
        text = _make_response([
            {"name": "salt"},
            {"name": "sugar", "amount": -1, "unit": "cups", "category": "Pantry"},
            {"name": "flour", "amount": 2, "unit": "cups", "category": "Pantry"},
        ])
        outcome = parse_llm_response(text)

        assert [i.name for i in outcome.recipe.ingredients] == ["flour"]
        assert len(outcome.notes) == 2
        assert outcome.notes[0].startswith("Ingredient 0 dropped")
        assert "negative amount" in outcome.notes[1]

    def test_null_unit_and_amount_kept(self):
        """Count items come back with a null unit; a null amount means one."""
        text = _make_response([
            {"name": "eggs", "amount": 3, "unit": None, "category": "Dairy"},
            {"name": "lemon", "amount": None, "unit": None, "category": "Produce"},
            {"name": "flour", "amount": 2, "unit": "cups", "category": "Pantry"},
        ])
        outcome = parse_llm_response(text)

        assert [(i.name, i.amount, i.unit) for i in outcome.recipe.ingredients] == [
            ("eggs", 3.0, ""), ("lemon", 1.0, ""), ("flour", 2.0, "cups"),
        ]
        assert outcome.notes == []

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_amount_dropped(self, amount):
        text = (
            '{"recipeName": "Pancakes", "ingredients": ['
            f'{{"name": "eggs", "amount": {amount}, "unit": "", "category": "Dairy"}},'
            '{"name": "flour", "amount": 2, "unit": "cups", "category": "Pantry"}]}'
        )
        outcome = parse_llm_response(text)

        assert [i.name for i in outcome.recipe.ingredients] == ["flour"]
        assert len(outcome.notes) == 1
        assert outcome.notes[0].startswith("Ingredient 'eggs' dropped")

    def test_title_hint_when_name_missing(self):
        text = json.dumps({"ingredients": PANCAKE_INGREDIENTS})
        assert parse_llm_response(text, title_hint="Fluffy Pancakes").recipe.name == "Fluffy Pancakes"

    @pytest.mark.parametrize("text", [
        "no json here",
        '{"recipeName": "x"}',
        "{not json}",
        '["flour", "sugar"]',
    ])
    def test_undecodable(self, text):
        with pytest.raises(ParseFailedError):
            parse_llm_response(text)


# ═══════════════════════════════════════════════════════════════════
# END TO END WITH A MOCKED CLIENT
# ═══════════════════════════════════════════════════════════════════

class TestExtractWithLLM:

    async def test_prompt_carries_corpus(self):
        client = MagicMock()
        client.complete = AsyncMock(return_value=_make_response(PANCAKE_INGREDIENTS))

        outcome = await extract_with_llm(client, "1 1/2 cups flour\n2 eggs", source_url="https://example.com/p")

        prompt = client.complete.call_args.args[0]
        assert "1 1/2 cups flour\n2 eggs" in prompt
        assert len(outcome.recipe.ingredients) == 3

    async def test_client_errors_propagate(self):
        """LLMError is a ParseFailedError so callers can treat both alike."""
        client = MagicMock()
        client.complete = AsyncMock(side_effect=LLMError("LLM backend returned status 500"))

        with pytest.raises(ParseFailedError):
            await extract_with_llm(client, "2 cups flour")
