from typing import Optional

from ..models.recipe import Category

CATEGORY_NAMES = ", ".join(f'"{category.value}"' for category in Category)

ingredients_prompt = """
You are a recipe ingredient extractor. Your task is to turn the ingredient lines of a recipe page into a shopping list.

1. Extraction rules:
   - CRITICAL - EXTRACT EVERY LISTED INGREDIENT:
   - Include every ingredient that appears in the content below, in order
   - DO NOT add ingredients that are not in the content
   - DO NOT substitute one ingredient for another
   - Ignore section headings ("For the sauce:"), equipment, times and servings

2. Amounts:
   - Keep every explicit amount EXACTLY as written
   - Write amounts as decimal numbers: 1/2 -> 0.5, 1 1/2 -> 1.5
   - For a range ("2-3"), use the larger number
   - If no amount is given, use 1

3. Units - use ONLY one of these values:
   teaspoons, tablespoons, cups, pints, quarts, gallons, fluid ounces, milliliters, liters,
   ounces, pounds, grams, kilograms, cloves, slices, cans, jars, bottles, packages, bags,
   bunches, heads, leaves, sprigs, stalks, sticks, pinches, dashes, small, medium, large
   - Use an empty string "" for items counted individually (NEVER "pieces")

4. Names - write what someone would buy at the store:
   - Remove preparation verbs: diced, chopped, minced, sliced, grated, peeled, drained
   - Remove cooking-state words: cooked, roasted, toasted, melted, softened, room temperature
   - Remove processing words: finely, coarsely, thinly, freshly, sifted, packed
   - Remove generic size words: small, medium, large
   - KEEP modifiers that define the ingredient: "large eggs", "unsalted butter",
     "ground beef", "whole milk", "frozen peas"

5. Category - EXACTLY one of: {categories}

RESPONSE FORMAT:
Respond with ONLY a JSON object, no markdown and no explanations:
{{"recipeName": "string", "ingredients": [{{"name": "string", "amount": 0.0, "unit": "string", "category": "string"}}]}}
"""


def build_prompt(corpus: str, title_hint: Optional[str] = None) -> str:
    """Render the extraction prompt around a condensed ingredient corpus."""
    prompt = ingredients_prompt.format(categories=CATEGORY_NAMES)
    if title_hint:
        prompt += f"\nRECIPE TITLE: {title_hint}\n"
    return prompt + f"\nCONTENT:\n{corpus}\n"
