"""
Shared word lists and patterns for ingredient extraction.

Every stage reads its vocabulary from here: the content locator (noise
denylist, section markers, measurement patterns), the regex parser (unit
alternation), the normalizer (unit table, preparation words, categories),
the validator (unit whitelist, non-ingredient words) and the LLM prompt.
"""

import re

from ..models.recipe import Category

# ═══════════════════════════════════════════════════════════════════
# UNITS
# ═══════════════════════════════════════════════════════════════════

# Every variant maps to one canonical plural; canonical forms map to themselves.
# "piece(s)" collapses to the empty count marker.
UNIT_TABLE = {
    # Volume
    "t": "teaspoons", "ts": "teaspoons", "tsp": "teaspoons", "tsps": "teaspoons",
    "teaspoon": "teaspoons", "teaspoons": "teaspoons",
    "tb": "tablespoons", "tbl": "tablespoons", "tbs": "tablespoons", "tbsp": "tablespoons",
    "tbsps": "tablespoons", "tablespoon": "tablespoons", "tablespoons": "tablespoons",
    "c": "cups", "cup": "cups", "cups": "cups",
    "pt": "pints", "pint": "pints", "pints": "pints",
    "qt": "quarts", "quart": "quarts", "quarts": "quarts",
    "gal": "gallons", "gallon": "gallons", "gallons": "gallons",
    "fl oz": "fluid ounces", "fluid ounce": "fluid ounces", "fluid ounces": "fluid ounces",
    "ml": "milliliters", "milliliter": "milliliters", "milliliters": "milliliters",
    "millilitre": "milliliters", "millilitres": "milliliters",
    "l": "liters", "liter": "liters", "liters": "liters", "litre": "liters", "litres": "liters",
    # Weight
    "oz": "ounces", "ounce": "ounces", "ounces": "ounces",
    "lb": "pounds", "lbs": "pounds", "pound": "pounds", "pounds": "pounds",
    "g": "grams", "gr": "grams", "gram": "grams", "grams": "grams", "gramme": "grams", "grammes": "grams",
    "kg": "kilograms", "kilo": "kilograms", "kilos": "kilograms",
    "kilogram": "kilograms", "kilograms": "kilograms",
    # Count-like
    "clove": "cloves", "cloves": "cloves",
    "slice": "slices", "slices": "slices",
    "can": "cans", "cans": "cans",
    "jar": "jars", "jars": "jars",
    "bottle": "bottles", "bottles": "bottles",
    "package": "packages", "packages": "packages", "pkg": "packages", "pkgs": "packages",
    "bag": "bags", "bags": "bags",
    "bunch": "bunches", "bunches": "bunches",
    "head": "heads", "heads": "heads",
    "leaf": "leaves", "leaves": "leaves",
    "sprig": "sprigs", "sprigs": "sprigs",
    "stalk": "stalks", "stalks": "stalks",
    "stick": "sticks", "sticks": "sticks",
    "pinch": "pinches", "pinches": "pinches",
    "dash": "dashes", "dashes": "dashes",
    "piece": "", "pieces": "",
    # Size qualifiers act as units for count items ("3 large eggs")
    "small": "small", "medium": "medium", "large": "large",
}

SIZE_WORDS = ("small", "medium", "large")

# Units accepted by the validator, compared against the lowercased unit
VALID_UNITS = frozenset(
    [unit for unit in UNIT_TABLE if unit not in ("piece", "pieces")]
    + [unit for unit in UNIT_TABLE.values() if unit]
    + ["count", "to taste"]
)

# Units that are wordy enough to show up as a measurement inside running text.
# Single letters are left out: "2 g" is a unit, "2 c" in prose usually is not.
_MEASUREMENT_UNITS = sorted(
    {unit for unit in UNIT_TABLE if len(unit) > 1 and unit not in ("piece", "pieces")}
    | {"piece", "pieces", "g", "l"},
    key=len,
    reverse=True,
)
MEASUREMENT_UNIT_PATTERN = "|".join(re.escape(unit) for unit in _MEASUREMENT_UNITS)

# Alternation used by the regex parser, longest first so "tbsp" wins over "t"
PARSER_UNIT_PATTERN = "|".join(
    re.escape(unit) for unit in sorted(UNIT_TABLE, key=len, reverse=True)
)

UNICODE_FRACTIONS = {
    "¼": "1/4", "½": "1/2", "¾": "3/4",
    "⅓": "1/3", "⅔": "2/3",
    "⅕": "1/5", "⅖": "2/5", "⅗": "3/5", "⅘": "4/5",
    "⅙": "1/6", "⅚": "5/6",
    "⅛": "1/8", "⅜": "3/8", "⅝": "5/8", "⅞": "7/8",
}

# Display glyphs, in the order they are tried
DISPLAY_FRACTIONS = [
    (0.125, "⅛"), (0.25, "¼"), (1 / 3, "⅓"), (0.375, "⅜"), (0.5, "½"),
    (0.625, "⅝"), (2 / 3, "⅔"), (0.75, "¾"), (0.875, "⅞"),
]

# Quantity: mixed number, fraction, decimal or integer, optionally a range
QUANTITY_PATTERN = (
    r"(?:\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?)"
    r"(?:\s*(?:-|–|—|to)\s*(?:\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?))?"
)

# ═══════════════════════════════════════════════════════════════════
# NOISE DENYLIST (always checked before any positive signal)
# ═══════════════════════════════════════════════════════════════════

CSS_PROPERTIES = (
    "display", "width", "height", "min-width", "max-width", "min-height", "max-height",
    "position", "top", "left", "right", "bottom", "border", "border-radius", "padding",
    "margin", "background", "background-color", "color", "font", "font-size", "font-family",
    "font-weight", "line-height", "text-align", "text-decoration", "float", "clear",
    "overflow", "z-index", "opacity", "visibility", "box-shadow", "flex", "grid",
    "transform", "transition", "animation", "content", "cursor", "outline",
)

NOISE_KEYWORDS = (
    # CSS rules and selectors
    "var(--", "!important", "@media", "@keyframes", "@import", "@font-face", "@supports",
    ".is-hidden", ".visually-hidden", ".img--noscript", ".primary-img--noscript",
    ".no-js", ".mntl-", ".lazyload", "img[src=",
    # JavaScript
    "function(", "function ", "=>", "document.", "window.", "console.", "settimeout",
    "addeventlistener", "queryselector", "getelementbyid", "getelementsbyclassname",
    "preventdefault", "json.parse", "typeof ",
    # Markup attributes leaking into text
    "data-", "aria-", "class=", "style=", "href=", "src=", "onclick=", "onload=",
    # Analytics, consent and ad frameworks
    "gtag(", "ga(", "datalayer", "googletag", "adsbygoogle", "onetrust", "analytics",
    "tracking", "cookie consent",
    # Social and web frameworks
    "facebook", "twitter", "instagram", "pinterest", "linkedin",
    "jquery", "react", "webpack", "bootstrap", "tailwind",
)

# "display:flex;" and friends: a property, a colon, a value and a terminator
CSS_DECLARATION_RE = re.compile(
    r"(?<![\w-])(?:" + "|".join(re.escape(prop) for prop in CSS_PROPERTIES) + r")\s*:[^;{}\n]*;",
    re.IGNORECASE,
)
# ".recipe-card {" / "#main{" / "body {": selector-like identifier followed by a brace block
CSS_SELECTOR_BLOCK_RE = re.compile(r"(?:^|[\s,}>])[.#]?[a-z][\w-]*(?:[.:#][\w-]+)*\s*\{", re.IGNORECASE)
CSS_DOTTED_SELECTOR_RE = re.compile(r"\.[a-z_][\w-]*[^{}]*\{", re.IGNORECASE)

# ═══════════════════════════════════════════════════════════════════
# SECTION MARKERS
# ═══════════════════════════════════════════════════════════════════

SECTION_ENTRY_MARKERS = (
    "ingredients", "ingredient list", "you'll need", "you will need", "what you need", "for the",
)
SECTION_EXIT_MARKERS = (
    "directions", "instructions", "method", "steps", "nutrition", "calories",
    "preparation", "how to make",
)
SECTION_EXIT_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(marker) for marker in SECTION_EXIT_MARKERS) + r")\b",
    re.IGNORECASE,
)
BULLET_GLYPHS = ("•", "◦", "▪", "▢", "☐", "✓", "·", "- ", "* ")
LIST_START_TAG_RE = re.compile(r"<\s*(?:ul|ol|li)\b", re.IGNORECASE)
LEADING_BULLET_RE = re.compile(r"^\s*(?:[•◦▪▢☐✓·*\-–]+|\d+[.)](?!\d))\s*")

# ═══════════════════════════════════════════════════════════════════
# INGREDIENT VOCABULARY
# ═══════════════════════════════════════════════════════════════════

INGREDIENT_WORDS = (
    "flour", "sugar", "salt", "pepper", "butter", "oil", "egg", "eggs", "milk", "cream",
    "cheese", "garlic", "onion", "onions", "shallot", "tomato", "tomatoes", "chicken", "beef",
    "pork", "lamb", "fish", "salmon", "shrimp", "bacon", "rice", "pasta", "noodles", "water",
    "vinegar", "lemon", "lime", "orange", "honey", "vanilla", "chocolate", "cocoa", "yeast",
    "baking soda", "baking powder", "cinnamon", "nutmeg", "basil", "parsley", "cilantro",
    "thyme", "oregano", "rosemary", "cumin", "paprika", "ginger", "carrot", "carrots",
    "celery", "potato", "potatoes", "broth", "stock", "wine", "yogurt", "mushrooms",
    "spinach", "beans", "chickpeas", "lentils", "oats", "nuts", "almonds", "walnuts",
    "raisins", "apple", "apples", "banana", "bananas", "berries", "zucchini", "cabbage",
    "lettuce", "cucumber", "avocado", "corn", "peas", "sauce", "mustard", "mayonnaise",
    "ketchup", "soy sauce", "syrup", "bread", "tortillas", "coconut", "sesame",
)
INGREDIENT_WORD_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in INGREDIENT_WORDS) + r")\b",
    re.IGNORECASE,
)

# Words that mean a numeral is a time or yield, not a quantity
NON_QUANTITY_WORDS = (
    "minute", "minutes", "min", "mins", "hour", "hours", "hr", "hrs", "second", "seconds",
    "serving", "servings", "serves", "people", "person", "calories", "kcal", "degrees",
    "inch", "inches", "cm", "px", "rem", "em", "vh", "vw", "comments", "reviews", "ratings",
    "star", "stars", "vote", "votes", "comment", "review", "rating", "reply", "replies",
    "day", "days", "week", "weeks", "step", "steps",
)

# ═══════════════════════════════════════════════════════════════════
# NAME CLEANING
# ═══════════════════════════════════════════════════════════════════

# Preparation, cooking-state and processing words dropped from names.
# Identity words ("fresh", "frozen", "ground", "whole", "unsalted") are kept.
PREPARATION_WORDS = (
    "diced", "chopped", "minced", "sliced", "grated", "shredded", "peeled", "seeded",
    "deseeded", "cored", "trimmed", "drained", "rinsed", "washed", "halved", "quartered",
    "cubed", "julienned", "crushed", "mashed", "pureed", "beaten", "whisked", "sifted",
    "packed", "zested", "juiced", "pitted", "stemmed", "hulled", "torn",
    "finely", "coarsely", "thinly", "thickly", "roughly", "lightly", "freshly", "very",
    "cooked", "uncooked", "roasted", "toasted", "softened", "melted", "thawed",
    "defrosted", "chilled", "warmed", "warm", "cold", "divided", "separated", "reserved",
    "optional",
)
PREPARATION_PHRASES = (
    "at room temperature", "room temperature", "to taste", "for garnish", "for garnishing",
    "for serving", "for decoration", "plus more", "or more", "as needed", "if needed",
    "cut into pieces", "cut into chunks", "cut into strips", "cut into cubes",
)
PREPARATION_WORD_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in PREPARATION_WORDS) + r")\b",
    re.IGNORECASE,
)
PREPARATION_PHRASE_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(phrase) for phrase in PREPARATION_PHRASES) + r")\b",
    re.IGNORECASE,
)
GENERIC_SIZE_RE = re.compile(r"\b(?:extra[- ]large|small|medium|large|jumbo|big)\b", re.IGNORECASE)

# Nouns whose size grade is part of what you buy
SIZE_IDENTITY_NOUNS = ("egg", "eggs", "shrimp", "prawn", "prawns", "scallop", "scallops")

# ═══════════════════════════════════════════════════════════════════
# VALIDATION
# ═══════════════════════════════════════════════════════════════════

NON_INGREDIENT_WORDS = (
    "ingredient", "ingredients", "list", "item", "step", "direction", "instruction",
    "recipe", "cook", "prep", "total", "time", "serving", "servings",
)
NON_INGREDIENT_RE = re.compile(
    r"\b(" + "|".join(re.escape(word) for word in NON_INGREDIENT_WORDS) + r")s?\b",
    re.IGNORECASE,
)

PANTRY_STAPLES = ("salt", "pepper", "oil", "water", "flour", "sugar", "egg", "milk", "butter")

# ═══════════════════════════════════════════════════════════════════
# CATEGORIES
# ═══════════════════════════════════════════════════════════════════

# Checked first, in order, before the broad keyword table
CATEGORY_OVERRIDES = [
    ("olive oil", Category.PANTRY), ("vegetable oil", Category.PANTRY),
    ("canola oil", Category.PANTRY), ("sesame oil", Category.PANTRY),
    ("coconut oil", Category.PANTRY), ("peanut butter", Category.PANTRY),
    ("garlic powder", Category.PANTRY), ("onion powder", Category.PANTRY),
    ("black pepper", Category.PANTRY), ("ground pepper", Category.PANTRY),
    ("cayenne", Category.PANTRY), ("peppercorn", Category.PANTRY),
    ("red pepper flakes", Category.PANTRY), ("chili flakes", Category.PANTRY),
    ("baking soda", Category.PANTRY), ("baking powder", Category.PANTRY),
    ("coconut milk", Category.PANTRY), ("condensed milk", Category.PANTRY),
    ("chicken stock", Category.PANTRY), ("chicken broth", Category.PANTRY),
    ("beef stock", Category.PANTRY), ("beef broth", Category.PANTRY),
    ("vegetable stock", Category.PANTRY), ("vegetable broth", Category.PANTRY),
    ("whipped cream", Category.DAIRY), ("whipped topping", Category.DAIRY),
    ("cream cheese", Category.DAIRY), ("ice cream", Category.FROZEN),
    ("watermelon", Category.PRODUCE),
    ("lemon juice", Category.PRODUCE), ("lime juice", Category.PRODUCE),
    ("orange juice", Category.PRODUCE), ("lemon zest", Category.PRODUCE),
    ("lime zest", Category.PRODUCE), ("orange zest", Category.PRODUCE),
]

CATEGORY_KEYWORDS = {
    Category.FROZEN: ["frozen"],
    Category.MEAT_SEAFOOD: [
        "beef", "pork", "chicken", "turkey", "lamb", "veal", "duck", "sausage", "steak",
        "mince", "bacon", "fish", "salmon", "tuna", "cod", "shrimp", "prawn", "crab",
        "lobster", "squid", "mussel", "clam", "scallop", "anchovy",
    ],
    Category.DELI: ["ham", "salami", "prosciutto", "pepperoni", "chorizo", "pancetta", "nduja"],
    Category.BAKERY: ["bread", "baguette", "bun", "roll", "bagel", "croissant", "tortilla", "pita", "brioche"],
    Category.DAIRY: ["milk", "butter", "cream", "cheese", "yogurt", "yoghurt", "egg", "parmesan", "mozzarella", "ricotta"],
    Category.PRODUCE: [
        "apple", "banana", "lemon", "lime", "orange", "grapefruit", "berry", "berries",
        "lettuce", "onion", "shallot", "garlic", "tomato", "pepper", "cucumber", "spinach",
        "kale", "carrot", "celery", "potato", "zucchini", "mushroom", "avocado", "cabbage",
        "broccoli", "cauliflower", "ginger", "parsley", "mint", "chives", "basil",
        "cilantro", "thyme", "rosemary", "scallion", "leek", "herb", "zest",
    ],
    Category.PANTRY: [
        "flour", "sugar", "salt", "oil", "vinegar", "rice", "pasta", "noodles", "stock",
        "broth", "spice", "spices", "beans", "lentils", "oats", "honey", "syrup", "yeast",
        "vanilla", "cocoa", "chocolate", "sauce", "mustard", "paprika", "cumin", "cinnamon",
    ],
    Category.BEVERAGES: ["water", "wine", "beer", "soda", "juice", "coffee", "tea", "rum", "vodka", "whiskey", "brandy"],
}

# ═══════════════════════════════════════════════════════════════════
# RECIPE PAGE DETECTION
# ═══════════════════════════════════════════════════════════════════

NON_RECIPE_DOMAINS = (
    "facebook.com", "instagram.com", "twitter.com", "x.com", "tiktok.com", "youtube.com",
    "youtu.be", "pinterest.com", "reddit.com", "google.com", "bing.com", "amazon.com",
    "wikipedia.org", "linkedin.com",
)
RECIPE_MARKUP_HINTS = (
    "recipeingredient", "itemprop=\"ingredients\"", "itemprop=\"recipeingredient\"",
    "wprm-recipe", "tasty-recipes", "mntl-structured-ingredients", "recipe-ingredients",
    "ingredients-list",
)


def word_pattern(words) -> "re.Pattern[str]":
    """Compile a case-insensitive whole-word alternation allowing simple plurals."""
    return re.compile(
        r"\b(?:" + "|".join(re.escape(word) for word in words) + r")(?:s|es)?\b",
        re.IGNORECASE,
    )
