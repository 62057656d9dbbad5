"""Constants for ingredient extractor package."""

import os

# Corpus handed to the parsers is bounded by both limits
MAX_CORPUS_CHARS = 50_000
MAX_CORPUS_TOKENS = 4_000
CHARS_PER_TOKEN = 4
TRUNCATION_MARKER = "\n[... content truncated ...]"

# Consecutive non-matching lines tolerated inside a located section
SECTION_RUN_CAP = 40

# A strategy must yield at least this many lines to win
MIN_CANDIDATE_LINES = 2

# The regex path needs this many recognized lines before it is trusted
MIN_REGEX_INGREDIENTS = 3

MAX_INGREDIENT_AMOUNT = 1000.0
AMOUNT_DECIMALS = 2
DISPLAY_FRACTION_TOLERANCE = 0.1

# Acceptance thresholds, tunable through the environment
CONFIDENCE_THRESHOLD = int(os.getenv("RECIPE_CONFIDENCE_THRESHOLD", "70"))
VERIFICATION_REJECT_THRESHOLD = int(os.getenv("RECIPE_VERIFICATION_REJECT", "30"))
VERIFICATION_WARN_THRESHOLD = int(os.getenv("RECIPE_VERIFICATION_WARN", "60"))
VERIFICATION_ACCEPT_THRESHOLD = int(os.getenv("RECIPE_VERIFICATION_ACCEPT", "80"))

if not 0 <= VERIFICATION_REJECT_THRESHOLD <= VERIFICATION_WARN_THRESHOLD <= VERIFICATION_ACCEPT_THRESHOLD <= 100:
    raise ValueError(
        "Verification thresholds must satisfy 0 <= reject <= warn <= accept <= 100, got "
        f"{VERIFICATION_REJECT_THRESHOLD}/{VERIFICATION_WARN_THRESHOLD}/{VERIFICATION_ACCEPT_THRESHOLD}"
    )
