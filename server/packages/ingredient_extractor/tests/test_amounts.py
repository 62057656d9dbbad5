"""Tests for amount and fraction parsing."""

import pytest

from ingredient_extractor.exceptions import AmountParseError
from ingredient_extractor.services.amounts import (
    convert_fractions_to_decimals,
    parse_amount,
    parse_amount_or_default,
    parse_quantity,
    replace_unicode_fractions,
)


class TestParseAmount:
    """Mixed numbers, fractions and literals parse exactly."""

    @pytest.mark.parametrize("text,expected", [
        ("1/2", 0.5),
        ("1/4", 0.25),
        ("3/4", 0.75),
        ("1 1/2", 1.5),
        ("2 1/4", 2.25),
        ("3", 3.0),
        ("10", 10.0),
        ("0.5", 0.5),
    ])
    def test_reference_values(self, text, expected):
        """Reference amounts are reproduced exactly, not approximately."""
        assert parse_amount(text) == expected

    def test_unicode_fraction(self):
        """Vulgar fraction glyphs are understood on their own and after a whole number."""
        assert parse_amount("½") == 0.5
        assert parse_amount("1½") == 1.5
        assert parse_amount("2 ¼") == 2.25

    def test_comma_decimal(self):
        """European decimal commas are accepted."""
        assert parse_amount("1,5") == 1.5

    @pytest.mark.parametrize("text", ["", "abc", "a few", "1/0", "2 1/0"])
    def test_unparsable_raises(self, text):
        """Anything else is an AmountParseError, which is also a ValueError."""
        with pytest.raises(AmountParseError):
            parse_amount(text)
        with pytest.raises(ValueError):
            parse_amount(text)


class TestParseQuantity:
    """Ranges resolve to their upper bound."""

    @pytest.mark.parametrize("text,expected", [
        ("2-3", 3.0),
        ("2 - 3", 3.0),
        ("2–3", 3.0),
        ("2 to 3", 3.0),
        ("1/2-1", 1.0),
        ("1 1/2", 1.5),
    ])
    def test_ranges(self, text, expected):
        assert parse_quantity(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("1-1/2", 1.5),
        ("2 - 3/4", 2.75),
        ("1-3/2", 1.5),
    ])
    def test_hyphenated_mixed_number(self, text, expected):
        """W-N/D with a proper fraction is a mixed number; otherwise it stays a range."""
        assert parse_quantity(text) == expected

    def test_default_on_failure(self):
        """The caller-side default keeps the pipeline going."""
        assert parse_amount_or_default("a few") == 1.0
        assert parse_amount_or_default("some", default=2.0) == 2.0
        assert parse_amount_or_default("1/2") == 0.5


class TestFractionText:

    def test_replace_unicode_fractions(self):
        assert replace_unicode_fractions("1½ cups") == "1 1/2 cups"
        assert replace_unicode_fractions("¾ cup") == "3/4 cup"

    def test_convert_fractions_in_json(self):
        """Textual fractions used as JSON amounts become decimals."""
        text = '{"name": "milk", "amount": 1/2, "unit": "cups"}'
        assert convert_fractions_to_decimals(text) == '{"name": "milk", "amount": 0.5, "unit": "cups"}'

    def test_convert_mixed_number_in_json(self):
        text = '[{"amount": 1 1/2}]'
        assert convert_fractions_to_decimals(text) == '[{"amount": 1.5}]'

    def test_convert_leaves_strings_alone(self):
        """Fractions inside other string values are not touched."""
        text = '{"name": "1/2 and 1/2", "amount": 2}'
        assert convert_fractions_to_decimals(text) == text
