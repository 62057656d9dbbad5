"""
Tests for the heuristic content locator.

Covers:
- line classification, with the CSS/script denylist taking precedence
- each strategy and their priority order
- corpus truncation
"""

import pytest
from bs4 import BeautifulSoup

from ingredient_extractor.constants import TRUNCATION_MARKER
from ingredient_extractor.services.locator import (
    CorpusStrategy,
    LineKind,
    aggressive_scan_strategy,
    classify_line,
    estimate_token_count,
    has_measurement,
    html_to_text,
    locate_ingredient_corpus,
    make_soup,
    positional_section_strategy,
    select_strategy,
    soup_to_lines,
    structural_list_strategy,
    truncate_corpus,
)


def _make_page(body: str) -> str:
    return f"<html><head><title>Test</title></head><body>{body}</body></html>"


STRUCTURED_LIST_PAGE = _make_page("""
<h1>Lemon Cake</h1>
<p>This cake takes 45 minutes and serves 8.</p>
<div class="recipe-ingredients">
  <ul>
    <li>2 cups flour</li>
    <li>1 cup sugar</li>
    <li>Zest of 2 lemons</li>
    <li>Salt</li>
  </ul>
</div>
<ol>
  <li>Preheat the oven to 350 degrees.</li>
  <li>Mix the flour with 1 cup sugar.</li>
</ol>
""")

POSITIONAL_PAGE = _make_page("""
<div>
  <h2>Ingredients</h2>
  <p>2 cups flour</p>
  <p>1 cup sugar</p>
  <p>3 eggs</p>
  <h2>Instructions</h2>
  <p>Whisk 2 cups of the batter with the eggs.</p>
</div>
""")


# ═══════════════════════════════════════════════════════════════════
# LINE CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════

class TestClassifyLine:

    def test_css_denylist_wins_over_keywords(self):
        """A recipe keyword never rescues a line carrying a CSS declaration."""
        assert classify_line("ingredients display:flex;") == LineKind.NOISE

    @pytest.mark.parametrize("line", [
        ".recipe-card { margin: 0 auto; }",
        "#main{color:red}",
        "@media (max-width: 600px) {",
        "window.dataLayer = window.dataLayer || [];",
        "2 cups flour var(--accent)",
    ])
    def test_noise(self, line):
        assert classify_line(line) == LineKind.NOISE

    @pytest.mark.parametrize("line", [
        "2 cups flour",
        "1/2 cup milk",
        "1½ tbsp olive oil",
        "3 eggs",
        "• 200 g dark chocolate",
        "Zest of 1 lemon",
    ])
    def test_candidates(self, line):
        assert classify_line(line) == LineKind.CANDIDATE

    @pytest.mark.parametrize("line", [
        "Ingredients:",
        "Ingredients",
        "You'll need:",
        "For the sauce",
        "• Ingredient list",
    ])
    def test_section_entry(self, line):
        assert classify_line(line) == LineKind.SECTION_ENTRY

    @pytest.mark.parametrize("line", ["Instructions", "Directions:", "Nutrition facts", "Method"])
    def test_section_exit(self, line):
        assert classify_line(line) == LineKind.SECTION_EXIT

    @pytest.mark.parametrize("line", ["Prep time: 15 minutes", "Serves 4", "", "45 minutes"])
    def test_other(self, line):
        assert classify_line(line) == LineKind.OTHER

    def test_measurement_ignores_times(self):
        assert has_measurement("2 cups flour")
        assert not has_measurement("20 minutes")
        assert not has_measurement("4 servings")


# ═══════════════════════════════════════════════════════════════════
# HTML PREPARATION
# ═══════════════════════════════════════════════════════════════════

class TestHtmlPreparation:

    def test_script_and_style_removed(self):
        html = _make_page("<style>.a{color:red}</style><script>var x = 1;</script><p>2 cups flour</p>")
        assert html_to_text(html) == "2 cups flour"

    def test_one_line_per_block(self):
        soup = make_soup(_make_page("<div><p>2 cups <b>flour</b></p><p>1 cup sugar</p></div>"))
        assert soup_to_lines(soup) == ["2 cups flour", "1 cup sugar"]

    def test_list_items_get_bullets(self):
        soup = make_soup(_make_page("<ul><li>2 cups flour</li></ul>"))
        assert soup_to_lines(soup) == ["• 2 cups flour"]

    def test_lines_do_not_mutate_soup(self):
        soup = make_soup(_make_page("<ul><li>2 cups flour</li></ul>"))
        soup_to_lines(soup)
        assert soup.find("li").get_text() == "2 cups flour"


# ═══════════════════════════════════════════════════════════════════
# STRATEGIES
# ═══════════════════════════════════════════════════════════════════

class TestStrategies:

    def _run(self, strategy, html):
        soup = make_soup(html)
        return strategy(soup, soup_to_lines(soup))

    def test_structural_list_keeps_whole_list(self):
        """Items without a measurement ride along with the list they belong to."""
        lines = self._run(structural_list_strategy, STRUCTURED_LIST_PAGE)
        assert lines == ["2 cups flour", "1 cup sugar", "Zest of 2 lemons", "Salt"]

    def test_structural_list_ignores_instruction_lists(self):
        html = _make_page("<ol><li>Preheat the oven to 350 degrees.</li><li>Bake for 2 hours.</li></ol>")
        assert self._run(structural_list_strategy, html) is None

    def test_structural_list_prefers_ingredient_hint(self):
        html = _make_page(
            "<ul><li>2 cups flour</li><li>1 cup sugar</li></ul>"
            "<ul class='ingredients'><li>3 eggs</li><li>1 cup milk</li></ul>"
        )
        assert self._run(structural_list_strategy, html) == ["3 eggs", "1 cup milk"]

    def test_positional_section(self):
        lines = self._run(positional_section_strategy, POSITIONAL_PAGE)
        assert lines == ["2 cups flour", "1 cup sugar", "3 eggs"]

    def test_positional_section_run_cap(self):
        filler = "".join(f"<p>Paragraph number {i} about nothing</p>" for i in range(5))
        html = _make_page(f"<h2>Ingredients</h2><p>2 cups flour</p>{filler}<p>1 cup sugar</p>")
        soup = make_soup(html)
        lines = soup_to_lines(soup)

        assert positional_section_strategy(soup, lines, run_cap=3) == ["2 cups flour"]
        assert positional_section_strategy(soup, lines, run_cap=10) == ["2 cups flour", "1 cup sugar"]

    def test_positional_skips_css_noise(self):
        html = _make_page(
            "<p>Ingredients</p><p>ingredients display:flex;</p><p>2 cups flour</p><p>1 cup sugar</p>"
        )
        assert self._run(positional_section_strategy, html) == ["2 cups flour", "1 cup sugar"]

    def test_aggressive_scan(self):
        html = _make_page("<div><p>2 cups flour</p><p>Lovely weather</p><p>1 cup sugar</p></div>")
        assert self._run(aggressive_scan_strategy, html) == ["2 cups flour", "1 cup sugar"]

    def test_priority_order(self):
        """The structural list wins even when a positional section exists too."""
        soup = make_soup(STRUCTURED_LIST_PAGE)
        strategy, lines = select_strategy(soup, soup_to_lines(soup))
        assert strategy == CorpusStrategy.STRUCTURAL_LIST

        soup = make_soup(POSITIONAL_PAGE)
        strategy, lines = select_strategy(soup, soup_to_lines(soup))
        assert strategy == CorpusStrategy.POSITIONAL_SECTION

    def test_minimum_lines(self):
        html = _make_page("<p>2 cups flour</p>")
        soup = make_soup(html)
        assert select_strategy(soup, soup_to_lines(soup)) is None


# ═══════════════════════════════════════════════════════════════════
# CORPUS
# ═══════════════════════════════════════════════════════════════════

class TestLocateCorpus:

    def test_locates_structural_corpus(self):
        corpus = locate_ingredient_corpus(STRUCTURED_LIST_PAGE)

        assert corpus.strategy == CorpusStrategy.STRUCTURAL_LIST
        assert corpus.text.splitlines() == corpus.lines
        assert not corpus.truncated
        assert corpus.estimated_tokens == len(corpus.text) // 4

    def test_shared_soup_left_intact(self):
        """A soup handed in by the caller is copied; its scripts survive for the JSON-LD lookup."""
        html = STRUCTURED_LIST_PAGE.replace("</head>", '<script type="application/ld+json">{}</script></head>')
        soup = BeautifulSoup(html, "html.parser")

        corpus = locate_ingredient_corpus("", soup=soup)

        assert corpus.strategy == CorpusStrategy.STRUCTURAL_LIST
        assert corpus.lines == locate_ingredient_corpus(html).lines
        assert soup.find("script") is not None

    def test_nothing_found(self):
        assert locate_ingredient_corpus(_make_page("<p>Hello world</p>")) is None

    def test_css_never_in_corpus(self):
        html = _make_page(
            "<h2>Ingredients</h2><p>ingredients display:flex;</p>"
            "<p>2 cups flour</p><p>1 cup sugar</p><p>3 eggs</p>"
        )
        corpus = locate_ingredient_corpus(html)
        assert "display" not in corpus.text

    def test_truncated_with_marker(self):
        items = "".join(f"<li>{i} cups flour</li>" for i in range(1, 200))
        corpus = locate_ingredient_corpus(_make_page(f"<ul>{items}</ul>"), max_chars=200)

        assert corpus.truncated
        assert corpus.text.endswith(TRUNCATION_MARKER)
        assert len(corpus.text) <= 200 + len(TRUNCATION_MARKER)


class TestTruncation:

    def test_short_text_untouched(self):
        assert truncate_corpus("2 cups flour", max_chars=100) == ("2 cups flour", False)

    def test_cut_on_line_boundary(self):
        text = "\n".join(["2 cups flour"] * 20)
        truncated, was_cut = truncate_corpus(text, max_chars=50)

        assert was_cut
        body = truncated[: -len(TRUNCATION_MARKER)]
        assert all(line == "2 cups flour" for line in body.splitlines())

    def test_token_budget(self):
        """The token estimate bounds the corpus too (4 chars per token)."""
        text = "\n".join(["2 cups flour"] * 20)
        truncated, was_cut = truncate_corpus(text, max_chars=10_000, max_tokens=10)

        assert was_cut
        assert len(truncated) <= 40 + len(TRUNCATION_MARKER)

    def test_estimate_token_count(self):
        assert estimate_token_count("a" * 40) == 10
