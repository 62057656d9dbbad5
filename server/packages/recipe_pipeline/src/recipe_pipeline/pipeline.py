"""
Recipe extraction pipeline.

One run per URL:

    cache -> fetch -> structured data ─────────────────────────────> done
                   └> locate corpus -> regex parser ─┐
                                    └> LLM fallback ─┴> validate -> verify -> done

Every failure of a run is reported as ParseResult(success=False); only
successful results are cached.
"""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from ingredient_extractor.exceptions import (
    ExtractionError,
    LowConfidenceError,
    LowVerificationError,
    NoContentFoundError,
    ParseFailedError,
)
from ingredient_extractor.models.recipe import ExtractionSource, ParseResult, Recipe
from ingredient_extractor.providers.llm_client import LLMClient
from ingredient_extractor.services.llm_fallback import LLMParseOutcome, extract_with_llm
from ingredient_extractor.services.locator import html_to_text, locate_ingredient_corpus
from ingredient_extractor.services.normalizer import normalize_ingredients
from ingredient_extractor.services.regex_parser import parse_ingredient_lines
from ingredient_extractor.services.structured_data import (
    extract_recipe_title,
    extract_structured_recipe,
    is_likely_recipe_page,
)
from ingredient_extractor.services.validation import calculate_confidence_score, validate_ingredients
from ingredient_extractor.services.verification import (
    VerificationBand,
    classify_verification,
    verification_warning,
    verify_ingredients,
)
from page_fetcher import PageFetcher, validate_url

from .cache import ParseResultCache
from .observability import observe, update_trace
from .settings import PipelineSettings
from .stats import PerformanceStats

logger = logging.getLogger(__name__)

NOT_A_RECIPE_WARNING = "Page does not look like a recipe page"


class RecipePipeline:
    """Turns recipe URLs into ingredient lists."""

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        fetcher: Optional[PageFetcher] = None,
        llm_client: Optional[LLMClient] = None,
        cache: Optional[ParseResultCache] = None,
        stats: Optional[PerformanceStats] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Thresholds, budgets and endpoints; defaults come from the environment
            fetcher: Page fetcher; one is created from the settings when omitted
            llm_client: LLM backend client; one is created from the settings when omitted
            cache: Result cache, shared between runs
            stats: Counters updated by every run
        """
        self.settings = settings or PipelineSettings.from_env()
        self.fetcher = fetcher or PageFetcher(timeout=self.settings.fetch_timeout)
        self.llm_client = llm_client or LLMClient(
            endpoint=self.settings.llm_endpoint,
            api_key=self.settings.llm_api_key,
            timeout=self.settings.llm_timeout,
        )
        self.cache = cache if cache is not None else ParseResultCache(self.settings.cache_capacity)
        self.stats = stats if stats is not None else PerformanceStats()

    @observe(name="parse_recipe")
    async def parse(self, url: str) -> ParseResult:
        """
        Parse the ingredients of one recipe page.

        Args:
            url: The recipe URL

        Returns:
            ParseResult; success is False with an error message for every
            extraction failure (invalid URL, fetch error, nothing found,
            unparsable output, low confidence, low verification)
        """
        self.stats.record_request()
        try:
            url = validate_url(url)
        except ExtractionError as e:
            self.stats.record_failure()
            return ParseResult.failure(url or "", str(e))

        cached = await self.cache.get(url)
        if cached is not None:
            logger.info(f"Cache hit for {url}")
            self.stats.record_cache_hit()
            return cached

        try:
            page = await self.fetcher.fetch(url)
            result = await self.parse_html(url, page.html, page.text, soup=page.soup)
        except ExtractionError as e:
            logger.warning(f"Failed to parse {url}: {e}")
            self.stats.record_failure()
            return ParseResult.failure(url, str(e))

        await self.cache.put(url, result)
        self.stats.record_success(result.source)
        update_trace(
            source=result.source.value if result.source else None,
            ingredients=len(result.recipe.ingredients),
            confidence_score=result.confidence_score,
            verification_score=result.verification_score,
        )
        return result

    async def parse_html(
        self,
        url: str,
        html: str,
        text: Optional[str] = None,
        soup: Optional[BeautifulSoup] = None,
    ) -> ParseResult:
        """
        Run the extraction stages on an already downloaded page.

        The page is parsed once; every stage shares that soup. Pages that do
        not look like recipes never reach the LLM fallback.

        Raises:
            ExtractionError: Any extraction failure; parse() turns it into a failed result
        """
        if soup is None:
            soup = BeautifulSoup(html, "html.parser")
        source_text = text if text is not None else html_to_text(soup)
        warnings: List[str] = []
        likely_recipe = is_likely_recipe_page(url, html, soup)
        if not likely_recipe:
            warnings.append(NOT_A_RECIPE_WARNING)

        recipe = extract_structured_recipe(html, url, soup=soup)
        if recipe is not None:
            logger.info(f"Structured data path succeeded for {url}")
            return ParseResult(
                recipe=recipe,
                success=True,
                source=ExtractionSource.STRUCTURED_DATA,
                warnings=warnings,
            )

        located = locate_ingredient_corpus(
            html,
            max_chars=self.settings.max_corpus_chars,
            max_tokens=self.settings.max_corpus_tokens,
            section_run_cap=self.settings.section_run_cap,
            soup=soup,
        )
        if located is None:
            raise NoContentFoundError("No ingredient list found on the page")
        if located.truncated:
            warnings.append("Ingredient content was truncated before parsing")

        title = extract_recipe_title(html, soup)
        regex_ingredients = normalize_ingredients(
            parse_ingredient_lines(located.text.splitlines()), categorize=True
        )

        if len(regex_ingredients) >= self.settings.min_regex_ingredients:
            logger.info(f"Regex path succeeded with {len(regex_ingredients)} ingredients")
            recipe = Recipe(source_url=url, name=title, ingredients=regex_ingredients, parsed=True)
            source = ExtractionSource.REGEX
        else:
            try:
                if not likely_recipe:
                    raise ParseFailedError("Page does not look like a recipe page, LLM fallback skipped")
                outcome = await self._llm_fallback(located.text, url, title)
                recipe = outcome.recipe
                warnings.extend(outcome.notes)
                source = ExtractionSource.LLM
            except ParseFailedError as e:
                if not (self.settings.allow_partial_regex and regex_ingredients):
                    raise
                logger.warning(f"LLM fallback failed ({e}), keeping {len(regex_ingredients)} regex ingredients")
                warnings.append(f"LLM fallback failed, using partial results: {e}")
                recipe = Recipe(source_url=url, name=title, ingredients=regex_ingredients, parsed=True)
                source = ExtractionSource.REGEX

        if not recipe.ingredients:
            raise ParseFailedError("No ingredients could be parsed from the page")

        return self._accept(recipe, source, source_text, warnings)

    @observe(name="llm_fallback")
    async def _llm_fallback(self, corpus: str, url: str, title: Optional[str]) -> LLMParseOutcome:
        logger.info(f"Falling back to LLM for {url} ({len(corpus)} chars corpus)")
        return await extract_with_llm(self.llm_client, corpus, source_url=url, title_hint=title)

    def _accept(self, recipe: Recipe, source: ExtractionSource, source_text: str, warnings: List[str]) -> ParseResult:
        """Apply the confidence and verification gates to a parsed recipe."""
        outcomes = validate_ingredients(recipe.ingredients)
        confidence = calculate_confidence_score(recipe.ingredients, outcomes)
        if confidence < self.settings.confidence_threshold:
            raise LowConfidenceError(confidence, self.settings.confidence_threshold)

        verification = verify_ingredients(recipe.ingredients, source_text)
        score = verification.verification_score
        band = classify_verification(
            score,
            reject_below=self.settings.verification_reject_threshold,
            warn_below=self.settings.verification_warn_threshold,
            accept_from=self.settings.verification_accept_threshold,
        )
        if band is VerificationBand.REJECT:
            raise LowVerificationError(score, self.settings.verification_reject_threshold)

        warning = verification_warning(score, band)
        if warning:
            warnings.append(warning)

        return ParseResult(
            recipe=recipe,
            success=True,
            source=source,
            confidence_score=confidence,
            verification_score=score,
            warnings=warnings,
        )

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
