import pytest

from ingredient_extractor.models.recipe import ExtractionSource, Ingredient, ParseResult, Recipe
from recipe_pipeline.cache import ParseResultCache, cache_key


def _make_result(url: str, name: str = "flour") -> ParseResult:
    return ParseResult(
        recipe=Recipe(source_url=url, ingredients=[Ingredient(name=name, amount=2, unit="cups")], parsed=True),
        success=True,
        source=ExtractionSource.REGEX,
        confidence_score=100,
        verification_score=100,
    )


class TestCacheKey:

    @pytest.mark.parametrize("url", [
        "https://a.test/recipe",
        "https://a.test/recipe/",
        "https://a.test/recipe#ingredients",
        "  https://a.test/recipe/#top ",
    ])
    def test_equivalent_urls(self, url):
        assert cache_key(url) == "https://a.test/recipe"

    def test_query_kept(self):
        assert cache_key("https://a.test/r?id=1") != cache_key("https://a.test/r?id=2")


class TestParseResultCache:

    async def test_round_trip(self):
        cache = ParseResultCache()
        result = _make_result("https://a.test/r")

        await cache.put("https://a.test/r", result)

        assert await cache.get("https://a.test/r") == result
        assert await cache.get("https://a.test/other") is None

    async def test_returns_copies(self):
        """Mutating a returned result never alters the cached one."""
        cache = ParseResultCache()
        await cache.put("https://a.test/r", _make_result("https://a.test/r"))

        first = await cache.get("https://a.test/r")
        first.warnings.append("changed")

        assert (await cache.get("https://a.test/r")).warnings == []

    async def test_failures_not_cached(self):
        cache = ParseResultCache()
        await cache.put("https://a.test/r", ParseResult.failure("https://a.test/r", "boom"))

        assert len(cache) == 0
        assert await cache.get("https://a.test/r") is None

    async def test_fifo_eviction(self):
        cache = ParseResultCache(capacity=2)
        for name in ("one", "two", "three"):
            await cache.put(f"https://a.test/{name}", _make_result(f"https://a.test/{name}", name))

        assert len(cache) == 2
        assert "https://a.test/one" not in cache
        assert "https://a.test/three" in cache

    async def test_reinsert_moves_to_back(self):
        cache = ParseResultCache(capacity=2)
        await cache.put("https://a.test/one", _make_result("https://a.test/one"))
        await cache.put("https://a.test/two", _make_result("https://a.test/two"))
        await cache.put("https://a.test/one", _make_result("https://a.test/one", "sugar"))
        await cache.put("https://a.test/three", _make_result("https://a.test/three"))

        assert "https://a.test/two" not in cache
        assert (await cache.get("https://a.test/one")).recipe.ingredients[0].name == "sugar"

    async def test_clear(self):
        cache = ParseResultCache()
        await cache.put("https://a.test/r", _make_result("https://a.test/r"))
        await cache.clear()
        assert len(cache) == 0

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            ParseResultCache(capacity=0)
