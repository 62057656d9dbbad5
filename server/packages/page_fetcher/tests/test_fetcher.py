import httpx
import pytest

from ingredient_extractor.exceptions import FetchFailedError, InvalidURLError
from page_fetcher import PageFetcher, validate_url

RECIPE_HTML = """
<html>
  <head><title>Chili sin Carne</title><style>.x{color:red}</style></head>
  <body>
    <h1>Chili sin Carne</h1>
    <ul><li>1 can kidney beans</li><li>2 tbsp olive oil</li></ul>
  </body>
</html>
"""


def _make_fetcher(handler) -> PageFetcher:
    return PageFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_fetch_page():
    """Test fetching a page returns its HTML, title and visible text."""
    fetcher = _make_fetcher(lambda request: httpx.Response(200, text=RECIPE_HTML))

    page = await fetcher.fetch("  https://example.com/chili/  ")

    assert page.url == "https://example.com/chili/"
    assert page.final_url == "https://example.com/chili/"
    assert page.status_code == 200
    assert page.title == "Chili sin Carne"
    assert "1 can kidney beans" in page.text.splitlines()
    assert page.html == RECIPE_HTML


@pytest.mark.asyncio
async def test_fetch_page_keeps_parsed_html():
    """Test the parsed page travels with the content but stays out of dumps."""
    fetcher = _make_fetcher(lambda request: httpx.Response(200, text=RECIPE_HTML))

    page = await fetcher.fetch("https://example.com/chili/")

    assert page.soup.find("h1").get_text() == "Chili sin Carne"
    assert "soup" not in page.model_dump()


@pytest.mark.asyncio
async def test_fetch_http_error_status():
    """Test a 404 surfaces as FetchFailedError carrying the status."""
    fetcher = _make_fetcher(lambda request: httpx.Response(404, text="not found"))

    with pytest.raises(FetchFailedError) as exc_info:
        await fetcher.fetch("https://example.com/missing")

    assert exc_info.value.status_code == 404
    assert "HTTP 404" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_network_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(FetchFailedError) as exc_info:
        await _make_fetcher(handler).fetch("https://example.com/slow")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_url_never_requested():
    """Test a malformed URL is rejected before any request goes out."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, text=RECIPE_HTML)

    with pytest.raises(InvalidURLError):
        await _make_fetcher(handler).fetch("not a url")
    assert calls == []


@pytest.mark.asyncio
async def test_context_manager_closes_own_client():
    async with PageFetcher() as fetcher:
        client = fetcher.client
    assert client.is_closed


@pytest.mark.asyncio
async def test_injected_client_left_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    async with PageFetcher(client=client):
        pass
    assert not client.is_closed
    await client.aclose()


@pytest.mark.parametrize("url", [
    "https://example.com/recipe",
    "http://example.com",
    "https://sub.example.co.uk/a/b?c=d#e",
])
def test_validate_url_accepts(url):
    assert validate_url(url) == url


@pytest.mark.parametrize("url", [
    "",
    None,
    "example.com/recipe",
    "ftp://example.com/file",
    "https://",
    "javascript:alert(1)",
])
def test_validate_url_rejects(url):
    with pytest.raises(InvalidURLError):
        validate_url(url)
