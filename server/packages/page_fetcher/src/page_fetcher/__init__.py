"""Page fetcher package for downloading recipe pages."""

from .fetcher import PageFetcher, validate_url
from .models import PageContent

__all__ = ["PageFetcher", "PageContent", "validate_url"]
