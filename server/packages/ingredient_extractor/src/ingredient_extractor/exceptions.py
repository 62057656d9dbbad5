"""Exceptions for ingredient extractor package."""

from typing import Optional


class ExtractionError(Exception):
    """Base class for every failure a single pipeline run can report."""
    pass


class InvalidURLError(ExtractionError):
    """Raised when the requested URL is not a usable absolute http(s) URL."""
    pass


class FetchFailedError(ExtractionError):
    """Raised when the page cannot be downloaded (network error or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NoContentFoundError(ExtractionError):
    """Raised when neither structured data nor an ingredient section could be located."""
    pass


class ParseFailedError(ExtractionError):
    """Raised when regex or LLM output cannot be turned into ingredients."""
    pass


class LLMError(ParseFailedError):
    """Raised when the LLM backend does not return usable content."""
    pass


class LowConfidenceError(ExtractionError):
    """Raised when the confidence score falls below the acceptance threshold."""

    def __init__(self, score: int, threshold: int):
        super().__init__(f"Low confidence score: {score} (minimum {threshold})")
        self.score = score
        self.threshold = threshold


class LowVerificationError(ExtractionError):
    """Raised when too few ingredients can be found in the source page."""

    def __init__(self, score: int, threshold: int):
        super().__init__(
            f"Ingredients could not be verified against the page: score {score} (minimum {threshold})"
        )
        self.score = score
        self.threshold = threshold


class AmountParseError(ValueError):
    """Raised when an amount string is not a number, fraction or mixed number."""
    pass
