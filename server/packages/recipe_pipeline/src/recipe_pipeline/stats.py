from typing import Optional

from pydantic import BaseModel

from ingredient_extractor.models.recipe import ExtractionSource


class PerformanceStats(BaseModel):
    """Counters describing how pipeline runs were resolved."""
    total_requests: int = 0
    cache_hits: int = 0
    structured_data_successes: int = 0
    regex_successes: int = 0
    llm_successes: int = 0
    failures: int = 0

    def record_request(self) -> None:
        self.total_requests += 1

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def record_success(self, source: Optional[ExtractionSource]) -> None:
        if source == ExtractionSource.STRUCTURED_DATA:
            self.structured_data_successes += 1
        elif source == ExtractionSource.REGEX:
            self.regex_successes += 1
        elif source == ExtractionSource.LLM:
            self.llm_successes += 1

    def record_failure(self) -> None:
        self.failures += 1

    @property
    def successes(self) -> int:
        return self.structured_data_successes + self.regex_successes + self.llm_successes

    @property
    def cache_hit_rate(self) -> float:
        return self.cache_hits / self.total_requests if self.total_requests else 0.0

    @property
    def llm_usage_rate(self) -> float:
        """Share of freshly parsed recipes that needed the LLM."""
        return self.llm_successes / self.successes if self.successes else 0.0

    def reset(self) -> None:
        for field_name in type(self).model_fields:
            setattr(self, field_name, 0)

    def summary(self) -> dict:
        return {
            **self.model_dump(),
            "cache_hit_rate": round(self.cache_hit_rate, 3),
            "llm_usage_rate": round(self.llm_usage_rate, 3),
        }
