"""Langfuse tracing for pipeline runs.

`observe()` wraps Langfuse's decorator when LANGFUSE_PUBLIC_KEY and
LANGFUSE_SECRET_KEY are set; otherwise it returns functions unchanged.

Usage:
    from recipe_pipeline.observability import observe

    @observe(name="parse_recipe")
    async def parse(...):
        ...
"""

import logging
import os
from typing import Any, Callable, Optional

from langfuse import get_client, observe as _lf_observe

logger = logging.getLogger(__name__)

LANGFUSE_ENABLED = bool(os.getenv("LANGFUSE_PUBLIC_KEY") and os.getenv("LANGFUSE_SECRET_KEY"))

if LANGFUSE_ENABLED:
    logger.info(
        "Langfuse observability ENABLED (host=%s)",
        os.getenv("LANGFUSE_HOST", "http://localhost:3000"),
    )
else:
    logger.debug("Langfuse observability disabled (no LANGFUSE_PUBLIC_KEY/SECRET_KEY)")


def observe(name: Optional[str] = None, **kwargs) -> Callable:
    """Decorator that wraps Langfuse @observe() if enabled, otherwise no-op."""
    if LANGFUSE_ENABLED:
        return _lf_observe(name=name, **kwargs)

    def noop_decorator(fn: Callable) -> Callable:
        return fn
    return noop_decorator


def update_trace(**metadata: Any) -> None:
    """Attach metadata (source, scores, ingredient count) to the current trace."""
    if LANGFUSE_ENABLED:
        get_client().update_current_trace(metadata=metadata)
