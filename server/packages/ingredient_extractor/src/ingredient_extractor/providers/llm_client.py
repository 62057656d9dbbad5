"""
LLM backend client.

Posts a prompt to the recipe LLM endpoint and returns the text content of the
`{success, content}` envelope it answers with.
"""

import logging
import os
from typing import Optional

import httpx
from pydantic import ValidationError

from ..exceptions import LLMError
from ..models.recipe import LLMEnvelope

logger = logging.getLogger(__name__)

DEFAULT_LLM_ENDPOINT = "http://localhost:3000/api/call-llm"
DEFAULT_LLM_TIMEOUT = 60.0


class LLMClient:
    """Thin async client for the text-completion backend."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_LLM_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            endpoint: Backend URL, defaults to RECIPE_LLM_ENDPOINT
            api_key: Optional bearer token, defaults to RECIPE_LLM_API_KEY
            timeout: Request timeout in seconds
            client: Shared httpx client; when omitted one is opened per call
        """
        self.endpoint = endpoint or os.getenv("RECIPE_LLM_ENDPOINT", DEFAULT_LLM_ENDPOINT)
        self.api_key = api_key if api_key is not None else os.getenv("RECIPE_LLM_API_KEY")
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.endpoint, json=payload, headers=self._headers())
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, json=payload, headers=self._headers())

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the completion text.

        Raises:
            LLMError: On transport errors, non-2xx status, a false or missing
                success flag, or empty content
        """
        logger.info(f"Calling LLM backend ({len(prompt)} chars prompt)")
        try:
            response = await self._post({"prompt": prompt})
        except httpx.HTTPError as e:
            raise LLMError(f"LLM request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"LLM backend error {response.status_code}: {response.text[:200]}")
            raise LLMError(f"LLM backend returned status {response.status_code}")

        try:
            envelope = LLMEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise LLMError(f"LLM backend returned an invalid envelope: {e}") from e

        if not envelope.success:
            raise LLMError(f"LLM backend reported failure: {envelope.error or 'unknown error'}")
        if not envelope.content or not envelope.content.strip():
            raise LLMError("LLM backend returned empty content")

        logger.info(f"LLM response received ({len(envelope.content)} chars)")
        return envelope.content
