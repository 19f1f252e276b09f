"""
Gemini text generation client.

Thin async wrapper over google-genai used by the keyword workflow. Failures
are raised as UpstreamError with the vendor status code in the message so
that backend/services/error_classifier.py can categorize them.
"""

import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from backend.utils.errors import UpstreamError

logger = logging.getLogger(__name__)


class TextGenerationClient:
    """
    Single-shot Gemini text generation.

    Args:
        api_key: Google API key (None makes every call fail with a
            credentials error)
        model: Gemini model name
        timeout: Per-call timeout in seconds
        temperature: Sampling temperature
        max_output_tokens: Output token cap
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        timeout: float = 60,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
    ):
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client = genai.Client(api_key=api_key) if api_key else None

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def generate_text(self, prompt: str, system_instruction: str) -> str:
        """
        Generate text for a prompt.

        Returns:
            The model's text output (stripped)

        Raises:
            UpstreamError: On a missing API key, API error, timeout or empty
                response
        """
        if self._client is None:
            raise UpstreamError("Text generation API key is not configured")

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json",
        )

        logger.debug(f"Sending generation request to {self.model} ({len(prompt)} chars)")

        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamError(f"Text generation timed out after {self.timeout}s") from e
        except genai_errors.APIError as e:
            raise UpstreamError(
                f"Text generation API error {e.code} {e.status or ''}: {e.message or ''}".strip()
            ) from e

        text = (response.text or "").strip()
        if not text:
            raise UpstreamError("Text generation returned an empty response")

        logger.debug(f"Received {len(text)} chars from {self.model}")
        return text
