"""
Client for the Anthropic Messages API.

Requests go through the official ``anthropic`` SDK with retries turned
off, so a run makes exactly one generation request. The API key is
checked when a request is made rather than at construction, so runs
that never reach the generation step do not need one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from anthropic import Anthropic, APIError, AuthenticationError

from ai_changelog.llm.errors import LLMError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass
class AnthropicClient:
    """Client for Anthropic's Messages API.

    Parameters
    ----------
    api_key : str, optional
        Anthropic API key.
    model : str
        Model name.
    base_url : str, optional
        API base URL. The SDK default is used when not set.
    request_timeout : float, optional
        Timeout in seconds for the request.
    max_tokens : int, optional
        Maximum number of tokens to generate.
    temperature : float, optional
        Sampling temperature.
    """

    api_key: Optional[str] = field(repr=False)
    model: str
    base_url: Optional[str] = None
    request_timeout: float = 60.0
    max_tokens: int = 4000
    temperature: float = 0.1

    @property
    def name(self) -> str:
        return f"Anthropic ({self.model})"

    def _client(self) -> Anthropic:
        return Anthropic(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.request_timeout,
            max_retries=0,
        )

    def generate(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text.

        Raises
        ------
        LLMError
            If no API key is configured, the request fails, or the
            response does not contain a text block.
        """
        if not self.api_key:
            raise LLMError("No API key found. Set the ANTHROPIC_API_KEY environment variable.")
        logger.debug("Sending request to Anthropic with model %s", self.model)
        try:
            response = self._client().messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except AuthenticationError as exc:
            logger.error("Anthropic API rejected the API key: %s", exc.message)
            raise LLMError("Invalid API key. Check your ANTHROPIC_API_KEY.") from exc
        except APIError as exc:
            logger.error("Anthropic API request failed: %s", exc.message)
            raise LLMError(f"Anthropic API error: {exc.message}") from exc

        for block in response.content or []:
            if block.type == "text":
                return (block.text or "").strip()
        raise LLMError("Unexpected response structure from Anthropic API")
