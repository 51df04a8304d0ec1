"""
Client for interacting with an Ollama LLM server.

This client wraps HTTP requests to the Ollama REST API and uses the
``/api/generate`` endpoint for non-streaming text generation. On error
conditions (HTTP errors, timeouts, unexpected payloads), a
:class:`LLMError` is raised.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ai_changelog.llm.errors import LLMError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


THINKING_TAGS = ("think", "thinking", "thought", "reasoning")


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks such as ``<think>...</think>`` from a response.

    >>> strip_thinking_tags("<think>reasoning...</think>## [1.0.0] - May 2024")
    '## [1.0.0] - May 2024'
    """
    result = text
    for tag in THINKING_TAGS:
        result = re.sub(rf"<{tag}>.*?</{tag}>", "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


@dataclass
class OllamaClient:
    """Client for interacting with an Ollama server.

    Parameters
    ----------
    base_url : str
        Base URL of the Ollama server, e.g. ``"http://localhost"``.
    port : int
        Port number of the Ollama server, e.g. ``11434``.
    model : str
        Name of the model to use for generation, e.g. ``"llama3"``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 60 seconds.
    max_tokens : int, optional
        Maximum number of tokens to generate, sent as ``num_predict``.
    temperature : float, optional
        Sampling temperature, sent in the ``options`` payload.
    """

    base_url: str
    port: int
    model: str
    request_timeout: float = 60.0
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    @property
    def name(self) -> str:
        return f"Ollama ({self.model})"

    def _endpoint(self) -> str:
        return f"{self.base_url}:{self.port}/api/generate"

    def generate(self, prompt: str) -> str:
        """Generate a completion from the model.

        Raises
        ------
        LLMError
            If the request fails or the server returns an error.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }
        options: Dict[str, Any] = {}
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if options:
            payload["options"] = options
        url = self._endpoint()
        logger.debug("Sending request to LLM at %s (%d prompt characters)", url, len(prompt))
        try:
            response = requests.post(url, json=payload, timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to connect to LLM: %s", exc)
            raise LLMError(str(exc)) from exc
        if response.status_code != 200:
            logger.error("LLM returned non-200 status %s: %s", response.status_code, response.text)
            raise LLMError(f"LLM returned status {response.status_code}: {response.text}")
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse LLM response: %s", exc)
            raise LLMError("Failed to parse LLM response") from exc
        # /api/generate answers with 'response'; /api/chat-style payloads carry 'message'.
        if "response" in data:
            return strip_thinking_tags(data.get("response") or "")
        if isinstance(data.get("message"), dict):
            return strip_thinking_tags(data["message"].get("content") or "")
        raise LLMError("Unexpected response structure from LLM")
