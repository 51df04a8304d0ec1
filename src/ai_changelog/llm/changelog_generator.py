"""
Changelog entry generation using an LLM.

:class:`ChangelogGenerator` sends the prompt built from a
:class:`~ai_changelog.llm.prompt_builder.GenerationContext` to a
generation client and interprets the reply. The reply is untrusted:
:func:`extract_changelog_entry` repairs it separately from the network
call, dropping any preamble before the first version header and any
stray append markers.
"""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from ai_changelog.changelog.document import APPEND_MARKER
from ai_changelog.llm.errors import LLMError
from ai_changelog.llm.prompt_builder import NO_UPDATE_TOKEN, GenerationContext, build_prompt


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


HEADER_START = "## ["
QUOTE_CHARS = "\"'`"


@dataclass
class GenerationResult:
    """Outcome of a generation request.

    ``entry`` is ``None`` when the service answered ``NO_UPDATE_NEEDED``.
    """

    entry: Optional[str]

    @property
    def needs_update(self) -> bool:
        return self.entry is not None


def is_no_update(raw_response: Optional[str]) -> bool:
    """Return True if the reply is the no-update token, optionally quoted.

    >>> is_no_update('"NO_UPDATE_NEEDED"')
    True
    """
    return (raw_response or "").strip().strip(QUOTE_CHARS).strip() == NO_UPDATE_TOKEN


def extract_changelog_entry(raw_response: str) -> str:
    """Extract the changelog entry from a raw model response.

    Anything before the first ``## [`` is discarded and lines holding the
    append marker are removed. A response without a version header is
    returned stripped but otherwise unchanged.

    Raises
    ------
    LLMError
        If the response is empty, before or after cleanup.
    """
    entry = (raw_response or "").strip()
    if not entry:
        raise LLMError("Empty response from LLM")

    header_index = entry.find(HEADER_START)
    if header_index > 0:
        preamble = entry[:header_index].strip()
        if preamble:
            logger.info("Removing extra text before version header: %s", preamble)
        entry = entry[header_index:]

    if APPEND_MARKER in entry:
        logger.info("Removing append marker from generated entry")
        entry = re.sub(rf"^.*{re.escape(APPEND_MARKER)}.*\n?", "", entry, flags=re.MULTILINE)
    entry = entry.strip()
    if not entry:
        raise LLMError("Empty changelog entry after cleanup")
    return entry


class ChangelogGenerator:
    """Generate a changelog entry with a text generation client.

    The client only needs a ``generate(prompt) -> str`` method; see
    :class:`~ai_changelog.llm.anthropic_client.AnthropicClient` and
    :class:`~ai_changelog.llm.ollama_client.OllamaClient`.
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    def generate(self, context: GenerationContext, today: Optional[datetime.date] = None) -> GenerationResult:
        """Request an entry for ``context``.

        Raises
        ------
        LLMError
            If the request fails or the reply is empty.
        """
        prompt = build_prompt(context, today)
        logger.debug("Prompt has %d characters", len(prompt))
        raw_response = self.client.generate(prompt)
        if is_no_update(raw_response):
            logger.info("LLM determined no changelog update is needed")
            return GenerationResult(entry=None)
        return GenerationResult(entry=extract_changelog_entry(raw_response))
