"""
Language model integration for ai_changelog.

This package contains the HTTP clients for the Anthropic Messages API
and for Ollama servers, the prompt builder, and the
:class:`ChangelogGenerator` which turns a generation context into a
changelog entry.
"""

from .anthropic_client import AnthropicClient  # noqa: F401
from .changelog_generator import ChangelogGenerator, GenerationResult, extract_changelog_entry  # noqa: F401
from .errors import LLMError  # noqa: F401
from .factory import create_client  # noqa: F401
from .ollama_client import OllamaClient  # noqa: F401
from .prompt_builder import GenerationContext, build_prompt  # noqa: F401
