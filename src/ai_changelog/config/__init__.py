"""
Configuration loading for ai_changelog.

Run settings come from CI-style environment variables; generation
backend settings can additionally be read from a JSON file. See
:mod:`ai_changelog.config.loader` for implementation details.
"""

from .loader import ConfigError, LLMSettings, RunConfig, load_config, load_llm_settings, resolve_setting  # noqa: F401
