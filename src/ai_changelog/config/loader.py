"""
Configuration loader for ai_changelog.

The tool runs inside CI jobs, so its settings are read from environment
variables such as ``CHANGELOG_PATH``, ``LATEST_TAG`` or
``VERSION_INCREMENT``. Explicit overrides (normally the CLI options)
take precedence over the environment.

Settings for the text generation backend are read from an optional JSON
file named by ``CHANGELOG_LLM_CONFIG``. The file is validated the same
way as the run settings: a missing file, malformed JSON, or fields of the
wrong type raise :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


AUTO_INCREMENT = "auto"
VALID_INCREMENTS = (AUTO_INCREMENT, "major", "minor", "patch")
PULL_REQUEST_EVENT = "pull_request"

PROVIDER_ANTHROPIC = "anthropic"
PROVIDER_OLLAMA = "ollama"
VALID_PROVIDERS = (PROVIDER_ANTHROPIC, PROVIDER_OLLAMA)

DEFAULT_MODELS = {
    PROVIDER_ANTHROPIC: "claude-3-5-sonnet-latest",
    PROVIDER_OLLAMA: "llama3",
}

# Maps RunConfig-level option names to the environment variables they
# are read from.
ENV_VARS = {
    "changelog_path": "CHANGELOG_PATH",
    "target": "TARGET",
    "latest_tag": "LATEST_TAG",
    "commit_count": "COMMIT_COUNT",
    "event_name": "GITHUB_EVENT_NAME",
    "base_sha": "PR_BASE_SHA",
    "head_sha": "PR_HEAD_SHA",
    "version_increment": "VERSION_INCREMENT",
    "remote_ref": "CHANGELOG_REMOTE_REF",
    "commits_file": "COMMITS_FILE",
    "changed_files_file": "CHANGED_FILES_FILE",
    "output_dir": "CHANGELOG_OUTPUT_DIR",
    "llm_config": "CHANGELOG_LLM_CONFIG",
}

DEFAULTS: Dict[str, Any] = {
    "changelog_path": "CHANGELOG.md",
    "target": "",
    "latest_tag": "",
    "commit_count": "10",
    "event_name": "",
    "base_sha": None,
    "head_sha": None,
    "version_increment": AUTO_INCREMENT,
    "remote_ref": "origin/main",
    "commits_file": "recent_commits.txt",
    "changed_files_file": "changed_files.txt",
    "output_dir": ".",
    "llm_config": None,
}


class ConfigError(Exception):
    """Raised when the run or generation backend configuration is invalid."""

    pass


@dataclass
class LLMSettings:
    """Settings for the text generation backend.

    Attributes
    ----------
    provider : str
        ``"anthropic"`` or ``"ollama"``.
    model : str
        Model name passed to the backend.
    base_url : str, optional
        Base URL of the backend. Each client has its own default.
    port : int, optional
        Port of an Ollama server.
    api_key : str, optional
        Anthropic API key, only ever read from ``ANTHROPIC_API_KEY``.
    request_timeout : float
        Timeout in seconds for the single generation request.
    max_tokens : int
        Maximum number of tokens to generate.
    temperature : float
        Sampling temperature. Kept low so entries stay factual.
    """

    provider: str = PROVIDER_ANTHROPIC
    model: str = DEFAULT_MODELS[PROVIDER_ANTHROPIC]
    base_url: Optional[str] = None
    port: Optional[int] = None
    api_key: Optional[str] = field(default=None, repr=False)
    request_timeout: float = 60.0
    max_tokens: int = 4000
    temperature: float = 0.1


@dataclass
class RunConfig:
    """Settings for one changelog run."""

    changelog_path: Path
    commits_file: Path
    changed_files_file: Path
    output_dir: Path
    target: str = ""
    latest_tag: str = ""
    commit_count: int = 10
    is_pull_request: bool = False
    base_sha: Optional[str] = None
    head_sha: Optional[str] = None
    version_increment: str = AUTO_INCREMENT
    remote_ref: str = "origin/main"
    llm: LLMSettings = field(default_factory=LLMSettings)

    @property
    def diff_range(self) -> Optional[str]:
        """Return ``base..head`` in pull request mode, otherwise ``None``."""
        if self.is_pull_request and self.base_sha and self.head_sha:
            return f"{self.base_sha}..{self.head_sha}"
        return None


def resolve_setting(
    name: str,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Any:
    """Return the raw value of one setting: override, then environment, then default."""
    overrides = overrides or {}
    environ = os.environ if environ is None else environ
    value = overrides.get(name)
    if value is not None:
        return value
    env_value = environ.get(ENV_VARS[name])
    if env_value is not None and env_value != "":
        return env_value
    return DEFAULTS[name]


def _parse_commit_count(raw: Any) -> int:
    try:
        count = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'commit_count' must be an integer, got {raw!r}") from exc
    if count < 1:
        raise ConfigError(f"'commit_count' must be positive, got {count}")
    return count


def load_llm_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LLMSettings:
    """Load and validate the generation backend settings.

    Parameters
    ----------
    config_path : Path, optional
        JSON file with backend settings. When ``None`` the defaults are
        used (Anthropic with the default model).
    environ : Mapping[str, str], optional
        Environment to read ``ANTHROPIC_API_KEY`` from. Defaults to
        ``os.environ``.

    Returns
    -------
    LLMSettings
        The validated settings.

    Raises
    ------
    ConfigError
        If the file is missing, malformed, or has fields of the wrong type.
    """
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            logger.error("LLM configuration file '%s' does not exist", config_path)
            raise ConfigError(f"Missing LLM configuration file: {config_path}")
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to read or parse LLM configuration file: %s", exc)
            raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path.name} must contain a JSON object")

    provider = data.get("provider", PROVIDER_ANTHROPIC)
    if provider not in VALID_PROVIDERS:
        raise ConfigError(
            f"Unknown provider {provider!r}; expected one of: {', '.join(VALID_PROVIDERS)}"
        )

    # Validate optional keys if present
    if "model" in data and not isinstance(data["model"], str):
        raise ConfigError("'model' must be a string")
    if "base_url" in data and not isinstance(data["base_url"], str):
        raise ConfigError("'base_url' must be a string")
    if "port" in data and not isinstance(data["port"], int):
        raise ConfigError("'port' must be an integer")
    if "request_timeout" in data and not isinstance(data["request_timeout"], (int, float)):
        raise ConfigError("'request_timeout' must be a number")
    if "max_tokens" in data and not isinstance(data["max_tokens"], int):
        raise ConfigError("'max_tokens' must be an integer")
    if "temperature" in data and not isinstance(data["temperature"], (int, float)):
        raise ConfigError("'temperature' must be a number")

    settings = LLMSettings(
        provider=provider,
        model=data.get("model", DEFAULT_MODELS[provider]),
        base_url=data.get("base_url"),
        port=data.get("port"),
        api_key=env.get("ANTHROPIC_API_KEY") or None,
        request_timeout=float(data.get("request_timeout", 60.0)),
        max_tokens=data.get("max_tokens", 4000),
        temperature=float(data.get("temperature", 0.1)),
    )
    logger.debug("Loaded LLM settings: %s", settings)
    return settings


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> RunConfig:
    """Build the :class:`RunConfig` for one run.

    Each setting is taken from ``overrides`` when given (not ``None``),
    otherwise from its environment variable (see :data:`ENV_VARS`),
    otherwise from :data:`DEFAULTS`.

    Raises
    ------
    ConfigError
        If a setting has an invalid value.
    """
    env = os.environ if environ is None else environ

    def get(name: str) -> Any:
        return resolve_setting(name, overrides, env)

    increment = str(get("version_increment")).strip().lower()
    if increment not in VALID_INCREMENTS:
        raise ConfigError(
            f"Invalid version increment {increment!r}; expected one of: {', '.join(VALID_INCREMENTS)}"
        )

    is_pull_request = str(get("event_name")) == PULL_REQUEST_EVENT
    base_sha = get("base_sha")
    head_sha = get("head_sha")
    if is_pull_request and not (base_sha and head_sha):
        logger.warning(
            "Pull request event without base/head revisions; using the last %s commits instead",
            get("commit_count"),
        )

    llm_config = get("llm_config")
    config = RunConfig(
        changelog_path=Path(get("changelog_path")),
        commits_file=Path(get("commits_file")),
        changed_files_file=Path(get("changed_files_file")),
        output_dir=Path(get("output_dir")),
        target=str(get("target")),
        latest_tag=str(get("latest_tag")),
        commit_count=_parse_commit_count(get("commit_count")),
        is_pull_request=is_pull_request,
        base_sha=base_sha,
        head_sha=head_sha,
        version_increment=increment,
        remote_ref=str(get("remote_ref")),
        llm=load_llm_settings(Path(llm_config) if llm_config else None, env),
    )
    logger.debug("Loaded run configuration: %s", config)
    return config
