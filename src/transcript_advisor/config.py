"""User configuration: load and validate config.toml plus environment overrides."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from transcript_advisor.prompts import TONES

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_API_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 8000
DEFAULT_TIMEOUT = 60.0  # seconds
DEFAULT_HISTORY_LIMIT = 5


class ConfigError(Exception):
    """Raised when config.toml is malformed or holds invalid values."""


@dataclass
class Settings:
    """Completion endpoint and chat settings."""

    api_url: str | None = DEFAULT_API_URL
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT
    history_limit: int = DEFAULT_HISTORY_LIMIT
    default_tone: str = "casual"

    @property
    def configured(self) -> bool:
        """True when both endpoint URL and API key are set."""
        return bool(self.api_url and self.api_key)


def get_config_path() -> Path:
    """Return the path to config.toml, respecting XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "transcript-advisor" / "config.toml"


def _typed(table: dict[str, Any], key: str, kind: type | tuple[type, ...], path: Path) -> Any:
    value = table[key]
    # bool is an int subclass; never accept it for numeric settings
    if isinstance(value, bool) or not isinstance(value, kind):
        msg = f"Setting '{key}' in {path} has the wrong type: {value!r}"
        raise ConfigError(msg)
    return value


def load_settings(path: Path, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from a TOML file, then apply GROQ_* environment overrides.

    A missing file yields the defaults.
    Raises ConfigError on parse errors or invalid values.
    """
    if env is None:
        env = os.environ
    settings = Settings()

    if path.exists():
        try:
            data = tomllib.loads(path.read_text())
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise ConfigError(msg) from e

        api = data.get("api", {})
        if "url" in api:
            settings.api_url = _typed(api, "url", str, path)
        if "key" in api:
            settings.api_key = _typed(api, "key", str, path)
        if "model" in api:
            settings.model = _typed(api, "model", str, path)
        if "temperature" in api:
            settings.temperature = float(_typed(api, "temperature", (int, float), path))
        if "max_tokens" in api:
            settings.max_tokens = _typed(api, "max_tokens", int, path)
        if "timeout" in api:
            settings.timeout = float(_typed(api, "timeout", (int, float), path))

        chat = data.get("chat", {})
        if "history_limit" in chat:
            settings.history_limit = _typed(chat, "history_limit", int, path)
            if settings.history_limit < 1:
                msg = f"Setting 'history_limit' in {path} must be at least 1"
                raise ConfigError(msg)
        if "default_tone" in chat:
            settings.default_tone = _typed(chat, "default_tone", str, path).lower()
            if settings.default_tone not in TONES:
                msg = f"Unknown default_tone '{settings.default_tone}' in {path}"
                raise ConfigError(msg)

    if env.get("GROQ_API_URL"):
        settings.api_url = env["GROQ_API_URL"]
    if env.get("GROQ_API_KEY"):
        settings.api_key = env["GROQ_API_KEY"]
    if env.get("GROQ_MODEL"):
        settings.model = env["GROQ_MODEL"]
    return settings
