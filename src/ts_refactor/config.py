"""Runtime configuration.

Values come from the process environment (optionally seeded from a ``.env``
file via python-dotenv) and can be overridden from the command line.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import ConfigError, MissingCredentialError

API_KEY_ENV = "OPENAI_API_KEY"
ENV_PREFIX = "TS_REFACTOR_"

DEFAULT_PRIMARY_MODEL = "gpt-4o-mini"
DEFAULT_FALLBACK_MODEL = "gpt-4o"
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY_MS = 2000
DEFAULT_POST_WRITE_DELAY = 1.0
DEFAULT_TEMPERATURE = 0.1


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from None


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Everything a migration run needs to know besides the project path."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    primary_model: str = DEFAULT_PRIMARY_MODEL
    fallback_model: str = DEFAULT_FALLBACK_MODEL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    post_write_delay: float = DEFAULT_POST_WRITE_DELAY
    temperature: Optional[float] = DEFAULT_TEMPERATURE
    prompts_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from environment variables.

        Args:
            env: Mapping to read from (default: os.environ)

        Raises:
            ConfigError: If a numeric variable cannot be parsed
        """
        env = os.environ if env is None else env

        prompts_dir = env.get(ENV_PREFIX + "PROMPTS_DIR")

        return cls(
            api_key=env.get(API_KEY_ENV) or None,
            base_url=env.get("OPENAI_BASE_URL") or None,
            primary_model=env.get(ENV_PREFIX + "PRIMARY_MODEL") or DEFAULT_PRIMARY_MODEL,
            fallback_model=env.get(ENV_PREFIX + "FALLBACK_MODEL") or DEFAULT_FALLBACK_MODEL,
            max_attempts=_env_int(env, "MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            base_delay_ms=_env_int(env, "BASE_DELAY_MS", DEFAULT_BASE_DELAY_MS),
            post_write_delay=_env_float(env, "POST_WRITE_DELAY", DEFAULT_POST_WRITE_DELAY),
            temperature=_env_float(env, "TEMPERATURE", DEFAULT_TEMPERATURE),
            prompts_dir=Path(prompts_dir) if prompts_dir else None,
        )

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def validate(self, *, require_api_key: bool = True) -> Settings:
        """Check value ranges and the presence of the API key.

        Raises:
            MissingCredentialError: If the API key is required but missing
            ConfigError: If any value is out of range
        """
        if require_api_key and not self.api_key:
            raise MissingCredentialError(
                f"Missing {API_KEY_ENV} in environment variables."
            )
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")
        if self.base_delay_ms < 0:
            raise ConfigError("base_delay_ms must not be negative")
        if self.post_write_delay < 0:
            raise ConfigError("post_write_delay must not be negative")
        if not self.primary_model or not self.fallback_model:
            raise ConfigError("Both a primary and a fallback model are required")
        if self.prompts_dir is not None and not self.prompts_dir.is_dir():
            raise ConfigError(f"Prompts directory does not exist: {self.prompts_dir}")
        return self
