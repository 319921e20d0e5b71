"""Loader for user supplied prompt template overrides.

A prompts directory may contain ``component.md`` and/or ``script.md``. Each
file is markdown with optional YAML frontmatter::

    ---
    system: You convert legacy code to TypeScript.
    temperature: 0.2
    ---
    Refactor the following code ...

The body becomes the instructions; missing files keep the built-in template.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import yaml

from ..errors import ConfigError
from ..utils.logger import get_logger
from .templates import COMPONENT_TEMPLATE, SCRIPT_TEMPLATE, PromptSet, PromptTemplate

logger = get_logger(__name__)

_FRONTMATTER = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Split YAML frontmatter from a markdown body.

    Args:
        content: Full content of the .md file

    Returns:
        Tuple of (frontmatter_dict, body_content)
    """
    match = _FRONTMATTER.match(content)

    if not match:
        return {}, content

    try:
        frontmatter = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring malformed prompt frontmatter: {e}")
        frontmatter = {}

    if not isinstance(frontmatter, dict):
        frontmatter = {}

    return frontmatter, match.group(2)


class PromptLoader:
    """Loads prompt template overrides from a directory."""

    def __init__(self, prompts_dir: Optional[Path] = None) -> None:
        """Initialize the prompt loader.

        Args:
            prompts_dir: Directory containing ``component.md`` / ``script.md``.
                         None means built-in templates only.
        """
        self.prompts_dir = prompts_dir

    def load(self) -> PromptSet:
        """Build the prompt set, applying any overrides found on disk."""
        if self.prompts_dir is None:
            return PromptSet()

        return PromptSet(
            component=self._load_template(COMPONENT_TEMPLATE),
            script=self._load_template(SCRIPT_TEMPLATE),
        )

    def _load_template(self, default: PromptTemplate) -> PromptTemplate:
        path = self.prompts_dir / f"{default.name}.md"
        if not path.exists():
            return default

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read prompt file {path}: {e}") from e

        frontmatter, body = parse_frontmatter(content)
        instructions = body.strip()
        if not instructions:
            raise ConfigError(f"Prompt file {path} has no instructions")

        temperature = frontmatter.get("temperature", default.temperature)
        if temperature is not None:
            try:
                temperature = float(temperature)
            except (TypeError, ValueError):
                raise ConfigError(f"Invalid temperature in {path}: {temperature!r}") from None

        logger.info(f"Using {default.name} prompt from {path}")
        return PromptTemplate(
            name=default.name,
            instructions=instructions,
            system=str(frontmatter.get("system") or default.system),
            temperature=temperature,
        )

    def list_overrides(self) -> list[str]:
        """Names of the templates overridden in the prompts directory."""
        if self.prompts_dir is None or not self.prompts_dir.exists():
            return []

        names = {COMPONENT_TEMPLATE.name, SCRIPT_TEMPLATE.name}
        return sorted(f.stem for f in self.prompts_dir.glob("*.md") if f.stem in names)
