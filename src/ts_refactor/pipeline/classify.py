"""React component detection."""

from __future__ import annotations

import re
from dataclasses import dataclass

COMPONENT_PATTERNS = (
    re.compile(r"^\s*import\s+(?:\*\s+as\s+)?React\b", re.MULTILINE),
    re.compile(r"""\brequire\(\s*['"]react['"]\s*\)"""),
    re.compile(r"\bclass\s+\w+\s+extends\s+(?:React\.)?(?:Pure)?Component\b"),
)


@dataclass(frozen=True)
class Classification:
    is_component: bool


def classify(text: str) -> Classification:
    """Decide whether ``text`` is a React component or a plain script."""
    return Classification(is_component=any(p.search(text) for p in COMPONENT_PATTERNS))
