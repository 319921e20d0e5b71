"""Prompt templates sent to the completion model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SYSTEM_PROMPT = (
    "You are concise and opinionated, return clean, maintainable, readable code "
    "in code-only format without any markdown formatting or additional commentary."
)

COMPONENT_INSTRUCTIONS = """Refactor the following legacy React class component code to modern standards:
- Convert all class components into functional components.
- Convert the code from JavaScript to TypeScript (tsx) syntax.
- Do not modify internal import statements; retain the original filenames and extensions.
- Apply modern React, TypeScript, and frontend best practices.
- Return only code in your response, without any markdown formatting or extra commentary.
- Respond with text format, not markdown."""

SCRIPT_INSTRUCTIONS = """Refactor the following JavaScript code to modern standards:
- Convert the code from JavaScript to TypeScript (ts) syntax.
- Use modern JavaScript/TypeScript features and ensure type safety.
- Remove any usage of PropTypes if present, replacing them with appropriate TypeScript types.
- Optimize functions and definitions for clarity and maintainability.
- Retain original import statements without changes.
- Return only code in your response, without any markdown formatting or extra commentary.
- Respond with text format, not markdown."""


@dataclass(frozen=True)
class PromptTemplate:
    """Instructions for one kind of source file.

    The legacy source is appended after the instructions, so template text
    never needs brace escaping.
    """

    name: str
    instructions: str
    system: str = SYSTEM_PROMPT
    temperature: Optional[float] = None

    def render(self, source_text: str) -> list[dict[str, str]]:
        """Build the chat messages for ``source_text``."""
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": f"{self.instructions}\n\nLegacy code:\n{source_text}"},
        ]


COMPONENT_TEMPLATE = PromptTemplate(name="component", instructions=COMPONENT_INSTRUCTIONS)
SCRIPT_TEMPLATE = PromptTemplate(name="script", instructions=SCRIPT_INSTRUCTIONS)


@dataclass(frozen=True)
class PromptSet:
    """The pair of templates used for a run."""

    component: PromptTemplate = COMPONENT_TEMPLATE
    script: PromptTemplate = SCRIPT_TEMPLATE

    def for_file(self, is_component: bool) -> PromptTemplate:
        return self.component if is_component else self.script
