"""Prompt templates and their loader."""

from .loader import PromptLoader, parse_frontmatter
from .templates import COMPONENT_TEMPLATE, SCRIPT_TEMPLATE, PromptSet, PromptTemplate

__all__ = [
    "COMPONENT_TEMPLATE",
    "SCRIPT_TEMPLATE",
    "PromptLoader",
    "PromptSet",
    "PromptTemplate",
    "parse_frontmatter",
]
