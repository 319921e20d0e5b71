"""Completion client and model fallback orchestration."""

from .client import CompletionClient, build_openai_client
from .fallback import FallbackRefactorer, strip_code_fences

__all__ = [
    "CompletionClient",
    "FallbackRefactorer",
    "build_openai_client",
    "strip_code_fences",
]
