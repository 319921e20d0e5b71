"""Exception hierarchy for the TS refactor agent."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class RefactorAgentError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(RefactorAgentError):
    """Invalid or incomplete configuration. Fatal at startup."""


class MissingCredentialError(ConfigError):
    """The completion API key is not set."""


class CompletionError(RefactorAgentError):
    """A completion request failed.

    Attributes:
        status: HTTP status code, or None when no response was received
        message: Human readable failure description
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"[{self.status}] {self.message}"


class RateLimited(CompletionError):
    """HTTP 429. Recoverable through backoff inside the completion client."""

    def __init__(self, message: str = "Rate limit exceeded", status: Optional[int] = 429) -> None:
        super().__init__(message, status)


class TransientAPIError(CompletionError):
    """Any non rate-limit API failure. Not retried."""


class EmptyCompletion(CompletionError):
    """The model answered but returned no usable content."""


class RetriesExhausted(CompletionError):
    """Rate-limit retries hit the attempt cap."""

    def __init__(self, model: str, attempts: int) -> None:
        super().__init__(
            f"Exceeded {attempts} attempts on {model} due to persistent rate limit errors",
            status=429,
        )
        self.model = model
        self.attempts = attempts


class RefactorFailed(RefactorAgentError):
    """Both the primary and the fallback model failed for a file."""

    def __init__(self, file_path: Union[str, Path], last_error: CompletionError) -> None:
        super().__init__(f"Refactoring failed for {file_path}: {last_error}")
        self.file_path = str(file_path)
        self.last_error = last_error
