"""Primary/fallback model orchestration for a single refactor request."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from ..errors import CompletionError, EmptyCompletion, RefactorFailed
from ..models import CompletionOutcome, RefactorRequest
from ..prompts import PromptSet
from ..utils.logger import get_logger
from .client import CompletionClient, Messages

logger = get_logger(__name__)

_FENCED = re.compile(r"^\s*```[\w.+-]*[ \t]*\n(.*?)\n?```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove one markdown code fence wrapping the whole answer, if present."""
    match = _FENCED.match(text)
    if match:
        return match.group(1)
    return text


@dataclass
class FallbackRefactorer:
    """Refactors a file with the primary model, then the fallback model.

    The fallback model is engaged at most once per request and only after
    the primary model's whole attempt (rate-limit retries included) failed.
    """

    client: CompletionClient
    primary_model: str
    fallback_model: str
    prompts: PromptSet = field(default_factory=PromptSet)
    temperature: Optional[float] = None

    async def refactor(self, request: RefactorRequest) -> CompletionOutcome:
        """Return migrated source for ``request``.

        Raises:
            RefactorFailed: Both models failed; carries the fallback's error
        """
        template = self.prompts.for_file(request.is_component)
        messages = template.render(request.source_text)
        temperature = template.temperature if template.temperature is not None else self.temperature

        try:
            text = await self._complete(messages, self.primary_model, temperature)
            return CompletionOutcome(text=text, model=self.primary_model, used_fallback=False)
        except CompletionError as e:
            logger.warning(
                f"Error refactoring {request.file_path} with {self.primary_model}: {e}. "
                f"Retrying with {self.fallback_model}..."
            )

        try:
            text = await self._complete(messages, self.fallback_model, temperature)
        except CompletionError as e:
            logger.error(f"Failed refactoring {request.file_path} with both models: {e}")
            raise RefactorFailed(request.file_path, e) from e

        return CompletionOutcome(text=text, model=self.fallback_model, used_fallback=True)

    async def _complete(self, messages: Messages, model: str, temperature: Optional[float]) -> str:
        text = strip_code_fences(await self.client.complete(messages, model, temperature=temperature))
        if not text.strip():
            raise EmptyCompletion(f"{model} returned an empty code block")
        return text
