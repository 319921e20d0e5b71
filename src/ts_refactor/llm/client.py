"""Chat-completion client with rate-limit backoff.

Wraps an ``openai.AsyncOpenAI`` instance. HTTP 429 responses are retried with
exponential backoff plus jitter up to a fixed number of attempts; every other
failure is translated into a ``CompletionError`` and raised straight away.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

import openai

from ..config import DEFAULT_BASE_DELAY_MS, DEFAULT_MAX_ATTEMPTS, Settings
from ..errors import EmptyCompletion, RateLimited, RetriesExhausted, TransientAPIError
from ..utils.logger import get_logger

logger = get_logger(__name__)

Messages = list[dict[str, str]]

JITTER_CEILING_MS = 1000


def _random_jitter_ms() -> int:
    return random.randrange(JITTER_CEILING_MS)


def build_openai_client(settings: Settings) -> openai.AsyncOpenAI:
    """Create the SDK client with its own retries disabled.

    Retries are owned by ``CompletionClient``; leaving the SDK's enabled would
    multiply the attempt count.
    """
    return openai.AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        max_retries=0,
    )


@dataclass
class CompletionClient:
    """Sends chat requests and retries rate-limited ones.

    Attributes:
        client: ``openai.AsyncOpenAI`` or any object exposing an async
            ``chat.completions.create(**kwargs)``
        max_attempts: Total attempts per ``complete`` call, first one included
        base_delay_ms: Backoff base; attempt ``n`` waits ``base * 2**n`` ms plus jitter
        sleep: Coroutine used to wait, in seconds
        jitter: Returns the extra random delay in ms, within ``[0, 1000)``
    """

    client: Any
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    jitter: Callable[[], int] = _random_jitter_ms
    _retry_count: int = field(default=0, init=False)

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[Any] = None) -> CompletionClient:
        return cls(
            client=client if client is not None else build_openai_client(settings),
            max_attempts=settings.max_attempts,
            base_delay_ms=settings.base_delay_ms,
        )

    @property
    def retry_count(self) -> int:
        """Rate-limit retries performed over the client's lifetime."""
        return self._retry_count

    def backoff_delay_ms(self, attempt: int) -> int:
        """Delay before retrying after rate-limited attempt ``attempt`` (0-indexed)."""
        return self.base_delay_ms * 2 ** attempt + self.jitter()

    async def complete(
        self,
        messages: Messages,
        model: str,
        *,
        temperature: Optional[float] = None,
    ) -> str:
        """Run one chat completion and return the assistant text.

        Args:
            messages: Chat messages (role/content dicts)
            model: Model identifier
            temperature: Sampling temperature, omitted from the request when None

        Returns:
            Non-empty completion text

        Raises:
            RetriesExhausted: Every attempt was rate limited
            TransientAPIError: Any other API or transport failure
            EmptyCompletion: The response carried no content
        """
        for attempt in range(self.max_attempts):
            try:
                response = await self._create(messages, model, temperature)
            except RateLimited as e:
                if attempt + 1 >= self.max_attempts:
                    logger.error(f"Rate limit on {model} persisted after {self.max_attempts} attempts")
                    raise RetriesExhausted(model, self.max_attempts) from e

                delay_ms = self.backoff_delay_ms(attempt)
                self._retry_count += 1
                logger.warning(
                    f"Rate limit error on {model}. Retrying in {delay_ms} ms "
                    f"(attempt {attempt + 1}/{self.max_attempts})..."
                )
                await self.sleep(delay_ms / 1000)
                continue

            return self._extract_text(response, model)

        # max_attempts < 1 never enters the loop
        raise RetriesExhausted(model, self.max_attempts)

    async def _create(self, messages: Messages, model: str, temperature: Optional[float]) -> Any:
        kwargs: dict[str, Any] = {"model": model, "messages": messages}
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            return await self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            if e.status_code == 429:
                raise RateLimited(e.message) from e
            raise TransientAPIError(e.message, status=e.status_code) from e
        except openai.OpenAIError as e:
            raise TransientAPIError(str(e) or type(e).__name__) from e

    @staticmethod
    def _extract_text(response: Any, model: str) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise EmptyCompletion(f"No choices received from {model}")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if not content or not content.strip():
            raise EmptyCompletion(f"No content received from {model}")

        return content
