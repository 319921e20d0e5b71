from __future__ import annotations

import zipfile
from types import SimpleNamespace
from typing import Callable, Union

import httpx
import openai
import pytest

from ts_refactor.config import Settings
from ts_refactor.utils.logger import reset_logging

API_URL = "https://api.openai.com/v1/chat/completions"

PRIMARY = "primary-model"
FALLBACK = "fallback-model"


def read_log(log_dir) -> str:
    """Close the log sinks and return what was written under ``log_dir``."""
    # Loguru applies the zip compression when the sink is closed
    reset_logging()
    for archive in log_dir.glob("refactor_*.zip"):
        with zipfile.ZipFile(archive) as zf:
            return "".join(zf.read(name).decode("utf-8") for name in zf.namelist())
    (log_file,) = log_dir.glob("refactor_*.log")
    return log_file.read_text(encoding="utf-8")


def make_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def status_error(status: int, message: str = "API error") -> openai.APIStatusError:
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status, request=request, json={"error": {"message": message}})
    if status == 429:
        return openai.RateLimitError(message, response=response, body=None)
    if status >= 500:
        return openai.InternalServerError(message, response=response, body=None)
    return openai.BadRequestError(message, response=response, body=None)


def rate_limit_error() -> openai.RateLimitError:
    return status_error(429, "Rate limit reached")


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", API_URL))


Outcome = Union[str, BaseException, SimpleNamespace]


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``."""

    def __init__(self, responder: Callable[[str, list], Outcome]) -> None:
        self.responder = responder
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.responder(kwargs["model"], kwargs["messages"])
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, str) or outcome is None:
            return make_response(outcome)
        return outcome

    def models_called(self) -> list[str]:
        return [call["model"] for call in self.calls]


class FakeOpenAI:
    def __init__(self, responder: Callable[[str, list], Outcome]) -> None:
        self.chat = SimpleNamespace(completions=FakeCompletions(responder))

    @property
    def completions(self) -> FakeCompletions:
        return self.chat.completions


def scripted(*outcomes: Outcome) -> Callable[[str, list], Outcome]:
    """Responder returning ``outcomes`` in order, repeating the last one."""
    queue = list(outcomes)

    def responder(model, messages):
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    return responder


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def delays_ms(self) -> list[int]:
        return [round(s * 1000) for s in self.calls]


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        primary_model=PRIMARY,
        fallback_model=FALLBACK,
        max_attempts=5,
        base_delay_ms=2000,
        post_write_delay=1.0,
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()
