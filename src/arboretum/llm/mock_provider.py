"""Scripted stand-in for the linguistic model.

MockLLMProvider answers parse requests from configuration instead of the
network, so the parser, session and visualizer can be exercised (and
demoed) without an API key.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from arboretum.llm.provider import (
    LLMError,
    LLMProvider,
    LLMRequest,
    LLMResponse,
)


@dataclass
class MockConfig:
    """How the mock model answers.

    Content is chosen in this order: the next entry of ``script``, then
    ``response_callback``, then the first ``canned_responses`` key found
    in the sentence (case-insensitive), then ``default_response``.

    Attributes:
        default_response: Body returned when nothing else matches.
        canned_responses: Sentence fragment -> response body.
        script: Bodies returned one per call, in order, before anything else.
        simulate_delay_ms: Latency before answering (0 = answer at once).
        fail_after: Raise on every call after this many (None = never).
        failure_error: Exception raised once ``fail_after`` is exceeded.
        response_callback: Builds the body from the request.
        finish_reason: Reported finish reason.
    """

    default_response: str = "{}"
    canned_responses: dict[str, str] = field(default_factory=dict)
    script: list[str] = field(default_factory=list)
    simulate_delay_ms: float = 0.0
    fail_after: int | None = None
    failure_error: Exception | None = None
    response_callback: Callable[[LLMRequest], str] | None = None
    finish_reason: str | None = "STOP"


class MockLLMProvider(LLMProvider):
    """Model provider that never leaves the process.

    Example:
        provider = MockLLMProvider(MockConfig(default_response=farmer_json))
        parser = SyntaxParser(settings, provider=provider)
        result = await parser.parse("The farmer eats the pig")
        assert provider.call_count == 1
    """

    def __init__(self, config: MockConfig | None = None, model: str = "mock-model"):
        self._config = config or MockConfig()
        self._model = model
        self._script = list(self._config.script)
        self._requests: list[LLMRequest] = []

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def call_count(self) -> int:
        return len(self._requests)

    @property
    def requests(self) -> list[LLMRequest]:
        """Copies of every request received, oldest first."""
        return list(self._requests)

    def last_request(self) -> LLMRequest | None:
        return self._requests[-1] if self._requests else None

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Answer a request from the configured script.

        Raises:
            LLMError: Once ``fail_after`` calls have been made, unless
                ``failure_error`` names a different exception.
        """
        self._requests.append(request)

        limit = self._config.fail_after
        if limit is not None and self.call_count > limit:
            raise self._config.failure_error or LLMError("Mock failure")

        started = time.perf_counter()
        if self._config.simulate_delay_ms > 0:
            await asyncio.sleep(self._config.simulate_delay_ms / 1000)

        content = self._choose_content(request)

        # Roughly four characters per token.
        prompt_tokens = (len(request.prompt) + len(request.system_prompt or "")) // 4
        completion_tokens = len(content) // 4
        return LLMResponse(
            content=content,
            tokens_used={
                "prompt": prompt_tokens,
                "completion": completion_tokens,
                "total": prompt_tokens + completion_tokens,
            },
            model=self._model,
            latency_ms=(time.perf_counter() - started) * 1000,
            finish_reason=self._config.finish_reason,
            raw_response={"mock": True, "sentence": _sentence_of(request)},
        )

    def _choose_content(self, request: LLMRequest) -> str:
        if self._script:
            return self._script.pop(0)
        if self._config.response_callback:
            return self._config.response_callback(request)

        sentence = _sentence_of(request).lower()
        for fragment, body in self._config.canned_responses.items():
            if fragment.lower() in sentence:
                return body
        return self._config.default_response

    def reset(self) -> None:
        """Forget recorded requests and rewind the script."""
        self._requests.clear()
        self._script = list(self._config.script)


def _sentence_of(request: LLMRequest) -> str:
    # The parser tags requests with the raw sentence; fall back to the prompt.
    return str(request.metadata.get("sentence") or request.prompt)
