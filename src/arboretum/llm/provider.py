"""Seam between the parser and the generative model service.

The parser only ever talks to an LLMProvider:

    request = LLMRequest(prompt=..., system_prompt=..., json_mode=True)
    response = await provider.complete(request)

Providers report failures as LLMError subclasses. They say what went
wrong at the transport level (bad key, throttled, unreachable, garbled);
SyntaxParser turns them into the user-facing ParseError kinds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


def _empty_usage() -> dict[str, int]:
    return {"prompt": 0, "completion": 0, "total": 0}


@dataclass
class LLMRequest:
    """One call to the model.

    Attributes:
        prompt: User turn (the sentence wrapped in instructions).
        system_prompt: System instruction, e.g. the X-bar output rules.
        max_tokens: Output cap; None leaves it to the service.
        temperature: Sampling temperature. Parses want 0.0 to 0.2.
        json_mode: Ask for a JSON body instead of prose.
        response_schema: JSON schema the body must follow, if supported.
        metadata: Caller bookkeeping; never sent to the service.
    """

    prompt: str
    system_prompt: str | None = None
    max_tokens: int | None = None
    temperature: float = 0.0
    json_mode: bool = False
    response_schema: dict[str, Any] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResponse:
    """What the model sent back.

    ``content`` is the text of the answer and may be empty; deciding
    whether an empty or non-JSON answer is an error is the parser's job.
    ``raw_response`` keeps the provider payload for debugging and is
    left out of ``to_dict()``.
    """

    content: str
    tokens_used: dict[str, int] = field(default_factory=_empty_usage)
    model: str = ""
    latency_ms: float = 0.0
    finish_reason: str | None = None
    raw_response: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "tokens_used": dict(self.tokens_used),
            "model": self.model,
            "latency_ms": self.latency_ms,
            "finish_reason": self.finish_reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LLMResponse:
        return cls(
            content=data["content"],
            tokens_used=dict(data.get("tokens_used") or _empty_usage()),
            model=data.get("model", ""),
            latency_ms=data.get("latency_ms", 0.0),
            finish_reason=data.get("finish_reason"),
        )


class LLMProvider(ABC):
    """A generative model that can answer an LLMRequest."""

    @abstractmethod
    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send one request and wait for the whole answer.

        Raises:
            LLMError: If the service cannot produce an answer.
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Identifier of the model requests go to."""


class LLMError(Exception):
    """The model service failed to answer.

    Attributes:
        status_code: HTTP status, when the failure came from a response.
        reason: Machine-readable cause reported by the service
            (e.g. ``API_KEY_INVALID`` or ``RESOURCE_EXHAUSTED``).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class LLMAuthenticationError(LLMError):
    """The API key is missing, invalid, expired or not allowed this model."""


class LLMConnectionError(LLMError):
    """The service could not be reached or failed on its side."""


class LLMRateLimitError(LLMError):
    """The key's quota is exhausted for now."""


class LLMResponseError(LLMError):
    """The service answered with something that is not a valid envelope."""
