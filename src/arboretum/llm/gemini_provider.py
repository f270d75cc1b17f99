"""Gemini LLM provider.

This module provides GeminiProvider, which calls the Gemini
``generateContent`` REST endpoint with structured JSON output.

API docs: https://ai.google.dev/api/generate-content
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from arboretum.llm.provider import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMProvider,
    LLMRateLimitError,
    LLMRequest,
    LLMResponse,
    LLMResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-3-pro-preview"

# google.rpc.ErrorInfo reasons that mean the key itself is unusable.
CREDENTIAL_REASONS = frozenset(
    {"API_KEY_INVALID", "API_KEY_EXPIRED", "API_KEY_MISSING", "API_KEY_REVOKED"}
)


class GeminiProvider(LLMProvider):
    """LLM provider for the Gemini API.

    Example:
        provider = GeminiProvider(api_key="...", model="gemini-3-pro-preview")
        request = LLMRequest(prompt="Analyze ...", json_mode=True)
        response = await provider.complete(request)
        print(response.content)

    Attributes:
        model: The model name to use.
        base_url: The API base URL (version included).
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
    ):
        """Initialize the Gemini provider.

        Args:
            api_key: Gemini API key.
            model: Model name to use.
            base_url: API base URL.
            timeout: Request timeout in seconds.
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return self._model

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request to Gemini.

        Args:
            request: The LLMRequest with prompt and parameters.

        Returns:
            LLMResponse with content, token usage, and metadata.

        Raises:
            LLMAuthenticationError: If the API key is rejected.
            LLMRateLimitError: If the quota is exhausted.
            LLMConnectionError: If the service is unreachable or fails.
            LLMResponseError: If the response is malformed.
        """
        start_time = time.perf_counter()
        payload = self._build_payload(request)

        try:
            raw_response = await asyncio.to_thread(self._send_request, payload)
        except HTTPError as e:
            raise classify_http_error(e.code, _read_error_body(e)) from e
        except URLError as e:
            raise LLMConnectionError(
                f"Failed to connect to Gemini at {self._base_url}: {e.reason}"
            ) from e
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"Gemini returned a non-JSON body: {e}") from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000

        return self._parse_response(raw_response, elapsed_ms)

    def _build_payload(self, request: LLMRequest) -> dict[str, Any]:
        """Build the generateContent payload from an LLMRequest."""
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
        }

        if request.system_prompt:
            payload["systemInstruction"] = {
                "parts": [{"text": request.system_prompt}]
            }

        generation_config: dict[str, Any] = {}

        if request.temperature is not None:
            generation_config["temperature"] = request.temperature

        if request.max_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_tokens

        if request.json_mode:
            generation_config["responseMimeType"] = "application/json"
            if request.response_schema:
                generation_config["responseSchema"] = request.response_schema

        if generation_config:
            payload["generationConfig"] = generation_config

        return payload

    def _send_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send HTTP request to Gemini and return parsed response."""
        url = f"{self._base_url}/models/{quote(self._model)}:generateContent"
        data = json.dumps(payload).encode("utf-8")

        req = Request(
            url,
            data=data,
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self._api_key,
            },
            method="POST",
        )

        with urlopen(req, timeout=self._timeout) as response:
            body = response.read().decode("utf-8")
            return json.loads(body)

    def _parse_response(self, raw: dict[str, Any], elapsed_ms: float) -> LLMResponse:
        """Parse a generateContent response into LLMResponse."""
        try:
            candidates = raw.get("candidates") or []
            content = ""
            finish_reason = None
            if candidates:
                first = candidates[0]
                finish_reason = first.get("finishReason")
                parts = (first.get("content") or {}).get("parts") or []
                # Thought summaries are not part of the answer.
                content = "".join(
                    part.get("text", "") for part in parts if not part.get("thought")
                )
            else:
                block_reason = (raw.get("promptFeedback") or {}).get("blockReason")
                if block_reason:
                    logger.warning(f"Gemini blocked the prompt: {block_reason}")
                    finish_reason = block_reason

            usage = raw.get("usageMetadata") or {}
            prompt_tokens = int(usage.get("promptTokenCount", 0))
            completion_tokens = int(usage.get("candidatesTokenCount", 0))

            return LLMResponse(
                content=content,
                tokens_used={
                    "prompt": prompt_tokens,
                    "completion": completion_tokens,
                    "total": int(
                        usage.get("totalTokenCount", prompt_tokens + completion_tokens)
                    ),
                },
                model=raw.get("modelVersion", self._model),
                latency_ms=elapsed_ms,
                finish_reason=finish_reason,
                raw_response=raw,
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise LLMResponseError(f"Failed to parse Gemini response: {e}") from e


def _read_error_body(error: HTTPError) -> str:
    try:
        return error.read().decode("utf-8", errors="replace")
    except (OSError, AttributeError):
        return ""


def classify_http_error(status_code: int, body: str) -> LLMError:
    """Map an HTTP error from Gemini onto an LLMError subclass.

    Structured signals win: an ErrorInfo reason naming the API key, or
    HTTP 401/403. The message-text checks that follow match what the
    service has been observed to return and may drift between versions.

    Args:
        status_code: HTTP status of the failed request.
        body: Raw response body (usually a JSON error envelope).

    Returns:
        The exception to raise.
    """
    message = ""
    status = ""
    reasons: set[str] = set()
    try:
        envelope = json.loads(body) if body else {}
        error = envelope.get("error") or {}
        message = str(error.get("message") or "")
        status = str(error.get("status") or "")
        for detail in error.get("details") or []:
            if isinstance(detail, dict) and detail.get("reason"):
                reasons.add(str(detail["reason"]))
    except (json.JSONDecodeError, AttributeError):
        message = body.strip()

    if not message:
        message = f"HTTP {status_code}"
    text = f"{status} {message}"
    lowered = text.lower()
    description = f"Gemini request failed with status {status_code}: {message}"

    credential_reason = next(iter(sorted(reasons & CREDENTIAL_REASONS)), None)
    if credential_reason or status_code in (401, 403):
        return LLMAuthenticationError(
            description,
            status_code=status_code,
            reason=credential_reason or status or None,
        )

    if status_code == 429 or status == "RESOURCE_EXHAUSTED":
        return LLMRateLimitError(description, status_code=status_code, reason=status)

    about_budget = "budget" in lowered or "thinking" in lowered
    if (
        (status_code == 400 and "api key" in lowered)
        or ("INVALID_ARGUMENT" in text and not about_budget)
        or status_code == 404
        or "not found" in lowered
    ):
        return LLMAuthenticationError(
            description, status_code=status_code, reason=status or None
        )

    return LLMConnectionError(description, status_code=status_code, reason=status)
