"""LLM integration for Arboretum.

This package provides:
- LLMProvider: Abstract base class for LLM providers
- LLMRequest/LLMResponse: Data structures for LLM interactions
- GeminiProvider: Gemini REST provider (default)
- MockLLMProvider: Mock provider for testing
"""

from arboretum.llm.gemini_provider import GeminiProvider, classify_http_error
from arboretum.llm.mock_provider import MockConfig, MockLLMProvider
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

__all__ = [
    # Provider interface
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    # Errors
    "LLMError",
    "LLMAuthenticationError",
    "LLMConnectionError",
    "LLMRateLimitError",
    "LLMResponseError",
    # Implementations
    "GeminiProvider",
    "MockConfig",
    "MockLLMProvider",
    "classify_http_error",
]
