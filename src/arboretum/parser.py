"""Sentence parsing through the generative model service.

SyntaxParser is the single entry point the UI uses:

    parser = SyntaxParser(settings)
    result = await parser.parse("The farmer eats the pig")

Every failure is re-raised as a ParseError subclass; nothing from the
provider reaches the caller unclassified. There are no retries.
"""

from __future__ import annotations

import logging

from arboretum.config import Settings
from arboretum.errors import (
    CredentialMissingError,
    CredentialRejectedError,
    EmptyResponseError,
    ParseError,
    RequestInFlightError,
    TransportError,
)
from arboretum.llm.gemini_provider import GeminiProvider
from arboretum.llm.provider import (
    LLMAuthenticationError,
    LLMError,
    LLMProvider,
    LLMRequest,
)
from arboretum.syntax import ParseResult
from arboretum.validation import decode_parse_result

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """You are a world-class linguistic expert specializing in Generative Grammar and X-bar theory.
Your task is to parse English sentences into formal X-bar syntax trees.

Output MUST be a single JSON object with this exact structure:
{
  "tree": {
    "label": "CP",
    "children": [
      {
        "label": "C",
        "word": "∅"
      },
      {
        "label": "InflP",
        "children": [ ... ]
      }
    ]
  },
  "explanation": "A brief linguistic analysis of the sentence structure.",
  "partsOfSpeech": [
    { "word": "word", "pos": "CATEGORY" }
  ]
}

Rules for X-bar labels:
1. Use standard labels: CP, InflP (Inflectional Phrase), DP, NP, VP, PP, AdjP, AdvP.
2. IMPORTANT: Use 'InflP' instead of 'TP'.
3. Follow X-bar schema: XP -> (Specifier) X'; X' -> X' (Adjunct) OR X' -> X (Head) (Complement).
4. Always label intermediate projections with a prime (e.g., N', V', Infl').
5. The leaf nodes should represent the actual words in the sentence.
6. CRITICAL: If a head (like C, Infl, or V) is null/silent, you MUST include the node with "word": "∅". Do not omit the head node. In most simple declarative sentences, the C head is null (∅).
7. Every node has either "children" or "word", never both.
8. Ensure the tree is deeply nested following proper formal syntax principles."""

MAX_TEMPERATURE = 0.2


def build_prompt(sentence: str) -> str:
    """Return the user prompt for one sentence."""
    return (
        f'Analyze the sentence: "{sentence.strip()}" using X-bar theory. '
        "Provide a deeply nested syntax tree. Ensure all silent heads like "
        "C or Infl are explicitly marked with the null symbol ∅."
    )


class SyntaxParser:
    """Parses sentences into validated X-bar syntax trees.

    Only one request may be outstanding at a time; a second call while
    the first is pending fails with RequestInFlightError.

    Attributes:
        settings: Active settings (credential, model, temperature).
        in_flight: True while a request is outstanding.
    """

    def __init__(
        self,
        settings: Settings,
        provider: LLMProvider | None = None,
    ) -> None:
        """Initialize the parser.

        Args:
            settings: Settings holding the API credential and model options.
            provider: Provider to use instead of a GeminiProvider built
                from settings (tests and demos).
        """
        self.settings = settings
        self._provider = provider
        self._owns_provider = provider is None
        self.in_flight = False

    @property
    def has_credentials(self) -> bool:
        return self.settings.has_credentials

    def update_credentials(self, api_key: str | None) -> None:
        """Replace the API credential for the rest of the session.

        A blank key counts as no key, as it does when loaded from the
        environment.
        """
        api_key = api_key.strip() if api_key else None
        self.settings = self.settings.model_copy(update={"api_key": api_key or None})
        if self._owns_provider:
            self._provider = None
        logger.info("API credential updated")

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = GeminiProvider(
                api_key=self.settings.api_key or "",
                model=self.settings.model_name,
                base_url=self.settings.gemini_base_url,
                timeout=self.settings.request_timeout_seconds,
            )
        return self._provider

    def _build_request(self, sentence: str) -> LLMRequest:
        temperature = min(max(self.settings.temperature, 0.0), MAX_TEMPERATURE)
        return LLMRequest(
            prompt=build_prompt(sentence),
            system_prompt=SYSTEM_INSTRUCTION,
            temperature=temperature,
            json_mode=True,
            metadata={"sentence": sentence},
        )

    async def parse(self, sentence: str) -> ParseResult:
        """Parse a sentence into a validated ParseResult.

        Args:
            sentence: The sentence to analyse.

        Returns:
            The validated parse.

        Raises:
            ValueError: If the sentence is blank.
            CredentialMissingError: If no API credential is configured.
            CredentialRejectedError: If the service rejects the credential.
            EmptyResponseError: If the model returns no content.
            InvalidJSONError: If the content is not JSON.
            MalformedResponseError: If the JSON is not a valid parse.
            TransportError: For any other service or network failure.
            RequestInFlightError: If another parse is outstanding.
        """
        if not sentence or not sentence.strip():
            raise ValueError("sentence must not be blank")
        if not self.has_credentials:
            raise CredentialMissingError(
                "Linguistic engine API key not found. Configure API_KEY or "
                "GEMINI_API_KEY, or provide a key for this session."
            )
        if self.in_flight:
            raise RequestInFlightError("A parse request is already in progress.")

        self.in_flight = True
        try:
            return await self._parse(sentence)
        finally:
            self.in_flight = False

    async def _parse(self, sentence: str) -> ParseResult:
        provider = self._get_provider()
        request = self._build_request(sentence)
        logger.info(f"Parsing sentence with {provider.model_name}: {sentence!r}")

        try:
            response = await provider.complete(request)
        except LLMAuthenticationError as e:
            logger.warning(f"Credential rejected by model service: {e}")
            raise CredentialRejectedError(
                "Your API credentials have expired or are invalid. "
                "Please renew them."
            ) from e
        except LLMError as e:
            logger.error(f"Model service request failed: {e}")
            raise TransportError(str(e) or type(e).__name__) from e
        except Exception as e:
            logger.exception("Unexpected error during syntactic analysis")
            raise TransportError(
                str(e) or "An unexpected error occurred during syntactic analysis."
            ) from e

        if not response.content or not response.content.strip():
            raise EmptyResponseError(
                "The linguistic model returned an empty response."
            )

        try:
            result = decode_parse_result(response.content)
        except ParseError as e:
            logger.warning(f"Rejected model output ({e.kind}): {e.message}")
            logger.debug(f"Raw model output: {response.content}")
            raise

        logger.info(
            f"Parsed sentence in {response.latency_ms:.0f}ms "
            f"({response.tokens_used.get('total', 0)} tokens)"
        )
        return result
