"""Session state for a single-user visualizer.

The session holds the one "current result" slot as an immutable
SessionState snapshot. A successful parse replaces the result wholesale;
a failed parse clears it to an error state rather than leaving the
previous tree on screen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from arboretum.errors import ParseError, RequestInFlightError, TransportError
from arboretum.metrics import calculate_stats
from arboretum.parser import SyntaxParser
from arboretum.syntax import ParseResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """Snapshot of what the UI should show.

    Attributes:
        sentence: The last submitted sentence.
        result: The current parse, if any.
        error: The last failure, if the last request failed.
        loading: True while a request is outstanding.
    """

    sentence: str = ""
    result: ParseResult | None = None
    error: ParseError | None = None
    loading: bool = False

    @property
    def needs_credentials(self) -> bool:
        return self.error is not None and self.error.needs_credentials

    def to_dict(self) -> dict[str, Any]:
        """Convert state to a dictionary for the UI layer."""
        return {
            "sentence": self.sentence,
            "loading": self.loading,
            "result": self.result.to_dict() if self.result else None,
            "stats": calculate_stats(self.result.tree) if self.result else None,
            "error": self.error.to_dict() if self.error else None,
            "needs_credentials": self.needs_credentials,
        }


class ParseSession:
    """Owns the current result slot for one user."""

    def __init__(self, parser: SyntaxParser) -> None:
        self.parser = parser
        self.state = SessionState()

    async def submit(self, sentence: str) -> SessionState:
        """Parse a sentence and replace the current state.

        Returns:
            The new state. Failures are recorded in the state, not raised,
            except RequestInFlightError which leaves the state untouched.

        Raises:
            RequestInFlightError: If a request is already outstanding.
            ValueError: If the sentence is blank.
        """
        if not sentence or not sentence.strip():
            raise ValueError("sentence must not be blank")
        if self.state.loading:
            raise RequestInFlightError("A parse request is already in progress.")

        self.state = SessionState(sentence=sentence, loading=True)
        try:
            result = await self.parser.parse(sentence)
        except RequestInFlightError:
            self.state = SessionState(sentence=sentence)
            raise
        except ParseError as e:
            logger.info(f"Parse failed ({e.kind}): {e.message}")
            self.state = SessionState(sentence=sentence, error=e)
        except Exception as e:
            logger.exception("Unexpected error while parsing")
            error = TransportError(str(e) or type(e).__name__)
            self.state = SessionState(sentence=sentence, error=error)
        else:
            self.state = SessionState(sentence=sentence, result=result)
        return self.state

    def clear(self) -> SessionState:
        """Discard the current result and any error."""
        self.state = SessionState()
        return self.state
