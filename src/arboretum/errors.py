"""Errors surfaced by Arboretum's parse operation.

Every failure of a parse request reaches the caller as one of these
exceptions. The UI inspects ``needs_credentials`` to decide whether to
offer the "renew credentials" flow.
"""

from __future__ import annotations

from typing import Any


class ParseError(Exception):
    """Base exception for parse failures."""

    kind = "TransportOrUnknown"
    needs_credentials = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for the UI layer."""
        return {
            "kind": self.kind,
            "message": self.message,
            "needs_credentials": self.needs_credentials,
        }


class CredentialMissingError(ParseError):
    """Raised when no API credential is configured."""

    kind = "CredentialMissing"
    needs_credentials = True


class CredentialRejectedError(ParseError):
    """Raised when the model service rejects the credential."""

    kind = "CredentialRejected"
    needs_credentials = True


class EmptyResponseError(ParseError):
    """Raised when the model service returns no content."""

    kind = "EmptyResponse"


class InvalidJSONError(ParseError):
    """Raised when the content body is not parseable as JSON."""

    kind = "InvalidJSON"


class MalformedResponseError(ParseError):
    """Raised when decoded JSON does not have the syntax tree shape."""

    kind = "MalformedResponse"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class TransportError(ParseError):
    """Raised for any other network or service failure."""

    kind = "TransportOrUnknown"


class RequestInFlightError(ParseError):
    """Raised when a parse is requested while another is outstanding."""

    kind = "RequestInFlight"
