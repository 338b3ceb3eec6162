"""
Error hierarchy for the Gemini client.

All errors raised by this package derive from GeminiError so callers can
catch a single base class. Nothing here retries; retry policy belongs to
the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from ..services.streaming.assembler import StreamAggregate


class GeminiError(Exception):
    """Base class for every error raised by gemini_client."""


class ValidationError(GeminiError):
    """The request is malformed or incomplete and was never sent."""


class MissingApiKeyError(ValidationError):
    def __init__(self, message: str = "Missing API key (set GEMINI_API_KEY or pass api_key)"):
        super().__init__(message)


class TransportError(GeminiError):
    """Network or HTTP transport failure (timeouts, resets, DNS, ...)."""


class ApiError(GeminiError):
    """The Gemini API answered with an error status or an error payload."""

    def __init__(
        self,
        status_code: int,
        message: str,
        status: Optional[str] = None,
        details: Optional[List[Any]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.status = status
        self.details = details or []
        super().__init__(f"Gemini API error: {status_code} - {message}")


class TruncatedStreamError(GeminiError):
    """The stream ended before a final fragment arrived."""

    def __init__(self, partial: "StreamAggregate", message: Optional[str] = None):
        self.partial = partial
        super().__init__(
            message
            or f"Stream ended before a final fragment ({partial.fragment_count} fragments, "
               f"{len(partial.text)} chars of text received)"
        )


class FunctionCallError(GeminiError):
    """Accessing a function call's arguments failed."""
