"""Error classes for the Generative Language API client.

Every fatal failure surfaces as a :class:`GenAIError` subclass carrying
enough context (status code, raw body, message) to diagnose it without
re-running the request.  Function-handler failures inside the automatic
function-calling loop are *not* represented here: they are reported back
to the model as tool errors.
"""

from __future__ import annotations

MAX_DISPLAY_BODY_CHARS = 500


class GenAIError(Exception):
    """Base exception for the client.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code, or ``0`` when no HTTP exchange applies.
        response_body: Raw response body, stored untruncated.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response_body: str = "",
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"status_code={self.status_code})"
        )

    def format(self, max_body_chars: int = MAX_DISPLAY_BODY_CHARS) -> str:
        """Render the message plus the response body, capped for display."""
        if not self.response_body:
            return self.message
        body = self.response_body
        if len(body) > max_body_chars:
            body = body[:max_body_chars] + "..."
        return f"{self.message}: {body}"


class APIError(GenAIError):
    """The API answered with a non-2xx status or an error envelope."""

    def __init__(self, status_code: int, response_body: str = "") -> None:
        super().__init__(
            f"GenAI API error (HTTP {status_code})",
            status_code=status_code,
            response_body=response_body,
        )


class TransportError(GenAIError):
    """The request could not be delivered or the connection failed."""


class DecodeError(GenAIError):
    """A payload could not be decoded into the expected response shape."""


class FunctionLookupError(GenAIError, LookupError):
    """The model called a function that has no registered handler."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No function handler registered for {name!r}")
        self.name = name


class AfcAbortedError(GenAIError):
    """The automatic function-calling loop was aborted by the caller."""


class ConfigurationError(GenAIError, ValueError):
    """Invalid caller input, detected before any network call."""
