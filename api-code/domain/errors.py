from __future__ import annotations

from typing import Optional


class ForwarderError(Exception):
    """Base class for chat forwarding failures rendered as `{error: ...}`."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ForwarderError):
    """The client request cannot be forwarded as supplied."""

    status_code = 400
    default_message = "Please send a message or messages array."


class UpstreamError(ForwarderError):
    """A single upstream attempt failed; recovered by trying the next key."""

    status_code = 502
    default_message = "Gemini API error"

    def __init__(self, message: Optional[str] = None, *, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class AllCredentialsExhausted(ForwarderError):
    """Every configured API key was tried and none produced a reply."""

    status_code = 500
    default_message = "Gemini API error"

    def __init__(self, last_error: Optional[str] = None, *, attempts: int = 0) -> None:
        super().__init__(last_error)
        self.attempts = attempts


class InternalError(ForwarderError):
    status_code = 500
    default_message = "Internal server error."
