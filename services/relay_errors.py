"""Errors raised by the relay services and how they are reported to callers."""

from __future__ import annotations

from typing import Optional

import openai

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class RelayError(Exception):
    """Base class for relay failures. `message` is safe to show to the user."""

    code = "provider_error"
    status_code = 500

    def __init__(self, message: str = UNKNOWN_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        """Return the JSON body sent to the client for this failure."""
        return {"error": self.message, "code": self.code}


class ProviderError(RelayError):
    """The provider call failed in transport or was rejected by the provider."""


class EmptyResultError(RelayError):
    """The provider answered, but without the kind of output that was requested."""

    code = "empty_result"


class InvalidRequestError(RelayError):
    """The client sent something the relay will not forward."""

    code = "invalid_request"


def describe_provider_error(exc: BaseException) -> str:
    """Return the provider's own error message when it is structured.

    OpenAI SDK errors carry a `message` (and, for API status errors, a body
    with `error.message`); anything else falls back to a generic message.
    """
    if isinstance(exc, openai.APIError):
        body = getattr(exc, "body", None)
        detail: Optional[str] = None
        if isinstance(body, dict):
            error = body.get("error", body)
            if isinstance(error, dict):
                detail = error.get("message")
        return detail or exc.message or UNKNOWN_ERROR_MESSAGE
    return UNKNOWN_ERROR_MESSAGE
