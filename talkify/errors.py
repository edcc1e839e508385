"""Domain exceptions for Talkify client diagnostics.

Responsibilities:
- Expose one flat error type with a stable `kind` for every client failure.
- Map `requests` transport and HTTP failures into request errors with status metadata.

Key types:
- `TalkifyError`: raised for missing keys, invalid options, and failed requests.
"""

from __future__ import annotations

import requests


KEY_MISSING = "KEY_MISSING"
VALIDATION_ERROR = "VALIDATION_ERROR"
REQUEST_ERROR = "REQUEST_ERROR"

ERROR_KINDS = frozenset({KEY_MISSING, VALIDATION_ERROR, REQUEST_ERROR})

_KEY_MISSING_MESSAGE = (
    "Talkify API-key not given. Visit https://manage.talkify.net to create your own API-key."
)


class TalkifyError(RuntimeError):
    """Raised when a Talkify client operation cannot be completed.

    Attributes:
        kind: One of `KEY_MISSING`, `VALIDATION_ERROR`, or `REQUEST_ERROR`.
        message: Human-readable failure description.
        status_code: HTTP status returned by the provider, when one was received.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize a classified client error."""

        if kind not in ERROR_KINDS:
            raise ValueError(f"Unsupported Talkify error kind `{kind}`.")
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"TalkifyError(kind={self.kind!r}, message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )

    @classmethod
    def key_missing(cls) -> TalkifyError:
        """Build the construction-time error for an absent API key."""

        return cls(_KEY_MISSING_MESSAGE, kind=KEY_MISSING)

    @classmethod
    def validation(cls, message: str) -> TalkifyError:
        """Build an option validation error."""

        return cls(message, kind=VALIDATION_ERROR)

    @classmethod
    def from_request_exception(
        cls,
        exc: requests.RequestException,
        fallback_message: str,
    ) -> TalkifyError:
        """Convert a `requests` failure into a request error.

        The provider's status text is preferred as message; `fallback_message`
        is used when the transport did not receive a response or the response
        carries no reason phrase.
        """

        response = exc.response
        if response is None:
            return cls(fallback_message, kind=REQUEST_ERROR)
        reason = response.reason.strip() if isinstance(response.reason, str) else ""
        return cls(
            reason or fallback_message,
            kind=REQUEST_ERROR,
            status_code=response.status_code,
        )

    @classmethod
    def malformed_response(
        cls,
        fallback_message: str,
        status_code: int | None = None,
    ) -> TalkifyError:
        """Build a request error for a reply whose shape cannot be normalized."""

        return cls(fallback_message, kind=REQUEST_ERROR, status_code=status_code)
