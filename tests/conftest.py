"""Shared pytest fixtures for the Talkify test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest
import requests


class FakeRaw:
    """Minimal urllib3-like raw stream over fixed bytes."""

    def __init__(self, content: bytes) -> None:
        """Initialize the raw stream with its full payload."""

        self._content = content
        self._offset = 0

    def read(self, amount: int | None = None, decode_content: bool | None = None) -> bytes:
        """Return the next `amount` bytes, or the remainder."""

        _ = decode_content
        end = len(self._content) if amount is None else self._offset + amount
        chunk = self._content[self._offset:end]
        self._offset += len(chunk)
        return chunk


class FakeResponse:
    """Minimal requests response double for transport patching."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        payload: Any = None,
        content: bytes = b"",
        reason: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize response with JSON payload or raw bytes and HTTP status."""

        self.status_code = status_code
        self.reason = reason
        self.headers = headers or {}
        self.raw = FakeRaw(content)
        self.closed = False
        self._payload = payload
        self._content = content

    def json(self) -> Any:
        """Return the JSON payload, failing like requests for non-JSON bodies."""

        if self._payload is None:
            raise ValueError("Response body is not JSON.")
        return self._payload

    def iter_content(self, chunk_size: int = 1) -> Any:
        """Yield the binary payload in `chunk_size` slices."""

        for start in range(0, len(self._content), chunk_size):
            yield self._content[start:start + chunk_size]

    def raise_for_status(self) -> None:
        """Raise HTTPError when the response status represents a failure."""

        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code} error", response=self)

    def close(self) -> None:
        """Record that the caller released the response."""

        self.closed = True


class FakeSession:
    """Transport spy recording every request issued by the client."""

    def __init__(
        self,
        responses: list[FakeResponse] | None = None,
        error: Exception | None = None,
    ) -> None:
        """Initialize queued responses or a transport error to raise."""

        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self._responses = list(responses or [])
        self._error = error

    def _respond(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        """Record one request and return the next queued response."""

        self.calls.append({"method": method, "url": url, **kwargs})
        if self._error is not None:
            raise self._error
        return self._responses.pop(0)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        """Record a POST request."""

        return self._respond("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        """Record a GET request."""

        return self._respond("GET", url, **kwargs)

    def close(self) -> None:
        """Record session shutdown."""

        self.closed = True


def _provider_voice_payload(**overrides: Any) -> dict[str, Any]:
    """Build one provider voice record with capitalized field names."""

    payload: dict[str, Any] = {
        "Culture": "en-US",
        "Name": "Zira",
        "Description": "Microsoft Zira",
        "IsStandard": True,
        "IsPremium": False,
        "IsExclusive": False,
        "IsNeural": False,
        "CanUseSpeechMarks": True,
        "CanWhisper": False,
        "CanUseWordBreak": True,
        "CanSpeakSoftly": False,
        "CanUseVolume": True,
        "CanUsePitch": True,
        "SupportsSpeechMarks": True,
        "Gender": "Female",
        "StandardVoice": True,
        "SupportedFormats": ["MP3", "WAV"],
        "Language": "English",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_response() -> Callable[..., FakeResponse]:
    """Provide the fake response constructor."""

    return FakeResponse


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    """Provide the fake session (transport spy) constructor."""

    return FakeSession


@pytest.fixture
def provider_voice() -> Callable[..., dict[str, Any]]:
    """Provide a builder for provider-shaped voice records."""

    return _provider_voice_payload
