"""Talkify HTTP client.

Responsibilities:
- Hold connection defaults: base URL, `x-api-key` session header, and timeout.
- Map ergonomic speech options onto the provider's wire schema.
- Normalize voice and language detection replies into typed records.
- Raise `TalkifyError` for missing keys, invalid options, and failed requests.

Every public operation issues exactly one HTTP request and never retries.
"""

from __future__ import annotations

from typing import Any, Iterator

import requests

from .errors import TalkifyError
from .models.datatypes import Language, Voice, resolve_voice_name
from .options import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ClientConfig,
    SpeechOptions,
    resolve_speech_options,
    with_client_defaults,
)
from .parsing import normalize_optional_string
from .telemetry.logger import RequestLogger


_SPEECH_PATH = "speech/v1"
_VOICES_PATH = "speech/v1/voices"
_DETECT_LANGUAGE_PATH = "language/v1/detect"

_SPEECH_FAILURE_MESSAGE = "Could not synthesize the audio"
_VOICES_FAILURE_MESSAGE = "Could not fetch the voices list"
_DETECT_LANGUAGE_FAILURE_MESSAGE = "Could not fetch the language detection response"

_TEXT_TYPE_PLAIN = 0
_TEXT_TYPE_MARKUP = 1
_NO_LANGUAGE_DETECTED = -1


class SpeechStream:
    """Unconsumed binary audio response returned by `Talkify.speech`.

    The caller owns the stream and must drain or close it; use it as a
    context manager to release the connection deterministically.
    """

    def __init__(self, response: requests.Response) -> None:
        self._response = response

    @property
    def content_type(self) -> str | None:
        """Return the `Content-Type` reported by the provider, if any."""

        return self._response.headers.get("Content-Type")

    def iter_bytes(self, chunk_size: int = 8192) -> Iterator[bytes]:
        """Yield audio bytes as they arrive from the connection."""

        return self._response.iter_content(chunk_size=chunk_size)

    def read(self, amount: int | None = None) -> bytes:
        """Read up to `amount` bytes, or the remainder when `amount` is `None`."""

        return self._response.raw.read(amount, decode_content=True)

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> SpeechStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Talkify:
    """Client for the Talkify text-to-speech API.

    Example:
        >>> client = Talkify("my-key", SpeechOptions(format="wav"))
        >>> with client.speech("Hello there") as stream:
        ...     audio = stream.read()
    """

    def __init__(
        self,
        api_key: str | None,
        defaults: SpeechOptions | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        request_logger: RequestLogger | None = None,
    ) -> None:
        """Validate credentials and defaults, then bind the transport session.

        Raises:
            TalkifyError: `KEY_MISSING` for an absent or blank key,
                `VALIDATION_ERROR` for out-of-range defaults.
        """

        normalized_key = normalize_optional_string(api_key) if isinstance(api_key, str) else None
        if normalized_key is None:
            raise TalkifyError.key_missing()

        resolved_defaults = defaults if defaults is not None else SpeechOptions()
        resolved_defaults.validate()

        self._api_key = normalized_key
        self.defaults = with_client_defaults(resolved_defaults)
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout_seconds = timeout_seconds
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({"x-api-key": normalized_key})
        self._request_logger = request_logger or RequestLogger()

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        session: requests.Session | None = None,
    ) -> Talkify:
        """Build a client from a `ClientConfig`."""

        return cls(
            config.api_key,
            config.defaults,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            session=session,
        )

    def close(self) -> None:
        """Close the underlying transport session."""

        self._session.close()

    def __enter__(self) -> Talkify:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def speech(self, text: str, options: SpeechOptions | None = None) -> SpeechStream:
        """Synthesize `text` and return the audio as an unconsumed stream.

        Args:
            text: Plain text, or SSML when `use_markup` resolves to `True`.
            options: Per-call overrides; unset fields fall back to client defaults.

        Raises:
            TalkifyError: `VALIDATION_ERROR` before any request for invalid
                overrides, `REQUEST_ERROR` when the request fails.
        """

        if options is not None:
            options.validate()
        resolved = resolve_speech_options(options, self.defaults)
        payload = self._speech_payload(text, resolved)

        self._request_logger.log_request_start(
            "speech",
            format=payload.get("Format"),
            voice=payload.get("Voice", "default"),
            text_type=payload["TextType"],
        )
        try:
            response = self._session.post(
                self._url(_SPEECH_PATH),
                json=payload,
                stream=True,
                timeout=self.timeout_seconds,
            )
            try:
                response.raise_for_status()
            except requests.HTTPError:
                response.close()
                raise
        except requests.RequestException as exc:
            raise TalkifyError.from_request_exception(exc, _SPEECH_FAILURE_MESSAGE) from exc

        stream = SpeechStream(response)
        self._request_logger.log_request_complete(
            "speech",
            status=response.status_code,
            content_type=stream.content_type or "unknown",
        )
        return stream

    def available_voices(self, language: str | None = None) -> list[Voice]:
        """Return provider voices, optionally only those for `language`.

        The language filter is case-insensitive and keeps provider order.

        Raises:
            TalkifyError: `REQUEST_ERROR` when the request fails or the reply
                cannot be normalized.
        """

        self._request_logger.log_request_start("available_voices", language=language or "all")
        response = self._get(_VOICES_PATH, {"key": self._api_key}, _VOICES_FAILURE_MESSAGE)
        try:
            voices = self._normalize_voices(response.json(), language)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise TalkifyError.malformed_response(
                _VOICES_FAILURE_MESSAGE, response.status_code
            ) from exc

        self._request_logger.log_request_complete("available_voices", voice_count=len(voices))
        return voices

    def detect_language(self, text: str) -> Language | None:
        """Detect the language of `text`.

        Returns:
            The detected `Language`, or `None` when the provider could not
            confidently detect one.

        Raises:
            TalkifyError: `REQUEST_ERROR` when the request fails or the reply
                cannot be normalized.
        """

        self._request_logger.log_request_start("detect_language", text_chars=len(text))
        response = self._get(
            _DETECT_LANGUAGE_PATH,
            {"text": text, "key": self._api_key},
            _DETECT_LANGUAGE_FAILURE_MESSAGE,
        )
        try:
            language = self._normalize_language(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise TalkifyError.malformed_response(
                _DETECT_LANGUAGE_FAILURE_MESSAGE, response.status_code
            ) from exc

        self._request_logger.log_request_complete(
            "detect_language",
            detected=language.name if language is not None else "none",
        )
        return language

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get(
        self,
        path: str,
        params: dict[str, str],
        failure_message: str,
    ) -> requests.Response:
        """Issue one GET request and map transport or HTTP failures."""

        try:
            response = self._session.get(
                self._url(path),
                params=params,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TalkifyError.from_request_exception(exc, failure_message) from exc
        return response

    @staticmethod
    def _speech_payload(text: str, options: SpeechOptions) -> dict[str, Any]:
        """Map resolved speech options to the provider body, omitting unset fields."""

        payload: dict[str, Any] = {
            "Text": text,
            "Format": options.format,
            "FallbackLanguage": options.fallback_language,
            "Voice": resolve_voice_name(options.voice),
            "Rate": options.rate,
            "TextType": _TEXT_TYPE_MARKUP if options.use_markup else _TEXT_TYPE_PLAIN,
            "Whisper": options.whisper,
            "Soft": options.soft,
            "Volume": options.volume,
            "WordBreakMs": options.word_break_ms,
            "Pitch": options.pitch,
        }
        return {key: value for key, value in payload.items() if value is not None}

    @staticmethod
    def _normalize_voices(payload: Any, language: str | None) -> list[Voice]:
        """Normalize provider voice records, keeping only `language` when given."""

        if not isinstance(payload, list):
            raise TypeError("Voice list reply must be a JSON array.")

        wanted_language = language.lower() if language else None
        voices: list[Voice] = []
        for raw_voice in payload:
            if wanted_language is not None and raw_voice["Language"].lower() != wanted_language:
                continue
            voices.append(Voice.from_provider_payload(raw_voice))
        return voices

    @staticmethod
    def _normalize_language(payload: Any) -> Language | None:
        """Map a detection reply to `Language`, or `None` for the no-detection sentinel."""

        if payload["Language"] == _NO_LANGUAGE_DETECTED:
            return None
        return Language(
            name=payload["LanguageName"],
            cultures=tuple(payload["Cultures"]),
        )
