"""Speech option and client configuration models.

Responsibilities:
- Define the ergonomic per-call speech options and the client configuration.
- Validate supplied option values against their declared ranges.
- Merge per-call overrides with client defaults one field at a time.

Key types:
- `SpeechOptions`: optional synthesis settings, used as defaults and overrides.
- `ClientConfig`: API key, default speech options, and transport settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace

from .errors import TalkifyError
from .models.datatypes import VoiceSelector


DEFAULT_BASE_URL = "https://talkify.net/api/"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_AUDIO_FORMAT = "mp3"
SUPPORTED_AUDIO_FORMATS = ("mp3", "wav")

_VOLUME_RANGE = (-10, 10)
_PITCH_RANGE = (-10, 10)
_WORD_BREAK_RANGE = (0, 1000)


@dataclass(frozen=True, slots=True)
class SpeechOptions:
    """Speech synthesis settings where `None` means "not supplied".

    Attributes:
        format: Audio container, `mp3` or `wav`.
        fallback_language: Language used when the text language is not detected.
        voice: Voice name or a `Voice` returned by `available_voices`.
        rate: Speaking rate.
        use_markup: Whether the text is SSML markup rather than plain text.
        whisper: Whisper mode.
        soft: Soft speech mode.
        volume: Volume adjustment in [-10, 10].
        word_break_ms: Pause between words in milliseconds, [0, 1000].
        pitch: Pitch adjustment in [-10, 10].
    """

    format: str | None = None
    fallback_language: str | None = None
    voice: VoiceSelector | None = None
    rate: int | float | None = None
    use_markup: bool | None = None
    whisper: bool | None = None
    soft: bool | None = None
    volume: int | float | None = None
    word_break_ms: int | float | None = None
    pitch: int | float | None = None

    def validate(self) -> None:
        """Validate supplied values; absent fields are not checked.

        Raises:
            TalkifyError: With kind `VALIDATION_ERROR` for the first invalid field.
        """

        if self.format is not None and self.format not in SUPPORTED_AUDIO_FORMATS:
            raise TalkifyError.validation(
                "Invalid value for 'format' property. "
                f"Available values: {','.join(SUPPORTED_AUDIO_FORMATS)}"
            )
        _validate_range("volume", self.volume, _VOLUME_RANGE)
        _validate_range("pitch", self.pitch, _PITCH_RANGE)
        _validate_range("wordBreak", self.word_break_ms, _WORD_BREAK_RANGE)


def _validate_range(
    name: str,
    value: object,
    bounds: tuple[int, int],
) -> None:
    """Raise a validation error when a present value is not a number in `bounds`."""

    if value is None:
        return
    minimum, maximum = bounds
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TalkifyError.validation(
            f"Invalid value for '{name}' property. Expected a number between "
            f"{minimum} and {maximum}."
        )
    if not minimum <= value <= maximum:
        raise TalkifyError.validation(
            f"Invalid range for '{name}' property. Min: {minimum}, Max: {maximum}."
        )


def resolve_speech_options(
    overrides: SpeechOptions | None,
    defaults: SpeechOptions,
) -> SpeechOptions:
    """Resolve every field as `override if present else default`.

    Fields left unset in `overrides` never erase a default.
    """

    if overrides is None:
        return defaults
    resolved: dict[str, object] = {}
    for option_field in fields(SpeechOptions):
        override_value = getattr(overrides, option_field.name)
        resolved[option_field.name] = (
            override_value
            if override_value is not None
            else getattr(defaults, option_field.name)
        )
    return SpeechOptions(**resolved)


def with_client_defaults(options: SpeechOptions) -> SpeechOptions:
    """Fill the defaults the client stores when the caller left them unset."""

    return replace(
        options,
        format=options.format if options.format is not None else DEFAULT_AUDIO_FORMAT,
        use_markup=options.use_markup if options.use_markup is not None else True,
    )


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Construction settings for a `Talkify` client.

    Attributes:
        api_key: Talkify API key; required and non-empty at client construction.
        defaults: Speech options applied when a call does not override them.
        base_url: Root URL of the Talkify API.
        timeout_seconds: Transport timeout; `None` waits indefinitely.
    """

    api_key: str | None
    defaults: SpeechOptions = field(default_factory=SpeechOptions)
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS

    def __repr__(self) -> str:
        masked = "None" if self.api_key is None else "'***'"
        return (
            f"ClientConfig(api_key={masked}, defaults={self.defaults!r}, "
            f"base_url={self.base_url!r}, timeout_seconds={self.timeout_seconds!r})"
        )
