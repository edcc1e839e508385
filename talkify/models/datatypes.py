"""Core datatypes returned by the Talkify client.

Responsibilities:
- Represent immutable records normalized from provider payloads.
- Resolve the caller-facing voice selector into the provider voice name.

Key types:
- `Voice`, `Language`, and the `VoiceSelector` union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True, slots=True)
class Voice:
    """A voice offered by the provider.

    Attributes:
        culture: Culture code such as `en-US`.
        name: Provider voice name, used as voice selector.
        gender: `Male` or `Female`.
        language: Human-readable language name.
        supported_formats: Lowercase audio format tags the voice can render.
        description: Provider description text.
        is_standard: Standard tier voice.
        is_premium: Premium tier voice.
        is_exclusive: Exclusive tier voice.
        is_neural: Neural voice.
        can_use_speech_marks: Supports speech marks.
        can_whisper: Supports whisper mode.
        can_use_word_break: Supports word break timing.
        can_speak_softly: Supports soft speech.
        can_use_volume: Supports volume adjustment.
        can_use_pitch: Supports pitch adjustment.
    """

    culture: str
    name: str
    gender: str
    language: str
    supported_formats: tuple[str, ...]
    description: str
    is_standard: bool
    is_premium: bool
    is_exclusive: bool
    is_neural: bool
    can_use_speech_marks: bool
    can_whisper: bool
    can_use_word_break: bool
    can_speak_softly: bool
    can_use_volume: bool
    can_use_pitch: bool

    @classmethod
    def from_provider_payload(cls, payload: Mapping[str, Any]) -> Voice:
        """Normalize one provider voice record with capitalized field names.

        Raises:
            KeyError: If a required provider field is missing.
            TypeError: If the payload or its format list has the wrong shape.
        """

        return cls(
            culture=payload["Culture"],
            name=payload["Name"],
            gender=payload["Gender"],
            language=payload["Language"],
            supported_formats=tuple(
                str(audio_format).lower() for audio_format in payload["SupportedFormats"]
            ),
            description=payload["Description"],
            is_standard=bool(payload["IsStandard"]),
            is_premium=bool(payload["IsPremium"]),
            is_exclusive=bool(payload["IsExclusive"]),
            is_neural=bool(payload["IsNeural"]),
            can_use_speech_marks=bool(payload["CanUseSpeechMarks"]),
            can_whisper=bool(payload["CanWhisper"]),
            can_use_word_break=bool(payload["CanUseWordBreak"]),
            can_speak_softly=bool(payload["CanSpeakSoftly"]),
            can_use_volume=bool(payload["CanUseVolume"]),
            can_use_pitch=bool(payload["CanUsePitch"]),
        )


@dataclass(frozen=True, slots=True)
class Language:
    """A language detected in a text.

    Attributes:
        name: Provider language name, e.g. `French`.
        cultures: Culture codes in provider order.
    """

    name: str
    cultures: tuple[str, ...]


VoiceSelector = Union[Voice, str]


def resolve_voice_name(selector: VoiceSelector | None) -> str | None:
    """Return the provider voice name for a voice selector.

    A `Voice` resolves to its `name`, a string is used unchanged, and `None`
    stays `None` so nothing is sent for the field.
    """

    if selector is None:
        return None
    if isinstance(selector, Voice):
        return selector.name
    return selector
