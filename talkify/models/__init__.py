"""Shared typed data models for Talkify.

This package contains the immutable records produced by client operations and
the voice selector accepted by speech synthesis.
"""

from .datatypes import Language, Voice, VoiceSelector, resolve_voice_name

__all__ = [
    "Language",
    "Voice",
    "VoiceSelector",
    "resolve_voice_name",
]
