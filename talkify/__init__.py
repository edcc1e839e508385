"""Top-level package for the Talkify text-to-speech API client.

The main entry point is `Talkify`, which synthesizes speech, lists available
voices, and detects the language of a text. Library logs are disabled until
an application enables them, see `talkify.telemetry.configure_logging`.
"""

from loguru import logger

from .client import SpeechStream, Talkify
from .errors import KEY_MISSING, REQUEST_ERROR, VALIDATION_ERROR, TalkifyError
from .models.datatypes import Language, Voice
from .options import ClientConfig, SpeechOptions

logger.disable(__name__)

__all__ = [
    "ClientConfig",
    "KEY_MISSING",
    "Language",
    "REQUEST_ERROR",
    "SpeechOptions",
    "SpeechStream",
    "Talkify",
    "TalkifyError",
    "VALIDATION_ERROR",
    "Voice",
    "__version__",
]

__version__ = "1.1.0"
