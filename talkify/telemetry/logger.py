"""Request-level logging for `Talkify` operations.

Each request produces a single `[request] ...` line through `loguru`, with
context fields as `key=value` pairs. The `talkify` namespace is disabled on
import, and applications opt in through `configure_logging`.
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from loguru import logger


_PACKAGE_NAME = "talkify"
# Voice names and language filters may hold spaces; keep each field one token.
_UNSAFE_FIELD_CHARACTERS = re.compile(r"[^\w\-.:/]")


def _render_fields(fields: dict[str, object]) -> str:
    """Render context as ` key=value` pairs sorted by key; blank values read `none`."""

    rendered = ""
    for key in sorted(fields):
        text = str(fields[key]).strip()
        rendered += f" {key}={_UNSAFE_FIELD_CHARACTERS.sub('_', text) if text else 'none'}"
    return rendered


def configure_logging(verbose: bool = False, sink: TextIO | None = None) -> None:
    """Enable Talkify logs and route them to `sink` (stderr by default)."""

    logger.enable(_PACKAGE_NAME)
    logger.remove()
    logger.add(
        sink or sys.stderr,
        format="{message}",
        level="DEBUG" if verbose else "WARNING",
        colorize=False,
    )


class RequestLogger:
    """Emit deterministic request events for client operations.

    Context values must never carry credentials.
    """

    def _emit(self, level: str, event: str, operation: str, **context: object) -> None:
        """Emit one structured request log line."""

        line = (
            f"[request] level={level} operation={operation} event={event}"
            f"{_render_fields(context)}"
        )
        logger.log(level, line)

    def log_request_start(self, operation: str, **context: object) -> None:
        """Emit a request-start event."""

        self._emit("DEBUG", "start", operation, **context)

    def log_request_complete(self, operation: str, **context: object) -> None:
        """Emit a request-complete event."""

        self._emit("DEBUG", "complete", operation, **context)
