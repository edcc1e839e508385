"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
voice listings, and language detection results.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import KEY_MISSING, REQUEST_ERROR, VALIDATION_ERROR, TalkifyError
from .models.datatypes import Language, Voice


_KIND_HINTS = {
    KEY_MISSING: (
        "Pass `--api-key`, set `TALKIFY_KEY`, or store one with "
        "`talkify credentials --set-api-key`."
    ),
    VALIDATION_ERROR: (
        "Volume and pitch accept -10..10, word break accepts 0..1000 ms, "
        "format accepts `mp3` or `wav`."
    ),
    REQUEST_ERROR: "Verify the API key and network connectivity, then rerun.",
}


class CommandError(RuntimeError):
    """Raised when a CLI command cannot assemble its inputs."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    hint: str | None = None
    if isinstance(exc, TalkifyError):
        status = f", HTTP {exc.status_code}" if exc.status_code is not None else ""
        typer.secho(
            f"{command_name} failed ({exc.kind}{status}): {exc.message}",
            fg=typer.colors.RED,
            err=True,
        )
        hint = _KIND_HINTS.get(exc.kind)
    elif isinstance(exc, CommandError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        hint = exc.hint
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(f"Hint: {hint}", fg=typer.colors.YELLOW, err=True)
    raise typer.Exit(code=1) from exc


def echo_voice_list(voices: list[Voice]) -> None:
    """Print one row per voice in provider order."""

    if not voices:
        typer.echo("No voices found.")
        return
    for voice in voices:
        formats = ",".join(voice.supported_formats) or "-"
        tier = "neural" if voice.is_neural else "standard"
        typer.echo(
            f"{voice.name}\t{voice.culture}\t{voice.gender}\t{voice.language}\t"
            f"{tier}\tformats={formats}"
        )


def echo_language(language: Language | None) -> None:
    """Print a detected language and its cultures."""

    if language is None:
        typer.echo("No language detected.")
        return
    typer.echo(f"Language: {language.name}")
    typer.echo(f"Cultures: {', '.join(language.cultures) or '-'}")
