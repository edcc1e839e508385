"""Command-line interface for the Talkify client.

Responsibilities:
- Expose user-facing commands for speech synthesis, voice listing, and
  language detection.
- Report where the API key comes from and manage the keyring copy.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    CommandError,
    echo_language,
    echo_voice_list,
    exit_with_command_error,
)
from .cli_runtime import build_client, load_client_config, resolve_api_key_sources
from .credentials import create_credential_store
from .options import SpeechOptions
from .telemetry.logger import configure_logging

app = typer.Typer(
    name="talkify",
    no_args_is_help=True,
    help="Talkify text-to-speech CLI.",
)

ConfigFileOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with client defaults."),
]
ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        help="Talkify API key override. Prefer `--prompt-api-key` to avoid shell history.",
    ),
]
PromptApiKeyOption = Annotated[
    bool,
    typer.Option("--prompt-api-key", help="Prompt for API key with hidden input."),
]
StoreApiKeyOption = Annotated[
    bool,
    typer.Option(
        "--store-api-key/--no-store-api-key",
        help="Persist CLI-entered API key to secure credential storage.",
    ),
]

_API_KEY_SOURCE_LABELS = {
    "keyring": "keyring",
    "config": "config file",
    "env": "TALKIFY_KEY environment variable",
}


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Print request-level debug logs to stderr."),
    ] = False,
) -> None:
    """Talkify text-to-speech CLI."""

    configure_logging(verbose=verbose)


@app.command("speak")
def speak_command(
    text: Annotated[str, typer.Argument(help="Text (or SSML with `--markup`) to synthesize.")],
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output audio file. Defaults to `out.<format>`."),
    ] = None,
    audio_format: Annotated[
        str | None, typer.Option("--format", help="Audio format: `mp3` or `wav`.")
    ] = None,
    voice: Annotated[str | None, typer.Option("--voice", help="Voice name.")] = None,
    fallback_language: Annotated[
        str | None,
        typer.Option("--fallback-language", help="Language used when detection fails."),
    ] = None,
    rate: Annotated[int | None, typer.Option("--rate", help="Speaking rate.")] = None,
    volume: Annotated[
        int | None, typer.Option("--volume", help="Volume adjustment, -10..10.")
    ] = None,
    pitch: Annotated[int | None, typer.Option("--pitch", help="Pitch adjustment, -10..10.")] = None,
    word_break_ms: Annotated[
        int | None,
        typer.Option("--word-break-ms", help="Pause between words in ms, 0..1000."),
    ] = None,
    markup: Annotated[
        bool | None,
        typer.Option("--markup/--no-markup", help="Treat text as SSML markup."),
    ] = None,
    whisper: Annotated[
        bool | None, typer.Option("--whisper/--no-whisper", help="Whisper the text.")
    ] = None,
    soft: Annotated[bool | None, typer.Option("--soft/--no-soft", help="Speak softly.")] = None,
    config_file: ConfigFileOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """Synthesize speech and stream the audio into a file."""

    options = SpeechOptions(
        format=audio_format.lower() if audio_format is not None else None,
        fallback_language=fallback_language,
        voice=voice,
        rate=rate,
        use_markup=markup,
        whisper=whisper,
        soft=soft,
        volume=volume,
        word_break_ms=word_break_ms,
        pitch=pitch,
    )
    partial_output: Path | None = None
    try:
        with build_client(config_file, api_key, prompt_api_key, store_api_key) as client:
            resolved_format = options.format or client.defaults.format
            output_path = out if out is not None else Path(f"out.{resolved_format}")
            written = 0
            with client.speech(text, options) as stream:
                partial_output = output_path
                with output_path.open("wb") as handle:
                    for chunk in stream.iter_bytes():
                        handle.write(chunk)
                        written += len(chunk)
            partial_output = None
    except Exception as exc:
        if partial_output is not None:
            partial_output.unlink(missing_ok=True)
        exit_with_command_error("speak", exc)

    typer.echo(f"Audio written: {output_path} ({written} bytes)")


@app.command("voices")
def voices_command(
    language: Annotated[
        str | None,
        typer.Option("--language", help="Only list voices for this language, e.g. `English`."),
    ] = None,
    config_file: ConfigFileOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """List the voices available to the API key."""

    try:
        with build_client(config_file, api_key, prompt_api_key, store_api_key) as client:
            voices = client.available_voices(language)
    except Exception as exc:
        exit_with_command_error("voices", exc)

    echo_voice_list(voices)


@app.command("detect-language")
def detect_language_command(
    text: Annotated[str, typer.Argument(help="Text to analyze.")],
    config_file: ConfigFileOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """Detect the language of a text."""

    try:
        with build_client(config_file, api_key, prompt_api_key, store_api_key) as client:
            language = client.detect_language(text)
    except Exception as exc:
        exit_with_command_error("detect-language", exc)

    echo_language(language)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option("--set-api-key", help="Prompt for an API key and store it in the keyring."),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option("--clear-api-key", help="Remove the API key stored in the keyring."),
    ] = False,
    config_file: ConfigFileOption = None,
) -> None:
    """Show which source supplies the API key, or update the stored key."""

    credential_store = create_credential_store()
    try:
        if set_api_key and clear_api_key:
            raise CommandError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
            )
        if clear_api_key:
            removed = credential_store.clear_api_key()
            typer.echo("Removed the keyring API key." if removed else "No API key in the keyring.")
        config = load_client_config(config_file)
        sources = resolve_api_key_sources(
            api_key=None,
            prompt_api_key=set_api_key,
            store_api_key=True,
            config_api_key=config.api_key if config_file is not None else None,
            credential_store_factory=lambda: credential_store,
        )
        if set_api_key and sources.cli is None:
            raise CommandError(stage="credentials", detail="No API key entered.")
    except Exception as exc:
        exit_with_command_error("credentials", exc)

    # The key typed for --set-api-key is now in the keyring; report later runs.
    source = replace(sources, cli=None).source()
    availability = "available" if credential_store.is_available() else "unavailable"
    typer.echo(f"Keyring: {availability}")
    typer.echo(f"API key source: {_API_KEY_SOURCE_LABELS.get(source, 'none')}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
