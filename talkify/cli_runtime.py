"""CLI client runtime resolution helpers.

This module isolates config loading, API-key prompting, source precedence,
and secure API-key persistence from the command wiring layer.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Callable, Mapping

import typer

from .cli_rendering import CommandError
from .client import Talkify
from .config import API_KEY_ENV_KEY, ApiKeySources, ConfigLoader
from .credentials import CredentialStore, create_credential_store
from .options import ClientConfig
from .parsing import normalize_optional_string


def load_client_config(
    config_file: Path | None,
    env: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Load client settings from a YAML file, or from the environment when absent."""

    if config_file is None:
        return ConfigLoader.from_env(env)

    try:
        return ConfigLoader.from_yaml(config_file)
    except FileNotFoundError as exc:
        raise CommandError(
            stage="config",
            detail=f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise CommandError(
            stage="config",
            detail=f"Invalid config file `{config_file}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def resolve_api_key_sources(
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    config_api_key: str | None = None,
    env: Mapping[str, str] | None = None,
    credential_store_factory: Callable[[], CredentialStore] = create_credential_store,
) -> ApiKeySources:
    """Collect API key candidates and persist a key entered in this run when asked."""

    env_map: Mapping[str, str] = os.environ if env is None else env
    cli_api_key = normalize_optional_string(api_key)
    if cli_api_key is None and prompt_api_key:
        cli_api_key = normalize_optional_string(
            typer.prompt(
                "Talkify API key (hidden; leave blank to skip)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )

    credential_store = credential_store_factory()
    if cli_api_key is not None and store_api_key:
        try:
            credential_store.set_api_key(cli_api_key)
            typer.echo("Stored API key in secure credential storage.")
        except Exception as exc:
            raise CommandError(
                stage="credentials",
                detail=f"Failed to store API key securely: {exc}",
                hint=(
                    "Install and configure a keyring backend, or rerun with "
                    "`--no-store-api-key` for one-off usage."
                ),
            ) from exc

    return ApiKeySources(
        cli=cli_api_key,
        secure=credential_store.get_api_key(),
        config=config_api_key,
        env=normalize_optional_string(env_map.get(API_KEY_ENV_KEY)),
    )


def build_client(
    config_file: Path | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    credential_store_factory: Callable[[], CredentialStore] | None = None,
) -> Talkify:
    """Build a client from config defaults and the highest-precedence API key."""

    config = load_client_config(config_file)
    sources = resolve_api_key_sources(
        api_key=api_key,
        prompt_api_key=prompt_api_key,
        store_api_key=store_api_key,
        config_api_key=config.api_key if config_file is not None else None,
        credential_store_factory=credential_store_factory or create_credential_store,
    )
    return Talkify.from_config(replace(config, api_key=sources.resolved()))
