"""Unit tests for CLI client runtime resolution helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from talkify.cli_rendering import CommandError
from talkify.cli_runtime import build_client, load_client_config, resolve_api_key_sources
from talkify.errors import KEY_MISSING, VALIDATION_ERROR, TalkifyError


class InMemoryCredentialStore:
    """In-memory credential store implementation for runtime-resolution tests."""

    def __init__(self, initial_api_key: str | None = None) -> None:
        """Initialize the store with an optional initial API key."""

        self._api_key = initial_api_key
        self.stored_values: list[str] = []

    def get_api_key(self) -> str | None:
        """Return currently stored API key value."""

        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        """Persist API key value and keep a history for assertions."""

        self._api_key = api_key
        self.stored_values.append(api_key)


class FailingCredentialStore:
    """Credential store that raises when persisting API key values."""

    def get_api_key(self) -> str | None:
        """Return no pre-existing secure API key."""

        return None

    def set_api_key(self, api_key: str) -> None:
        """Raise deterministic storage failure used for error-path assertions."""

        raise RuntimeError("no keyring backend")


def test_resolve_api_key_sources_collects_every_source() -> None:
    """Resolver should gather CLI, secure, config, and environment keys."""

    store = InMemoryCredentialStore(initial_api_key="secure-key")

    sources = resolve_api_key_sources(
        api_key=None,
        prompt_api_key=False,
        store_api_key=True,
        config_api_key="file-key",
        env={"TALKIFY_KEY": " env-key "},
        credential_store_factory=lambda: store,
    )

    assert sources.cli is None
    assert sources.secure == "secure-key"
    assert sources.config == "file-key"
    assert sources.env == "env-key"
    assert sources.resolved() == "secure-key"
    assert store.stored_values == []


def test_resolve_api_key_sources_prompts_and_stores_entered_key(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A prompted key should win and be stored when storage is enabled."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("talkify.cli_runtime.typer.prompt", lambda *args, **kwargs: " typed-key ")

    sources = resolve_api_key_sources(
        api_key=None,
        prompt_api_key=True,
        store_api_key=True,
        env={},
        credential_store_factory=lambda: store,
    )

    assert sources.resolved() == "typed-key"
    assert store.stored_values == ["typed-key"]


def test_resolve_api_key_sources_skips_storage_when_disabled() -> None:
    """CLI keys should not be persisted with `--no-store-api-key`."""

    store = InMemoryCredentialStore()

    sources = resolve_api_key_sources(
        api_key="cli-key",
        prompt_api_key=False,
        store_api_key=False,
        env={},
        credential_store_factory=lambda: store,
    )

    assert sources.resolved() == "cli-key"
    assert store.stored_values == []


def test_resolve_api_key_sources_maps_storage_failure_to_command_error() -> None:
    """Storage failures should surface as actionable command errors."""

    with pytest.raises(CommandError, match="Failed to store API key securely") as exc_info:
        resolve_api_key_sources(
            api_key="cli-key",
            prompt_api_key=False,
            store_api_key=True,
            env={},
            credential_store_factory=FailingCredentialStore,
        )

    assert exc_info.value.stage == "credentials"
    assert exc_info.value.hint is not None


def test_load_client_config_reports_missing_file(tmp_path: Path) -> None:
    """Missing config files should map to config-stage command errors."""

    with pytest.raises(CommandError, match="Config file not found") as exc_info:
        load_client_config(tmp_path / "absent.yml")

    assert exc_info.value.stage == "config"


def test_load_client_config_reports_invalid_file(tmp_path: Path) -> None:
    """Invalid config payloads should map to config-stage command errors."""

    config_path = tmp_path / "talkify.yml"
    config_path.write_text("volume: loud\n", encoding="utf-8")

    with pytest.raises(CommandError, match="Invalid config file"):
        load_client_config(config_path)


def test_build_client_uses_config_file_key_and_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Config file values should feed the client when no higher-precedence key exists."""

    monkeypatch.delenv("TALKIFY_KEY", raising=False)
    config_path = tmp_path / "talkify.yml"
    config_path.write_text("api_key: file-key\nformat: wav\n", encoding="utf-8")

    client = build_client(
        config_path,
        api_key=None,
        prompt_api_key=False,
        store_api_key=False,
        credential_store_factory=InMemoryCredentialStore,
    )

    assert client.defaults.format == "wav"
    assert client._session.headers["x-api-key"] == "file-key"
    client.close()


def test_build_client_without_any_key_raises_key_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """With no key in any source the client construction should fail."""

    monkeypatch.delenv("TALKIFY_KEY", raising=False)

    with pytest.raises(TalkifyError) as exc_info:
        build_client(
            None,
            api_key=None,
            prompt_api_key=False,
            store_api_key=False,
            credential_store_factory=InMemoryCredentialStore,
        )

    assert exc_info.value.kind == KEY_MISSING


def test_build_client_rejects_nan_range_value_from_yaml(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A YAML `.nan` range value should fail validation at client construction."""

    monkeypatch.delenv("TALKIFY_KEY", raising=False)
    config_path = tmp_path / "talkify.yml"
    config_path.write_text("api_key: file-key\nvolume: .nan\n", encoding="utf-8")

    with pytest.raises(TalkifyError, match="'volume'") as exc_info:
        build_client(
            config_path,
            api_key=None,
            prompt_api_key=False,
            store_api_key=False,
            credential_store_factory=InMemoryCredentialStore,
        )

    assert exc_info.value.kind == VALIDATION_ERROR
