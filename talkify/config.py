"""Configuration loaders for Talkify clients.

Responsibilities:
- Build `ClientConfig` values from environment variables or YAML files.
- Resolve the API key with deterministic source precedence for the CLI.

Key types:
- `ApiKeySources`: candidate API key values in precedence order.
- `ConfigLoader`: static construction helpers for `ClientConfig`.

Range checks for speech options are not repeated here; they run when a client
is constructed from the loaded config.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

from .options import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, ClientConfig, SpeechOptions
from .parsing import normalize_optional_string, parse_boolean_token, parse_optional_number


_STRING_OPTION_KEYS = ("format", "fallback_language", "voice")
_BOOLEAN_OPTION_KEYS = ("use_markup", "whisper", "soft")
_NUMBER_OPTION_KEYS = ("rate", "volume", "word_break_ms", "pitch")

_OPTION_ENV_KEYS = {
    "format": "TALKIFY_FORMAT",
    "fallback_language": "TALKIFY_FALLBACK_LANGUAGE",
    "voice": "TALKIFY_VOICE",
    "rate": "TALKIFY_RATE",
    "use_markup": "TALKIFY_USE_MARKUP",
    "whisper": "TALKIFY_WHISPER",
    "soft": "TALKIFY_SOFT",
    "volume": "TALKIFY_VOLUME",
    "word_break_ms": "TALKIFY_WORD_BREAK_MS",
    "pitch": "TALKIFY_PITCH",
}
API_KEY_ENV_KEY = "TALKIFY_KEY"
_BASE_URL_ENV_KEY = "TALKIFY_BASE_URL"
_TIMEOUT_ENV_KEY = "TALKIFY_TIMEOUT_SECONDS"


@dataclass(frozen=True, slots=True)
class ApiKeySources:
    """API key candidates used for deterministic precedence resolution.

    Attributes:
        cli: Key passed on the command line or entered at a prompt.
        secure: Key loaded from secure local credential storage.
        config: Key read from a config file.
        env: Key read from the `TALKIFY_KEY` environment variable.
    """

    cli: str | None = None
    secure: str | None = None
    config: str | None = None
    env: str | None = None

    def _first_present(self) -> tuple[str, str] | None:
        for tier, candidate in (
            ("cli", self.cli),
            ("keyring", self.secure),
            ("config", self.config),
            ("env", self.env),
        ):
            normalized = normalize_optional_string(candidate)
            if normalized is not None:
                return tier, normalized
        return None

    def resolved(self) -> str | None:
        """Return the first non-blank key in `cli` > `secure` > `config` > `env` order."""

        first = self._first_present()
        return first[1] if first is not None else None

    def source(self) -> str | None:
        """Name the tier `resolved` draws from: `cli`, `keyring`, `config`, or `env`."""

        first = self._first_present()
        return first[0] if first is not None else None


class ConfigLoader:
    """Factory methods for creating `ClientConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {"api_key", "base_url", "timeout_seconds", *_OPTION_ENV_KEYS}
    )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ClientConfig:
        """Create a config from `TALKIFY_*` environment variables.

        Blank variables count as unset. The API key may be absent; the client
        rejects it at construction time.
        """

        env_map: Mapping[str, str] = os.environ if env is None else env
        raw_options = {
            option_name: env_map[env_key]
            for option_name, env_key in _OPTION_ENV_KEYS.items()
            if env_key in env_map
        }
        defaults = ConfigLoader._build_speech_options(
            raw_options,
            describe=lambda key: f"Environment variable `{_OPTION_ENV_KEYS[key]}`",
        )
        return ClientConfig(
            api_key=normalize_optional_string(env_map.get(API_KEY_ENV_KEY)),
            defaults=defaults,
            base_url=normalize_optional_string(env_map.get(_BASE_URL_ENV_KEY))
            or DEFAULT_BASE_URL,
            timeout_seconds=ConfigLoader._timeout_seconds(
                env_map.get(_TIMEOUT_ENV_KEY),
                f"Environment variable `{_TIMEOUT_ENV_KEY}`",
            ),
        )

    @staticmethod
    def from_yaml(path: Path) -> ClientConfig:
        """Create a config from a YAML file with a top-level mapping."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")

        source_label = f"YAML `{path}`"
        unknown = sorted(str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        defaults = ConfigLoader._build_speech_options(
            {key: payload[key] for key in _OPTION_ENV_KEYS if key in payload},
            describe=lambda key: f"{source_label} field `{key}`",
        )
        return ClientConfig(
            api_key=normalize_optional_string(payload.get("api_key")),
            defaults=defaults,
            base_url=normalize_optional_string(payload.get("base_url")) or DEFAULT_BASE_URL,
            timeout_seconds=ConfigLoader._timeout_seconds(
                payload.get("timeout_seconds"),
                f"{source_label} field `timeout_seconds`",
            ),
        )

    @staticmethod
    def _build_speech_options(
        raw: Mapping[str, Any],
        describe: Callable[[str], str],
    ) -> SpeechOptions:
        """Parse raw option values into typed `SpeechOptions` fields."""

        values: dict[str, Any] = {}
        for key in _STRING_OPTION_KEYS:
            if key in raw:
                values[key] = normalize_optional_string(raw[key])
        if values.get("format") is not None:
            values["format"] = values["format"].lower()

        for key in _BOOLEAN_OPTION_KEYS:
            if key not in raw or normalize_optional_string(raw[key]) is None:
                continue
            parsed = parse_boolean_token(raw[key])
            if parsed is None:
                raise ValueError(
                    f"{describe(key)} must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            values[key] = parsed

        for key in _NUMBER_OPTION_KEYS:
            if key not in raw:
                continue
            try:
                values[key] = parse_optional_number(raw[key], key)
            except ValueError as exc:
                raise ValueError(f"{describe(key)} must be a number.") from exc

        return SpeechOptions(**values)

    @staticmethod
    def _timeout_seconds(raw_value: object, label: str) -> float | None:
        """Parse an optional positive timeout, defaulting when unset."""

        try:
            parsed = parse_optional_number(raw_value, "timeout_seconds")
        except ValueError as exc:
            raise ValueError(f"{label} must be a positive number.") from exc
        if parsed is None:
            return DEFAULT_TIMEOUT_SECONDS
        if not 0 < parsed < math.inf:
            raise ValueError(f"{label} must be a positive number.")
        return float(parsed)
