"""Keyring persistence for the Talkify API key.

The CLI reads the stored key as its second precedence tier (after a key
given on the command line). Stored values are never logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import NoKeyringError, PasswordDeleteError

from .parsing import normalize_optional_string


KEYRING_SERVICE = "talkify"
KEYRING_ACCOUNT = "api_key"


class CredentialStore(Protocol):
    """Operations the CLI needs from an API key store."""

    def is_available(self) -> bool: ...

    def get_api_key(self) -> str | None: ...

    def set_api_key(self, api_key: str) -> None: ...

    def clear_api_key(self) -> bool: ...


@dataclass(slots=True)
class KeyringCredentialStore:
    """API key store backed by the active `keyring` backend."""

    service_name: str = KEYRING_SERVICE
    account_name: str = KEYRING_ACCOUNT

    def _keyring_backend(self) -> KeyringBackend:
        return keyring.get_keyring()

    def is_available(self) -> bool:
        """Report whether a backend with a positive priority is configured.

        keyring falls back to its `fail` backend (priority 0) when nothing
        usable is installed.
        """

        return getattr(self._keyring_backend(), "priority", 0) > 0

    def get_api_key(self) -> str | None:
        try:
            stored = self._keyring_backend().get_password(self.service_name, self.account_name)
        except NoKeyringError:
            return None
        return normalize_optional_string(stored)

    def set_api_key(self, api_key: str) -> None:
        """Store `api_key` with surrounding whitespace removed.

        Raises:
            ValueError: If the key is blank.
            keyring.errors.KeyringError: If the backend refuses the write.
        """

        normalized = normalize_optional_string(api_key)
        if normalized is None:
            raise ValueError("API key must be a non-empty string.")
        self._keyring_backend().set_password(self.service_name, self.account_name, normalized)

    def clear_api_key(self) -> bool:
        """Delete the stored key; `False` means there was nothing to delete."""

        if self.get_api_key() is None:
            return False
        try:
            self._keyring_backend().delete_password(self.service_name, self.account_name)
        except PasswordDeleteError:
            return False
        return True


def create_credential_store() -> CredentialStore:
    return KeyringCredentialStore()
