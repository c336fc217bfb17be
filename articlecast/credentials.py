"""Secure credential storage for provider API keys.

Responsibilities:
- Persist one API key per text-generation provider in the OS keyring.
- Provide deterministic read/write/delete operations per provider.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `CredentialStore`: interface for provider credential persistence.
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError, PasswordDeleteError

from .config import api_key_runtime_key
from .llm.providers import PROVIDER_SPECS


_DEFAULT_SERVICE_NAME = "articlecast"


class CredentialStore:
    """Interface for secure provider credential operations."""

    def is_available(self) -> bool:
        """Return whether secure credential operations are available."""

        raise NotImplementedError

    def get_api_key(self, provider_id: str) -> str | None:
        """Load the stored API key for a provider, when available."""

        raise NotImplementedError

    def set_api_key(self, provider_id: str, api_key: str) -> None:
        """Persist an API key for a provider."""

        raise NotImplementedError

    def clear_api_key(self, provider_id: str) -> bool:
        """Delete a stored API key and return whether one existed."""

        raise NotImplementedError

    def load_all(self) -> dict[str, str]:
        """Return stored keys as runtime-source entries (`<provider>_api_key`)."""

        stored: dict[str, str] = {}
        for provider_id in PROVIDER_SPECS:
            api_key = self.get_api_key(provider_id)
            if api_key is not None:
                stored[api_key_runtime_key(provider_id)] = api_key
        return stored


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Secure credential store backed by the `keyring` package."""

    service_name: str = _DEFAULT_SERVICE_NAME

    def is_available(self) -> bool:
        """Return `False` when keyring resolved to its no-op failure backend."""

        return not isinstance(keyring.get_keyring(), FailKeyring)

    def get_api_key(self, provider_id: str) -> str | None:
        """Get a normalized API key, returning `None` when missing or unreadable."""

        if not self.is_available():
            return None
        try:
            value = keyring.get_password(self.service_name, api_key_runtime_key(provider_id))
        except KeyringError:
            return None
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    def set_api_key(self, provider_id: str, api_key: str) -> None:
        """Persist a normalized API key or raise when secure storage is unavailable."""

        _require_known_provider(provider_id)
        if not self.is_available():
            raise RuntimeError(
                "Secure credential storage is unavailable: no usable keyring backend "
                "was found on this system."
            )
        normalized = api_key.strip()
        if not normalized:
            raise ValueError("API key must be a non-empty string.")
        keyring.set_password(self.service_name, api_key_runtime_key(provider_id), normalized)

    def clear_api_key(self, provider_id: str) -> bool:
        """Remove a stored API key and report whether one was present."""

        _require_known_provider(provider_id)
        if self.get_api_key(provider_id) is None:
            return False
        try:
            keyring.delete_password(self.service_name, api_key_runtime_key(provider_id))
        except PasswordDeleteError:
            return False
        return True


def _require_known_provider(provider_id: str) -> None:
    if provider_id not in PROVIDER_SPECS:
        supported = ", ".join(sorted(PROVIDER_SPECS))
        raise ValueError(f"Unsupported provider `{provider_id}`. Supported providers: {supported}.")


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
