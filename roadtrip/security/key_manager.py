"""Credential registry built from ``Settings``.

Adapters never read the environment themselves: they ask the manager for a
key, and everything that reaches a log line or an exception message goes
through ``scrub_text`` first.
"""

from __future__ import annotations

from roadtrip.config.settings import ApiCredential, Credential, Settings
from roadtrip.security.redact import redact_sensitive
from roadtrip.shared.exceptions import KeyMissingError


class KeyManager:
    def __init__(self, credentials: list[Credential] | None = None):
        self._keys: dict[str, str] = {}
        for cred in credentials or []:
            self.register(cred)

    @classmethod
    def from_settings(cls, settings: Settings) -> "KeyManager":
        return cls(settings.credentials())

    def register(self, credential: Credential) -> None:
        if isinstance(credential, ApiCredential):
            self._keys[credential.name] = credential.value
        else:
            self._keys.pop(credential.name, None)

    def get(self, name: str, *, required: bool = False) -> str | None:
        value = self._keys.get(name)
        if value is None and required:
            raise KeyMissingError(name)
        return value

    def has_key(self, name: str) -> bool:
        return name in self._keys

    # ── redaction ─────────────────────────────────────

    @staticmethod
    def redact(value: str) -> str:
        """Keep only the first and last 4 characters."""
        if not value or len(value) <= 8:
            return "****"
        return value[:4] + "****" + value[-4:]

    def scrub_text(self, text: str) -> str:
        result = str(text) if text is not None else ""
        for name, value in self._keys.items():
            if value and value in result:
                result = result.replace(value, f"[{name}:***REDACTED***]")
        return redact_sensitive(result)


__all__ = ["KeyManager"]
