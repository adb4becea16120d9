"""Process-wide provider settings, read once at start-up and passed explicitly."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal, Union

from pydantic import BaseModel, Field

ORS_KEY_NAME = "ORS_API_KEY"
TOLLGURU_KEY_NAME = "TOLLGURU_API_KEY"

_DEFAULT_ORS_BASE_URL = "https://api.openrouteservice.org"
_DEFAULT_TOLLGURU_BASE_URL = "https://dev.tollguru.com/v1"
_TIMEOUT_FLOOR_SECONDS = 1.0
_TIMEOUT_CAP_SECONDS = 30.0


class ApiCredential(BaseModel):
    kind: Literal["configured"] = "configured"
    name: str
    value: str = Field(repr=False)


class CredentialsAbsent(BaseModel):
    kind: Literal["absent"] = "absent"
    name: str


Credential = Union[ApiCredential, CredentialsAbsent]


class Settings(BaseModel):
    ors_api_key: Credential = Field(default_factory=lambda: CredentialsAbsent(name=ORS_KEY_NAME))
    tollguru_api_key: Credential = Field(
        default_factory=lambda: CredentialsAbsent(name=TOLLGURU_KEY_NAME)
    )
    ors_base_url: str = _DEFAULT_ORS_BASE_URL
    tollguru_base_url: str = _DEFAULT_TOLLGURU_BASE_URL
    country_filter: str = "BR"
    suggestion_size: int = Field(default=5, ge=1, le=5)
    http_timeout_seconds: float = 10.0

    def credentials(self) -> list[Credential]:
        return [self.ors_api_key, self.tollguru_api_key]


def _is_configured(value: str | None) -> bool:
    return bool(value and value.strip())


def _credential(env: Mapping[str, str], name: str) -> Credential:
    raw = env.get(name)
    if _is_configured(raw):
        return ApiCredential(name=name, value=str(raw).strip())
    return CredentialsAbsent(name=name)


def _timeout(env: Mapping[str, str]) -> float:
    raw = str(env.get("HTTP_TIMEOUT_SECONDS", "")).strip()
    if not raw:
        return 10.0
    try:
        value = float(raw)
    except ValueError:
        return 10.0
    return max(_TIMEOUT_FLOOR_SECONDS, min(_TIMEOUT_CAP_SECONDS, value))


def _suggestion_size(env: Mapping[str, str]) -> int:
    raw = str(env.get("SUGGESTION_SIZE", "")).strip()
    try:
        value = int(raw) if raw else 5
    except ValueError:
        return 5
    return max(1, min(5, value))


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    source = os.environ if env is None else env
    return Settings(
        ors_api_key=_credential(source, ORS_KEY_NAME),
        tollguru_api_key=_credential(source, TOLLGURU_KEY_NAME),
        ors_base_url=str(source.get("ORS_BASE_URL") or _DEFAULT_ORS_BASE_URL).rstrip("/"),
        tollguru_base_url=str(source.get("TOLLGURU_BASE_URL") or _DEFAULT_TOLLGURU_BASE_URL).rstrip("/"),
        country_filter=str(source.get("COUNTRY_FILTER") or "BR").strip().upper(),
        suggestion_size=_suggestion_size(source),
        http_timeout_seconds=_timeout(source),
    )


def describe_credentials(settings: Settings) -> dict[str, dict[str, str]]:
    """Configured/absent status per key, with a redacted preview."""
    from roadtrip.security.key_manager import KeyManager

    report: dict[str, dict[str, str]] = {}
    for cred in settings.credentials():
        if isinstance(cred, ApiCredential):
            report[cred.name] = {"status": "configured", "preview": KeyManager.redact(cred.value)}
        else:
            report[cred.name] = {"status": "absent", "preview": ""}
    return report


__all__ = [
    "ApiCredential",
    "Credential",
    "CredentialsAbsent",
    "Settings",
    "describe_credentials",
    "load_settings",
]
