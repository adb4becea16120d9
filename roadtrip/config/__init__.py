"""Runtime configuration helpers."""

from roadtrip.config.settings import (
    ApiCredential,
    Credential,
    CredentialsAbsent,
    Settings,
    describe_credentials,
    load_settings,
)

__all__ = [
    "ApiCredential",
    "Credential",
    "CredentialsAbsent",
    "Settings",
    "describe_credentials",
    "load_settings",
]
