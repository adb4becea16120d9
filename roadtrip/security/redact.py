"""Helpers for redacting credentials in logs and error strings."""

from __future__ import annotations

import re

_REDACTED = "***REDACTED***"

# ORS takes the key as a query parameter on geocoding calls.
_QUERY_VALUE_RE = re.compile(
    r"(?i)(?P<prefix>\b(?:api[_-]?key|key|token|secret)\s*=\s*)(?P<value>[^&\s\"']+)"
)
_JSON_KV_RE = re.compile(
    r"(?i)(?P<prefix>[\"']?(?:api[_-]?key|x-api-key|authorization)[\"']?\s*:\s*[\"'])(?P<value>[^\"']+)"
)
_HEADER_RE = re.compile(
    r"(?i)(?P<prefix>\b(?:authorization|x-api-key)\s*:\s*(?:bearer\s+)?)(?P<value>[^\s,;\"']+)"
)


def _replace_value(pattern: re.Pattern[str], text: str) -> str:
    def repl(match: re.Match[str]) -> str:
        return f"{match.group('prefix')}{_REDACTED}"

    return pattern.sub(repl, text)


def redact_sensitive(text: str) -> str:
    """Redact credential-looking values while keeping the surrounding text."""
    if not text:
        return text

    redacted = str(text)
    for pattern in (_QUERY_VALUE_RE, _JSON_KV_RE, _HEADER_RE):
        redacted = _replace_value(pattern, redacted)
    return redacted


__all__ = ["redact_sensitive"]
