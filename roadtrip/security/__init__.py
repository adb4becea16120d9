"""Credential handling and the outbound HTTP client."""
