"""Shared cross-layer types and exceptions."""

from roadtrip.shared.exceptions import KeyMissingError, ToolError

__all__ = ["ToolError", "KeyMissingError"]
