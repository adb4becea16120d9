"""Cross-cutting infrastructure."""

from roadtrip.infrastructure.logging import StructuredLogger, get_logger

__all__ = ["StructuredLogger", "get_logger"]
