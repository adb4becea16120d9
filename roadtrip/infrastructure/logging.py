"""Structured logging: one JSON object per line, credentials scrubbed."""

from __future__ import annotations

import json
import sys
import time
import uuid
from typing import Any, Optional, TextIO

from roadtrip.security.key_manager import KeyManager


class StructuredLogger:
    """Emits leveled pipeline events as JSON lines."""

    def __init__(
        self,
        trace_id: Optional[str] = None,
        output: Optional[TextIO] = None,
        key_manager: Optional[KeyManager] = None,
    ):
        self.trace_id = trace_id or str(uuid.uuid4())[:8]
        self._output = output or sys.stderr
        self._km = key_manager
        self._timers: dict[str, float] = {}

    def _scrub(self, text: str) -> str:
        if self._km is not None:
            return self._km.scrub_text(text)
        return text

    def _emit(self, level: str, data: dict[str, Any]) -> None:
        data["level"] = level
        data["trace_id"] = self.trace_id
        data["timestamp"] = time.time()
        try:
            line = json.dumps(data, ensure_ascii=False, default=str)
            line = self._scrub(line)
            self._output.write(line + "\n")
            self._output.flush()
        except (OSError, TypeError, ValueError) as exc:
            fallback = {
                "event": "logger_internal_error",
                "trace_id": self.trace_id,
                "timestamp": time.time(),
                "error": str(exc),
            }
            sys.stderr.write(json.dumps(fallback, ensure_ascii=False, default=str) + "\n")

    def stage_start(self, stage: str, **extra: Any) -> None:
        self._timers[stage] = time.time()
        self._emit("info", {"event": "stage_start", "stage": stage, **extra})

    def stage_end(self, stage: str, **extra: Any) -> None:
        start = self._timers.pop(stage, time.time())
        duration_ms = round((time.time() - start) * 1000, 1)
        self._emit("info", {"event": "stage_end", "stage": stage, "duration_ms": duration_ms, **extra})

    def event(self, name: str, **extra: Any) -> None:
        self._emit("info", {"event": name, **extra})

    def warning(self, name: str, message: str, **extra: Any) -> None:
        self._emit("warning", {"event": name, "message": self._scrub(message), **extra})

    def error(self, name: str, error: str, **extra: Any) -> None:
        self._emit("error", {"event": name, "error": self._scrub(error), **extra})


_logger: Optional[StructuredLogger] = None


def get_logger(trace_id: Optional[str] = None) -> StructuredLogger:
    global _logger
    if _logger is None or (trace_id and _logger.trace_id != trace_id):
        _logger = StructuredLogger(trace_id=trace_id)
    return _logger
