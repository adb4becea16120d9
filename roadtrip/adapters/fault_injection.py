"""Optional provider fault injection for degraded-mode drills.

Disabled by default. Enable by setting:
  ENABLE_TOOL_FAULT_INJECTION=true
  TOOL_FAULT_INJECTION=geocode:timeout,toll:unavailable
  TOOL_FAULT_RATE=1.0

Tool names are the ones used by ``build_tools``: geocode, route, toll.
"""

from __future__ import annotations

import inspect
import os
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from roadtrip.shared.exceptions import ToolError

_TRUTHY = {"1", "true", "yes", "on"}
_FAULT_MESSAGES = {
    "timeout": "injected timeout",
    "rate_limit": "injected upstream rate limit 429",
    "unavailable": "injected upstream unavailable 503",
}


def fault_injection_enabled(env: Mapping[str, str] | None = None) -> bool:
    source = os.environ if env is None else env
    return str(source.get("ENABLE_TOOL_FAULT_INJECTION", "false")).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class FaultPlan:
    """Which fault each tool raises, and how often."""

    faults: dict[str, str] = field(default_factory=dict)
    rate: float = 1.0

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "FaultPlan":
        faults: dict[str, str] = {}
        for part in str(env.get("TOOL_FAULT_INJECTION", "")).split(","):
            tool, sep, fault = part.partition(":")
            tool, fault = tool.strip().lower(), fault.strip().lower()
            if sep and tool and fault in _FAULT_MESSAGES:
                faults[tool] = fault
        try:
            rate = float(str(env.get("TOOL_FAULT_RATE", "1.0")).strip())
        except ValueError:
            rate = 1.0
        return cls(faults=faults, rate=max(0.0, min(1.0, rate)))

    def draw(self, tool_name: str) -> str:
        fault = self.faults.get(tool_name.lower(), "")
        if not fault or random.random() > self.rate:
            return ""
        return fault


class FaultInjectedToolProxy:
    """Raises the planned fault from the wrapped tool's coroutine methods."""

    def __init__(self, tool_name: str, target: Any, env: Mapping[str, str] | None = None) -> None:
        self._tool_name = tool_name
        self._target = target
        self._plan = FaultPlan.from_env(os.environ if env is None else env)

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._target, name)
        if not inspect.iscoroutinefunction(attr):
            return attr

        async def _wrapped(*args: Any, **kwargs: Any) -> Any:
            fault = self._plan.draw(self._tool_name)
            if fault:
                raise ToolError(self._tool_name, f"{_FAULT_MESSAGES[fault]} op={name}")
            return await attr(*args, **kwargs)

        return _wrapped


def wrap_tool_with_fault_injection(
    tool_name: str,
    tool_impl: Any,
    env: Mapping[str, str] | None = None,
) -> Any:
    if not fault_injection_enabled(env):
        return tool_impl
    return FaultInjectedToolProxy(tool_name, tool_impl, env)


__all__ = ["FaultInjectedToolProxy", "FaultPlan", "fault_injection_enabled", "wrap_tool_with_fault_injection"]
