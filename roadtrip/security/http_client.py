"""Secure async HTTP client: single exit point for every provider call.

Responsibilities:
  1. scrub credentials out of exception messages
  2. one attempt per call, bounded by the configured timeout
  3. isolate the httpx dependency from the adapters
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from roadtrip.security.key_manager import KeyManager
from roadtrip.shared.exceptions import ToolError


class SecureHttpClient:
    """Wraps ``httpx.AsyncClient``; every failure surfaces as ``ToolError``."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        tool_name: str = "http",
        key_manager: Optional[KeyManager] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._tool_name = tool_name
        self._km = key_manager or KeyManager()
        self._transport = transport

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        return await self._request("GET", url, params=params, headers=headers)

    async def post_json(
        self,
        url: str,
        *,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        return await self._request("POST", url, json=json, headers=headers)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.request(method, url, **kwargs)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            safe_msg = self._km.scrub_text(str(e))
            raise ToolError(self._tool_name, f"HTTP {e.response.status_code}: {safe_msg}") from None
        except httpx.TimeoutException:
            raise ToolError(self._tool_name, f"request timed out ({self._timeout}s)") from None
        except httpx.HTTPError as e:
            safe_msg = self._km.scrub_text(str(e))
            raise ToolError(self._tool_name, f"network request failed: {safe_msg}") from None
        except ValueError as e:
            # resp.json() on a non-JSON body
            safe_msg = self._km.scrub_text(str(e))
            raise ToolError(self._tool_name, f"invalid JSON body: {safe_msg}") from None
