"""Async HTTP access to the CLOB REST API.

Every call returns an :class:`ApiResponse`; transport failures, non-2xx
statuses and undecodable bodies come back as ``ok=False`` instead of
raising, so callers branch on a value rather than catch exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger("clob_wallet.clob.http")

DEFAULT_CLOB_HOST = "https://clob.polymarket.com"


@dataclass(frozen=True)
class ApiResponse:
    """Outcome of one HTTP call."""

    ok: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str, status: Optional[int] = None) -> ApiResponse:
        return cls(ok=False, status=status, error=error)


class ClobHttp:
    """Thin wrapper around :class:`httpx.AsyncClient`.

    Parameters
    ----------
    base_url:
        CLOB host, e.g. ``https://clob.polymarket.com``.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional transport override (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_CLOB_HOST,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def send(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        content: str | None = None,
    ) -> ApiResponse:
        """Send one request and decode a JSON response body.

        *content* is transmitted byte-for-byte, so a body that was signed
        is exactly the body that is sent.
        """
        method = method.upper()
        try:
            async with self._client() as client:
                resp = await client.request(
                    method,
                    path,
                    headers=headers,
                    params=params,
                    content=content.encode("utf-8") if content is not None else None,
                )
        except httpx.HTTPError as exc:
            # headers carry signatures and passphrases; log the failure kind only
            logger.warning(f"{method} {path} failed: {type(exc).__name__}")
            return ApiResponse.failure(f"request failed: {type(exc).__name__}")

        if not resp.is_success:
            logger.info(f"{method} {path} returned HTTP {resp.status_code}")
            return ApiResponse.failure(f"HTTP {resp.status_code}", status=resp.status_code)

        if not resp.content:
            return ApiResponse(ok=True, status=resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            return ApiResponse.failure("invalid JSON in response", status=resp.status_code)
        return ApiResponse(ok=True, status=resp.status_code, data=data)

    async def get_json(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> ApiResponse:
        return await self.send("GET", path, headers=headers, params=params)

    async def post_json(
        self,
        path: str,
        content: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        return await self.send("POST", path, headers=headers, content=content)
