"""Authenticated CLOB requests.

Each call signs exactly the bytes it sends with a fresh timestamp; the
resulting headers are never cached or reused for another request.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from clob_wallet.clob.http import ApiResponse, ClobHttp
from clob_wallet.wallet.manager import WalletManager
from clob_wallet.wallet.signing import sign_request

logger = logging.getLogger("clob_wallet.clob.client")


def serialize_body(body: Any) -> Optional[str]:
    """Serialize a request body once, compactly; strings pass through untouched."""
    if body is None:
        return None
    if isinstance(body, str):
        return body
    return json.dumps(body, separators=(",", ":"))


class ClobClient:
    """Issues L2-authenticated requests on behalf of the connected wallet."""

    def __init__(self, manager: WalletManager, http: ClobHttp | None = None) -> None:
        self.manager = manager
        self.http = http or manager.http

    async def build_headers(
        self,
        method: str,
        path: str,
        body: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> dict[str, str] | None:
        """Tier-2 headers for one request, or ``None`` if not authenticated."""
        ctx = await self.manager.auth_context()
        if ctx is None:
            return None
        record, creds = ctx
        ts = int(time.time()) if timestamp is None else timestamp
        sig = sign_request(
            creds.api_secret,
            ts,
            method,
            path,
            body,
            address=record.address,
            api_key=creds.api_key,
            passphrase=creds.api_passphrase,
        )
        return {**sig.headers(), "Content-Type": "application/json"}

    async def request(self, method: str, path: str, body: Any = None) -> ApiResponse:
        """Send an authenticated request.

        *path* includes any query string; it is signed and sent verbatim.
        """
        content = serialize_body(body)
        headers = await self.build_headers(method, path, content)
        if headers is None:
            logger.info(f"Skipping {method.upper()} {path}: wallet not authenticated")
            return ApiResponse.failure("not authenticated")
        return await self.http.send(method, path, headers=headers, content=content)

    async def get(self, path: str) -> ApiResponse:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any = None) -> ApiResponse:
        return await self.request("POST", path, body)

    async def delete(self, path: str, body: Any = None) -> ApiResponse:
        return await self.request("DELETE", path, body)
