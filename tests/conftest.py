from __future__ import annotations

import httpx
import pytest

from clob_wallet.clob.http import ClobHttp
from clob_wallet.wallet.models import WalletRecord
from clob_wallet.wallet.signing import derive_address
from clob_wallet.wallet.store import WalletStore

PRIVATE_KEY = "0x" + "00" * 31 + "01"
ADDRESS = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
CLOB_HOST = "https://clob.test"


class RecordingRouter:
    """Routes ``(method, path)`` to canned responses and records every request."""

    def __init__(self, routes: dict | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        result = self.routes.get((request.method, request.url.path))
        if result is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(result, Exception):
            raise result
        return result

    def paths(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.calls]


class FakeProvider:
    """Stands in for Web3Provider; returns a raw balance or raises."""

    def __init__(self, raw: int | None = None, error: Exception | None = None) -> None:
        self.raw = raw
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def get_token_balance(self, address: str, chain_name: str) -> int:
        self.calls.append((address, chain_name))
        if self.error is not None:
            raise self.error
        return self.raw


@pytest.fixture
def store(tmp_path) -> WalletStore:
    return WalletStore(tmp_path / "wallet.json")


@pytest.fixture
def record() -> WalletRecord:
    return WalletRecord(
        address=derive_address(PRIVATE_KEY),
        private_key=PRIVATE_KEY,
        connected_at=1_700_000_000_000,
    )


@pytest.fixture
def router() -> RecordingRouter:
    return RecordingRouter()


@pytest.fixture
def http(router) -> ClobHttp:
    return ClobHttp(CLOB_HOST, transport=httpx.MockTransport(router))
