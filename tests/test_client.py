from __future__ import annotations

import base64

import httpx
import pytest

from clob_wallet.clob.client import ClobClient, serialize_body
from clob_wallet.wallet.manager import WalletManager
from clob_wallet.wallet.models import ApiCredentials
from clob_wallet.wallet.signing import build_hmac_signature

from conftest import ADDRESS, PRIVATE_KEY, FakeProvider

SECRET = base64.urlsafe_b64encode(b"\xfb\xff\xfe" * 12).decode()
CREDS = ApiCredentials(api_key="key-1", api_secret=SECRET, api_passphrase="phrase")


@pytest.fixture
def client(store, http) -> ClobClient:
    manager = WalletManager(store, http, provider=FakeProvider(raw=0))
    manager.connect(PRIVATE_KEY)
    store.merge_credentials(CREDS)
    return ClobClient(manager)


def test_serialize_body_is_compact_and_passes_strings_through():
    assert serialize_body(None) is None
    assert serialize_body({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'
    assert serialize_body('{"a": 1}') == '{"a": 1}'


@pytest.mark.asyncio
async def test_post_signs_exactly_the_transmitted_body(client, router):
    router.routes[("POST", "/order")] = httpx.Response(200, json={"success": True})

    resp = await client.post("/order", {"price": "0.5", "size": 10})

    assert resp.ok and resp.data == {"success": True}
    req = router.calls[0]
    sent = req.content.decode()
    assert sent == '{"price":"0.5","size":10}'
    ts = req.headers["POLY_TIMESTAMP"]
    assert req.headers["POLY_SIGNATURE"] == build_hmac_signature(SECRET, ts, "POST", "/order", sent)
    assert req.headers["POLY_ADDRESS"] == ADDRESS
    assert req.headers["POLY_API_KEY"] == "key-1"
    assert req.headers["POLY_PASSPHRASE"] == "phrase"
    assert req.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_query_string_is_part_of_the_signed_path(client, router):
    router.routes[("GET", "/data/orders")] = httpx.Response(200, json=[])

    await client.get("/data/orders?market=abc")

    req = router.calls[0]
    assert req.url.query == b"market=abc"
    ts = req.headers["POLY_TIMESTAMP"]
    assert req.headers["POLY_SIGNATURE"] == build_hmac_signature(
        SECRET, ts, "GET", "/data/orders?market=abc"
    )


@pytest.mark.asyncio
async def test_headers_are_fresh_per_request(client):
    first = await client.build_headers("GET", "/a", timestamp=100)
    second = await client.build_headers("GET", "/b", timestamp=100)
    later = await client.build_headers("GET", "/a", timestamp=101)
    assert first["POLY_SIGNATURE"] != second["POLY_SIGNATURE"]
    assert first["POLY_SIGNATURE"] != later["POLY_SIGNATURE"]


@pytest.mark.asyncio
async def test_unauthenticated_request_is_not_sent(store, http, router):
    client = ClobClient(WalletManager(store, http, provider=FakeProvider(raw=0)))

    resp = await client.delete("/order", {"id": "1"})

    assert resp.ok is False
    assert resp.error == "not authenticated"
    assert router.calls == []


@pytest.mark.asyncio
async def test_http_error_status_is_a_failed_response(client, router):
    router.routes[("DELETE", "/order")] = httpx.Response(401, json={"error": "bad sig"})

    resp = await client.delete("/order", {"id": "1"})

    assert resp.ok is False
    assert resp.status == 401


@pytest.mark.asyncio
async def test_odd_length_secret_still_yields_a_response(store, http, router):
    manager = WalletManager(store, http, provider=FakeProvider(raw=0))
    manager.connect(PRIVATE_KEY)
    store.merge_credentials(
        ApiCredentials(api_key="key-1", api_secret="abcde", api_passphrase="phrase")
    )
    router.routes[("GET", "/data/orders")] = httpx.Response(200, json=[])

    resp = await ClobClient(manager).get("/data/orders")

    assert resp.ok and resp.data == []
    req = router.calls[0]
    assert req.headers["POLY_SIGNATURE"] == build_hmac_signature(
        "abcd", req.headers["POLY_TIMESTAMP"], "GET", "/data/orders"
    )
