from __future__ import annotations

import json
import os
import stat
import sys

import pytest

from clob_wallet.wallet.models import ApiCredentials, WalletRecord
from clob_wallet.wallet.store import WalletStore

from conftest import ADDRESS, PRIVATE_KEY

CREDS = ApiCredentials(api_key="k", api_secret="c2VjcmV0", api_passphrase="p")


def test_load_missing_file_returns_none(store):
    assert store.load() is None


def test_save_then_load_round_trips_every_field(store, record):
    full = record.with_credentials(CREDS)
    store.save(full)
    assert store.load() == full


def test_saved_file_uses_wire_field_names(store, record):
    store.save(record)
    data = json.loads(store.path.read_text())
    assert data == {
        "address": ADDRESS,
        "privateKey": PRIVATE_KEY,
        "connectedAt": 1_700_000_000_000,
    }


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_save_restricts_permissions_to_owner(store, record):
    store.path.write_text("{}")
    os.chmod(store.path, 0o644)
    store.save(record)
    assert stat.S_IMODE(os.stat(store.path).st_mode) == 0o600


def test_save_creates_parent_directory(tmp_path, record):
    store = WalletStore(tmp_path / "nested" / "dir" / "wallet.json")
    store.save(record)
    assert store.load() == record


def test_clear_then_load_is_disconnected(store, record):
    store.save(record.with_credentials(CREDS))
    store.clear()
    assert store.load() is None
    assert json.loads(store.path.read_text()) == {}


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2]",
        json.dumps({"address": ADDRESS}),
        json.dumps({"privateKey": PRIVATE_KEY}),
        json.dumps({"address": "", "privateKey": PRIVATE_KEY}),
        json.dumps({"address": ADDRESS, "privateKey": PRIVATE_KEY, "connectedAt": "soon"}),
    ],
)
def test_load_degrades_to_none_for_bad_content(store, content):
    store.path.write_text(content)
    assert store.load() is None


def test_load_accepts_record_without_connected_at(store):
    store.path.write_text(json.dumps({"address": ADDRESS, "privateKey": PRIVATE_KEY}))
    loaded = store.load()
    assert loaded is not None
    assert loaded.address == ADDRESS


def test_merge_credentials_is_noop_without_wallet(store):
    assert store.merge_credentials(CREDS) is False
    assert not store.path.exists()


def test_merge_credentials_keeps_identity(store, record):
    store.save(record)
    assert store.merge_credentials(CREDS) is True
    loaded = store.load()
    assert loaded.address == record.address
    assert loaded.private_key == record.private_key
    assert loaded.connected_at == record.connected_at
    assert loaded.credentials == CREDS


def test_partial_credentials_count_as_absent(store, record):
    store.save(record.model_copy(update={"api_key": "k", "api_secret": "s", "api_passphrase": ""}))
    assert store.stored_credentials() is None


def test_record_repr_hides_secrets(record):
    full = record.with_credentials(CREDS)
    text = repr(full)
    assert PRIVATE_KEY not in text
    assert CREDS.api_secret not in text
    assert ADDRESS in text


def test_record_accepts_python_field_names():
    rec = WalletRecord(address=ADDRESS, private_key=PRIVATE_KEY, connected_at=1)
    assert rec.to_json_dict()["privateKey"] == PRIVATE_KEY
