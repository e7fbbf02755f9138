"""Signing primitives for the two CLOB authentication tiers.

Tier 1 (L1) proves control of the wallet with an EIP-712 ``ClobAuth``
signature and is only used to derive or create API credentials.  Tier 2
(L2) signs every authenticated request with an HMAC-SHA256 keyed by the
issued API secret.

Everything here is a pure function of its arguments, apart from the
default timestamp which is taken from the wall clock when not supplied.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import time
from dataclasses import dataclass, field
from typing import Optional

from eth_account import Account

CLOB_AUTH_DOMAIN = "ClobAuthDomain"
CLOB_AUTH_VERSION = "1"
CLOB_AUTH_MESSAGE = "This message attests that I control the given wallet"
DEFAULT_CHAIN_ID = 137

_HEX_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")
_NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/=]")


@dataclass(frozen=True)
class OwnershipProof:
    """A tier-1 proof; every field is already in its wire (string) form."""

    address: str
    signature: str
    timestamp: str
    nonce: str

    def headers(self) -> dict[str, str]:
        return {
            "POLY_ADDRESS": self.address,
            "POLY_SIGNATURE": self.signature,
            "POLY_TIMESTAMP": self.timestamp,
            "POLY_NONCE": self.nonce,
        }


@dataclass(frozen=True)
class RequestSignature:
    """A tier-2 signature bound to one method, path and body."""

    address: str
    signature: str
    timestamp: str
    api_key: str
    passphrase: str = field(repr=False)

    def headers(self) -> dict[str, str]:
        return {
            "POLY_ADDRESS": self.address,
            "POLY_SIGNATURE": self.signature,
            "POLY_TIMESTAMP": self.timestamp,
            "POLY_API_KEY": self.api_key,
            "POLY_PASSPHRASE": self.passphrase,
        }


# ---------------------------------------------------------------------------
# Keys and addresses
# ---------------------------------------------------------------------------


def normalize_private_key(private_key: str) -> str:
    """Return *private_key* as ``0x``-prefixed lowercase hex.

    Raises ``ValueError`` unless the input is exactly 32 bytes of hex, with
    or without the ``0x`` prefix.  The offending value is never echoed.
    """
    raw = private_key.strip()
    if raw[:2].lower() == "0x":
        raw = raw[2:]
    if not _HEX_KEY_RE.match(raw):
        raise ValueError("Private key must be 32 bytes of hex (64 hex characters)")
    return "0x" + raw.lower()


def derive_address(private_key: str) -> str:
    """Derive the checksummed address controlled by *private_key*."""
    return Account.from_key(normalize_private_key(private_key)).address


# ---------------------------------------------------------------------------
# Tier 1: wallet ownership proof (EIP-712)
# ---------------------------------------------------------------------------


def build_clob_auth_typed_data(
    address: str,
    timestamp: str,
    nonce: int,
    chain_id: int = DEFAULT_CHAIN_ID,
) -> dict:
    """Build the full EIP-712 payload for a ``ClobAuth`` message."""
    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
            ],
            "ClobAuth": [
                {"name": "address", "type": "address"},
                {"name": "timestamp", "type": "string"},
                {"name": "nonce", "type": "uint256"},
                {"name": "message", "type": "string"},
            ],
        },
        "primaryType": "ClobAuth",
        "domain": {
            "name": CLOB_AUTH_DOMAIN,
            "version": CLOB_AUTH_VERSION,
            "chainId": chain_id,
        },
        "message": {
            "address": address,
            "timestamp": timestamp,
            "nonce": nonce,
            "message": CLOB_AUTH_MESSAGE,
        },
    }


def sign_ownership_proof(
    private_key: str,
    nonce: int = 0,
    timestamp: Optional[int] = None,
    chain_id: int = DEFAULT_CHAIN_ID,
) -> OwnershipProof:
    """Sign a ``ClobAuth`` attestation for the wallet behind *private_key*.

    Parameters
    ----------
    private_key:
        Hex private key of the wallet.
    nonce:
        Credential nonce.  The server keys derived credentials by nonce, so
        callers rotating keys pass a new value; no state is kept here.
    timestamp:
        Unix time in seconds.  Defaults to now.
    chain_id:
        Chain id placed in the EIP-712 domain.
    """
    key = normalize_private_key(private_key)
    account = Account.from_key(key)
    ts = str(int(time.time()) if timestamp is None else timestamp)

    typed_data = build_clob_auth_typed_data(account.address, ts, nonce, chain_id)
    signed = Account.sign_typed_data(key, full_message=typed_data)

    return OwnershipProof(
        address=account.address,
        signature="0x" + bytes(signed.signature).hex(),
        timestamp=ts,
        nonce=str(nonce),
    )


# ---------------------------------------------------------------------------
# Tier 2: per-request HMAC
# ---------------------------------------------------------------------------


def normalize_secret(secret: str) -> bytes:
    """Decode an API secret issued in either base64 alphabet.

    URL-safe characters are mapped back to the standard alphabet and
    anything outside it is dropped before decoding.  Padding is rebuilt
    from the data length, and a dangling final character is ignored.
    """
    standard = secret.replace("-", "+").replace("_", "/")
    standard = _NON_BASE64_RE.sub("", standard).replace("=", "")
    if len(standard) % 4 == 1:
        # a lone trailing character carries no whole byte
        standard = standard[:-1]
    standard += "=" * (-len(standard) % 4)
    return base64.b64decode(standard)


def build_request_message(
    timestamp: int | str,
    method: str,
    path: str,
    body: Optional[str] = None,
) -> str:
    """Concatenate timestamp, upper-cased method, path (with query) and body."""
    return f"{timestamp}{method.upper()}{path}{body or ''}"


def build_hmac_signature(
    secret: str,
    timestamp: int | str,
    method: str,
    path: str,
    body: Optional[str] = None,
) -> str:
    """URL-safe base64 HMAC-SHA256 of the request message."""
    message = build_request_message(timestamp, method, path, body)
    digest = hmac.new(
        normalize_secret(secret), message.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")


def sign_request(
    secret: str,
    timestamp: int | str,
    method: str,
    path: str,
    body: Optional[str] = None,
    *,
    address: str,
    api_key: str,
    passphrase: str,
) -> RequestSignature:
    """Produce the tier-2 signature for one request.

    *body* must be the exact string that goes on the wire; serializing the
    payload again after signing invalidates the signature.
    """
    return RequestSignature(
        address=address,
        signature=build_hmac_signature(secret, timestamp, method, path, body),
        timestamp=str(timestamp),
        api_key=api_key,
        passphrase=passphrase,
    )
