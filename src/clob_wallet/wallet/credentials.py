"""API credential lifecycle: reuse cached, else derive, else create."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from clob_wallet.clob.http import ApiResponse, ClobHttp
from clob_wallet.wallet.models import ApiCredentials
from clob_wallet.wallet.signing import DEFAULT_CHAIN_ID, sign_ownership_proof
from clob_wallet.wallet.store import WalletStore

logger = logging.getLogger("clob_wallet.wallet.credentials")

DERIVE_API_KEY_PATH = "/auth/derive-api-key"
CREATE_API_KEY_PATH = "/auth/api-key"

# Issuers have returned the key identifier under both names; the first
# alias present as a string wins, even when empty.
_API_KEY_ALIASES = ("apiKey", "key")


def parse_api_credentials(payload: Any) -> ApiCredentials | None:
    """Parse a derive/create response body.

    Accepts ``{apiKey|key, secret, passphrase}``.  Returns ``None`` unless
    every field is a non-empty string; a partial payload is never trusted.
    """
    if not isinstance(payload, dict):
        return None

    api_key = ""
    for alias in _API_KEY_ALIASES:
        value = payload.get(alias)
        if isinstance(value, str):
            api_key = value
            break
    secret = payload.get("secret")
    passphrase = payload.get("passphrase")

    if not api_key:
        return None
    if not isinstance(secret, str) or not secret:
        return None
    if not isinstance(passphrase, str) or not passphrase:
        return None
    return ApiCredentials(api_key=api_key, api_secret=secret, api_passphrase=passphrase)


class CredentialManager:
    """Obtains L2 credentials for the stored wallet.

    Each branch (cache, derive, create) runs at most once per call to
    :meth:`ensure_credentials`; there is no retry or backoff.
    """

    def __init__(
        self,
        store: WalletStore,
        http: ClobHttp,
        chain_id: int = DEFAULT_CHAIN_ID,
    ) -> None:
        self.store = store
        self.http = http
        self.chain_id = chain_id

    async def ensure_credentials(
        self,
        private_key: str,
        timestamp: Optional[int] = None,
    ) -> ApiCredentials | None:
        """Return usable credentials, or ``None`` if the wallet cannot authenticate."""
        cached = self.store.stored_credentials()
        if cached is not None:
            return cached

        proof = sign_ownership_proof(
            private_key, nonce=0, timestamp=timestamp, chain_id=self.chain_id
        )
        headers = {**proof.headers(), "Content-Type": "application/json"}

        creds = self._accept(
            await self.http.get_json(DERIVE_API_KEY_PATH, headers=headers), "derive"
        )
        if creds is None:
            creds = self._accept(
                await self.http.post_json(
                    CREATE_API_KEY_PATH, json.dumps({}), headers=headers
                ),
                "create",
            )
        if creds is None:
            logger.warning(f"Could not obtain API credentials for {proof.address}")
            return None

        self.store.merge_credentials(creds)
        return creds

    @staticmethod
    def _accept(response: ApiResponse, step: str) -> ApiCredentials | None:
        if not response.ok:
            logger.info(f"API key {step} failed: {response.error}")
            return None
        creds = parse_api_credentials(response.data)
        if creds is None:
            logger.info(f"API key {step} returned an incomplete payload")
        return creds
