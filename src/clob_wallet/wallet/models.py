"""Pydantic models for the locally persisted wallet and its API credentials."""

from __future__ import annotations

import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class ApiCredentials(BaseModel):
    """L2 credentials issued by the CLOB for one wallet.

    Only a complete set (all three fields non-empty) is ever handed out by
    the store or the credential manager; a partial set counts as absent.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str
    api_secret: str = Field(repr=False)
    api_passphrase: str = Field(repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key and self.api_secret and self.api_passphrase)


class WalletRecord(BaseModel):
    """Maps to the JSON document in ``wallet.json``.

    Field aliases are the on-disk (camelCase) names so files written by
    other clients of the same CLOB remain readable.
    """

    model_config = ConfigDict(populate_by_name=True)

    address: str
    private_key: str = Field(alias="privateKey", repr=False)
    connected_at: int = Field(default_factory=_now_ms, alias="connectedAt")
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    api_secret: Optional[str] = Field(default=None, alias="apiSecret", repr=False)
    api_passphrase: Optional[str] = Field(
        default=None, alias="apiPassphrase", repr=False
    )

    @property
    def credentials(self) -> ApiCredentials | None:
        """The embedded credentials, or ``None`` unless all three are set."""
        if not (self.api_key and self.api_secret and self.api_passphrase):
            return None
        return ApiCredentials(
            api_key=self.api_key,
            api_secret=self.api_secret,
            api_passphrase=self.api_passphrase,
        )

    def with_credentials(self, creds: ApiCredentials) -> WalletRecord:
        """Return a copy of this record with *creds* merged in."""
        return self.model_copy(
            update={
                "api_key": creds.api_key,
                "api_secret": creds.api_secret,
                "api_passphrase": creds.api_passphrase,
            }
        )

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
