"""High-level wallet manager used by the CLI and the authenticated client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from clob_wallet.clob.http import ClobHttp
from clob_wallet.wallet.balance import BalanceOracle
from clob_wallet.wallet.chains import get_chain
from clob_wallet.wallet.credentials import CredentialManager
from clob_wallet.wallet.models import ApiCredentials, WalletRecord
from clob_wallet.wallet.provider import Web3Provider
from clob_wallet.wallet.signing import derive_address, normalize_private_key
from clob_wallet.wallet.store import WalletStore

logger = logging.getLogger("clob_wallet.wallet.manager")


def truncate_address(address: str) -> str:
    """Shorten an address for display: ``0x1234...abcd``."""
    if len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


@dataclass
class WalletStatus:
    """Snapshot of the connected wallet for display."""

    address: Optional[str]
    connected: bool
    balance: Decimal
    has_credentials: bool
    api_key: Optional[str] = None


class WalletManager:
    """Orchestrates store, signing, credentials and balance lookups."""

    def __init__(
        self,
        store: WalletStore,
        http: ClobHttp,
        provider: Web3Provider | None = None,
        chain_name: str = "polygon",
    ) -> None:
        self.store = store
        self.http = http
        self.chain = get_chain(chain_name)
        self.provider = provider or Web3Provider()
        self.credentials = CredentialManager(store, http, chain_id=self.chain.chain_id)
        self.oracle = BalanceOracle(self.provider, http, chain_name=chain_name)

    # ------------------------------------------------------------------
    # Wallet lifecycle
    # ------------------------------------------------------------------

    def connect(self, private_key: str) -> WalletRecord:
        """Store a new wallet for *private_key*, replacing any previous one.

        Raises ``ValueError`` if the key is malformed.
        """
        key = normalize_private_key(private_key)
        record = WalletRecord(address=derive_address(key), private_key=key)
        self.store.save(record)
        logger.info(f"Wallet {record.address} connected")
        return record

    def disconnect(self) -> None:
        """Forget the wallet and its credentials."""
        self.store.clear()
        logger.info("Wallet disconnected")

    @property
    def record(self) -> WalletRecord | None:
        return self.store.load()

    @property
    def address(self) -> str | None:
        """The wallet address, or ``None`` if no wallet is connected."""
        record = self.record
        return record.address if record else None

    def is_connected(self) -> bool:
        return self.record is not None

    def label(self) -> str:
        addr = self.address
        if addr is None:
            return "No Wallet"
        return truncate_address(addr)

    # ------------------------------------------------------------------
    # Network-backed state
    # ------------------------------------------------------------------

    async def get_balance(self) -> Decimal:
        """USDC balance of the connected wallet; ``0`` when disconnected."""
        addr = self.address
        if addr is None:
            return Decimal(0)
        return await self.oracle.get_balance(addr)

    async def ensure_credentials(self) -> ApiCredentials | None:
        record = self.record
        if record is None:
            return None
        return await self.credentials.ensure_credentials(record.private_key)

    async def auth_context(self) -> tuple[WalletRecord, ApiCredentials] | None:
        """The wallet plus usable credentials, or ``None`` if it cannot authenticate."""
        record = self.record
        if record is None:
            return None
        creds = record.credentials or await self.credentials.ensure_credentials(
            record.private_key
        )
        if creds is None:
            return None
        return record, creds

    async def refresh(self) -> WalletStatus:
        """Load balance and credentials for the connected wallet."""
        record = self.record
        if record is None:
            return WalletStatus(
                address=None, connected=False, balance=Decimal(0), has_credentials=False
            )
        balance = await self.oracle.get_balance(record.address)
        creds = await self.credentials.ensure_credentials(record.private_key)
        return WalletStatus(
            address=record.address,
            connected=True,
            balance=balance,
            has_credentials=creds is not None,
            api_key=creds.api_key if creds else None,
        )
