"""Best-effort USDC balance: on-chain first, then the CLOB's indexed balance.

The two sources are not reconciled and may disagree.  The result is for
display only and must not drive trading decisions.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from clob_wallet.clob.http import ClobHttp
from clob_wallet.wallet.chains import get_chain
from clob_wallet.wallet.provider import Web3Provider

logger = logging.getLogger("clob_wallet.wallet.balance")

BALANCE_PATH = "/balance"


def scale_token_amount(raw: int, decimals: int) -> Decimal:
    """Convert base units to a human-readable amount (``1500000``, 6 -> ``1.5``)."""
    return Decimal(int(raw)) / (Decimal(10) ** decimals)


def parse_balance_field(value: Any) -> Decimal | None:
    """Parse the ``balance`` field of the fallback endpoint (string or number)."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


class BalanceOracle:
    """Looks up the collateral balance of an address."""

    def __init__(
        self,
        provider: Web3Provider,
        http: ClobHttp,
        chain_name: str = "polygon",
    ) -> None:
        self.provider = provider
        self.http = http
        self.chain_name = chain_name

    async def get_balance(self, address: str) -> Decimal:
        """Return the USDC balance of *address*, or ``0`` if neither source answers."""
        chain = get_chain(self.chain_name)
        try:
            raw = await asyncio.to_thread(
                self.provider.get_token_balance, address, self.chain_name
            )
            return scale_token_amount(raw, chain.usdc_decimals)
        except Exception as exc:
            # any RPC, ABI-decode or revert error falls through to the indexed source
            logger.info(
                f"On-chain balance for {address} failed ({type(exc).__name__}), "
                "falling back to CLOB balance"
            )

        return await self._fallback_balance(address)

    async def _fallback_balance(self, address: str) -> Decimal:
        resp = await self.http.get_json(BALANCE_PATH, params={"address": address})
        if not resp.ok or not isinstance(resp.data, dict):
            return Decimal(0)
        amount = parse_balance_field(resp.data.get("balance", "0"))
        if amount is None:
            logger.info(f"Fallback balance for {address} was not numeric")
            return Decimal(0)
        return amount
