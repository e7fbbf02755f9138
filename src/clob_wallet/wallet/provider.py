"""Read-only Web3 access to the collateral token contract."""

from __future__ import annotations

import logging

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from clob_wallet.wallet.chains import get_chain

logger = logging.getLogger("clob_wallet.wallet.provider")

ERC20_BALANCE_OF_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    }
]


class Web3Provider:
    """Manages Web3 connections for the supported chains.

    Parameters
    ----------
    rpc_overrides:
        Optional mapping of chain name to RPC URL, replacing the default
        endpoint from :mod:`clob_wallet.wallet.chains`.
    """

    def __init__(self, rpc_overrides: dict[str, str] | None = None) -> None:
        self._rpc_overrides = dict(rpc_overrides or {})
        self._instances: dict[str, Web3] = {}

    def get_web3(self, chain_name: str) -> Web3:
        """Return a (cached) Web3 instance for the given chain.

        Polygon-family chains are proof-of-authority, so the POA
        middleware is injected for every chain but Ethereum mainnet.
        """
        if chain_name in self._instances:
            return self._instances[chain_name]

        chain = get_chain(chain_name)
        rpc_url = self._rpc_overrides.get(chain_name, chain.rpc_url)
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        if chain.chain_id != 1:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self._instances[chain_name] = w3
        return w3

    def get_token_balance(self, address: str, chain_name: str) -> int:
        """Raw ``balanceOf`` result (base units) for the chain's USDC contract."""
        w3 = self.get_web3(chain_name)
        chain = get_chain(chain_name)
        contract = w3.eth.contract(
            address=Web3.to_checksum_address(chain.usdc_address),
            abi=ERC20_BALANCE_OF_ABI,
        )
        raw = contract.functions.balanceOf(Web3.to_checksum_address(address)).call()
        logger.debug(f"balanceOf({address}) on {chain_name} = {raw}")
        return int(raw)
