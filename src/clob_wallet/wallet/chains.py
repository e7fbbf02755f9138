"""Chain definitions for the networks the CLOB settles on."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Chain:
    """An EVM-compatible network hosting the CLOB's collateral token."""

    name: str
    chain_id: int
    rpc_url: str
    usdc_address: str
    explorer_url: str
    usdc_decimals: int = 6


CHAINS: dict[str, Chain] = {
    "polygon": Chain(
        name="polygon",
        chain_id=137,
        rpc_url="https://polygon-rpc.com",
        usdc_address="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
        explorer_url="https://polygonscan.com",
    ),
    "amoy": Chain(
        name="amoy",
        chain_id=80002,
        rpc_url="https://rpc-amoy.polygon.technology",
        usdc_address="0x41E94Eb019C0762f9Bfcf9Fb1E58725BfB0e7582",
        explorer_url="https://amoy.polygonscan.com",
    ),
}


def get_chain(name: str) -> Chain:
    """Get a chain by name. Raises ``KeyError`` if not found."""
    if name not in CHAINS:
        raise KeyError(
            f"Unknown chain '{name}'. Available: {list_chain_names()}"
        )
    return CHAINS[name]


def list_chain_names() -> list[str]:
    """Return the names of all supported chains."""
    return list(CHAINS.keys())
