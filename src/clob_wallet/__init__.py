"""clob-wallet: wallet identity and two-tier authentication for a CLOB trading API."""

from clob_wallet.clob.client import ClobClient
from clob_wallet.clob.http import ApiResponse, ClobHttp
from clob_wallet.wallet.manager import WalletManager
from clob_wallet.wallet.models import ApiCredentials, WalletRecord
from clob_wallet.wallet.store import WalletStore

__all__ = [
    "ApiCredentials",
    "ApiResponse",
    "ClobClient",
    "ClobHttp",
    "WalletManager",
    "WalletRecord",
    "WalletStore",
]
