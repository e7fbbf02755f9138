"""Configuration system for clob-wallet.

Loads settings from ``~/.clob-wallet/config.yaml`` (or ``$CLOB_WALLET_HOME``),
supports environment variable expansion, and builds the wallet components
from the result.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from clob_wallet.clob.http import DEFAULT_CLOB_HOST


# ---------------------------------------------------------------------------
# Environment-variable expansion helper
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _expand_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with their environment values.

    If the variable is not set the placeholder is left as-is so that
    validation can catch it later.
    """

    def _replace(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return _ENV_VAR_RE.sub(_replace, value)


def _expand_env_recursive(obj: object) -> object:
    """Walk an arbitrary nested structure and expand env vars in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _expand_env_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_recursive(item) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# Pydantic v2 models
# ---------------------------------------------------------------------------


class ClobConfig(BaseModel):
    """Remote CLOB API endpoint."""

    host: str = DEFAULT_CLOB_HOST
    timeout_seconds: float = 15.0


class ChainSettings(BaseModel):
    """Network used for balances and the EIP-712 domain."""

    name: str = "polygon"
    rpc_url: Optional[str] = None  # Override the chain's default RPC


class StoreConfig(BaseModel):
    """Where the wallet record lives."""

    path: Optional[str] = None  # Defaults to <config dir>/wallet.json


class AppConfig(BaseModel):
    """Root configuration object."""

    clob: ClobConfig = Field(default_factory=ClobConfig)
    chain: ChainSettings = Field(default_factory=ChainSettings)
    store: StoreConfig = Field(default_factory=StoreConfig)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

CONFIG_FILENAME = "config.yaml"


def get_config_dir(*, create: bool = True) -> Path:
    """Return the per-user directory, ``$CLOB_WALLET_HOME`` or ``~/.clob-wallet``.

    Parameters
    ----------
    create:
        If *True* (default), create the directory if it doesn't exist.
    """
    override = os.environ.get("CLOB_WALLET_HOME")
    config_dir = Path(override) if override else Path.home() / ".clob-wallet"
    if create:
        config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_config(path: Path | None = None) -> AppConfig:
    """Load and validate configuration from a YAML file.

    A missing file yields the defaults.  Environment variable placeholders
    (``${VAR}``) are expanded before validation.
    """
    if path is None:
        path = get_config_dir(create=False) / CONFIG_FILENAME
    if not path.exists():
        return AppConfig()
    raw_data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    expanded = _expand_env_recursive(raw_data)
    return AppConfig.model_validate(expanded)


def save_config(config: AppConfig, path: Path) -> None:
    """Serialize an :class:`AppConfig` to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="python", exclude_none=True)
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False, sort_keys=False)


def resolve_store_path(config: AppConfig) -> Path:
    """Path of ``wallet.json`` for *config*."""
    from clob_wallet.wallet.store import WALLET_FILENAME

    if config.store.path:
        return Path(config.store.path).expanduser()
    return get_config_dir() / WALLET_FILENAME


def build_manager(config: AppConfig):
    """Wire a :class:`~clob_wallet.wallet.manager.WalletManager` from *config*."""
    from clob_wallet.clob.http import ClobHttp
    from clob_wallet.wallet.manager import WalletManager
    from clob_wallet.wallet.provider import Web3Provider
    from clob_wallet.wallet.store import WalletStore

    overrides = {config.chain.name: config.chain.rpc_url} if config.chain.rpc_url else None
    return WalletManager(
        store=WalletStore(resolve_store_path(config)),
        http=ClobHttp(config.clob.host, timeout=config.clob.timeout_seconds),
        provider=Web3Provider(rpc_overrides=overrides),
        chain_name=config.chain.name,
    )
