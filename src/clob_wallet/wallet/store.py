"""Single-record JSON persistence for the connected wallet."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from clob_wallet.wallet.models import ApiCredentials, WalletRecord

logger = logging.getLogger("clob_wallet.wallet.store")

WALLET_FILENAME = "wallet.json"


class WalletStore:
    """Reads and writes the one local :class:`WalletRecord`.

    Parameters
    ----------
    path:
        Location of the JSON file.  The parent directory is created on
        :meth:`save` if it does not already exist.

    The file is a single-writer resource: two processes saving at the same
    time race and the last write wins.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self) -> WalletRecord | None:
        """Return the persisted record, or ``None`` if no wallet is connected.

        A missing, unreadable or malformed file, or one lacking either
        ``address`` or ``privateKey``, all read as "no wallet".
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable wallet file {self.path}: {type(exc).__name__}")
            return None

        if not isinstance(data, dict):
            return None
        if not data.get("address") or not data.get("privateKey"):
            return None

        try:
            return WalletRecord.model_validate(data)
        except ValueError:
            logger.warning(f"Ignoring malformed wallet record in {self.path}")
            return None

    def stored_credentials(self) -> ApiCredentials | None:
        """Complete API credentials from the stored record, if any."""
        record = self.load()
        if record is None:
            return None
        return record.credentials

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, record: WalletRecord) -> None:
        """Write *record* with owner-only (``0600``) permissions."""
        self._write(record.to_json_dict())

    def clear(self) -> None:
        """Overwrite the file with an empty record.

        This disconnects the wallet; it is not a secure wipe.
        """
        try:
            self._write({})
        except OSError as exc:
            logger.warning(f"Failed to clear wallet file {self.path}: {exc.strerror}")

    def merge_credentials(self, creds: ApiCredentials) -> bool:
        """Merge *creds* into the stored record.

        Returns ``False`` (and writes nothing) when no wallet is stored.
        """
        record = self.load()
        if record is None:
            return False
        self.save(record.with_credentials(creds))
        logger.info(f"API credentials stored for {record.address}")
        return True

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(data, indent=2))
        # O_CREAT's mode only applies to new files
        os.chmod(self.path, 0o600)
