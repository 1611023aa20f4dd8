"""
Ledger storage.

Snapshot persistence for the movie ledger: atomic JSON writes with a
one-level backup, and invariant-checked loading.
"""

import json
import os
import shutil
import logging
from datetime import datetime
from typing import Optional

from movieledger.registry.exceptions import CorruptLedger
from movieledger.registry.movie_ledger import MovieLedger
from movieledger.registry.notifications import NotificationLog

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0.0"


class LedgerStorage:
    """
    Reads and writes ledger snapshots at a single path.

    Files:
    - <path>          current snapshot
    - <path>.backup   snapshot before the last save
    - <path>.tmp      in-flight write (renamed into place)
    """

    def __init__(self, ledger_path: str):
        """
        Initialize storage.

        Args:
            ledger_path: Path to the ledger JSON file
        """
        self.ledger_path = str(ledger_path)
        self.backup_path = f"{self.ledger_path}.backup"

        parent = os.path.dirname(self.ledger_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    def exists(self) -> bool:
        return os.path.exists(self.ledger_path)

    def save(self, ledger: MovieLedger) -> None:
        """
        Persist ledger to disk with atomic write pattern.
        Creates backup before write.
        """
        data = {
            "version": SNAPSHOT_VERSION,
            "saved_at": datetime.utcnow().isoformat() + "Z",
            **ledger.snapshot()
        }

        if os.path.exists(self.ledger_path):
            shutil.copy(self.ledger_path, self.backup_path)
            logger.debug(f"Created backup: {self.backup_path}")

        temp_path = f"{self.ledger_path}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)

            os.replace(temp_path, self.ledger_path)
            logger.info(
                f"Ledger saved: {data['movie_count']} movies, "
                f"{data['review_count']} reviews"
            )

        except Exception as e:
            logger.error(f"Failed to save ledger: {e}")
            if os.path.isfile(temp_path):
                os.remove(temp_path)
            raise

    def load(self, notifications: Optional[NotificationLog] = None) -> Optional[MovieLedger]:
        """
        Load ledger from disk.

        Falls back to the backup snapshot when the main file is
        unreadable or inconsistent.

        Returns:
            The restored ledger, or None if no ledger file exists

        Raises:
            CorruptLedger: If neither the file nor its backup is usable
        """
        if not self.exists():
            logger.info(f"No existing ledger found at {self.ledger_path}")
            return None

        try:
            return self._load_file(self.ledger_path, notifications)
        except CorruptLedger as e:
            logger.error(f"Failed to load ledger: {e}")
            return self._restore_from_backup(notifications)

    def _load_file(self, path: str, notifications: Optional[NotificationLog]) -> MovieLedger:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptLedger(f"Failed to parse ledger JSON at {path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptLedger(f"Ledger file {path} does not contain a snapshot object")

        ledger = MovieLedger.from_snapshot(data, notifications=notifications)
        logger.info(f"Loaded ledger from {path}")
        return ledger

    def _restore_from_backup(self, notifications: Optional[NotificationLog]) -> MovieLedger:
        """Attempt to restore from backup file if main ledger is corrupted."""
        if not os.path.exists(self.backup_path):
            raise CorruptLedger(
                f"Ledger at {self.ledger_path} is corrupt and no backup exists"
            )

        logger.warning(f"Attempting to restore from backup: {self.backup_path}")
        try:
            ledger = self._load_file(self.backup_path, notifications)
        except CorruptLedger as e:
            raise CorruptLedger(f"Backup restoration failed: {e}") from e

        shutil.copy(self.backup_path, self.ledger_path)
        logger.info("Successfully restored from backup")
        return ledger
