"""
Backup store.

Owns the flat backup directory: writes new captures, lists the backups of
one save and trims each save's backups down to the retention limit.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from .config import MAX_BACKUPS_PER_SAVE
from .errors import IoFailure
from .levels import LevelResult, extract_level
from .naming import decode_backup, encode_backup_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackupRef:
    path: Path
    original_name: str
    level: int | None
    created_at: datetime

    @property
    def name(self) -> str:
        return self.path.name

    def sort_key(self) -> tuple[datetime, str]:
        """Oldest first; equal timestamps fall back to the file name."""
        return self.created_at, self.path.name


class BackupStore:

    def __init__(self, backup_dir: Path, now: Callable[[], datetime] = datetime.now):
        self.backup_dir = Path(backup_dir)
        self._now = now

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_backup(self, save_path: Path) -> BackupRef:
        """Copy ``save_path`` into the backup directory under an encoded name."""
        save_path = Path(save_path)
        try:
            content = save_path.read_bytes()
        except OSError as exc:
            raise IoFailure(save_path, f"cannot read save: {exc}") from exc

        level = extract_level(content)
        if not level.found:
            logger.debug("No level in %s: %s", save_path.name, level.reason)

        created_at = self._now().replace(microsecond=0)
        backup_name = encode_backup_name(save_path.name, level, created_at)
        target = self.backup_dir / backup_name

        self._write_atomic(target, content)
        self._log_backup(save_path.name, level, backup_name)
        return BackupRef(target, save_path.name, level.value, created_at)

    def _write_atomic(self, target: Path, content: bytes) -> None:
        tmp = target.with_name(f".{target.name}.tmp")
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            if target.exists():
                # Same save, level and second: the newer capture wins
                logger.warning("Backup %s already exists; replacing it with the newer capture",
                               target.name)
            tmp.write_bytes(content)
            os.replace(tmp, target)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise IoFailure(target, f"cannot write backup: {exc}") from exc

    @staticmethod
    def _log_backup(save_name: str, level: LevelResult, backup_name: str) -> None:
        if level.found:
            logger.info("Backed up: %s (Level %d) -> %s", save_name, level.value, backup_name)
        else:
            logger.info("Backed up: %s (corrupted json) -> %s", save_name, backup_name)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_backups(self, original_name: str) -> list[BackupRef]:
        """Every backup of ``original_name``, in directory order."""
        if not self.backup_dir.is_dir():
            return []

        prefix = f"{original_name}."
        backups: list[BackupRef] = []
        for entry in self.backup_dir.iterdir():
            if not entry.name.startswith(prefix):
                continue
            try:
                if not entry.is_file():
                    continue
                level, created_at = decode_backup(entry)
            except FileNotFoundError:
                # removed while we were listing
                continue
            backups.append(BackupRef(entry, original_name, level, created_at))
        return backups

    # ------------------------------------------------------------------
    # Retention
    # ------------------------------------------------------------------

    def enforce_retention(self, original_name: str,
                          max_backups: int = MAX_BACKUPS_PER_SAVE) -> list[BackupRef]:
        """
        Delete the oldest backups of ``original_name`` beyond ``max_backups``.

        Returns the backups that were actually removed. A failed delete is
        logged and the remaining candidates are still processed.
        """
        if max_backups < 1:
            raise ValueError("max_backups must be at least 1")

        backups = self.list_backups(original_name)
        excess = len(backups) - max_backups
        if excess <= 0:
            return []

        removed: list[BackupRef] = []
        for ref in sorted(backups, key=BackupRef.sort_key)[:excess]:
            try:
                ref.path.unlink()
            except OSError as exc:
                logger.warning("Failed to delete old backup %s: %s", ref.name, exc)
                continue
            removed.append(ref)
            logger.info("Cleaned up old backup: %s", ref.name)
        return removed
