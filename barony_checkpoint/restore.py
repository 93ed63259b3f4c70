"""Putting the newest backup of a deleted save back in place."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import IoFailure, NoBackupFound
from .store import BackupRef, BackupStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestoreResult:
    original_name: str
    backup: BackupRef
    target: Path

    @property
    def level(self) -> int | None:
        return self.backup.level


def select_newest(backups: Iterable[BackupRef]) -> BackupRef:
    """Backup with the latest creation time; ties go to the greatest file name."""
    backups = list(backups)
    if not backups:
        raise ValueError("no backups to choose from")
    return max(backups, key=BackupRef.sort_key)


def restore_newest(store: BackupStore, original_name: str, save_dir: Path) -> RestoreResult:
    """
    Copy the newest backup of ``original_name`` over ``save_dir/original_name``.

    Raises NoBackupFound when the save has never been backed up and
    IoFailure when the copy itself fails.
    """
    backups = store.list_backups(original_name)
    if not backups:
        raise NoBackupFound(original_name)

    newest = select_newest(backups)
    target = Path(save_dir) / original_name
    try:
        shutil.copy2(newest.path, target)
    except OSError as exc:
        raise IoFailure(target, f"cannot restore from {newest.name}: {exc}") from exc

    logger.info("Restored: %s from %s", original_name, newest.name)
    if newest.level is not None:
        logger.info(" Restored to dungeon level: %d", newest.level)
    return RestoreResult(original_name, newest, target)
