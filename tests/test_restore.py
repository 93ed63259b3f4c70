from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest

from barony_checkpoint.errors import IoFailure, NoBackupFound
from barony_checkpoint.naming import encode_backup_name
from barony_checkpoint.restore import restore_newest, select_newest
from barony_checkpoint.store import BackupRef

T1 = datetime(2024, 1, 15, 10, 0, 0)
T2 = T1 + timedelta(minutes=5)
T3 = T1 + timedelta(minutes=10)


def _backup(store, level, ts, original="slot1.baronysave"):
    store.backup_dir.mkdir(parents=True, exist_ok=True)
    path = store.backup_dir / encode_backup_name(original, level, ts)
    path.write_bytes(f'{{"dungeon_lvl": {level}}}'.encode())
    return path


def test_select_newest_ignores_listing_order(tmp_path):
    refs = [
        BackupRef(tmp_path / "b", "slot1.baronysave", 4, T2),
        BackupRef(tmp_path / "c", "slot1.baronysave", 5, T3),
        BackupRef(tmp_path / "a", "slot1.baronysave", 3, T1),
    ]
    assert select_newest(refs).level == 5


def test_select_newest_tie_goes_to_greatest_name(tmp_path):
    refs = [
        BackupRef(tmp_path / "slot1.baronysave.9.20240115_100000", "slot1.baronysave", 9, T1),
        BackupRef(tmp_path / "slot1.baronysave.10.20240115_100000", "slot1.baronysave", 10, T1),
    ]
    # "9" sorts after "10" as text
    assert select_newest(refs).level == 9
    assert select_newest(reversed(refs)).level == 9


def test_select_newest_needs_candidates():
    with pytest.raises(ValueError):
        select_newest([])


def test_restore_copies_newest_backup(store, save_dir, caplog):
    _backup(store, 3, T1)
    newest = _backup(store, 5, T3)
    _backup(store, 4, T2)

    with caplog.at_level(logging.INFO):
        result = restore_newest(store, "slot1.baronysave", save_dir)

    restored = save_dir / "slot1.baronysave"
    assert result.target == restored
    assert result.backup.path == newest
    assert result.level == 5
    assert restored.read_bytes() == newest.read_bytes()
    assert "Restored to dungeon level: 5" in caplog.text


def test_restore_overwrites_existing_save(store, save_dir, write_save):
    write_save(level=1)
    newest = _backup(store, 8, T3)
    restore_newest(store, "slot1.baronysave", save_dir)
    assert (save_dir / "slot1.baronysave").read_bytes() == newest.read_bytes()


def test_restore_reports_unknown_level(store, save_dir):
    _backup(store, 2, T1)
    path = store.backup_dir / encode_backup_name("slot1.baronysave", None, T3)
    path.write_bytes(b"corrupt")

    result = restore_newest(store, "slot1.baronysave", save_dir)
    assert result.level is None
    assert (save_dir / "slot1.baronysave").read_bytes() == b"corrupt"


def test_restore_without_backups(store, save_dir):
    before = sorted(save_dir.iterdir())
    with pytest.raises(NoBackupFound) as info:
        restore_newest(store, "slot1.baronysave", save_dir)
    assert info.value.original_name == "slot1.baronysave"
    assert sorted(save_dir.iterdir()) == before


def test_restore_copy_failure_is_io_failure(store, tmp_path):
    _backup(store, 3, T1)
    with pytest.raises(IoFailure):
        restore_newest(store, "slot1.baronysave", tmp_path / "missing" / "dir")
