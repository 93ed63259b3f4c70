#!/usr/bin/env python3
"""
Barony Checkpoint Manager

Run from inside Barony's savegames directory. Every time the game writes a
*.baronysave file a timestamped copy is stored in ./backups/; when the game
deletes a save, the newest copy is put back.

Backups are named:
  <save>.<dungeon level|unknown>.<YYYYMMDD_HHMMSS>

Press Enter (or Ctrl+C) to stop watching.
"""

import argparse
import logging
import sys
from pathlib import Path

from barony_checkpoint.config import (
    DEFAULT_CONFIG,
    CheckpointConfig,
    is_savegames_directory,
)
from barony_checkpoint.hotkeys import CheckpointHotkey
from barony_checkpoint.logging_config import configure_logging
from barony_checkpoint.session import CheckpointSession
from barony_checkpoint.watcher import SaveDirectoryWatcher

logger = logging.getLogger("barony_checkpoint")


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barony-checkpoint",
        description="Back up Barony saves on every write and restore them when deleted.",
    )
    parser.add_argument("directory", nargs="?", type=Path, default=None,
                        help="savegames directory to watch (default: current directory)")
    parser.add_argument("--backup-dir", default=DEFAULT_CONFIG.backup_dir_name,
                        help="backup folder name inside the savegames directory (default: %(default)s)")
    parser.add_argument("--max-backups", type=int, default=DEFAULT_CONFIG.max_backups_per_save,
                        help="backups kept per save (default: %(default)s)")
    parser.add_argument("--hotkeys", action="store_true",
                        help="enable the global checkpoint hotkey")
    parser.add_argument("--hotkey", default=DEFAULT_CONFIG.checkpoint_hotkey,
                        help="key that checkpoints every save (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _config_from_args(args: argparse.Namespace) -> CheckpointConfig:
    return CheckpointConfig(
        backup_dir_name=args.backup_dir,
        max_backups_per_save=args.max_backups,
        checkpoint_hotkey=args.hotkey,
    )


def _print_banner(config: CheckpointConfig, hotkey_active: bool) -> None:
    print("Barony Checkpoint Manager started!")
    print(f"- Auto-backup: ON (max {config.max_backups_per_save} per save)")
    print("- Auto-restore: ON (restores newest backup on deletion)")
    print(f"- Backup location: ./{config.backup_dir_name}/")
    if hotkey_active:
        print(f"- Checkpoint hotkey: {config.checkpoint_hotkey.upper()}")
    print()
    print("Press Enter to quit...")


def _wait_for_stop() -> None:
    try:
        input()
    except (EOFError, KeyboardInterrupt):
        pass


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = _config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    save_dir = (args.directory or Path.cwd()).resolve()
    logger.info("Current directory: %s", save_dir)
    if not is_savegames_directory(save_dir):
        logger.error("This program must be run from a savegames directory.")
        return 1
    if not save_dir.is_dir():
        logger.error("%s is not a directory.", save_dir)
        return 1

    session = CheckpointSession(save_dir, config)
    try:
        session.store.backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Cannot create backup folder %s: %s", session.store.backup_dir, exc)
        return 1

    watcher = SaveDirectoryWatcher(session)
    watcher.start()

    hotkey = None
    if args.hotkeys:
        hotkey = CheckpointHotkey(session)
        if not hotkey.start():
            hotkey = None

    try:
        _print_banner(config, hotkey is not None)
        _wait_for_stop()
    finally:
        if hotkey is not None:
            hotkey.stop()
        watcher.stop()
        logger.info("Stopped watching %s", save_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
