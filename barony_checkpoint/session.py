"""
Checkpoint session: one per watched savegames directory.

Filesystem notifications arrive on the observer's thread and are turned
into :class:`SaveEvent` objects on a bounded queue. A single worker thread
handles them one at a time:

  Changed(name)  wait for read access, back the save up, trim old backups
  Deleted(name)  restore the newest backup, then open a short suppression
                 window so the change caused by our own restore write is
                 not backed up again

The suppression window runs from receipt of the delete until
deletion_suppression_window_ms after the restore attempt finishes, so a slow
restore widens it. It is a timing heuristic: any unrelated change to any
save received inside the window is ignored too.
"""

import enum
import functools
import logging
import queue
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .access import wait_for_read_access
from .config import DEFAULT_CONFIG, CheckpointConfig
from .errors import FileLocked, NoBackupFound
from .restore import RestoreResult, restore_newest
from .store import BackupRef, BackupStore

logger = logging.getLogger(__name__)


class SaveEventKind(enum.Enum):
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class SaveEvent:
    kind: SaveEventKind
    name: str
    received_at: float
    # operator-requested checkpoints ignore the suppression window
    forced: bool = False


_STOP = object()


class CheckpointSession:

    def __init__(self, save_dir: Path, config: CheckpointConfig = DEFAULT_CONFIG, *,
                 store: BackupStore | None = None,
                 gate: Callable[[Path], bool] | None = None,
                 monotonic: Callable[[], float] = time.monotonic):
        self.save_dir = Path(save_dir)
        self.config = config
        self.store = store or BackupStore(self.save_dir / config.backup_dir_name)
        self._gate = gate or functools.partial(
            wait_for_read_access,
            max_retries=config.max_file_access_retries,
            retry_delay_ms=config.file_access_retry_delay_ms,
        )
        self._monotonic = monotonic

        self._events: queue.Queue = queue.Queue(maxsize=config.event_queue_size)
        # save name -> whether the waiting change was operator-forced
        self._pending_changes: dict[str, bool] = {}
        self._pending_lock = threading.Lock()
        self._suppress_until = float("-inf")
        self._closed = False
        self._worker: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Event intake (called from the notification thread)
    # ------------------------------------------------------------------

    def notify_changed(self, name: str) -> bool:
        return self.submit(SaveEvent(SaveEventKind.CHANGED, name, self._monotonic()))

    def notify_deleted(self, name: str) -> bool:
        return self.submit(SaveEvent(SaveEventKind.DELETED, name, self._monotonic()))

    def checkpoint_all(self) -> int:
        """Queue a forced backup of every save currently in the directory."""
        queued = 0
        for save in sorted(self.save_dir.glob(self.config.save_pattern)):
            if not save.is_file():
                continue
            event = SaveEvent(SaveEventKind.CHANGED, save.name, self._monotonic(), forced=True)
            if self.submit(event):
                queued += 1
        logger.info("Checkpoint requested: %d save(s) queued", queued)
        return queued

    def submit(self, event: SaveEvent) -> bool:
        """
        Queue ``event`` for the worker. Returns False when it was not queued:
        the session is stopped, the same save already has a change waiting,
        or the queue is full. A forced change that finds one waiting marks
        that change as forced and counts as queued.
        """
        if self._closed:
            return False

        coalesce = event.kind is SaveEventKind.CHANGED
        if coalesce:
            with self._pending_lock:
                if event.name in self._pending_changes:
                    logger.debug("Change to %s already queued", event.name)
                    if not event.forced:
                        return False
                    self._pending_changes[event.name] = True
                    return True
                self._pending_changes[event.name] = event.forced

        try:
            self._events.put_nowait(event)
        except queue.Full:
            if coalesce:
                with self._pending_lock:
                    self._pending_changes.pop(event.name, None)
            logger.warning("Event queue full; dropped %s event for %s",
                           event.kind.value, event.name)
            return False
        return True

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._worker is not None:
            return
        self._worker = threading.Thread(target=self._run, name="checkpoint-worker", daemon=True)
        self._worker.start()

    def stop(self, timeout: float | None = None) -> None:
        """Stop accepting events; an event already being handled runs to completion."""
        self._closed = True
        if self._worker is None:
            return
        self._events.put(_STOP)
        self._worker.join(timeout)
        self._worker = None

    def _run(self) -> None:
        while True:
            event = self._events.get()
            if event is _STOP:
                return
            if self._closed:
                continue
            self.dispatch(event)

    def process_pending(self) -> int:
        """Handle every queued event on the calling thread; returns how many ran."""
        handled = 0
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return handled
            if event is _STOP:
                continue
            self.dispatch(event)
            handled += 1

    def dispatch(self, event: SaveEvent) -> BackupRef | RestoreResult | None:
        if event.kind is SaveEventKind.CHANGED:
            with self._pending_lock:
                forced = self._pending_changes.pop(event.name, False) or event.forced
            return self.handle_changed(event.name, event.received_at, forced=forced)
        return self.handle_deleted(event.name)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def is_suppressed(self, received_at: float) -> bool:
        return received_at < self._suppress_until

    def handle_changed(self, name: str, received_at: float | None = None,
                       forced: bool = False) -> BackupRef | None:
        if received_at is None:
            received_at = self._monotonic()
        if not forced and self.is_suppressed(received_at):
            logger.debug("Ignoring change to %s right after a restore", name)
            return None

        save_path = self.save_dir / name
        try:
            if not self._gate(save_path):
                raise FileLocked(save_path)
            backup = self.store.create_backup(save_path)
            self.store.enforce_retention(name, self.config.max_backups_per_save)
            return backup
        except FileLocked:
            logger.warning("Could not access %s for backup - file may be locked.", name)
        except Exception as exc:
            logger.error("Backup failed for %s: %s", name, exc)
        return None

    def handle_deleted(self, name: str) -> RestoreResult | None:
        logger.info("Save file deleted: %s", name)
        try:
            return restore_newest(self.store, name, self.save_dir)
        except NoBackupFound:
            logger.info("No backups found for %s", name)
        except Exception as exc:
            logger.error("Restore failed for %s: %s", name, exc)
        finally:
            self._suppress_until = self._monotonic() + self.config.suppression_window_seconds
        return None
