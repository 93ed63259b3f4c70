"""
watchdog wiring: turns filesystem notifications for ``*.baronysave`` files
in the savegames directory into session events.
"""

import fnmatch
import logging
import os
from pathlib import Path

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer

from .session import CheckpointSession

logger = logging.getLogger(__name__)


def _event_name(path: bytes | str) -> str:
    return Path(os.fsdecode(path)).name


class SaveFileEventHandler(PatternMatchingEventHandler):
    """Forwards save-file changes, deletions and renames to a session."""

    def __init__(self, session: CheckpointSession):
        self.session = session
        self.pattern = session.config.save_pattern
        super().__init__(patterns=[self.pattern], ignore_directories=True, case_sensitive=False)

    def _matches(self, name: str) -> bool:
        return fnmatch.fnmatch(name.lower(), self.pattern.lower())

    def on_modified(self, event: FileSystemEvent):
        self.session.notify_changed(_event_name(event.src_path))

    def on_deleted(self, event: FileSystemEvent):
        self.session.notify_deleted(_event_name(event.src_path))

    def on_moved(self, event: FileSystemEvent):
        src_name  = _event_name(event.src_path)
        dest_name = _event_name(event.dest_path)
        if self._matches(dest_name):
            # temp file renamed onto a save: treat as a write
            self.session.notify_changed(dest_name)
        elif self._matches(src_name):
            self.session.notify_deleted(src_name)


class SaveDirectoryWatcher:
    """Owns the watchdog observer and the session worker for one directory."""

    def __init__(self, session: CheckpointSession, observer_factory=Observer):
        self.session = session
        self._observer_factory = observer_factory
        self._observer = None

    def start(self) -> None:
        if self._observer is not None:
            return
        self.session.start()
        observer = self._observer_factory()
        observer.schedule(SaveFileEventHandler(self.session), str(self.session.save_dir),
                          recursive=False)
        observer.start()
        self._observer = observer
        logger.debug("Watching %s for %s", self.session.save_dir, self.session.config.save_pattern)

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self.session.stop()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()
