"""
Global checkpoint hotkey.

Pressing the hotkey (F5 by default) while the game is in the foreground
queues a backup of every save in the watched directory. pynput is imported
when the listener starts, so headless machines can still run the watcher.
"""

import logging

from .session import CheckpointSession

logger = logging.getLogger(__name__)


class CheckpointHotkey:

    def __init__(self, session: CheckpointSession, key_name: str | None = None, keyboard=None):
        self.session = session
        self.key_name = (key_name or session.config.checkpoint_hotkey).lower()
        self._keyboard = keyboard
        self._listener = None
        self._key = None

    def start(self) -> bool:
        """Start listening; returns False (and logs why) when that is not possible."""
        try:
            keyboard = self._keyboard
            if keyboard is None:
                from pynput import keyboard
            self._key = getattr(keyboard.Key, self.key_name, None)
            if self._key is None:
                logger.warning("Unknown hotkey %r - checkpoint hotkey disabled.", self.key_name)
                return False
            listener = keyboard.Listener(on_press=self._on_press, suppress=False)
            listener.daemon = True
            listener.start()
        except Exception as exc:
            logger.warning("Global hotkey unavailable (%s) - checkpoints only happen on save.", exc)
            return False

        self._listener = listener
        logger.info("Press %s anywhere to checkpoint all saves.", self.key_name.upper())
        return True

    def _on_press(self, key):
        try:
            if key == self._key:
                self.session.checkpoint_all()
        except Exception as exc:
            logger.error("Checkpoint hotkey failed: %s", exc)

    def stop(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
