"""
Waiting out the game's write lock.

The game may still hold a save open for a moment after the change
notification fires. The gate retries a shared read open for a bounded
number of attempts instead of failing the backup outright.
"""

import errno
import logging
import time
from pathlib import Path
from typing import Callable

from .config import FILE_ACCESS_RETRY_DELAY_MS, MAX_FILE_ACCESS_RETRIES

logger = logging.getLogger(__name__)

# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_WINDOWS_LOCK_ERRORS = {32, 33}
_POSIX_LOCK_ERRNOS   = {errno.EBUSY, errno.EAGAIN, errno.EWOULDBLOCK}


def is_lock_error(exc: OSError) -> bool:
    """True for sharing/lock violations that are worth retrying."""
    winerror = getattr(exc, "winerror", None)
    if winerror is not None:
        return winerror in _WINDOWS_LOCK_ERRORS
    return exc.errno in _POSIX_LOCK_ERRNOS


def wait_for_read_access(path: Path,
                         max_retries: int = MAX_FILE_ACCESS_RETRIES,
                         retry_delay_ms: int = FILE_ACCESS_RETRY_DELAY_MS,
                         sleep: Callable[[float], None] = time.sleep) -> bool:
    """
    Try to open ``path`` for reading until it is no longer locked.

    Returns True as soon as an open succeeds, False when every attempt hit
    a lock or when the error is not a lock at all (missing file etc).
    """
    for attempt in range(1, max_retries + 1):
        try:
            with open(path, "rb"):
                return True
        except OSError as exc:
            if not is_lock_error(exc):
                logger.debug("Cannot open %s: %s", path, exc)
                return False
            logger.debug("%s is locked (attempt %d/%d)", path, attempt, max_retries)
            if attempt < max_retries:
                sleep(retry_delay_ms / 1000.0)
    return False
