"""
Backup file naming.

A backup is named ``<original>.<level|unknown>.<YYYYMMDD_HHMMSS>``, e.g.
``slot1.baronysave.5.20240115_103000``. The original name keeps its
extension; the level and timestamp are always the last two segments.
"""

import re
from datetime import datetime
from pathlib import Path

from .levels import UNKNOWN_LEVEL_TOKEN, LevelResult

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_TIMESTAMP_RE = re.compile(r"^[0-9]{8}_[0-9]{6}$")
_LEVEL_RE     = re.compile(r"^-?[0-9]+$")


def encode_backup_name(original_name: str, level: LevelResult | int | None,
                       created_at: datetime) -> str:
    if not isinstance(level, LevelResult):
        level = LevelResult(level)
    return f"{original_name}.{level.token}.{created_at.strftime(TIMESTAMP_FORMAT)}"


def parse_backup_name(name: str) -> tuple[int | None, datetime] | None:
    """
    Decode the level and timestamp encoded in ``name``.

    Returns None for names that do not follow the backup naming scheme.
    An ``unknown`` level token decodes to ``(None, timestamp)``.
    """
    parts = name.split(".")
    if len(parts) < 3 or not parts[0]:
        return None

    level_str, timestamp_str = parts[-2], parts[-1]
    if not _TIMESTAMP_RE.match(timestamp_str):
        return None
    try:
        timestamp = datetime.strptime(timestamp_str, TIMESTAMP_FORMAT)
    except ValueError:
        return None

    if level_str == UNKNOWN_LEVEL_TOKEN:
        return None, timestamp
    if not _LEVEL_RE.match(level_str):
        return None
    return int(level_str), timestamp


def file_created_at(path: Path) -> datetime:
    """Creation time of ``path`` where the platform records it, else mtime."""
    st = Path(path).stat()
    ts = getattr(st, "st_birthtime", None)
    if ts is None:
        ts = st.st_mtime
    return datetime.fromtimestamp(ts)


def decode_backup(path: Path) -> tuple[int | None, datetime]:
    """
    Level and creation time of the backup at ``path``.

    Names that do not decode fall back to ``(None, file_created_at(path))``.
    """
    path = Path(path)
    parsed = parse_backup_name(path.name)
    if parsed is None:
        return None, file_created_at(path)
    return parsed
