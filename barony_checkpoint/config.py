"""Settings shared by the backup store, the event session and the CLI."""

from dataclasses import dataclass
from pathlib import Path


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

APP_NAME                        = "BaronyCheckpoint"
SAVE_EXTENSION                  = ".baronysave"
SAVEGAMES_MARKER                = "savegames"

BACKUP_DIR_NAME                 = "backups"
MAX_BACKUPS_PER_SAVE            = 1000
FILE_ACCESS_RETRY_DELAY_MS      = 50
MAX_FILE_ACCESS_RETRIES         = 20
DELETION_SUPPRESSION_WINDOW_MS  = 500
EVENT_QUEUE_SIZE                = 256
CHECKPOINT_HOTKEY               = "f5"


@dataclass(frozen=True)
class CheckpointConfig:
    """Tunables for one watched directory; defaults mirror the constants above."""

    backup_dir_name: str                = BACKUP_DIR_NAME
    save_extension: str                 = SAVE_EXTENSION
    max_backups_per_save: int           = MAX_BACKUPS_PER_SAVE
    file_access_retry_delay_ms: int     = FILE_ACCESS_RETRY_DELAY_MS
    max_file_access_retries: int        = MAX_FILE_ACCESS_RETRIES
    deletion_suppression_window_ms: int = DELETION_SUPPRESSION_WINDOW_MS
    event_queue_size: int               = EVENT_QUEUE_SIZE
    checkpoint_hotkey: str              = CHECKPOINT_HOTKEY

    def __post_init__(self):
        if not self.backup_dir_name.strip():
            raise ValueError("backup_dir_name must not be empty")
        if not self.save_extension.startswith(".") or len(self.save_extension) < 2:
            raise ValueError(f"save_extension must look like '.ext', got {self.save_extension!r}")
        for field_name in ("max_backups_per_save", "max_file_access_retries", "event_queue_size"):
            if getattr(self, field_name) < 1:
                raise ValueError(f"{field_name} must be at least 1")
        for field_name in ("file_access_retry_delay_ms", "deletion_suppression_window_ms"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must not be negative")

    @property
    def save_pattern(self) -> str:
        return f"*{self.save_extension}"

    @property
    def suppression_window_seconds(self) -> float:
        return self.deletion_suppression_window_ms / 1000.0


DEFAULT_CONFIG = CheckpointConfig()


def is_savegames_directory(path: Path | str) -> bool:
    """True when ``path`` contains the savegames marker, ignoring case."""
    return SAVEGAMES_MARKER in str(path).lower()
