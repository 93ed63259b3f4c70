from pathlib import Path


class CheckpointError(Exception):
    """Base exception for backup/restore failures."""


class MalformedContent(CheckpointError):
    """Raised when a save cannot be parsed or carries no usable level."""


class FileLocked(CheckpointError):
    """Raised when a save stays unreadable for the whole retry budget."""

    def __init__(self, path: Path):
        super().__init__(f"{Path(path).name} is locked or unreadable")
        self.path = Path(path)


class NoBackupFound(CheckpointError):
    """Raised when a deleted save has no backups to restore from."""

    def __init__(self, original_name: str):
        super().__init__(f"No backups found for {original_name}")
        self.original_name = original_name


class IoFailure(CheckpointError):
    """Raised when copying, writing or opening a file fails."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{Path(path).name}: {reason}")
        self.path = Path(path)
        self.reason = reason
