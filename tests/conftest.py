from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from barony_checkpoint.config import CheckpointConfig
from barony_checkpoint.session import CheckpointSession
from barony_checkpoint.store import BackupStore


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def save_dir(tmp_path: Path) -> Path:
    d = tmp_path / "Barony" / "savegames"
    d.mkdir(parents=True)
    return d


@pytest.fixture()
def wall_clock() -> FakeWallClock:
    return FakeWallClock(datetime(2024, 1, 15, 10, 30, 0))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(save_dir: Path, wall_clock: FakeWallClock) -> BackupStore:
    return BackupStore(save_dir / "backups", now=wall_clock)


@pytest.fixture()
def make_session(save_dir: Path, store: BackupStore, clock: FakeClock):
    def _make(config: CheckpointConfig | None = None, **kwargs) -> CheckpointSession:
        kwargs.setdefault("store", store)
        kwargs.setdefault("monotonic", clock)
        return CheckpointSession(save_dir, config or CheckpointConfig(), **kwargs)

    return _make


@pytest.fixture()
def write_save(save_dir: Path):
    def _write(name: str = "slot1.baronysave", level: int | None = 5, raw: bytes | None = None) -> Path:
        path = save_dir / name
        if raw is None:
            raw = json.dumps({"dungeon_lvl": level, "players": ["Tim"]}).encode("utf-8")
        path.write_bytes(raw)
        return path

    return _write
