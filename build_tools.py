import subprocess
import sys

# watchdog picks its observer at runtime, so PyInstaller cannot see it
OBSERVER_IMPORTS = {
    "linux": "watchdog.observers.inotify",
    "win32": "watchdog.observers.read_directory_changes",
    "darwin": "watchdog.observers.fsevents",
}


def build_command(platform: str = sys.platform) -> list[str]:
    key = next((k for k in OBSERVER_IMPORTS if platform.startswith(k)), None)
    if key is None:
        raise RuntimeError(f"no build recipe for platform {platform!r}")

    return [
        "pyinstaller",
        "--onefile",
        "--name",
        "BaronyCheckpoint",
        "--hidden-import",
        OBSERVER_IMPORTS[key],
        "--collect-all",
        "pynput",
        "--clean",
        "barony_checkpoint/__main__.py",
    ]


def build(platform: str = sys.platform) -> None:
    subprocess.run(build_command(platform), check=True)


if __name__ == "__main__":
    build()
