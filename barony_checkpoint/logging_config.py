import logging
import os
import sys

LOG_LEVEL_ENV = "BARONY_CHECKPOINT_LOG_LEVEL"


def configure_logging(default_level: int = logging.INFO) -> None:
    """Send log lines to stdout; BARONY_CHECKPOINT_LOG_LEVEL overrides the level."""
    level = default_level
    level_name = os.getenv(LOG_LEVEL_ENV)
    if level_name:
        named = getattr(logging, level_name.upper(), None)
        if isinstance(named, int):
            level = named

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate output when called more than once
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
