"""Runtime configuration defaults for the memberpoints CLI."""

import logging
import os
from pathlib import Path

DB_ENV_VAR = "MEMBERPOINTS_DB"
PERIOD_ENV_VAR = "MEMBERPOINTS_PERIOD"
LOCK_DIR_ENV_VAR = "MEMBERPOINTS_LOCK_DIR"
LOCK_TIMEOUT_ENV_VAR = "MEMBERPOINTS_LOCK_TIMEOUT"

DEFAULT_DB_PATH = Path.home() / ".memberpoints" / "memberpoints.db"
DEFAULT_LOCK_DIR = Path.home() / ".memberpoints" / "locks"
DEFAULT_LOCK_TIMEOUT = 60.0

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for a CLI invocation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def lock_dir() -> Path:
    """Directory holding the per-period lock files shared by every process."""
    return Path(os.environ.get(LOCK_DIR_ENV_VAR) or DEFAULT_LOCK_DIR)


def lock_timeout() -> float:
    """Seconds to wait for another process to release a period lock."""
    return float(os.environ.get(LOCK_TIMEOUT_ENV_VAR) or DEFAULT_LOCK_TIMEOUT)
