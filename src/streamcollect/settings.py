"""Static configuration for streamcollect.

Process-level settings come from the environment (optionally a ``.env``
file) so the command line only carries what changes between runs: the
identifier file and the aggregator addresses.
"""

from __future__ import annotations

import os
from typing import Tuple

from dotenv import load_dotenv

from streamcollect.core.config import ConfigurationError

load_dotenv()

# Transport factory as "module:attribute"; required by the run command.
TRANSPORT = os.getenv("STREAMCOLLECT_TRANSPORT", "")

# Hex output prints the local clock in the time column unless set to "sample".
HEX_TIMESTAMP = os.getenv("STREAMCOLLECT_HEX_TIMESTAMP", "clock").strip().lower()

# Logging configuration. Records go to stdout, so logs always use stderr.
LOG_LEVEL = os.getenv("STREAMCOLLECT_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("STREAMCOLLECT_LOG_FILE", "")
LOG_MAX_BYTES = os.getenv("STREAMCOLLECT_LOG_MAX_BYTES", str(5 * 1024 * 1024))
LOG_BACKUP_COUNT = os.getenv("STREAMCOLLECT_LOG_BACKUP_COUNT", "5")


def log_rotation() -> Tuple[int, int]:
    """Return (max_bytes, backup_count) for the rotating log file."""

    try:
        return int(LOG_MAX_BYTES), int(LOG_BACKUP_COUNT)
    except ValueError:
        raise ConfigurationError(
            "STREAMCOLLECT_LOG_MAX_BYTES and STREAMCOLLECT_LOG_BACKUP_COUNT must be integers"
        ) from None


def hex_uses_clock() -> bool:
    if HEX_TIMESTAMP not in {"clock", "sample"}:
        raise ConfigurationError("STREAMCOLLECT_HEX_TIMESTAMP must be 'clock' or 'sample'")
    return HEX_TIMESTAMP == "clock"


def read_identifier_lines(path: str) -> Tuple[str, str]:
    """Return the (transmitters, receivers) lines of an identifier file.

    A missing line means an empty, unrestricted list.
    """

    try:
        with open(path, "r", encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError as exc:
        raise ConfigurationError(f"Error opening config file {path}: {exc.strerror or exc}") from exc

    lines += ["", ""]
    return lines[0], lines[1]
