"""Sample record formatting.

Keeping formatting here prevents drift between sinks and keeps the line
layout identical regardless of where the output goes.
"""

from __future__ import annotations

import enum
import time
from typing import Callable, List

from streamcollect.core.models import SampleRecord

# Fields 4 and 6 are reserved and always printed as these literals.
RESERVED_FIELD = "0"
RESERVED_FLAGS = "0x00"
EXTRA_LABEL = "Extra:"
FIXED_FIELD_COUNT = 7


class OutputMode(enum.Enum):
    DECIMAL = "decimal"
    HEX = "hex"


def current_time_ms() -> int:
    """Wall-clock time in milliseconds since the Unix epoch."""

    return time.time_ns() // 1_000_000


def _format_id(identifier: int, mode: OutputMode) -> str:
    if mode is OutputMode.HEX:
        return format(identifier, "x")
    return str(identifier)


def _format_rss(rss: float) -> str:
    # Six significant digits, as captures have always been written.
    if isinstance(rss, float):
        return format(rss, "g")
    return str(rss)


def format_sample(
    sample: SampleRecord,
    mode: OutputMode = OutputMode.DECIMAL,
    clock: Callable[[], int] = current_time_ms,
    hex_uses_clock: bool = True,
) -> str:
    """Render one accepted sample as a newline-terminated tab-separated line.

    Layout: rx_id, time, tx_id, 0, rss, 0x00, Extra:<k>, then the k sense
    values. In hex mode the first three fields are hex and the time field is
    read from ``clock`` instead of the sample. With ``hex_uses_clock`` False
    the sample timestamp is kept and printed in decimal.
    """

    if mode is OutputMode.HEX and hex_uses_clock:
        timestamp = format(clock(), "x")
    else:
        timestamp = str(sample.rx_timestamp)

    fields: List[str] = [
        _format_id(sample.rx_id, mode),
        timestamp,
        _format_id(sample.tx_id, mode),
        RESERVED_FIELD,
        _format_rss(sample.rss),
        RESERVED_FLAGS,
        f"{EXTRA_LABEL}{len(sample.sense_data)}",
    ]
    fields.extend(str(int(value)) for value in sample.sense_data)
    return "\t".join(fields) + "\n"
