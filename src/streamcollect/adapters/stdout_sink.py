"""Text stream output adapter.

Implements the core OutputPort on top of any text stream, stdout by default.
"""

from __future__ import annotations

import sys
import threading
from typing import Optional, TextIO


class StreamOutput:
    """Writes whole lines to a text stream under a lock.

    Transports may deliver from several tasks or threads at once; holding the
    lock across write and flush keeps lines from interleaving.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so redirected stdout (tests, daemons) is honored.
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, line: str) -> None:
        if not line.endswith("\n"):
            line += "\n"
        with self._lock:
            stream = self.stream
            stream.write(line)
            stream.flush()
