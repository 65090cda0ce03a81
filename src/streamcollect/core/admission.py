"""Local admission filter (core domain).

Remote aggregators may filter coarsely by transmitter only, so every sample
is checked again here against both allow-lists. This is the authoritative
decision; it can be stricter than the remote filter but never looser.
"""

from __future__ import annotations

from dataclasses import dataclass

from streamcollect.core.identifiers import IdentifierSet


@dataclass(frozen=True)
class AdmissionFilter:
    """Transmitter/receiver allow-list check for one sample."""

    tx_ids: IdentifierSet = IdentifierSet()
    rx_ids: IdentifierSet = IdentifierSet()

    def accept(self, tx_id: int, rx_id: int) -> bool:
        return self.tx_ids.contains(tx_id) and self.rx_ids.contains(rx_id)
