"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any transport-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

# Identifiers are flat 128-bit values.
IDENTIFIER_BITS = 128
ALL_ONES_MASK = (1 << IDENTIFIER_BITS) - 1


@dataclass(frozen=True)
class SampleRecord:
    """One reading delivered by a transport, read-only for the core."""

    tx_id: int
    rx_id: int
    rx_timestamp: int
    rss: float
    sense_data: Tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TransmitterSpec:
    """Transmitter filter handed to the remote side of a subscription."""

    base_id: int
    mask: int = ALL_ONES_MASK

    def matches(self, identifier: int) -> bool:
        """Return True when the masked bits of ``identifier`` equal the base."""

        return (identifier & self.mask) == (self.base_id & self.mask)


@dataclass(frozen=True)
class SubscriptionRule:
    """What the remote side should send us.

    ``physical_layer`` 0 requests every layer and ``update_interval`` 0 asks
    for samples as fast as they are available.
    """

    physical_layer: int = 0
    update_interval: int = 0
    txers: Tuple[TransmitterSpec, ...] = ()
