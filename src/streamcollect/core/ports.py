"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for transport and output adapters so
that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol

from streamcollect.core.config import Endpoint
from streamcollect.core.models import SampleRecord, SubscriptionRule


class SampleSink(Protocol):
    """Callback target a transport invokes once per arriving sample."""

    async def deliver(self, sample: SampleRecord) -> None:
        ...


class TransportPort(Protocol):
    """Subscription operations required from an aggregator transport.

    ``subscribe`` runs for the lifetime of the subscription and owns
    connecting, reconnecting, and decoding the stream.
    """

    async def subscribe(self, endpoint: Endpoint, rule: SubscriptionRule, sink: SampleSink) -> None:
        ...


class OutputPort(Protocol):
    """Line-oriented output; a whole line must be written atomically."""

    def write_line(self, line: str) -> None:
        ...
