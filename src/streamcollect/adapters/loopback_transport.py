"""In-process aggregator transport.

Samples are published straight into per-endpoint queues instead of arriving
over a network. Each subscribed endpoint gets its own delivery task, and the
rule's transmitter specs are applied before delivery the way an aggregator
filters on its side.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from streamcollect.core.config import Endpoint
from streamcollect.core.models import SampleRecord, SubscriptionRule
from streamcollect.core.ports import SampleSink

LOGGER = logging.getLogger(__name__)


def rule_admits(rule: SubscriptionRule, sample: SampleRecord) -> bool:
    """Remote-side check: no transmitter specs means every transmitter."""

    if not rule.txers:
        return True
    return any(spec.matches(sample.tx_id) for spec in rule.txers)


class LoopbackTransport:
    """TransportPort whose samples come from ``publish`` calls."""

    def __init__(self) -> None:
        self._queues: Dict[Endpoint, asyncio.Queue] = {}
        self._rules: Dict[Endpoint, SubscriptionRule] = {}

    def _queue(self, endpoint: Endpoint) -> asyncio.Queue:
        queue = self._queues.get(endpoint)
        if queue is None:
            queue = asyncio.Queue()
            self._queues[endpoint] = queue
        return queue

    def rule_for(self, endpoint: Endpoint) -> Optional[SubscriptionRule]:
        return self._rules.get(endpoint)

    def publish(self, endpoint: Endpoint, sample: SampleRecord) -> None:
        self._queue(endpoint).put_nowait(sample)

    async def drain(self) -> None:
        """Wait until every published sample has been handed to its sink."""

        for queue in list(self._queues.values()):
            await queue.join()

    async def subscribe(self, endpoint: Endpoint, rule: SubscriptionRule, sink: SampleSink) -> None:
        self._rules[endpoint] = rule
        queue = self._queue(endpoint)
        LOGGER.info("Loopback subscription registered for %s", endpoint)
        while True:
            sample = await queue.get()
            try:
                if rule_admits(rule, sample):
                    await sink.deliver(sample)
            finally:
                queue.task_done()
