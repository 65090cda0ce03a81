"""Core subscription dispatcher.

This module is transport-agnostic. It only relies on ports for delivery and
output, so any aggregator client can drive it without changes here.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, List, Optional

from streamcollect.core.config import Endpoint
from streamcollect.core.formatting import OutputMode, current_time_ms, format_sample
from streamcollect.core.models import SampleRecord
from streamcollect.core.ports import OutputPort, TransportPort
from streamcollect.core.subscription import Subscription

LOGGER = logging.getLogger(__name__)


class SubscriptionDispatcher:
    """Registers the rule with every endpoint and filters what comes back."""

    def __init__(
        self,
        subscription: Subscription,
        endpoints: Iterable[Endpoint],
        output: OutputPort,
        mode: OutputMode = OutputMode.DECIMAL,
        clock: Callable[[], int] = current_time_ms,
        hex_uses_clock: bool = True,
    ) -> None:
        self._subscription = subscription
        self._endpoints = list(endpoints)
        self._output = output
        self._mode = mode
        self._clock = clock
        self._hex_uses_clock = hex_uses_clock
        self._tasks: List[asyncio.Task] = []
        self._stopped: Optional[asyncio.Event] = None

    @property
    def subscription(self) -> Subscription:
        return self._subscription

    @property
    def endpoints(self) -> List[Endpoint]:
        return list(self._endpoints)

    async def deliver(self, sample: SampleRecord) -> None:
        """Admit, format, and write one sample delivered by a transport."""

        if not self._subscription.admission.accept(sample.tx_id, sample.rx_id):
            LOGGER.debug("Dropped sample from receiver %s transmitter %s", sample.rx_id, sample.tx_id)
            return

        line = format_sample(
            sample,
            self._mode,
            clock=self._clock,
            hex_uses_clock=self._hex_uses_clock,
        )
        self._output.write_line(line)

    async def start(self, transport: TransportPort) -> None:
        """Register the rule with each endpoint without waiting on any of them."""

        rule = self._subscription.rule
        LOGGER.info(
            "Subscribing to %s aggregator(s): physical layer %s, %s transmitter(s), %s receiver(s)",
            len(self._endpoints),
            rule.physical_layer,
            len(rule.txers) or "all",
            len(self._subscription.admission.rx_ids) or "all",
        )
        for endpoint in self._endpoints:
            task = asyncio.create_task(
                transport.subscribe(endpoint, rule, self),
                name=f"subscription {endpoint}",
            )
            task.add_done_callback(self._report_finished)
            self._tasks.append(task)

    def _report_finished(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            LOGGER.error("%s failed", task.get_name(), exc_info=error)
        else:
            LOGGER.info("%s ended", task.get_name())

    def stop(self) -> None:
        """Release ``run_until_stopped``; safe to call before it starts."""

        if self._stopped is None:
            self._stopped = asyncio.Event()
        self._stopped.set()

    async def run_until_stopped(self) -> None:
        """Block until ``stop`` is called, then cancel the subscriptions."""

        if self._stopped is None:
            self._stopped = asyncio.Event()
        try:
            await self._stopped.wait()
        finally:
            for task in self._tasks:
                task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)
            self._tasks.clear()
