from __future__ import annotations

import asyncio
import logging

from streamcollect.core.config import Endpoint
from streamcollect.core.dispatcher import SubscriptionDispatcher
from streamcollect.core.formatting import OutputMode
from streamcollect.core.models import SampleRecord, SubscriptionRule
from streamcollect.core.subscription import build_subscription


class FakeOutput:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)


class FakeTransport:
    def __init__(self, failing: set[Endpoint] | None = None) -> None:
        self.registered: list[tuple[Endpoint, SubscriptionRule]] = []
        self._failing = failing or set()

    async def subscribe(self, endpoint: Endpoint, rule: SubscriptionRule, sink) -> None:
        if endpoint in self._failing:
            raise ConnectionRefusedError(f"{endpoint} refused")
        self.registered.append((endpoint, rule))


def _sample(tx_id: int, rx_id: int) -> SampleRecord:
    return SampleRecord(tx_id=tx_id, rx_id=rx_id, rx_timestamp=1000, rss=-42, sense_data=(1, 2, 3))


def _dispatcher(output: FakeOutput, endpoints=(), mode=OutputMode.DECIMAL) -> SubscriptionDispatcher:
    return SubscriptionDispatcher(
        subscription=build_subscription("10", "20"),
        endpoints=endpoints,
        output=output,
        mode=mode,
        clock=lambda: 77,
    )


def test_accepted_sample_is_formatted_and_written() -> None:
    output = FakeOutput()
    dispatcher = _dispatcher(output)

    asyncio.run(dispatcher.deliver(_sample(10, 20)))

    assert output.lines == ["20\t1000\t10\t0\t-42\t0x00\tExtra:3\t1\t2\t3\n"]


def test_rejected_samples_are_dropped_silently() -> None:
    output = FakeOutput()
    dispatcher = _dispatcher(output)

    async def scenario() -> None:
        await dispatcher.deliver(_sample(11, 20))
        await dispatcher.deliver(_sample(10, 21))

    asyncio.run(scenario())

    assert output.lines == []


def test_hex_mode_is_passed_to_formatter() -> None:
    output = FakeOutput()
    dispatcher = _dispatcher(output, mode=OutputMode.HEX)

    asyncio.run(dispatcher.deliver(_sample(10, 20)))

    assert output.lines == ["14\t4d\ta\t0\t-42\t0x00\tExtra:3\t1\t2\t3\n"]


def test_rule_is_registered_with_every_endpoint() -> None:
    endpoints = [Endpoint("agg-1", 7008), Endpoint("agg-2", 7008), Endpoint("agg-3", 7009)]
    transport = FakeTransport()
    dispatcher = _dispatcher(FakeOutput(), endpoints=endpoints)

    async def scenario() -> None:
        await dispatcher.start(transport)
        await asyncio.sleep(0.01)
        dispatcher.stop()
        await dispatcher.run_until_stopped()

    asyncio.run(scenario())

    assert [endpoint for endpoint, _ in transport.registered] == endpoints
    assert all(rule is dispatcher.subscription.rule for _, rule in transport.registered)


def test_failed_registration_does_not_affect_other_endpoints(caplog) -> None:
    bad = Endpoint("down", 1)
    good = Endpoint("up", 2)
    transport = FakeTransport(failing={bad})
    dispatcher = _dispatcher(FakeOutput(), endpoints=[bad, good])

    async def scenario() -> None:
        await dispatcher.start(transport)
        await asyncio.sleep(0.01)
        dispatcher.stop()
        await dispatcher.run_until_stopped()

    with caplog.at_level(logging.ERROR, logger="streamcollect.core.dispatcher"):
        asyncio.run(scenario())

    assert [endpoint for endpoint, _ in transport.registered] == [good]
    assert "subscription down:1 failed" in caplog.text


def test_stop_cancels_long_running_subscriptions() -> None:
    started = []

    class BlockingTransport:
        async def subscribe(self, endpoint, rule, sink) -> None:
            started.append(endpoint)
            await asyncio.Event().wait()

    dispatcher = _dispatcher(FakeOutput(), endpoints=[Endpoint("agg", 7008)])

    async def scenario() -> None:
        await dispatcher.start(BlockingTransport())
        asyncio.get_running_loop().call_later(0.01, dispatcher.stop)
        await dispatcher.run_until_stopped()

    asyncio.run(asyncio.wait_for(scenario(), timeout=5))

    assert started == [Endpoint("agg", 7008)]
