"""Application entry point for the streamcollect subscriber."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import text2art

from streamcollect import settings
from streamcollect.adapters.stdout_sink import StreamOutput
from streamcollect.adapters.transport_loader import load_transport
from streamcollect.core.config import ConfigurationError, Endpoint, parse_endpoints
from streamcollect.core.dispatcher import SubscriptionDispatcher
from streamcollect.core.formatting import OutputMode
from streamcollect.core.ports import TransportPort
from streamcollect.core.subscription import Subscription, build_subscription

NAME = "STREAMCOLLECT"
FONT = "small"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    # stdout carries the sample records.
    sys.stderr.write(text2art(NAME, font=FONT))
    sys.stderr.flush()


def _configure_logging() -> None:
    level_name = str(settings.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if settings.LOG_FILE:
        max_bytes, backup_count = settings.log_rotation()
        file_handler = RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers)


def load_subscription(config_path: str, physical_layer: int, use_hex: bool) -> Subscription:
    """Read the identifier file and build the subscription from it."""

    tx_line, rx_line = settings.read_identifier_lines(config_path)
    subscription = build_subscription(tx_line, rx_line, physical_layer=physical_layer, use_hex=use_hex)
    if physical_layer:
        LOGGER.info("Using physical layer %s", physical_layer)
    return subscription


async def _serve(dispatcher: SubscriptionDispatcher, transport: TransportPort) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, dispatcher.stop)
        except NotImplementedError:
            # Not available on every platform; KeyboardInterrupt still ends the run.
            pass

    await dispatcher.start(transport)
    LOGGER.info("Subscriptions registered. Streaming samples...")
    await dispatcher.run_until_stopped()


def _run(args: argparse.Namespace) -> int:
    endpoints: list[Endpoint] = args.endpoints
    subscription = load_subscription(args.config, args.phy, args.hex)

    if not settings.TRANSPORT:
        raise ConfigurationError("STREAMCOLLECT_TRANSPORT is required to connect to aggregators")
    transport = load_transport(settings.TRANSPORT)

    dispatcher = SubscriptionDispatcher(
        subscription=subscription,
        endpoints=endpoints,
        output=StreamOutput(),
        mode=OutputMode.HEX if args.hex else OutputMode.DECIMAL,
        hex_uses_clock=settings.hex_uses_clock(),
    )
    try:
        asyncio.run(_serve(dispatcher, transport))
    except KeyboardInterrupt:
        pass
    LOGGER.info("Stopped")
    return 0


def _check(args: argparse.Namespace) -> int:
    subscription = load_subscription(args.config, args.phy, args.hex)
    rule = subscription.rule
    admission = subscription.admission
    LOGGER.info(
        "Configuration OK: physical layer %s, transmitters=%s, receivers=%s",
        rule.physical_layer,
        ", ".join(str(spec.base_id) for spec in rule.txers) or "all",
        ", ".join(str(rx) for rx in sorted(admission.rx_ids.values)) or "all",
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="streamcollect")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "config",
        help="Identifier file: transmitters on the first line, receivers on the second",
    )
    common.add_argument("--hex", action="store_true", help="Read and print identifiers in hexadecimal")
    common.add_argument(
        "--phy",
        type=int,
        default=0,
        help="Physical layer to request packets from (0 = all layers)",
    )

    run_parser = subparsers.add_parser("run", parents=[common], help="Subscribe and stream samples")
    run_parser.add_argument(
        "aggregators",
        nargs="+",
        metavar="ADDRESS",
        help="One or more aggregator host/port pairs",
    )
    subparsers.add_parser("check", parents=[common], help="Validate the identifier file and exit")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "run":
        try:
            args.endpoints = parse_endpoints(args.aggregators)
        except ConfigurationError as exc:
            parser.error(str(exc))
    return args


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    _print_banner()

    try:
        _configure_logging()
        if args.command == "check":
            return _check(args)
        return _run(args)
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
