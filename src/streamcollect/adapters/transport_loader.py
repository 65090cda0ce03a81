"""Resolve the configured aggregator transport.

The transport is chosen by a ``module:attribute`` reference so the watcher
can be pointed at any client library without touching the core.
"""

from __future__ import annotations

import importlib
import logging

from streamcollect.core.config import ConfigurationError
from streamcollect.core.ports import TransportPort

LOGGER = logging.getLogger(__name__)


def load_transport(reference: str) -> TransportPort:
    """Import ``module:attribute`` and call it to build a transport."""

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(f"Transport must be given as 'module:attribute', got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import transport module {module_name!r}: {exc}") from exc

    factory = module
    for part in attribute.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError:
            raise ConfigurationError(f"{module_name!r} has no attribute {attribute!r}") from None

    if not callable(factory):
        raise ConfigurationError(f"Transport {reference!r} is not callable")

    transport = factory()
    if not callable(getattr(transport, "subscribe", None)):
        raise ConfigurationError(f"Transport {reference!r} does not provide subscribe()")

    LOGGER.info("Using transport %s", reference)
    return transport
