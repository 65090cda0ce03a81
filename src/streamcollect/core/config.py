"""Core configuration types.

We keep config reading outside the core, but these types define the shape
the core expects so adapters and the app layer can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


class ConfigurationError(ValueError):
    """Raised when setup input cannot be turned into a subscription."""


@dataclass(frozen=True)
class Endpoint:
    """Address of one aggregator the rule is registered with."""

    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_endpoints(values: list[str]) -> list[Endpoint]:
    """Turn a flat ``[host, port, host, port, ...]`` list into endpoints."""

    if not values or len(values) % 2:
        raise ConfigurationError("Aggregators must be given as one or more <host> <port> pairs")

    endpoints: list[Endpoint] = []
    for host, raw_port in zip(values[::2], values[1::2]):
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(f"Invalid aggregator port: {raw_port!r}") from None
        if not 0 <= port <= 0xFFFF:
            raise ConfigurationError(f"Aggregator port out of range: {port}")
        endpoints.append(Endpoint(host=host, port=port))
    return endpoints
