"""Subscription rule construction (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import List

from streamcollect.core.admission import AdmissionFilter
from streamcollect.core.config import ConfigurationError
from streamcollect.core.identifiers import IdentifierSet
from streamcollect.core.models import ALL_ONES_MASK, SubscriptionRule, TransmitterSpec

MAX_PHYSICAL_LAYER = 0xFF

_DECIMAL_TOKEN = re.compile(r"[0-9]+")
_HEX_TOKEN = re.compile(r"(0[xX])?[0-9a-fA-F]+")


@dataclass(frozen=True)
class Subscription:
    """Everything built from configuration: the remote rule and local filter."""

    rule: SubscriptionRule
    admission: AdmissionFilter


def parse_identifiers(line: str, use_hex: bool = False) -> List[int]:
    """Parse one whitespace-separated line of identifiers.

    Tokens are decimal unless ``use_hex`` is set, in which case they are read
    as hexadecimal with an optional ``0x`` prefix. Anything that is not an
    unsigned 128-bit value is a configuration error.
    """

    base = 16 if use_hex else 10
    pattern = _HEX_TOKEN if use_hex else _DECIMAL_TOKEN
    identifiers: List[int] = []
    for token in line.split():
        # Plain ASCII digits only: no signs, underscores or other scripts.
        if not pattern.fullmatch(token):
            raise ConfigurationError(f"Malformed identifier {token!r}")
        value = int(token, base)
        if value > ALL_ONES_MASK:
            raise ConfigurationError(f"Identifier {token!r} is not an unsigned 128-bit value")
        identifiers.append(value)
    return identifiers


def build_subscription(
    tx_line: str,
    rx_line: str,
    physical_layer: int = 0,
    use_hex: bool = False,
) -> Subscription:
    """Build the subscription rule and admission filter from identifier lines.

    Transmitters are sent to the remote side as exact-match specs and also
    populate the local tx allow-list. Receivers are only ever checked
    locally because aggregators cannot filter on them.
    """

    if not 0 <= physical_layer <= MAX_PHYSICAL_LAYER:
        raise ConfigurationError(f"Physical layer must be between 0 and {MAX_PHYSICAL_LAYER}")

    tx_values = parse_identifiers(tx_line, use_hex)
    rx_values = parse_identifiers(rx_line, use_hex)

    rule = SubscriptionRule(
        physical_layer=physical_layer,
        update_interval=0,
        txers=tuple(TransmitterSpec(base_id=value, mask=ALL_ONES_MASK) for value in tx_values),
    )
    admission = AdmissionFilter(
        tx_ids=IdentifierSet.build(tx_values),
        rx_ids=IdentifierSet.build(rx_values),
    )
    return Subscription(rule=rule, admission=admission)
