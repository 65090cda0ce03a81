"""Identifier sets used by the local admission filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable


@dataclass(frozen=True)
class IdentifierSet:
    """Immutable set of identifiers where an empty set matches everything."""

    values: FrozenSet[int] = frozenset()

    @classmethod
    def build(cls, values: Iterable[int]) -> "IdentifierSet":
        return cls(frozenset(values))

    @property
    def is_unrestricted(self) -> bool:
        return not self.values

    def contains(self, identifier: int) -> bool:
        return not self.values or identifier in self.values

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, int) and self.contains(identifier)

    def __len__(self) -> int:
        return len(self.values)
