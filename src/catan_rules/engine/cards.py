from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple


class CardCounts:
    """Non-negative card counts keyed by a closed set of enum members.

    ``remove`` is the only way counts go down and it refuses to overdraw, so a
    count can never become negative or be keyed by an unknown card type.
    """

    def __init__(self, card_types: Iterable[Enum], counts: Optional[Mapping[Enum, int]] = None):
        self._counts: Dict[Enum, int] = {card_type: 0 for card_type in card_types}
        for card_type, amount in (counts or {}).items():
            self.add(card_type, amount)

    def __getitem__(self, card_type: Enum) -> int:
        return self._counts.get(card_type, 0)

    def __iter__(self) -> Iterator[Enum]:
        return iter(self._counts)

    def __contains__(self, card_type: object) -> bool:
        return card_type in self._counts

    def items(self) -> Iterable[Tuple[Enum, int]]:
        return self._counts.items()

    def total(self) -> int:
        return sum(self._counts.values())

    def add(self, card_type: Enum, amount: int = 1) -> None:
        self._check_key(card_type)
        if amount < 0:
            raise ValueError(f"Cannot add a negative amount of {card_type}: {amount}")
        self._counts[card_type] += amount

    def can_remove(self, card_type: Enum, amount: int = 1) -> bool:
        return card_type in self._counts and 0 <= amount <= self._counts[card_type]

    def remove(self, card_type: Enum, amount: int = 1) -> None:
        if not self.can_remove(card_type, amount):
            raise ValueError(
                f"Cannot remove {amount} x {card_type}: only {self[card_type]} held"
            )
        self._counts[card_type] -= amount

    def covers(self, bundle: Mapping[Enum, int]) -> bool:
        return all(self.can_remove(card_type, amount) for card_type, amount in bundle.items())

    def view(self) -> Mapping[Enum, int]:
        return MappingProxyType(dict(self._counts))

    def _check_key(self, card_type: Enum) -> None:
        if card_type not in self._counts:
            raise ValueError(f"Unknown card type: {card_type}")

    def __repr__(self) -> str:
        counts = ", ".join(f"{key.value}={value}" for key, value in self._counts.items())
        return f"CardCounts({counts})"
