from __future__ import annotations

from typing import Dict, FrozenSet, List, Mapping, Optional, Set

from ..utils.randomness import Randomizer
from .cards import CardCounts
from .constants import (
    BUILD_COSTS,
    FOUR_TO_ONE,
    MAX_CITIES,
    MAX_ROADS,
    MAX_SETTLEMENTS,
    RESOURCE_TYPES,
    THREE_TO_ONE,
    TWO_TO_ONE,
)
from .types import DevelopmentCardType, PlayerColour, PurchaseType, ResourceType


class Player:
    """One seat at the table: hand, development cards, pieces and flags."""

    def __init__(self, colour: PlayerColour):
        self.colour = colour
        self._resources = CardCounts(RESOURCE_TYPES)
        self._on_hold_cards = CardCounts(DevelopmentCardType)
        self._playable_cards = CardCounts(DevelopmentCardType)
        self._played_cards = CardCounts(DevelopmentCardType)
        self.remaining_roads = MAX_ROADS
        self.remaining_settlements = MAX_SETTLEMENTS
        self.remaining_cities = MAX_CITIES
        self.has_longest_road = False
        self.has_largest_army = False
        self._embargoed: Set[PlayerColour] = set()

    def __repr__(self) -> str:
        return f"Player({self.colour.value}, cards={self.total_resource_cards})"

    # -- resource cards -------------------------------------------------

    @property
    def resource_cards(self) -> Mapping[ResourceType, int]:
        return self._resources.view()

    @property
    def total_resource_cards(self) -> int:
        return self._resources.total()

    def resource_card_count(self, resource_type: ResourceType) -> int:
        return self._resources[resource_type]

    def add_resource_card(self, resource_type: ResourceType, count: int = 1) -> None:
        self._resources.add(resource_type, count)

    def remove_resource_cards(self, resource_type: ResourceType, count: int = 1) -> None:
        self._resources.remove(resource_type, count)

    def has_resource_cards(self, bundle: Mapping[ResourceType, int]) -> bool:
        return self._resources.covers(bundle)

    def remove_random_resource_card(self, randomizer: Randomizer) -> Optional[ResourceType]:
        total = self._resources.total()
        if total == 0:
            return None

        pick = randomizer.uniform_int(0, total - 1)
        for resource_type, count in self._resources.items():
            if pick < count:
                self._resources.remove(resource_type)
                return resource_type
            pick -= count
        raise AssertionError("random pick fell outside the hand")

    def can_discard_resource_cards(self, cards: Mapping[ResourceType, int], required: int) -> bool:
        if any(amount < 0 for amount in cards.values()):
            return False
        if sum(cards.values()) != required:
            return False
        return self._resources.covers(cards)

    def discard_resource_cards(self, cards: Mapping[ResourceType, int]) -> None:
        if not self._resources.covers(cards):
            raise ValueError(f"{self.colour.value} cannot discard {dict(cards)}")
        for resource_type, amount in cards.items():
            self._resources.remove(resource_type, amount)

    # -- bank trades ----------------------------------------------------

    def can_trade_two_to_one(self, resource_type: ResourceType) -> bool:
        return self._resources[resource_type] >= TWO_TO_ONE

    def can_trade_three_to_one(self, resource_type: ResourceType) -> bool:
        return self._resources[resource_type] >= THREE_TO_ONE

    def can_trade_four_to_one(self, resource_type: ResourceType) -> bool:
        return self._resources[resource_type] >= FOUR_TO_ONE

    def trade(self, to_give: ResourceType, to_receive: ResourceType, ratio: int) -> None:
        self._resources.remove(to_give, ratio)
        self._resources.add(to_receive)

    def trade_two_to_one(self, to_give: ResourceType, to_receive: ResourceType) -> None:
        self.trade(to_give, to_receive, TWO_TO_ONE)

    def trade_three_to_one(self, to_give: ResourceType, to_receive: ResourceType) -> None:
        self.trade(to_give, to_receive, THREE_TO_ONE)

    def trade_four_to_one(self, to_give: ResourceType, to_receive: ResourceType) -> None:
        self.trade(to_give, to_receive, FOUR_TO_ONE)

    # -- pieces ---------------------------------------------------------

    def can_afford(self, purchase: PurchaseType) -> bool:
        return self._resources.covers(BUILD_COSTS[purchase])

    def pay_for(self, purchase: PurchaseType) -> Dict[ResourceType, int]:
        """Spend the cost of ``purchase`` and return the cards spent."""
        cost = BUILD_COSTS[purchase]
        if not self._resources.covers(cost):
            raise ValueError(f"{self.colour.value} cannot afford {purchase.value}")
        for resource_type, amount in cost.items():
            self._resources.remove(resource_type, amount)
        return dict(cost)

    def can_place_road(self) -> bool:
        return self.remaining_roads > 0 and self.can_afford(PurchaseType.ROAD)

    def can_place_settlement(self) -> bool:
        return self.remaining_settlements > 0 and self.can_afford(PurchaseType.SETTLEMENT)

    def can_place_city(self) -> bool:
        return self.remaining_cities > 0 and self.can_afford(PurchaseType.CITY)

    def can_place_free_road(self, count: int = 1) -> bool:
        return self.remaining_roads >= count

    def can_place_free_settlement(self) -> bool:
        return self.remaining_settlements > 0

    def place_road(self) -> Dict[ResourceType, int]:
        if self.remaining_roads <= 0:
            raise ValueError(f"{self.colour.value} has no roads left")
        spent = self.pay_for(PurchaseType.ROAD)
        self.remaining_roads -= 1
        return spent

    def place_settlement(self) -> Dict[ResourceType, int]:
        if self.remaining_settlements <= 0:
            raise ValueError(f"{self.colour.value} has no settlements left")
        spent = self.pay_for(PurchaseType.SETTLEMENT)
        self.remaining_settlements -= 1
        return spent

    def place_city(self) -> Dict[ResourceType, int]:
        if self.remaining_cities <= 0:
            raise ValueError(f"{self.colour.value} has no cities left")
        spent = self.pay_for(PurchaseType.CITY)
        self.remaining_cities -= 1
        # The upgraded settlement goes back into the box.
        self.remaining_settlements += 1
        return spent

    def place_free_road(self) -> None:
        if self.remaining_roads <= 0:
            raise ValueError(f"{self.colour.value} has no roads left")
        self.remaining_roads -= 1

    def place_free_settlement(self) -> None:
        if self.remaining_settlements <= 0:
            raise ValueError(f"{self.colour.value} has no settlements left")
        self.remaining_settlements -= 1

    # -- development cards ----------------------------------------------

    @property
    def on_hold_development_cards(self) -> Mapping[DevelopmentCardType, int]:
        return self._on_hold_cards.view()

    @property
    def playable_development_cards(self) -> Mapping[DevelopmentCardType, int]:
        return self._playable_cards.view()

    @property
    def played_development_cards(self) -> Mapping[DevelopmentCardType, int]:
        return self._played_cards.view()

    @property
    def total_development_cards(self) -> int:
        return self._on_hold_cards.total() + self._playable_cards.total()

    @property
    def knights_played(self) -> int:
        return self._played_cards[DevelopmentCardType.KNIGHT]

    def add_development_card(self, card_type: DevelopmentCardType) -> None:
        self._on_hold_cards.add(card_type)

    def move_on_hold_to_playable(self) -> None:
        for card_type, count in list(self._on_hold_cards.items()):
            if count:
                self._on_hold_cards.remove(card_type, count)
                self._playable_cards.add(card_type, count)

    def can_play_development_card_of_type(self, card_type: DevelopmentCardType) -> bool:
        return self._playable_cards[card_type] > 0

    def play_development_card(self, card_type: DevelopmentCardType) -> None:
        self._playable_cards.remove(card_type)
        self._played_cards.add(card_type)

    # -- achievements ---------------------------------------------------

    def add_largest_army_card(self) -> None:
        self.has_largest_army = True

    def remove_largest_army_card(self) -> None:
        self.has_largest_army = False

    def add_longest_road_card(self) -> None:
        self.has_longest_road = True

    def remove_longest_road_card(self) -> None:
        self.has_longest_road = False

    # -- embargoes ------------------------------------------------------

    @property
    def embargoed_colours(self) -> FrozenSet[PlayerColour]:
        return frozenset(self._embargoed)

    def embargo_player(self, colour: PlayerColour) -> None:
        self._embargoed.add(colour)

    def remove_embargo(self, colour: PlayerColour) -> None:
        self._embargoed.discard(colour)

    def has_embargoed(self, colour: PlayerColour) -> bool:
        return colour in self._embargoed

    def development_card_summary(self) -> Dict[str, List[str]]:
        return {
            "on_hold": _expand_names(self._on_hold_cards),
            "playable": _expand_names(self._playable_cards),
        }


def _expand_names(counts: CardCounts) -> List[str]:
    names: List[str] = []
    for card_type, count in counts.items():
        names.extend([card_type.value] * count)
    return names
