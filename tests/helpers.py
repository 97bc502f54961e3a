from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Tuple

from catan_rules.engine.constants import RESOURCE_TYPES
from catan_rules.engine.game import Game
from catan_rules.engine.player import Player
from catan_rules.engine.types import Coordinates, ResourceType
from catan_rules.utils.randomness import Randomizer, SeededRandom

C = Coordinates

# (settlement, road end) pairs, one per setup placement in order. No two
# settlements are adjacent and every road touches its own settlement.
SETUP_SPOTS: List[Tuple[Coordinates, Coordinates]] = [
    (C(2, 0), C(3, 0)),
    (C(6, 0), C(7, 0)),
    (C(0, 2), C(1, 2)),
    (C(10, 2), C(9, 2)),
    (C(4, 5), C(5, 5)),
    (C(8, 5), C(7, 5)),
    (C(3, 3), C(4, 3)),
    (C(7, 3), C(8, 3)),
]


class ScriptedRandom(Randomizer):
    """Seeded draws unless values have been queued."""

    def __init__(self, seed: int = 0):
        self._fallback = SeededRandom(seed)
        self._queued: Deque[int] = deque()

    def queue(self, *values: int) -> None:
        self._queued.extend(values)

    def uniform_int(self, minimum: int, maximum: int) -> int:
        if self._queued:
            value = self._queued.popleft()
            assert minimum <= value <= maximum, (value, minimum, maximum)
            return value
        return self._fallback.uniform_int(minimum, maximum)


def new_game(player_count: int = 3, seed: int = 0) -> Tuple[Game, ScriptedRandom]:
    rng = ScriptedRandom(seed)
    return Game(player_count, randomizer=rng), rng


def setup_spots(player_count: int) -> List[Tuple[Coordinates, Coordinates]]:
    return SETUP_SPOTS[: 2 * player_count]


def complete_setup(game: Game) -> None:
    for settlement, road_end in setup_spots(game.player_count):
        assert game.build_free_settlement(settlement)
        assert game.build_free_road(settlement, road_end)


def give(game: Game, player: Player, cards: Dict[ResourceType, int]) -> None:
    """Move cards from the bank to a player so totals stay conserved."""
    for resource_type, amount in cards.items():
        game._bank.remove(resource_type, amount)
        player.add_resource_card(resource_type, amount)


def clear_hand(game: Game, player: Player) -> None:
    for resource_type in RESOURCE_TYPES:
        count = player.resource_card_count(resource_type)
        if count:
            player.remove_resource_cards(resource_type, count)
            game._bank.add(resource_type, count)


def clear_all_hands(game: Game) -> None:
    for player in game.players:
        clear_hand(game, player)


def dice_for(total: int) -> Tuple[int, int]:
    first = min(6, total - 1)
    return first, total - first


def roll(game: Game, rng: ScriptedRandom, total: int) -> None:
    rng.queue(*dice_for(total))
    assert game.roll_dice()


def resource_totals(game: Game) -> Dict[ResourceType, int]:
    totals = dict(game.bank_resource_cards)
    for player in game.players:
        for resource_type, count in player.resource_cards.items():
            totals[resource_type] += count
    return totals


def play_turn(game: Game, rng: ScriptedRandom, total: int = 12) -> None:
    """Roll a non-seven and empty every hand so tests control the cards held."""
    roll(game, rng, total)
    clear_all_hands(game)


def trade_or_build(game: Game, rng: ScriptedRandom) -> None:
    play_turn(game, rng)
    assert game.begin_trade_or_build()
