import pytest

from catan_rules.engine.cards import CardCounts
from catan_rules.engine.constants import MAX_CITIES, MAX_ROADS, MAX_SETTLEMENTS, RESOURCE_TYPES
from catan_rules.engine.player import Player
from catan_rules.engine.types import DevelopmentCardType, PlayerColour, PurchaseType, ResourceType

from helpers import ScriptedRandom

WOOD = ResourceType.WOOD
BRICK = ResourceType.BRICK
SHEEP = ResourceType.SHEEP
WHEAT = ResourceType.WHEAT
ORE = ResourceType.ORE


def _player_with(**cards: int) -> Player:
    player = Player(PlayerColour.RED)
    for name, amount in cards.items():
        player.add_resource_card(ResourceType(name), amount)
    return player


def test_card_counts_refuse_overdraw_and_unknown_types():
    counts = CardCounts(RESOURCE_TYPES, {WOOD: 2})
    with pytest.raises(ValueError):
        counts.remove(WOOD, 3)
    with pytest.raises(ValueError):
        counts.add(ResourceType.DESERT)
    with pytest.raises(ValueError):
        counts.add(WOOD, -1)
    assert counts[WOOD] == 2
    assert counts.total() == 2


def test_card_counts_view_is_read_only():
    counts = CardCounts(RESOURCE_TYPES)
    view = counts.view()
    with pytest.raises(TypeError):
        view[WOOD] = 5
    counts.add(WOOD)
    assert view[WOOD] == 0


def test_new_player_has_full_supply_of_pieces():
    player = Player(PlayerColour.BLUE)
    assert player.remaining_roads == MAX_ROADS
    assert player.remaining_settlements == MAX_SETTLEMENTS
    assert player.remaining_cities == MAX_CITIES
    assert player.total_resource_cards == 0
    assert not player.has_longest_road
    assert not player.has_largest_army


def test_place_road_spends_cost():
    player = _player_with(wood=1, brick=2)
    assert player.can_place_road()
    spent = player.place_road()
    assert spent == {WOOD: 1, BRICK: 1}
    assert player.resource_cards[BRICK] == 1
    assert player.remaining_roads == MAX_ROADS - 1
    assert not player.can_place_road()


def test_city_returns_settlement_piece():
    player = _player_with(wheat=2, ore=3)
    player.place_free_settlement()
    assert player.can_place_city()
    player.place_city()
    assert player.remaining_settlements == MAX_SETTLEMENTS
    assert player.remaining_cities == MAX_CITIES - 1
    assert player.total_resource_cards == 0


def test_cannot_place_without_pieces():
    player = _player_with(wood=20, brick=20)
    player.remaining_roads = 0
    assert not player.can_place_road()
    assert not player.can_place_free_road()
    with pytest.raises(ValueError):
        player.place_free_road()


def test_free_road_count():
    player = Player(PlayerColour.RED)
    player.remaining_roads = 1
    assert player.can_place_free_road()
    assert not player.can_place_free_road(2)


def test_affordability_of_development_card():
    player = _player_with(sheep=1, wheat=1)
    assert not player.can_afford(PurchaseType.DEVELOPMENT_CARD)
    player.add_resource_card(ORE)
    assert player.can_afford(PurchaseType.DEVELOPMENT_CARD)


def test_discard_requires_exact_amount_held():
    player = _player_with(wood=4, ore=4)
    assert not player.can_discard_resource_cards({WOOD: 3}, 4)
    assert not player.can_discard_resource_cards({WOOD: 5}, 5)
    assert not player.can_discard_resource_cards({WOOD: 5, ORE: -1}, 4)
    assert player.can_discard_resource_cards({WOOD: 2, ORE: 2}, 4)

    player.discard_resource_cards({WOOD: 2, ORE: 2})
    assert player.resource_cards[WOOD] == 2
    assert player.resource_cards[ORE] == 2


def test_bank_trade_ratios():
    player = _player_with(wood=9)
    assert player.can_trade_two_to_one(WOOD)
    assert player.can_trade_three_to_one(WOOD)
    assert player.can_trade_four_to_one(WOOD)
    assert not player.can_trade_two_to_one(BRICK)

    player.trade_two_to_one(WOOD, ORE)
    assert player.resource_cards[WOOD] == 7
    player.trade_three_to_one(WOOD, BRICK)
    assert player.resource_cards[WOOD] == 4
    assert player.resource_cards[BRICK] == 1
    player.trade_four_to_one(WOOD, ORE)
    assert player.resource_cards[WOOD] == 0
    assert player.resource_cards[ORE] == 2
    assert not player.can_trade_two_to_one(WOOD)


def test_remove_random_card_uses_randomizer():
    player = _player_with(wood=1, sheep=2, ore=1)
    rng = ScriptedRandom()
    # Index 2 falls on the second sheep in wood, brick, sheep, wheat, ore order.
    rng.queue(2)
    assert player.remove_random_resource_card(rng) == SHEEP
    rng.queue(2)
    assert player.remove_random_resource_card(rng) == ORE
    assert player.total_resource_cards == 2


def test_remove_random_card_from_empty_hand():
    player = Player(PlayerColour.RED)
    assert player.remove_random_resource_card(ScriptedRandom()) is None


def test_development_cards_wait_on_hold():
    player = Player(PlayerColour.ORANGE)
    player.add_development_card(DevelopmentCardType.KNIGHT)
    assert not player.can_play_development_card_of_type(DevelopmentCardType.KNIGHT)
    assert player.development_card_summary() == {"on_hold": ["knight"], "playable": []}

    player.move_on_hold_to_playable()
    assert player.can_play_development_card_of_type(DevelopmentCardType.KNIGHT)
    player.play_development_card(DevelopmentCardType.KNIGHT)
    assert player.knights_played == 1
    assert player.total_development_cards == 0


def test_embargo_set():
    player = Player(PlayerColour.RED)
    player.embargo_player(PlayerColour.BLUE)
    player.embargo_player(PlayerColour.BLUE)
    assert player.embargoed_colours == {PlayerColour.BLUE}
    assert player.has_embargoed(PlayerColour.BLUE)
    player.remove_embargo(PlayerColour.BLUE)
    player.remove_embargo(PlayerColour.WHITE)
    assert not player.has_embargoed(PlayerColour.BLUE)
