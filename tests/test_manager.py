import pytest

from catan_rules.config import EngineConfig
from catan_rules.engine.constants import PLAYER_COLOURS
from catan_rules.engine.types import DevelopmentCardType, ResourceType
from catan_rules.errors import GameError
from catan_rules.service.manager import GameManager
from catan_rules.service.store import InMemorySnapshotStore

from helpers import SETUP_SPOTS, ScriptedRandom, clear_all_hands, give


def _edit(manager: GameManager, game_id: str, change) -> None:
    game = manager._store.load(game_id)
    change(game)
    manager._store.store(game_id, game, manager.config.snapshot_ttl_seconds)


def _setup(manager: GameManager, game_id: str, player_count: int = 3) -> None:
    for settlement, road_end in SETUP_SPOTS[: 2 * player_count]:
        assert manager.build_settlement(game_id, settlement.as_tuple()).is_success
        assert manager.build_road(game_id, settlement.as_tuple(), road_end.as_tuple()).is_success


def _colour_index(colour) -> int:
    return PLAYER_COLOURS.index(colour)


@pytest.fixture
def manager():
    return GameManager()


@pytest.fixture
def game_id(manager):
    return manager.create_new_game(3, seed=1).value


def test_create_and_read_status(manager, game_id):
    status = manager.get_game_status(game_id, 0)
    assert status.is_success
    view = status.value
    assert view["game_id"] == game_id
    assert view["phase"] == "first_round_setup"
    assert view["sub_phase"] == "build_settlement"
    assert view["bank"] == {"wood": 19, "brick": 19, "sheep": 19, "wheat": 19, "ore": 19}
    assert len(view["board"]["tiles"]) == 19
    assert len(view["board"]["ports"]) == 9
    assert view["player"]["colour"] == "red"
    assert len(view["opponents"]) == 2
    assert "resource_cards" not in view["opponents"][0]


def test_invalid_player_count(manager):
    assert manager.create_new_game(2).error == GameError.INVALID_PLAYER_COUNT
    assert manager.create_new_game(5).error == GameError.INVALID_PLAYER_COUNT


def test_unknown_game(manager):
    assert manager.get_game_status("missing", 0).error == GameError.GAME_NOT_FOUND
    assert manager.roll_dice("missing").error == GameError.GAME_NOT_FOUND


def test_invalid_colour(manager, game_id):
    assert manager.get_game_status(game_id, 3).error == GameError.INVALID_PLAYER_COLOUR
    assert manager.get_game_status(game_id, -1).error == GameError.INVALID_PLAYER_COLOUR
    assert manager.get_available_road_locations(game_id, 7).error == GameError.INVALID_PLAYER_COLOUR


def test_fixed_seed_is_deterministic(manager):
    first = manager.create_new_game(4, seed=11).value
    second = manager.create_new_game(4, seed=11).value
    _setup(manager, first, 4)
    _setup(manager, second, 4)

    first_order = manager.get_game_status(first, 0).value["turn_order"]
    assert first_order == manager.get_game_status(second, 0).value["turn_order"]
    assert manager.roll_dice(first).value == manager.roll_dice(second).value


def test_building_on_occupied_vertex(manager, game_id):
    assert manager.build_settlement(game_id, (2, 0)).is_success
    assert manager.build_road(game_id, (2, 0), (3, 0)).is_success

    assert manager.build_settlement(game_id, (2, 0)).error == GameError.INVALID_BUILD_LOCATION
    assert manager.build_settlement(game_id, (3, 0)).error == GameError.INVALID_BUILD_LOCATION
    assert manager.get_game_status(game_id, 0).value["sub_phase"] == "build_settlement"


def test_actions_in_wrong_phase(manager, game_id):
    assert manager.roll_dice(game_id).error == GameError.INVALID_GAME_PHASE
    assert manager.build_city(game_id, (2, 0)).error == GameError.INVALID_GAME_PHASE
    assert manager.build_road(game_id, (2, 0), (3, 0)).error == GameError.INVALID_GAME_PHASE
    assert manager.end_turn(game_id).error == GameError.INVALID_GAME_PHASE


def test_available_locations(manager, game_id):
    assert len(manager.get_available_settlement_locations(game_id, 0).value) == 54
    assert manager.get_available_road_locations(game_id, 0).value == []

    assert manager.build_settlement(game_id, (2, 0)).is_success
    status = manager.get_game_status(game_id, 0).value
    current = next(index for index, colour in enumerate(PLAYER_COLOURS) if colour.value == status["current_player"])
    assert manager.get_available_road_locations(game_id, current).value == [[[2, 0], [2, 1]], [[2, 0], [3, 0]]]
    assert manager.get_available_city_locations(game_id, current).value == [[2, 0]]


def test_second_development_card_in_turn(manager, game_id):
    _setup(manager, game_id)

    def grant(game):
        for card_type in (DevelopmentCardType.YEAR_OF_PLENTY, DevelopmentCardType.MONOPOLY):
            game.current_player.add_development_card(card_type)
        game.current_player.move_on_hold_to_playable()

    _edit(manager, game_id, grant)
    assert manager.play_year_of_plenty_card(game_id, 0, 4).is_success
    assert manager.play_monopoly_card(game_id, 2).error == GameError.ALREADY_PLAYED_DEVELOPMENT_CARD


def test_development_card_errors(manager, game_id):
    _setup(manager, game_id)
    assert manager.play_monopoly_card(game_id, 2).error == GameError.CANNOT_PLAY_DEVELOPMENT_CARD
    assert manager.play_year_of_plenty_card(game_id, 0, 9).error == GameError.CANNOT_PLAY_DEVELOPMENT_CARD
    assert manager.play_knight_card(game_id, (2, 2), 9).error == GameError.INVALID_PLAYER_COLOUR
    assert manager.buy_development_card(game_id).error == GameError.INVALID_GAME_PHASE


def test_seven_sets_pending_discards_before_robber(manager, game_id):
    _setup(manager, game_id)
    holder = {}

    def rig(game):
        clear_all_hands(game)
        victim = game.players[1]
        give(game, victim, {ResourceType.WOOD: 9})
        holder["victim"] = _colour_index(victim.colour)
        holder["empty_tile"] = next(
            coords
            for coords in game.board.tiles()
            if coords != game.board.robber_position and not game.board.house_colours_on_tile(coords)
        )
        rng = ScriptedRandom()
        rng.queue(3, 4)
        game._random = rng

    _edit(manager, game_id, rig)
    assert manager.roll_dice(game_id).value == [3, 4]

    status = manager.get_game_status(game_id, holder["victim"]).value
    assert status["sub_phase"] == "discard_resources"
    assert status["pending_discards"] == {PLAYER_COLOURS[holder["victim"]].value: 4}

    tile = holder["empty_tile"].as_tuple()
    assert manager.move_robber(game_id, tile).error == GameError.INVALID_GAME_PHASE
    assert manager.discard_resources(game_id, holder["victim"], {0: 3}).error == GameError.CANNOT_DISCARD_RESOURCES
    assert manager.discard_resources(game_id, holder["victim"], {7: 4}).error == GameError.CANNOT_DISCARD_RESOURCES
    assert manager.discard_resources(game_id, holder["victim"], {0: 4}).is_success
    assert manager.move_robber(game_id, tile).is_success
    assert manager.get_game_status(game_id, 0).value["sub_phase"] == "play_turn"


def test_bank_trade_through_manager(manager, game_id):
    _setup(manager, game_id)

    def rig(game):
        clear_all_hands(game)
        give(game, game.current_player, {ResourceType.WOOD: 4})
        rng = ScriptedRandom()
        rng.queue(6, 6)
        game._random = rng

    _edit(manager, game_id, rig)
    assert manager.roll_dice(game_id).is_success
    assert manager.trade_with_bank(game_id, 0, 4).error == GameError.INVALID_GAME_PHASE
    assert manager.begin_trade_or_build(game_id).is_success
    assert manager.trade_with_bank(game_id, 0, 9).error == GameError.CANNOT_TRADE_WITH_BANK
    assert manager.trade_with_bank(game_id, 0, 4).is_success
    assert manager.end_turn(game_id).is_success


def test_embargo_and_trade_offer_through_manager(manager, game_id):
    _setup(manager, game_id)
    colours = {}

    def rig_dice(game):
        rng = ScriptedRandom()
        rng.queue(6, 6)
        game._random = rng

    def rig_hands(game):
        clear_all_hands(game)
        current, other, _ = game.players
        give(game, current, {ResourceType.BRICK: 1})
        give(game, other, {ResourceType.WHEAT: 1})
        colours["current"] = _colour_index(current.colour)
        colours["other"] = _colour_index(other.colour)

    _edit(manager, game_id, rig_dice)
    assert manager.roll_dice(game_id).is_success
    assert manager.begin_trade_or_build(game_id).is_success
    _edit(manager, game_id, rig_hands)

    self_embargo = manager.embargo_player(game_id, colours["current"], colours["current"])
    assert self_embargo.error == GameError.CANNOT_EMBARGO_PLAYER
    assert manager.embargo_player(game_id, colours["other"], colours["current"]).is_success
    assert manager.offer_trade(game_id, {1: 1}, {3: 1}).is_success
    assert manager.accept_trade_offer(game_id, colours["other"]).error == GameError.CANNOT_TRADE_WITH_PLAYER

    assert manager.remove_embargo(game_id, colours["other"], colours["current"]).is_success
    assert manager.accept_trade_offer(game_id, colours["other"]).is_success
    view = manager.get_game_status(game_id, colours["current"]).value
    assert view["player"]["resource_cards"]["wheat"] == 1
    assert view["trade_offer"]["is_active"] is False
    assert manager.cancel_trade_offer(game_id).error == GameError.CANNOT_TRADE_WITH_PLAYER


def test_snapshot_store_returns_independent_copies():
    now = [0.0]
    store = InMemorySnapshotStore(clock=lambda: now[0])
    manager = GameManager(store=store, config=EngineConfig(snapshot_ttl_seconds=10))
    game_id = manager.create_new_game(3, seed=2).value

    assert store.load(game_id) is not store.load(game_id)
    now[0] = 9.0
    assert manager.get_game_status(game_id, 0).is_success
    now[0] = 10.0
    assert manager.get_game_status(game_id, 0).error == GameError.GAME_NOT_FOUND
    assert len(store) == 0


def test_store_refreshes_expiry_on_write():
    now = [0.0]
    store = InMemorySnapshotStore(clock=lambda: now[0])
    manager = GameManager(store=store, config=EngineConfig(snapshot_ttl_seconds=10))
    game_id = manager.create_new_game(3, seed=2).value

    now[0] = 8.0
    assert manager.build_settlement(game_id, (2, 0)).is_success
    now[0] = 15.0
    assert manager.get_game_status(game_id, 0).is_success


def test_store_drops_expired_games_on_write():
    now = [0.0]
    store = InMemorySnapshotStore(clock=lambda: now[0])
    manager = GameManager(store=store, config=EngineConfig(snapshot_ttl_seconds=10))
    stale = [manager.create_new_game(3, seed=seed).value for seed in range(5)]
    assert len(store) == 5

    now[0] = 1000.0
    fresh = manager.create_new_game(3, seed=9).value
    assert len(store) == 1
    assert store.load(fresh) is not None
    assert all(store.load(game_id) is None for game_id in stale)


def test_malformed_arguments_fail_without_raising(manager, game_id):
    assert manager.build_settlement(game_id, (1, 2, 3)).error == GameError.INVALID_BUILD_LOCATION
    assert manager.build_settlement(game_id, "20").error == GameError.INVALID_BUILD_LOCATION
    assert manager.build_road(game_id, (2, 0), (3,)).error == GameError.INVALID_GAME_PHASE
    assert manager.build_settlement(game_id, (2, 0)).is_success
    assert manager.build_road(game_id, (2, 0), (3,)).error == GameError.INVALID_BUILD_LOCATION
    assert manager.build_road(game_id, (2, 0), (3.0, 0)).error == GameError.INVALID_BUILD_LOCATION
    assert manager.build_road(game_id, (2, 0), (3, 0)).is_success


def test_malformed_development_card_arguments(manager, game_id):
    _setup(manager, game_id)

    def grant(game):
        for card_type in (DevelopmentCardType.KNIGHT, DevelopmentCardType.ROAD_BUILDING):
            game.current_player.add_development_card(card_type)
        game.current_player.move_on_hold_to_playable()

    _edit(manager, game_id, grant)
    assert manager.play_knight_card(game_id, (1, 2, 3), 1).error == GameError.CANNOT_PLAY_DEVELOPMENT_CARD
    road_building = manager.play_road_building_card(game_id, (3, 0), (4, 0), (4, 0), None)
    assert road_building.error == GameError.CANNOT_PLAY_DEVELOPMENT_CARD
    assert manager.get_game_status(game_id, 0).value["has_played_development_card_this_turn"] is False


def test_malformed_discard_and_robber_arguments(manager, game_id):
    _setup(manager, game_id)
    holder = {}

    def rig(game):
        clear_all_hands(game)
        victim = game.players[1]
        give(game, victim, {ResourceType.WOOD: 8})
        holder["victim"] = _colour_index(victim.colour)
        rng = ScriptedRandom()
        rng.queue(3, 4)
        game._random = rng

    _edit(manager, game_id, rig)
    assert manager.roll_dice(game_id).is_success
    assert manager.discard_resources(game_id, holder["victim"], {0: 2.0, 1: 2}).error == (
        GameError.CANNOT_DISCARD_RESOURCES
    )
    assert manager.discard_resources(game_id, holder["victim"], [(0, 4)]).error == GameError.CANNOT_DISCARD_RESOURCES
    assert manager.discard_resources(game_id, holder["victim"], {0: 4}).is_success
    assert manager.move_robber(game_id, (2, 2, 2)).error == GameError.CANNOT_MOVE_ROBBER_TO_LOCATION


def test_failed_operation_is_not_stored(manager, game_id):
    before = manager.get_game_status(game_id, 0).value
    assert manager.build_road(game_id, (2, 0), (3, 0)).is_failure
    assert manager.get_game_status(game_id, 0).value == before


def test_config_from_env():
    config = EngineConfig.from_env({"CATAN_SNAPSHOT_TTL_SECONDS": "30", "CATAN_LOG_LEVEL": "debug"})
    assert config.snapshot_ttl_seconds == 30.0
    assert config.log_level == "DEBUG"
    assert EngineConfig.from_env({}).to_dict() == {
        "snapshot_ttl_seconds": 900.0,
        "min_players": 3,
        "max_players": 4,
        "log_level": "INFO",
    }
    with pytest.raises(ValueError):
        EngineConfig(snapshot_ttl_seconds=0)
    with pytest.raises(ValueError):
        EngineConfig(min_players=2)
