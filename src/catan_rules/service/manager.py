from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Sequence

from ..config import EngineConfig
from ..engine.constants import PLAYER_COLOURS, RESOURCE_TYPES
from ..engine.game import Game
from ..engine.phases import SETUP_PHASES, GameAction
from ..engine.types import Coordinates, PlayerColour, ResourceType
from ..errors import GameError, Result
from .status import player_status
from .store import InMemorySnapshotStore, SnapshotStore

logger = logging.getLogger(__name__)

Pair = Sequence[int]
Operation = Callable[[Game], Result]


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coordinates(pair: Pair) -> Optional[Coordinates]:
    if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence) or len(pair) != 2:
        return None
    x, y = pair
    if not (_is_int(x) and _is_int(y)):
        return None
    return Coordinates(x, y)


def _resource(value: int) -> Optional[ResourceType]:
    if not _is_int(value):
        return None
    if 0 <= value < len(RESOURCE_TYPES):
        return RESOURCE_TYPES[value]
    return None


def _bundle(cards: Mapping[int, int]) -> Optional[Dict[ResourceType, int]]:
    if not isinstance(cards, Mapping):
        return None
    bundle: Dict[ResourceType, int] = {}
    for key, amount in cards.items():
        resource_type = _resource(key)
        if resource_type is None or not _is_int(amount):
            return None
        bundle[resource_type] = bundle.get(resource_type, 0) + amount
    return bundle


def _colour(game: Game, value: int) -> Optional[PlayerColour]:
    if not _is_int(value):
        return None
    if 0 <= value < game.player_count:
        return PLAYER_COLOURS[value]
    return None


def _check(succeeded: bool, error: GameError) -> Result:
    return Result.success() if succeeded else Result.failure(error)


class GameManager:
    """Caller-facing surface: one method per operation, primitives in, ``Result`` out.

    Each call loads a fresh copy of the game from the store, applies one
    operation and writes the copy back only when the operation succeeded.
    """

    def __init__(self, store: SnapshotStore | None = None, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self._store = store if store is not None else InMemorySnapshotStore()

    # -- lifecycle and queries ------------------------------------------

    def create_new_game(self, player_count: int, seed: int | None = None) -> Result:
        if not self.config.min_players <= player_count <= self.config.max_players:
            return Result.failure(GameError.INVALID_PLAYER_COUNT)

        game = Game(player_count, seed=seed)
        self._save(game)
        logger.info("Created game %s with %d players", game.id, player_count)
        return Result.success(game.id)

    def get_game_status(self, game_id: str, colour: int) -> Result:
        return self._query(game_id, colour, lambda game, player_colour: player_status(game, player_colour))

    def get_available_settlement_locations(self, game_id: str, colour: int) -> Result:
        return self._query(
            game_id,
            colour,
            lambda game, player_colour: [
                list(coords.as_tuple()) for coords in game.available_settlement_locations(player_colour)
            ],
        )

    def get_available_city_locations(self, game_id: str, colour: int) -> Result:
        return self._query(
            game_id,
            colour,
            lambda game, player_colour: [
                list(coords.as_tuple()) for coords in game.available_city_locations(player_colour)
            ],
        )

    def get_available_road_locations(self, game_id: str, colour: int) -> Result:
        return self._query(
            game_id,
            colour,
            lambda game, player_colour: [
                [list(first.as_tuple()), list(second.as_tuple())]
                for first, second in game.available_road_locations(player_colour)
            ],
        )

    # -- turn flow ------------------------------------------------------

    def roll_dice(self, game_id: str) -> Result:
        def operation(game: Game) -> Result:
            game.roll_dice()
            return Result.success(list(game.dice))

        return self._mutate(game_id, GameAction.ROLL_DICE, operation)

    def end_turn(self, game_id: str) -> Result:
        return self._mutate(
            game_id,
            GameAction.END_TURN,
            lambda game: _check(game.end_turn(), GameError.INVALID_GAME_PHASE),
        )

    def begin_trade_or_build(self, game_id: str) -> Result:
        return self._mutate(
            game_id,
            GameAction.BEGIN_TRADE_OR_BUILD,
            lambda game: _check(game.begin_trade_or_build(), GameError.INVALID_GAME_PHASE),
        )

    # -- building -------------------------------------------------------

    def build_road(self, game_id: str, first: Pair, second: Pair) -> Result:
        start, end = _coordinates(first), _coordinates(second)

        def operation(game: Game) -> Result:
            if game.phase in SETUP_PHASES:
                if not game.is_action_allowed(GameAction.BUILD_FREE_ROAD):
                    return Result.failure(GameError.INVALID_GAME_PHASE)
                if start is None or end is None:
                    return Result.failure(GameError.INVALID_BUILD_LOCATION)
                return _check(game.build_free_road(start, end), GameError.INVALID_BUILD_LOCATION)
            if not game.is_action_allowed(GameAction.BUILD_ROAD):
                return Result.failure(GameError.INVALID_GAME_PHASE)
            if start is None or end is None:
                return Result.failure(GameError.INVALID_BUILD_LOCATION)
            return _check(game.build_road(start, end), GameError.INVALID_BUILD_LOCATION)

        return self._mutate(game_id, None, operation)

    def build_settlement(self, game_id: str, location: Pair) -> Result:
        coordinates = _coordinates(location)

        def operation(game: Game) -> Result:
            if game.phase in SETUP_PHASES:
                if not game.is_action_allowed(GameAction.BUILD_FREE_SETTLEMENT):
                    return Result.failure(GameError.INVALID_GAME_PHASE)
                if coordinates is None:
                    return Result.failure(GameError.INVALID_BUILD_LOCATION)
                return _check(game.build_free_settlement(coordinates), GameError.INVALID_BUILD_LOCATION)
            if not game.is_action_allowed(GameAction.BUILD_SETTLEMENT):
                return Result.failure(GameError.INVALID_GAME_PHASE)
            if coordinates is None:
                return Result.failure(GameError.INVALID_BUILD_LOCATION)
            return _check(game.build_settlement(coordinates), GameError.INVALID_BUILD_LOCATION)

        return self._mutate(game_id, None, operation)

    def build_city(self, game_id: str, location: Pair) -> Result:
        coordinates = _coordinates(location)

        def operation(game: Game) -> Result:
            if coordinates is None:
                return Result.failure(GameError.INVALID_BUILD_LOCATION)
            return _check(game.build_city(coordinates), GameError.INVALID_BUILD_LOCATION)

        return self._mutate(game_id, GameAction.BUILD_CITY, operation)

    # -- development cards ----------------------------------------------

    def buy_development_card(self, game_id: str) -> Result:
        return self._mutate(
            game_id,
            GameAction.BUY_DEVELOPMENT_CARD,
            lambda game: _check(game.buy_development_card(), GameError.CANNOT_BUY_DEVELOPMENT_CARD),
        )

    def play_knight_card(self, game_id: str, tile: Pair, victim: int) -> Result:
        robber_coordinates = _coordinates(tile)

        def operation(game: Game) -> Result:
            victim_colour = _colour(game, victim)
            if victim_colour is None:
                return Result.failure(GameError.INVALID_PLAYER_COLOUR)
            if robber_coordinates is None:
                return Result.failure(GameError.CANNOT_PLAY_DEVELOPMENT_CARD)
            return _check(
                game.play_knight_card(robber_coordinates, victim_colour),
                GameError.CANNOT_PLAY_DEVELOPMENT_CARD,
            )

        return self._play_development_card(game_id, operation)

    def play_road_building_card(
        self, game_id: str, first_start: Pair, first_end: Pair, second_start: Pair, second_end: Pair
    ) -> Result:
        roads = [_coordinates(pair) for pair in (first_start, first_end, second_start, second_end)]

        def operation(game: Game) -> Result:
            if any(coordinates is None for coordinates in roads):
                return Result.failure(GameError.CANNOT_PLAY_DEVELOPMENT_CARD)
            return _check(game.play_road_building_card(*roads), GameError.CANNOT_PLAY_DEVELOPMENT_CARD)

        return self._play_development_card(game_id, operation)

    def play_year_of_plenty_card(self, game_id: str, first_resource: int, second_resource: int) -> Result:
        first, second = _resource(first_resource), _resource(second_resource)

        def operation(game: Game) -> Result:
            if first is None or second is None:
                return Result.failure(GameError.CANNOT_PLAY_DEVELOPMENT_CARD)
            return _check(game.play_year_of_plenty_card(first, second), GameError.CANNOT_PLAY_DEVELOPMENT_CARD)

        return self._play_development_card(game_id, operation)

    def play_monopoly_card(self, game_id: str, resource: int) -> Result:
        resource_type = _resource(resource)

        def operation(game: Game) -> Result:
            if resource_type is None:
                return Result.failure(GameError.CANNOT_PLAY_DEVELOPMENT_CARD)
            return _check(game.play_monopoly_card(resource_type), GameError.CANNOT_PLAY_DEVELOPMENT_CARD)

        return self._play_development_card(game_id, operation)

    def _play_development_card(self, game_id: str, operation: Operation) -> Result:
        # The one-card-per-turn rule is reported ahead of the sub-phase check.
        def guarded(game: Game) -> Result:
            if game.has_played_development_card_this_turn:
                return Result.failure(GameError.ALREADY_PLAYED_DEVELOPMENT_CARD)
            if not game.is_action_allowed(GameAction.PLAY_DEVELOPMENT_CARD):
                return Result.failure(GameError.INVALID_GAME_PHASE)
            return operation(game)

        return self._mutate(game_id, None, guarded)

    # -- robber ---------------------------------------------------------

    def move_robber(self, game_id: str, tile: Pair) -> Result:
        coordinates = _coordinates(tile)

        def operation(game: Game) -> Result:
            if coordinates is None:
                return Result.failure(GameError.CANNOT_MOVE_ROBBER_TO_LOCATION)
            return _check(game.move_robber(coordinates), GameError.CANNOT_MOVE_ROBBER_TO_LOCATION)

        return self._mutate(game_id, GameAction.MOVE_ROBBER, operation)

    def steal_resource(self, game_id: str, victim: int) -> Result:
        def operation(game: Game) -> Result:
            victim_colour = _colour(game, victim)
            if victim_colour is None:
                return Result.failure(GameError.INVALID_PLAYER_COLOUR)
            return _check(game.steal_resource_card(victim_colour), GameError.CANNOT_STEAL_RESOURCE)

        return self._mutate(game_id, GameAction.STEAL_RESOURCE, operation)

    def discard_resources(self, game_id: str, colour: int, cards: Mapping[int, int]) -> Result:
        bundle = _bundle(cards)

        def operation(game: Game) -> Result:
            player_colour = _colour(game, colour)
            if player_colour is None:
                return Result.failure(GameError.INVALID_PLAYER_COLOUR)
            if bundle is None:
                return Result.failure(GameError.CANNOT_DISCARD_RESOURCES)
            return _check(game.discard_resources(player_colour, bundle), GameError.CANNOT_DISCARD_RESOURCES)

        return self._mutate(game_id, GameAction.DISCARD_RESOURCES, operation)

    # -- trading --------------------------------------------------------

    def trade_with_bank(self, game_id: str, to_give: int, to_receive: int) -> Result:
        give, receive = _resource(to_give), _resource(to_receive)

        def operation(game: Game) -> Result:
            if give is None or receive is None:
                return Result.failure(GameError.CANNOT_TRADE_WITH_BANK)
            return _check(game.trade_with_bank(give, receive), GameError.CANNOT_TRADE_WITH_BANK)

        return self._mutate(game_id, GameAction.TRADE_WITH_BANK, operation)

    def embargo_player(self, game_id: str, colour: int, target: int) -> Result:
        return self._embargo(game_id, colour, target, lambda game, by, to: game.embargo_player(by, to))

    def remove_embargo(self, game_id: str, colour: int, target: int) -> Result:
        return self._embargo(game_id, colour, target, lambda game, by, to: game.remove_player_embargo(by, to))

    def _embargo(
        self,
        game_id: str,
        colour: int,
        target: int,
        apply: Callable[[Game, PlayerColour, PlayerColour], bool],
    ) -> Result:
        def operation(game: Game) -> Result:
            by, to = _colour(game, colour), _colour(game, target)
            if by is None or to is None:
                return Result.failure(GameError.INVALID_PLAYER_COLOUR)
            return _check(apply(game, by, to), GameError.CANNOT_EMBARGO_PLAYER)

        return self._mutate(game_id, GameAction.EMBARGO_PLAYER, operation)

    def offer_trade(self, game_id: str, offer: Mapping[int, int], request: Mapping[int, int]) -> Result:
        offered, requested = _bundle(offer), _bundle(request)

        def operation(game: Game) -> Result:
            if offered is None or requested is None:
                return Result.failure(GameError.CANNOT_TRADE_WITH_PLAYER)
            return _check(game.offer_trade(offered, requested), GameError.CANNOT_TRADE_WITH_PLAYER)

        return self._mutate(game_id, GameAction.OFFER_TRADE, operation)

    def accept_trade_offer(self, game_id: str, colour: int) -> Result:
        return self._respond_to_trade(game_id, colour, lambda game, responder: game.accept_trade_offer(responder))

    def reject_trade_offer(self, game_id: str, colour: int) -> Result:
        return self._respond_to_trade(game_id, colour, lambda game, responder: game.reject_trade_offer(responder))

    def cancel_trade_offer(self, game_id: str) -> Result:
        return self._mutate(
            game_id,
            GameAction.OFFER_TRADE,
            lambda game: _check(game.cancel_trade_offer(), GameError.CANNOT_TRADE_WITH_PLAYER),
        )

    def _respond_to_trade(
        self, game_id: str, colour: int, respond: Callable[[Game, PlayerColour], bool]
    ) -> Result:
        def operation(game: Game) -> Result:
            responder = _colour(game, colour)
            if responder is None:
                return Result.failure(GameError.INVALID_PLAYER_COLOUR)
            return _check(respond(game, responder), GameError.CANNOT_TRADE_WITH_PLAYER)

        return self._mutate(game_id, GameAction.RESPOND_TO_TRADE, operation)

    # -- plumbing -------------------------------------------------------

    def _save(self, game: Game) -> None:
        self._store.store(game.id, game, self.config.snapshot_ttl_seconds)

    def _query(self, game_id: str, colour: int, read: Callable[[Game, PlayerColour], object]) -> Result:
        game = self._store.load(game_id)
        if game is None:
            return Result.failure(GameError.GAME_NOT_FOUND)
        player_colour = _colour(game, colour)
        if player_colour is None:
            return Result.failure(GameError.INVALID_PLAYER_COLOUR)
        return Result.success(read(game, player_colour))

    def _mutate(self, game_id: str, action: Optional[GameAction], operation: Operation) -> Result:
        game = self._store.load(game_id)
        if game is None:
            return Result.failure(GameError.GAME_NOT_FOUND)
        if action is not None and not game.is_action_allowed(action):
            result = Result.failure(GameError.INVALID_GAME_PHASE)
        else:
            result = operation(game)

        if result.is_failure:
            logger.debug("Game %s: rejected with %s", game_id, result.error.value)
            return result

        self._save(game)
        return result
