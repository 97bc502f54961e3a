from __future__ import annotations

import logging
import uuid
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..errors import InvalidOperationError
from ..utils.randomness import Randomizer, SeededRandom
from .board import Board, NumberShuffleConstraints, standard_board
from .cards import CardCounts
from .constants import (
    BANK_RESOURCE_TOTALS,
    DEVELOPMENT_CARD_TOTALS,
    DISCARD_THRESHOLD,
    FOUR_TO_ONE,
    MAX_PLAYERS,
    MIN_LARGEST_ARMY_SIZE,
    MIN_PLAYERS,
    PLAYER_COLOURS,
    RESOURCE_PORT_TYPES,
    RESOURCE_TYPES,
    ROBBER_ROLL,
    THREE_TO_ONE,
    TWO_TO_ONE,
)
from .phases import SETUP_PHASES, GameAction, GamePhase, GameSubPhase, MOVE_TO_STEAL, TurnState
from .player import Player
from .types import (
    BuildingType,
    Coordinates,
    DevelopmentCardType,
    PlayerColour,
    PortType,
    PurchaseType,
    ResourceType,
    TradeOffer,
)

logger = logging.getLogger(__name__)


class Game:
    """Authoritative state of one match and every rule that spans entities.

    Mutating methods return ``False`` when a rule forbids the action and leave
    the game untouched in that case. All randomness comes from the injected
    randomizer.
    """

    def __init__(
        self,
        player_count: int,
        seed: int | None = None,
        randomizer: Randomizer | None = None,
        game_id: str | None = None,
        constraints: NumberShuffleConstraints | None = None,
    ):
        if player_count < MIN_PLAYERS or player_count > MAX_PLAYERS:
            raise ValueError(f"Invalid number of players: {player_count}")

        self.id = game_id or uuid.uuid4().hex
        self._random = randomizer if randomizer is not None else SeededRandom(seed)
        self.board: Board = standard_board(self._random, constraints)

        self._players: List[Player] = [Player(colour) for colour in PLAYER_COLOURS[:player_count]]
        self._random.shuffle(self._players)

        self._bank = CardCounts(RESOURCE_TYPES, BANK_RESOURCE_TOTALS)
        self._development_deck: List[DevelopmentCardType] = []
        for card_type, count in DEVELOPMENT_CARD_TOTALS.items():
            self._development_deck.extend([card_type] * count)
        self._random.shuffle(self._development_deck)
        self._development_cards_issued = CardCounts(DevelopmentCardType)
        self._development_cards_played = CardCounts(DevelopmentCardType)

        self._dice: Tuple[int, ...] = ()
        self._current_index = 0
        self._turn = TurnState(GamePhase.FIRST_ROUND_SETUP, GameSubPhase.BUILD_SETTLEMENT)
        self._played_development_card_this_turn = False
        self._knights_required_for_largest_army = MIN_LARGEST_ARMY_SIZE
        self._pending_discards: Dict[PlayerColour, int] = {}
        self._setup_settlement: Optional[Coordinates] = None
        self._sub_phase_after_knight = GameSubPhase.ROLL
        self._trade_offer: Optional[TradeOffer] = None

    # -- state ----------------------------------------------------------

    @property
    def players(self) -> Tuple[Player, ...]:
        return tuple(self._players)

    @property
    def player_count(self) -> int:
        return len(self._players)

    @property
    def current_player(self) -> Player:
        return self._players[self._current_index]

    @property
    def turn_state(self) -> TurnState:
        return self._turn

    @property
    def phase(self) -> GamePhase:
        return self._turn.phase

    @property
    def sub_phase(self) -> GameSubPhase:
        return self._turn.sub_phase

    @property
    def dice(self) -> Tuple[int, ...]:
        return self._dice

    @property
    def dice_total(self) -> int:
        return sum(self._dice)

    @property
    def has_played_development_card_this_turn(self) -> bool:
        return self._played_development_card_this_turn

    @property
    def bank_resource_cards(self) -> Mapping[ResourceType, int]:
        return self._bank.view()

    @property
    def remaining_development_cards(self) -> int:
        return len(self._development_deck)

    @property
    def development_cards_issued(self) -> Mapping[DevelopmentCardType, int]:
        return self._development_cards_issued.view()

    @property
    def development_cards_played(self) -> Mapping[DevelopmentCardType, int]:
        return self._development_cards_played.view()

    @property
    def pending_discards(self) -> Mapping[PlayerColour, int]:
        return MappingProxyType(dict(self._pending_discards))

    @property
    def trade_offer(self) -> Optional[TradeOffer]:
        if self._trade_offer is None:
            return None
        offer = self._trade_offer
        return TradeOffer(dict(offer.offer), dict(offer.request), offer.is_active, set(offer.rejected_by))

    @property
    def longest_road_player(self) -> Optional[Player]:
        return next((player for player in self._players if player.has_longest_road), None)

    @property
    def largest_army_player(self) -> Optional[Player]:
        return next((player for player in self._players if player.has_largest_army), None)

    def get_player(self, colour: Optional[PlayerColour]) -> Optional[Player]:
        return next((player for player in self._players if player.colour == colour), None)

    def is_action_allowed(self, action: GameAction) -> bool:
        return self._turn.allows(action)

    # -- turn flow ------------------------------------------------------

    def next_player(self) -> None:
        self._update_largest_army_player()
        self._played_development_card_this_turn = False
        self._trade_offer = None
        self._current_index = (self._current_index + 1) % len(self._players)
        self.current_player.move_on_hold_to_playable()
        if self._turn.phase == GamePhase.MAIN:
            self._set_sub_phase(GameSubPhase.ROLL_OR_PLAY_DEVELOPMENT_CARD)

    def end_turn(self) -> bool:
        if not self._turn.allows(GameAction.END_TURN):
            return False
        self.next_player()
        return True

    def roll_dice(self) -> bool:
        if not self._turn.allows(GameAction.ROLL_DICE):
            return False

        self._dice = (self._random.uniform_int(1, 6), self._random.uniform_int(1, 6))
        logger.debug("Game %s: %s rolled %s", self.id, self.current_player.colour.value, self._dice)

        if self.dice_total == ROBBER_ROLL:
            self._pending_discards = {
                player.colour: player.total_resource_cards // 2
                for player in self._players
                if player.total_resource_cards > DISCARD_THRESHOLD
            }
            if self._pending_discards:
                self._set_sub_phase(GameSubPhase.DISCARD_RESOURCES)
            else:
                self._set_sub_phase(GameSubPhase.MOVE_ROBBER_SEVEN_ROLL)
        else:
            self.distribute_resources_to_players()
            self._set_sub_phase(GameSubPhase.PLAY_TURN)
        return True

    def distribute_resources_to_players(self) -> bool:
        """Pay out the last roll, one card at a time while the bank lasts.

        Tiles are visited in row-major order and houses on a tile top row
        first, left to right, so a shortage always favours the same houses.
        """
        total = self.dice_total
        if not self._dice or total == ROBBER_ROLL:
            return False

        for tile_coordinates in self.board.tiles_with_activation_number(total):
            if tile_coordinates == self.board.robber_position:
                continue
            resource_type = self.board.tile_at(tile_coordinates).resource
            for _, house in self.board.houses_on_tile(tile_coordinates):
                player = self.get_player(house.colour)
                if player is None:
                    continue
                amount = 2 if house.kind == BuildingType.CITY else 1
                self._grant_from_bank(player, resource_type, amount)
        return True

    def give_resources_surrounding_house(self, coordinates: Coordinates) -> bool:
        for tile in self.board.tiles_surrounding_house(coordinates):
            if tile.is_desert:
                continue
            self._grant_from_bank(self.current_player, tile.resource, 1)
        return True

    def begin_trade_or_build(self) -> bool:
        if not self._turn.allows(GameAction.BEGIN_TRADE_OR_BUILD):
            return False
        self._set_sub_phase(GameSubPhase.TRADE_OR_BUILD)
        return True

    # -- setup ----------------------------------------------------------

    def build_free_settlement(self, coordinates: Coordinates) -> bool:
        if not self._turn.allows(GameAction.BUILD_FREE_SETTLEMENT):
            return False

        player = self.current_player
        if not player.can_place_free_settlement() or not self.board.can_place_house(
            coordinates, player.colour, is_free_setup=True
        ):
            return False

        player.place_free_settlement()
        self.board.place_house(coordinates, player.colour)
        if self._turn.phase == GamePhase.SECOND_ROUND_SETUP:
            self.give_resources_surrounding_house(coordinates)

        self._setup_settlement = coordinates
        self._refresh_longest_road()
        self._set_sub_phase(GameSubPhase.BUILD_ROAD)
        return True

    def build_free_road(self, first: Coordinates, second: Coordinates) -> bool:
        if not self._turn.allows(GameAction.BUILD_FREE_ROAD):
            return False

        player = self.current_player
        if not player.can_place_free_road() or not self.board.can_place_road(
            first, second, player.colour, setup_anchor=self._setup_settlement
        ):
            return False

        player.place_free_road()
        self.board.place_road(first, second, player.colour)
        self._setup_settlement = None
        self._refresh_longest_road()
        self._advance_setup()
        return True

    def _advance_setup(self) -> None:
        # Snake order: forward in round one, backward in round two.
        last_index = len(self._players) - 1
        if self._turn.phase == GamePhase.FIRST_ROUND_SETUP:
            if self._current_index == last_index:
                self._turn = TurnState(GamePhase.SECOND_ROUND_SETUP, GameSubPhase.BUILD_SETTLEMENT)
            else:
                self._current_index += 1
                self._set_sub_phase(GameSubPhase.BUILD_SETTLEMENT)
        elif self._current_index == 0:
            self._turn = TurnState(GamePhase.MAIN, GameSubPhase.ROLL_OR_PLAY_DEVELOPMENT_CARD)
            logger.info("Game %s: setup complete", self.id)
        else:
            self._current_index -= 1
            self._set_sub_phase(GameSubPhase.BUILD_SETTLEMENT)

    # -- building -------------------------------------------------------

    def build_road(self, first: Coordinates, second: Coordinates) -> bool:
        if not self._turn.allows(GameAction.BUILD_ROAD):
            return False

        player = self.current_player
        if not player.can_place_road() or not self.board.can_place_road(first, second, player.colour):
            return False

        self._return_to_bank(player.place_road())
        self.board.place_road(first, second, player.colour)
        self._refresh_longest_road()
        self._enter_trade_or_build()
        return True

    def build_settlement(self, coordinates: Coordinates) -> bool:
        if not self._turn.allows(GameAction.BUILD_SETTLEMENT):
            return False

        player = self.current_player
        if not player.can_place_settlement() or not self.board.can_place_house(coordinates, player.colour):
            return False

        self._return_to_bank(player.place_settlement())
        self.board.place_house(coordinates, player.colour)
        self._refresh_longest_road()
        self._enter_trade_or_build()
        return True

    def build_city(self, coordinates: Coordinates) -> bool:
        if not self._turn.allows(GameAction.BUILD_CITY):
            return False

        player = self.current_player
        if not player.can_place_city() or not self.board.can_upgrade_house(coordinates, player.colour):
            return False

        self._return_to_bank(player.place_city())
        self.board.upgrade_house(coordinates, player.colour)
        self._enter_trade_or_build()
        return True

    def available_settlement_locations(self, colour: PlayerColour) -> List[Coordinates]:
        return self.board.available_house_locations(colour, is_free_setup=self._turn.phase in SETUP_PHASES)

    def available_city_locations(self, colour: PlayerColour) -> List[Coordinates]:
        return self.board.available_city_locations(colour)

    def available_road_locations(self, colour: PlayerColour) -> List[Tuple[Coordinates, Coordinates]]:
        if self._turn.phase in SETUP_PHASES:
            if self._turn.sub_phase != GameSubPhase.BUILD_ROAD or colour != self.current_player.colour:
                return []
            return self.board.available_road_locations(colour, setup_anchor=self._setup_settlement)
        return self.board.available_road_locations(colour)

    # -- development cards ----------------------------------------------

    def buy_development_card(self) -> bool:
        if not self._turn.allows(GameAction.BUY_DEVELOPMENT_CARD):
            return False

        player = self.current_player
        if not self._development_deck or not player.can_afford(PurchaseType.DEVELOPMENT_CARD):
            return False

        self._return_to_bank(player.pay_for(PurchaseType.DEVELOPMENT_CARD))
        card_type = self._development_deck.pop()
        player.add_development_card(card_type)
        self._development_cards_issued.add(card_type)
        self._enter_trade_or_build()
        return True

    def can_play_development_card(self, card_type: DevelopmentCardType) -> bool:
        return self._turn.allows(GameAction.PLAY_DEVELOPMENT_CARD) and self._can_play_development_card(card_type)

    def play_knight_card(self, robber_coordinates: Coordinates, colour_to_steal_from: PlayerColour) -> bool:
        if not self.can_play_development_card(DevelopmentCardType.KNIGHT):
            return False

        victim = self.get_player(colour_to_steal_from)
        if victim is None or victim is self.current_player:
            return False
        if colour_to_steal_from not in self.board.house_colours_on_tile(robber_coordinates):
            return False

        previous_turn = self._turn
        original_robber = self.board.robber_position
        if previous_turn.sub_phase == GameSubPhase.ROLL_OR_PLAY_DEVELOPMENT_CARD:
            self._sub_phase_after_knight = GameSubPhase.ROLL
            self._set_sub_phase(GameSubPhase.MOVE_ROBBER_KNIGHT_CARD_BEFORE_ROLL)
        else:
            self._sub_phase_after_knight = previous_turn.sub_phase
            self._set_sub_phase(GameSubPhase.MOVE_ROBBER_KNIGHT_CARD_AFTER_ROLL)

        if not self.move_robber(robber_coordinates):
            self._turn = previous_turn
            return False

        if not self.steal_resource_card(colour_to_steal_from):
            self.board.move_robber_to(original_robber)
            self._turn = previous_turn
            return False

        self._play_development_card(DevelopmentCardType.KNIGHT)
        return True

    def play_road_building_card(
        self,
        first_road_start: Coordinates,
        first_road_end: Coordinates,
        second_road_start: Coordinates,
        second_road_end: Coordinates,
    ) -> bool:
        if not self.can_play_development_card(DevelopmentCardType.ROAD_BUILDING):
            return False

        player = self.current_player
        if not player.can_place_free_road(2):
            return False
        if not self.board.can_place_road(first_road_start, first_road_end, player.colour):
            return False

        # The second road may extend the first, so place it before checking.
        self.board.place_road(first_road_start, first_road_end, player.colour)
        if not self.board.can_place_road(second_road_start, second_road_end, player.colour):
            self.board.remove_road(first_road_start, first_road_end)
            return False

        self.board.place_road(second_road_start, second_road_end, player.colour)
        player.place_free_road()
        player.place_free_road()
        self._refresh_longest_road()
        self._play_development_card(DevelopmentCardType.ROAD_BUILDING)
        return True

    def play_year_of_plenty_card(self, first_resource: ResourceType, second_resource: ResourceType) -> bool:
        if not self.can_play_development_card(DevelopmentCardType.YEAR_OF_PLENTY):
            return False
        if first_resource not in RESOURCE_TYPES or second_resource not in RESOURCE_TYPES:
            return False

        if self._bank[first_resource] == 0 or self._bank[second_resource] == 0:
            return False
        if first_resource == second_resource and self._bank[first_resource] < 2:
            return False

        for resource_type in (first_resource, second_resource):
            self._bank.remove(resource_type)
            self.current_player.add_resource_card(resource_type)

        self._play_development_card(DevelopmentCardType.YEAR_OF_PLENTY)
        return True

    def play_monopoly_card(self, resource_type: ResourceType) -> bool:
        if not self.can_play_development_card(DevelopmentCardType.MONOPOLY):
            return False
        if resource_type not in RESOURCE_TYPES:
            return False

        current = self.current_player
        for player in self._players:
            if player is current:
                continue
            count = player.resource_card_count(resource_type)
            if count:
                player.remove_resource_cards(resource_type, count)
                current.add_resource_card(resource_type, count)

        self._play_development_card(DevelopmentCardType.MONOPOLY)
        return True

    def _can_play_development_card(self, card_type: DevelopmentCardType) -> bool:
        if card_type == DevelopmentCardType.VICTORY_POINT or self._played_development_card_this_turn:
            return False
        return self.current_player.can_play_development_card_of_type(card_type)

    def _play_development_card(self, card_type: DevelopmentCardType) -> None:
        if not self._can_play_development_card(card_type):
            raise InvalidOperationError(f"Cannot play development card of type: {card_type.value}")

        self._played_development_card_this_turn = True
        self.current_player.play_development_card(card_type)
        self._development_cards_played.add(card_type)
        if self._turn.sub_phase == GameSubPhase.ROLL_OR_PLAY_DEVELOPMENT_CARD:
            self._set_sub_phase(GameSubPhase.ROLL)
        logger.debug("Game %s: %s played %s", self.id, self.current_player.colour.value, card_type.value)

    # -- robber ---------------------------------------------------------

    def move_robber(self, coordinates: Coordinates) -> bool:
        if not self._turn.allows(GameAction.MOVE_ROBBER):
            return False
        if not self.board.can_move_robber_to(coordinates):
            return False

        self.board.move_robber_to(coordinates)
        if self._turn.sub_phase == GameSubPhase.MOVE_ROBBER_SEVEN_ROLL and not self._stealable_colours():
            self._set_sub_phase(GameSubPhase.PLAY_TURN)
        else:
            self._set_sub_phase(MOVE_TO_STEAL[self._turn.sub_phase])
        return True

    def steal_resource_card(self, victim_colour: PlayerColour) -> bool:
        if not self._turn.allows(GameAction.STEAL_RESOURCE):
            return False

        victim = self.get_player(victim_colour)
        if victim is None or victim is self.current_player:
            return False
        if victim_colour not in self._stealable_colours():
            return False

        stolen = victim.remove_random_resource_card(self._random)
        if stolen is not None:
            self.current_player.add_resource_card(stolen)

        if self._turn.sub_phase == GameSubPhase.STEAL_RESOURCE_SEVEN_ROLL:
            self._set_sub_phase(GameSubPhase.PLAY_TURN)
        else:
            self._set_sub_phase(self._sub_phase_after_knight)
        return True

    def _stealable_colours(self) -> List[PlayerColour]:
        return [
            colour
            for colour in self.board.house_colours_on_tile(self.board.robber_position)
            if colour != self.current_player.colour
        ]

    def discard_resources(self, colour: PlayerColour, cards: Mapping[ResourceType, int]) -> bool:
        if not self._turn.allows(GameAction.DISCARD_RESOURCES):
            return False

        required = self._pending_discards.get(colour)
        player = self.get_player(colour)
        if required is None or player is None:
            return False
        if not player.can_discard_resource_cards(cards, required):
            return False

        player.discard_resource_cards(cards)
        for resource_type, amount in cards.items():
            self._bank.add(resource_type, amount)
        del self._pending_discards[colour]

        self.try_finish_discarding_resources()
        return True

    def try_finish_discarding_resources(self) -> bool:
        if self._turn.sub_phase != GameSubPhase.DISCARD_RESOURCES or self._pending_discards:
            return False
        self._set_sub_phase(GameSubPhase.MOVE_ROBBER_SEVEN_ROLL)
        return True

    # -- bank trades ----------------------------------------------------

    def trade_two_to_one(self, to_give: ResourceType, to_receive: ResourceType) -> bool:
        if not self._can_start_bank_trade(to_give, to_receive):
            return False
        player = self.current_player
        if not player.can_trade_two_to_one(to_give) or not self.board.has_port_of_type(
            player.colour, RESOURCE_PORT_TYPES[to_give]
        ):
            return False
        return self._trade_with_bank(to_give, to_receive, TWO_TO_ONE)

    def trade_three_to_one(self, to_give: ResourceType, to_receive: ResourceType) -> bool:
        if not self._can_start_bank_trade(to_give, to_receive):
            return False
        player = self.current_player
        if not player.can_trade_three_to_one(to_give) or not self.board.has_port_of_type(
            player.colour, PortType.THREE_TO_ONE
        ):
            return False
        return self._trade_with_bank(to_give, to_receive, THREE_TO_ONE)

    def trade_four_to_one(self, to_give: ResourceType, to_receive: ResourceType) -> bool:
        if not self._can_start_bank_trade(to_give, to_receive):
            return False
        if not self.current_player.can_trade_four_to_one(to_give):
            return False
        return self._trade_with_bank(to_give, to_receive, FOUR_TO_ONE)

    def trade_with_bank(self, to_give: ResourceType, to_receive: ResourceType) -> bool:
        """Trade at the best ratio the current player has access to."""
        return (
            self.trade_two_to_one(to_give, to_receive)
            or self.trade_three_to_one(to_give, to_receive)
            or self.trade_four_to_one(to_give, to_receive)
        )

    def _can_start_bank_trade(self, to_give: ResourceType, to_receive: ResourceType) -> bool:
        if not self._turn.allows(GameAction.TRADE_WITH_BANK):
            return False
        return to_give in RESOURCE_TYPES and to_receive in RESOURCE_TYPES and to_give != to_receive

    def _trade_with_bank(self, to_give: ResourceType, to_receive: ResourceType, ratio: int) -> bool:
        if self._bank[to_receive] <= 0:
            return False
        self.current_player.trade(to_give, to_receive, ratio)
        self._bank.add(to_give, ratio)
        self._bank.remove(to_receive)
        return True

    # -- embargoes and player trades ------------------------------------

    def embargo_player(self, colour_embargoed_by: PlayerColour, colour_to_embargo: PlayerColour) -> bool:
        player = self._embargo_owner(colour_embargoed_by, colour_to_embargo)
        if player is None:
            return False
        player.embargo_player(colour_to_embargo)
        return True

    def remove_player_embargo(self, colour_embargoed_by: PlayerColour, colour_to_embargo: PlayerColour) -> bool:
        player = self._embargo_owner(colour_embargoed_by, colour_to_embargo)
        if player is None:
            return False
        player.remove_embargo(colour_to_embargo)
        return True

    def _embargo_owner(self, colour_embargoed_by: PlayerColour, colour_to_embargo: PlayerColour) -> Optional[Player]:
        if not self._turn.allows(GameAction.EMBARGO_PLAYER):
            return None
        if colour_embargoed_by is None or colour_to_embargo is None or colour_embargoed_by == colour_to_embargo:
            return None
        if self.get_player(colour_to_embargo) is None:
            return None
        return self.get_player(colour_embargoed_by)

    def offer_trade(self, offer: Mapping[ResourceType, int], request: Mapping[ResourceType, int]) -> bool:
        if not self._turn.allows(GameAction.OFFER_TRADE):
            return False
        if not _is_trade_bundle(offer) or not _is_trade_bundle(request):
            return False
        if not self.current_player.has_resource_cards(offer):
            return False

        self._trade_offer = TradeOffer(offer=dict(offer), request=dict(request))
        return True

    def accept_trade_offer(self, colour: PlayerColour) -> bool:
        responder = self._trade_responder(colour)
        if responder is None:
            return False

        offerer = self.current_player
        offer = self._trade_offer
        if offerer.has_embargoed(colour) or responder.has_embargoed(offerer.colour):
            return False
        if colour in offer.rejected_by:
            return False
        if not responder.has_resource_cards(offer.request) or not offerer.has_resource_cards(offer.offer):
            return False

        for resource_type, amount in offer.offer.items():
            offerer.remove_resource_cards(resource_type, amount)
            responder.add_resource_card(resource_type, amount)
        for resource_type, amount in offer.request.items():
            responder.remove_resource_cards(resource_type, amount)
            offerer.add_resource_card(resource_type, amount)

        offer.is_active = False
        return True

    def reject_trade_offer(self, colour: PlayerColour) -> bool:
        if self._trade_responder(colour) is None:
            return False

        offer = self._trade_offer
        offer.rejected_by.add(colour)
        others = {player.colour for player in self._players if player is not self.current_player}
        if others <= offer.rejected_by:
            offer.is_active = False
        return True

    def cancel_trade_offer(self) -> bool:
        if not self._turn.allows(GameAction.OFFER_TRADE):
            return False
        if self._trade_offer is None or not self._trade_offer.is_active:
            return False
        self._trade_offer.is_active = False
        return True

    def _trade_responder(self, colour: PlayerColour) -> Optional[Player]:
        if not self._turn.allows(GameAction.RESPOND_TO_TRADE):
            return None
        if self._trade_offer is None or not self._trade_offer.is_active:
            return None
        responder = self.get_player(colour)
        if responder is None or responder is self.current_player:
            return None
        return responder

    # -- bookkeeping ----------------------------------------------------

    def _set_sub_phase(self, sub_phase: GameSubPhase) -> None:
        self._turn = self._turn.with_sub_phase(sub_phase)

    def _enter_trade_or_build(self) -> None:
        if self._turn.sub_phase == GameSubPhase.PLAY_TURN:
            self._set_sub_phase(GameSubPhase.TRADE_OR_BUILD)

    def _grant_from_bank(self, player: Player, resource_type: ResourceType, amount: int) -> None:
        for _ in range(amount):
            if self._bank[resource_type] <= 0:
                return
            self._bank.remove(resource_type)
            player.add_resource_card(resource_type)

    def _return_to_bank(self, cards: Mapping[ResourceType, int]) -> None:
        for resource_type, amount in cards.items():
            self._bank.add(resource_type, amount)

    def _refresh_longest_road(self) -> None:
        colour, length = self.board.longest_road_holder()
        holder = self.get_player(colour)
        previous = self.longest_road_player
        if holder is previous:
            return
        if previous is not None:
            previous.remove_longest_road_card()
        if holder is not None:
            holder.add_longest_road_card()
            logger.debug("Game %s: longest road to %s (%d)", self.id, holder.colour.value, length)

    def _update_largest_army_player(self) -> None:
        holder = self.largest_army_player
        contender = max(self._players, key=lambda player: player.knights_played)
        if contender is holder or contender.knights_played < self._knights_required_for_largest_army:
            return

        if holder is not None:
            holder.remove_largest_army_card()
        contender.add_largest_army_card()
        self._knights_required_for_largest_army = contender.knights_played + 1
        logger.debug("Game %s: largest army to %s", self.id, contender.colour.value)


def _is_trade_bundle(bundle: Mapping[ResourceType, int]) -> bool:
    if not bundle:
        return False
    if any(resource_type not in RESOURCE_TYPES or amount < 0 for resource_type, amount in bundle.items()):
        return False
    return sum(bundle.values()) > 0
