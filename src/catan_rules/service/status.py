from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..engine.board import Board
from ..engine.game import Game
from ..engine.player import Player
from ..engine.types import Coordinates, PlayerColour


def _coords(coordinates: Coordinates) -> List[int]:
    return [coordinates.x, coordinates.y]


def _counts(counts: Mapping[Any, int]) -> Dict[str, int]:
    return {key.value: value for key, value in counts.items()}


def _serialize_board(board: Board) -> Dict[str, Any]:
    return {
        "robber": _coords(board.robber_position),
        "tiles": [
            {
                "coordinates": _coords(coords),
                "resource": tile.resource.value,
                "activation_number": tile.activation_number,
            }
            for coords, tile in board.tiles().items()
        ],
        "houses": [
            {
                "coordinates": _coords(coords),
                "colour": house.colour.value,
                "kind": house.kind.value,
            }
            for coords, house in board.houses().items()
            if not house.is_empty
        ],
        "roads": [
            {
                "colour": road.colour.value,
                "first": _coords(road.first),
                "second": _coords(road.second),
            }
            for road in board.roads()
        ],
        "ports": [
            {
                "port_type": port.port_type.value,
                "coordinates": [_coords(coords) for coords in port.coordinates],
            }
            for port in board.ports
        ],
    }


def _serialize_own_player(player: Player) -> Dict[str, Any]:
    return {
        "colour": player.colour.value,
        "resource_cards": _counts(player.resource_cards),
        "development_cards": player.development_card_summary(),
        "played_development_cards": _counts(player.played_development_cards),
        "remaining_roads": player.remaining_roads,
        "remaining_settlements": player.remaining_settlements,
        "remaining_cities": player.remaining_cities,
        "has_longest_road": player.has_longest_road,
        "has_largest_army": player.has_largest_army,
        "embargoed_colours": sorted(colour.value for colour in player.embargoed_colours),
    }


def _serialize_other_player(player: Player) -> Dict[str, Any]:
    return {
        "colour": player.colour.value,
        "resource_card_count": player.total_resource_cards,
        "development_card_count": player.total_development_cards,
        "knights_played": player.knights_played,
        "has_longest_road": player.has_longest_road,
        "has_largest_army": player.has_largest_army,
    }


def player_status(game: Game, colour: PlayerColour) -> Dict[str, Any]:
    """Everything ``colour`` is allowed to see, as JSON-friendly values."""
    viewer = game.get_player(colour)
    if viewer is None:
        raise ValueError(f"{colour.value} is not playing in game {game.id}")

    offer = game.trade_offer
    return {
        "game_id": game.id,
        "phase": game.phase.value,
        "sub_phase": game.sub_phase.value,
        "current_player": game.current_player.colour.value,
        "turn_order": [player.colour.value for player in game.players],
        "dice": list(game.dice),
        "has_played_development_card_this_turn": game.has_played_development_card_this_turn,
        "pending_discards": {key.value: value for key, value in game.pending_discards.items()},
        "bank": _counts(game.bank_resource_cards),
        "remaining_development_cards": game.remaining_development_cards,
        "board": _serialize_board(game.board),
        "player": _serialize_own_player(viewer),
        "opponents": [_serialize_other_player(player) for player in game.players if player is not viewer],
        "trade_offer": None
        if offer is None
        else {
            "offer": _counts(offer.offer),
            "request": _counts(offer.request),
            "is_active": offer.is_active,
            "rejected_by": sorted(colour.value for colour in offer.rejected_by),
        },
    }
