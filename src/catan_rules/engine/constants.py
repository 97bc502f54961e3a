"""Static rule tables for the standard four-player base game."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .types import (
    Coordinates,
    DevelopmentCardType,
    PlayerColour,
    PortType,
    PurchaseType,
    ResourceType,
)

MIN_PLAYERS = 3
MAX_PLAYERS = 4

# Tradeable resources in their integer order (0 Wood .. 4 Ore).
RESOURCE_TYPES: Tuple[ResourceType, ...] = (
    ResourceType.WOOD,
    ResourceType.BRICK,
    ResourceType.SHEEP,
    ResourceType.WHEAT,
    ResourceType.ORE,
)

PLAYER_COLOURS: Tuple[PlayerColour, ...] = (
    PlayerColour.RED,
    PlayerColour.BLUE,
    PlayerColour.ORANGE,
    PlayerColour.WHITE,
)

TILE_RESOURCE_TOTALS: Dict[ResourceType, int] = {
    ResourceType.WOOD: 4,
    ResourceType.BRICK: 3,
    ResourceType.SHEEP: 4,
    ResourceType.WHEAT: 4,
    ResourceType.ORE: 3,
    ResourceType.DESERT: 1,
}

ACTIVATION_NUMBER_TOTALS: Dict[int, int] = {
    2: 1,
    3: 2,
    4: 2,
    5: 2,
    6: 2,
    7: 0,
    8: 2,
    9: 2,
    10: 2,
    11: 2,
    12: 1,
}

BANK_RESOURCE_TOTALS: Dict[ResourceType, int] = {resource: 19 for resource in RESOURCE_TYPES}

DEVELOPMENT_CARD_TOTALS: Dict[DevelopmentCardType, int] = {
    DevelopmentCardType.KNIGHT: 14,
    DevelopmentCardType.VICTORY_POINT: 5,
    DevelopmentCardType.ROAD_BUILDING: 2,
    DevelopmentCardType.YEAR_OF_PLENTY: 2,
    DevelopmentCardType.MONOPOLY: 2,
}

PORT_TYPE_TOTALS: Dict[PortType, int] = {
    PortType.THREE_TO_ONE: 4,
    PortType.WOOD: 1,
    PortType.BRICK: 1,
    PortType.SHEEP: 1,
    PortType.WHEAT: 1,
    PortType.ORE: 1,
}

# Each port sits on one coastal edge, given as its two vertices, clockwise
# from the top-left corner of the board.
STARTING_PORT_COORDINATES: List[Tuple[Coordinates, Coordinates]] = [
    (Coordinates(2, 0), Coordinates(3, 0)),
    (Coordinates(5, 0), Coordinates(6, 0)),
    (Coordinates(8, 1), Coordinates(9, 1)),
    (Coordinates(10, 2), Coordinates(10, 3)),
    (Coordinates(9, 4), Coordinates(8, 4)),
    (Coordinates(7, 5), Coordinates(6, 5)),
    (Coordinates(4, 5), Coordinates(3, 5)),
    (Coordinates(2, 4), Coordinates(1, 4)),
    (Coordinates(0, 2), Coordinates(1, 2)),
]

BUILD_COSTS: Dict[PurchaseType, Dict[ResourceType, int]] = {
    PurchaseType.ROAD: {
        ResourceType.WOOD: 1,
        ResourceType.BRICK: 1,
    },
    PurchaseType.SETTLEMENT: {
        ResourceType.WOOD: 1,
        ResourceType.BRICK: 1,
        ResourceType.SHEEP: 1,
        ResourceType.WHEAT: 1,
    },
    PurchaseType.CITY: {
        ResourceType.WHEAT: 2,
        ResourceType.ORE: 3,
    },
    PurchaseType.DEVELOPMENT_CARD: {
        ResourceType.SHEEP: 1,
        ResourceType.WHEAT: 1,
        ResourceType.ORE: 1,
    },
}

MAX_ROADS = 15
MAX_SETTLEMENTS = 5
MAX_CITIES = 4

ROBBER_ROLL = 7
DISCARD_THRESHOLD = 7
MIN_LONGEST_ROAD_LENGTH = 5
MIN_LARGEST_ARMY_SIZE = 3

TWO_TO_ONE = 2
THREE_TO_ONE = 3
FOUR_TO_ONE = 4

RESOURCE_PORT_TYPES: Dict[ResourceType, PortType] = {
    ResourceType.WOOD: PortType.WOOD,
    ResourceType.BRICK: PortType.BRICK,
    ResourceType.SHEEP: PortType.SHEEP,
    ResourceType.WHEAT: PortType.WHEAT,
    ResourceType.ORE: PortType.ORE,
}
