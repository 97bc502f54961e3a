from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set, Tuple


class ResourceType(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"
    DESERT = "desert"


class DevelopmentCardType(str, Enum):
    KNIGHT = "knight"
    ROAD_BUILDING = "road_building"
    YEAR_OF_PLENTY = "year_of_plenty"
    MONOPOLY = "monopoly"
    VICTORY_POINT = "victory_point"


class BuildingType(str, Enum):
    NONE = "none"
    SETTLEMENT = "settlement"
    CITY = "city"


class PortType(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"
    THREE_TO_ONE = "three_to_one"


class PlayerColour(str, Enum):
    RED = "red"
    BLUE = "blue"
    ORANGE = "orange"
    WHITE = "white"


class PurchaseType(str, Enum):
    ROAD = "road"
    SETTLEMENT = "settlement"
    CITY = "city"
    DEVELOPMENT_CARD = "development_card"


@dataclass(frozen=True, order=True)
class Coordinates:
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Tile:
    resource: ResourceType
    activation_number: Optional[int] = None

    @property
    def is_desert(self) -> bool:
        return self.resource == ResourceType.DESERT


@dataclass
class House:
    """Occupant of one vertex. Empty until a settlement is placed."""

    colour: Optional[PlayerColour] = None
    kind: BuildingType = BuildingType.NONE

    @property
    def is_empty(self) -> bool:
        return self.kind == BuildingType.NONE


@dataclass(frozen=True)
class Road:
    colour: PlayerColour
    first: Coordinates
    second: Coordinates

    @property
    def key(self) -> FrozenSet[Coordinates]:
        return frozenset((self.first, self.second))


@dataclass(frozen=True)
class Port:
    port_type: PortType
    coordinates: Tuple[Coordinates, ...]


@dataclass
class TradeOffer:
    offer: Dict[ResourceType, int]
    request: Dict[ResourceType, int]
    is_active: bool = True
    rejected_by: Set[PlayerColour] = field(default_factory=set)


def road_key(first: Coordinates, second: Coordinates) -> FrozenSet[Coordinates]:
    return frozenset((first, second))
