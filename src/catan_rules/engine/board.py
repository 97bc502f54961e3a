from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

import networkx as nx

from ..utils.randomness import Randomizer
from .constants import (
    ACTIVATION_NUMBER_TOTALS,
    MIN_LONGEST_ROAD_LENGTH,
    PORT_TYPE_TOTALS,
    STARTING_PORT_COORDINATES,
    TILE_RESOURCE_TOTALS,
)
from .topology import (
    TILE_COORDINATES,
    VERTEX_COORDINATES,
    build_vertex_graph,
    build_vertex_tiles,
    is_tile,
    is_vertex,
    tile_corners,
    tile_neighbors,
)
from .types import (
    BuildingType,
    Coordinates,
    House,
    PlayerColour,
    Port,
    PortType,
    ResourceType,
    Road,
    Tile,
    road_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumberShuffleConstraints:
    no_adjacent_six_eight: bool = True
    no_adjacent_same_number: bool = False
    no_adjacent_two_twelve: bool = False
    max_attempts: int = 5000


class Board:
    """Tiles, houses, roads, ports and the robber, plus placement legality."""

    def __init__(self, tiles: Mapping[Coordinates, Tile], ports: Iterable[Port]):
        missing = [coords for coords in TILE_COORDINATES if coords not in tiles]
        if missing:
            raise ValueError(f"Board is missing tiles at {missing}")

        self._tiles: Dict[Coordinates, Tile] = {coords: tiles[coords] for coords in TILE_COORDINATES}
        self._ports: List[Port] = list(ports)
        self._graph: nx.Graph = build_vertex_graph()
        self._vertex_tiles = build_vertex_tiles()
        self._houses: Dict[Coordinates, House] = {vertex: House() for vertex in VERTEX_COORDINATES}
        self._roads: Dict[FrozenSet[Coordinates], Road] = {}
        self._robber = next(coords for coords, tile in self._tiles.items() if tile.is_desert)

        self._longest_road: Tuple[Optional[PlayerColour], int] = (None, 0)
        self._longest_road_stale = False

    # -- lookups --------------------------------------------------------

    @property
    def robber_position(self) -> Coordinates:
        return self._robber

    @property
    def ports(self) -> List[Port]:
        return list(self._ports)

    def tiles(self) -> Dict[Coordinates, Tile]:
        return dict(self._tiles)

    def houses(self) -> Dict[Coordinates, House]:
        return {coords: House(house.colour, house.kind) for coords, house in self._houses.items()}

    def roads(self) -> List[Road]:
        return list(self._roads.values())

    def tile_at(self, coordinates: Coordinates) -> Optional[Tile]:
        return self._tiles.get(coordinates)

    def house_at(self, coordinates: Coordinates) -> Optional[House]:
        house = self._houses.get(coordinates)
        if house is None:
            return None
        return House(house.colour, house.kind)

    def road_between(self, first: Coordinates, second: Coordinates) -> Optional[Road]:
        return self._roads.get(road_key(first, second))

    def vertices_adjacent_to(self, coordinates: Coordinates) -> List[Coordinates]:
        if not is_vertex(coordinates):
            return []
        return list(self._graph.neighbors(coordinates))

    def edges(self) -> List[Tuple[Coordinates, Coordinates]]:
        return [tuple(sorted(edge)) for edge in self._graph.edges()]

    def tiles_with_activation_number(self, number: int) -> List[Coordinates]:
        return [coords for coords, tile in self._tiles.items() if tile.activation_number == number]

    def houses_on_tile(self, tile: Coordinates) -> List[Tuple[Coordinates, House]]:
        if not is_tile(tile):
            return []
        return [
            (corner, House(self._houses[corner].colour, self._houses[corner].kind))
            for corner in tile_corners(tile)
            if not self._houses[corner].is_empty
        ]

    def house_colours_on_tile(self, tile: Coordinates) -> List[PlayerColour]:
        colours: List[PlayerColour] = []
        for _, house in self.houses_on_tile(tile):
            if house.colour not in colours:
                colours.append(house.colour)
        return colours

    def tiles_surrounding_house(self, coordinates: Coordinates) -> List[Tile]:
        return [self._tiles[tile] for tile in self._vertex_tiles.get(coordinates, [])]

    def tile_neighbors(self, tile: Coordinates) -> List[Coordinates]:
        return tile_neighbors(tile)

    # -- roads ----------------------------------------------------------

    def can_place_road(
        self,
        first: Coordinates,
        second: Coordinates,
        colour: PlayerColour,
        setup_anchor: Optional[Coordinates] = None,
    ) -> bool:
        if not is_vertex(first) or not is_vertex(second):
            return False
        if not self._graph.has_edge(first, second):
            return False
        if road_key(first, second) in self._roads:
            return False

        if setup_anchor is not None:
            return setup_anchor in (first, second)

        return self._vertex_reaches(first, colour) or self._vertex_reaches(second, colour)

    def place_road(self, first: Coordinates, second: Coordinates, colour: PlayerColour) -> None:
        first, second = sorted((first, second))
        road = Road(colour=colour, first=first, second=second)
        self._roads[road.key] = road
        self._longest_road_stale = True

    def remove_road(self, first: Coordinates, second: Coordinates) -> None:
        # Only used to roll back a partially applied road-building card.
        self._roads.pop(road_key(first, second), None)
        self._longest_road_stale = True

    def available_road_locations(
        self, colour: PlayerColour, setup_anchor: Optional[Coordinates] = None
    ) -> List[Tuple[Coordinates, Coordinates]]:
        return [
            (first, second)
            for first, second in sorted(self.edges())
            if self.can_place_road(first, second, colour, setup_anchor)
        ]

    def _vertex_reaches(self, vertex: Coordinates, colour: PlayerColour) -> bool:
        house = self._houses[vertex]
        if house.colour == colour:
            return True
        if not house.is_empty:
            # An opponent's house cuts the road network at this vertex.
            return False
        return any(self._road_colour(vertex, neighbour) == colour for neighbour in self._graph.neighbors(vertex))

    def _road_colour(self, first: Coordinates, second: Coordinates) -> Optional[PlayerColour]:
        road = self._roads.get(road_key(first, second))
        return road.colour if road is not None else None

    # -- houses ---------------------------------------------------------

    def can_place_house(self, coordinates: Coordinates, colour: PlayerColour, is_free_setup: bool = False) -> bool:
        if not is_vertex(coordinates):
            return False
        if not self._houses[coordinates].is_empty:
            return False
        for neighbour in self._graph.neighbors(coordinates):
            if not self._houses[neighbour].is_empty:
                return False
        if is_free_setup:
            return True
        return any(
            self._road_colour(coordinates, neighbour) == colour for neighbour in self._graph.neighbors(coordinates)
        )

    def place_house(self, coordinates: Coordinates, colour: PlayerColour) -> None:
        house = self._houses[coordinates]
        house.colour = colour
        house.kind = BuildingType.SETTLEMENT
        self._longest_road_stale = True

    def can_upgrade_house(self, coordinates: Coordinates, colour: PlayerColour) -> bool:
        house = self._houses.get(coordinates)
        return house is not None and house.colour == colour and house.kind == BuildingType.SETTLEMENT

    def upgrade_house(self, coordinates: Coordinates, colour: PlayerColour) -> None:
        if not self.can_upgrade_house(coordinates, colour):
            raise ValueError(f"No {colour.value} settlement to upgrade at {coordinates}")
        self._houses[coordinates].kind = BuildingType.CITY

    def available_house_locations(self, colour: PlayerColour, is_free_setup: bool = False) -> List[Coordinates]:
        return [vertex for vertex in VERTEX_COORDINATES if self.can_place_house(vertex, colour, is_free_setup)]

    def available_city_locations(self, colour: PlayerColour) -> List[Coordinates]:
        return [vertex for vertex in VERTEX_COORDINATES if self.can_upgrade_house(vertex, colour)]

    # -- robber ---------------------------------------------------------

    def can_move_robber_to(self, tile: Coordinates) -> bool:
        return is_tile(tile) and tile != self._robber

    def move_robber_to(self, tile: Coordinates) -> None:
        if not is_tile(tile):
            raise ValueError(f"Not a tile: {tile}")
        self._robber = tile

    # -- ports ----------------------------------------------------------

    def has_port_of_type(self, colour: PlayerColour, port_type: PortType) -> bool:
        for port in self._ports:
            if port.port_type != port_type:
                continue
            if any(self._houses[vertex].colour == colour for vertex in port.coordinates):
                return True
        return False

    # -- longest road ---------------------------------------------------

    def longest_road_lengths(self) -> Dict[PlayerColour, int]:
        return {colour: self._longest_trail(colour) for colour in PlayerColour}

    def longest_road_holder(self) -> Tuple[Optional[PlayerColour], int]:
        """Return the colour holding longest road and its trail length.

        The current holder keeps the title on a tie. Another colour takes it
        only with a unique trail that is strictly longer and at least
        ``MIN_LONGEST_ROAD_LENGTH`` edges.
        """
        if not self._longest_road_stale:
            return self._longest_road

        lengths = self.longest_road_lengths()
        holder, _ = self._longest_road
        best = max(lengths.values())
        leaders = [colour for colour in PlayerColour if lengths[colour] == best]

        if holder is not None and lengths[holder] >= best:
            self._longest_road = (holder, lengths[holder])
        elif best >= MIN_LONGEST_ROAD_LENGTH and len(leaders) == 1:
            self._longest_road = (leaders[0], best)
            logger.debug("Longest road now held by %s with %d roads", leaders[0].value, best)
        elif holder is not None:
            self._longest_road = (holder, lengths[holder])
        else:
            self._longest_road = (None, 0)

        self._longest_road_stale = False
        return self._longest_road

    def _longest_trail(self, colour: PlayerColour) -> int:
        network = nx.Graph()
        network.add_edges_from((road.first, road.second) for road in self._roads.values() if road.colour == colour)
        longest = 0
        for start in sorted(network.nodes):
            longest = max(longest, self._walk(network, start, colour, set(), is_start=True))
        return longest

    def _walk(
        self,
        network: nx.Graph,
        vertex: Coordinates,
        colour: PlayerColour,
        used: Set[FrozenSet[Coordinates]],
        is_start: bool = False,
    ) -> int:
        house = self._houses[vertex]
        if not is_start and not house.is_empty and house.colour != colour:
            return 0

        longest = 0
        for neighbour in network.neighbors(vertex):
            edge = road_key(vertex, neighbour)
            if edge in used:
                continue
            used.add(edge)
            longest = max(longest, 1 + self._walk(network, neighbour, colour, used))
            used.remove(edge)
        return longest


def _numbers_valid(
    numbers_by_tile: Dict[Coordinates, int],
    constraints: NumberShuffleConstraints,
) -> bool:
    for tile, value in numbers_by_tile.items():
        for neighbor in tile_neighbors(tile):
            if neighbor not in numbers_by_tile:
                continue
            other = numbers_by_tile[neighbor]
            if constraints.no_adjacent_six_eight and value in (6, 8) and other in (6, 8):
                return False
            if constraints.no_adjacent_same_number and value == other:
                return False
            if constraints.no_adjacent_two_twelve and value in (2, 12) and other in (2, 12):
                return False
    return True


def _assign_numbers(
    tiles: List[Coordinates],
    numbers: List[int],
    randomizer: Randomizer,
    constraints: NumberShuffleConstraints,
) -> Dict[Coordinates, int]:
    for _ in range(constraints.max_attempts):
        randomizer.shuffle(numbers)
        numbers_by_tile = {tile: numbers[idx] for idx, tile in enumerate(tiles)}
        if _numbers_valid(numbers_by_tile, constraints):
            return numbers_by_tile
    raise RuntimeError("Failed to assign numbers within constraints")


def _expand(totals: Mapping) -> List:
    items = []
    for item, count in totals.items():
        items.extend([item] * count)
    return items


def standard_board(randomizer: Randomizer, constraints: NumberShuffleConstraints | None = None) -> Board:
    if constraints is None:
        constraints = NumberShuffleConstraints()

    resources: List[ResourceType] = _expand(TILE_RESOURCE_TOTALS)
    numbers: List[int] = _expand(ACTIVATION_NUMBER_TOTALS)
    port_types: List[PortType] = _expand(PORT_TYPE_TOTALS)

    randomizer.shuffle(resources)
    resource_by_tile = dict(zip(TILE_COORDINATES, resources))
    producing_tiles = [coords for coords, resource in resource_by_tile.items() if resource != ResourceType.DESERT]
    numbers_by_tile = _assign_numbers(producing_tiles, numbers, randomizer, constraints)

    tiles = {
        coords: Tile(resource=resource, activation_number=numbers_by_tile.get(coords))
        for coords, resource in resource_by_tile.items()
    }

    randomizer.shuffle(port_types)
    ports = [
        Port(port_type=port_type, coordinates=location)
        for port_type, location in zip(port_types, STARTING_PORT_COORDINATES)
    ]
    return Board(tiles=tiles, ports=ports)
