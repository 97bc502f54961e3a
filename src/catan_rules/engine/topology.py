"""Addressing scheme for tiles, vertices and edges.

Tiles sit on a 5x5 grid and vertices (house slots) on an 11x6 grid; cells
outside the hexagonal island are not addressable. Rows of tiles are offset
like axial coordinates, so tile ``(q, r)`` covers vertex columns
``2q + r - 2`` to ``2q + r`` on vertex rows ``r`` and ``r + 1``. An edge
(road slot) is identified by its two vertices.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import networkx as nx

from .types import Coordinates

TILE_GRID_SIZE = (5, 5)
VERTEX_GRID_SIZE = (11, 6)

# Inclusive x range of valid cells per row.
TILE_ROW_SPANS: Tuple[Tuple[int, int], ...] = ((2, 4), (1, 4), (0, 4), (0, 3), (0, 2))
VERTEX_ROW_SPANS: Tuple[Tuple[int, int], ...] = (
    (2, 8),
    (1, 9),
    (0, 10),
    (0, 10),
    (1, 9),
    (2, 8),
)

AXIAL_DIRECTIONS = [
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
]


def _coordinates_from_spans(spans: Tuple[Tuple[int, int], ...]) -> List[Coordinates]:
    coords: List[Coordinates] = []
    for y, (first, last) in enumerate(spans):
        for x in range(first, last + 1):
            coords.append(Coordinates(x, y))
    return coords


# Row-major order; all board iteration follows it.
TILE_COORDINATES: List[Coordinates] = _coordinates_from_spans(TILE_ROW_SPANS)
VERTEX_COORDINATES: List[Coordinates] = _coordinates_from_spans(VERTEX_ROW_SPANS)

_TILE_SET = frozenset(TILE_COORDINATES)
_VERTEX_SET = frozenset(VERTEX_COORDINATES)


def is_tile(coordinates: Coordinates) -> bool:
    return coordinates in _TILE_SET


def is_vertex(coordinates: Coordinates) -> bool:
    return coordinates in _VERTEX_SET


def tile_corners(tile: Coordinates) -> List[Coordinates]:
    """Corners of a tile, top row left to right, then bottom row left to right."""
    left = 2 * tile.x + tile.y - 2
    top = [Coordinates(left + i, tile.y) for i in range(3)]
    bottom = [Coordinates(left + i, tile.y + 1) for i in range(3)]
    return top + bottom


def tile_sides(tile: Coordinates) -> List[Tuple[Coordinates, Coordinates]]:
    top_left, top, top_right, bottom_left, bottom, bottom_right = tile_corners(tile)
    ring = [top_left, top, top_right, bottom_right, bottom, bottom_left]
    return [(ring[i], ring[(i + 1) % 6]) for i in range(6)]


def tile_neighbors(tile: Coordinates) -> List[Coordinates]:
    neighbors: List[Coordinates] = []
    for dq, dr in AXIAL_DIRECTIONS:
        candidate = Coordinates(tile.x + dq, tile.y + dr)
        if is_tile(candidate):
            neighbors.append(candidate)
    return neighbors


def build_vertex_graph() -> nx.Graph:
    """Undirected graph of the 54 vertices joined by the 72 road edges."""
    graph = nx.Graph()
    graph.add_nodes_from(VERTEX_COORDINATES)
    for tile in TILE_COORDINATES:
        graph.add_edges_from(tile_sides(tile))
    return graph


def build_vertex_tiles() -> Dict[Coordinates, List[Coordinates]]:
    vertex_tiles: Dict[Coordinates, List[Coordinates]] = {vertex: [] for vertex in VERTEX_COORDINATES}
    for tile in TILE_COORDINATES:
        for corner in tile_corners(tile):
            vertex_tiles[corner].append(tile)
    return vertex_tiles
