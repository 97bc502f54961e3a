"""Core game engine for Catan."""

from .board import Board, standard_board
from .game import Game
from .phases import GameAction, GamePhase, GameSubPhase, TurnState
from .player import Player
from .types import (
    BuildingType,
    Coordinates,
    DevelopmentCardType,
    PlayerColour,
    PortType,
    ResourceType,
)

__all__ = [
    "Board",
    "Game",
    "GameAction",
    "GamePhase",
    "GameSubPhase",
    "TurnState",
    "Player",
    "BuildingType",
    "Coordinates",
    "DevelopmentCardType",
    "PlayerColour",
    "PortType",
    "ResourceType",
    "standard_board",
]
