"""Rules engine for Settlers of Catan."""

from .engine import Game
from .errors import GameError, InvalidOperationError, Result
from .service import GameManager

__all__ = ["Game", "GameError", "GameManager", "InvalidOperationError", "Result"]
