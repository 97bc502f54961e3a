from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class GameError(str, Enum):
    GAME_NOT_FOUND = "GameNotFound"
    INVALID_PLAYER_COUNT = "InvalidPlayerCount"
    INVALID_PLAYER_COLOUR = "InvalidPlayerColour"
    INVALID_GAME_PHASE = "InvalidGamePhase"
    INVALID_BUILD_LOCATION = "InvalidBuildLocation"
    CANNOT_BUY_DEVELOPMENT_CARD = "CannotBuyDevelopmentCard"
    CANNOT_PLAY_DEVELOPMENT_CARD = "CannotPlayDevelopmentCard"
    ALREADY_PLAYED_DEVELOPMENT_CARD = "AlreadyPlayedDevelopmentCard"
    CANNOT_MOVE_ROBBER_TO_LOCATION = "CannotMoveRobberToLocation"
    CANNOT_STEAL_RESOURCE = "CannotStealResource"
    CANNOT_DISCARD_RESOURCES = "CannotDiscardResources"
    CANNOT_TRADE_WITH_BANK = "CannotTradeWithBank"
    CANNOT_TRADE_WITH_PLAYER = "CannotTradeWithPlayer"
    CANNOT_EMBARGO_PLAYER = "CannotEmbargoPlayer"


@dataclass(frozen=True)
class Result:
    error: Optional[GameError] = None
    value: Any = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(error=None, value=value)

    @classmethod
    def failure(cls, error: GameError) -> "Result":
        return cls(error=error)


class InvalidOperationError(RuntimeError):
    """Raised when an operation is called outside its documented precondition."""
