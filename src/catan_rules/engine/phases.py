from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet


class GamePhase(str, Enum):
    FIRST_ROUND_SETUP = "first_round_setup"
    SECOND_ROUND_SETUP = "second_round_setup"
    MAIN = "main"


class GameSubPhase(str, Enum):
    BUILD_SETTLEMENT = "build_settlement"
    BUILD_ROAD = "build_road"
    ROLL_OR_PLAY_DEVELOPMENT_CARD = "roll_or_play_development_card"
    ROLL = "roll"
    DISCARD_RESOURCES = "discard_resources"
    MOVE_ROBBER_SEVEN_ROLL = "move_robber_seven_roll"
    STEAL_RESOURCE_SEVEN_ROLL = "steal_resource_seven_roll"
    MOVE_ROBBER_KNIGHT_CARD_BEFORE_ROLL = "move_robber_knight_card_before_roll"
    STEAL_RESOURCE_KNIGHT_CARD_BEFORE_ROLL = "steal_resource_knight_card_before_roll"
    MOVE_ROBBER_KNIGHT_CARD_AFTER_ROLL = "move_robber_knight_card_after_roll"
    STEAL_RESOURCE_KNIGHT_CARD_AFTER_ROLL = "steal_resource_knight_card_after_roll"
    PLAY_TURN = "play_turn"
    TRADE_OR_BUILD = "trade_or_build"


class GameAction(str, Enum):
    ROLL_DICE = "roll_dice"
    END_TURN = "end_turn"
    BUILD_FREE_SETTLEMENT = "build_free_settlement"
    BUILD_FREE_ROAD = "build_free_road"
    BUILD_ROAD = "build_road"
    BUILD_SETTLEMENT = "build_settlement"
    BUILD_CITY = "build_city"
    BUY_DEVELOPMENT_CARD = "buy_development_card"
    PLAY_DEVELOPMENT_CARD = "play_development_card"
    MOVE_ROBBER = "move_robber"
    STEAL_RESOURCE = "steal_resource"
    DISCARD_RESOURCES = "discard_resources"
    BEGIN_TRADE_OR_BUILD = "begin_trade_or_build"
    TRADE_WITH_BANK = "trade_with_bank"
    EMBARGO_PLAYER = "embargo_player"
    OFFER_TRADE = "offer_trade"
    RESPOND_TO_TRADE = "respond_to_trade"


SETUP_PHASES = frozenset({GamePhase.FIRST_ROUND_SETUP, GamePhase.SECOND_ROUND_SETUP})
SETUP_SUB_PHASES = frozenset({GameSubPhase.BUILD_SETTLEMENT, GameSubPhase.BUILD_ROAD})

TURN_ACTION_SUB_PHASES = frozenset({GameSubPhase.PLAY_TURN, GameSubPhase.TRADE_OR_BUILD})
DEVELOPMENT_CARD_SUB_PHASES = TURN_ACTION_SUB_PHASES | {GameSubPhase.ROLL_OR_PLAY_DEVELOPMENT_CARD}

ROBBER_MOVE_SUB_PHASES = frozenset(
    {
        GameSubPhase.MOVE_ROBBER_SEVEN_ROLL,
        GameSubPhase.MOVE_ROBBER_KNIGHT_CARD_BEFORE_ROLL,
        GameSubPhase.MOVE_ROBBER_KNIGHT_CARD_AFTER_ROLL,
    }
)
STEAL_SUB_PHASES = frozenset(
    {
        GameSubPhase.STEAL_RESOURCE_SEVEN_ROLL,
        GameSubPhase.STEAL_RESOURCE_KNIGHT_CARD_BEFORE_ROLL,
        GameSubPhase.STEAL_RESOURCE_KNIGHT_CARD_AFTER_ROLL,
    }
)

# Which sub-phases each action may be taken in.
ALLOWED_SUB_PHASES: Dict[GameAction, FrozenSet[GameSubPhase]] = {
    GameAction.ROLL_DICE: frozenset({GameSubPhase.ROLL_OR_PLAY_DEVELOPMENT_CARD, GameSubPhase.ROLL}),
    GameAction.END_TURN: TURN_ACTION_SUB_PHASES,
    GameAction.BUILD_FREE_SETTLEMENT: frozenset({GameSubPhase.BUILD_SETTLEMENT}),
    GameAction.BUILD_FREE_ROAD: frozenset({GameSubPhase.BUILD_ROAD}),
    GameAction.BUILD_ROAD: TURN_ACTION_SUB_PHASES,
    GameAction.BUILD_SETTLEMENT: TURN_ACTION_SUB_PHASES,
    GameAction.BUILD_CITY: TURN_ACTION_SUB_PHASES,
    GameAction.BUY_DEVELOPMENT_CARD: TURN_ACTION_SUB_PHASES,
    GameAction.PLAY_DEVELOPMENT_CARD: DEVELOPMENT_CARD_SUB_PHASES,
    GameAction.MOVE_ROBBER: ROBBER_MOVE_SUB_PHASES,
    GameAction.STEAL_RESOURCE: STEAL_SUB_PHASES,
    GameAction.DISCARD_RESOURCES: frozenset({GameSubPhase.DISCARD_RESOURCES}),
    GameAction.BEGIN_TRADE_OR_BUILD: frozenset({GameSubPhase.PLAY_TURN}),
    GameAction.TRADE_WITH_BANK: frozenset({GameSubPhase.TRADE_OR_BUILD}),
    GameAction.EMBARGO_PLAYER: frozenset({GameSubPhase.TRADE_OR_BUILD}),
    GameAction.OFFER_TRADE: frozenset({GameSubPhase.TRADE_OR_BUILD}),
    GameAction.RESPOND_TO_TRADE: frozenset({GameSubPhase.TRADE_OR_BUILD}),
}

MOVE_TO_STEAL: Dict[GameSubPhase, GameSubPhase] = {
    GameSubPhase.MOVE_ROBBER_SEVEN_ROLL: GameSubPhase.STEAL_RESOURCE_SEVEN_ROLL,
    GameSubPhase.MOVE_ROBBER_KNIGHT_CARD_BEFORE_ROLL: GameSubPhase.STEAL_RESOURCE_KNIGHT_CARD_BEFORE_ROLL,
    GameSubPhase.MOVE_ROBBER_KNIGHT_CARD_AFTER_ROLL: GameSubPhase.STEAL_RESOURCE_KNIGHT_CARD_AFTER_ROLL,
}


@dataclass(frozen=True)
class TurnState:
    """Phase and sub-phase pair; pairs that cannot coexist are rejected."""

    phase: GamePhase
    sub_phase: GameSubPhase

    def __post_init__(self) -> None:
        is_setup = self.phase in SETUP_PHASES
        if is_setup != (self.sub_phase in SETUP_SUB_PHASES):
            raise ValueError(f"Sub-phase {self.sub_phase.value} cannot occur in phase {self.phase.value}")

    def allows(self, action: GameAction) -> bool:
        return self.sub_phase in ALLOWED_SUB_PHASES[action]

    def with_sub_phase(self, sub_phase: GameSubPhase) -> "TurnState":
        return TurnState(self.phase, sub_phase)
