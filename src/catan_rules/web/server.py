from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ..config import EngineConfig
from ..errors import GameError, Result
from ..service.manager import GameManager

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]


class CreateGameRequest(BaseModel):
    player_count: int
    seed: Optional[int] = None


class LocationRequest(BaseModel):
    location: Pair


class RoadRequest(BaseModel):
    first: Pair
    second: Pair


class KnightRequest(BaseModel):
    tile: Pair
    victim: int


class RoadBuildingRequest(BaseModel):
    first_start: Pair
    first_end: Pair
    second_start: Pair
    second_end: Pair


class YearOfPlentyRequest(BaseModel):
    first: int
    second: int


class MonopolyRequest(BaseModel):
    resource: int


class RobberRequest(BaseModel):
    tile: Pair


class StealRequest(BaseModel):
    victim: int


class DiscardRequest(BaseModel):
    colour: int
    cards: Dict[int, int]


class BankTradeRequest(BaseModel):
    to_give: int
    to_receive: int


class EmbargoRequest(BaseModel):
    colour: int
    target: int


class TradeOfferRequest(BaseModel):
    offer: Dict[int, int]
    request: Dict[int, int]


class TradeResponseRequest(BaseModel):
    colour: int


def _respond(result: Result) -> Dict[str, Any]:
    if result.is_failure:
        status_code = 404 if result.error == GameError.GAME_NOT_FOUND else 400
        raise HTTPException(status_code=status_code, detail=result.error.value)
    return {"value": result.value}


def create_app(manager: GameManager | None = None) -> FastAPI:
    manager = manager or GameManager(config=EngineConfig.from_env())
    # A game is loaded, mutated and stored back per request; one lock keeps
    # those sequences from interleaving.
    lock = threading.Lock()

    app = FastAPI(title="catan-rules")

    def run(operation) -> Dict[str, Any]:
        with lock:
            return _respond(operation())

    @app.post("/api/games")
    def create_game(payload: CreateGameRequest) -> Dict[str, Any]:
        return run(lambda: manager.create_new_game(payload.player_count, seed=payload.seed))

    @app.get("/api/games/{game_id}/status")
    def get_status(game_id: str, colour: int) -> Dict[str, Any]:
        return run(lambda: manager.get_game_status(game_id, colour))

    @app.get("/api/games/{game_id}/locations/settlements")
    def settlement_locations(game_id: str, colour: int) -> Dict[str, Any]:
        return run(lambda: manager.get_available_settlement_locations(game_id, colour))

    @app.get("/api/games/{game_id}/locations/cities")
    def city_locations(game_id: str, colour: int) -> Dict[str, Any]:
        return run(lambda: manager.get_available_city_locations(game_id, colour))

    @app.get("/api/games/{game_id}/locations/roads")
    def road_locations(game_id: str, colour: int) -> Dict[str, Any]:
        return run(lambda: manager.get_available_road_locations(game_id, colour))

    @app.post("/api/games/{game_id}/roll")
    def roll_dice(game_id: str) -> Dict[str, Any]:
        return run(lambda: manager.roll_dice(game_id))

    @app.post("/api/games/{game_id}/end-turn")
    def end_turn(game_id: str) -> Dict[str, Any]:
        return run(lambda: manager.end_turn(game_id))

    @app.post("/api/games/{game_id}/trade-or-build")
    def begin_trade_or_build(game_id: str) -> Dict[str, Any]:
        return run(lambda: manager.begin_trade_or_build(game_id))

    @app.post("/api/games/{game_id}/roads")
    def build_road(game_id: str, payload: RoadRequest) -> Dict[str, Any]:
        return run(lambda: manager.build_road(game_id, payload.first, payload.second))

    @app.post("/api/games/{game_id}/settlements")
    def build_settlement(game_id: str, payload: LocationRequest) -> Dict[str, Any]:
        return run(lambda: manager.build_settlement(game_id, payload.location))

    @app.post("/api/games/{game_id}/cities")
    def build_city(game_id: str, payload: LocationRequest) -> Dict[str, Any]:
        return run(lambda: manager.build_city(game_id, payload.location))

    @app.post("/api/games/{game_id}/development-cards")
    def buy_development_card(game_id: str) -> Dict[str, Any]:
        return run(lambda: manager.buy_development_card(game_id))

    @app.post("/api/games/{game_id}/development-cards/knight")
    def play_knight(game_id: str, payload: KnightRequest) -> Dict[str, Any]:
        return run(lambda: manager.play_knight_card(game_id, payload.tile, payload.victim))

    @app.post("/api/games/{game_id}/development-cards/road-building")
    def play_road_building(game_id: str, payload: RoadBuildingRequest) -> Dict[str, Any]:
        return run(
            lambda: manager.play_road_building_card(
                game_id, payload.first_start, payload.first_end, payload.second_start, payload.second_end
            )
        )

    @app.post("/api/games/{game_id}/development-cards/year-of-plenty")
    def play_year_of_plenty(game_id: str, payload: YearOfPlentyRequest) -> Dict[str, Any]:
        return run(lambda: manager.play_year_of_plenty_card(game_id, payload.first, payload.second))

    @app.post("/api/games/{game_id}/development-cards/monopoly")
    def play_monopoly(game_id: str, payload: MonopolyRequest) -> Dict[str, Any]:
        return run(lambda: manager.play_monopoly_card(game_id, payload.resource))

    @app.post("/api/games/{game_id}/robber")
    def move_robber(game_id: str, payload: RobberRequest) -> Dict[str, Any]:
        return run(lambda: manager.move_robber(game_id, payload.tile))

    @app.post("/api/games/{game_id}/steal")
    def steal_resource(game_id: str, payload: StealRequest) -> Dict[str, Any]:
        return run(lambda: manager.steal_resource(game_id, payload.victim))

    @app.post("/api/games/{game_id}/discard")
    def discard_resources(game_id: str, payload: DiscardRequest) -> Dict[str, Any]:
        return run(lambda: manager.discard_resources(game_id, payload.colour, payload.cards))

    @app.post("/api/games/{game_id}/bank-trades")
    def trade_with_bank(game_id: str, payload: BankTradeRequest) -> Dict[str, Any]:
        return run(lambda: manager.trade_with_bank(game_id, payload.to_give, payload.to_receive))

    @app.post("/api/games/{game_id}/embargoes")
    def embargo_player(game_id: str, payload: EmbargoRequest) -> Dict[str, Any]:
        return run(lambda: manager.embargo_player(game_id, payload.colour, payload.target))

    @app.post("/api/games/{game_id}/embargoes/remove")
    def remove_embargo(game_id: str, payload: EmbargoRequest) -> Dict[str, Any]:
        return run(lambda: manager.remove_embargo(game_id, payload.colour, payload.target))

    @app.post("/api/games/{game_id}/trade-offers")
    def offer_trade(game_id: str, payload: TradeOfferRequest) -> Dict[str, Any]:
        return run(lambda: manager.offer_trade(game_id, payload.offer, payload.request))

    @app.post("/api/games/{game_id}/trade-offers/accept")
    def accept_trade_offer(game_id: str, payload: TradeResponseRequest) -> Dict[str, Any]:
        return run(lambda: manager.accept_trade_offer(game_id, payload.colour))

    @app.post("/api/games/{game_id}/trade-offers/reject")
    def reject_trade_offer(game_id: str, payload: TradeResponseRequest) -> Dict[str, Any]:
        return run(lambda: manager.reject_trade_offer(game_id, payload.colour))

    @app.post("/api/games/{game_id}/trade-offers/cancel")
    def cancel_trade_offer(game_id: str) -> Dict[str, Any]:
        return run(lambda: manager.cancel_trade_offer(game_id))

    return app


def main() -> None:
    import uvicorn

    config = EngineConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Starting catan-rules server with %s", config.to_dict())
    uvicorn.run(create_app(GameManager(config=config)), host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
