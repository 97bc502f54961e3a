import pytest
from fastapi.testclient import TestClient

from catan_rules.service.manager import GameManager
from catan_rules.web.server import create_app

from helpers import SETUP_SPOTS


@pytest.fixture
def client():
    return TestClient(create_app(GameManager()))


def _create(client, player_count=3, seed=4):
    response = client.post("/api/games", json={"player_count": player_count, "seed": seed})
    assert response.status_code == 200
    return response.json()["value"]


def test_create_game_and_read_status(client):
    game_id = _create(client)
    response = client.get(f"/api/games/{game_id}/status", params={"colour": 1})
    assert response.status_code == 200
    body = response.json()["value"]
    assert body["player"]["colour"] == "blue"
    assert body["phase"] == "first_round_setup"


def test_invalid_player_count_is_bad_request(client):
    response = client.post("/api/games", json={"player_count": 6})
    assert response.status_code == 400
    assert response.json()["detail"] == "InvalidPlayerCount"


def test_unknown_game_is_not_found(client):
    response = client.post("/api/games/unknown/roll")
    assert response.status_code == 404
    assert response.json()["detail"] == "GameNotFound"


def test_setup_over_http(client):
    game_id = _create(client)
    for settlement, road_end in SETUP_SPOTS[:6]:
        response = client.post(f"/api/games/{game_id}/settlements", json={"location": list(settlement.as_tuple())})
        assert response.status_code == 200
        response = client.post(
            f"/api/games/{game_id}/roads",
            json={"first": list(settlement.as_tuple()), "second": list(road_end.as_tuple())},
        )
        assert response.status_code == 200

    status = client.get(f"/api/games/{game_id}/status", params={"colour": 0}).json()["value"]
    assert status["phase"] == "main"
    assert status["sub_phase"] == "roll_or_play_development_card"

    roll = client.post(f"/api/games/{game_id}/roll")
    assert roll.status_code == 200
    assert len(roll.json()["value"]) == 2


def test_occupied_vertex_is_bad_request(client):
    game_id = _create(client)
    assert client.post(f"/api/games/{game_id}/settlements", json={"location": [2, 0]}).status_code == 200
    assert client.post(f"/api/games/{game_id}/roads", json={"first": [2, 0], "second": [3, 0]}).status_code == 200

    response = client.post(f"/api/games/{game_id}/settlements", json={"location": [2, 0]})
    assert response.status_code == 400
    assert response.json()["detail"] == "InvalidBuildLocation"


def test_available_locations_over_http(client):
    game_id = _create(client)
    response = client.get(f"/api/games/{game_id}/locations/settlements", params={"colour": 0})
    assert response.status_code == 200
    assert len(response.json()["value"]) == 54


def test_malformed_request_is_rejected(client):
    game_id = _create(client)
    response = client.post(f"/api/games/{game_id}/settlements", json={"location": "north"})
    assert response.status_code == 422
