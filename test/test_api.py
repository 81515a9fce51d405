"""
HTTP host: play a full round through the FastAPI endpoints.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from chinchiro.api.main import AmountRequest, app, do_add_bet, game_locks, game_rngs, games


@pytest.fixture
def client():
    games.clear()
    game_rngs.clear()
    game_locks.clear()
    with TestClient(app) as c:
        yield c
    games.clear()
    game_rngs.clear()
    game_locks.clear()


def create_game(client, **overrides) -> dict:
    body = {
        "starting_balance": 20000,
        "player_names": ["Aki", "Ren", "Sora"],
        "off_table_probability": 0.0,
        "seed": 5,
    }
    body.update(overrides)
    response = client.post("/games", json=body)
    assert response.status_code == 200, response.text
    return response.json()


def place_bets(client, game_id, bets=None):
    for player_id, amount in (bets or {"p-1": 1500, "p-2": 300}).items():
        r = client.post(f"/games/{game_id}/bet", json={"player_id": player_id, "amount": amount})
        assert r.status_code == 200
    r = client.post(f"/games/{game_id}/confirm-bets")
    assert r.status_code == 200, r.text
    return r.json()


def test_root(client):
    assert client.get("/").json()["message"] == "Chinchiro API"


def test_create_game(client):
    created = create_game(client)
    state = created["state"]
    assert state["phase"] == "betting"
    assert [p["name"] for p in state["players"]] == ["Aki", "Ren", "Sora"]
    assert created["config"]["player_count"] == 3

    fetched = client.get(f"/games/{created['game_id']}").json()
    assert fetched["state"]["players"][0]["is_banker"] is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"player_names": ["Solo"]},
        {"player_count": 7},
        {"player_count": 10**9},
        {"player_count": 0},
        {"starting_balance": 0},
        {"starting_balance": "lots"},
    ],
)
def test_create_game_rejects_bad_config(client, overrides):
    response = client.post("/games", json={"player_names": ["A", "B"], **overrides})
    assert response.status_code == 400


def test_unknown_game(client):
    assert client.get("/games/nope").status_code == 404
    assert client.post("/games/nope/confirm-bets").status_code == 404


def test_full_round_over_http(client):
    game_id = create_game(client)["game_id"]

    r = client.post(f"/games/{game_id}/bet", json={"player_id": "p-1", "amount": "1500"})
    assert r.status_code == 200
    r = client.post(f"/games/{game_id}/add-bet", json={"player_id": "p-2", "amount": 300})
    assert r.status_code == 200
    r = client.post(f"/games/{game_id}/confirm-bets")
    assert r.json()["state"]["turn_order"] == ["p-2", "p-1", "p-0"]

    for player_id in ["p-2", "p-1", "p-0"]:
        while True:
            available = client.get(f"/games/{game_id}/available-actions").json()
            assert available["current_player"] == player_id
            if "roll" not in available["actions"]:
                break
            r = client.post(f"/games/{game_id}/roll", json={"player_id": player_id})
            assert r.status_code == 200
            assert r.json()["events"][0]["type"] == "dice_rolled"
        r = client.post(f"/games/{game_id}/finish-turn", json={"player_id": player_id})
        assert r.status_code == 200

    state = r.json()["state"]
    assert state["phase"] == "result"
    assert sum(p["net_result"] for p in state["players"]) == 0
    summary = client.get(f"/games/{game_id}/summary").json()
    assert summary["settled"] is True
    assert all(row["hand"] != "-" for row in summary["players"])

    r = client.post(f"/games/{game_id}/next-round")
    assert r.status_code == 200
    assert r.json()["state"]["banker_index"] == 1


def test_out_of_turn_roll_is_rejected(client):
    game_id = create_game(client)["game_id"]
    place_bets(client, game_id)
    r = client.post(f"/games/{game_id}/roll", json={"player_id": "p-0"})
    assert r.status_code == 400
    assert "active player" in r.json()["detail"]


def test_borrow_and_repay_default_amount(client):
    game_id = create_game(client)["game_id"]
    r = client.post(f"/games/{game_id}/borrow", json={"player_id": "p-1"})
    ren = r.json()["state"]["players"][1]
    assert (ren["balance"], ren["debt"]) == (30000, 10000)

    r = client.post(f"/games/{game_id}/repay", json={"player_id": "p-1", "amount": 4000})
    ren = r.json()["state"]["players"][1]
    assert (ren["balance"], ren["debt"]) == (26000, 6000)


def test_delete_game(client):
    game_id = create_game(client)["game_id"]
    assert client.delete(f"/games/{game_id}").status_code == 200
    assert client.get(f"/games/{game_id}").status_code == 404


def test_confirm_bets_rejected_until_every_challenger_bets(client):
    game_id = create_game(client)["game_id"]
    assert client.get(f"/games/{game_id}/available-actions").json()["actions"] == []

    client.post(f"/games/{game_id}/bet", json={"player_id": "p-1", "amount": 500})
    r = client.post(f"/games/{game_id}/confirm-bets")
    assert r.status_code == 400
    assert "Sora" in r.json()["detail"]
    assert client.get(f"/games/{game_id}").json()["state"]["phase"] == "betting"

    client.post(f"/games/{game_id}/bet", json={"player_id": "p-2", "amount": 500})
    assert client.get(f"/games/{game_id}/available-actions").json()["actions"] == ["confirm_bets"]
    assert client.post(f"/games/{game_id}/confirm-bets").status_code == 200


def test_rejected_roll_does_not_consume_dice(client):
    rejected_first = create_game(client)["game_id"]
    clean = create_game(client)["game_id"]
    place_bets(client, rejected_first)
    place_bets(client, clean)

    r = client.post(f"/games/{rejected_first}/roll", json={"player_id": "p-0"})
    assert r.status_code == 400

    dice = []
    for game_id in (rejected_first, clean):
        r = client.post(f"/games/{game_id}/roll", json={"player_id": "p-2"})
        assert r.status_code == 200
        dice.append(r.json()["events"][0]["payload"]["dice"])
    assert dice[0] == dice[1]


def test_concurrent_bets_are_serialized(client):
    game_id = create_game(client)["game_id"]

    def add_ten(_):
        do_add_bet(game_id, AmountRequest(player_id="p-1", amount=10))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(add_ten, range(100)))

    ren = client.get(f"/games/{game_id}").json()["state"]["players"][1]
    assert ren["bet"] == 1000


def test_delete_game_drops_its_lock(client):
    game_id = create_game(client)["game_id"]
    client.post(f"/games/{game_id}/bet", json={"player_id": "p-1", "amount": 100})
    assert game_id in game_locks
    client.delete(f"/games/{game_id}")
    assert game_id not in game_locks
    client.get("/games/unknown-id")
    client.post("/games/unknown-id/confirm-bets")
    assert "unknown-id" not in game_locks
