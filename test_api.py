"""
Pruebas de la API Flask con el cliente de pruebas.
"""

import pytest

from api import app

OPENING = {"blackFilled": [[3, 4], [4, 3]], "whiteFilled": [[3, 3], [4, 4]], "turn": 1}


@pytest.fixture
def client():
    app.config.update(TESTING=True, REVERSI_SIMULATIONS=2, REVERSI_MAX_ITERATIONS=5, REVERSI_SEED=1)
    with app.test_client() as client:
        yield client


def test_index_serves_board_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b'id="board"' in resp.data
    assert b'id="colour"' in resp.data


def test_static_script_served(client):
    resp = client.get("/static/js/reversi-board.js")
    assert resp.status_code == 200
    assert b"/search_move" in resp.data
    assert b"state.human" in resp.data


def test_search_move_opening(client):
    resp = client.post("/search_move", json=OPENING)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["move"] in ([2, 3], [3, 2], [4, 5], [5, 4])
    assert data["colour"] == 1
    assert data["turn"] == -1
    assert (data["blackScore"], data["whiteScore"]) == (4, 1)


def test_search_move_cors_header(client):
    resp = client.post("/search_move", json=OPENING, headers={"Origin": "http://example.com"})
    assert resp.headers.get("Access-Control-Allow-Origin") == "*"


def test_search_move_without_json(client):
    resp = client.post("/search_move", data="no es json", content_type="text/plain")
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_search_move_inconsistent_state(client):
    payload = {"blackFilled": [[3, 3]], "whiteFilled": [[3, 3]], "turn": 1}
    resp = client.post("/search_move", json=payload)
    assert resp.status_code == 400
    data = resp.get_json()
    assert data["error"] == "Estado inválido"
    assert data["details"]


def test_search_move_out_of_range(client):
    resp = client.post("/search_move", json={"blackFilled": [[8, 8]], "whiteFilled": [], "turn": 1})
    assert resp.status_code == 400


def test_search_move_finished_game(client):
    resp = client.post("/search_move", json={"blackFilled": [[0, 0]], "whiteFilled": [[7, 7]], "turn": 1})
    assert resp.status_code == 409
    assert "error" in resp.get_json()
