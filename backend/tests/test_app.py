"""
Tests for the Flask app, driven with the Flask test client and manual ticks.
"""

import pytest
import sys
import os
from unittest.mock import patch

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from config import Settings
from services.game_session import GameSession


@pytest.fixture
def app():
    app = create_app(Settings(seed=1, manual_ticks=True))
    app.config["TESTING"] = True
    yield app
    app.extensions["snake_sessions"].clear()


@pytest.fixture
def client(app):
    return app.test_client()


def create_game(client):
    response = client.post("/api/games")
    assert response.status_code == 201
    return response.get_json()


def fire(app, game_id, times=1):
    session = app.extensions["snake_sessions"].get(game_id)
    return session.scheduler.fire(times)


class TestIndex:

    def test_index_serves_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert b"gameCanvas" in response.data
        assert b'data-grid-size="20"' in response.data

    def test_config(self, client):
        data = client.get("/api/config").get_json()
        assert data["grid_size"] == 20
        assert data["tick_ms"] == 120
        assert data["swipe_threshold"] == 30
        assert {c["key"] for c in data["controls"]} == {"keyboard", "button", "swipe"}

    def test_layout(self, client):
        data = client.get("/api/layout?width=1920&height=1080").get_json()
        assert data == {"tile_size": 41, "canvas_size": 820, "grid_size": 20}

    def test_layout_without_params_uses_minimum(self, client):
        data = client.get("/api/layout").get_json()
        assert data["canvas_size"] == 300


class TestGames:

    def test_create_game(self, client):
        data = create_game(client)
        state = data["state"]

        assert data["game_id"]
        assert state["snake"] == [[10, 10], [9, 10], [8, 10]]
        assert state["velocity"] == [1, 0]
        assert state["score"] == 0
        assert state["status"] == "running"
        assert state["food"] not in state["snake"]

    def test_get_game_after_tick(self, app, client):
        game_id = create_game(client)["game_id"]
        fire(app, game_id)

        state = client.get(f"/api/games/{game_id}").get_json()["state"]
        assert state["snake"][0] == [11, 10]
        assert state["tick"] == 1

    def test_unknown_game_is_404(self, client):
        assert client.get("/api/games/nope").status_code == 404
        assert client.post("/api/games/nope/restart").status_code == 404
        assert client.post("/api/games/nope/direction", json={"dx": 0, "dy": 1}).status_code == 404
        assert client.delete("/api/games/nope").status_code == 404

    def test_delete_game(self, client):
        game_id = create_game(client)["game_id"]
        response = client.delete(f"/api/games/{game_id}")
        assert response.status_code == 200
        assert client.get(f"/api/games/{game_id}").status_code == 404

    def test_failed_start_leaves_no_session(self, app, client):
        with patch.object(GameSession, "start", side_effect=RuntimeError("boom")):
            response = client.post("/api/games")

        assert response.status_code == 500
        assert response.get_json()["error"] == "Failed to create game"
        assert len(app.extensions["snake_sessions"]) == 0


class TestEviction:

    def test_finished_games_are_dropped_on_create(self):
        app = create_app(Settings(seed=1, manual_ticks=True, finished_session_ttl_seconds=0))
        client = app.test_client()
        store = app.extensions["snake_sessions"]
        for _ in range(50):
            game_id = create_game(client)["game_id"]
            fire(app, game_id, 40)
            assert client.get(f"/api/games/{game_id}").get_json()["state"]["status"] == "over"

        game_id = create_game(client)["game_id"]

        assert len(store) == 1
        assert store.get(game_id) is not None
        store.clear()

    def test_settings_reach_the_store(self):
        app = create_app(Settings(manual_ticks=True, session_ttl_seconds=90, finished_session_ttl_seconds=5))
        store = app.extensions["snake_sessions"]
        assert store.idle_ttl_seconds == 90
        assert store.finished_ttl_seconds == 5


class TestDirection:

    def test_turn(self, client):
        game_id = create_game(client)["game_id"]
        data = client.post(f"/api/games/{game_id}/direction", json={"dx": 0, "dy": -1}).get_json()
        assert data["state"]["velocity"] == [0, -1]

    def test_reversal_ignored(self, client):
        game_id = create_game(client)["game_id"]
        data = client.post(f"/api/games/{game_id}/direction", json={"dx": -1, "dy": 0}).get_json()
        assert data["state"]["velocity"] == [1, 0]

    def test_non_unit_vector_ignored(self, client):
        game_id = create_game(client)["game_id"]
        response = client.post(f"/api/games/{game_id}/direction", json={"dx": 3, "dy": 0})
        assert response.status_code == 200
        assert response.get_json()["state"]["velocity"] == [1, 0]

    @pytest.mark.parametrize("body", [{"dx": "1", "dy": 0}, {"dx": 1}, {"dx": True, "dy": 0}, [1, 0]])
    def test_malformed_body(self, client, body):
        game_id = create_game(client)["game_id"]
        response = client.post(f"/api/games/{game_id}/direction", json=body)
        assert response.status_code == 400


class TestInput:

    def test_keyboard(self, client):
        game_id = create_game(client)["game_id"]
        data = client.post(f"/api/games/{game_id}/input", json={"source": "keyboard", "key": "S"}).get_json()
        assert data["state"]["velocity"] == [0, 1]

    def test_button(self, client):
        game_id = create_game(client)["game_id"]
        event = {"source": "button", "button": "upBtn", "type": "touchstart"}
        data = client.post(f"/api/games/{game_id}/input", json=event).get_json()
        assert data["state"]["velocity"] == [0, -1]

    def test_short_swipe_ignored(self, client):
        game_id = create_game(client)["game_id"]
        event = {"source": "swipe", "start": [0, 0], "end": [0, 20]}
        data = client.post(f"/api/games/{game_id}/input", json=event).get_json()
        assert data["state"]["velocity"] == [1, 0]

    def test_unknown_source_is_400(self, client):
        game_id = create_game(client)["game_id"]
        response = client.post(f"/api/games/{game_id}/input", json={"source": "gamepad"})
        assert response.status_code == 400
        assert "error" in response.get_json()

    def test_non_object_body_is_400(self, client):
        game_id = create_game(client)["game_id"]
        response = client.post(f"/api/games/{game_id}/input", data="nope", content_type="text/plain")
        assert response.status_code == 400


class TestGameOverAndRestart:

    def test_wall_collision_then_restart(self, app, client):
        game_id = create_game(client)["game_id"]
        session = app.extensions["snake_sessions"].get(game_id)
        session.game.load([(19, 10), (18, 10), (17, 10)], food=(0, 0), score=5)
        fire(app, game_id)

        state = client.get(f"/api/games/{game_id}").get_json()["state"]
        assert state["status"] == "over"
        assert state["death_reason"] == "wall"
        assert state["score"] == 5

        # Direction changes are ignored until restart.
        data = client.post(f"/api/games/{game_id}/direction", json={"dx": 0, "dy": 1}).get_json()
        assert data["state"]["velocity"] == [1, 0]

        data = client.post(f"/api/games/{game_id}/restart").get_json()
        assert data["state"]["status"] == "running"
        assert data["state"]["score"] == 0
        assert data["state"]["snake"] == [[10, 10], [9, 10], [8, 10]]

    def test_restart_input_event(self, app, client):
        game_id = create_game(client)["game_id"]
        fire(app, game_id, 2)
        data = client.post(f"/api/games/{game_id}/input", json={"source": "restart"}).get_json()
        assert data["state"]["tick"] == 0


class TestRendering:

    def test_board_text(self, client):
        game_id = create_game(client)["game_id"]
        response = client.get(f"/api/games/{game_id}/board")
        assert response.status_code == 200
        assert response.mimetype == "text/plain"
        assert b"H" in response.data

    def test_frame_png(self, client):
        game_id = create_game(client)["game_id"]
        response = client.get(f"/api/games/{game_id}/frame.png?tile_size=4")
        assert response.status_code == 200
        assert response.mimetype == "image/png"
        assert response.data.startswith(b"\x89PNG")

    def test_frame_bad_tile_size(self, client):
        game_id = create_game(client)["game_id"]
        response = client.get(f"/api/games/{game_id}/frame.png?tile_size=500")
        assert response.status_code == 400
