import logging
import random
import traceback
from typing import Optional

from flask import Blueprint, Flask, Response, current_app, jsonify, render_template, request
from flask_cors import CORS

from config import Settings, configure_logging, load_settings
from controls import list_controls
from domain.constants import SWIPE_THRESHOLD_PX
from main import SnakeGame
from services.frame_renderer import DEFAULT_TILE_SIZE, FrameRenderer
from services.game_session import GameSession, SessionStore
from services.layout import compute_layout
from services.scheduler import IntervalScheduler, ManualScheduler

bp = Blueprint("snake", __name__)


def _settings() -> Settings:
    return current_app.config["SNAKE_SETTINGS"]


def _sessions() -> SessionStore:
    return current_app.extensions["snake_sessions"]


def _build_session(settings: Settings) -> GameSession:
    rng = random.Random(settings.seed) if settings.seed is not None else None
    game = SnakeGame(grid_size=settings.grid_size, rng=rng)
    if settings.manual_ticks:
        scheduler = ManualScheduler()
    else:
        scheduler = IntervalScheduler(settings.tick_ms)
    return GameSession(game, scheduler)


def _not_found(game_id: str):
    return jsonify({"error": f"Game '{game_id}' not found"}), 404


def _state_response(session: GameSession, state=None):
    if state is None:
        state = session.get_state()
    return jsonify({"game_id": session.game_id, "state": state.to_dict()})


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@bp.route("/", methods=["GET"])
def index():
    settings = _settings()
    return render_template(
        "index.html",
        grid_size=settings.grid_size,
        tick_ms=settings.tick_ms,
        swipe_threshold=SWIPE_THRESHOLD_PX,
    )


@bp.route("/api/config", methods=["GET"])
def get_config():
    settings = _settings()
    return jsonify({
        "grid_size": settings.grid_size,
        "tick_ms": settings.tick_ms,
        "swipe_threshold": SWIPE_THRESHOLD_PX,
        "controls": list_controls(),
    })


@bp.route("/api/layout", methods=["GET"])
def get_layout():
    """
    Compute the tile size for a viewport.

    Query parameters:
    - width: viewport width in pixels
    - height: viewport height in pixels
    """
    width = request.args.get("width", default=0, type=float)
    height = request.args.get("height", default=0, type=float)
    layout = compute_layout(width, height, _settings().grid_size)
    return jsonify(layout.to_dict())


@bp.route("/api/games", methods=["POST"])
def create_game():
    """Create a new game session and start ticking."""
    session = None
    try:
        session = _build_session(_settings())
        state = session.start()
        _sessions().add(session)
        logging.info(f"Created game {session.game_id}")
        return _state_response(session, state), 201
    except Exception as error:
        logging.error(f"Error creating game: {error}")
        logging.error(traceback.format_exc())
        if session is not None:
            session.stop()
        return jsonify({"error": "Failed to create game"}), 500


@bp.route("/api/games/<game_id>", methods=["GET"])
def get_game(game_id):
    session = _sessions().get(game_id)
    if session is None:
        return _not_found(game_id)
    return _state_response(session)


@bp.route("/api/games/<game_id>", methods=["DELETE"])
def delete_game(game_id):
    if not _sessions().remove(game_id):
        return _not_found(game_id)
    return jsonify({"game_id": game_id, "deleted": True})


@bp.route("/api/games/<game_id>/direction", methods=["POST"])
def change_direction(game_id):
    """
    Queue a direction change.

    Body: {"dx": int, "dy": int}. Vectors that are not one of the four unit
    directions, and reversals, leave the state unchanged.
    """
    session = _sessions().get(game_id)
    if session is None:
        return _not_found(game_id)

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not _is_int(payload.get("dx")) or not _is_int(payload.get("dy")):
        return jsonify({"error": "Body must be a JSON object with integer 'dx' and 'dy'"}), 400

    state = session.change_direction(payload["dx"], payload["dy"])
    return _state_response(session, state)


@bp.route("/api/games/<game_id>/input", methods=["POST"])
def handle_input(game_id):
    """
    Forward a raw input event.

    Body examples:
    - {"source": "keyboard", "key": "ArrowUp"}
    - {"source": "button", "button": "leftBtn", "type": "touchstart"}
    - {"source": "swipe", "start": [10, 10], "end": [80, 12]}
    - {"source": "restart"}
    """
    session = _sessions().get(game_id)
    if session is None:
        return _not_found(game_id)

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Body must be a JSON object"}), 400

    try:
        state = session.handle_input(payload)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return _state_response(session, state)


@bp.route("/api/games/<game_id>/restart", methods=["POST"])
def restart_game(game_id):
    session = _sessions().get(game_id)
    if session is None:
        return _not_found(game_id)
    try:
        state = session.restart()
        return _state_response(session, state)
    except Exception as error:
        logging.error(f"Error restarting game {game_id}: {error}")
        logging.error(traceback.format_exc())
        return jsonify({"error": "Failed to restart game"}), 500


@bp.route("/api/games/<game_id>/board", methods=["GET"])
def get_board(game_id):
    session = _sessions().get(game_id)
    if session is None:
        return _not_found(game_id)
    return Response(session.get_state().print_board() + "\n", mimetype="text/plain")


@bp.route("/api/games/<game_id>/frame.png", methods=["GET"])
def get_frame(game_id):
    """
    Render the current state as a PNG.

    Query parameters:
    - tile_size: pixels per grid cell (default 20)
    """
    session = _sessions().get(game_id)
    if session is None:
        return _not_found(game_id)

    tile_size = request.args.get("tile_size", default=DEFAULT_TILE_SIZE, type=int)
    try:
        renderer = FrameRenderer(tile_size=tile_size)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        png = renderer.render_png(session.get_state())
        return Response(png, mimetype="image/png")
    except Exception as error:
        logging.error(f"Error rendering frame for game {game_id}: {error}")
        logging.error(traceback.format_exc())
        return jsonify({"error": "Failed to render frame"}), 500


def create_app(settings: Optional[Settings] = None) -> Flask:
    if settings is None:
        settings = load_settings()

    app = Flask(__name__)
    app.config["SNAKE_SETTINGS"] = settings
    app.extensions["snake_sessions"] = SessionStore(
        idle_ttl_seconds=settings.session_ttl_seconds,
        finished_ttl_seconds=settings.finished_session_ttl_seconds,
    )

    # Enable CORS for API routes so a page served from another origin can play.
    # Allowed origins can be configured via CORS_ALLOWED_ORIGINS env var (comma-separated)
    CORS(app, resources={r"/api/*": {"origins": settings.allowed_origins}})

    app.register_blueprint(bp)
    return app


if __name__ == "__main__":
    _settings_from_env = load_settings()
    configure_logging(_settings_from_env.log_level)
    app = create_app(_settings_from_env)
    # Run the Flask app in debug mode.
    app.run(debug=_settings_from_env.debug, use_reloader=False)
