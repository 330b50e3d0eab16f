"""
Runtime settings for the Snake server.

Values come from the environment (a local .env file is loaded first) and
fall back to the game defaults.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from domain.constants import (
    DEFAULT_FINISHED_TTL_SECONDS,
    DEFAULT_IDLE_TTL_SECONDS,
    GRID_SIZE,
    TICK_INTERVAL_MS,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5000",
    "http://127.0.0.1:5000",
    "http://localhost:3000",
]


@dataclass
class Settings:
    grid_size: int = GRID_SIZE
    tick_ms: int = TICK_INTERVAL_MS
    seed: Optional[int] = None
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    session_ttl_seconds: int = DEFAULT_IDLE_TTL_SECONDS
    finished_session_ttl_seconds: int = DEFAULT_FINISHED_TTL_SECONDS
    # Tests drive ticks by hand instead of starting timer threads.
    manual_ticks: bool = False


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s: %r, using %s", name, raw, default)
        return default


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Build Settings from environment variables (SNAKE_*, CORS_ALLOWED_ORIGINS, LOG_LEVEL, FLASK_DEBUG)."""
    load_dotenv()

    allowed_origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
    if allowed_origins_env:
        allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]
    else:
        allowed_origins = list(DEFAULT_ALLOWED_ORIGINS)

    return Settings(
        grid_size=_int_env("SNAKE_GRID_SIZE", GRID_SIZE),
        tick_ms=_int_env("SNAKE_TICK_MS", TICK_INTERVAL_MS),
        seed=_int_env("SNAKE_SEED", None),
        host=os.getenv("SNAKE_HOST", "127.0.0.1"),
        port=_int_env("SNAKE_PORT", 5000),
        debug=_bool_env("FLASK_DEBUG"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        allowed_origins=allowed_origins,
        session_ttl_seconds=_int_env("SNAKE_SESSION_TTL_SECONDS", DEFAULT_IDLE_TTL_SECONDS),
        finished_session_ttl_seconds=_int_env(
            "SNAKE_FINISHED_SESSION_TTL_SECONDS", DEFAULT_FINISHED_TTL_SECONDS
        ),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
