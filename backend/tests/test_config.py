"""
Tests for environment-driven settings.
"""

import sys
import os
from unittest.mock import patch

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from config import load_settings, DEFAULT_ALLOWED_ORIGINS


ENV_KEYS = [
    "SNAKE_GRID_SIZE", "SNAKE_TICK_MS", "SNAKE_SEED", "SNAKE_HOST", "SNAKE_PORT",
    "CORS_ALLOWED_ORIGINS", "LOG_LEVEL", "FLASK_DEBUG",
    "SNAKE_SESSION_TTL_SECONDS", "SNAKE_FINISHED_SESSION_TTL_SECONDS",
]


@patch.object(config, "load_dotenv")
def test_defaults(mock_load_dotenv, monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    settings = load_settings()

    mock_load_dotenv.assert_called_once()
    assert settings.grid_size == 20
    assert settings.tick_ms == 120
    assert settings.seed is None
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert settings.session_ttl_seconds == 1800
    assert settings.finished_session_ttl_seconds == 60


@patch.object(config, "load_dotenv")
def test_environment_overrides(mock_load_dotenv, monkeypatch):
    monkeypatch.setenv("SNAKE_GRID_SIZE", "30")
    monkeypatch.setenv("SNAKE_TICK_MS", "80")
    monkeypatch.setenv("SNAKE_SEED", "42")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FLASK_DEBUG", "true")
    monkeypatch.setenv("SNAKE_SESSION_TTL_SECONDS", "300")
    monkeypatch.setenv("SNAKE_FINISHED_SESSION_TTL_SECONDS", "10")

    settings = load_settings()

    assert settings.grid_size == 30
    assert settings.tick_ms == 80
    assert settings.seed == 42
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]
    assert settings.log_level == "DEBUG"
    assert settings.debug is True
    assert settings.session_ttl_seconds == 300
    assert settings.finished_session_ttl_seconds == 10


@patch.object(config, "load_dotenv")
def test_invalid_integer_falls_back(mock_load_dotenv, monkeypatch):
    monkeypatch.setenv("SNAKE_GRID_SIZE", "big")
    monkeypatch.setenv("SNAKE_SEED", "")

    settings = load_settings()

    assert settings.grid_size == 20
    assert settings.seed is None
