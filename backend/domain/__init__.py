"""
Domain entities for the Snake game engine.

This module contains the core game entities that are independent of
presentation concerns (canvas drawing, HTTP, input events).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_DIRECTIONS,
    GRID_SIZE, INITIAL_LENGTH, TICK_INTERVAL_MS, SWIPE_THRESHOLD_PX,
    MAX_FOOD_PLACEMENT_ATTEMPTS,
)
from .snake import Snake
from .game_state import GameState, GameStatus

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_DIRECTIONS',
    'GRID_SIZE', 'INITIAL_LENGTH', 'TICK_INTERVAL_MS', 'SWIPE_THRESHOLD_PX',
    'MAX_FOOD_PLACEMENT_ATTEMPTS',
    'Snake',
    'GameState',
    'GameStatus',
]
