"""
Game constants for the Snake engine.
"""

# Movement directions as (dx, dy) unit vectors. Screen coordinates:
# x grows to the right, y grows downward.
UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)
VALID_DIRECTIONS = frozenset({UP, DOWN, LEFT, RIGHT})

# Game settings
GRID_SIZE = 20
INITIAL_LENGTH = 3
INITIAL_DIRECTION = RIGHT
TICK_INTERVAL_MS = 120
MAX_FOOD_PLACEMENT_ATTEMPTS = 10_000

# Input settings
SWIPE_THRESHOLD_PX = 30

# Session settings
# Sessions nobody has touched for this long are dropped.
DEFAULT_IDLE_TTL_SECONDS = 30 * 60
# Finished games stay a little while so the page can show the final score.
DEFAULT_FINISHED_TTL_SECONDS = 60
