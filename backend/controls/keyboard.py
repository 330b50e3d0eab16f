"""
Keyboard control - arrow keys and WASD.
"""

from typing import Any, Dict, Optional

from domain.constants import UP, DOWN, LEFT, RIGHT
from .base import Control, Direction

KEY_DIRECTIONS: Dict[str, Direction] = {
    "arrowup": UP,
    "w": UP,
    "arrowdown": DOWN,
    "s": DOWN,
    "arrowleft": LEFT,
    "a": LEFT,
    "arrowright": RIGHT,
    "d": RIGHT,
}


class KeyboardControl(Control):
    """Maps KeyboardEvent.key values to directions, ignoring case."""

    source = "keyboard"

    def get_direction(self, event: Any) -> Optional[Direction]:
        key = event.get("key") if isinstance(event, dict) else event
        if not isinstance(key, str):
            return None
        return KEY_DIRECTIONS.get(key.strip().lower())
