"""
Pointer and touch controls: on-screen direction buttons and swipes on the
play surface.
"""

from typing import Any, Dict, Optional, Sequence

from domain.constants import UP, DOWN, LEFT, RIGHT, SWIPE_THRESHOLD_PX
from .base import Control, Direction

BUTTON_DIRECTIONS: Dict[str, Direction] = {
    "upbtn": UP,
    "up": UP,
    "downbtn": DOWN,
    "down": DOWN,
    "leftbtn": LEFT,
    "left": LEFT,
    "rightbtn": RIGHT,
    "right": RIGHT,
}

# Only the initial press counts; releases and clicks are ignored.
PRESS_EVENTS = {"touchstart", "mousedown", "pointerdown"}


class ButtonControl(Control):
    """
    Maps a press on one of the four on-screen buttons to its direction.

    Event shape: {"button": "upBtn", "type": "touchstart"}. A missing type
    is treated as a press.
    """

    source = "button"

    def get_direction(self, event: Any) -> Optional[Direction]:
        if isinstance(event, str):
            event = {"button": event}
        if not isinstance(event, dict):
            return None

        event_type = event.get("type", "pointerdown")
        if not isinstance(event_type, str) or event_type.lower() not in PRESS_EVENTS:
            return None

        button = event.get("button")
        if not isinstance(button, str):
            return None
        return BUTTON_DIRECTIONS.get(button.strip().lower())


class SwipeControl(Control):
    """
    Turns a touch-start/touch-end pair into a direction.

    The axis with the larger displacement wins (vertical on a tie) and its
    magnitude must exceed the threshold. Screen y grows downward, so a
    positive vertical displacement is DOWN.
    """

    source = "swipe"

    def __init__(self, threshold: float = SWIPE_THRESHOLD_PX):
        self.threshold = threshold

    def get_direction(self, event: Any) -> Optional[Direction]:
        if not isinstance(event, dict):
            return None
        start = _point(event.get("start"))
        end = _point(event.get("end"))
        if start is None or end is None:
            return None
        return self.direction_between(start, end)

    def direction_between(self, start: Sequence[float], end: Sequence[float]) -> Optional[Direction]:
        dx = end[0] - start[0]
        dy = end[1] - start[1]

        if abs(dx) > abs(dy):
            if abs(dx) > self.threshold:
                return RIGHT if dx > 0 else LEFT
        elif abs(dy) > self.threshold:
            return DOWN if dy > 0 else UP
        return None


def _point(value: Any) -> Optional[Sequence[float]]:
    """Accept [x, y] or {"x": .., "y": ..}; anything else is None."""
    if isinstance(value, dict):
        value = (value.get("x"), value.get("y"))
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    x, y = value
    if isinstance(x, bool) or isinstance(y, bool):
        return None
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    return (x, y)
