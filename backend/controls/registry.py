"""
Registry for input controls.

Maps the "source" field of a raw input event (e.g. 'keyboard', 'swipe')
to the control class that interprets it.
"""

from typing import Callable, Dict, List, Optional, Type

from .base import Control
from .keyboard import KeyboardControl
from .touch import ButtonControl, SwipeControl


CONTROL_LOADERS: Dict[str, Callable[[], Type[Control]]] = {
    "keyboard": lambda: KeyboardControl,
    "button": lambda: ButtonControl,
    "swipe": lambda: SwipeControl,
}

# Canonical list of available sources (for API exposure)
AVAILABLE_CONTROLS = list(CONTROL_LOADERS.keys())


def get_control_class(source: Optional[str]) -> Type[Control]:
    """
    Get the control class for an input source.

    Raises:
        ValueError: If source is not recognized.
    """
    key = source.strip().lower() if isinstance(source, str) else ""

    if key not in CONTROL_LOADERS:
        available = ", ".join(AVAILABLE_CONTROLS)
        raise ValueError(
            f"Unknown input source '{source}'. Available sources: {available}"
        )

    return CONTROL_LOADERS[key]()


def get_control(source: Optional[str]) -> Control:
    return get_control_class(source)()


def list_controls() -> List[Dict[str, str]]:
    """
    Return metadata about all available input sources.
    """
    return [
        {"key": "keyboard", "description": "Arrow keys and WASD (case-insensitive)"},
        {"key": "button", "description": "On-screen direction buttons, on touchstart/mousedown"},
        {"key": "swipe", "description": "Swipe on the board; dominant axis beyond 30px wins"},
    ]
