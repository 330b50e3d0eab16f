"""
Input controls for the Snake game.

Each control maps a raw browser input event (key press, button press,
swipe) to a direction vector understood by the engine.
"""

from .base import Control
from .keyboard import KeyboardControl
from .touch import ButtonControl, SwipeControl
from .registry import get_control, get_control_class, list_controls, AVAILABLE_CONTROLS

__all__ = [
    'Control',
    'KeyboardControl',
    'ButtonControl',
    'SwipeControl',
    'get_control',
    'get_control_class',
    'list_controls',
    'AVAILABLE_CONTROLS',
]
