"""
Base control interface for input sources.
"""

from typing import Any, Optional, Tuple

Direction = Tuple[int, int]


class Control:
    """
    Base class/interface for input mapping.

    Each control turns one raw input event into a direction vector,
    or None when the event does not ask for a direction change.
    """

    source = "base"

    def get_direction(self, event: Any) -> Optional[Direction]:
        """
        Return a direction given a raw input event.

        Args:
            event: Source-specific event payload

        Returns:
            One of UP, DOWN, LEFT, RIGHT, or None
        """
        raise NotImplementedError
