"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Tuple


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
    """

    def __init__(self, positions: List[Tuple[int, int]]):
        if not positions:
            raise ValueError("A snake needs at least one segment.")
        self.positions = deque(positions)

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Tuple[int, int]:
        return self.positions[-1]

    def __len__(self) -> int:
        return len(self.positions)

    def contains(self, cell: Tuple[int, int]) -> bool:
        return cell in self.positions

    def advance(self, new_head: Tuple[int, int], grow: bool = False) -> None:
        """
        Move the head to new_head. The tail is dropped unless grow is set,
        so the length either stays the same or increases by one.
        """
        self.positions.appendleft(new_head)
        if not grow:
            self.positions.pop()

    def __repr__(self):
        return f"<Snake head={self.head} length={len(self)}>"
