"""
GameState entity - a snapshot of the game at a point in time.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


class GameStatus(str, enum.Enum):
    RUNNING = "running"
    OVER = "over"


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        snake: tuple of (x, y) segments, head first
        velocity: direction the snake will move on the next tick
        food: (x, y) position of the food
        score: number of food items eaten since the last restart
        status: GameStatus.RUNNING or GameStatus.OVER
        grid_size: board dimension N (the board is N x N)
        tick: number of successful moves since the last restart
        death_reason: 'wall', 'self' or 'no_room' once the game is over, else None
    """

    snake: Tuple[Tuple[int, int], ...]
    velocity: Tuple[int, int]
    food: Tuple[int, int]
    score: int
    status: GameStatus
    grid_size: int
    tick: int = 0
    death_reason: Optional[str] = None

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake[0]

    @property
    def is_over(self) -> bool:
        return self.status is GameStatus.OVER

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict (tuples become lists)."""
        return {
            "snake": [list(segment) for segment in self.snake],
            "velocity": list(self.velocity),
            "food": list(self.food),
            "score": self.score,
            "status": self.status.value,
            "grid_size": self.grid_size,
            "tick": self.tick,
            "death_reason": self.death_reason,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        H = snake head
        o = snake body
        Row 0 is printed first, matching screen coordinates.
        """
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        fx, fy = self.food
        board[fy][fx] = 'F'

        for pos_idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if pos_idx == 0 else 'o'

        result = [f"{y:2d} {' '.join(row)}" for y, row in enumerate(board)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))
        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, status={self.status.value}, "
            f"score={self.score}, head={self.head}, food={self.food}>"
        )
