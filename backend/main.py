import argparse
import logging
import random
from typing import List, Optional, Tuple

from domain.constants import (
    GRID_SIZE,
    INITIAL_DIRECTION,
    INITIAL_LENGTH,
    MAX_FOOD_PLACEMENT_ATTEMPTS,
    VALID_DIRECTIONS,
)
from domain.game_state import GameState, GameStatus
from domain.snake import Snake

logger = logging.getLogger(__name__)


class FoodPlacementError(RuntimeError):
    """Raised when no free cell can be found for the food."""


class SnakeGame:
    """
    Manages:
      - Board (grid_size x grid_size)
      - The snake and its velocity
      - The food
      - Score
      - Running / over status

    All mutation goes through restart(), set_direction() and tick(); each
    of them returns a GameState snapshot for rendering.
    """

    def __init__(
        self,
        grid_size: int = GRID_SIZE,
        rng: Optional[random.Random] = None,
        max_food_attempts: int = MAX_FOOD_PLACEMENT_ATTEMPTS
    ):
        # The start snake is laid out leftwards from the centre cell.
        if grid_size // 2 < INITIAL_LENGTH - 1:
            raise ValueError(
                f"Grid size {grid_size} is too small for a snake of length {INITIAL_LENGTH}."
            )
        if max_food_attempts < 1:
            raise ValueError("max_food_attempts must be at least 1.")

        self.grid_size = grid_size
        self.rng = rng if rng is not None else random.Random()
        self.max_food_attempts = max_food_attempts

        self.snake: Snake
        self.velocity: Tuple[int, int] = INITIAL_DIRECTION
        # Velocity the last tick moved with; reversals are judged against it.
        self._tick_velocity: Tuple[int, int] = INITIAL_DIRECTION
        self.food: Tuple[int, int] = (0, 0)
        self.score = 0
        self.tick_count = 0
        self.status = GameStatus.RUNNING
        self.death_reason: Optional[str] = None

        self.restart()

    @property
    def is_over(self) -> bool:
        return self.status is GameStatus.OVER

    def restart(self) -> GameState:
        """
        Reset the snake to the centre, heading right, with a score of 0
        and freshly placed food. Works in any status.
        """
        cx = self.grid_size // 2
        cy = self.grid_size // 2
        self.snake = Snake([(cx - i, cy) for i in range(INITIAL_LENGTH)])
        self.velocity = INITIAL_DIRECTION
        self._tick_velocity = INITIAL_DIRECTION
        self.score = 0
        self.tick_count = 0
        self.death_reason = None
        self.food = self._random_free_cell()
        self.status = GameStatus.RUNNING
        logger.debug("New game on %dx%d grid, food at %s", self.grid_size, self.grid_size, self.food)
        return self.get_current_state()

    def load(
        self,
        positions: List[Tuple[int, int]],
        velocity: Tuple[int, int] = INITIAL_DIRECTION,
        food: Optional[Tuple[int, int]] = None,
        score: int = 0
    ) -> GameState:
        """
        Put the game into an arbitrary running position, e.g. to resume a
        saved board. Food is placed randomly when not given.
        """
        for cell in positions:
            if not self._in_bounds(cell):
                raise ValueError(f"Snake segment out of bounds at {cell}.")
        if len(set(positions)) != len(positions):
            raise ValueError("Snake segments must not overlap.")
        if velocity not in VALID_DIRECTIONS:
            raise ValueError(f"Invalid velocity {velocity}.")
        if score < 0:
            raise ValueError("Score must be non-negative.")

        self.snake = Snake(list(positions))
        self.velocity = velocity
        self._tick_velocity = velocity
        self.score = score
        self.tick_count = 0
        self.death_reason = None
        self.status = GameStatus.RUNNING

        if food is None:
            self.food = self._random_free_cell()
        elif not self._in_bounds(food) or self.snake.contains(food):
            raise ValueError(f"Food must be on a free cell, got {food}.")
        else:
            self.food = food
        return self.get_current_state()

    def set_direction(self, dx: int, dy: int) -> GameState:
        """
        Queue a direction change for the next tick.

        Ignored when the game is over, when (dx, dy) is not a unit vector,
        or when it would reverse the direction the snake last moved in.
        The last accepted call before a tick wins.
        """
        direction = (dx, dy)
        if self.is_over:
            logger.debug("Ignoring direction %s: game is over", direction)
        elif direction not in VALID_DIRECTIONS:
            logger.debug("Ignoring invalid direction %s", direction)
        elif direction == (-self._tick_velocity[0], -self._tick_velocity[1]):
            logger.debug("Ignoring reversal %s", direction)
        else:
            self.velocity = direction
        return self.get_current_state()

    def tick(self) -> GameState:
        """
        Advance the game one step:
          1) If game is over, do nothing
          2) Compute the new head from the queued velocity
          3) Wall collision ends the game
          4) Self collision ends the game
          5) Move; on food grow, score and re-place the food
        """
        if self.is_over:
            return self.get_current_state()

        self._tick_velocity = self.velocity
        hx, hy = self.snake.head
        dx, dy = self.velocity
        new_head = (hx + dx, hy + dy)

        if not self._in_bounds(new_head):
            self.end_game("wall")
            return self.get_current_state()

        if self.snake.contains(new_head):
            self.end_game("self")
            return self.get_current_state()

        eats_food = new_head == self.food
        # Place the next food before moving so a placement failure leaves the board untouched.
        next_food = self._random_free_cell(extra=new_head) if eats_food else self.food

        self.snake.advance(new_head, grow=eats_food)
        self.tick_count += 1

        if eats_food:
            self.score += 1
            self.food = next_food
            logger.debug("Food eaten at %s, score %d, new food at %s", new_head, self.score, self.food)

        return self.get_current_state()

    def end_game(self, reason: str):
        self.status = GameStatus.OVER
        self.death_reason = reason
        logger.info("Game Over (%s) after %d moves. Final score: %d", reason, self.tick_count, self.score)

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            snake=tuple(self.snake.positions),
            velocity=self.velocity,
            food=self.food,
            score=self.score,
            status=self.status,
            grid_size=self.grid_size,
            tick=self.tick_count,
            death_reason=self.death_reason
        )

    def _in_bounds(self, cell: Tuple[int, int]) -> bool:
        x, y = cell
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def _random_free_cell(self, extra: Optional[Tuple[int, int]] = None) -> Tuple[int, int]:
        """
        Return a random cell (x, y) not occupied by the snake, sampling
        until one is found or the attempt budget runs out.

        ``extra`` is one more cell to treat as occupied, e.g. the head the
        snake is about to grow into.
        """
        occupied = len(self.snake) + (1 if extra is not None else 0)
        if occupied >= self.grid_size * self.grid_size:
            raise FoodPlacementError("The snake fills the whole grid; there is no room for food.")

        for _ in range(self.max_food_attempts):
            x = self.rng.randrange(self.grid_size)
            y = self.rng.randrange(self.grid_size)
            if (x, y) != extra and not self.snake.contains((x, y)):
                return (x, y)

        raise FoodPlacementError(
            f"Could not place food after {self.max_food_attempts} attempts "
            f"(snake length {occupied} on a {self.grid_size}x{self.grid_size} grid)."
        )


# -------------------------------
# Main Entry Point
# -------------------------------
def main():
    from config import load_settings, configure_logging

    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Serve the Snake game in the browser."
    )
    parser.add_argument("--host", type=str, default=settings.host,
                        help="Interface to bind the web server to")
    parser.add_argument("--port", type=int, default=settings.port,
                        help="Port to bind the web server to")
    parser.add_argument("--grid-size", type=int, default=settings.grid_size,
                        help="Number of tiles on each side of the board")
    parser.add_argument("--tick-ms", type=int, default=settings.tick_ms,
                        help="Milliseconds between game ticks")
    parser.add_argument("--seed", type=int, default=settings.seed,
                        help="Seed for food placement (random if omitted)")

    args = parser.parse_args()

    settings.grid_size = args.grid_size
    settings.tick_ms = args.tick_ms
    settings.seed = args.seed

    configure_logging(settings.log_level)

    from app import create_app

    app = create_app(settings)
    app.run(host=args.host, port=args.port, debug=settings.debug, use_reloader=False)


if __name__ == "__main__":
    main()
