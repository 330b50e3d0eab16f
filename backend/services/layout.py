"""
Board layout: pixel tile size for a given viewport.

Presentation only; the grid dimension and engine state are never touched.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from domain.constants import GRID_SIZE

VIEWPORT_MARGIN_PX = 40
HEIGHT_FRACTION = 0.8
MIN_BOARD_PX = 300


@dataclass(frozen=True)
class BoardLayout:
    tile_size: int
    canvas_size: int
    grid_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tile_size": self.tile_size,
            "canvas_size": self.canvas_size,
            "grid_size": self.grid_size,
        }


def _as_dimension(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or value < 0:
        return 0.0
    return float(value)


def compute_layout(viewport_width: Any, viewport_height: Any, grid_size: int = GRID_SIZE) -> BoardLayout:
    """
    Fit a square board into the viewport.

    The board uses the smaller of the viewport width and 80% of its height,
    minus a margin, and never shrinks below MIN_BOARD_PX. The tile size is
    the largest whole pixel count that fits grid_size tiles.
    """
    if grid_size < 1:
        raise ValueError("grid_size must be positive.")

    width = _as_dimension(viewport_width)
    height = _as_dimension(viewport_height)

    available = min(width, height * HEIGHT_FRACTION) - VIEWPORT_MARGIN_PX
    if math.isinf(available):
        available = MIN_BOARD_PX
    board_size = max(MIN_BOARD_PX, math.floor(available))
    tile_size = board_size // grid_size

    return BoardLayout(
        tile_size=tile_size,
        canvas_size=tile_size * grid_size,
        grid_size=grid_size,
    )
