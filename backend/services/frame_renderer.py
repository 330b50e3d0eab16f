"""
Frame rendering for Snake game states.

Draws a GameState with PIL (Pillow):
- Black board background with faint grid lines
- Food cell
- Snake body cells, with the head in a distinct colour
- Optional game-over banner with the final score
"""

import io
from typing import Tuple

from PIL import Image, ImageDraw, ImageFont

from domain.game_state import GameState


DEFAULT_TILE_SIZE = 20
MIN_TILE_SIZE = 2
MAX_TILE_SIZE = 64


class ColorScheme:
    """Colours matching the browser canvas"""

    BACKGROUND = "#000000"
    GRID_LINE = "#111111"
    FOOD = "#e74c3c"
    SNAKE_BODY = "#2ecc71"
    SNAKE_HEAD = "#27ae60"
    OVERLAY_TEXT = "#FFFFFF"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


class FrameRenderer:
    """Render GameState snapshots to images"""

    def __init__(self, tile_size: int = DEFAULT_TILE_SIZE, draw_grid: bool = True):
        if not MIN_TILE_SIZE <= tile_size <= MAX_TILE_SIZE:
            raise ValueError(
                f"tile_size must be between {MIN_TILE_SIZE} and {MAX_TILE_SIZE}, got {tile_size}"
            )
        self.tile_size = tile_size
        self.draw_grid = draw_grid
        self.font = ImageFont.load_default()

    def render(self, state: GameState) -> Image.Image:
        """Render a single frame of the game"""
        size = state.grid_size * self.tile_size
        img = Image.new('RGB', (size, size), hex_to_rgb(ColorScheme.BACKGROUND))
        draw = ImageDraw.Draw(img)

        if self.draw_grid and self.tile_size >= 8:
            for i in range(1, state.grid_size):
                offset = i * self.tile_size
                draw.line([offset, 0, offset, size], fill=hex_to_rgb(ColorScheme.GRID_LINE), width=1)
                draw.line([0, offset, size, offset], fill=hex_to_rgb(ColorScheme.GRID_LINE), width=1)

        food_x, food_y = state.food
        self._draw_cell(draw, food_x, food_y, hex_to_rgb(ColorScheme.FOOD))

        # Body first so the head is always drawn on top
        for pos_x, pos_y in state.snake[1:]:
            self._draw_cell(draw, pos_x, pos_y, hex_to_rgb(ColorScheme.SNAKE_BODY))

        head_x, head_y = state.head
        self._draw_cell(draw, head_x, head_y, hex_to_rgb(ColorScheme.SNAKE_HEAD))

        if state.is_over:
            self._draw_game_over(draw, size, state.score)

        return img

    def render_png(self, state: GameState) -> bytes:
        buffer = io.BytesIO()
        self.render(state).save(buffer, format="PNG")
        return buffer.getvalue()

    def _draw_cell(
        self,
        draw: ImageDraw.ImageDraw,
        cell_x: int,
        cell_y: int,
        color: Tuple[int, int, int]
    ):
        """Fill one grid cell"""
        x = cell_x * self.tile_size
        y = cell_y * self.tile_size
        draw.rectangle(
            [x, y, x + self.tile_size - 1, y + self.tile_size - 1],
            fill=color
        )

    def _draw_game_over(self, draw: ImageDraw.ImageDraw, size: int, score: int):
        text = f"Game Over - Score: {score}"
        bbox = draw.textbbox((0, 0), text, font=self.font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        draw.text(
            ((size - text_width) // 2, (size - text_height) // 2),
            text,
            fill=hex_to_rgb(ColorScheme.OVERLAY_TEXT),
            font=self.font
        )
