import pyglet
from typing import Optional, Tuple

from genelife.world.grid import Position

class Camera:
    """Maps board cells to window pixels and back.

    The whole board is stretched over the window, so a cell's on-screen size
    follows the window when it is resized. Board row 0 is drawn at the top of
    the window while pyglet's origin is bottom-left, hence the flipped y axis.
    """

    def __init__(self, window: 'pyglet.window.Window', board_width: int, board_height: int) -> None:
        """Initializes the camera.

        Args:
            window: The pyglet window this camera is associated with.
            board_width: Width of the board in cells.
            board_height: Height of the board in cells.
        """
        self.window = window
        self.board_width = board_width
        self.board_height = board_height

    @property
    def cell_width(self) -> float:
        return self.window.width / self.board_width

    @property
    def cell_height(self) -> float:
        return self.window.height / self.board_height

    def cell_to_screen(self, pos: Position) -> Tuple[float, float]:
        """Returns the bottom-left screen corner of the cell at ``pos``."""
        screen_x = pos.x * self.cell_width
        screen_y = (self.board_height - 1 - pos.y) * self.cell_height
        return screen_x, screen_y

    def cell_center(self, pos: Position) -> Tuple[float, float]:
        screen_x, screen_y = self.cell_to_screen(pos)
        return screen_x + self.cell_width / 2, screen_y + self.cell_height / 2

    def screen_to_cell(self, screen_x: float, screen_y: float) -> Optional[Position]:
        """Converts a window pixel to the board cell under it, or None outside the board."""
        cell_x = int(screen_x // self.cell_width)
        cell_y = self.board_height - 1 - int(screen_y // self.cell_height)
        if not (0 <= cell_x < self.board_width and 0 <= cell_y < self.board_height):
            return None
        return Position(cell_x, cell_y)
