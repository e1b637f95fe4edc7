import pyglet
from typing import Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from genelife.core.systems import System
from genelife.ui.camera import Camera
from genelife.world.grid import Direction, Position

if TYPE_CHECKING:
    from genelife.core.agent import Agent
    from genelife.world.world import GameWorld

BACKGROUND_COLOR = (0x24, 0x29, 0x2E)
LINE_COLOR = (0x50, 0x50, 0x50)
AGENT_COLOR = (0x50, 0xA0, 0x50)
DEAD_AGENT_COLOR = (0x60, 0x60, 0x60)
WALL_COLOR = (0x56, 0x80, 0xAD)
FOOD_COLOR = (0xB2, 0x24, 0xFF)

AGENT_PADDING = 6.0
FOOD_PADDING = 12.5

# Triangle corners inside a unit cell (y pointing down), tip along the facing
AGENT_TRIANGLES: Dict[Direction, Tuple[Tuple[float, float], ...]] = {
    Direction.RIGHT: ((0.0, 0.0), (1.0, 0.5), (0.0, 1.0)),
    Direction.UP: ((0.0, 1.0), (0.5, 0.0), (1.0, 1.0)),
    Direction.LEFT: ((1.0, 0.0), (1.0, 1.0), (0.0, 0.5)),
    Direction.DOWN: ((0.0, 0.0), (1.0, 0.0), (0.5, 1.0)),
}

class RenderSystem(System):
    """Draws a read-only view of a generation: grid, walls, food, agents and a status line."""

    def __init__(self, window: 'pyglet.window.Window', camera: Camera) -> None:
        super().__init__()
        self.window = window
        self.camera = camera
        self.status_label = pyglet.text.Label(
            '',
            font_name='Arial', font_size=12,
            x=10, y=self.window.height - 10, anchor_x='left', anchor_y='top',
            batch=None # Drawn separately, on top of the board
        )

    def process(self, world: 'GameWorld') -> None:
        self.window.clear()
        batch = pyglet.graphics.Batch()
        grid_group = pyglet.graphics.Group(order=0)
        entity_group = pyglet.graphics.Group(order=1)
        shapes: List[pyglet.shapes.ShapeBase] = [
            pyglet.shapes.Rectangle(0, 0, self.window.width, self.window.height, color=BACKGROUND_COLOR, batch=batch, group=grid_group)
        ]
        shapes.extend(self._grid_lines(batch, grid_group))

        for wall in world.walls:
            x, y = self.camera.cell_to_screen(wall.pos)
            shapes.append(pyglet.shapes.Rectangle(
                x, y, self.camera.cell_width, self.camera.cell_height,
                color=WALL_COLOR, batch=batch, group=entity_group
            ))

        radius = max(1.0, min(self.camera.cell_width, self.camera.cell_height) * 0.5 - FOOD_PADDING)
        for food in world.food:
            if food.quantity <= 0:
                continue
            cx, cy = self.camera.cell_center(food.pos)
            shapes.append(pyglet.shapes.Circle(cx, cy, radius, color=FOOD_COLOR, batch=batch, group=entity_group))

        for agent in world.agents:
            shapes.append(self._agent_shape(agent, batch, entity_group))

        batch.draw()
        self.update_status(world)
        self.status_label.draw()

    def _grid_lines(self, batch: pyglet.graphics.Batch, group: pyglet.graphics.Group) -> List[pyglet.shapes.ShapeBase]:
        lines: List[pyglet.shapes.ShapeBase] = []
        for x in range(1, self.camera.board_width):
            screen_x = x * self.camera.cell_width
            lines.append(pyglet.shapes.Line(screen_x, 0, screen_x, self.window.height, color=LINE_COLOR, batch=batch, group=group))
        for y in range(1, self.camera.board_height):
            screen_y = y * self.camera.cell_height
            lines.append(pyglet.shapes.Line(0, screen_y, self.window.width, screen_y, color=LINE_COLOR, batch=batch, group=group))
        return lines

    def _agent_shape(self, agent: 'Agent', batch: pyglet.graphics.Batch, group: pyglet.graphics.Group) -> pyglet.shapes.Triangle:
        left, bottom = self.camera.cell_to_screen(agent.pos)
        inner_width = max(1.0, self.camera.cell_width - AGENT_PADDING * 2)
        inner_height = max(1.0, self.camera.cell_height - AGENT_PADDING * 2)
        top = bottom + self.camera.cell_height
        points = [
            (left + AGENT_PADDING + u * inner_width, top - AGENT_PADDING - v * inner_height)
            for u, v in AGENT_TRIANGLES[agent.direction]
        ]
        (x1, y1), (x2, y2), (x3, y3) = points
        color = AGENT_COLOR if agent.alive else DEAD_AGENT_COLOR
        return pyglet.shapes.Triangle(x1, y1, x2, y2, x3, y3, color=color, batch=batch, group=group)

    def update_status(self, world: 'GameWorld') -> None:
        self.status_label.y = self.window.height - 10
        self.status_label.text = (
            f"Generation: {world.generation}  Tick: {world.tick_count}  "
            f"Alive: {len(world.living_agents())}/{len(world.agents)}"
        )

class InputSystem(System):
    """Translates key presses and mouse clicks into viewer commands.

    Args:
        window: The pyglet window to listen on.
        camera: Used to turn click coordinates into board cells.
        key_commands: pyglet key symbol -> zero-argument command.
        on_cell_click: Called with the clicked board cell.
    """

    def __init__(
        self,
        window: 'pyglet.window.Window',
        camera: Camera,
        key_commands: Dict[int, Callable[[], None]],
        on_cell_click: Optional[Callable[[Position], None]] = None,
    ) -> None:
        super().__init__()
        self.window = window
        self.camera = camera
        self.key_commands = key_commands
        self.on_cell_click = on_cell_click
        self.window.push_handlers(self)

    def on_key_press(self, symbol: int, modifiers: int) -> None:
        command = self.key_commands.get(symbol)
        if command is not None:
            command()

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> None:
        if self.on_cell_click is None:
            return
        cell = self.camera.screen_to_cell(x, y)
        if cell is not None:
            self.on_cell_click(cell)

    def process(self, *args: object) -> None:
        # Event driven; nothing to poll per frame
        pass
