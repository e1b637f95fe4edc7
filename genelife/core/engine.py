import pyglet
import time
from typing import Optional

from genelife.config import GameConfig
from genelife.core.simulation import Simulation, report_oldest_agent
from genelife.ui.camera import Camera
from genelife.ui.render import RenderSystem, InputSystem
from genelife.world.grid import Position
from genelife.world.snapshot import SnapshotError

class Engine:
    """Manages the viewer window, the render/input systems and the main loop.

    Keys:
        Q: quit, R: re-initialize the generation, S: one tick,
        N: run the generation to extinction and breed the next one,
        SPACE: toggle automatic ticking, D: dump a snapshot, L: load a snapshot.
    Clicking a cell prints whatever sits on it.
    """

    def __init__(self, config: GameConfig, simulation: Optional[Simulation] = None) -> None:
        self.config = config
        self.simulation = simulation if simulation is not None else Simulation(config)
        self.window: Optional[pyglet.window.Window] = None
        self.camera: Optional[Camera] = None
        self.render_system: Optional[RenderSystem] = None
        self.input_system: Optional[InputSystem] = None
        self.stop_requested = False
        self.auto_tick = False
        self.time_since_last_tick = 0.0

        self._initialize_pyglet()
        self.initialize_systems()

        if self.window:
            pyglet.clock.schedule_interval(self.update, 1 / self.config.target_fps)

    def _initialize_pyglet(self) -> None:
        if self.config.headless_mode:
            print("Headless mode: Pyglet window not initialized.")
            return
        self.window = pyglet.window.Window(
            width=self.config.window_width,
            height=self.config.window_height,
            caption="GeneLife",
            resizable=True
        )
        self.camera = Camera(self.window, self.config.board_width, self.config.board_height)

        @self.window.event
        def on_draw() -> None:
            if self.render_system:
                self.render_system.process(self.simulation.world)

        @self.window.event
        def on_close() -> None:
            print("Window closed, exiting engine...")
            self.stop_requested = True

    def initialize_systems(self) -> None:
        if not (self.window and self.camera):
            return
        key = pyglet.window.key
        self.input_system = InputSystem(
            self.window,
            self.camera,
            key_commands={
                key.Q: self.stop,
                key.R: self.simulation.reset,
                key.S: self.simulation.advance_tick,
                key.N: self.simulation.advance_generation,
                key.SPACE: self.toggle_auto_tick,
                key.D: self.dump,
                key.L: self.load,
            },
            on_cell_click=self.print_cell,
        )
        self.render_system = RenderSystem(self.window, self.camera)

    def update(self, dt: float) -> None:
        if self.stop_requested:
            pyglet.app.exit()
            return

        if not self.auto_tick:
            return
        self.time_since_last_tick += dt
        while self.time_since_last_tick >= self.config.auto_tick_interval:
            self.time_since_last_tick -= self.config.auto_tick_interval
            if self.simulation.world.is_everyone_dead():
                self.simulation.advance_generation()
            else:
                self.simulation.advance_tick()

    def toggle_auto_tick(self) -> None:
        self.auto_tick = not self.auto_tick
        self.time_since_last_tick = 0.0
        print(f"Automatic ticking {'on' if self.auto_tick else 'off'}.")

    def dump(self) -> None:
        try:
            self.simulation.dump()
        except SnapshotError as e:
            print(f"Error: {e}")

    def load(self) -> None:
        try:
            self.simulation.restore()
        except SnapshotError as e:
            print(f"Error: {e}")

    def print_cell(self, pos: Position) -> None:
        found = self.simulation.query_cell(pos)
        if not found:
            print(f"Nothing at [{pos.x};{pos.y}].")
        for entity in found:
            print(entity.describe())

    def run(self) -> None:
        print("Starting engine loop...")
        if self.window:
            pyglet.app.run()
        else:
            # Headless: breed generations back to back until stopped or out of budget
            print("Running in headless mode...")
            started = time.perf_counter()
            for _ in range(self.config.training_generations):
                if self.stop_requested:
                    break
                self.simulation.advance_generation()
            print(f"Headless mode finished after {time.perf_counter() - started:.2f}s.")
        print("Engine loop stopped.")
        report_oldest_agent(self.simulation.world)

    def stop(self) -> None:
        self.stop_requested = True
