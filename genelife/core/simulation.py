import os
from typing import List, Optional, Union

import numpy as np

from genelife.agents.components import Food, Wall
from genelife.config import GameConfig
from genelife.core.agent import Agent
from genelife.core.evolution import prepare_next_generation
from genelife.core.systems import step
from genelife.world import snapshot
from genelife.world.grid import Position
from genelife.world.world import GameWorld

def run_to_extinction(world: GameWorld) -> int:
    """Steps ``world`` until no agent is alive. Returns the number of ticks run.

    Every agent dies of old age after ``max_lifetime`` ticks at the latest, so this
    always terminates.
    """
    ticks = 0
    while not world.is_everyone_dead():
        step(world)
        ticks += 1
    return ticks

def report_oldest_agent(world: GameWorld) -> None:
    oldest = world.oldest_agent()
    if oldest is None:
        print(f"[Simulation] Generation {world.generation} has no agents.")
        return
    print(f"[Simulation] Oldest agent of generation {world.generation}:")
    print(oldest.describe())

class Simulation:
    """
    Owns the generation currently on screen and implements the viewer's commands.

    Only one world is live at a time; at a generation boundary the finished world
    is reported once and then replaced by the one bred from it.

    Args:
        config: The game configuration object.
        world: Optional starting world. A fresh one is created if omitted.
    """
    def __init__(self, config: GameConfig, world: Optional[GameWorld] = None) -> None:
        self.config = config
        self.rng: np.random.Generator = np.random.default_rng(config.seed)
        self.world: GameWorld = world if world is not None else GameWorld.create(config, self.rng)

    def reset(self) -> GameWorld:
        """Throws away the current generation and initializes a new random one."""
        self.world = GameWorld.create(self.config, self.rng)
        print(f"[Simulation] Re-initialized generation with {len(self.world.agents)} agents.")
        return self.world

    def advance_tick(self) -> None:
        step(self.world)
        if self.config.verbose:
            print(f"[Simulation] Tick {self.world.tick_count}: {len(self.world.living_agents())} agents alive.")

    def advance_generation(self) -> GameWorld:
        """Runs the current generation to extinction, reports it and breeds the next one."""
        ticks = run_to_extinction(self.world)
        if self.config.verbose:
            print(f"[Simulation] Generation {self.world.generation} died out after {ticks} more ticks.")
        report_oldest_agent(self.world)
        self.world = prepare_next_generation(self.world)
        return self.world

    def query_cell(self, pos: Position) -> List[Union[Agent, Food, Wall]]:
        """Returns whatever agent, food and wall sit on ``pos``, in that order."""
        found: List[Union[Agent, Food, Wall]] = []
        agent = self.world.agent_at(pos)
        if agent is not None:
            found.append(agent)
        food = self.world.food_at(pos)
        if food is not None:
            found.append(food)
        wall = self.world.wall_at(pos)
        if wall is not None:
            found.append(wall)
        return found

    def dump(self, path: Optional[str] = None) -> None:
        """Saves the current generation.

        Raises:
            SnapshotError: If the snapshot cannot be written.
        """
        path = path or self.config.snapshot_path
        snapshot.save(path, self.world)
        print(f"[Simulation] Saved generation {self.world.generation} to '{path}'.")

    def restore(self, path: Optional[str] = None) -> GameWorld:
        """Replaces the current generation with a saved one.

        The current world is kept untouched if loading fails.

        Raises:
            SnapshotError: If the snapshot cannot be read.
        """
        path = path or self.config.snapshot_path
        loaded = snapshot.load(path, self.config)
        loaded.rng = self.rng
        self.world = loaded
        print(f"[Simulation] Loaded snapshot '{path}'.")
        return self.world

class Trainer:
    """Batch training: runs many generations back to back without a window.

    Args:
        config: The game configuration object.
        snapshot_path: Where training resumes from and where the final generation is written.
    """
    def __init__(self, config: GameConfig, snapshot_path: Optional[str] = None) -> None:
        self.config = config
        self.snapshot_path = snapshot_path or config.snapshot_path
        self.rng: np.random.Generator = np.random.default_rng(config.seed)

    def initial_world(self) -> GameWorld:
        """Resumes from the snapshot if there is one, otherwise starts fresh.

        Raises:
            SnapshotError: If a snapshot file exists but cannot be loaded. Training
                would overwrite it at the end, so it is never silently discarded.
        """
        if not os.path.exists(self.snapshot_path):
            print(f"[Trainer] Starting from a fresh world (no snapshot at '{self.snapshot_path}').")
            return GameWorld.create(self.config, self.rng)
        world = snapshot.load(self.snapshot_path, self.config)
        world.rng = self.rng
        print(f"[Trainer] Resuming from '{self.snapshot_path}'.")
        return world

    def run(self, generations: Optional[int] = None) -> GameWorld:
        """Trains for ``generations`` generations and saves the last one.

        Returns:
            The generation bred after the final run, as written to the snapshot.

        Raises:
            SnapshotError: If an existing snapshot cannot be loaded or the final
                generation cannot be saved.
        """
        if generations is None:
            generations = self.config.training_generations
        world = self.initial_world()
        for i in range(generations):
            run_to_extinction(world)
            if i == generations - 1:
                report_oldest_agent(world)
            world = prepare_next_generation(world)
            print(f"Generation `{i}`.")

        snapshot.save(self.snapshot_path, world)
        print(f"[Trainer] Saved final generation to '{self.snapshot_path}'.")
        return world
