from dataclasses import dataclass
from typing import Optional

@dataclass
class GameConfig:
    """Configuration settings for the GeneLife simulation, trainer and viewer."""
    board_width: int = 48
    board_height: int = 25

    agents_count: int = 64
    food_count: int = 256
    walls_count: int = 128
    genes_count: int = 128

    food_hunger_recovery: int = 30
    food_quantity_generation_max: int = 4
    attack_dmg: int = 10
    retaliation_dmg: int = 5
    starting_health: int = 100
    starting_hunger: int = 50
    lethal_hunger: int = 100
    max_lifetime: int = 100
    hunger_tick: int = 10

    # A gene mutates with probability mutation_threshold / mutation_probability
    mutation_probability: int = 256
    mutation_threshold: int = 16
    mating_selection_pool: int = 32

    placement_attempts: int = 250
    seed: Optional[int] = None

    snapshot_path: str = "./output/game_state.bin"
    training_generations: int = 1024 * 8

    window_width: int = 1920
    window_height: int = 1015
    headless_mode: bool = False
    target_fps: float = 60.0
    auto_tick_interval: float = 0.1 # Seconds between ticks when auto-ticking

    verbose: bool = False # Per-tick chatter

    def __post_init__(self) -> None:
        if self.board_width <= 0 or self.board_height <= 0:
            raise ValueError(
                f"Board dimensions must be positive, got {self.board_width}x{self.board_height}."
            )
        entities = self.agents_count + self.food_count + self.walls_count
        if entities > self.board_width * self.board_height:
            raise ValueError(
                f"Too many entities ({entities}) for a {self.board_width}x{self.board_height} board."
            )
        if self.genes_count <= 0 or self.genes_count % 2 != 0:
            raise ValueError(f"genes_count must be a positive even number, got {self.genes_count}.")
        if self.mutation_probability <= 0:
            raise ValueError("mutation_probability must be positive.")
        if self.food_quantity_generation_max < 1:
            raise ValueError("food_quantity_generation_max must be at least 1.")
        if self.mating_selection_pool < 1:
            raise ValueError("mating_selection_pool must be at least 1.")

    @property
    def board_cells(self) -> int:
        return self.board_width * self.board_height
