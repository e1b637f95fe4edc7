import pytest
from typing import Callable, Iterable, Optional

from genelife.config import GameConfig
from genelife.core.agent import Agent
from genelife.core.chromosome import AgentAction, Chromosome, Environment, Gene
from genelife.world.grid import Direction, Position

# A state no agent is ever in, so this gene never fires
UNREACHABLE_STATE = 10_000
IDLE_GENE = Gene(UNREACHABLE_STATE, Environment.NOTHING, AgentAction.NOTHING, UNREACHABLE_STATE)

def make_chromosome(genes: Iterable[Gene], genes_count: int) -> Chromosome:
    """Pads ``genes`` with never-firing genes up to ``genes_count``."""
    genes = list(genes)
    return Chromosome(genes + [IDLE_GENE] * (genes_count - len(genes)))

@pytest.fixture
def small_config() -> GameConfig:
    """A 48x25 board with a handful of entities and short chromosomes."""
    return GameConfig(
        board_width=48,
        board_height=25,
        agents_count=2,
        food_count=1,
        walls_count=0,
        genes_count=4,
        seed=7,
    )

@pytest.fixture
def make_agent(small_config: GameConfig) -> Callable[..., Agent]:
    def _make_agent(
        index: int,
        x: int,
        y: int,
        direction: Direction = Direction.RIGHT,
        genes: Iterable[Gene] = (),
        hunger: Optional[int] = None,
        health: Optional[int] = None,
        config: Optional[GameConfig] = None,
    ) -> Agent:
        cfg = config or small_config
        return Agent(
            index=index,
            position=Position(x, y),
            direction=direction,
            chromosome=make_chromosome(genes, cfg.genes_count),
            hunger=cfg.starting_hunger if hunger is None else hunger,
            health=cfg.starting_health if health is None else health,
            max_lifetime=cfg.max_lifetime,
        )
    return _make_agent
