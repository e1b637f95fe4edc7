from enum import IntEnum
from typing import NamedTuple, Optional, List, Sequence, Iterator, Tuple

import numpy as np

class Environment(IntEnum):
    """What an agent sees in the cell directly in front of it."""
    NOTHING = 0
    AGENT = 1
    FOOD = 2
    WALL = 3

class AgentAction(IntEnum):
    """Enumeration of the actions an agent can take in one tick.

    STEP covers eating and attacking as well as moving, depending on what is
    in front of the agent.
    """
    NOTHING = 0
    STEP = 1
    TURN_LEFT = 2
    TURN_RIGHT = 3

class Gene(NamedTuple):
    """
    A single transition of an agent's state machine.

    Attributes:
        current_state: State the agent must be in for the gene to fire.
        environment: What the agent must be sensing for the gene to fire.
        action: Action executed when the gene fires.
        next_state: State the agent moves to after the action.
    """
    current_state: int
    environment: Environment
    action: AgentAction
    next_state: int

    def matches(self, state: int, environment: Environment) -> bool:
        return self.current_state == state and self.environment == environment

    @classmethod
    def checked(cls, current_state: int, environment: int, action: int, next_state: int) -> "Gene":
        """Builds a gene with its environment and action coerced to their enums.

        Raises:
            ValueError: If ``environment`` or ``action`` is not a member of its enumeration.
        """
        return cls(int(current_state), Environment(environment), AgentAction(action), int(next_state))

    @classmethod
    def random(cls, state_count: int, rng: np.random.Generator) -> "Gene":
        """Draws a gene with every field uniformly random."""
        return cls(
            current_state=int(rng.integers(0, state_count)),
            environment=Environment(int(rng.integers(0, len(Environment)))),
            action=AgentAction(int(rng.integers(0, len(AgentAction)))),
            next_state=int(rng.integers(0, state_count)),
        )

    def describe(self, agent_index: int, gene_index: int) -> str:
        return (
            f"agent_index: {agent_index:2d}\tgene_index:  {gene_index:2d}\t"
            f"c_state: {self.current_state}\tenv: {Environment(self.environment).name:>15}\t"
            f"action: {AgentAction(self.action).name:>15}\tn_state: {self.next_state}"
        )

class Chromosome:
    """
    The ordered gene table that drives one agent.

    Order is significant: when several genes match the agent's live
    (state, environment) pair only the earliest one fires.
    """
    def __init__(self, genes: Sequence[Gene]) -> None:
        """
        Args:
            genes: The genes, in priority order.

        Raises:
            ValueError: If the number of genes is odd (crossover splits the table in halves)
                or a gene's environment or action is outside its enumeration.
        """
        if len(genes) % 2 != 0:
            raise ValueError(f"A chromosome needs an even number of genes, got {len(genes)}.")
        self.genes: List[Gene] = [Gene.checked(*gene) for gene in genes]

    @classmethod
    def random(cls, genes_count: int, state_count: int, rng: np.random.Generator) -> "Chromosome":
        return cls([Gene.random(state_count, rng) for _ in range(genes_count)])

    def __len__(self) -> int:
        return len(self.genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self.genes)

    def __getitem__(self, index: int) -> Gene:
        return self.genes[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.genes == other.genes

    def __repr__(self) -> str:
        return f"Chromosome({len(self.genes)} genes)"

    def match(self, state: int, environment: Environment) -> Optional[Gene]:
        """Returns the first gene matching ``(state, environment)``, or None if the agent idles."""
        for gene in self.genes:
            if gene.matches(state, environment):
                return gene
        return None

    def halves(self) -> Tuple[List[Gene], List[Gene]]:
        middle = len(self.genes) // 2
        return self.genes[:middle], self.genes[middle:]

    def describe(self, agent_index: int) -> str:
        return "\n".join(gene.describe(agent_index, i) for i, gene in enumerate(self.genes))
