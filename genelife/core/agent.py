from typing import List, Optional

from genelife.core.chromosome import AgentAction, Chromosome
from genelife.world.grid import Direction, Position, add_direction

class Agent:
    """Represents one agent of a generation.

    The agent's behaviour is entirely decided by its chromosome; this class only
    holds the live state the chromosome is matched against and the bookkeeping
    the evolution engine needs (``lifetime`` and the action history).
    """
    def __init__(
        self,
        index: int,
        position: Position,
        direction: Direction,
        chromosome: Chromosome,
        hunger: int,
        health: int,
        max_lifetime: int,
        current_state: int = 0,
        lifetime: int = 0,
        history: Optional[List[AgentAction]] = None,
    ):
        self.index: int = index
        self.pos: Position = position
        self.direction: Direction = direction
        self.chromosome: Chromosome = chromosome
        self.current_state: int = current_state
        self.hunger: int = hunger
        self.health: int = health # May go negative, dead when <= 0
        self.lifetime: int = lifetime
        self.max_lifetime: int = max_lifetime
        # Pre-sized log, one slot per tick of the longest possible life
        self.history: List[AgentAction] = history if history is not None else [AgentAction.NOTHING] * max_lifetime

    @property
    def alive(self) -> bool:
        return self.health > 0

    def position_ahead(self, width: int, height: int) -> Position:
        return add_direction(self.pos, self.direction, width, height)

    def move_forward(self, width: int, height: int) -> None:
        self.pos = self.position_ahead(width, height)

    def turn_left(self) -> None:
        self.direction = self.direction.turned_left()

    def turn_right(self) -> None:
        self.direction = self.direction.turned_right()

    def record_action(self, action: AgentAction) -> None:
        """Writes ``action`` into the history slot of the current lifetime tick.

        Raises:
            IndexError: If the lifetime is past the pre-sized history.
        """
        if not 0 <= self.lifetime < self.max_lifetime:
            raise IndexError(
                f"Agent {self.index} history write at {self.lifetime} is outside [0, {self.max_lifetime})."
            )
        self.history[self.lifetime] = action

    def summary(self) -> str:
        return (
            f"index: {self.index}\tpos: [{self.pos.x};{self.pos.y}]\tstate: {self.current_state}\t"
            f"direction: {self.direction.name}\thunger: {self.hunger}\thealth: {self.health}"
        )

    def describe(self) -> str:
        """Multi-line report of the agent, including every recorded action."""
        lines = [
            "agent:      {",
            f"\tindex:      {self.index}",
            f"\tpos:        [{self.pos.x};{self.pos.y}]",
            f"\tc_state:    {self.current_state}",
            f"\tdirection:  {self.direction.name}",
            f"\thunger:     {self.hunger}",
            f"\thealth:     {self.health}",
            f"\tlifetime:   {self.lifetime}",
            "\thistory:    {",
        ]
        # Ageing happens before acting, so slot 0 is never written
        for i in range(1, min(self.lifetime, self.max_lifetime - 1) + 1):
            lines.append(f"\t\t{i:3d}:    {self.history[i].name}")
        lines.append("\t}")
        lines.append("}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Agent({self.summary()})"
