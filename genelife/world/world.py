from typing import List, Optional

import numpy as np

from genelife.agents.components import Food, Wall
from genelife.config import GameConfig
from genelife.core.agent import Agent
from genelife.core.chromosome import AgentAction, Chromosome, Environment
from genelife.world.grid import Direction, Position, positions_equal

class PlacementError(RuntimeError):
    """Raised when no free cell could be found within the placement retry budget."""

class GameWorld:
    """
    One generation of the simulation: the agent, food and wall pools on a toroidal board.

    Pools have fixed sizes for the lifetime of the world and entities are identified
    by their index in the pool. Lookups are plain linear scans in pool order, which
    is also the order that breaks ties between entities sharing a cell.

    Args:
        config: The game configuration object.
        agents: The agent pool (may start empty while a generation is being built).
        food: The food pool.
        walls: The wall pool.
        rng: Random generator used for placement and evolution draws.
        generation: Index of this generation, 0 for a freshly initialized world.
    """
    def __init__(
        self,
        config: GameConfig,
        agents: Optional[List[Agent]] = None,
        food: Optional[List[Food]] = None,
        walls: Optional[List[Wall]] = None,
        rng: Optional[np.random.Generator] = None,
        generation: int = 0,
    ) -> None:
        self.config: GameConfig = config
        self.width: int = config.board_width
        self.height: int = config.board_height
        self.agents: List[Agent] = agents if agents is not None else []
        self.food: List[Food] = food if food is not None else []
        self.walls: List[Wall] = walls if walls is not None else []
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng(config.seed)
        self.generation: int = generation
        self.tick_count: int = 0

    @classmethod
    def create(cls, config: GameConfig, rng: Optional[np.random.Generator] = None) -> "GameWorld":
        """Initializes a brand new generation with random chromosomes and terrain.

        Agents are placed first, then food, then walls, so every entity class
        sees the earlier ones as occupied cells.
        """
        world = cls(config, rng=rng)
        for i in range(config.agents_count):
            world.agents.append(world.spawn_agent(i, Chromosome.random(config.genes_count, config.genes_count, world.rng)))
        for _ in range(config.food_count):
            quantity = int(world.rng.integers(1, config.food_quantity_generation_max + 1))
            world.food.append(Food(pos=world.place_randomly(), quantity=quantity))
        for _ in range(config.walls_count):
            world.walls.append(Wall(pos=world.place_randomly()))
        return world

    def spawn_agent(self, index: int, chromosome: Chromosome) -> Agent:
        """Creates an agent with fresh non-genetic state on a free cell of this world."""
        return Agent(
            index=index,
            position=self.place_randomly(),
            direction=Direction(int(self.rng.integers(0, len(Direction)))),
            chromosome=chromosome,
            hunger=self.config.starting_hunger,
            health=self.config.starting_health,
            max_lifetime=self.config.max_lifetime,
        )

    # --- Occupancy and placement ---

    def is_cell_free(self, pos: Position) -> bool:
        """True if no agent, food pile (even a depleted one) or wall sits on ``pos``."""
        for agent in self.agents:
            if positions_equal(agent.pos, pos):
                return False
        for food in self.food:
            if positions_equal(food.pos, pos):
                return False
        for wall in self.walls:
            if positions_equal(wall.pos, pos):
                return False
        return True

    def random_position(self) -> Position:
        return Position(int(self.rng.integers(0, self.width)), int(self.rng.integers(0, self.height)))

    def place_randomly(self) -> Position:
        """Draws random cells until a free one turns up.

        Raises:
            PlacementError: If no free cell was drawn within the retry budget.
        """
        attempts = self.config.placement_attempts
        for _ in range(attempts):
            pos = self.random_position()
            if self.is_cell_free(pos):
                return pos
        raise PlacementError(
            f"No free cell found after {attempts} attempts on a {self.width}x{self.height} board."
        )

    # --- Point queries ---

    def agent_at(self, pos: Position) -> Optional[Agent]:
        for agent in self.agents:
            if positions_equal(agent.pos, pos):
                return agent
        return None

    def food_at(self, pos: Position) -> Optional[Food]:
        for food in self.food:
            if positions_equal(food.pos, pos):
                return food
        return None

    def wall_at(self, pos: Position) -> Optional[Wall]:
        for wall in self.walls:
            if positions_equal(wall.pos, pos):
                return wall
        return None

    # --- Sensing ---

    def food_ahead(self, agent: Agent) -> Optional[Food]:
        ahead = agent.position_ahead(self.width, self.height)
        for food in self.food:
            if food.quantity > 0 and positions_equal(food.pos, ahead):
                return food
        return None

    def agent_ahead(self, agent: Agent) -> Optional[Agent]:
        ahead = agent.position_ahead(self.width, self.height)
        for other in self.agents:
            if other is not agent and other.alive and positions_equal(other.pos, ahead):
                return other
        return None

    def wall_ahead(self, agent: Agent) -> Optional[Wall]:
        ahead = agent.position_ahead(self.width, self.height)
        for wall in self.walls:
            if positions_equal(wall.pos, ahead):
                return wall
        return None

    def sense(self, agent: Agent) -> Environment:
        """Classifies the cell in front of ``agent``.

        The checks run as a priority list: food beats agents, agents beat walls.
        """
        if self.food_ahead(agent) is not None:
            return Environment.FOOD
        if self.agent_ahead(agent) is not None:
            return Environment.AGENT
        if self.wall_ahead(agent) is not None:
            return Environment.WALL
        return Environment.NOTHING

    # --- Actions ---

    def execute_action(self, agent: Agent, action: AgentAction) -> None:
        """Applies ``action`` for ``agent`` and records it in the agent's history.

        Raises:
            ValueError: If ``action`` is not one of the AgentAction members.
            IndexError: If the agent's lifetime is past its history capacity.
        """
        if action not in AGENT_ACTIONS:
            raise ValueError(f"Unknown agent action {action!r} for agent {agent.index}.")
        action = AgentAction(action)
        agent.record_action(action)

        if action == AgentAction.NOTHING:
            return

        if action == AgentAction.STEP:
            food = self.food_ahead(agent)
            if food is not None:
                food.quantity -= 1
                agent.hunger = max(0, agent.hunger - self.config.food_hunger_recovery)
                if self.config.verbose:
                    print(f"[GameWorld STEP] Agent {agent.index} ate at {food.pos}. Hunger: {agent.hunger}, food left: {food.quantity}")
                return
            victim = self.agent_ahead(agent)
            if victim is not None:
                # Both sides may drop to or below zero here; death shows up on the next sensing pass
                victim.health -= self.config.attack_dmg
                agent.health -= self.config.retaliation_dmg
                if self.config.verbose:
                    print(f"[GameWorld STEP] Agent {agent.index} attacked agent {victim.index}. Health: {agent.health} vs {victim.health}")
                return
            if self.wall_ahead(agent) is None:
                agent.move_forward(self.width, self.height)
            return

        if action == AgentAction.TURN_LEFT:
            agent.turn_left()
        else:
            agent.turn_right()

    # --- Population ---

    def living_agents(self) -> List[Agent]:
        return [agent for agent in self.agents if agent.alive]

    def is_everyone_dead(self) -> bool:
        return all(not agent.alive for agent in self.agents)

    def oldest_agent(self) -> Optional[Agent]:
        """Returns the agent with the greatest lifetime; the lowest index wins ties."""
        oldest: Optional[Agent] = None
        for agent in self.agents:
            if oldest is None or agent.lifetime > oldest.lifetime:
                oldest = agent
        return oldest

AGENT_ACTIONS = frozenset(AgentAction)
