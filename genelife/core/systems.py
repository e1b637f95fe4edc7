import esper
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from genelife.world.world import GameWorld # For type hinting the world passed to process()

class System(esper.Processor):
    """Base class for all systems.

    Systems are driven directly with the world they act on rather than being
    registered with esper's module-level processor list, so several worlds
    (e.g. two double-buffered generations) never share hidden state.
    """

    def __init__(self) -> None:
        super().__init__()

class BehaviourSystem(System):
    """The action pass of a tick: ages every living agent and fires its chromosome.

    Agents act strictly in pool order, so later agents sense the board as already
    changed by earlier ones within the same tick. Whether an agent acts is decided
    by its health at the start of the tick: an agent wounded to death earlier in
    the same tick still takes its turn.
    """

    def process(self, world: 'GameWorld') -> None:
        max_lifetime = world.config.max_lifetime
        alive_at_start = [agent.alive for agent in world.agents]
        for agent, acting in zip(world.agents, alive_at_start):
            if not acting:
                continue

            agent.lifetime += 1
            if agent.lifetime >= max_lifetime:
                agent.health = 0 # Old age
                if world.config.verbose:
                    print(f"[BehaviourSystem] Agent {agent.index} died of old age at lifetime {agent.lifetime}.")
                continue

            environment = world.sense(agent)
            gene = agent.chromosome.match(agent.current_state, environment)
            if gene is None:
                continue # No transition for this (state, environment): idle

            world.execute_action(agent, gene.action)
            agent.current_state = gene.next_state

class MetabolismSystem(System):
    """The end-of-tick pass: hunger grows until it hits the lethal cap, then health drains.

    Only living agents are processed. A dead agent keeps the hunger and health
    it died with, and that is what reports and snapshots show for it, rather
    than values that keep drifting over the rest of the generation.
    """

    def process(self, world: 'GameWorld') -> None:
        lethal_hunger = world.config.lethal_hunger
        hunger_tick = world.config.hunger_tick
        for agent in world.agents:
            if not agent.alive:
                continue
            if agent.hunger >= lethal_hunger:
                agent.hunger = lethal_hunger
                agent.health -= hunger_tick
                continue
            agent.hunger = min(lethal_hunger, agent.hunger + hunger_tick)

def step(world: 'GameWorld') -> None:
    """Advances ``world`` by one tick: every agent acts, then metabolism is applied."""
    BehaviourSystem().process(world)
    MetabolismSystem().process(world)
    world.tick_count += 1
