"""
Generational reproduction: ranking, parent selection, crossover and mutation.

A finished generation is consumed read-only; the next one is built as a brand
new ``GameWorld`` that inherits the terrain (food and walls) unchanged.
"""

from typing import List, Tuple

import numpy as np

from genelife.agents.components import Food, Wall
from genelife.core.agent import Agent
from genelife.core.chromosome import Chromosome, Gene
from genelife.world.world import GameWorld

def rank_by_lifetime(agents: List[Agent]) -> List[Agent]:
    """Fittest first. The order among agents with equal lifetimes is unspecified."""
    return sorted(agents, key=lambda agent: agent.lifetime, reverse=True)

def select_parents(mating_pool: List[Agent], rng: np.random.Generator) -> Tuple[Agent, Agent]:
    """Draws two parents uniformly from the pool, with replacement."""
    first = mating_pool[int(rng.integers(0, len(mating_pool)))]
    second = mating_pool[int(rng.integers(0, len(mating_pool)))]
    return first, second

def crossover(parent_a: Chromosome, parent_b: Chromosome) -> Chromosome:
    """Single-point crossover at the midpoint: first half from A, second half from B."""
    first_half, _ = parent_a.halves()
    _, second_half = parent_b.halves()
    return Chromosome(first_half + second_half)

def mutate(
    chromosome: Chromosome,
    state_count: int,
    threshold: int,
    probability: int,
    rng: np.random.Generator,
) -> Chromosome:
    """Replaces each gene by a random one with probability ``threshold / probability``."""
    genes: List[Gene] = []
    for gene in chromosome:
        if int(rng.integers(0, probability)) < threshold:
            genes.append(Gene.random(state_count, rng))
        else:
            genes.append(gene)
    return Chromosome(genes)

def prepare_next_generation(previous: GameWorld) -> GameWorld:
    """Builds the next generation from a finished one.

    Args:
        previous: The expired generation. It is not modified; its random generator
                  is handed over to the new world so the draw sequence continues.

    Returns:
        A new GameWorld with the same food and wall layout and a fresh population
        bred from the longest-lived agents of ``previous``.
    """
    config = previous.config
    ranked = rank_by_lifetime(previous.agents)
    mating_pool = ranked[:max(1, min(config.mating_selection_pool, len(ranked)))]

    next_world = GameWorld(
        config,
        food=[Food(pos=food.pos, quantity=food.quantity) for food in previous.food],
        walls=[Wall(pos=wall.pos) for wall in previous.walls],
        rng=previous.rng,
        generation=previous.generation + 1,
    )

    for i in range(config.agents_count):
        parent_a, parent_b = select_parents(mating_pool, next_world.rng)
        child = crossover(parent_a.chromosome, parent_b.chromosome)
        child = mutate(
            child,
            config.genes_count,
            config.mutation_threshold,
            config.mutation_probability,
            next_world.rng,
        )
        next_world.agents.append(next_world.spawn_agent(i, child))

    if config.verbose:
        best = ranked[0].lifetime if ranked else 0
        print(f"[Evolution] Generation {next_world.generation} bred from a pool of {len(mating_pool)} (best lifetime {best}).")
    return next_world
