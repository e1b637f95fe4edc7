import pytest
import numpy as np

from genelife.agents.components import Food, Wall
from genelife.config import GameConfig
from genelife.world.grid import Position
from genelife.world.world import GameWorld, PlacementError

@pytest.mark.world
def test_world_creation_determinism_and_counts() -> None:
    """A seeded world has the configured pool sizes and is reproducible."""
    config = GameConfig(seed=42)
    world1 = GameWorld.create(config)
    world2 = GameWorld.create(config)

    assert len(world1.agents) == config.agents_count
    assert len(world1.food) == config.food_count
    assert len(world1.walls) == config.walls_count

    assert [a.pos for a in world1.agents] == [a.pos for a in world2.agents], "Agent placement is not deterministic."
    assert [a.direction for a in world1.agents] == [a.direction for a in world2.agents]
    assert [a.chromosome for a in world1.agents] == [a.chromosome for a in world2.agents], "Chromosomes are not deterministic."
    assert world1.food == world2.food, "Food layout is not deterministic."
    assert world1.walls == world2.walls, "Wall layout is not deterministic."

@pytest.mark.world
def test_created_entities_never_share_a_cell() -> None:
    config = GameConfig(seed=3)
    world = GameWorld.create(config)
    cells = [a.pos for a in world.agents] + [f.pos for f in world.food] + [w.pos for w in world.walls]
    assert len(set(cells)) == len(cells), "Placement put two entities on the same cell."
    for pos in cells:
        assert 0 <= pos.x < config.board_width and 0 <= pos.y < config.board_height

@pytest.mark.world
def test_created_agents_and_food_start_state() -> None:
    config = GameConfig(seed=5)
    world = GameWorld.create(config)
    for i, agent in enumerate(world.agents):
        assert agent.index == i
        assert agent.current_state == 0
        assert agent.hunger == config.starting_hunger
        assert agent.health == config.starting_health
        assert agent.lifetime == 0
        assert len(agent.history) == config.max_lifetime
        assert len(agent.chromosome) == config.genes_count
        for gene in agent.chromosome:
            assert 0 <= gene.current_state < config.genes_count
            assert 0 <= gene.next_state < config.genes_count
    for food in world.food:
        assert 1 <= food.quantity <= config.food_quantity_generation_max

@pytest.mark.world
def test_is_cell_free_counts_depleted_food(small_config: GameConfig, make_agent) -> None:
    world = GameWorld(
        small_config,
        agents=[make_agent(0, 1, 1)],
        food=[Food(pos=Position(2, 2), quantity=0)],
        walls=[Wall(pos=Position(3, 3))],
    )
    assert not world.is_cell_free(Position(1, 1))
    assert not world.is_cell_free(Position(2, 2)), "A depleted food pile still occupies its cell."
    assert not world.is_cell_free(Position(3, 3))
    assert world.is_cell_free(Position(4, 4))

@pytest.mark.world
def test_place_randomly_fails_loudly_on_a_full_board() -> None:
    config = GameConfig(board_width=2, board_height=2, agents_count=0, food_count=4, walls_count=0, genes_count=2)
    walls = [Wall(pos=Position(x, y)) for x in range(2) for y in range(2)]
    world = GameWorld(config, walls=walls, rng=np.random.default_rng(0))
    with pytest.raises(PlacementError):
        world.place_randomly()

@pytest.mark.world
def test_place_randomly_finds_the_last_free_cell() -> None:
    config = GameConfig(board_width=2, board_height=2, agents_count=1, food_count=0, walls_count=3, genes_count=2)
    walls = [Wall(pos=Position(0, 0)), Wall(pos=Position(1, 0)), Wall(pos=Position(0, 1))]
    world = GameWorld(config, walls=walls, rng=np.random.default_rng(1))
    assert world.place_randomly() == Position(1, 1)

@pytest.mark.world
def test_point_queries(small_config: GameConfig, make_agent) -> None:
    agent = make_agent(0, 5, 5)
    food = Food(pos=Position(6, 6), quantity=2)
    wall = Wall(pos=Position(7, 7))
    world = GameWorld(small_config, agents=[agent], food=[food], walls=[wall])

    assert world.agent_at(Position(5, 5)) is agent
    assert world.food_at(Position(6, 6)) is food
    assert world.wall_at(Position(7, 7)) is wall
    assert world.agent_at(Position(6, 6)) is None
    assert world.food_at(Position(5, 5)) is None
    assert world.wall_at(Position(5, 5)) is None

@pytest.mark.world
def test_oldest_agent_and_extinction(small_config: GameConfig, make_agent) -> None:
    first = make_agent(0, 1, 1)
    second = make_agent(1, 2, 2)
    world = GameWorld(small_config, agents=[first, second])
    first.lifetime = 4
    second.lifetime = 9
    assert world.oldest_agent() is second

    assert not world.is_everyone_dead()
    first.health = 0
    second.health = -5
    assert world.is_everyone_dead()
    assert world.living_agents() == []

@pytest.mark.world
def test_config_rejects_overcrowded_boards_and_odd_chromosomes() -> None:
    with pytest.raises(ValueError):
        GameConfig(board_width=10, board_height=10, agents_count=50, food_count=50, walls_count=1)
    with pytest.raises(ValueError):
        GameConfig(genes_count=7)
    GameConfig(board_width=10, board_height=10, agents_count=50, food_count=50, walls_count=0)
