import pytest

from genelife.__main__ import main
from genelife.agents.components import Food, Wall
from genelife.config import GameConfig
from genelife.core.agent import Agent
from genelife.core.simulation import Simulation, Trainer, run_to_extinction
from genelife.world.snapshot import SnapshotError
from genelife.world.world import GameWorld

@pytest.fixture
def quick_config() -> GameConfig:
    """Generations that die out within a handful of ticks."""
    return GameConfig(
        agents_count=4,
        food_count=6,
        walls_count=6,
        genes_count=8,
        max_lifetime=12,
        mating_selection_pool=2,
        seed=1,
    )

@pytest.mark.simulation
def test_run_to_extinction_is_bounded_by_max_lifetime(quick_config: GameConfig) -> None:
    world = GameWorld.create(quick_config)
    ticks = run_to_extinction(world)
    assert world.is_everyone_dead()
    assert 0 < ticks <= quick_config.max_lifetime
    assert all(agent.lifetime <= quick_config.max_lifetime for agent in world.agents)

@pytest.mark.simulation
def test_tick_and_generation_commands(quick_config: GameConfig, capsys) -> None:
    simulation = Simulation(quick_config)
    simulation.advance_tick()
    assert simulation.world.tick_count == 1

    first = simulation.world
    simulation.advance_generation()
    assert simulation.world is not first
    assert simulation.world.generation == 1
    assert first.is_everyone_dead()
    assert "Oldest agent of generation 0" in capsys.readouterr().out

@pytest.mark.simulation
def test_reset_builds_a_new_generation(quick_config: GameConfig) -> None:
    simulation = Simulation(quick_config)
    first = simulation.world
    simulation.advance_generation()
    simulation.reset()
    assert simulation.world is not first
    assert simulation.world.generation == 0
    assert len(simulation.world.agents) == quick_config.agents_count

@pytest.mark.simulation
def test_query_cell_lists_the_occupants(quick_config: GameConfig) -> None:
    simulation = Simulation(quick_config)
    agent = simulation.world.agents[2]
    wall = simulation.world.walls[0]

    assert simulation.query_cell(agent.pos) == [agent]
    found = simulation.query_cell(wall.pos)
    assert found == [wall] and isinstance(found[0], Wall)

    food = simulation.world.food[0]
    assert isinstance(simulation.query_cell(food.pos)[0], Food)
    assert not any(isinstance(e, Agent) for e in simulation.query_cell(food.pos))

@pytest.mark.simulation
def test_dump_then_restore(tmp_path, quick_config: GameConfig) -> None:
    path = str(tmp_path / "game_state.bin")
    simulation = Simulation(quick_config)
    for _ in range(3):
        simulation.advance_tick()
    positions = [a.pos for a in simulation.world.agents]
    healths = [a.health for a in simulation.world.agents]

    simulation.dump(path)
    simulation.reset()
    simulation.restore(path)

    assert [a.pos for a in simulation.world.agents] == positions
    assert [a.health for a in simulation.world.agents] == healths
    assert simulation.world.rng is simulation.rng

@pytest.mark.simulation
def test_trainer_runs_generations_and_saves(tmp_path, quick_config: GameConfig, capsys) -> None:
    path = tmp_path / "train" / "state.bin"
    world = Trainer(quick_config, str(path)).run(3)

    assert path.is_file()
    assert world.generation == 3
    out = capsys.readouterr().out
    assert "Starting from a fresh world" in out
    for i in range(3):
        assert f"Generation `{i}`." in out
    assert "Oldest agent of generation 2" in out

@pytest.mark.simulation
def test_trainer_resumes_from_its_snapshot(tmp_path, quick_config: GameConfig, capsys) -> None:
    path = str(tmp_path / "state.bin")
    Trainer(quick_config, path).run(1)
    capsys.readouterr()

    resumed = Trainer(quick_config, path).run(1)

    assert "Resuming" in capsys.readouterr().out
    assert len(resumed.agents) == quick_config.agents_count

@pytest.mark.simulation
def test_trainer_refuses_to_replace_an_unreadable_snapshot(tmp_path, quick_config: GameConfig) -> None:
    """A snapshot written under other constants is neither discarded nor overwritten."""
    path = tmp_path / "state.bin"
    other_config = GameConfig(agents_count=2, food_count=1, walls_count=1, genes_count=4, seed=8)
    Trainer(other_config, str(path)).run(1)
    written = path.read_bytes()

    with pytest.raises(SnapshotError):
        Trainer(quick_config, str(path)).run(1)
    assert path.read_bytes() == written, "The existing snapshot was overwritten."

@pytest.mark.simulation
def test_train_command_reports_an_unreadable_snapshot(tmp_path, capsys) -> None:
    path = tmp_path / "garbage.bin"
    path.write_bytes(b"not a snapshot")

    with pytest.raises(SystemExit):
        main(["train", "--snapshot", str(path), "--generations", "1", "--seed", "1"])
    assert "Error:" in capsys.readouterr().out
    assert path.read_bytes() == b"not a snapshot"
