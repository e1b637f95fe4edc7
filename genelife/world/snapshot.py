"""
Binary snapshots of a whole generation.

A snapshot is the agent pool, then the food pool, then the wall pool, each
written as a packed little-endian numpy structured array. There is no header:
the layout is fully determined by the entity counts, ``genes_count`` and
``max_lifetime`` of the config, and a file written under other constants is
rejected by its size (or, failing that, by out-of-range enum values or
coordinates).
"""

import os
import tempfile
from typing import List

import numpy as np

from genelife.agents.components import Food, Wall
from genelife.config import GameConfig
from genelife.core.agent import Agent
from genelife.core.chromosome import AgentAction, Chromosome, Environment, Gene
from genelife.world.grid import Direction, Position
from genelife.world.world import GameWorld

GENE_DTYPE = np.dtype([
    ("current_state", "<i4"),
    ("next_state", "<i4"),
    ("environment", "<i4"),
    ("action", "<i4"),
])

FOOD_DTYPE = np.dtype([
    ("quantity", "<i4"),
    ("x", "<i4"),
    ("y", "<i4"),
])

WALL_DTYPE = np.dtype([
    ("x", "<i4"),
    ("y", "<i4"),
])

class SnapshotError(OSError):
    """Raised when a snapshot cannot be written, read or decoded."""

def agent_dtype(config: GameConfig) -> np.dtype:
    return np.dtype([
        ("index", "<u8"),
        ("x", "<i4"),
        ("y", "<i4"),
        ("direction", "<i4"),
        ("current_state", "<i4"),
        ("hunger", "<i4"),
        ("health", "<i4"),
        ("lifetime", "<u8"),
        ("history", "<i4", (config.max_lifetime,)),
        ("genes", GENE_DTYPE, (config.genes_count,)),
    ])

def snapshot_size(config: GameConfig) -> int:
    """Size in bytes of a snapshot written under ``config``."""
    return (
        config.agents_count * agent_dtype(config).itemsize
        + config.food_count * FOOD_DTYPE.itemsize
        + config.walls_count * WALL_DTYPE.itemsize
    )

def encode(world: GameWorld) -> bytes:
    """Packs the entity pools of ``world`` into the snapshot byte layout."""
    config = world.config
    agents = np.zeros(len(world.agents), dtype=agent_dtype(config))
    for i, agent in enumerate(world.agents):
        agents["index"][i] = agent.index
        agents["x"][i] = agent.pos.x
        agents["y"][i] = agent.pos.y
        agents["direction"][i] = int(agent.direction)
        agents["current_state"][i] = agent.current_state
        agents["hunger"][i] = agent.hunger
        agents["health"][i] = agent.health
        agents["lifetime"][i] = agent.lifetime
        agents["history"][i] = [int(action) for action in agent.history]
        agents["genes"][i] = [
            (gene.current_state, gene.next_state, int(gene.environment), int(gene.action))
            for gene in agent.chromosome
        ]

    food = np.array([(f.quantity, f.pos.x, f.pos.y) for f in world.food], dtype=FOOD_DTYPE)
    walls = np.array([(w.pos.x, w.pos.y) for w in world.walls], dtype=WALL_DTYPE)
    return agents.tobytes() + food.tobytes() + walls.tobytes()

def decode(data: bytes, config: GameConfig) -> GameWorld:
    """Rebuilds a fresh GameWorld from snapshot bytes.

    Raises:
        SnapshotError: If the data has the wrong size for ``config`` or holds invalid values.
    """
    expected = snapshot_size(config)
    if len(data) != expected:
        raise SnapshotError(
            f"Snapshot is {len(data)} bytes, expected {expected} for the current configuration."
        )

    dtype = agent_dtype(config)
    agents_end = config.agents_count * dtype.itemsize
    food_end = agents_end + config.food_count * FOOD_DTYPE.itemsize
    agent_records = _records(data, dtype, 0, agents_end)
    food_records = _records(data, FOOD_DTYPE, agents_end, food_end)
    wall_records = _records(data, WALL_DTYPE, food_end, expected)

    try:
        agents = [_decode_agent(record, config) for record in agent_records]
        food = [Food(pos=_decode_position(r, config), quantity=int(r["quantity"])) for r in food_records]
        walls = [Wall(pos=_decode_position(r, config)) for r in wall_records]
    except ValueError as e:
        raise SnapshotError(f"Snapshot holds an invalid record: {e}") from e
    return GameWorld(config, agents=agents, food=food, walls=walls)

def _records(data: bytes, dtype: np.dtype, start: int, end: int) -> np.ndarray:
    if end <= start:
        return np.zeros(0, dtype=dtype)
    return np.frombuffer(data[start:end], dtype=dtype)

def _decode_position(record: np.void, config: GameConfig) -> Position:
    x, y = int(record["x"]), int(record["y"])
    if not (0 <= x < config.board_width and 0 <= y < config.board_height):
        raise ValueError(f"position [{x};{y}] is outside the {config.board_width}x{config.board_height} board")
    return Position(x, y)

def _decode_agent(record: np.void, config: GameConfig) -> Agent:
    genes: List[Gene] = [
        Gene(
            current_state=int(g["current_state"]),
            environment=Environment(int(g["environment"])),
            action=AgentAction(int(g["action"])),
            next_state=int(g["next_state"]),
        )
        for g in record["genes"]
    ]
    return Agent(
        index=int(record["index"]),
        position=_decode_position(record, config),
        direction=Direction(int(record["direction"])),
        chromosome=Chromosome(genes),
        hunger=int(record["hunger"]),
        health=int(record["health"]),
        max_lifetime=config.max_lifetime,
        current_state=int(record["current_state"]),
        lifetime=int(record["lifetime"]),
        history=[AgentAction(int(a)) for a in record["history"]],
    )

def save(path: str, world: GameWorld) -> None:
    """Writes a snapshot of ``world`` to ``path``.

    The bytes go to a temporary file next to ``path`` which then replaces it, so
    a failed write never leaves a truncated snapshot behind.

    Raises:
        SnapshotError: If the file cannot be written.
    """
    data = encode(world)
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".snapshot-", dir=directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
    except OSError as e:
        raise SnapshotError(f"Could not write snapshot to '{path}': {e}") from e

def load(path: str, config: GameConfig) -> GameWorld:
    """Reads a snapshot written under the same configuration constants.

    The whole file is read and decoded before anything is returned, so a
    failure never yields a partially restored world.

    Raises:
        SnapshotError: If the file is missing, unreadable, of the wrong size or corrupt.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise SnapshotError(f"Could not read snapshot '{path}': {e}") from e
    return decode(data, config)
