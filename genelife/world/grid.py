from enum import IntEnum
from typing import NamedTuple

class Position(NamedTuple):
    """A cell on the board, in tile coordinates (x to the right, y downwards)."""
    x: int
    y: int

class Direction(IntEnum):
    """The four facings an agent can have.

    Values are ordered counter-clockwise so that turning left is +1 mod 4
    and turning right is -1 mod 4.
    """
    RIGHT = 0
    UP = 1
    LEFT = 2
    DOWN = 3

    @property
    def delta(self) -> Position:
        return DIRECTION_DELTAS[self]

    def turned_left(self) -> "Direction":
        return Direction(wrap(self.value + 1, len(Direction)))

    def turned_right(self) -> "Direction":
        return Direction(wrap(self.value - 1, len(Direction)))

DIRECTION_DELTAS = {
    Direction.RIGHT: Position(1, 0),
    Direction.UP: Position(0, -1),
    Direction.LEFT: Position(-1, 0),
    Direction.DOWN: Position(0, 1),
}

def wrap(coord: int, dimension: int) -> int:
    """Euclidean modulo: always lands in [0, dimension)."""
    return (coord % dimension + dimension) % dimension

def add_direction(pos: Position, direction: Direction, width: int, height: int) -> Position:
    """Returns the cell one step from ``pos`` along ``direction`` on a width x height torus."""
    delta = DIRECTION_DELTAS[direction]
    return Position(wrap(pos.x + delta.x, width), wrap(pos.y + delta.y, height))

def positions_equal(first: Position, second: Position) -> bool:
    return first[0] == second[0] and first[1] == second[1]
