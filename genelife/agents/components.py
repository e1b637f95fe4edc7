from dataclasses import dataclass

from genelife.world.grid import Position

@dataclass
class Food:
    """A food pile on the board.

    A pile with ``quantity`` 0 stays in the pool (and keeps occupying its cell
    for placement purposes) but is ignored by sensing and eating.
    """
    pos: Position
    quantity: int = 0

    @property
    def is_depleted(self) -> bool:
        return self.quantity <= 0

    def describe(self) -> str:
        return f"Food at [{self.pos.x};{self.pos.y}] with quantity: {self.quantity}"

@dataclass
class Wall:
    """A permanent, impassable cell."""
    pos: Position

    def describe(self) -> str:
        return f"Wall at [{self.pos.x};{self.pos.y}]"
