"""
Wall and self-collision checks.
"""

from typing import Iterable, Tuple

from domain.constants import Collision
from domain.grid import Grid, Position
from domain.snake import Snake


def blocking_cells(snake: Snake, grows: bool) -> Tuple[Position, ...]:
    """
    Cells a head moving this tick must not enter, taken from the pre-move snake.

    The tail leaves its cell on a non-growth move, so following it is legal;
    on a growth move the tail stays put and still blocks.
    """
    if grows:
        return snake.positions
    return snake.positions[:-1]


class CollisionDetector:
    """Decides whether a proposed head position ends the game."""

    def __init__(self, grid: Grid):
        self.grid = grid

    def check(self, new_head, prior_occupied: Iterable) -> Collision:
        if not self.grid.is_in_bounds(new_head):
            return Collision.WALL
        if new_head in prior_occupied:
            return Collision.SELF
        return Collision.NONE
