"""
Board geometry: positions and bounds.
"""

from typing import Iterator, NamedTuple


class Position(NamedTuple):
    x: int
    y: int

    def moved(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


class Grid:
    """A width x height board. Knows nothing about what sits on it."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}.")
        self.width = width
        self.height = height

    def is_in_bounds(self, pos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def cells(self) -> Iterator[Position]:
        """Every position, row by row from the top-left."""
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    @property
    def size(self) -> int:
        return self.width * self.height

    def __repr__(self):
        return f"<Grid {self.width}x{self.height}>"
