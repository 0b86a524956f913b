"""
Snake entity for the game engine.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import Direction, FoodType
from .grid import Position


@dataclass(frozen=True)
class BodySegment:
    """One unit of body, tagged with the food that grew it."""
    type: FoodType
    position: Position


@dataclass(frozen=True)
class Food:
    type: FoodType
    position: Position


@dataclass(frozen=True)
class Snake:
    """
    Represents the snake on the board.

    Attributes:
        head: current head cell
        body: segments from nearest-the-head to tail
        positions: every occupied cell, head first; body[i] sits on positions[i + 1]
        direction: direction of the last move, None before the first one
    """

    head: Position
    body: Tuple[BodySegment, ...] = ()
    positions: Tuple[Position, ...] = ()
    direction: Optional[Direction] = None

    def __post_init__(self):
        if not self.positions:
            object.__setattr__(self, "positions", (self.head,))
        if self.positions[0] != self.head:
            raise ValueError(
                f"Snake positions must start at the head {self.head}, got {self.positions[0]}."
            )
        if len(self.positions) != len(self.body) + 1:
            raise ValueError(
                f"Snake needs one more position than segments, got "
                f"{len(self.positions)} positions for {len(self.body)} segments."
            )

    @classmethod
    def spawn(cls, head) -> "Snake":
        """A fresh snake: just a head, no body, not moving."""
        return cls(head=Position(*head))

    @property
    def length(self) -> int:
        return len(self.positions)

    @property
    def tail(self) -> Position:
        return self.positions[-1]

    def occupies(self, pos) -> bool:
        return pos in self.positions
