"""
GameState entity - a snapshot of the game at a point in time.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import FOOD_TYPES, FoodType, GamePhase, Outcome
from .snake import Food, Snake


def empty_food_counts() -> Dict[FoodType, int]:
    return {food_type: 0 for food_type in FOOD_TYPES}


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of the game at a specific point in time.

    States are never mutated; the engine builds a new one for every tick,
    countdown step and phase transition.

    Attributes:
        snake: the snake (head, tagged body, occupied positions, direction)
        foods: live food on the board
        food_counts: read-only FoodType -> number eaten so far
        phase: TITLE, COUNTDOWN, RUNNING or OVER
        interval_ms: current delay between ticks
        countdown: seconds left while in COUNTDOWN, otherwise None
        width, height: board dimensions
        outcome: why the game ended, None until OVER
    """

    snake: Snake
    width: int
    height: int
    interval_ms: int
    foods: Tuple[Food, ...] = ()
    food_counts: Mapping[FoodType, int] = field(default_factory=empty_food_counts)
    phase: GamePhase = GamePhase.TITLE
    countdown: Optional[int] = None
    outcome: Optional[Outcome] = None

    def __post_init__(self):
        # Counts are copied and stay read-only for as long as the state exists
        object.__setattr__(self, "food_counts", MappingProxyType(dict(self.food_counts)))

    def food_at(self, pos) -> Optional[Food]:
        for food in self.foods:
            if food.position == pos:
                return food
        return None

    def live_count(self, food_type: FoodType) -> int:
        return sum(1 for food in self.foods if food.type == food_type)

    def total_food_count(self, food_type: FoodType) -> int:
        """Eaten plus still on the board, the quantity the per-type cap applies to."""
        return self.food_counts[food_type] + self.live_count(food_type)

    def total_eaten(self) -> int:
        return sum(self.food_counts.values())

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.OVER

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        @ = snake head
        H S M B = food (heart, smile, money, book)
        h s m b = body segment grown from that food
        Rows are printed top to bottom, matching screen coordinates.
        """
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        for food in self.foods:
            board[food.position.y][food.position.x] = food.type.value[0].upper()

        for segment in self.snake.body:
            board[segment.position.y][segment.position.x] = segment.type.value[0]

        hx, hy = self.snake.head
        board[hy][hx] = '@'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.height)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.width)))
        return "\n".join(result)

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-friendly snapshot handed to renderers.
        Positions become [x, y] lists, enums become their values.
        """
        return {
            "phase": self.phase.value,
            "countdown": self.countdown,
            "interval_ms": self.interval_ms,
            "width": self.width,
            "height": self.height,
            "outcome": self.outcome.value if self.outcome else None,
            "snake": {
                "head": list(self.snake.head),
                "direction": self.snake.direction.value if self.snake.direction else None,
                "body": [
                    {"type": segment.type.value, "position": list(segment.position)}
                    for segment in self.snake.body
                ],
            },
            "foods": [
                {"type": food.type.value, "position": list(food.position)}
                for food in self.foods
            ],
            "food_counts": {food_type.value: count for food_type, count in self.food_counts.items()},
            "total_eaten": self.total_eaten(),
        }

    def __repr__(self):
        return (
            f"<GameState phase={self.phase.value}, head={tuple(self.snake.head)}, "
            f"length={self.snake.length}, foods={len(self.foods)}, "
            f"eaten={self.total_eaten()}, interval={self.interval_ms}ms>"
        )
