"""
Food placement under per-type caps.
"""

import logging
import random
from typing import List, Optional

import numpy as np

from domain.constants import FOOD_TYPES, FoodType
from domain.game_state import GameState
from domain.grid import Grid, Position
from domain.snake import Food

logger = logging.getLogger(__name__)


class FoodSpawner:
    """
    Chooses where the next food goes and what it is.

    A type is only offered while eaten + live food of that type is below
    food_limit. Cells are picked by rejection sampling; once max_attempts
    random picks have all landed on occupied cells the spawner scans the
    board for free cells instead, so a nearly full board cannot stall it.
    """

    def __init__(
        self,
        grid: Grid,
        food_limit: int,
        max_attempts: int,
        rng: Optional[random.Random] = None,
    ):
        self.grid = grid
        self.food_limit = food_limit
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def candidate_types(self, state: GameState) -> List[FoodType]:
        return [
            food_type for food_type in FOOD_TYPES
            if state.total_food_count(food_type) < self.food_limit
        ]

    def spawn(self, state: GameState) -> Optional[Food]:
        """Return a new Food for state, or None if no type or no cell is available."""
        candidates = self.candidate_types(state)
        if not candidates:
            logger.debug("Every food type has reached its limit of %s", self.food_limit)
            return None

        food_type = self.rng.choice(candidates)
        position = self._random_free_cell(state)
        if position is None:
            logger.warning("No space available for new %s food", food_type.value)
            return None

        return Food(type=food_type, position=position)

    def _is_free(self, state: GameState, pos: Position) -> bool:
        if pos == state.snake.head:
            return False
        if any(segment.position == pos for segment in state.snake.body):
            return False
        return state.food_at(pos) is None

    def _random_free_cell(self, state: GameState) -> Optional[Position]:
        for _ in range(self.max_attempts):
            pos = Position(
                self.rng.randint(0, self.grid.width - 1),
                self.rng.randint(0, self.grid.height - 1),
            )
            if self._is_free(state, pos):
                return pos

        logger.debug(
            "Rejection sampling gave up after %s attempts, scanning for free cells",
            self.max_attempts,
        )
        return self._scan_free_cell(state)

    def _scan_free_cell(self, state: GameState) -> Optional[Position]:
        occupied = np.zeros((self.grid.height, self.grid.width), dtype=bool)
        for x, y in state.snake.positions:
            occupied[y, x] = True
        for food in state.foods:
            occupied[food.position.y, food.position.x] = True

        free = np.argwhere(~occupied)
        if len(free) == 0:
            return None
        y, x = free[self.rng.randrange(len(free))]
        return Position(int(x), int(y))
