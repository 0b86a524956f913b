"""
Random player implementation - picks random safe moves.
"""

import random
from typing import List, Optional

from domain.constants import VALID_MOVES, Direction
from domain.game_state import GameState
from services.snake_body import next_head
from .base import Player


class RandomPlayer(Player):
    """
    A random AI that picks a valid direction that avoids walls, self-collisions
    and reversing into its own neck.
    """

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def safe_moves(self, game_state: GameState) -> List[Direction]:
        snake = game_state.snake
        # The tail moves out of the way on a normal step
        blocked = set(snake.positions[:-1])

        valid_moves: List[Direction] = []
        for move in sorted(VALID_MOVES, key=lambda d: d.value):
            if snake.direction is not None and move == snake.direction.opposite:
                continue

            new_x, new_y = next_head(snake.head, move)
            if (new_x < 0 or new_x >= game_state.width or
                    new_y < 0 or new_y >= game_state.height):
                continue

            if (new_x, new_y) in blocked:
                continue

            valid_moves.append(move)
        return valid_moves

    def get_move(self, game_state: GameState) -> Direction:
        valid_moves = self.safe_moves(game_state)

        # If no valid moves, keep going (we'll die anyway)
        if not valid_moves:
            return game_state.snake.direction or self.rng.choice(sorted(VALID_MOVES, key=lambda d: d.value))

        return self.rng.choice(valid_moves)
