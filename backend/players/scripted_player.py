"""
Scripted player - replays a fixed list of directions.
"""

from typing import Iterable, List

from controls import direction_for_key, parse_direction
from domain.constants import Direction
from domain.game_state import GameState
from .base import Player


def parse_moves(text: str) -> List[Direction]:
    """
    Parse a comma separated move list such as "UP,left,ArrowDown,d".

    Each token may be a key name (arrows, WASD) or a direction name.
    """
    moves = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        moves.append(direction_for_key(token) or parse_direction(token))
    return moves


class ScriptedPlayer(Player):
    """
    Answers with the next scripted direction on every call, then keeps
    the snake's current heading once the script runs out.
    """

    name = "scripted"

    def __init__(self, moves: Iterable[Direction]):
        self.moves = list(moves)
        self._index = 0

    @property
    def remaining(self) -> int:
        return len(self.moves) - self._index

    def get_move(self, game_state: GameState) -> Direction:
        if self._index < len(self.moves):
            move = self.moves[self._index]
            self._index += 1
            return move
        return game_state.snake.direction
