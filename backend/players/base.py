"""
Base player interface for the game engine.
"""

from domain.constants import Direction
from domain.game_state import GameState


class Player:
    """
    Base class/interface for an input source.

    A player looks at the latest snapshot and answers with the direction
    it wants the snake to take on the next tick.
    """

    name = "player"

    def get_move(self, game_state: GameState) -> Direction:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of Direction.UP, DOWN, LEFT, RIGHT
        """
        raise NotImplementedError
