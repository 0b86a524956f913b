"""
Domain entities for the snake game engine.

This module contains the core game entities that are independent of
the clock, the input source and the renderer.
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES,
    Direction, FoodType, GamePhase, Collision, Outcome, GameEvent, FOOD_TYPES,
)
from .grid import Grid, Position
from .snake import Snake, BodySegment, Food
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES',
    'Direction', 'FoodType', 'GamePhase', 'Collision', 'Outcome', 'GameEvent', 'FOOD_TYPES',
    'Grid', 'Position',
    'Snake', 'BodySegment', 'Food',
    'GameState',
]
