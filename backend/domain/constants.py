"""
Game constants for the snake engine.
"""

from enum import Enum


class Direction(str, Enum):
    """Movement directions. Values double as the command names."""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def offset(self):
        return OFFSETS[self]

    @property
    def opposite(self) -> "Direction":
        return OPPOSITES[self]


class FoodType(str, Enum):
    HEART = "heart"
    SMILE = "smile"
    MONEY = "money"
    BOOK = "book"


class GamePhase(str, Enum):
    TITLE = "TITLE"
    COUNTDOWN = "COUNTDOWN"
    RUNNING = "RUNNING"
    OVER = "OVER"


class Collision(str, Enum):
    NONE = "none"
    WALL = "wall"
    SELF = "self"


class Outcome(str, Enum):
    """Why a game ended."""
    WON = "won"
    WALL = "wall"
    SELF = "self"


# Screen coordinates: (0,0) is the top-left cell, y grows downwards
UP = Direction.UP
DOWN = Direction.DOWN
LEFT = Direction.LEFT
RIGHT = Direction.RIGHT
VALID_MOVES = set(Direction)

OFFSETS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITES = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

FOOD_TYPES = tuple(FoodType)

# Board
GRID_WIDTH = 15
GRID_HEIGHT = 15
INITIAL_HEAD_POSITION = (7, 7)

# Food
FOOD_LIMIT = 9
FOOD_SPAWN_COUNT = 4
WIN_THRESHOLD = 36
MAX_SPAWN_ATTEMPTS = 100

# Speed (milliseconds between ticks)
START_INTERVAL_MS = 200
SPEED_STEP_MS = 5
SPEED_FLOOR_MS = 100

# Countdown
COUNTDOWN_LENGTH = 3
COUNTDOWN_INTERVAL_MS = 1000


class GameEvent(str, Enum):
    """What happened during a transition, for the loop and the renderer."""
    STARTED = "started"
    COUNTDOWN = "countdown"
    RUNNING = "running"
    MOVED = "moved"
    ATE = "ate"
    SPEED_CHANGED = "speed_changed"
    FOOD_SPAWNED = "food_spawned"
    COLLIDED = "collided"
    WON = "won"
    RESET = "reset"
