"""
Engine configuration.

Defaults live in domain.constants; a few knobs can be overridden from the
environment (or a .env file):

    SNAKE_START_INTERVAL_MS  starting delay between ticks (200 by default, 250 for the slow variant)
    SNAKE_SEED               seed for food placement, unset for a random game
    LOG_LEVEL                logging level name, INFO by default
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.constants import (
    COUNTDOWN_INTERVAL_MS,
    COUNTDOWN_LENGTH,
    FOOD_LIMIT,
    FOOD_SPAWN_COUNT,
    GRID_HEIGHT,
    GRID_WIDTH,
    INITIAL_HEAD_POSITION,
    MAX_SPAWN_ATTEMPTS,
    SPEED_FLOOR_MS,
    SPEED_STEP_MS,
    START_INTERVAL_MS,
    WIN_THRESHOLD,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    initial_head: Tuple[int, int] = INITIAL_HEAD_POSITION
    food_limit: int = FOOD_LIMIT
    food_spawn_count: int = FOOD_SPAWN_COUNT
    win_threshold: int = WIN_THRESHOLD
    max_spawn_attempts: int = MAX_SPAWN_ATTEMPTS
    start_interval_ms: int = START_INTERVAL_MS
    speed_step_ms: int = SPEED_STEP_MS
    speed_floor_ms: int = SPEED_FLOOR_MS
    countdown_length: int = COUNTDOWN_LENGTH
    countdown_interval_ms: int = COUNTDOWN_INTERVAL_MS

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if the settings cannot describe a playable game."""
        if self.grid_width <= 0 or self.grid_height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {self.grid_width}x{self.grid_height}."
            )
        x, y = self.initial_head
        if not (0 <= x < self.grid_width and 0 <= y < self.grid_height):
            raise ValueError(f"Initial head {self.initial_head} is outside the grid.")
        if self.food_limit <= 0 or self.food_spawn_count < 0 or self.win_threshold <= 0:
            raise ValueError("Food limit and win threshold must be positive.")
        if self.max_spawn_attempts < 0:
            raise ValueError("max_spawn_attempts cannot be negative.")
        if self.speed_floor_ms <= 0 or self.speed_step_ms < 0:
            raise ValueError("Speed floor must be positive and the step non-negative.")
        if self.start_interval_ms < self.speed_floor_ms:
            raise ValueError(
                f"Starting interval {self.start_interval_ms}ms is below the "
                f"{self.speed_floor_ms}ms floor."
            )
        if self.countdown_length < 1 or self.countdown_interval_ms <= 0:
            raise ValueError("Countdown needs at least one positive-length step.")


@dataclass(frozen=True)
class Settings:
    game: GameConfig
    seed: Optional[int]
    log_level: str


def _int_from_env(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings() -> Settings:
    """Read overrides from the environment, loading .env first."""
    load_dotenv()

    start_interval = _int_from_env("SNAKE_START_INTERVAL_MS")
    game = GameConfig(start_interval_ms=start_interval) if start_interval else GameConfig()

    settings = Settings(
        game=game,
        seed=_int_from_env("SNAKE_SEED"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    logger.debug("Loaded settings: %s", settings)
    return settings
