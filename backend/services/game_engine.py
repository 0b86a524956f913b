"""
Game engine: phase state machine and the per-tick transition.

The transition methods (begin_countdown, step_countdown, advance) take a
GameState and return a new one plus the events it produced; they never
touch the engine's current state. The command methods (start,
countdown_step, set_direction, tick, reset) apply those transitions to
the current state and notify listeners with the new snapshot.
"""

import logging
import random
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from config import GameConfig
from domain.constants import (
    Collision,
    Direction,
    GameEvent,
    GamePhase,
    Outcome,
)
from domain.game_state import GameState, empty_food_counts
from domain.grid import Grid
from domain.snake import Snake
from services.collision_detector import CollisionDetector, blocking_cells
from services.food_spawner import FoodSpawner
from services import snake_body

logger = logging.getLogger(__name__)

Transition = Tuple[GameState, List[GameEvent]]
Listener = Callable[[GameState, List[GameEvent]], None]

COLLISION_OUTCOMES = {
    Collision.WALL: Outcome.WALL,
    Collision.SELF: Outcome.SELF,
}


class GameEngine:
    """
    Owns the current GameState and the buffered direction command.

    Manages:
      - Phase changes (TITLE -> COUNTDOWN -> RUNNING -> OVER -> TITLE)
      - Movement, collisions, eating and the speed ramp while RUNNING
      - Food placement through a FoodSpawner
      - Listeners that receive every new snapshot
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.grid = Grid(self.config.grid_width, self.config.grid_height)
        self.collisions = CollisionDetector(self.grid)
        self.spawner = FoodSpawner(
            self.grid,
            food_limit=self.config.food_limit,
            max_attempts=self.config.max_spawn_attempts,
            rng=self.rng,
        )
        self.state = self.initial_state()
        self.pending_direction: Optional[Direction] = None
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Pure transitions
    # ------------------------------------------------------------------

    def initial_state(self) -> GameState:
        """The TITLE state: lone head at the start cell, no food, zero counts."""
        return GameState(
            snake=Snake.spawn(self.config.initial_head),
            width=self.config.grid_width,
            height=self.config.grid_height,
            interval_ms=self.config.start_interval_ms,
            foods=(),
            food_counts=empty_food_counts(),
            phase=GamePhase.TITLE,
        )

    def begin_countdown(self, state: GameState) -> Transition:
        if state.phase != GamePhase.TITLE:
            return state, []
        new_state = replace(state, phase=GamePhase.COUNTDOWN, countdown=self.config.countdown_length)
        return new_state, [GameEvent.STARTED]

    def step_countdown(self, state: GameState) -> Transition:
        """One second of countdown; reaching zero starts play heading RIGHT on a seeded board."""
        if state.phase != GamePhase.COUNTDOWN:
            return state, []

        remaining = state.countdown - 1
        if remaining > 0:
            return replace(state, countdown=remaining), [GameEvent.COUNTDOWN]

        new_state = replace(
            state,
            phase=GamePhase.RUNNING,
            countdown=None,
            snake=replace(state.snake, direction=Direction.RIGHT),
        )
        events = [GameEvent.RUNNING]
        for _ in range(self.config.food_spawn_count):
            new_state, spawned = self._with_new_food(new_state)
            if spawned:
                events.append(GameEvent.FOOD_SPAWNED)
        return new_state, events

    def advance(self, state: GameState, pending_direction: Optional[Direction] = None) -> Transition:
        """
        Run one tick.

        1) Nothing happens unless RUNNING with a direction to move in
        2) A wall or self collision ends the game; the move is discarded
        3) Landing on food grows the snake, bumps the count and speeds up play
        4) Reaching the win threshold ends the game without a replacement food
        """
        if state.phase != GamePhase.RUNNING:
            return state, []

        direction = pending_direction or state.snake.direction
        if direction is None:
            return state, []

        snake = state.snake
        new_head = snake_body.next_head(snake.head, direction)
        eaten = state.food_at(new_head)

        collision = self.collisions.check(new_head, blocking_cells(snake, grows=eaten is not None))
        if collision != Collision.NONE:
            logger.info("Snake hit %s at %s", collision.value, tuple(new_head))
            over = replace(state, phase=GamePhase.OVER, outcome=COLLISION_OUTCOMES[collision])
            return over, [GameEvent.COLLIDED]

        if eaten is None:
            moved = replace(state, snake=snake_body.advance(snake, direction))
            return moved, [GameEvent.MOVED]

        counts = dict(state.food_counts)
        counts[eaten.type] += 1
        interval = max(self.config.speed_floor_ms, state.interval_ms - self.config.speed_step_ms)
        fed = replace(
            state,
            foods=tuple(food for food in state.foods if food != eaten),
            food_counts=counts,
            interval_ms=interval,
        )
        events = [GameEvent.ATE]
        if interval != state.interval_ms:
            events.append(GameEvent.SPEED_CHANGED)

        if fed.total_eaten() >= self.config.win_threshold:
            logger.info("All %s foods collected", fed.total_eaten())
            events.append(GameEvent.WON)
            return replace(fed, phase=GamePhase.OVER, outcome=Outcome.WON), events

        grown = replace(fed, snake=snake_body.advance(snake, direction, grew=True, growth_type=eaten.type))
        events.append(GameEvent.MOVED)
        grown, spawned = self._with_new_food(grown)
        if spawned:
            events.append(GameEvent.FOOD_SPAWNED)
        return grown, events

    def _with_new_food(self, state: GameState) -> Tuple[GameState, bool]:
        food = self.spawner.spawn(state)
        if food is None:
            return state, False
        return replace(state, foods=state.foods + (food,)), True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a callable to receive (state, events) after every change."""
        self._listeners.append(listener)

    def start(self) -> List[GameEvent]:
        if self.state.phase != GamePhase.TITLE:
            logger.debug("Ignoring start in phase %s", self.state.phase.value)
            return []
        events = self._apply(self.begin_countdown(self.state))
        logger.info("Countdown started from %s", self.state.countdown)
        return events

    def countdown_step(self) -> List[GameEvent]:
        if self.state.phase != GamePhase.COUNTDOWN:
            return []
        self.pending_direction = None
        events = self._apply(self.step_countdown(self.state))
        if self.state.phase == GamePhase.RUNNING:
            logger.info("Game running with %s foods on the board", len(self.state.foods))
        return events

    def set_direction(self, requested) -> bool:
        """
        Buffer a direction for the next tick.

        Returns True if the command was accepted. Commands outside RUNNING,
        repeats of the current direction and reversals are ignored.
        """
        requested = Direction(requested)
        if self.state.phase != GamePhase.RUNNING:
            logger.debug("Ignoring %s in phase %s", requested.value, self.state.phase.value)
            return False

        current = self.state.snake.direction
        if requested == current:
            return False
        if current is not None and requested == current.opposite:
            logger.debug("Rejected reversal from %s to %s", current.value, requested.value)
            return False

        self.pending_direction = requested
        return True

    def tick(self) -> List[GameEvent]:
        if self.state.phase != GamePhase.RUNNING:
            return []
        pending, self.pending_direction = self.pending_direction, None
        events = self._apply(self.advance(self.state, pending))
        if self.state.is_over:
            logger.info(
                "Game over (%s): eaten=%s length=%s",
                self.state.outcome.value, self.state.total_eaten(), self.state.snake.length,
            )
        return events

    def reset(self) -> List[GameEvent]:
        if self.state.phase != GamePhase.OVER:
            logger.debug("Ignoring reset in phase %s", self.state.phase.value)
            return []
        self.pending_direction = None
        events = self._apply((self.initial_state(), [GameEvent.RESET]))
        logger.info("Game reset to title")
        return events

    def snapshot(self) -> GameState:
        return self.state

    def _apply(self, transition: Transition) -> List[GameEvent]:
        new_state, events = transition
        self.state = new_state
        if events:
            for listener in self._listeners:
                listener(new_state, events)
        return events
