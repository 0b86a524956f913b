"""
Tests for services/game_engine.py - the phase state machine and tick.
"""

import random
import pytest
import sys
import os
from dataclasses import replace
from unittest.mock import Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from domain import (
    BodySegment,
    Food,
    FoodType,
    GameEvent,
    GamePhase,
    Outcome,
    Position,
    Snake,
    UP, DOWN, LEFT, RIGHT,
)
from players import RandomPlayer
from services.game_engine import GameEngine


def build_snake(cells, direction=RIGHT, tags=None):
    positions = tuple(Position(*c) for c in cells)
    tags = tags or [FoodType.HEART] * (len(cells) - 1)
    body = tuple(BodySegment(tag, pos) for tag, pos in zip(tags, positions[1:]))
    return Snake(head=positions[0], body=body, positions=positions, direction=direction)


def running_engine(cells=((7, 7),), direction=RIGHT, foods=(), counts=None, interval_ms=200, seed=0):
    """An engine already in RUNNING with the given board."""
    engine = GameEngine(GameConfig(), rng=random.Random(seed))
    food_counts = {t: 0 for t in FoodType}
    food_counts.update(counts or {})
    engine.state = replace(
        engine.state,
        snake=build_snake(cells, direction),
        foods=tuple(foods),
        food_counts=food_counts,
        interval_ms=interval_ms,
        phase=GamePhase.RUNNING,
    )
    return engine


def heart(x, y):
    return Food(FoodType.HEART, Position(x, y))


class TestLifecycle:
    """Tests for TITLE -> COUNTDOWN -> RUNNING -> OVER -> TITLE."""

    def test_initial_state(self):
        engine = GameEngine()
        state = engine.state
        assert state.phase == GamePhase.TITLE
        assert state.snake.head == (7, 7)
        assert state.snake.body == ()
        assert state.snake.direction is None
        assert state.foods == ()
        assert state.total_eaten() == 0
        assert state.interval_ms == 200
        assert (state.width, state.height) == (15, 15)

    def test_title_ignores_ticks_and_directions(self):
        engine = GameEngine()
        before = engine.state
        assert engine.tick() == []
        assert engine.set_direction(UP) is False
        assert engine.state is before

    def test_start_begins_countdown(self):
        engine = GameEngine()
        assert engine.start() == [GameEvent.STARTED]
        assert engine.state.phase == GamePhase.COUNTDOWN
        assert engine.state.countdown == 3

    def test_start_is_only_accepted_from_title(self):
        engine = GameEngine()
        engine.start()
        engine.countdown_step()
        assert engine.start() == []
        assert engine.state.countdown == 2

    def test_countdown_reaches_running(self):
        engine = GameEngine(rng=random.Random(1))
        engine.start()
        engine.countdown_step()
        assert engine.state.countdown == 2
        engine.countdown_step()
        assert engine.state.countdown == 1
        assert engine.state.phase == GamePhase.COUNTDOWN

        events = engine.countdown_step()
        state = engine.state
        assert GameEvent.RUNNING in events
        assert state.phase == GamePhase.RUNNING
        assert state.countdown is None
        assert state.snake.direction == RIGHT

    def test_running_starts_with_four_foods_on_free_cells(self):
        engine = GameEngine(rng=random.Random(5))
        engine.start()
        for _ in range(3):
            engine.countdown_step()
        foods = engine.state.foods
        assert len(foods) == 4
        positions = {f.position for f in foods}
        assert len(positions) == 4
        assert engine.state.snake.head not in positions

    def test_countdown_ignores_directions(self):
        engine = GameEngine()
        engine.start()
        assert engine.set_direction(UP) is False
        assert engine.pending_direction is None

    def test_first_tick_after_countdown_moves_right(self):
        engine = GameEngine(rng=random.Random(3))
        engine.start()
        for _ in range(3):
            engine.countdown_step()
        engine.state = replace(engine.state, foods=())
        engine.tick()
        assert engine.state.snake.head == (8, 7)


class TestTick:
    """Tests for one RUNNING tick."""

    def test_plain_move(self):
        engine = running_engine()
        events = engine.tick()
        assert events == [GameEvent.MOVED]
        assert engine.state.snake.head == (8, 7)
        assert engine.state.snake.body == ()
        assert engine.state.total_eaten() == 0

    def test_plain_move_keeps_length_and_counts(self):
        engine = running_engine(cells=[(7, 7), (6, 7), (5, 7)], counts={FoodType.BOOK: 2})
        engine.tick()
        assert len(engine.state.snake.body) == 2
        assert engine.state.food_counts[FoodType.BOOK] == 2
        assert engine.state.total_eaten() == 2

    def test_eating_grows_counts_and_speeds_up(self):
        engine = running_engine(foods=[heart(8, 7)])
        events = engine.tick()
        state = engine.state

        assert state.snake.head == (8, 7)
        assert state.snake.body == (BodySegment(FoodType.HEART, Position(7, 7)),)
        assert state.food_counts[FoodType.HEART] == 1
        assert state.total_eaten() == 1
        assert state.interval_ms == 195
        assert len(state.foods) == 1
        replacement = state.foods[0]
        assert replacement.position not in state.snake.positions
        assert GameEvent.ATE in events
        assert GameEvent.SPEED_CHANGED in events
        assert GameEvent.FOOD_SPAWNED in events

    def test_growth_changes_exactly_one_count(self):
        engine = running_engine(
            foods=[Food(FoodType.MONEY, Position(8, 7))],
            counts={FoodType.HEART: 3, FoodType.BOOK: 1},
        )
        before = dict(engine.state.food_counts)
        engine.tick()
        after = engine.state.food_counts
        changed = [t for t in FoodType if after[t] != before[t]]
        assert changed == [FoodType.MONEY]
        assert after[FoodType.MONEY] == before[FoodType.MONEY] + 1

    def test_speed_is_floored(self):
        engine = running_engine(foods=[heart(8, 7)], interval_ms=100)
        events = engine.tick()
        assert engine.state.interval_ms == 100
        assert GameEvent.SPEED_CHANGED not in events

    def test_speed_floor_is_not_overshot(self):
        engine = running_engine(foods=[heart(8, 7)], interval_ms=103)
        engine.tick()
        assert engine.state.interval_ms == 100

    @pytest.mark.parametrize("head,direction", [
        ((14, 7), RIGHT),
        ((0, 7), LEFT),
        ((7, 0), UP),
        ((7, 14), DOWN),
    ])
    def test_wall_ends_game_without_moving(self, head, direction):
        engine = running_engine(
            cells=[head],
            direction=direction,
            foods=[heart(3, 3), Food(FoodType.BOOK, Position(11, 11))],
            counts={FoodType.SMILE: 4, FoodType.MONEY: 2},
            interval_ms=170,
        )
        before = engine.state
        events = engine.tick()
        assert events == [GameEvent.COLLIDED]
        assert engine.state == replace(before, phase=GamePhase.OVER, outcome=Outcome.WALL)
        assert engine.state.snake == before.snake
        assert engine.state.foods == before.foods
        assert engine.state.food_counts == before.food_counts
        assert engine.state.interval_ms == 170

    def test_running_into_body_ends_game(self):
        # Head at (5,5) moving left; turning down hits the segment at (5,6)
        cells = [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6), (4, 7)]
        engine = running_engine(cells=cells, direction=LEFT)
        snake_before = engine.state.snake
        assert engine.set_direction(DOWN) is True
        engine.tick()
        assert engine.state.phase == GamePhase.OVER
        assert engine.state.outcome == Outcome.SELF
        assert engine.state.snake == snake_before

    def test_following_the_vacating_tail_is_allowed(self):
        cells = [(5, 5), (6, 5), (6, 6), (5, 6)]
        engine = running_engine(cells=cells, direction=LEFT)
        engine.set_direction(DOWN)
        engine.tick()
        assert engine.state.phase == GamePhase.RUNNING
        assert engine.state.snake.positions == ((5, 6), (5, 5), (6, 5), (6, 6))

    def test_no_direction_is_a_no_op(self):
        engine = running_engine(direction=None)
        before = engine.state
        assert engine.tick() == []
        assert engine.state is before

    def test_over_is_frozen(self):
        engine = running_engine(cells=[(14, 7)])
        engine.tick()
        frozen = engine.state
        assert engine.tick() == []
        assert engine.set_direction(UP) is False
        assert engine.start() == []
        assert engine.state is frozen


class TestWin:
    def test_reaching_threshold_ends_game_without_spawning(self):
        counts = {FoodType.HEART: 9, FoodType.SMILE: 9, FoodType.MONEY: 9, FoodType.BOOK: 8}
        foods = [Food(FoodType.BOOK, Position(8, 7))]
        engine = running_engine(foods=foods, counts=counts)
        events = engine.tick()
        state = engine.state

        assert GameEvent.WON in events
        assert GameEvent.FOOD_SPAWNED not in events
        assert state.phase == GamePhase.OVER
        assert state.outcome == Outcome.WON
        assert state.total_eaten() == 36
        assert state.foods == ()

    def test_one_short_of_threshold_keeps_running(self):
        counts = {FoodType.HEART: 9, FoodType.SMILE: 9, FoodType.MONEY: 8, FoodType.BOOK: 8}
        foods = [Food(FoodType.BOOK, Position(8, 7))]
        engine = running_engine(foods=foods, counts=counts)
        engine.tick()
        assert engine.state.total_eaten() == 35
        assert engine.state.phase == GamePhase.RUNNING
        # Only money has room left under the cap
        assert [f.type for f in engine.state.foods] == [FoodType.MONEY]


class TestSetDirection:
    """Tests for direction command validation."""

    def test_change_is_buffered_until_next_tick(self):
        engine = running_engine()
        assert engine.set_direction(UP) is True
        assert engine.state.snake.direction == RIGHT
        engine.tick()
        assert engine.state.snake.direction == UP
        assert engine.state.snake.head == (7, 6)
        assert engine.pending_direction is None

    def test_opposite_is_rejected(self):
        engine = running_engine()
        assert engine.set_direction(LEFT) is False
        engine.tick()
        assert engine.state.snake.direction == RIGHT
        assert engine.state.snake.head == (8, 7)

    def test_same_direction_is_a_no_op(self):
        engine = running_engine()
        assert engine.set_direction(RIGHT) is False
        assert engine.pending_direction is None

    def test_reversal_is_checked_against_current_not_pending(self):
        engine = running_engine()
        engine.set_direction(UP)
        assert engine.set_direction(LEFT) is False
        assert engine.pending_direction == UP

    def test_latest_valid_command_wins(self):
        engine = running_engine()
        engine.set_direction(UP)
        engine.set_direction(DOWN)
        engine.tick()
        assert engine.state.snake.head == (7, 8)

    def test_accepts_strings(self):
        engine = running_engine()
        assert engine.set_direction("UP") is True
        assert engine.pending_direction == UP

    def test_unknown_direction_raises(self):
        engine = running_engine()
        with pytest.raises(ValueError):
            engine.set_direction("SIDEWAYS")


class TestReset:
    def test_reset_after_over_restores_title_state(self):
        engine = running_engine(cells=[(14, 7), (13, 7)], counts={FoodType.SMILE: 3}, interval_ms=150)
        engine.tick()
        assert engine.state.phase == GamePhase.OVER

        assert engine.reset() == [GameEvent.RESET]
        assert engine.state == engine.initial_state()
        assert engine.state.phase == GamePhase.TITLE
        assert engine.state.snake.head == (7, 7)
        assert engine.state.snake.body == ()
        assert engine.state.total_eaten() == 0
        assert engine.pending_direction is None

    def test_duplicate_reset_is_a_no_op(self):
        engine = running_engine(cells=[(14, 7)])
        engine.tick()
        engine.reset()
        state = engine.state
        assert engine.reset() == []
        assert engine.state is state

    def test_reset_while_running_is_ignored(self):
        engine = running_engine()
        assert engine.reset() == []
        assert engine.state.phase == GamePhase.RUNNING


class TestListeners:
    def test_listeners_see_every_transition(self):
        engine = GameEngine(rng=random.Random(0))
        listener = Mock()
        engine.subscribe(listener)

        engine.start()
        for _ in range(3):
            engine.countdown_step()
        engine.tick()

        assert listener.call_count == 5
        last_state, last_events = listener.call_args[0]
        assert last_state is engine.state
        assert last_events

    def test_listener_cannot_rewrite_counts(self):
        engine = GameEngine(rng=random.Random(0))
        errors = []

        def tamper(state, events):
            try:
                state.food_counts[FoodType.HEART] = 99
            except TypeError as exc:
                errors.append(exc)

        engine.subscribe(tamper)
        engine.start()

        assert len(errors) == 1
        assert engine.state.food_counts[FoodType.HEART] == 0

    def test_eating_leaves_previous_snapshot_untouched(self):
        engine = running_engine(foods=[heart(8, 7)])
        before = engine.state
        engine.tick()
        assert before.food_counts[FoodType.HEART] == 0
        assert engine.state.food_counts[FoodType.HEART] == 1

    def test_ignored_commands_are_not_published(self):
        engine = GameEngine()
        listener = Mock()
        engine.subscribe(listener)
        engine.tick()
        engine.reset()
        engine.set_direction(UP)
        listener.assert_not_called()


class TestPureTransition:
    def test_advance_does_not_touch_engine_state(self):
        engine = running_engine(foods=[heart(8, 7)])
        state = engine.state
        new_state, events = engine.advance(state, UP)
        assert engine.state is state
        assert new_state.snake.head == (7, 6)
        assert state.snake.head == (7, 7)
        assert events == [GameEvent.MOVED]


class TestInvariantsOverWholeGames:
    @pytest.mark.parametrize("seed", range(5))
    def test_invariants_hold_every_tick(self, seed):
        engine = GameEngine(rng=random.Random(seed))
        player = RandomPlayer(rng=random.Random(seed))
        engine.start()
        for _ in range(3):
            engine.countdown_step()

        for _ in range(2000):
            if engine.state.is_over:
                break
            engine.set_direction(player.get_move(engine.state))
            engine.tick()

            state = engine.state
            snake = state.snake
            assert len(snake.positions) == len(snake.body) + 1
            assert snake.positions[0] == snake.head
            for i, segment in enumerate(snake.body):
                assert segment.position == snake.positions[i + 1]
            for food_type in FoodType:
                assert state.total_food_count(food_type) <= 9
            assert state.total_eaten() <= 36
            if state.outcome == Outcome.WON:
                assert state.total_eaten() == 36
            elif not state.is_over:
                assert state.total_eaten() < 36
