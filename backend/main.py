"""
Headless runner: plays one game with an autopilot standing in for the keyboard.

Usage:
    python backend/main.py --fast --seed 7
    python backend/main.py --show-board --start-interval 250
    python backend/main.py --fast --moves "UP,LEFT,ArrowDown,d"
"""

import argparse
import json
import logging
import random
from typing import Any, Dict, List, Optional

from config import GameConfig, load_settings
from domain.constants import GameEvent
from domain.game_state import GameState
from players import Player, RandomPlayer, ScriptedPlayer, parse_moves
from services.game_engine import GameEngine
from services.game_loop import GameLoop

logger = logging.getLogger(__name__)

# Events after which the snake has a new position worth steering from
STEERING_EVENTS = {GameEvent.RUNNING, GameEvent.MOVED}


def attach_player(engine: GameEngine, player: Player) -> None:
    """Feed the player every fresh snapshot and forward its answer as a command."""
    def steer(state: GameState, events: List[GameEvent]) -> None:
        if state.is_over or not STEERING_EVENTS.intersection(events):
            return
        engine.set_direction(player.get_move(state))

    engine.subscribe(steer)


def attach_board_printer(engine: GameEngine) -> None:
    def show(state: GameState, events: List[GameEvent]) -> None:
        counts = {t.value: c for t, c in state.food_counts.items()}
        print("\n" + state.print_board() + "\n")
        print(f"{state.phase.value} interval={state.interval_ms}ms counts={counts}")

    engine.subscribe(show)


def summarize(state: GameState, ticks: int) -> Dict[str, Any]:
    return {
        "outcome": state.outcome.value if state.outcome else None,
        "phase": state.phase.value,
        "ticks": ticks,
        "length": state.snake.length,
        "total_eaten": state.total_eaten(),
        "food_counts": {t.value: c for t, c in state.food_counts.items()},
        "final_interval_ms": state.interval_ms,
    }


def run_game(
    config: GameConfig,
    seed: Optional[int] = None,
    fast: bool = True,
    max_ticks: int = 10_000,
    show_board: bool = False,
    timeout_seconds: Optional[float] = None,
    player: Optional[Player] = None,
) -> Dict[str, Any]:
    """
    Play one game from TITLE to OVER (or until max_ticks) and return a summary.

    With fast=True the clocks are stepped directly instead of waited on.
    The snake is steered by player, a seeded RandomPlayer when none is given.
    """
    rng = random.Random(seed)
    engine = GameEngine(config, rng=rng)
    loop = GameLoop(engine)
    attach_player(engine, player or RandomPlayer(rng=random.Random(seed)))
    if show_board:
        attach_board_printer(engine)

    ticks = 0

    def count_ticks(state: GameState, events: List[GameEvent]) -> None:
        nonlocal ticks
        if GameEvent.MOVED in events or state.is_over:
            ticks += 1

    engine.subscribe(count_ticks)
    logger.info("Starting game (seed=%s, start interval=%sms)", seed, config.start_interval_ms)
    engine.start()

    try:
        if fast:
            while not engine.state.is_over and ticks < max_ticks:
                if not loop.step():
                    break
        else:
            loop.run(
                stop_when=lambda: engine.state.is_over or ticks >= max_ticks,
                timeout_seconds=timeout_seconds,
            )
    finally:
        loop.stop()

    return summarize(engine.snapshot(), ticks)


def main():
    parser = argparse.ArgumentParser(
        description="Run a headless snake game driven by an autopilot or a scripted move list."
    )
    parser.add_argument("--seed", type=int, required=False, default=None,
                        help="Seed for food placement and the autopilot (overrides SNAKE_SEED)")
    parser.add_argument("--start-interval", type=int, required=False, default=None,
                        help="Starting milliseconds between ticks (overrides SNAKE_START_INTERVAL_MS)")
    parser.add_argument("--fast", action="store_true",
                        help="Step the clocks directly instead of running in real time")
    parser.add_argument("--max-ticks", type=int, required=False, default=10_000,
                        help="Stop after this many ticks")
    parser.add_argument("--show-board", action="store_true",
                        help="Print the board after every change")
    parser.add_argument("--moves", type=str, required=False, default=None,
                        help="Comma separated moves to replay instead of the random autopilot "
                             "(direction names or keys, e.g. \"UP,left,ArrowDown,d\")")

    args = parser.parse_args()
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    config = settings.game
    if args.start_interval is not None:
        config = GameConfig(start_interval_ms=args.start_interval)
    seed = args.seed if args.seed is not None else settings.seed
    player = None
    if args.moves is not None:
        try:
            player = ScriptedPlayer(parse_moves(args.moves))
        except ValueError as e:
            parser.error(str(e))

    result = run_game(
        config,
        seed=seed,
        fast=args.fast,
        max_ticks=args.max_ticks,
        show_board=args.show_board,
        player=player,
    )

    print("\nGame Summary:")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
