"""
Clock shell around the engine.

One schedule.Scheduler drives the engine: a once-per-second countdown job
while in COUNTDOWN and a tick job at the current speed while RUNNING. At
most one job is armed at a time. Every snapshot the engine publishes is
reconciled against the armed job, so a phase change cancels the old clock
and a speed change re-arms the tick clock at the new interval, taking
effect from the next scheduled tick.
"""

import logging
import time
from typing import Callable, List, Optional, Tuple

import schedule

from domain.constants import GameEvent, GamePhase
from domain.game_state import GameState
from services.game_engine import GameEngine

logger = logging.getLogger(__name__)

DEFAULT_POLL_SECONDS = 0.005


class GameLoop:
    def __init__(
        self,
        engine: GameEngine,
        scheduler: Optional[schedule.Scheduler] = None,
        sleep: Callable[[float], None] = time.sleep,
        poll_seconds: float = DEFAULT_POLL_SECONDS,
    ):
        self.engine = engine
        self.scheduler = scheduler or schedule.Scheduler()
        self.sleep = sleep
        self.poll_seconds = poll_seconds
        self._job: Optional[schedule.Job] = None
        self._armed: Optional[Tuple[GamePhase, int]] = None
        self._running = False
        engine.subscribe(self._on_change)

    @property
    def armed(self) -> Optional[Tuple[GamePhase, int]]:
        """(phase, interval_ms) of the armed clock, None when idle."""
        return self._armed

    def _wanted_clock(self, state: GameState) -> Optional[Tuple[GamePhase, int]]:
        if state.phase == GamePhase.COUNTDOWN:
            return GamePhase.COUNTDOWN, self.engine.config.countdown_interval_ms
        if state.phase == GamePhase.RUNNING:
            return GamePhase.RUNNING, state.interval_ms
        return None

    def _on_change(self, state: GameState, events: List[GameEvent]) -> None:
        wanted = self._wanted_clock(state)
        if wanted == self._armed:
            return
        self.cancel()
        if wanted is not None:
            self._arm(*wanted)

    def _arm(self, phase: GamePhase, interval_ms: int) -> None:
        job_func = self.engine.countdown_step if phase == GamePhase.COUNTDOWN else self.engine.tick
        self._job = self.scheduler.every(interval_ms / 1000).seconds.do(job_func)
        self._armed = (phase, interval_ms)
        logger.debug("Armed %s clock every %sms", phase.value, interval_ms)

    def cancel(self) -> None:
        """Stop whichever clock is armed."""
        if self._job is not None:
            self.scheduler.cancel_job(self._job)
            logger.debug("Cancelled %s clock", self._armed[0].value)
        self._job = None
        self._armed = None

    def step(self) -> bool:
        """
        Fire the armed clock once without waiting for it.

        Returns False if nothing was armed. Used for headless runs and tests.
        """
        if self._job is None:
            return False
        self.scheduler.run_all(delay_seconds=0)
        return True

    def run(
        self,
        stop_when: Optional[Callable[[], bool]] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Run pending clock jobs in real time until stopped.

        The loop ends when stop() is called, when stop_when() returns True,
        or after timeout_seconds.
        """
        self._running = True
        deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        try:
            while self._running:
                if stop_when is not None and stop_when():
                    break
                if deadline is not None and time.monotonic() >= deadline:
                    logger.warning("Game loop timed out after %ss", timeout_seconds)
                    break
                self.scheduler.run_pending()
                self.sleep(self.poll_seconds)
        finally:
            self._running = False

    def stop(self) -> None:
        """Tear down: cancel the clock and leave run()."""
        self._running = False
        self.cancel()
        self.scheduler.clear()
