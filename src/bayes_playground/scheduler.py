"""
Bayes Playground — Step Loop
============================
Single-threaded tick source driving any of the step functions.

A ``StepLoop`` owns one module's state and advances it by calling
``step_fn(state)``. Control surface: ``start()``, ``stop()``, ``reset()``.
Each ``tick()`` performs ``steps_per_tick`` steps if the loop is running;
stopping takes effect before the next step, never in the middle of one.

Usage:
    from functools import partial
    from bayes_playground import metropolis

    params = metropolis.MHParams(sigma=0.8)
    loop = StepLoop(partial(metropolis.step, params=params),
                    metropolis.reset,
                    interval=MH_FRAME_INTERVAL,
                    steps_per_tick=params.steps_per_frame)
    loop.start()
    loop.run(n_ticks=100)
    print(loop.state.acceptance_rate)

License: MIT
"""

import time
from typing import Any, Callable, Optional

from .gibbs import SPEED_INTERVALS as GIBBS_INTERVALS

# Cadences of the interactive demos (seconds between ticks)
MH_FRAME_INTERVAL = 1.0 / 60.0
HMC_FRAME_INTERVAL = 1.0 / 60.0
VI_INTERVAL = 0.1


class StepLoop:
    """Timer-style driver threading state through a step function.

    Args:
        step_fn: Maps a state to the next state
        initial_fn: Builds a fresh state (used at construction and on reset)
        interval: Seconds between ticks when running in real time
        steps_per_tick: Steps performed per tick
        stop_when: Optional predicate; the loop stops once it holds
    """

    def __init__(self,
                 step_fn: Callable[[Any], Any],
                 initial_fn: Callable[[], Any],
                 interval: float = MH_FRAME_INTERVAL,
                 steps_per_tick: int = 1,
                 stop_when: Optional[Callable[[Any], bool]] = None):
        if steps_per_tick < 1:
            raise ValueError(f"steps_per_tick must be >= 1, got {steps_per_tick}")

        self.step_fn = step_fn
        self.initial_fn = initial_fn
        self.interval = interval
        self.steps_per_tick = steps_per_tick
        self.stop_when = stop_when

        self.state = initial_fn()
        self.running = False
        self.n_steps = 0
        self.n_ticks = 0

    def start(self):
        self.running = True

    def stop(self):
        self.running = False

    def reset(self):
        """Stop and restore the initial state."""
        self.running = False
        self.state = self.initial_fn()
        self.n_steps = 0
        self.n_ticks = 0

    def tick(self) -> Any:
        """Perform one tick's worth of steps; no-op while stopped."""
        if not self.running:
            return self.state

        for _ in range(self.steps_per_tick):
            self.state = self.step_fn(self.state)
            self.n_steps += 1
            if self.stop_when is not None and self.stop_when(self.state):
                self.running = False
                break

        self.n_ticks += 1
        return self.state

    def run(self, n_ticks: int, realtime: bool = False,
            verbose: bool = False) -> Any:
        """Drive up to ``n_ticks`` ticks, returning early once stopped.

        Args:
            n_ticks: Maximum number of ticks
            realtime: Sleep ``interval`` seconds between ticks
            verbose: Print progress
        """
        for i in range(n_ticks):
            if not self.running:
                break
            self.tick()
            if verbose and n_ticks >= 10 and i % (n_ticks // 10) == 0:
                print(f"  tick {i}/{n_ticks} ({100 * i / n_ticks:.0f}%), "
                      f"{self.n_steps} steps")
            if realtime:
                time.sleep(self.interval)

        if verbose:
            status = "running" if self.running else "stopped"
            print(f"[StepLoop] {self.n_ticks} ticks, {self.n_steps} steps ({status})")
        return self.state
