"""
Bayes Playground — Gibbs Sampler
================================
Alternating conditional sampling from a bivariate standard Normal with
correlation ρ:

    X | Y=y ~ N(ρy, 1 − ρ²)
    Y | X=x ~ N(ρx, 1 − ρ²)

Each step redraws exactly one coordinate and flips the turn, so the trail
is a staircase of axis-aligned segments. The history records the position
*before* each update.

As ρ → 1 the conditional variance 1 − ρ² collapses and the chain needs
about 1/(1 − ρ²) steps to decorrelate.

License: MIT
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .densities import resolve_rng

Point = Tuple[float, float]

START_POSITION: Point = (-2.0, -2.0)
START_TURN = 'Y'                # First update samples Y given X
DEFAULT_RHO = 0.8
RHO_RANGE = (0.0, 0.99)
HISTORY_CAP = 200

WARNING_RHO = 0.9               # Above this the chain mixes visibly slowly
DIVERGENT_RHO = 0.99            # Above this the mixing time is reported as infinite

# Interval between automatic steps (seconds) per speed setting
SPEED_INTERVALS = {1: 0.5, 2: 0.1, 3: 0.02}


@dataclass(frozen=True)
class GibbsState:
    """Position, axis to sample next and the pre-step trail."""
    rho: float = DEFAULT_RHO
    position: Point = START_POSITION
    turn: str = START_TURN
    history: Tuple[Point, ...] = field(default_factory=tuple)


def reset(rho: float = DEFAULT_RHO) -> GibbsState:
    """Chain at the fixed starting point for correlation ``rho``."""
    return GibbsState(rho=rho)


def change_correlation(state: GibbsState, rho: float) -> GibbsState:
    """Switch the target; the old chain is discarded."""
    return reset(rho)


def standard_normal(rng=None) -> float:
    """One N(0, 1) draw by Box-Muller."""
    rng = resolve_rng(rng)
    u1 = 1.0 - rng.random()     # (0, 1], keeps log finite
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def conditional_distribution(state: GibbsState) -> Tuple[float, float]:
    """(mean, std) of the coordinate the next step will sample."""
    x, y = state.position
    other = y if state.turn == 'X' else x
    return state.rho * other, math.sqrt(1.0 - state.rho ** 2)


def step(state: GibbsState, rho: Optional[float] = None, rng=None) -> GibbsState:
    """Resample one coordinate from its full conditional and flip the turn.

    If ``rho`` differs from the chain's correlation the chain restarts from
    the initial point before stepping.
    """
    if rho is not None and rho != state.rho:
        state = reset(rho)

    mean, std = conditional_distribution(state)
    value = mean + standard_normal(rng) * std
    x, y = state.position

    if state.turn == 'X':
        new_position, new_turn = (value, y), 'Y'
    else:
        new_position, new_turn = (x, value), 'X'

    history = state.history + (state.position,)
    if len(history) > HISTORY_CAP:
        history = history[-HISTORY_CAP:]

    return replace(state, position=new_position, turn=new_turn, history=history)


# ── Diagnostics ──

def conditional_variance(rho: float) -> float:
    return 1.0 - rho * rho


def mixing_time(rho: float) -> float:
    """Approximate steps to decorrelate, ⌈1/(1 − ρ²)⌉."""
    if rho > DIVERGENT_RHO:
        return math.inf
    return float(math.ceil(1.0 / (1.0 - rho * rho)))


def correlation_warning(rho: float) -> bool:
    return rho > WARNING_RHO


def history_frame(state: GibbsState) -> pd.DataFrame:
    points = np.asarray(state.history, dtype=float).reshape(-1, 2)
    return pd.DataFrame(points, columns=['x', 'y'])
