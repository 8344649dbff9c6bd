"""
Bayes Playground — Metropolis-Hastings Sampler
===============================================
2D random-walk Metropolis over the unnormalized "hills" surface
``target_map_pdf`` on the square [0, 10] × [0, 10].

One cycle has two phases:
  1. Propose:  θ' = θ + U(−σ, σ) per axis (symmetric proposal)
  2. Decide:   accept iff u < min(1, π(θ')/π(θ)),  u ~ U(0, 1)

Only the ratio π(θ')/π(θ) is used, so the target never needs its
normalizing constant. A rejected proposal still appends the current
position to the history: the trail records time spent at each state,
not only distinct states.

The state is immutable; every operation returns a new ``MHState``:

    state = reset()
    params = MHParams(sigma=0.8, speed=2)
    for _ in range(100):
        state = run_frame(state, params)
    print(state.acceptance_rate)

License: MIT
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd

from .densities import resolve_rng, target_map_pdf

Point = Tuple[float, float]
TargetPdf = Callable[[float, float], float]


# ═══════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════

DOMAIN = (0.0, 10.0)            # Valid range on each axis
START_POSITION: Point = (5.0, 5.0)
DEFAULT_SIGMA = 0.8             # Proposal half-width
SIGMA_RANGE = (0.2, 2.0)        # Range offered by the width slider
HISTORY_CAP = 200

# Steps per animation frame for each speed setting
SPEED_STEPS = {1: 1, 2: 5, 3: 50}

# Acceptance-rate band considered well tuned
ACCEPTANCE_LOW = 0.15
ACCEPTANCE_HIGH = 0.50
MIN_ATTEMPTS_FOR_QUALITY = 10


@dataclass
class MHParams:
    """User-adjustable sampler settings."""
    sigma: float = DEFAULT_SIGMA
    speed: int = 1
    target_pdf: TargetPdf = target_map_pdf

    @property
    def steps_per_frame(self) -> int:
        if self.speed not in SPEED_STEPS:
            raise ValueError(f"Unknown speed: {self.speed}. "
                             f"Available: {list(SPEED_STEPS.keys())}")
        return SPEED_STEPS[self.speed]


@dataclass(frozen=True)
class MHState:
    """Chain position, bounded trail and acceptance counters."""
    position: Point = START_POSITION
    history: Tuple[Point, ...] = field(default_factory=tuple)
    accepted: int = 0
    total: int = 0

    @property
    def acceptance_rate(self) -> float:
        return self.accepted / self.total if self.total > 0 else 0.0


@dataclass(frozen=True)
class Decision:
    """Outcome of one accept/reject decision."""
    new_state: MHState
    accepted: bool
    ratio: float
    roll: float


# ═══════════════════════════════════════════════════════════════
# Operations
# ═══════════════════════════════════════════════════════════════

def reset() -> MHState:
    """Fresh chain at the centre of the map."""
    return MHState()


def in_domain(point: Point) -> bool:
    low, high = DOMAIN
    return low <= point[0] <= high and low <= point[1] <= high


def _append(history: Tuple[Point, ...], point: Point) -> Tuple[Point, ...]:
    """Append with ring-buffer eviction of the oldest entries."""
    history = history + (point,)
    if len(history) > HISTORY_CAP:
        history = history[-HISTORY_CAP:]
    return history


def propose_step(state: MHState, sigma: float, rng=None) -> Point:
    """Symmetric uniform random-walk proposal around the current position."""
    rng = resolve_rng(rng)
    x, y = state.position
    return (x + (rng.random() - 0.5) * 2.0 * sigma,
            y + (rng.random() - 0.5) * 2.0 * sigma)


def acceptance_ratio(current: Point, proposal: Point,
                     target_pdf: TargetPdf = target_map_pdf) -> float:
    """π(proposal)/π(current) from the unnormalized target.

    A current density of exactly zero makes any proposal an improvement.
    """
    current_density = float(target_pdf(*current))
    proposal_density = float(target_pdf(*proposal))
    if current_density == 0.0:
        return float('inf')
    return proposal_density / current_density


def decide_step(state: MHState, proposal: Point,
                target_pdf: TargetPdf = target_map_pdf,
                roll: Optional[float] = None,
                rng=None) -> Decision:
    """Accept or reject ``proposal``.

    ``roll`` fixes the uniform draw; when omitted it is taken from ``rng``.
    """
    ratio = acceptance_ratio(state.position, proposal, target_pdf)
    if roll is None:
        roll = float(resolve_rng(rng).random())
    accepted = roll < min(1.0, ratio)

    if accepted:
        new_state = replace(state,
                            position=proposal,
                            history=_append(state.history, proposal),
                            accepted=state.accepted + 1,
                            total=state.total + 1)
    else:
        new_state = replace(state,
                            history=_append(state.history, state.position),
                            total=state.total + 1)

    return Decision(new_state=new_state, accepted=accepted, ratio=ratio, roll=roll)


def step(state: MHState, params: Optional[MHParams] = None, rng=None) -> MHState:
    """One full propose/decide cycle.

    Proposals outside the domain are rejected outright: the attempt is
    counted but nothing is appended to the history.
    """
    params = params or MHParams()
    proposal = propose_step(state, params.sigma, rng)
    if not in_domain(proposal):
        return replace(state, total=state.total + 1)
    return decide_step(state, proposal, params.target_pdf, rng=rng).new_state


def run_frame(state: MHState, params: Optional[MHParams] = None, rng=None) -> MHState:
    """Advance by the number of steps one animation frame performs."""
    params = params or MHParams()
    for _ in range(params.steps_per_frame):
        state = step(state, params, rng)
    return state


# ═══════════════════════════════════════════════════════════════
# Diagnostics
# ═══════════════════════════════════════════════════════════════

def acceptance_quality(rate: float) -> str:
    """Classify an acceptance rate.

    Returns:
        'too_large': proposals too wide, most are rejected (rate < 15%)
        'too_small': proposals too narrow, chain crawls (rate > 50%)
        'optimal'  : otherwise
    """
    if rate < ACCEPTANCE_LOW:
        return 'too_large'
    if rate > ACCEPTANCE_HIGH:
        return 'too_small'
    return 'optimal'


def tuning_hint(state: MHState) -> Optional[str]:
    """Acceptance quality once enough attempts have been made, else None."""
    if state.total <= MIN_ATTEMPTS_FOR_QUALITY:
        return None
    return acceptance_quality(state.acceptance_rate)


def history_frame(state: MHState) -> pd.DataFrame:
    """Trail as a DataFrame with one row per recorded step."""
    points = np.asarray(state.history, dtype=float).reshape(-1, 2)
    return pd.DataFrame(points, columns=['x', 'y'])
