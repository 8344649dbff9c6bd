"""
Bayes Playground — Variational Inference Optimizer
==================================================
Fits a single Gaussian q(θ) = N(μ, σ²) to a fixed bimodal target

    p(θ) = 0.4 · N(2, 0.8²) + 0.6 · N(5, 1.2²)

by gradient ascent on the Evidence Lower Bound

    ELBO(μ, σ) = E_q[log p(θ)] + H(q)

The expectation is a Riemann sum over a fixed grid on [−2, 10] with
dx = 0.1; the entropy term uses the Gaussian closed form. Gradients are
central differences, so every step is deterministic.

Usage:
    state = initial_state()
    state = optimize(state, VIParams(), max_steps=500)
    print(state.mu, state.sigma, state.converged)

License: MIT
"""

from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from .densities import ArrayLike, gaussian_entropy, normal_pdf


# ═══════════════════════════════════════════════════════════════
# Target and quadrature grid
# ═══════════════════════════════════════════════════════════════

# (weight, mean, std) of each target component
TARGET_COMPONENTS = (
    (0.4, 2.0, 0.8),
    (0.6, 5.0, 1.2),
)

GRID_DX = 0.1
GRID = np.linspace(-2.0, 10.0, 121)     # −2, −1.9, …, 10
DENSITY_FLOOR = 1e-10                   # Grid points below this are skipped

# Optimizer defaults
LEARNING_RATE = 0.05
GRADIENT_EPS = 0.01
SIGMA_FLOOR = 0.3
TOLERANCE = 0.01
START_MU = 3.5
START_SIGMA = 1.5


def target_density(x: ArrayLike) -> ArrayLike:
    """Bimodal target p(θ)."""
    x = np.asarray(x, dtype=float)
    total = np.zeros_like(x)
    for weight, mean, std in TARGET_COMPONENTS:
        total = total + weight * np.asarray(normal_pdf(x, mean, std))
    return float(total) if total.ndim == 0 else total


def variational_density(x: ArrayLike, mu: float, sigma: float) -> ArrayLike:
    """q(θ) = N(μ, σ²)."""
    return normal_pdf(x, mu, sigma)


_TARGET_ON_GRID = target_density(GRID)


# ═══════════════════════════════════════════════════════════════
# Objective
# ═══════════════════════════════════════════════════════════════

class ElboDecomposition(NamedTuple):
    elbo: float
    likelihood_term: float
    entropy_term: float


def _quadrature_terms(mu: float, sigma: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    q = np.asarray(variational_density(GRID, mu, sigma))
    p = _TARGET_ON_GRID
    mask = (q > DENSITY_FLOOR) & (p > DENSITY_FLOOR)
    return q, p, mask


def elbo_decomposition(mu: float, sigma: float) -> ElboDecomposition:
    """ELBO split into the expected log-target and the entropy of q."""
    q, p, mask = _quadrature_terms(mu, sigma)
    log_p = np.log(np.where(mask, p, 1.0))
    likelihood_term = float(np.sum(np.where(mask, q * log_p, 0.0)) * GRID_DX)
    entropy_term = gaussian_entropy(sigma)
    return ElboDecomposition(elbo=likelihood_term + entropy_term,
                             likelihood_term=likelihood_term,
                             entropy_term=entropy_term)


def elbo(mu: float, sigma: float) -> float:
    return elbo_decomposition(mu, sigma).elbo


def kl_divergence(mu: float, sigma: float) -> float:
    """KL(q ‖ p) on the quadrature grid, clamped at zero."""
    q, p, mask = _quadrature_terms(mu, sigma)
    log_ratio = np.log(np.where(mask, q, 1.0)) - np.log(np.where(mask, p, 1.0))
    kl = float(np.sum(np.where(mask, q * log_ratio, 0.0)) * GRID_DX)
    return max(0.0, kl)


# ═══════════════════════════════════════════════════════════════
# Gradient ascent
# ═══════════════════════════════════════════════════════════════

class GradientStep(NamedTuple):
    new_mu: float
    new_sigma: float
    grad_mu: float
    grad_sigma: float
    converged: bool


def numerical_gradient(mu: float, sigma: float,
                       eps: float = GRADIENT_EPS) -> Tuple[float, float]:
    """Central-difference (∂ELBO/∂μ, ∂ELBO/∂σ)."""
    grad_mu = (elbo(mu + eps, sigma) - elbo(mu - eps, sigma)) / (2.0 * eps)
    grad_sigma = (elbo(mu, sigma + eps) - elbo(mu, sigma - eps)) / (2.0 * eps)
    return grad_mu, grad_sigma


def gradient_ascent_step(mu: float, sigma: float,
                         lr: float = LEARNING_RATE,
                         eps: float = GRADIENT_EPS,
                         sigma_floor: float = SIGMA_FLOOR,
                         tolerance: float = TOLERANCE) -> GradientStep:
    """One ascent update of (μ, σ); σ is floored at ``sigma_floor``.

    ``converged`` reports whether both gradient components at the *input*
    point were already below ``tolerance``.
    """
    grad_mu, grad_sigma = numerical_gradient(mu, sigma, eps)
    new_mu = mu + lr * grad_mu
    new_sigma = max(sigma_floor, sigma + lr * grad_sigma)
    converged = abs(grad_mu) < tolerance and abs(grad_sigma) < tolerance
    return GradientStep(new_mu, new_sigma, grad_mu, grad_sigma, converged)


# ═══════════════════════════════════════════════════════════════
# Optimizer state
# ═══════════════════════════════════════════════════════════════

@dataclass
class VIParams:
    learning_rate: float = LEARNING_RATE
    eps: float = GRADIENT_EPS
    sigma_floor: float = SIGMA_FLOOR
    tolerance: float = TOLERANCE


class TrajectoryPoint(NamedTuple):
    mu: float
    sigma: float
    elbo: float


@dataclass(frozen=True)
class VIState:
    mu: float = START_MU
    sigma: float = START_SIGMA
    history: Tuple[TrajectoryPoint, ...] = field(default_factory=tuple)
    converged: bool = False

    @property
    def decomposition(self) -> ElboDecomposition:
        return elbo_decomposition(self.mu, self.sigma)

    @property
    def kl(self) -> float:
        return kl_divergence(self.mu, self.sigma)


def initial_state(mu: float = START_MU, sigma: float = START_SIGMA) -> VIState:
    return VIState(mu=mu, sigma=sigma)


def restart(state: VIState) -> VIState:
    """Keep (μ, σ) but clear the recorded trajectory."""
    return replace(state, history=(), converged=False)


def optimize_step(state: VIState, params: Optional[VIParams] = None) -> VIState:
    """Apply one ascent step and record (μ, σ, ELBO) after it."""
    params = params or VIParams()
    result = gradient_ascent_step(state.mu, state.sigma,
                                  lr=params.learning_rate,
                                  eps=params.eps,
                                  sigma_floor=params.sigma_floor,
                                  tolerance=params.tolerance)
    point = TrajectoryPoint(result.new_mu, result.new_sigma,
                            elbo(result.new_mu, result.new_sigma))
    return replace(state,
                   mu=result.new_mu,
                   sigma=result.new_sigma,
                   history=state.history + (point,),
                   converged=result.converged)


def optimize(state: VIState, params: Optional[VIParams] = None,
             max_steps: int = 1000, verbose: bool = False) -> VIState:
    """Step until converged or ``max_steps`` steps have been taken."""
    params = params or VIParams()
    for i in range(max_steps):
        if state.converged:
            break
        state = optimize_step(state, params)
        if verbose and i % 50 == 0:
            print(f"  step {i:4d}: μ={state.mu:.4f} σ={state.sigma:.4f} "
                  f"ELBO={state.history[-1].elbo:.4f}")

    if verbose:
        status = "converged" if state.converged else "not converged"
        print(f"[VI] {len(state.history)} steps, {status}: "
              f"μ={state.mu:.4f}, σ={state.sigma:.4f}, KL={state.kl:.4f}")
    return state


def trajectory_frame(state: VIState) -> pd.DataFrame:
    return pd.DataFrame(list(state.history), columns=['mu', 'sigma', 'elbo'])
