"""
Bayes Playground — Conjugate Analytical Updating
=================================================
Closed-form posterior updates for three exponential-family pairs.

    Beta-Binomial:  θ ~ Beta(α, β),   k successes in n trials
                    θ|D ~ Beta(α + k, β + n − k)

    Normal-Normal:  μ ~ N(μ₀, σ₀²),   x|μ ~ N(μ, σ²) with σ = 5 known
                    1/σₙ² = 1/σ₀² + n/σ²
                    μₙ    = σₙ² (μ₀/σ₀² + n x̄/σ²)

    Gamma-Poisson:  λ ~ Gamma(α, β),  k|λ ~ Poisson(λ) per period
                    λ|D ~ Gamma(α + Σk, β + T)

Updates only depend on sufficient statistics, so sequential updating is
associative: updating with D₁ then D₂ equals updating once with D₁ ∪ D₂.

Usage:
    session = ConjugateSession.start(ConjugateFamily.BETA_BINOMIAL)
    for _ in range(10):
        session = observe(session, flip_coin())
    print(session.posterior, session.posterior.mean)

License: MIT
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .densities import ArrayLike, beta_pdf, gamma_pdf, normal_pdf, resolve_rng


# Known observation noise for the Normal-Normal sensor model
LIKELIHOOD_SIGMA = 5.0


class ConjugateFamily(Enum):
    """Supported prior/likelihood pairs."""
    BETA_BINOMIAL = "beta_binomial"
    NORMAL_NORMAL = "normal_normal"
    GAMMA_POISSON = "gamma_poisson"


# ═══════════════════════════════════════════════════════════════
# Parameter objects
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BetaParams:
    """Beta(α, β) over a probability θ ∈ [0, 1]."""
    alpha: float
    beta: float

    @property
    def mean(self) -> float:
        return self.alpha / (self.alpha + self.beta)

    def pdf(self, x: ArrayLike) -> ArrayLike:
        return beta_pdf(x, self.alpha, self.beta)


@dataclass(frozen=True)
class NormalParams:
    """Normal(μ, σ) over an unknown location."""
    mu: float
    sigma: float

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def precision(self) -> float:
        return 1.0 / (self.sigma ** 2)

    def pdf(self, x: ArrayLike) -> ArrayLike:
        return normal_pdf(x, self.mu, self.sigma)


@dataclass(frozen=True)
class GammaParams:
    """Gamma(α, β) in rate parameterization over a positive rate λ."""
    alpha: float
    beta: float

    @property
    def mean(self) -> float:
        return self.alpha / self.beta

    def pdf(self, x: ArrayLike) -> ArrayLike:
        return gamma_pdf(x, self.alpha, self.beta)


DistributionParams = Union[BetaParams, NormalParams, GammaParams]


# ═══════════════════════════════════════════════════════════════
# Closed-form updates
# ═══════════════════════════════════════════════════════════════

def beta_binomial_update(prior: BetaParams, heads: int, tails: int) -> BetaParams:
    """Posterior Beta(α + k, β + (n − k)) after k heads and n − k tails."""
    return BetaParams(prior.alpha + heads, prior.beta + tails)


def normal_normal_update(prior: NormalParams,
                         readings: Sequence[float],
                         likelihood_sigma: float = LIKELIHOOD_SIGMA) -> NormalParams:
    """Precision-weighted posterior over the mean; unchanged prior for n = 0."""
    n = len(readings)
    if n == 0:
        return prior

    data_mean = float(np.mean(readings))
    prior_precision = prior.precision
    data_precision = n / likelihood_sigma ** 2
    posterior_variance = 1.0 / (prior_precision + data_precision)
    posterior_mean = posterior_variance * (prior_precision * prior.mu
                                           + data_precision * data_mean)
    return NormalParams(posterior_mean, math.sqrt(posterior_variance))


def gamma_poisson_update(prior: GammaParams, counts: Sequence[int]) -> GammaParams:
    """Posterior Gamma(α + Σk, β + T) with T = number of observation periods."""
    return GammaParams(prior.alpha + sum(counts), prior.beta + len(counts))


def family_of(params: DistributionParams) -> ConjugateFamily:
    """Conjugate family a prior parameter object belongs to."""
    if isinstance(params, BetaParams):
        return ConjugateFamily.BETA_BINOMIAL
    if isinstance(params, NormalParams):
        return ConjugateFamily.NORMAL_NORMAL
    if isinstance(params, GammaParams):
        return ConjugateFamily.GAMMA_POISSON
    raise ValueError(f"Unknown prior parameters: {params!r}")


def posterior_params(prior: DistributionParams,
                     observations: Sequence[float]) -> DistributionParams:
    """Posterior parameters for ``prior`` given raw observations.

    Observations are interpreted per family:
      - Beta-Binomial: 1 for a success (heads), 0 for a failure (tails)
      - Normal-Normal: sensor readings
      - Gamma-Poisson: event counts, one per observation period
    """
    family = family_of(prior)
    if family is ConjugateFamily.BETA_BINOMIAL:
        heads = int(sum(1 for obs in observations if obs))
        return beta_binomial_update(prior, heads, len(observations) - heads)
    if family is ConjugateFamily.NORMAL_NORMAL:
        return normal_normal_update(prior, observations)
    return gamma_poisson_update(prior, observations)


def pdf(x: ArrayLike, params: DistributionParams) -> ArrayLike:
    """Density of ``params`` at ``x``."""
    return params.pdf(x)


# ═══════════════════════════════════════════════════════════════
# Evidence simulators
# ═══════════════════════════════════════════════════════════════

def flip_coin(rng=None) -> int:
    """Fair coin: 1 for heads, 0 for tails."""
    return 1 if resolve_rng(rng).random() > 0.5 else 0


def read_sensor(rng=None, true_value: float = 25.0, spread: float = 5.0) -> float:
    """Noisy thermometer reading, uniform on true_value ± spread/2."""
    return float(true_value + (resolve_rng(rng).random() - 0.5) * spread)


def count_events(rng=None, low: int = 2, high: int = 5) -> int:
    """Events in one observation period (bus arrivals), uniform on low..high."""
    return low + int(resolve_rng(rng).random() * (high - low + 1))


# ═══════════════════════════════════════════════════════════════
# Interactive session
# ═══════════════════════════════════════════════════════════════

DEFAULT_PRIORS: Dict[ConjugateFamily, DistributionParams] = {
    ConjugateFamily.BETA_BINOMIAL: BetaParams(2.0, 2.0),
    ConjugateFamily.NORMAL_NORMAL: NormalParams(20.0, 5.0),
    ConjugateFamily.GAMMA_POISSON: GammaParams(2.0, 1.0),
}

# Display range of the parameter axis for each family
CURVE_RANGES: Dict[ConjugateFamily, Tuple[float, float]] = {
    ConjugateFamily.BETA_BINOMIAL: (0.0, 1.0),
    ConjugateFamily.NORMAL_NORMAL: (0.0, 40.0),
    ConjugateFamily.GAMMA_POISSON: (0.0, 10.0),
}


@dataclass(frozen=True)
class ConjugateSession:
    """Prior plus the evidence accumulated since the last family switch."""
    family: ConjugateFamily
    prior: DistributionParams
    observations: Tuple[float, ...] = field(default_factory=tuple)

    @classmethod
    def start(cls, family: ConjugateFamily,
              prior: Optional[DistributionParams] = None) -> 'ConjugateSession':
        prior = prior if prior is not None else DEFAULT_PRIORS[family]
        if family_of(prior) is not family:
            raise ValueError(f"Prior {prior!r} does not belong to {family.value}")
        return cls(family=family, prior=prior)

    @property
    def posterior(self) -> DistributionParams:
        return posterior_params(self.prior, self.observations)

    @property
    def n_observations(self) -> int:
        return len(self.observations)


def observe(session: ConjugateSession, value: float) -> ConjugateSession:
    """Append one observation."""
    return replace(session, observations=session.observations + (value,))


def set_prior(session: ConjugateSession, prior: DistributionParams) -> ConjugateSession:
    """Change the prior of the current family, keeping the evidence."""
    if family_of(prior) is not session.family:
        raise ValueError(f"Prior {prior!r} does not belong to {session.family.value}")
    return replace(session, prior=prior)


def switch_family(session: ConjugateSession, family: ConjugateFamily,
                  prior: Optional[DistributionParams] = None) -> ConjugateSession:
    """Move to another family; evidence is cleared."""
    return ConjugateSession.start(family, prior)


def simulate_observation(family: ConjugateFamily, rng=None) -> float:
    """Draw one observation of the kind ``family`` consumes."""
    if family is ConjugateFamily.BETA_BINOMIAL:
        return flip_coin(rng)
    if family is ConjugateFamily.NORMAL_NORMAL:
        return read_sensor(rng)
    if family is ConjugateFamily.GAMMA_POISSON:
        return count_events(rng)
    raise ValueError(f"Unknown family: {family}")


def density_curves(session: ConjugateSession,
                   n_points: int = 101) -> Dict[str, np.ndarray]:
    """Prior and posterior density curves over the family's display range."""
    low, high = CURVE_RANGES[session.family]
    x = np.linspace(low, high, n_points)
    return {
        'x': x,
        'prior': np.asarray(session.prior.pdf(x)),
        'posterior': np.asarray(session.posterior.pdf(x)),
    }
