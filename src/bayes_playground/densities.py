"""
Bayes Playground — Density & Utility Library
=============================================
Closed-form probability densities and potentials shared by every sampler.

All functions are pure and deterministic. Densities accept scalars or numpy
arrays for the evaluation point so the same code serves single lookups
inside a sampler step and whole curves/heatmaps for display.

Contents:
  - log_gamma:            Lanczos approximation with reflection for z < 0.5
  - beta_pdf / gamma_pdf: evaluated in log-space (no overflow for large α, β)
  - normal_pdf, bivariate_normal_pdf
  - target_map_pdf:       fixed bimodal "hills" surface (Metropolis demo)
  - donut_potential / donut_gradient: ring potential U = ½(‖q‖ − R)² (HMC demo)

Degenerate inputs (σ = 0, ρ = ±1, poles of Γ) are not trapped: they
propagate as NaN/inf.

License: MIT
"""

import math
from typing import Tuple, Union

import numpy as np
from scipy.special import xlogy, xlog1py

ArrayLike = Union[float, np.ndarray]


# ═══════════════════════════════════════════════════════════════
# Gamma function
# ═══════════════════════════════════════════════════════════════

# Lanczos coefficients, g = 7, n = 9
LANCZOS_G = 7
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

LOG_SQRT_2PI = 0.5 * math.log(2.0 * math.pi)


def log_gamma(z: float) -> float:
    """Natural log of Γ(z) via the Lanczos approximation.

    For z < 0.5 the reflection formula
        log Γ(z) = log π − log sin(πz) − log Γ(1 − z)
    is applied. Non-positive integers are poles; the result there is
    whatever the arithmetic produces (inf/NaN).
    """
    if z < 0.5:
        s = math.sin(math.pi * z)
        if s <= 0.0:
            return float('nan') if s < 0.0 else float('inf')
        return math.log(math.pi) - math.log(s) - log_gamma(1.0 - z)

    z -= 1.0
    x = LANCZOS_COEFFICIENTS[0]
    for i in range(1, len(LANCZOS_COEFFICIENTS)):
        x += LANCZOS_COEFFICIENTS[i] / (z + i)
    t = z + LANCZOS_G + 0.5
    return LOG_SQRT_2PI + (z + 0.5) * math.log(t) - t + math.log(x)


def log_beta_function(alpha: float, beta: float) -> float:
    """log B(α, β) = log Γ(α) + log Γ(β) − log Γ(α + β)."""
    return log_gamma(alpha) + log_gamma(beta) - log_gamma(alpha + beta)


def _as_output(values: np.ndarray) -> ArrayLike:
    """Return a Python float for 0-d results, the array otherwise."""
    if values.ndim == 0:
        return float(values)
    return values


# ═══════════════════════════════════════════════════════════════
# Univariate densities
# ═══════════════════════════════════════════════════════════════

def beta_pdf(x: ArrayLike, alpha: float, beta: float) -> ArrayLike:
    """Beta(α, β) density; 0 outside [0, 1].

    Computed as exp((α−1) ln x + (β−1) ln(1−x) − log B(α, β)).
    """
    x = np.asarray(x, dtype=float)
    log_norm = log_beta_function(alpha, beta)
    inside = (x >= 0.0) & (x <= 1.0)
    x_safe = np.where(inside, x, 0.5)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        log_pdf = xlogy(alpha - 1.0, x_safe) + xlog1py(beta - 1.0, -x_safe) - log_norm
        pdf = np.exp(log_pdf)

    return _as_output(np.where(inside, pdf, 0.0))


def normal_pdf(x: ArrayLike, mu: float, sigma: float) -> ArrayLike:
    """Normal(μ, σ) density."""
    x = np.asarray(x, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        z = (x - mu) / sigma
        pdf = np.exp(-0.5 * z * z) / (sigma * math.sqrt(2.0 * math.pi))
    return _as_output(pdf)


def gamma_pdf(x: ArrayLike, alpha: float, beta: float) -> ArrayLike:
    """Gamma density in rate parameterization (mean = α/β); 0 for x ≤ 0."""
    x = np.asarray(x, dtype=float)
    positive = x > 0.0
    x_safe = np.where(positive, x, 1.0)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        log_numer = alpha * np.log(beta) + xlogy(alpha - 1.0, x_safe) - beta * x_safe
        pdf = np.exp(log_numer - log_gamma(alpha))

    return _as_output(np.where(positive, pdf, 0.0))


def gaussian_entropy(sigma: float) -> float:
    """Differential entropy of N(μ, σ²): ½(1 + log 2π + 2 log σ)."""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(0.5 * (1.0 + math.log(2.0 * math.pi) + 2.0 * np.log(sigma)))


# ═══════════════════════════════════════════════════════════════
# Bivariate densities
# ═══════════════════════════════════════════════════════════════

def bivariate_normal_pdf(x: ArrayLike, y: ArrayLike,
                         mu_x: float, mu_y: float,
                         sigma_x: float, sigma_y: float,
                         rho: float) -> ArrayLike:
    """Bivariate Normal density with correlation ρ (requires |ρ| < 1)."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    dx = x - mu_x
    dy = y - mu_y

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        one_minus_rho2 = 1.0 - rho * rho
        z = (dx * dx / sigma_x ** 2
             - 2.0 * rho * dx * dy / (sigma_x * sigma_y)
             + dy * dy / sigma_y ** 2)
        norm = 1.0 / (2.0 * math.pi * sigma_x * sigma_y * np.sqrt(one_minus_rho2))
        pdf = norm * np.exp(-z / (2.0 * one_minus_rho2))

    return _as_output(np.asarray(pdf))


# Two peaks on the [0, 10]² map: a broad one at (3, 3) holding two thirds of
# the mass, and a narrow, slightly higher one at (7, 7)
TARGET_PEAKS = (
    # (weight, mu_x, mu_y, sigma)
    (1.0, 3.0, 3.0, 1.5),
    (0.5, 7.0, 7.0, 1.0),
)


def target_map_pdf(x: ArrayLike, y: ArrayLike) -> ArrayLike:
    """Unnormalized bimodal target used by the Metropolis-Hastings demo."""
    total = 0.0
    for weight, mu_x, mu_y, sigma in TARGET_PEAKS:
        total = total + weight * np.asarray(
            bivariate_normal_pdf(x, y, mu_x, mu_y, sigma, sigma, 0.0))
    return _as_output(np.asarray(total, dtype=float))


# ═══════════════════════════════════════════════════════════════
# HMC potential
# ═══════════════════════════════════════════════════════════════

DONUT_RADIUS = 5.0


def donut_potential(x: float, y: float) -> float:
    """U(x, y) = ½(r − R)², the negative log-density of a ring of radius R."""
    d = math.hypot(x, y) - DONUT_RADIUS
    return 0.5 * d * d


def donut_gradient(x: float, y: float) -> Tuple[float, float]:
    """∇U = (r − R) · (x/r, y/r); defined as (0, 0) at the origin."""
    r = math.hypot(x, y)
    if r == 0.0:
        return 0.0, 0.0
    dU_dr = r - DONUT_RADIUS
    return dU_dr * x / r, dU_dr * y / r


# ═══════════════════════════════════════════════════════════════
# Randomness
# ═══════════════════════════════════════════════════════════════

def resolve_rng(rng=None):
    """Random source for a step: the given Generator, else the global numpy state.

    Only ``.random()`` is drawn from the result, which both
    ``np.random.Generator`` and the legacy ``np.random`` module provide.
    """
    return rng if rng is not None else np.random
