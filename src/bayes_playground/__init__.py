"""
Bayes Playground - Numerical Core of an Interactive Bayesian Computation Tutor

Conjugate analytical updating, Metropolis-Hastings, Gibbs sampling,
Hamiltonian Monte Carlo and Variational Inference, written as pure
state-update functions that a presentation layer drives tick by tick.
"""

__version__ = "0.1.0"

from . import conjugate, densities, gibbs, hmc, metropolis, variational

# Densities
from .densities import (
    beta_pdf,
    bivariate_normal_pdf,
    donut_gradient,
    donut_potential,
    gamma_pdf,
    log_gamma,
    normal_pdf,
    target_map_pdf,
)

# Conjugate updating
from .conjugate import (
    BetaParams,
    ConjugateFamily,
    ConjugateSession,
    GammaParams,
    NormalParams,
    posterior_params,
)

# Samplers and optimizer state
from .metropolis import MHParams, MHState
from .gibbs import GibbsState
from .hmc import HMCParams, HMCSession, LaunchMode, Particle
from .variational import VIParams, VIState

# Driving loop
from .scheduler import StepLoop

# Static plots (matplotlib/seaborn are optional at runtime)
from .visualization import PLOTTING_AVAILABLE

__all__ = [
    "conjugate",
    "densities",
    "gibbs",
    "hmc",
    "metropolis",
    "variational",
    "beta_pdf",
    "bivariate_normal_pdf",
    "donut_gradient",
    "donut_potential",
    "gamma_pdf",
    "log_gamma",
    "normal_pdf",
    "target_map_pdf",
    "BetaParams",
    "ConjugateFamily",
    "ConjugateSession",
    "GammaParams",
    "NormalParams",
    "posterior_params",
    "MHParams",
    "MHState",
    "GibbsState",
    "HMCParams",
    "HMCSession",
    "LaunchMode",
    "Particle",
    "VIParams",
    "VIState",
    "StepLoop",
    "PLOTTING_AVAILABLE",
]
