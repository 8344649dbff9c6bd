"""
Bayes Playground — Static Snapshots
===================================
Matplotlib renderings of each module's state, for notebooks, reports and
quick inspection outside the interactive front end.

Every function returns the ``Figure`` (or ``None`` when plotting libraries
are unavailable) and optionally saves it to ``save_path``.

License: MIT
"""

import warnings
from typing import Optional

import numpy as np

try:
    import matplotlib.pyplot as plt
    import seaborn as sns
    PLOTTING_AVAILABLE = True
    sns.set_style('whitegrid')
except ImportError:
    PLOTTING_AVAILABLE = False
    warnings.warn("[WARNING] Matplotlib/Seaborn not installed. Install with: pip install matplotlib seaborn")

from .conjugate import ConjugateSession, density_curves
from .densities import DONUT_RADIUS, bivariate_normal_pdf, target_map_pdf
from .gibbs import GibbsState
from .hmc import Particle
from .metropolis import DOMAIN, MHState
from .variational import VIState, target_density, variational_density


def _unavailable() -> bool:
    if not PLOTTING_AVAILABLE:
        print("[Warning] Matplotlib/Seaborn not available for plotting")
        return True
    return False


def _finish(fig, save_path: Optional[str]):
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig


def plot_conjugate(session: ConjugateSession, save_path: Optional[str] = None):
    """Prior and posterior densities of a conjugate session."""
    if _unavailable():
        return None

    curves = density_curves(session)
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.fill_between(curves['x'], curves['prior'], alpha=0.3, label='prior')
    ax.plot(curves['x'], curves['posterior'], lw=2, label='posterior')
    ax.set_title(f"{session.family.value}: n = {session.n_observations}")
    ax.set_xlabel('parameter')
    ax.set_ylabel('density')
    ax.legend()
    return _finish(fig, save_path)


def plot_metropolis(state: MHState, save_path: Optional[str] = None,
                    resolution: int = 200):
    """Chain trail over the target heatmap."""
    if _unavailable():
        return None

    low, high = DOMAIN
    xs = np.linspace(low, high, resolution)
    X, Y = np.meshgrid(xs, xs)
    Z = target_map_pdf(X, Y)

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.imshow(Z, origin='lower', extent=(low, high, low, high), cmap='Greens', alpha=0.6)
    if state.history:
        trail = np.asarray(state.history)
        ax.plot(trail[:, 0], trail[:, 1], color='saddlebrown', lw=0.8, alpha=0.6)
    ax.plot(*state.position, 'ko', ms=6)
    ax.set_title(f"Metropolis-Hastings: acceptance {state.acceptance_rate:.1%} "
                 f"({state.accepted}/{state.total})")
    ax.set_xlim(low, high)
    ax.set_ylim(low, high)
    return _finish(fig, save_path)


def plot_gibbs(state: GibbsState, save_path: Optional[str] = None,
               extent: float = 4.0, resolution: int = 200):
    """Staircase trail over the correlated Normal contours."""
    if _unavailable():
        return None

    xs = np.linspace(-extent, extent, resolution)
    X, Y = np.meshgrid(xs, xs)
    Z = bivariate_normal_pdf(X, Y, 0.0, 0.0, 1.0, 1.0, state.rho)

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.contourf(X, Y, Z, levels=12, cmap='copper_r', alpha=0.5)
    points = list(state.history) + [state.position]
    trail = np.asarray(points)
    ax.plot(trail[:, 0], trail[:, 1], color='black', lw=0.8)
    ax.plot(*state.position, 'ko', ms=6)
    ax.set_title(f"Gibbs: ρ = {state.rho:.2f}, next: sample {state.turn}")
    ax.set_aspect('equal')
    return _finish(fig, save_path)


def plot_hmc(particle: Particle, save_path: Optional[str] = None):
    """Trajectory on the donut plus the energy history."""
    if _unavailable():
        return None

    fig, (ax_path, ax_energy) = plt.subplots(1, 2, figsize=(12, 5))

    theta = np.linspace(0.0, 2.0 * np.pi, 200)
    ax_path.plot(DONUT_RADIUS * np.cos(theta), DONUT_RADIUS * np.sin(theta),
                 ls='--', color='gray')
    path = np.asarray(particle.path)
    ax_path.plot(path[:, 0], path[:, 1], color='tab:blue', lw=1.5)
    ax_path.plot(*particle.q, 'ko', ms=6)
    ax_path.set_aspect('equal')
    ax_path.set_title('Trajectory')

    if particle.energy_history:
        energies = np.asarray([(e.potential, e.kinetic, e.total)
                               for e in particle.energy_history])
        for column, label in enumerate(('potential U', 'kinetic K', 'total H')):
            ax_energy.plot(energies[:, column], label=label)
        ax_energy.legend()
    ax_energy.set_title('Energy (last steps)')
    ax_energy.set_xlabel('step')
    return _finish(fig, save_path)


def plot_variational(state: VIState, save_path: Optional[str] = None):
    """Fitted q against the target, plus the ELBO ascent path."""
    if _unavailable():
        return None

    fig, (ax_fit, ax_elbo) = plt.subplots(1, 2, figsize=(12, 4))

    xs = np.linspace(-1.0, 9.0, 400)
    ax_fit.fill_between(xs, target_density(xs), alpha=0.3, color='saddlebrown',
                        label='p(θ|D)')
    ax_fit.plot(xs, variational_density(xs, state.mu, state.sigma), ls='--',
                color='tab:blue', label='q(θ)')
    ax_fit.set_title(f"μ = {state.mu:.3f}, σ = {state.sigma:.3f}, KL = {state.kl:.3f}")
    ax_fit.legend()

    if state.history:
        ax_elbo.plot([point.elbo for point in state.history], color='tab:green')
    ax_elbo.set_title('ELBO')
    ax_elbo.set_xlabel('step')
    return _finish(fig, save_path)
