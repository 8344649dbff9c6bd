"""
Bayes Playground — Hamiltonian Monte Carlo Integrator
=====================================================
Particle simulation on a scalar potential U(q) using leapfrog
(Störmer–Verlet) integration, with energy bookkeeping.

Hamiltonian:
    H(q, p) = U(q) + K(p),      K(p) = ‖p‖² / (2m)

Leapfrog step (dt, mass m):
    p½ = p  − (dt/2) ∇U(q)
    q' = q  + dt · p½ / m
    p' = p½ − (dt/2) ∇U(q')

The scheme is symplectic and time-reversible, so for small dt the total
energy oscillates around its initial value instead of drifting. For large
dt the integration diverges; this is surfaced through ``energy_drift`` and
``is_unstable`` and never raised.

Default potential is the "donut" ring U = ½(‖q‖ − 5)².

Sample collection:
    A trajectory runs for a fixed simulated duration (3 s at 60 frames/s)
    and its endpoint becomes a sample. The final Metropolis accept/reject
    of standard HMC is skipped unless ``HMCParams.metropolis_correction``
    is set.

License: MIT
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd

from .densities import donut_gradient, donut_potential, resolve_rng

Vector = Tuple[float, float]
Potential = Callable[[float, float], float]
Gradient = Callable[[float, float], Vector]


# ═══════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════

ENERGY_HISTORY_CAP = 100
INSTABILITY_THRESHOLD = 40.0    # Relative energy drift (%) flagged unstable

FLICK_SCALE = 0.05              # Drag vector (pixels) → momentum
GENTLE_LAUNCH_SPEED = 2.0       # Tangential launch speed


class LaunchMode(Enum):
    """How the initial momentum of a trajectory is chosen."""
    FLICK = "flick"
    GENTLE = "gentle"


@dataclass
class HMCParams:
    """Integrator settings."""
    dt: float = 0.05
    mass: float = 1.0
    trajectory_seconds: float = 3.0
    frame_rate: int = 60
    metropolis_correction: bool = False
    potential: Potential = donut_potential
    gradient: Gradient = donut_gradient

    @property
    def steps_per_trajectory(self) -> int:
        return int(round(self.trajectory_seconds * self.frame_rate))


@dataclass(frozen=True)
class EnergySample:
    potential: float
    kinetic: float
    total: float


@dataclass(frozen=True)
class Particle:
    """Phase-space point plus the record of the current trajectory.

    ``mass`` and the reference energy ``initial_energy`` (H₀) belong to the
    trajectory. H₀ is ``None`` until known; the first leapfrog step fixes
    both from the starting point.
    """
    q: Vector
    p: Vector
    path: Tuple[Vector, ...] = field(default_factory=tuple)
    energy_history: Tuple[EnergySample, ...] = field(default_factory=tuple)
    initial_energy: Optional[float] = None
    n_steps: int = 0
    mass: float = 1.0


# ═══════════════════════════════════════════════════════════════
# Energy
# ═══════════════════════════════════════════════════════════════

def kinetic_energy(p: Vector, mass: float = 1.0) -> float:
    return (p[0] * p[0] + p[1] * p[1]) / (2.0 * mass)


def hamiltonian(q: Vector, p: Vector, mass: float = 1.0,
                potential: Potential = donut_potential) -> float:
    return potential(*q) + kinetic_energy(p, mass)


def current_energy(particle: Particle,
                   potential: Potential = donut_potential) -> float:
    if particle.energy_history:
        return particle.energy_history[-1].total
    return hamiltonian(particle.q, particle.p, particle.mass, potential)


def reference_energy(particle: Particle,
                     potential: Potential = donut_potential) -> float:
    """H₀ of the trajectory; the current energy if it was never recorded."""
    if particle.initial_energy is None:
        return hamiltonian(particle.q, particle.p, particle.mass, potential)
    return particle.initial_energy


def energy_drift(particle: Particle,
                 potential: Potential = donut_potential) -> float:
    """Relative drift |H − H₀| / |H₀| in percent."""
    h0 = reference_energy(particle, potential)
    with np.errstate(divide='ignore', invalid='ignore'):
        drift = np.abs(current_energy(particle, potential) - h0) / np.abs(h0) * 100.0
    return float(drift)


def is_unstable(particle: Particle, threshold: float = INSTABILITY_THRESHOLD,
                potential: Potential = donut_potential) -> bool:
    return energy_drift(particle, potential) > threshold


# ═══════════════════════════════════════════════════════════════
# Launch
# ═══════════════════════════════════════════════════════════════

def launch_momentum(position: Vector, mode: LaunchMode,
                    flick: Optional[Vector] = None,
                    speed: float = GENTLE_LAUNCH_SPEED,
                    flick_scale: float = FLICK_SCALE) -> Vector:
    """Initial momentum for a new trajectory.

    FLICK:  the drag vector scaled by ``flick_scale``.
    GENTLE: speed ``speed`` perpendicular to the radius vector (counter-
            clockwise), roughly a circular orbit. Zero at the origin.
    """
    if mode is LaunchMode.FLICK:
        if flick is None:
            raise ValueError("FLICK launch requires a flick vector")
        return flick[0] * flick_scale, flick[1] * flick_scale

    if mode is LaunchMode.GENTLE:
        x, y = position
        r = math.hypot(x, y)
        if r == 0.0:
            return 0.0, 0.0
        return -y / r * speed, x / r * speed

    raise ValueError(f"Unknown launch mode: {mode}")


def launch(position: Vector, momentum: Vector, mass: float = 1.0,
           potential: Potential = donut_potential) -> Particle:
    """Start a trajectory; the path restarts at ``position``."""
    q = (float(position[0]), float(position[1]))
    p = (float(momentum[0]), float(momentum[1]))
    return Particle(q=q, p=p, path=(q,), mass=mass,
                    initial_energy=hamiltonian(q, p, mass, potential))


# ═══════════════════════════════════════════════════════════════
# Integration
# ═══════════════════════════════════════════════════════════════

def _anchor(particle: Particle, mass: Optional[float],
            potential: Potential) -> Particle:
    """Fix mass and H₀ before the first step; mass is frozen afterwards."""
    mass = particle.mass if mass is None else mass
    if particle.n_steps == 0:
        return replace(particle, mass=mass,
                       initial_energy=hamiltonian(particle.q, particle.p, mass, potential))
    if mass != particle.mass:
        raise ValueError(f"Cannot change mass mid-trajectory: {particle.mass} -> {mass}")
    if particle.initial_energy is None:
        return replace(particle, initial_energy=reference_energy(particle, potential))
    return particle


def leapfrog_step(particle: Particle, dt: float, mass: Optional[float] = None,
                  potential: Potential = donut_potential,
                  gradient: Gradient = donut_gradient) -> Particle:
    """Advance ``particle`` by one leapfrog step of size ``dt``.

    ``mass`` defaults to the particle's own.
    """
    particle = _anchor(particle, mass, potential)
    mass = particle.mass
    qx, qy = particle.q
    px, py = particle.p

    gx, gy = gradient(qx, qy)
    px_half = px - 0.5 * dt * gx
    py_half = py - 0.5 * dt * gy

    qx_new = qx + dt * px_half / mass
    qy_new = qy + dt * py_half / mass

    gx, gy = gradient(qx_new, qy_new)
    px_new = px_half - 0.5 * dt * gx
    py_new = py_half - 0.5 * dt * gy

    q_new = (qx_new, qy_new)
    p_new = (px_new, py_new)
    u = potential(qx_new, qy_new)
    k = kinetic_energy(p_new, mass)

    energies = particle.energy_history + (EnergySample(u, k, u + k),)
    if len(energies) > ENERGY_HISTORY_CAP:
        energies = energies[-ENERGY_HISTORY_CAP:]

    return replace(particle,
                   q=q_new,
                   p=p_new,
                   path=particle.path + (q_new,),
                   energy_history=energies,
                   n_steps=particle.n_steps + 1)


def run_trajectory(particle: Particle, params: Optional[HMCParams] = None,
                   verbose: bool = False) -> Particle:
    """Integrate for the full trajectory duration."""
    params = params or HMCParams()
    for _ in range(params.steps_per_trajectory):
        particle = leapfrog_step(particle, params.dt, params.mass,
                                 params.potential, params.gradient)

    if verbose:
        drift = energy_drift(particle, params.potential)
        status = "⚠ UNSTABLE" if drift > INSTABILITY_THRESHOLD else "✓"
        print(f"[HMC] {particle.n_steps} leapfrog steps (dt={params.dt}), "
              f"energy drift {drift:.2f}% {status}")
    return particle


# ═══════════════════════════════════════════════════════════════
# Sample collection
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HMCSession:
    """Collected samples and the accept/reject record of each trajectory."""
    samples: Tuple[Vector, ...] = field(default_factory=tuple)
    n_trajectories: int = 0
    n_accepted: int = 0

    @property
    def acceptance_rate(self) -> float:
        return self.n_accepted / self.n_trajectories if self.n_trajectories else 0.0


def collect_sample(session: HMCSession, particle: Particle,
                   params: Optional[HMCParams] = None, rng=None) -> HMCSession:
    """Record the outcome of a finished trajectory.

    Without Metropolis correction the endpoint is always kept. With it, the
    endpoint is accepted with probability min(1, exp(H₀ − H₁)) and the
    starting point is recorded on rejection.
    """
    params = params or HMCParams()
    accepted = True
    if params.metropolis_correction:
        h1 = hamiltonian(particle.q, particle.p, particle.mass, params.potential)
        log_ratio = reference_energy(particle, params.potential) - h1
        accepted = bool(np.log(resolve_rng(rng).random()) < min(0.0, log_ratio))

    sample = particle.q if accepted else particle.path[0]
    return replace(session,
                   samples=session.samples + (sample,),
                   n_trajectories=session.n_trajectories + 1,
                   n_accepted=session.n_accepted + int(accepted))


def energy_frame(particle: Particle) -> pd.DataFrame:
    """Energy history as columns potential / kinetic / total."""
    return pd.DataFrame(
        [(e.potential, e.kinetic, e.total) for e in particle.energy_history],
        columns=['potential', 'kinetic', 'total'],
    )
