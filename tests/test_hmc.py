"""
Unit tests for the HMC leapfrog integrator
"""

import math

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from bayes_playground.hmc import (
    HMCParams, HMCSession, LaunchMode, Particle, EnergySample,
    kinetic_energy, hamiltonian, energy_drift, is_unstable, launch_momentum,
    launch, leapfrog_step, run_trajectory, collect_sample, energy_frame,
    ENERGY_HISTORY_CAP, INSTABILITY_THRESHOLD, FLICK_SCALE, GENTLE_LAUNCH_SPEED
)
from bayes_playground.densities import donut_potential, DONUT_RADIUS


def harmonic_potential(x, y):
    return 0.5 * (x * x + y * y)


def harmonic_gradient(x, y):
    return x, y


STIFFNESS = 50.0


def stiff_potential(x, y):
    return 0.5 * STIFFNESS * (x * x + y * y)


def stiff_gradient(x, y):
    return STIFFNESS * x, STIFFNESS * y


class TestEnergy:
    """Test Hamiltonian bookkeeping."""

    def test_kinetic_energy(self):
        assert kinetic_energy((3.0, 4.0)) == pytest.approx(12.5)
        assert kinetic_energy((3.0, 4.0), mass=2.0) == pytest.approx(6.25)

    def test_hamiltonian(self):
        assert hamiltonian((8.0, 0.0), (1.0, 1.0)) == pytest.approx(4.5 + 1.0)

    def test_launch_records_initial_energy(self):
        particle = launch((5.0, 0.0), (0.0, 2.0))
        assert particle.initial_energy == pytest.approx(2.0)
        assert energy_drift(particle) == pytest.approx(0.0)

    def test_launch_records_mass(self):
        particle = launch((5.0, 0.0), (0.0, 2.0), mass=2.0)
        assert particle.mass == 2.0
        assert particle.initial_energy == pytest.approx(1.0)

    def test_zero_energy_drift_not_finite(self):
        """Test a particle at rest on the ring reports a non-finite drift."""
        particle = launch((DONUT_RADIUS, 0.0), (0.0, 0.0))
        assert particle.initial_energy == 0.0
        assert not np.isfinite(energy_drift(particle))


class TestLeapfrog:
    """Test the symplectic integrator."""

    def test_single_step_values(self):
        particle = launch((1.0, 0.0), (0.0, 0.0), potential=harmonic_potential)
        new = leapfrog_step(particle, 0.1, potential=harmonic_potential,
                            gradient=harmonic_gradient)

        assert new.q == pytest.approx((0.995, 0.0))
        assert new.p == pytest.approx((-0.09975, 0.0))
        assert new.n_steps == 1
        assert new.path == ((1.0, 0.0), new.q)
        assert new.energy_history[-1].total == pytest.approx(
            harmonic_potential(*new.q) + kinetic_energy(new.p))

    def test_step_is_pure(self):
        particle = launch((5.0, 0.0), (0.0, 2.0))
        leapfrog_step(particle, 0.05)
        assert particle.n_steps == 0
        assert particle.path == ((5.0, 0.0),)
        assert particle.energy_history == ()

    def test_energy_conserved_small_dt(self):
        """Test harmonic oscillator energy stays within 1% over 1000 steps."""
        particle = launch((1.0, 0.0), (0.0, 1.0), potential=harmonic_potential)
        max_drift = 0.0
        for _ in range(1000):
            particle = leapfrog_step(particle, 0.01, potential=harmonic_potential,
                                     gradient=harmonic_gradient)
            max_drift = max(max_drift, energy_drift(particle))

        assert max_drift < 1.0
        assert not is_unstable(particle)

    def test_large_dt_unstable_reproducibly(self):
        """Test a stiff potential with dt = 0.3 crosses the 40% threshold quickly."""
        def steps_until_unstable():
            particle = launch((1.0, 0.0), (0.0, 1.0), potential=stiff_potential)
            for n in range(1, 21):
                particle = leapfrog_step(particle, 0.3, potential=stiff_potential,
                                         gradient=stiff_gradient)
                if is_unstable(particle):
                    return n, particle.energy_history
            return None, particle.energy_history

        first_n, first_energies = steps_until_unstable()
        second_n, second_energies = steps_until_unstable()

        assert first_n is not None and first_n <= 10
        assert first_n == second_n
        assert first_energies == second_energies

    def test_time_reversible(self):
        """Test negating momentum retraces the trajectory."""
        particle = launch((6.0, 1.0), (0.5, 1.5))
        for _ in range(100):
            particle = leapfrog_step(particle, 0.05)

        back = launch(particle.q, (-particle.p[0], -particle.p[1]))
        for _ in range(100):
            back = leapfrog_step(back, 0.05)

        assert back.q == pytest.approx((6.0, 1.0), abs=1e-9)
        assert back.p == pytest.approx((-0.5, -1.5), abs=1e-9)

    def test_donut_orbit_conserves_energy(self):
        start = (DONUT_RADIUS, 0.0)
        particle = launch(start, launch_momentum(start, LaunchMode.GENTLE))
        particle = run_trajectory(particle)

        assert energy_drift(particle) < 1.0
        assert not is_unstable(particle)

    def test_heavy_particle_conserves_energy(self):
        """Test a stable orbit with mass 2 measures drift against its own H₀."""
        params = HMCParams(mass=2.0, dt=0.01)
        particle = run_trajectory(launch((5.0, 0.0), (0.0, 2.0)), params)

        assert particle.mass == 2.0
        assert particle.initial_energy == pytest.approx(1.0)
        assert energy_drift(particle) < 1.0
        assert not is_unstable(particle)

    def test_mass_fixed_after_first_step(self):
        particle = leapfrog_step(launch((5.0, 0.0), (0.0, 2.0)), 0.05)
        assert leapfrog_step(particle, 0.05, mass=1.0).n_steps == 2
        with pytest.raises(ValueError, match="mid-trajectory"):
            leapfrog_step(particle, 0.05, mass=2.0)

    def test_bare_particle_anchored_on_first_step(self):
        """Test a directly constructed particle gets its H₀ from the starting point."""
        particle = Particle(q=(5.0, 0.0), p=(0.0, 2.0))
        assert particle.initial_energy is None
        assert energy_drift(particle) == pytest.approx(0.0)

        stepped = leapfrog_step(particle, 0.01)
        assert stepped.initial_energy == pytest.approx(2.0)
        assert energy_drift(stepped) < 1.0


class TestTrajectory:
    """Test full-length trajectories and bookkeeping caps."""

    def test_steps_per_trajectory(self):
        assert HMCParams().steps_per_trajectory == 180
        assert HMCParams(trajectory_seconds=1.0, frame_rate=30).steps_per_trajectory == 30

    def test_run_trajectory_records(self):
        particle = launch((4.0, 3.0), (1.0, -1.0))
        particle = run_trajectory(particle)

        assert particle.n_steps == 180
        assert len(particle.path) == 181
        assert len(particle.energy_history) == ENERGY_HISTORY_CAP
        assert all(isinstance(e, EnergySample) for e in particle.energy_history)

    def test_relaunch_clears_path(self):
        particle = run_trajectory(launch((4.0, 3.0), (1.0, -1.0)))
        relaunched = launch(particle.q, (0.0, 0.0))

        assert relaunched.path == (particle.q,)
        assert relaunched.energy_history == ()
        assert relaunched.n_steps == 0

    def test_verbose_reports_drift(self, capsys):
        run_trajectory(launch((5.0, 0.0), (0.0, 2.0)), verbose=True)
        out = capsys.readouterr().out
        assert "[HMC]" in out
        assert "180 leapfrog steps" in out


class TestLaunch:
    """Test initial momentum selection."""

    def test_gentle_is_perpendicular(self):
        for position in [(5.0, 0.0), (3.0, 4.0), (-2.0, 1.5), (0.1, -7.0)]:
            px, py = launch_momentum(position, LaunchMode.GENTLE)
            assert px * position[0] + py * position[1] == pytest.approx(0.0, abs=1e-12)
            assert math.hypot(px, py) == pytest.approx(GENTLE_LAUNCH_SPEED)

    def test_gentle_counter_clockwise(self):
        assert launch_momentum((5.0, 0.0), LaunchMode.GENTLE) == pytest.approx((0.0, 2.0))

    def test_gentle_at_origin(self):
        assert launch_momentum((0.0, 0.0), LaunchMode.GENTLE) == (0.0, 0.0)

    def test_flick_scaled(self):
        assert launch_momentum((1.0, 1.0), LaunchMode.FLICK, flick=(100.0, -40.0)) == \
            pytest.approx((100.0 * FLICK_SCALE, -40.0 * FLICK_SCALE))

    def test_flick_requires_vector(self):
        with pytest.raises(ValueError, match="flick vector"):
            launch_momentum((1.0, 1.0), LaunchMode.FLICK)

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown launch mode"):
            launch_momentum((1.0, 1.0), "gentle")


class TestSampleCollection:
    """Test trajectory endpoints becoming samples."""

    def test_endpoint_always_accepted_by_default(self):
        particle = run_trajectory(launch((4.0, 3.0), (1.0, -1.0)))
        session = collect_sample(HMCSession(), particle)

        assert session.samples == (particle.q,)
        assert session.n_trajectories == 1
        assert session.acceptance_rate == 1.0

    def test_divergent_endpoint_kept_without_correction(self):
        params = HMCParams(dt=0.3, potential=stiff_potential, gradient=stiff_gradient,
                           trajectory_seconds=0.1, frame_rate=100)
        particle = run_trajectory(launch((1.0, 0.0), (0.0, 1.0), potential=stiff_potential),
                                  params)
        assert is_unstable(particle)

        session = collect_sample(HMCSession(), particle, params)
        assert session.samples == (particle.q,)

    def test_correction_rejects_divergent_endpoint(self, sequence_rng):
        params = HMCParams(dt=0.3, potential=stiff_potential, gradient=stiff_gradient,
                           trajectory_seconds=0.1, frame_rate=100,
                           metropolis_correction=True)
        start = (1.0, 0.0)
        particle = run_trajectory(launch(start, (0.0, 1.0), potential=stiff_potential),
                                  params)

        session = collect_sample(HMCSession(), particle, params, sequence_rng(0.5))

        assert session.samples == (start,)
        assert session.n_accepted == 0
        assert session.acceptance_rate == 0.0

    def test_correction_accepts_accurate_trajectory(self, sequence_rng):
        params = HMCParams(metropolis_correction=True)
        particle = run_trajectory(launch((5.0, 0.0), (0.0, 2.0)), params)

        session = collect_sample(HMCSession(), particle, params, sequence_rng(0.5))

        assert session.samples == (particle.q,)
        assert session.n_accepted == 1

    def test_energy_frame(self):
        particle = run_trajectory(launch((4.0, 3.0), (1.0, -1.0)))
        frame = energy_frame(particle)

        assert list(frame.columns) == ['potential', 'kinetic', 'total']
        assert len(frame) == ENERGY_HISTORY_CAP
        np.testing.assert_allclose(frame['total'], frame['potential'] + frame['kinetic'])

    def test_threshold_constant(self):
        assert INSTABILITY_THRESHOLD == 40.0
        assert isinstance(launch((1.0, 1.0), (0.0, 0.0)), Particle)
        assert donut_potential(1.0, 1.0) == pytest.approx(0.5 * (math.sqrt(2) - 5) ** 2)
