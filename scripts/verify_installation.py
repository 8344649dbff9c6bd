"""
Manual Verification Script for Bayes Playground
Run this to check every module imports and reproduces its reference results.

Usage: python scripts/verify_installation.py
"""

print("=" * 70)
print("Bayes Playground - Manual Verification")
print("=" * 70)
print()

# Test 1: Densities
print("[1/6] Testing Density Library...")
try:
    import math
    from bayes_playground.densities import log_gamma, beta_pdf

    assert abs(log_gamma(5.0) - math.log(24.0)) < 1e-10
    assert abs(beta_pdf(0.5, 2, 2) - 1.5) < 1e-10

    print(f"   ✓ Densities working!")
    print(f"   - log Γ(5) = {log_gamma(5.0):.6f}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 2: Conjugate updating
print("[2/6] Testing Conjugate Updater...")
try:
    from bayes_playground.conjugate import (
        BetaParams, NormalParams, beta_binomial_update, normal_normal_update
    )

    beta_post = beta_binomial_update(BetaParams(2, 2), 7, 3)
    normal_post = normal_normal_update(NormalParams(20, 5), [30.0])

    print(f"   ✓ Conjugate updater working!")
    print(f"   - Beta posterior: Beta({beta_post.alpha:g}, {beta_post.beta:g}), mean {beta_post.mean:.4f}")
    print(f"   - Normal posterior: mean {normal_post.mu:.2f}, std {normal_post.sigma:.4f}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 3: Metropolis-Hastings
print("[3/6] Testing Metropolis-Hastings...")
try:
    import numpy as np
    from bayes_playground import metropolis

    rng = np.random.default_rng(0)
    state = metropolis.reset()
    for _ in range(20):
        state = metropolis.run_frame(state, metropolis.MHParams(speed=3), rng)

    print(f"   ✓ Metropolis-Hastings working!")
    print(f"   - {state.total} steps, acceptance {state.acceptance_rate:.1%}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 4: Gibbs
print("[4/6] Testing Gibbs Sampler...")
try:
    from bayes_playground import gibbs

    state = gibbs.reset(0.8)
    for _ in range(100):
        state = gibbs.step(state)

    print(f"   ✓ Gibbs sampler working!")
    print(f"   - Position ({state.position[0]:.3f}, {state.position[1]:.3f}), "
          f"mixing time {gibbs.mixing_time(state.rho):.0f}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 5: HMC
print("[5/6] Testing HMC Integrator...")
try:
    from bayes_playground import hmc

    particle = hmc.launch((5.0, 0.0), hmc.launch_momentum((5.0, 0.0), hmc.LaunchMode.GENTLE))
    particle = hmc.run_trajectory(particle)

    print(f"   ✓ HMC integrator working!")
    print(f"   - Energy drift after {particle.n_steps} steps: {hmc.energy_drift(particle):.4f}%")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Test 6: Variational
print("[6/6] Testing Variational Optimizer...")
try:
    from bayes_playground import variational

    state = variational.optimize(variational.initial_state(), max_steps=100)

    print(f"   ✓ Variational optimizer working!")
    print(f"   - μ = {state.mu:.4f}, σ = {state.sigma:.4f}, KL = {state.kl:.4f}")
    print()
except Exception as e:
    print(f"   ✗ FAILED: {str(e)}\n")

# Optional plotting
from bayes_playground.visualization import PLOTTING_AVAILABLE
print(f"Plotting available: {'yes' if PLOTTING_AVAILABLE else 'no (install matplotlib, seaborn)'}")
print()

# Summary
print("=" * 70)
print("Verification Complete!")
print("=" * 70)
print()
print("Next Steps:")
print("1. Run full test suite: pytest tests/ -v")
print("2. Run the demo: python examples/demo_all_modules.py")
print("=" * 70)
