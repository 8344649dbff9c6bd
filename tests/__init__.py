"""
Bayes Playground — Test Suite
=============================
Unit and statistical regression tests for the numerical core.

Test modules:
- test_densities.py: Gamma function, densities, potentials
- test_conjugate.py: Closed-form updates and evidence sessions
- test_metropolis.py: MH proposal/decision cycle and diagnostics
- test_gibbs.py: Conditional cycle and correlation diagnostics
- test_hmc.py: Leapfrog integration, energy bookkeeping, launches
- test_variational.py: ELBO, KL and gradient ascent
- test_scheduler.py: Tick loop control surface
- test_visualization.py: Static snapshots (skipped without matplotlib)
"""

__version__ = '0.1.0'
