"""
Curvature Solver Test Suite.

Unit and integration tests for the curvature-tensor pipeline:
- Tensor storage and symmetric writes
- Reparametrization and tree-level tensor population
- Counterterms, mass-basis rotation and triple couplings
- Lifecycle preconditions, parameter files and the per-point driver

Run with:  pytest tests/            (all)
           pytest -m "not slow"     (skip full one-loop runs)
"""
