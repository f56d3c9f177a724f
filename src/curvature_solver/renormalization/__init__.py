"""
Renormalization module: counterterm solver and residual checks.
"""

from curvature_solver.renormalization.counterterms import (
    CountertermSolver,
    tadpole_residual,
    mass_residual,
)

__all__ = ["CountertermSolver", "tadpole_residual", "mass_residual"]
