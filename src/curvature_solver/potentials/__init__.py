"""
Potentials module: tensor-contraction potential, finite-difference
derivatives and the one-loop Coleman-Weinberg potential.
"""

from curvature_solver.potentials.polynomial import TensorPotential
from curvature_solver.potentials.finite_difference import FiniteDifferenceDerivatives
from curvature_solver.potentials.coleman_weinberg import (
    ColemanWeinbergPotential,
    coleman_weinberg_derivatives,
)

__all__ = [
    "TensorPotential",
    "FiniteDifferenceDerivatives",
    "ColemanWeinbergPotential",
    "coleman_weinberg_derivatives",
]
