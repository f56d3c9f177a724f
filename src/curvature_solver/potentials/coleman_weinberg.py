"""
Zero-temperature one-loop Coleman-Weinberg potential (MS-bar).

V_CW(φ) = 1/(64π²) Σ_x n_x m_x⁴(φ) [log(m_x²(φ)/μ²) - c_x]

with c_x = 5/6 for gauge bosons and 3/2 otherwise. Degrees of freedom:
1 per scalar, 3 per gauge boson, -2 N_c per eigenvalue of the quark
M M† and -2 per eigenvalue of the lepton M M† (each Dirac fermion
contributes two equal eigenvalues).
"""

import numpy as np
from numpy.typing import NDArray
from scipy import linalg
from typing import Optional, TYPE_CHECKING

from curvature_solver.analysis.mass_spectrum import (
    higgs_mass_matrix,
    gauge_mass_matrix,
    quark_mass_matrix,
    lepton_mass_matrix,
    fermion_masses_squared,
)
from curvature_solver.core.derivatives import OneLoopDerivatives
from curvature_solver.core.tensors import CurvatureTensorStore
from curvature_solver.potentials.finite_difference import FiniteDifferenceDerivatives

if TYPE_CHECKING:
    from curvature_solver.models.base import PotentialModel

# MS-bar constants
C_SCALAR = 1.5
C_FERMION = 1.5
C_GAUGE = 5.0 / 6.0

# Squared masses below this (GeV²) do not contribute
IR_CUTOFF = 1e-10

# Default finite-difference step (GeV) for one-loop derivatives
CW_DERIVATIVE_STEP = 1e-1


def cw_function(masses_squared: NDArray[np.floating], scale: float, c: float) -> float:
    """Σ m⁴ (log(|m²|/μ²) - c) over squared masses above the IR cutoff."""
    x = np.asarray(masses_squared, dtype=float)
    x = x[np.abs(x) > IR_CUTOFF]
    if x.size == 0:
        return 0.0
    return float(np.sum(x**2 * (np.log(np.abs(x) / scale**2) - c)))


class ColemanWeinbergPotential:
    """
    One-loop potential built from tree-level curvature tensors.

    Attributes:
        store: Tree-level tensors.
        scale: Renormalization scale μ (GeV).
        n_colour: Quark colour multiplicity.
    """

    def __init__(self, store: CurvatureTensorStore, scale: float, n_colour: int = 3):
        if scale <= 0:
            raise ValueError(f"Renormalization scale must be positive, got {scale}")
        self.store = store
        self.scale = float(scale)
        self.n_colour = n_colour

    def contributions(self, phi) -> dict:
        """One-loop contribution of each sector at phi (GeV⁴)."""
        phi = np.asarray(phi, dtype=float).reshape(-1)
        prefactor = 1.0 / (64.0 * np.pi**2)
        mu = self.scale

        scalar = linalg.eigvalsh(higgs_mass_matrix(self.store, phi))
        result = {"scalar": prefactor * cw_function(scalar, mu, C_SCALAR)}

        gauge = gauge_mass_matrix(self.store, phi)
        result["gauge"] = (
            prefactor * 3.0 * cw_function(linalg.eigvalsh(gauge), mu, C_GAUGE)
            if gauge.size else 0.0
        )

        quarks = fermion_masses_squared(quark_mass_matrix(self.store, phi))
        result["quark"] = -prefactor * 2.0 * self.n_colour * cw_function(quarks, mu, C_FERMION)

        leptons = fermion_masses_squared(lepton_mass_matrix(self.store, phi))
        result["lepton"] = -prefactor * 2.0 * cw_function(leptons, mu, C_FERMION)
        return result

    def __call__(self, phi) -> float:
        return sum(self.contributions(phi).values())


def coleman_weinberg_derivatives(
    model: "PotentialModel",
    step: float = CW_DERIVATIVE_STEP,
    third: bool = True,
) -> OneLoopDerivatives:
    """
    One-loop gradient, Hessian and third derivatives at a model's tree VEV.

    Args:
        model: A model with populated curvature tensors.
        step: Finite-difference step (GeV).
        third: Also compute the third-derivative tensor.
    """
    potential = ColemanWeinbergPotential(
        model.tree, model.scale, n_colour=model.constants.n_colour
    )
    engine = FiniteDifferenceDerivatives(potential, step=step)
    return engine.evaluate(model.vev_tree, third=third, scale=model.scale)
