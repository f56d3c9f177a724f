"""
Analysis module: mass spectra and mass-basis triple couplings.
"""

from curvature_solver.analysis.mass_spectrum import (
    MassBasisRotation,
    MassSpectrum,
    higgs_mass_matrix,
    gauge_mass_matrix,
    quark_mass_matrix,
    lepton_mass_matrix,
    fermion_masses_squared,
    diagonalize_mass_matrix,
    compute_mass_spectrum,
)
from curvature_solver.analysis.triple_couplings import (
    TripleCouplings,
    TripleCouplingRotator,
    frobenius_norm,
)

__all__ = [
    "MassBasisRotation",
    "MassSpectrum",
    "higgs_mass_matrix",
    "gauge_mass_matrix",
    "quark_mass_matrix",
    "lepton_mass_matrix",
    "fermion_masses_squared",
    "diagonalize_mass_matrix",
    "compute_mass_spectrum",
    "TripleCouplings",
    "TripleCouplingRotator",
    "frobenius_norm",
]
