"""
Field-dependent mass matrices and their diagonalization.

Scalar:   M_ij  = L2_ij + L3_ijk φ_k + 1/2 L4_ijkl φ_k φ_l
Gauge:    M_ab  = 1/2 G_abij φ_i φ_j
Fermion:  M_IJ  = Y_IJk φ_k,  squared masses from eig(M M†)

All matrices are mass-squared matrices except the fermion matrix,
which is linear in the masses; its squared masses come in pairs (one
per Weyl component of each Dirac fermion).
"""

import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass, field
from scipy import linalg
from typing import Optional, Sequence

from curvature_solver.core.tensors import CurvatureTensor, CurvatureTensorStore


class MassBasisRotation:
    """
    Orthogonal rotation from the field basis to the mass basis.

    Row i of ``matrix`` is the field-basis eigenvector of mass eigenstate i,
    so that ``matrix @ M @ matrix.T`` is diagonal.

    Attributes:
        matrix: The (n, n) orthogonal matrix.
        masses_squared: Squared masses in row order.
    """

    def __init__(
        self,
        matrix: NDArray[np.floating],
        masses_squared: Optional[Sequence[float]] = None,
        atol: float = 1e-8,
    ):
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Rotation must be square, got shape {matrix.shape}")
        n = matrix.shape[0]
        if not np.allclose(matrix @ matrix.T, np.eye(n), atol=atol):
            raise ValueError("Rotation matrix is not orthogonal")
        if masses_squared is not None:
            masses_squared = np.asarray(masses_squared, dtype=float).reshape(-1)
            if masses_squared.size != n:
                raise ValueError(f"Expected {n} squared masses, got {masses_squared.size}")
        self.matrix = matrix
        self.masses_squared = masses_squared

    @property
    def n_fields(self) -> int:
        return self.matrix.shape[0]

    def reordered(self, order: Sequence[int]) -> "MassBasisRotation":
        """
        Permute the mass eigenstates.

        Args:
            order: order[k] is the current row that becomes row k.
        """
        order = [int(i) for i in order]
        if sorted(order) != list(range(self.n_fields)):
            raise ValueError(f"{order} is not a permutation of 0..{self.n_fields - 1}")
        masses = None if self.masses_squared is None else self.masses_squared[order]
        return MassBasisRotation(self.matrix[order, :], masses)

    def rotate_matrix(self, M: NDArray[np.floating]) -> NDArray[np.floating]:
        return self.matrix @ M @ self.matrix.T


def higgs_mass_matrix(
    tree: CurvatureTensorStore,
    phi: NDArray[np.floating],
    counterterm: Optional[CurvatureTensorStore] = None,
    loop_hessian: Optional[NDArray[np.floating]] = None,
) -> NDArray[np.floating]:
    """
    Scalar mass matrix at field point phi.

    Args:
        tree: Tree-level tensors.
        phi: Field vector.
        counterterm: Optional counterterm tensors added to the tree ones.
        loop_hessian: Optional one-loop Hessian added at the end.
    """
    phi = np.asarray(phi, dtype=float).reshape(-1)
    M = np.zeros((phi.size, phi.size))
    for store in (tree, counterterm):
        if store is None:
            continue
        M += (
            store.L2.array
            + np.einsum("ijk,k->ij", store.L3.array, phi)
            + 0.5 * np.einsum("ijkl,k,l->ij", store.L4.array, phi, phi)
        )
    if loop_hessian is not None:
        M += np.asarray(loop_hessian, dtype=float)
    return 0.5 * (M + M.T)


def gauge_mass_matrix(store: CurvatureTensorStore, phi: NDArray[np.floating]) -> NDArray[np.floating]:
    """Gauge-boson mass-squared matrix 1/2 G_abij φ_i φ_j."""
    phi = np.asarray(phi, dtype=float).reshape(-1)
    return 0.5 * np.einsum("abij,i,j->ab", store.gauge.array, phi, phi)


def fermion_mass_matrix(tensor: CurvatureTensor, phi: NDArray[np.floating]) -> NDArray[np.complexfloating]:
    """Complex fermion mass matrix Y_IJk φ_k."""
    phi = np.asarray(phi, dtype=float).reshape(-1)
    return np.einsum("IJk,k->IJ", tensor.array, phi)


def quark_mass_matrix(store: CurvatureTensorStore, phi) -> NDArray[np.complexfloating]:
    return fermion_mass_matrix(store.quark, phi)


def lepton_mass_matrix(store: CurvatureTensorStore, phi) -> NDArray[np.complexfloating]:
    return fermion_mass_matrix(store.lepton, phi)


def fermion_masses_squared(M: NDArray[np.complexfloating]) -> NDArray[np.floating]:
    """Ascending eigenvalues of M M† (non-negative up to round-off)."""
    if M.size == 0:
        return np.zeros(0)
    return linalg.eigvalsh(M @ M.conj().T)


def diagonalize_mass_matrix(M: NDArray[np.floating]) -> MassBasisRotation:
    """
    Diagonalize a real symmetric mass-squared matrix.

    Returns:
        MassBasisRotation with masses in ascending order.
    """
    M = np.asarray(M, dtype=float)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ValueError(f"Mass matrix must be square, got shape {M.shape}")
    if not np.allclose(M, M.T, rtol=1e-10, atol=1e-10 * max(1.0, np.abs(M).max())):
        raise ValueError("Mass matrix is not symmetric")
    eigenvalues, eigenvectors = linalg.eigh(0.5 * (M + M.T))
    return MassBasisRotation(eigenvectors.T, eigenvalues)


@dataclass
class MassSpectrum:
    """
    Squared masses of every sector at one field point.

    Attributes:
        higgs: Scalar squared masses (ascending).
        gauge: Gauge-boson squared masses (ascending).
        quark: Quark squared masses, eigenvalues of M M† (ascending).
        lepton: Lepton squared masses, eigenvalues of M M† (ascending).
        rotation: Scalar mass-basis rotation.
    """
    higgs: NDArray[np.floating]
    gauge: NDArray[np.floating]
    quark: NDArray[np.floating]
    lepton: NDArray[np.floating]
    rotation: Optional[MassBasisRotation] = field(default=None, repr=False)

    @staticmethod
    def _masses(squared: NDArray[np.floating]) -> NDArray[np.floating]:
        return np.sqrt(np.abs(squared))

    @property
    def higgs_masses(self) -> NDArray[np.floating]:
        return self._masses(self.higgs)

    @property
    def gauge_masses(self) -> NDArray[np.floating]:
        return self._masses(self.gauge)

    @property
    def quark_masses(self) -> NDArray[np.floating]:
        return self._masses(self.quark)

    @property
    def lepton_masses(self) -> NDArray[np.floating]:
        return self._masses(self.lepton)


def compute_mass_spectrum(
    tree: CurvatureTensorStore,
    phi: NDArray[np.floating],
    counterterm: Optional[CurvatureTensorStore] = None,
    loop_hessian: Optional[NDArray[np.floating]] = None,
) -> MassSpectrum:
    """Mass spectrum of all sectors at field point phi."""
    rotation = diagonalize_mass_matrix(
        higgs_mass_matrix(tree, phi, counterterm=counterterm, loop_hessian=loop_hessian)
    )
    gauge = gauge_mass_matrix(tree, phi)
    return MassSpectrum(
        higgs=rotation.masses_squared,
        gauge=linalg.eigvalsh(gauge) if gauge.size else np.zeros(0),
        quark=fermion_masses_squared(quark_mass_matrix(tree, phi)),
        lepton=fermion_masses_squared(lepton_mass_matrix(tree, phi)),
        rotation=rotation,
    )
