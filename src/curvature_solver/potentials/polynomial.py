"""
Polynomial potential evaluated from curvature tensors.

V(φ) = L1_i φ_i + 1/2 L2_ij φ_i φ_j + 1/6 L3_ijk φ_i φ_j φ_k
       + 1/24 L4_ijkl φ_i φ_j φ_k φ_l

All derivatives follow analytically from the full index symmetry of
the tensors.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Optional, Union

from curvature_solver.core.tensors import CurvatureTensorStore


class TensorPotential:
    """
    Potential given by one or two (tree + counterterm) tensor stores.

    Attributes:
        L1, L2, L3, L4: Summed scalar tensors as shaped arrays.
        n_fields: Number of scalar fields.
    """

    def __init__(
        self,
        store: CurvatureTensorStore,
        counterterm: Optional[CurvatureTensorStore] = None,
    ):
        """
        Args:
            store: Tree-level (or any) tensor store.
            counterterm: Optional second store added to the first.
        """
        self.L1 = store.L1.array.copy()
        self.L2 = store.L2.array.copy()
        self.L3 = store.L3.array.copy()
        self.L4 = store.L4.array.copy()
        if counterterm is not None:
            if counterterm.basis.n_higgs != store.basis.n_higgs:
                raise ValueError("Tree and counterterm stores have different field counts")
            self.L1 += counterterm.L1.array
            self.L2 += counterterm.L2.array
            self.L3 += counterterm.L3.array
            self.L4 += counterterm.L4.array
        self.n_fields = self.L1.size

    def _check(self, phi) -> NDArray[np.floating]:
        phi = np.asarray(phi, dtype=float).reshape(-1)
        if phi.size != self.n_fields:
            raise ValueError(f"Expected {self.n_fields} field values, got {phi.size}")
        return phi

    def __call__(self, phi: Union[NDArray[np.floating], list]) -> float:
        """
        Evaluate the potential.

        Args:
            phi: Field vector of length n_fields.

        Returns:
            V(φ) in GeV⁴.
        """
        phi = self._check(phi)
        return float(
            self.L1 @ phi
            + 0.5 * np.einsum("ij,i,j->", self.L2, phi, phi)
            + np.einsum("ijk,i,j,k->", self.L3, phi, phi, phi) / 6.0
            + np.einsum("ijkl,i,j,k,l->", self.L4, phi, phi, phi, phi) / 24.0
        )

    def gradient(self, phi) -> NDArray[np.floating]:
        """dV/dφ_i"""
        phi = self._check(phi)
        return (
            self.L1
            + self.L2 @ phi
            + 0.5 * np.einsum("ijk,j,k->i", self.L3, phi, phi)
            + np.einsum("ijkl,j,k,l->i", self.L4, phi, phi, phi) / 6.0
        )

    def hessian(self, phi) -> NDArray[np.floating]:
        """d²V/dφ_i dφ_j (the field-dependent scalar mass matrix)."""
        phi = self._check(phi)
        return (
            self.L2
            + np.einsum("ijk,k->ij", self.L3, phi)
            + 0.5 * np.einsum("ijkl,k,l->ij", self.L4, phi, phi)
        )

    def third_derivative(self, phi) -> NDArray[np.floating]:
        """d³V/dφ_i dφ_j dφ_k (field-basis triple couplings)."""
        phi = self._check(phi)
        return self.L3 + np.einsum("ijkl,l->ijk", self.L4, phi)
