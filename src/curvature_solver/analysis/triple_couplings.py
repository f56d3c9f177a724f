"""
Rotation of triple-scalar couplings into the mass basis.

T'_ijk = Σ_lmn R_il R_jm R_kn T_lmn

with R the (optionally re-ordered) mass-basis rotation. Since R is
orthogonal, the Frobenius norm of each tensor is unchanged.
"""

import itertools
import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from curvature_solver.analysis.mass_spectrum import MassBasisRotation


def frobenius_norm(tensor: NDArray) -> float:
    """sqrt(Σ |T|²) over all entries."""
    return float(np.sqrt(np.sum(np.abs(tensor) ** 2)))


@dataclass
class TripleCouplings:
    """
    Triple-scalar couplings at one parameter point.

    Attributes:
        tree, counterterm, loop: Mass-basis tensors, shape (n, n, n).
        tree_field, counterterm_field, loop_field: Field-basis inputs.
        order: Eigenstate order applied to the rotation.
    """
    tree: NDArray[np.floating]
    counterterm: NDArray[np.floating]
    loop: NDArray[np.floating]
    tree_field: NDArray[np.floating]
    counterterm_field: NDArray[np.floating]
    loop_field: NDArray[np.floating]
    order: Tuple[int, ...]

    @property
    def n_fields(self) -> int:
        return self.tree.shape[0]

    @property
    def total(self) -> NDArray[np.floating]:
        return self.tree + self.counterterm + self.loop

    def as_row(self) -> List[float]:
        """Tree, CT, loop for every i <= j <= k (legend order)."""
        row = []
        for i, j, k in itertools.combinations_with_replacement(range(self.n_fields), 3):
            row.extend([
                float(self.tree[i, j, k]),
                float(self.counterterm[i, j, k]),
                float(self.loop[i, j, k]),
            ])
        return row


class TripleCouplingRotator:
    """
    Rotate field-basis rank-3 tensors with a mass-basis rotation.

    Attributes:
        rotation: The MassBasisRotation after applying ``order``.
        order: Eigenstate order (identity if not given).
    """

    def __init__(self, rotation: MassBasisRotation, order: Optional[Sequence[int]] = None):
        n = rotation.n_fields
        self.order = tuple(range(n)) if order is None else tuple(int(i) for i in order)
        self.rotation = rotation.reordered(self.order)

    @property
    def matrix(self) -> NDArray[np.floating]:
        return self.rotation.matrix

    def rotate(self, tensor: NDArray[np.floating]) -> NDArray[np.floating]:
        tensor = np.asarray(tensor, dtype=float)
        n = self.rotation.n_fields
        if tensor.shape != (n, n, n):
            raise ValueError(f"Expected tensor of shape {(n, n, n)}, got {tensor.shape}")
        R = self.matrix
        return np.einsum("il,jm,kn,lmn->ijk", R, R, R, tensor, optimize=True)

    def rotate_all(
        self,
        tree: NDArray[np.floating],
        counterterm: NDArray[np.floating],
        loop: NDArray[np.floating],
    ) -> TripleCouplings:
        """Rotate the three coupling levels independently."""
        return TripleCouplings(
            tree=self.rotate(tree),
            counterterm=self.rotate(counterterm),
            loop=self.rotate(loop),
            tree_field=np.array(tree, dtype=float),
            counterterm_field=np.array(counterterm, dtype=float),
            loop_field=np.array(loop, dtype=float),
            order=self.order,
        )
