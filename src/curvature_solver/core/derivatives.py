"""
One-loop derivative data at the tree-level vacuum.
"""

import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass
from typing import Optional


@dataclass
class OneLoopDerivatives:
    """
    Derivatives of the one-loop potential at the tree-level VEV.

    Attributes:
        gradient: First derivatives N_i, shape (n,).
        hessian: Second derivatives H_ij, shape (n, n), symmetric.
        third: Optional third derivatives, shape (n, n, n).
        scale: Renormalization scale the derivatives were evaluated at.
    """
    gradient: NDArray[np.floating]
    hessian: NDArray[np.floating]
    third: Optional[NDArray[np.floating]] = None
    scale: Optional[float] = None

    def __post_init__(self):
        self.gradient = np.asarray(self.gradient, dtype=float).reshape(-1)
        self.hessian = np.asarray(self.hessian, dtype=float)
        n = self.gradient.size
        if self.hessian.shape != (n, n):
            raise ValueError(
                f"Hessian shape {self.hessian.shape} does not match gradient size {n}"
            )
        if self.third is not None:
            self.third = np.asarray(self.third, dtype=float)
            if self.third.shape != (n, n, n):
                raise ValueError(
                    f"Third-derivative shape {self.third.shape} does not match gradient size {n}"
                )

    @property
    def n_fields(self) -> int:
        return self.gradient.size

    @classmethod
    def zeros(cls, n: int, scale: Optional[float] = None) -> "OneLoopDerivatives":
        return cls(np.zeros(n), np.zeros((n, n)), np.zeros((n, n, n)), scale)

    def symmetrized(self) -> "OneLoopDerivatives":
        """Copy with the Hessian replaced by (H + H^T)/2."""
        return OneLoopDerivatives(
            self.gradient.copy(),
            0.5 * (self.hessian + self.hessian.T),
            None if self.third is None else self.third.copy(),
            self.scale,
        )
