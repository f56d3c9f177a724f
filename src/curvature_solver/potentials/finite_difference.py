"""
Central finite-difference derivatives of a scalar function of the fields.

Gradient:   (f(x + h e_i) - f(x - h e_i)) / 2h
Hessian:    Σ_{s,t=±1} s t f(x + h s e_i + h t e_j) / 4h²
Third:      Σ_{s,t,u=±1} s t u f(x + h s e_i + h t e_j + h u e_k) / 8h³

The Hessian and third-derivative stencils are products of the
first-derivative stencil, so all three are exact for polynomials up to
quadratic, cubic and quartic order respectively (up to round-off).
"""

import itertools
import numpy as np
from numpy.typing import NDArray
from typing import Callable, Optional

from curvature_solver.core.derivatives import OneLoopDerivatives

DEFAULT_STEP = 1e-2


class FiniteDifferenceDerivatives:
    """
    Finite-difference differentiator.

    Attributes:
        func: Scalar function f(x) of a field vector.
        step: Displacement h in field units (GeV).
    """

    def __init__(self, func: Callable[[NDArray[np.floating]], float], step: float = DEFAULT_STEP):
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        self.func = func
        self.step = float(step)

    def _f(self, x: NDArray[np.floating], displacement: NDArray[np.floating]) -> float:
        return float(self.func(x + displacement))

    def gradient(self, x) -> NDArray[np.floating]:
        x = np.asarray(x, dtype=float).reshape(-1)
        n, h = x.size, self.step
        result = np.zeros(n)
        for i in range(n):
            e = np.zeros(n)
            e[i] = h
            result[i] = (self._f(x, e) - self._f(x, -e)) / (2 * h)
        return result

    def hessian(self, x) -> NDArray[np.floating]:
        x = np.asarray(x, dtype=float).reshape(-1)
        n, h = x.size, self.step
        unit = np.eye(n) * h
        result = np.zeros((n, n))
        for i in range(n):
            for j in range(i, n):
                total = 0.0
                for s, t in itertools.product((1, -1), repeat=2):
                    total += s * t * self._f(x, s * unit[i] + t * unit[j])
                result[i, j] = result[j, i] = total / (4 * h * h)
        return result

    def third_derivative(self, x) -> NDArray[np.floating]:
        x = np.asarray(x, dtype=float).reshape(-1)
        n, h = x.size, self.step
        unit = np.eye(n) * h
        result = np.zeros((n, n, n))
        for i, j, k in itertools.combinations_with_replacement(range(n), 3):
            total = 0.0
            for s, t, u in itertools.product((1, -1), repeat=3):
                total += s * t * u * self._f(x, s * unit[i] + t * unit[j] + u * unit[k])
            value = total / (8 * h ** 3)
            for perm in set(itertools.permutations((i, j, k))):
                result[perm] = value
        return result

    def evaluate(self, x, third: bool = True, scale: Optional[float] = None) -> OneLoopDerivatives:
        """Gradient, Hessian and (optionally) third derivatives at x."""
        return OneLoopDerivatives(
            gradient=self.gradient(x),
            hessian=self.hessian(x),
            third=self.third_derivative(x) if third else None,
            scale=scale,
        )
