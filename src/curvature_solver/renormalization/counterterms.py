"""
Counterterm solver.

Counterterms are fixed by two renormalization conditions at the
tree-level VEV v:

1. Tadpoles:  ∂_i V_CT(v) = -∂_i V_CW(v) for every field direction i.
2. Masses:    ∂_i ∂_j V_CT(v) = -∂_i ∂_j V_CW(v) in the VEV directions,
              so the tree + CT + one-loop mass matrix keeps its tree value.

Each model supplies the closed-form solution of these conditions
(direct substitution, no linear solve). This module packs the result in
the model's canonical order and provides residual checks of both
conditions.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Optional, Sequence, Union, TYPE_CHECKING

from curvature_solver.core.derivatives import OneLoopDerivatives
from curvature_solver.core.errors import NumericDegeneracy
from curvature_solver.core.parameters import CountertermParameters
from curvature_solver.core.tensors import CurvatureTensorStore
from curvature_solver.potentials.polynomial import TensorPotential

if TYPE_CHECKING:
    from curvature_solver.models.base import PotentialModel


class CountertermSolver:
    """
    Solve the renormalization conditions for one model instance.

    Attributes:
        model: The model whose closed-form counterterm hook is used.
        names: Canonical counterterm order of the model.
    """

    def __init__(self, model: "PotentialModel"):
        self.model = model
        self.names = tuple(model.counterterm_names)

    def solve(
        self,
        derivatives: OneLoopDerivatives,
        point: Optional[Union[int, str]] = None,
    ) -> CountertermParameters:
        """
        Compute counterterms from one-loop derivatives at the tree VEV.

        Args:
            derivatives: One-loop gradient and Hessian at the tree VEV.
            point: Parameter-point label for error messages.

        Returns:
            CountertermParameters in canonical order.

        Raises:
            ValueError: If the derivative data has the wrong size.
            NumericDegeneracy: If a counterterm is not finite.
        """
        n = self.model.basis.n_higgs
        if derivatives.n_fields != n:
            raise ValueError(
                f"One-loop derivatives cover {derivatives.n_fields} fields, model has {n}"
            )
        values = self.model.solve_counterterms(derivatives.symmetrized())
        counterterms = CountertermParameters.from_mapping(self.names, values)
        if not np.all(np.isfinite(counterterms.values)):
            bad = [name for name, v in counterterms.items() if not np.isfinite(v)]
            raise NumericDegeneracy(
                f"non-finite counterterms: {', '.join(bad)}", stage="calc_ct", point=point
            )
        return counterterms


def tadpole_residual(
    tree: CurvatureTensorStore,
    counterterm: CurvatureTensorStore,
    vev: NDArray[np.floating],
    loop_gradient: NDArray[np.floating],
) -> NDArray[np.floating]:
    """
    Gradient of tree + counterterm + one-loop potential at the VEV.

    Vanishes in every direction once the counterterms are set.
    """
    return TensorPotential(tree, counterterm).gradient(vev) + np.asarray(loop_gradient, dtype=float)


def mass_residual(
    counterterm: CurvatureTensorStore,
    vev: NDArray[np.floating],
    loop_hessian: NDArray[np.floating],
    directions: Optional[Sequence[int]] = None,
) -> NDArray[np.floating]:
    """
    Counterterm Hessian plus one-loop Hessian at the VEV.

    Args:
        counterterm: Counterterm tensors.
        vev: Tree-level VEV.
        loop_hessian: One-loop Hessian at the VEV.
        directions: Field indices to keep (default: all).

    Returns:
        The residual block; zero in the renormalized directions.
    """
    residual = TensorPotential(counterterm).hessian(vev) + np.asarray(loop_hessian, dtype=float)
    if directions is None:
        return residual
    directions = list(directions)
    return residual[np.ix_(directions, directions)]
