"""
Lifecycle states of a potential model.

A model moves strictly forward through these states; every lifecycle
operation checks the current state on entry.
"""

from enum import IntEnum
from typing import Optional, Union

from curvature_solver.core.errors import PreconditionViolated


class ModelState(IntEnum):
    """Ordered lifecycle states of a PotentialModel."""
    UNINITIALIZED = 0
    PARAMETERS_SET = 1
    CURVATURE_POPULATED = 2
    COUPLINGS_DIAGONALIZED = 3
    COUNTERTERMS_SET = 4
    COUPLINGS_ROTATED = 5

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


def require_state(
    current: ModelState,
    required: ModelState,
    stage: str,
    point: Optional[Union[int, str]] = None,
    exact: bool = False,
) -> None:
    """
    Check that a model has reached a lifecycle state.

    Args:
        current: The model's state.
        required: Minimum state (or exact state if ``exact``).
        stage: Name of the operation being entered.
        point: Parameter-point label for the error.
        exact: Require ``current == required`` instead of ``>=``.

    Raises:
        PreconditionViolated: If the requirement is not met.
    """
    ok = current == required if exact else current >= required
    if not ok:
        relation = "exactly" if exact else "at least"
        raise PreconditionViolated(
            f"requires state {relation} '{required.label}', "
            f"model is in state '{current.label}'",
            stage=stage,
            point=point,
        )
