"""
Error kinds raised by the curvature solver.

Every error carries its kind, the operation (stage) in which it was
raised and, where known, a label for the parameter point being
processed, so that a scan driver can decide whether to skip the point
or abort the run.

- PreconditionViolated: a lifecycle stage was invoked before its
  prerequisite. Fatal misuse, never skipped.
- ParseError: malformed input record. Recoverable (skip the record).
- NumericDegeneracy: a divisor (VEV, coupling) is zero or below the
  numerical floor. Recoverable per point.
- InvalidParameterPoint: a well-formed record that is physically
  invalid (non-positive mass, VEV or coupling). Recoverable per point.
"""

import numpy as np
from enum import Enum
from typing import Optional, Union

from curvature_solver.core.constants import NUMERICAL_FLOOR


class ErrorKind(Enum):
    """Classification of solver errors."""
    PRECONDITION_VIOLATED = "precondition_violated"
    PARSE_ERROR = "parse_error"
    NUMERIC_DEGENERACY = "numeric_degeneracy"
    INVALID_PARAMETER_POINT = "invalid_parameter_point"

    @property
    def recoverable(self) -> bool:
        return self is not ErrorKind.PRECONDITION_VIOLATED


class CurvatureSolverError(Exception):
    """
    Base class for all solver errors.

    Attributes:
        kind: ErrorKind of this error.
        stage: Name of the operation that failed.
        point: Label of the parameter point (e.g. input line number).
    """

    kind: ErrorKind = ErrorKind.PRECONDITION_VIOLATED

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        point: Optional[Union[int, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.point = point

    def __str__(self) -> str:
        prefix = []
        if self.point is not None:
            prefix.append(f"point {self.point}")
        if self.stage:
            prefix.append(self.stage)
        if prefix:
            return f"[{', '.join(prefix)}] {self.message}"
        return self.message


class PreconditionViolated(CurvatureSolverError, RuntimeError):
    """Operation called before its lifecycle prerequisite was reached."""
    kind = ErrorKind.PRECONDITION_VIOLATED


class ParseError(CurvatureSolverError, ValueError):
    """Input record has the wrong field count or a non-numeric token."""
    kind = ErrorKind.PARSE_ERROR


class NumericDegeneracy(CurvatureSolverError, ArithmeticError):
    """A required divisor is zero or below NUMERICAL_FLOOR."""
    kind = ErrorKind.NUMERIC_DEGENERACY


class InvalidParameterPoint(CurvatureSolverError, ValueError):
    """Parameter point is well-formed but physically invalid."""
    kind = ErrorKind.INVALID_PARAMETER_POINT


def require_nonzero(
    value: float,
    name: str,
    stage: Optional[str] = None,
    point: Optional[Union[int, str]] = None,
    floor: float = NUMERICAL_FLOOR,
) -> float:
    """
    Check that a quantity used as a divisor is safely nonzero.

    Args:
        value: The divisor.
        name: Name used in the error message.
        stage: Operation name for the error.
        point: Parameter-point label for the error.
        floor: Absolute threshold below which the value counts as zero.

    Returns:
        The value, unchanged.

    Raises:
        NumericDegeneracy: If |value| < floor or value is not finite.
    """
    if not (np.isfinite(value) and abs(value) >= floor):
        raise NumericDegeneracy(
            f"{name} = {value!r} is not finite or below the numerical floor {floor:g}",
            stage=stage,
            point=point,
        )
    return value
