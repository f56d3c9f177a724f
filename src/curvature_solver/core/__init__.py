"""
Core module for the curvature solver.

Contains Standard Model constants, error kinds, the lifecycle state
machine, symmetric curvature tensors and counterterm/derivative records.
"""

from curvature_solver.core.constants import (
    SMConstants,
    C_VEV0,
    NUMERICAL_FLOOR,
    load_constants_from_json,
    save_constants_to_json,
    ckm_matrix,
)
from curvature_solver.core.errors import (
    ErrorKind,
    CurvatureSolverError,
    PreconditionViolated,
    ParseError,
    NumericDegeneracy,
    InvalidParameterPoint,
    require_nonzero,
)
from curvature_solver.core.lifecycle import ModelState, require_state
from curvature_solver.core.tensors import FieldBasis, CurvatureTensor, CurvatureTensorStore
from curvature_solver.core.parameters import CountertermParameters
from curvature_solver.core.derivatives import OneLoopDerivatives

__all__ = [
    # Constants
    "SMConstants",
    "C_VEV0",
    "NUMERICAL_FLOOR",
    "load_constants_from_json",
    "save_constants_to_json",
    "ckm_matrix",
    # Errors
    "ErrorKind",
    "CurvatureSolverError",
    "PreconditionViolated",
    "ParseError",
    "NumericDegeneracy",
    "InvalidParameterPoint",
    "require_nonzero",
    # Lifecycle
    "ModelState",
    "require_state",
    # Tensors and records
    "FieldBasis",
    "CurvatureTensor",
    "CurvatureTensorStore",
    "CountertermParameters",
    "OneLoopDerivatives",
]
