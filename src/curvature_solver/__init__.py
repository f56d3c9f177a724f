"""
Curvature Solver - renormalized one-loop effective potentials from
symmetric curvature tensors.

A model's potential is held as symmetric coefficient tensors (scalar
L1..L4, gauge-scalar G2H2, Yukawa F2H1). From these the solver derives
Lagrangian parameters from physical inputs, fixes the counterterms from
one-loop derivatives at the tree-level vacuum and rotates triple-scalar
couplings into the mass basis.

Main Interface:
    from curvature_solver import create_model

    model = create_model("vdm")
    model.init_model("125.09 650 0.3 246.22 1000 1.0")
    couplings = model.triple_higgs_couplings()
    print(model.write())

Components:
- PotentialModel: lifecycle facade (state machine)
- CurvatureTensorStore: symmetric tensors in flat row-major buffers
- CountertermSolver: closed-form renormalization conditions
- TripleCouplingRotator: field basis -> mass basis
"""

from curvature_solver.core import (
    SMConstants,
    C_VEV0,
    ErrorKind,
    CurvatureSolverError,
    PreconditionViolated,
    ParseError,
    NumericDegeneracy,
    InvalidParameterPoint,
    ModelState,
    FieldBasis,
    CurvatureTensor,
    CurvatureTensorStore,
    CountertermParameters,
    OneLoopDerivatives,
)
from curvature_solver.potentials import (
    TensorPotential,
    FiniteDifferenceDerivatives,
    ColemanWeinbergPotential,
    coleman_weinberg_derivatives,
)
from curvature_solver.analysis import (
    MassBasisRotation,
    MassSpectrum,
    compute_mass_spectrum,
    diagonalize_mass_matrix,
    TripleCouplings,
    TripleCouplingRotator,
)
from curvature_solver.renormalization import CountertermSolver
from curvature_solver.models import (
    PotentialModel,
    VectorDarkMatterModel,
    MODEL_REGISTRY,
    available_models,
    create_model,
)
from curvature_solver.scan import (
    PointStatus,
    PointResult,
    process_parameter_point,
    process_parameter_file,
    scan_renormalization_scale,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "SMConstants",
    "C_VEV0",
    "ErrorKind",
    "CurvatureSolverError",
    "PreconditionViolated",
    "ParseError",
    "NumericDegeneracy",
    "InvalidParameterPoint",
    "ModelState",
    "FieldBasis",
    "CurvatureTensor",
    "CurvatureTensorStore",
    "CountertermParameters",
    "OneLoopDerivatives",
    # Potentials
    "TensorPotential",
    "FiniteDifferenceDerivatives",
    "ColemanWeinbergPotential",
    "coleman_weinberg_derivatives",
    # Analysis
    "MassBasisRotation",
    "MassSpectrum",
    "compute_mass_spectrum",
    "diagonalize_mass_matrix",
    "TripleCouplings",
    "TripleCouplingRotator",
    # Renormalization
    "CountertermSolver",
    # Models
    "PotentialModel",
    "VectorDarkMatterModel",
    "MODEL_REGISTRY",
    "available_models",
    "create_model",
    # Scan
    "PointStatus",
    "PointResult",
    "process_parameter_point",
    "process_parameter_file",
    "scan_renormalization_scale",
]
