"""
Per-point driver and renormalization-scale scan.

process_parameter_point runs the full lifecycle for one input record on
a fresh model and reports the outcome as a PointResult. Parse errors,
invalid points and numeric degeneracies become non-success results so
a file scan can skip them; PreconditionViolated always propagates.
"""

import warnings
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from curvature_solver.analysis.triple_couplings import TripleCouplings
from curvature_solver.core.constants import SMConstants
from curvature_solver.core.derivatives import OneLoopDerivatives
from curvature_solver.core.errors import CurvatureSolverError, ErrorKind
from curvature_solver.core.parameters import CountertermParameters
from curvature_solver.models import create_model
from curvature_solver.models.base import PotentialModel
from curvature_solver.potentials.coleman_weinberg import coleman_weinberg_derivatives
from curvature_solver.reporting.parameter_io import read_parameter_file

DerivativeEngine = Callable[[PotentialModel], OneLoopDerivatives]


class PointStatus(Enum):
    """Outcome of processing one parameter point."""
    SUCCESS = "success"
    PARSE_ERROR = "parse_error"
    INVALID_POINT = "invalid_point"
    NUMERIC_DEGENERACY = "numeric_degeneracy"


_STATUS_BY_KIND = {
    ErrorKind.PARSE_ERROR: PointStatus.PARSE_ERROR,
    ErrorKind.INVALID_PARAMETER_POINT: PointStatus.INVALID_POINT,
    ErrorKind.NUMERIC_DEGENERACY: PointStatus.NUMERIC_DEGENERACY,
}


@dataclass
class PointResult:
    """
    Result of one parameter point.

    Attributes:
        line: Line number (or label) of the record.
        status: PointStatus.
        inputs: Input parameters (None if the record did not parse).
        parameters: Lagrangian parameters.
        counterterms: Counterterms at the model's scale.
        triple_couplings: Mass-basis triple couplings (if requested).
        message: Error message for non-success results.
        stage: Operation that failed.
    """
    line: Optional[Union[int, str]]
    status: PointStatus
    inputs: Optional[Dict[str, float]] = None
    parameters: Optional[Dict[str, float]] = None
    counterterms: Optional[CountertermParameters] = None
    triple_couplings: Optional[TripleCouplings] = None
    message: str = ""
    stage: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is PointStatus.SUCCESS

    def output_row(self) -> List[float]:
        """Inputs, counterterms and (if present) triple couplings."""
        if not self.ok:
            raise ValueError(f"Point {self.line} has no results (status {self.status.value})")
        row = list(self.inputs.values()) + list(self.counterterms.as_vector())
        if self.triple_couplings is not None:
            row.extend(self.triple_couplings.as_row())
        return row


def output_legend(model: PotentialModel, triple_couplings: bool = True) -> List[str]:
    """Column labels matching PointResult.output_row()."""
    legend = model.legend_input() + model.legend_ct()
    if triple_couplings:
        legend += model.legend_triple_couplings()
    return legend


def process_parameter_point(
    model_id: str,
    line: str,
    point: Optional[Union[int, str]] = None,
    use_index_col: bool = False,
    derivative_engine: Optional[DerivativeEngine] = None,
    triple_couplings: bool = True,
    constants: Optional[SMConstants] = None,
    verbose: bool = False,
) -> PointResult:
    """
    Run the full lifecycle for one record on a fresh model.

    Args:
        model_id: Registry identifier.
        line: The parameter record.
        point: Label used in errors and the result (e.g. line number).
        use_index_col: The record starts with an index column.
        derivative_engine: One-loop derivative engine (default: Coleman-Weinberg).
        triple_couplings: Also compute mass-basis triple couplings.
        constants: Standard Model inputs.
        verbose: Print progress and the model summary.

    Returns:
        PointResult.

    Raises:
        PreconditionViolated: On lifecycle misuse (never converted).
    """
    model = create_model(model_id, constants=constants, verbose=verbose)
    try:
        model.init_model(
            line, derivative_engine=derivative_engine, use_index_col=use_index_col, point=point
        )
        couplings = model.triple_higgs_couplings() if triple_couplings else None
    except CurvatureSolverError as e:
        if not e.kind.recoverable:
            raise
        return PointResult(
            line=point,
            status=_STATUS_BY_KIND[e.kind],
            inputs=None if model.inputs is None else model.inputs.as_dict(),
            message=e.message,
            stage=e.stage,
        )

    if verbose:
        model.write()
    return PointResult(
        line=point,
        status=PointStatus.SUCCESS,
        inputs=model.inputs.as_dict(),
        parameters=model.parameters.as_dict(),
        counterterms=model.counterterms,
        triple_couplings=couplings,
    )


def process_parameter_file(
    model_id: str,
    path: Union[str, Path],
    lines: Optional[Iterable[int]] = None,
    derivative_engine: Optional[DerivativeEngine] = None,
    triple_couplings: bool = True,
    constants: Optional[SMConstants] = None,
    verbose: bool = False,
) -> List[PointResult]:
    """
    Process the points of a parameter file.

    Args:
        model_id: Registry identifier.
        path: Parameter file (legend on line 1).
        lines: Line numbers to process (default: all data lines).

    Returns:
        One PointResult per processed line, in file order.
    """
    parameter_file = read_parameter_file(path)
    selected = None if lines is None else set(lines)
    results = []
    for number, text in parameter_file.lines:
        if selected is not None and number not in selected:
            continue
        result = process_parameter_point(
            model_id,
            text,
            point=number,
            use_index_col=parameter_file.use_index_col,
            derivative_engine=derivative_engine,
            triple_couplings=triple_couplings,
            constants=constants,
            verbose=verbose,
        )
        if not result.ok:
            warnings.warn(f"Skipping line {number}: {result.status.value}: {result.message}")
        results.append(result)
    return results


@dataclass
class ScaleScanStep:
    """Counterterms at one renormalization scale."""
    mu_factor: float
    scale: float
    counterterms: CountertermParameters

    def output_row(self) -> List[float]:
        return [self.mu_factor, self.scale] + list(self.counterterms.as_vector())


def scale_scan_legend(model: PotentialModel) -> List[str]:
    return ["mu_factor", "mu"] + model.legend_ct()


def _without_third(model: PotentialModel) -> OneLoopDerivatives:
    return coleman_weinberg_derivatives(model, third=False)


def scan_renormalization_scale(
    model: PotentialModel,
    n_steps: int,
    derivative_engine: Optional[DerivativeEngine] = None,
    restore: bool = True,
) -> List[ScaleScanStep]:
    """
    Re-derive counterterms while varying the renormalization scale.

    The scale runs over (0.5 + step/n_steps) * v_0 for step = 0..n_steps-1.

    Args:
        model: Model in state COUNTERTERMS_SET or later.
        n_steps: Number of scale points (>= 1).
        derivative_engine: One-loop derivative engine (default:
            Coleman-Weinberg without third derivatives).
        restore: Re-derive the counterterms at the original scale afterwards.

    Returns:
        One ScaleScanStep per scale.
    """
    if n_steps < 1:
        raise ValueError(f"n_steps must be at least 1, got {n_steps}")
    engine = derivative_engine if derivative_engine is not None else _without_third
    original_scale = model.scale
    vev0 = model.constants.vev0

    steps = []
    for step in range(n_steps):
        mu_factor = 0.5 + step / n_steps
        scale = mu_factor * vev0
        counterterms = model.reset_scale(scale, derivative_engine=engine)
        if model.verbose:
            print(f"  mu_factor = {mu_factor:.4f}, mu = {scale:.4f} GeV")
        steps.append(ScaleScanStep(mu_factor=mu_factor, scale=scale, counterterms=counterterms))

    if restore:
        model.reset_scale(original_scale, derivative_engine=engine)
    return steps
