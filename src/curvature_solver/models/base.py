"""
Base class for potential models.

A PotentialModel owns two curvature tensor stores (tree and
counterterm) and walks one parameter point through a fixed lifecycle:

    read_and_set / set_gen        -> PARAMETERS_SET
    set_curvature_arrays          -> CURVATURE_POPULATED
    calculate_physical_couplings  -> COUPLINGS_DIAGONALIZED
    calc_ct + set_ct_pot_par      -> COUNTERTERMS_SET  (once; reset_scale re-derives)
    triple_higgs_couplings        -> COUPLINGS_ROTATED

Each operation checks the current state on entry and raises
PreconditionViolated if its prerequisite has not been reached. A model
instance handles one parameter point; use reset() or a new instance for
the next one.

Subclasses provide the physics through the abstract hooks
(field content, reparametrization, tensor population, closed-form
counterterms).
"""

import itertools
import numpy as np
from numpy.typing import NDArray
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from curvature_solver.analysis.mass_spectrum import (
    MassBasisRotation,
    MassSpectrum,
    compute_mass_spectrum,
)
from curvature_solver.analysis.triple_couplings import TripleCouplingRotator, TripleCouplings
from curvature_solver.core.constants import SMConstants
from curvature_solver.core.derivatives import OneLoopDerivatives
from curvature_solver.core.errors import NumericDegeneracy, PreconditionViolated
from curvature_solver.core.lifecycle import ModelState, require_state
from curvature_solver.core.parameters import CountertermParameters
from curvature_solver.core.tensors import CurvatureTensorStore, FieldBasis
from curvature_solver.potentials.coleman_weinberg import coleman_weinberg_derivatives
from curvature_solver.potentials.polynomial import TensorPotential
from curvature_solver.renormalization.counterterms import CountertermSolver
from curvature_solver.reporting.parameter_io import parse_parameter_record
from curvature_solver.reporting.results_reporter import format_model_summary

DerivativeEngine = Callable[["PotentialModel"], OneLoopDerivatives]
Point = Optional[Union[int, str]]


class PotentialModel(ABC):
    """
    Abstract potential model with an explicit lifecycle.

    Class attributes (set by subclasses):
        model_id: Registry identifier.
        input_names: Names of the input record fields, in record order.
        counterterm_names: Canonical counterterm order.
        vev_labels: Labels of the independent VEV directions.
        temperature_labels: Labels of phase-transition output columns.
        particle_labels: Mass-ordered scalar labels for coupling legends.

    Attributes:
        constants: Standard Model inputs.
        basis: Field content.
        tree: Tree-level curvature tensors.
        counterterm: Counterterm curvature tensors.
        scale: Renormalization scale (GeV).
        state: Current ModelState.
        verbose: Print progress information.
    """

    model_id: str = ""
    input_names: Tuple[str, ...] = ()
    counterterm_names: Tuple[str, ...] = ()
    vev_labels: Tuple[str, ...] = ()
    temperature_labels: Tuple[str, ...] = ()
    particle_labels: Tuple[str, ...] = ()

    def __init__(
        self,
        constants: Optional[SMConstants] = None,
        scale: Optional[float] = None,
        verbose: bool = False,
    ):
        """
        Args:
            constants: Standard Model inputs (default: constants.json).
            scale: Renormalization scale in GeV (default: electroweak VEV).
            verbose: Print progress information.
        """
        if scale is not None and scale <= 0:
            raise ValueError(f"Renormalization scale must be positive, got {scale}")
        self.constants = constants if constants is not None else SMConstants.default()
        self.verbose = verbose
        self.basis = self.field_basis()
        if self.particle_labels and len(self.particle_labels) != self.basis.n_higgs:
            raise ValueError(
                f"{type(self).__name__}: {len(self.particle_labels)} particle labels "
                f"for {self.basis.n_higgs} scalar fields"
            )
        self.tree = CurvatureTensorStore(self.basis)
        self.counterterm = CurvatureTensorStore(self.basis)
        self._default_scale = scale
        self.reset()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self.state.name}, point={self.point!r})"

    # =========================================================================
    # Model-specific hooks
    # =========================================================================

    @abstractmethod
    def field_basis(self) -> FieldBasis:
        """Field content of the model."""

    @abstractmethod
    def inputs_from_record(self, values: NDArray[np.floating], point: Point = None) -> Any:
        """Build the input-parameter object from a parsed record."""

    @abstractmethod
    def reparametrize(self, inputs: Any, point: Point = None) -> Any:
        """Lagrangian parameters from physical inputs."""

    @abstractmethod
    def tree_vev(self, inputs: Any, parameters: Any) -> NDArray[np.floating]:
        """The n_vev independent tree-level VEV values (in vev_order)."""

    @abstractmethod
    def populate_curvature(self, store: CurvatureTensorStore) -> None:
        """Write all tree-level tensor entries into an empty store."""

    @abstractmethod
    def solve_counterterms(self, derivatives: OneLoopDerivatives) -> Dict[str, float]:
        """Closed-form counterterms from one-loop derivatives at the tree VEV."""

    @abstractmethod
    def populate_counterterm_curvature(
        self, store: CurvatureTensorStore, counterterms: CountertermParameters
    ) -> None:
        """Write the counterterm tensor entries into an empty store."""

    @abstractmethod
    def vtree_simplified(self, phi: NDArray[np.floating]) -> float:
        """Closed-form tree-level potential."""

    @abstractmethod
    def vcounter_simplified(self, phi: NDArray[np.floating]) -> float:
        """Closed-form counterterm potential."""

    def parameter_table(self) -> Dict[str, float]:
        """Lagrangian parameters for the diagnostic dump."""
        return self.parameters.as_dict()

    # =========================================================================
    # Legends
    # =========================================================================

    def legend_ct(self) -> List[str]:
        return list(self.counterterm_names)

    def legend_vev(self) -> List[str]:
        return list(self.vev_labels)

    def legend_temp(self) -> List[str]:
        return list(self.temperature_labels)

    def legend_input(self) -> List[str]:
        return list(self.input_names)

    def legend_triple_couplings(self) -> List[str]:
        """Tree/CT/CW label triple for every i <= j <= k."""
        particles = self.particle_labels or self.basis.labels()
        labels = []
        for i, j, k in itertools.combinations_with_replacement(range(self.basis.n_higgs), 3):
            name = particles[i] + particles[j] + particles[k]
            labels.extend([f"Tree_{name}", f"CT_{name}", f"CW_{name}"])
        return labels

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def reset(self) -> None:
        """Return to UNINITIALIZED, clearing all per-point data."""
        self.state = ModelState.UNINITIALIZED
        self.point: Point = None
        self.inputs = None
        self.parameters = None
        self.vev_tree = np.zeros(self.basis.n_higgs)
        self.scale = self._default_scale if self._default_scale is not None else self.constants.vev0
        self.spectrum: Optional[MassSpectrum] = None
        self.rotation: Optional[MassBasisRotation] = None
        self.derivatives: Optional[OneLoopDerivatives] = None
        self.counterterms: Optional[CountertermParameters] = None
        self.triple_couplings: Optional[TripleCouplings] = None
        self.tree.zero()
        self.counterterm.zero()

    def order_vev(self, vev: Sequence[float]) -> NDArray[np.floating]:
        """Embed the n_vev independent VEVs into a full field vector."""
        vev = np.asarray(vev, dtype=float).reshape(-1)
        if vev.size != self.basis.n_vev:
            raise ValueError(f"Expected {self.basis.n_vev} VEV values, got {vev.size}")
        full = np.zeros(self.basis.n_higgs)
        full[list(self.basis.vev_order)] = vev
        return full

    def read_and_set(self, line: str, use_index_col: bool = False, point: Point = None) -> Any:
        """
        Parse a parameter record and set the parameter point.

        Args:
            line: Whitespace-separated record.
            use_index_col: Skip a leading index column.
            point: Parameter-point label (e.g. line number).

        Returns:
            The input-parameter object.
        """
        require_state(self.state, ModelState.UNINITIALIZED, "read_and_set", point, exact=True)
        values = parse_parameter_record(line, len(self.input_names), use_index_col, point)
        inputs = self.inputs_from_record(values, point)
        self.set_gen(inputs, point=point)
        return inputs

    def set_gen(self, inputs: Any, point: Point = None) -> None:
        """Set the parameter point: Lagrangian parameters and tree VEV."""
        require_state(self.state, ModelState.UNINITIALIZED, "set_gen", point, exact=True)
        parameters = self.reparametrize(inputs, point)
        vev = self.order_vev(self.tree_vev(inputs, parameters))

        self.point = point
        self.inputs = inputs
        self.parameters = parameters
        self.vev_tree = vev
        self.state = ModelState.PARAMETERS_SET
        if self.verbose:
            print(f"  [{self.model_id}] parameters set for point {point}: {parameters}")

    def set_curvature_arrays(self) -> None:
        """Populate the tree-level tensors (no-op if already populated)."""
        if self.state >= ModelState.CURVATURE_POPULATED:
            return
        require_state(self.state, ModelState.PARAMETERS_SET, "set_curvature_arrays", self.point)
        self._populate(self.tree, lambda store: self.populate_curvature(store), "set_curvature_arrays")
        self.state = ModelState.CURVATURE_POPULATED
        if self.verbose:
            print(f"  [{self.model_id}] curvature tensors populated")

    def _populate(self, store: CurvatureTensorStore, fill: Callable, stage: str) -> None:
        store.zero()
        try:
            fill(store)
            non_finite = store.non_finite()
            if non_finite:
                raise NumericDegeneracy(
                    f"non-finite entries in {', '.join(non_finite)}", stage=stage, point=self.point
                )
            violations = store.symmetry_violations()
            if violations:
                raise ValueError(f"{stage}: asymmetric tensor entries {violations}")
        except Exception:
            store.zero()
            raise

    def _require_diagonalizable(self, stage: str) -> None:
        require_state(self.state, ModelState.CURVATURE_POPULATED, stage, self.point)
        if self.state >= ModelState.COUNTERTERMS_SET:
            raise PreconditionViolated(
                "mass basis is fixed once counterterms are set; use reset()",
                stage=stage,
                point=self.point,
            )

    def calculate_physical_couplings(self) -> MassSpectrum:
        """Diagonalize the tree-level mass matrices at the tree VEV."""
        self._require_diagonalizable("calculate_physical_couplings")
        self.spectrum = compute_mass_spectrum(self.tree, self.vev_tree)
        self.rotation = self.spectrum.rotation
        self.state = ModelState.COUPLINGS_DIAGONALIZED
        return self.spectrum

    def set_physical_couplings(
        self, rotation: Union[MassBasisRotation, NDArray[np.floating]]
    ) -> None:
        """Accept a mass-basis rotation produced elsewhere."""
        self._require_diagonalizable("set_physical_couplings")
        if not isinstance(rotation, MassBasisRotation):
            rotation = MassBasisRotation(rotation)
        if rotation.n_fields != self.basis.n_higgs:
            raise ValueError(
                f"Rotation is {rotation.n_fields}x{rotation.n_fields}, "
                f"model has {self.basis.n_higgs} scalar fields"
            )
        self.rotation = rotation
        self.state = ModelState.COUPLINGS_DIAGONALIZED

    def calc_ct(
        self,
        derivatives: Optional[OneLoopDerivatives] = None,
        derivative_engine: Optional[DerivativeEngine] = None,
    ) -> CountertermParameters:
        """
        Solve for the counterterms.

        Only legal once, directly after diagonalization; use
        reset_scale() to re-derive them at another scale.

        Args:
            derivatives: One-loop derivatives at the tree VEV. If omitted
                they are computed with ``derivative_engine``.
            derivative_engine: Callable model -> OneLoopDerivatives
                (default: Coleman-Weinberg finite differences).

        Returns:
            CountertermParameters in canonical order.
        """
        require_state(self.state, ModelState.COUPLINGS_DIAGONALIZED, "calc_ct", self.point, exact=True)
        return self._solve_counterterms(derivatives, derivative_engine)

    def _solve_counterterms(
        self,
        derivatives: Optional[OneLoopDerivatives],
        derivative_engine: Optional[DerivativeEngine],
    ) -> CountertermParameters:
        if derivatives is None:
            engine = derivative_engine if derivative_engine is not None else coleman_weinberg_derivatives
            derivatives = engine(self)
        counterterms = CountertermSolver(self).solve(derivatives, point=self.point)
        self.derivatives = derivatives
        return counterterms

    def set_ct_pot_par(
        self, counterterms: Union[CountertermParameters, Mapping[str, float], Sequence[float]]
    ) -> None:
        """Store the counterterms and populate the counterterm tensors."""
        require_state(
            self.state, ModelState.COUPLINGS_DIAGONALIZED, "set_ct_pot_par", self.point, exact=True
        )
        self._install_counterterms(counterterms, "set_ct_pot_par")

    def _install_counterterms(
        self,
        counterterms: Union[CountertermParameters, Mapping[str, float], Sequence[float]],
        stage: str,
    ) -> None:
        # Built into a fresh store; the model is only touched on success
        if isinstance(counterterms, CountertermParameters):
            if counterterms.names != self.counterterm_names:
                raise ValueError(
                    f"Counterterm order {counterterms.names} does not match "
                    f"{self.counterterm_names}"
                )
        elif isinstance(counterterms, Mapping):
            counterterms = CountertermParameters.from_mapping(self.counterterm_names, counterterms)
        else:
            counterterms = CountertermParameters(self.counterterm_names, counterterms)
        if not np.all(np.isfinite(counterterms.values)):
            bad = [name for name, v in counterterms.items() if not np.isfinite(v)]
            raise NumericDegeneracy(
                f"non-finite counterterms: {', '.join(bad)}", stage=stage, point=self.point
            )

        store = CurvatureTensorStore(self.basis)
        self._populate(
            store,
            lambda s: self.populate_counterterm_curvature(s, counterterms),
            stage,
        )
        self.counterterm = store
        self.counterterms = counterterms
        self.triple_couplings = None
        self.state = ModelState.COUNTERTERMS_SET
        if self.verbose:
            print(f"  [{self.model_id}] counterterms set: {counterterms}")

    def default_higgs_order(self) -> Tuple[int, ...]:
        """Eigenstate order for triple couplings (mass order by default)."""
        return tuple(range(self.basis.n_higgs))

    def triple_higgs_couplings(
        self,
        third_derivative: Optional[NDArray[np.floating]] = None,
        higgs_order: Optional[Sequence[int]] = None,
    ) -> TripleCouplings:
        """
        Tree, counterterm and one-loop triple couplings in the mass basis.

        Args:
            third_derivative: One-loop third derivatives in the field basis.
                Defaults to the stored one-loop derivatives, or a fresh
                Coleman-Weinberg evaluation if none carry them.
            higgs_order: Eigenstate order (default: default_higgs_order()).
        """
        require_state(self.state, ModelState.COUNTERTERMS_SET, "triple_higgs_couplings", self.point)
        if third_derivative is None:
            if self.derivatives is not None and self.derivatives.third is not None:
                third_derivative = self.derivatives.third
            else:
                third_derivative = coleman_weinberg_derivatives(self, third=True).third

        tree = TensorPotential(self.tree).third_derivative(self.vev_tree)
        ct = TensorPotential(self.counterterm).third_derivative(self.vev_tree)
        order = self.default_higgs_order() if higgs_order is None else higgs_order
        rotator = TripleCouplingRotator(self.rotation, order)
        self.triple_couplings = rotator.rotate_all(tree, ct, third_derivative)
        self.state = ModelState.COUPLINGS_ROTATED
        return self.triple_couplings

    def init_model(
        self,
        line: str,
        derivative_engine: Optional[DerivativeEngine] = None,
        use_index_col: bool = False,
        point: Point = None,
    ) -> Tuple[Any, CountertermParameters]:
        """
        Set a parameter point and renormalize it in one call.

        Returns:
            (Lagrangian parameters, counterterms).
        """
        self.read_and_set(line, use_index_col=use_index_col, point=point)
        self.set_curvature_arrays()
        self.calculate_physical_couplings()
        counterterms = self.calc_ct(derivative_engine=derivative_engine)
        self.set_ct_pot_par(counterterms)
        return self.parameters, counterterms

    def reset_scale(
        self,
        scale: float,
        derivative_engine: Optional[DerivativeEngine] = None,
    ) -> CountertermParameters:
        """
        Change the renormalization scale and re-derive the counterterms.

        Rotated couplings become stale; the model returns to COUNTERTERMS_SET.
        On failure the previous scale, derivatives and counterterms are kept.
        """
        require_state(self.state, ModelState.COUNTERTERMS_SET, "reset_scale", self.point)
        if not scale > 0:
            raise ValueError(f"Renormalization scale must be positive, got {scale}")
        previous_scale, previous_derivatives = self.scale, self.derivatives
        self.scale = float(scale)
        try:
            counterterms = self._solve_counterterms(None, derivative_engine)
            self._install_counterterms(counterterms, "reset_scale")
        except Exception:
            self.scale, self.derivatives = previous_scale, previous_derivatives
            raise
        return counterterms

    def get_scale(self) -> float:
        return self.scale

    def write(self) -> str:
        """Diagnostic summary of the parameter point (printed if verbose)."""
        require_state(self.state, ModelState.PARAMETERS_SET, "write", self.point)
        text = format_model_summary(self)
        if self.verbose:
            print(text)
        return text

    # =========================================================================
    # Evaluation helpers
    # =========================================================================

    def vtree(self, phi: NDArray[np.floating]) -> float:
        """Tree-level potential by tensor contraction."""
        require_state(self.state, ModelState.CURVATURE_POPULATED, "vtree", self.point)
        return TensorPotential(self.tree)(phi)

    def vcounter(self, phi: NDArray[np.floating]) -> float:
        """Counterterm potential by tensor contraction."""
        require_state(self.state, ModelState.COUNTERTERMS_SET, "vcounter", self.point)
        return TensorPotential(self.counterterm)(phi)

