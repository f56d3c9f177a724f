"""
Vector dark matter model.

SM Higgs doublet H plus a complex scalar S charged under a hidden U(1)
with coupling g_X. S breaks the hidden U(1), giving the vector X the
mass M_X = g_X v_s.

    V = -μ_H²|H|² + λ_H|H|⁴ - μ_S²|S|² + λ_S|S|⁴ + κ|H|²|S|²

    |H|² = (φ0² + φ1² + φ2² + φ3²)/2,   |S|² = (φ4² + φ5²)/2

VEVs: <φ2> = v, <φ4> = v_s. The CP-even states φ2, φ4 mix through κ
into the mass eigenstates H1, H2 with mixing angle α.

Input record: MH1, MH2, alpha, v, MX, gX.
"""

import warnings
import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple, Union

from curvature_solver.core.derivatives import OneLoopDerivatives
from curvature_solver.core.errors import InvalidParameterPoint, require_nonzero
from curvature_solver.core.lifecycle import ModelState, require_state
from curvature_solver.core.parameters import CountertermParameters
from curvature_solver.core.tensors import CurvatureTensorStore, FieldBasis
from curvature_solver.models.base import PotentialModel
from curvature_solver.models.sm_sector import (
    N_LEPTONS,
    N_QUARKS,
    fill_sm_gauge,
    fill_sm_leptons,
    fill_sm_quarks,
)

HIGGS_DOUBLET = (0, 1, 2, 3)
HIDDEN_SCALAR = (4, 5)
X_BOSON = 4

# Relative deviation of the input v from the SM VEV that triggers a warning
VEV_WARNING_TOLERANCE = 0.01


@dataclass(frozen=True)
class VDMInputs:
    """
    Physical input parameters.

    Attributes:
        MH1, MH2: CP-even scalar masses (GeV).
        alpha: Scalar mixing angle (rad).
        v: Electroweak VEV (GeV).
        MX: Dark vector mass (GeV).
        gX: Hidden U(1) gauge coupling.
    """
    MH1: float
    MH2: float
    alpha: float
    v: float
    MX: float
    gX: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class VDMLagrangianParameters:
    """Lagrangian parameters and VEVs derived from VDMInputs."""
    muHSq: float
    lambdaH: float
    muSSq: float
    lambdaS: float
    kappa: float
    v: float
    vs: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def reparametrize(
    inputs: VDMInputs,
    point: Optional[Union[int, str]] = None,
) -> VDMLagrangianParameters:
    """
    Lagrangian parameters from physical inputs.

    Inverts M = R(α) diag(m1², m2²) R(α)^T for the CP-even mass matrix
    M = [[2λ_H v², κ v v_s], [κ v v_s, 2λ_S v_s²]], then fixes μ_H², μ_S²
    from the tadpole conditions.

    Raises:
        NumericDegeneracy: v, g_X or v_s at or below the numerical floor.
        InvalidParameterPoint: Non-finite input, or non-positive mass, VEV or coupling.
    """
    stage = "set_gen"
    for name, value in inputs.as_dict().items():
        if not np.isfinite(value):
            raise InvalidParameterPoint(f"{name} must be finite, got {value}", stage=stage, point=point)
    for name in ("MH1", "MH2", "MX"):
        value = getattr(inputs, name)
        if not value > 0:
            raise InvalidParameterPoint(f"{name} must be positive, got {value}", stage=stage, point=point)

    require_nonzero(inputs.v, "v", stage=stage, point=point)
    if inputs.v < 0:
        raise InvalidParameterPoint(f"v must be positive, got {inputs.v}", stage=stage, point=point)
    require_nonzero(inputs.gX, "gX", stage=stage, point=point)
    if inputs.gX < 0:
        raise InvalidParameterPoint(f"gX must be positive, got {inputs.gX}", stage=stage, point=point)

    v = inputs.v
    vs = require_nonzero(inputs.MX / inputs.gX, "vs = MX/gX", stage=stage, point=point)

    m1sq, m2sq = inputs.MH1**2, inputs.MH2**2
    c, s = np.cos(inputs.alpha), np.sin(inputs.alpha)

    lambdaH = (m1sq * c**2 + m2sq * s**2) / (2 * v**2)
    lambdaS = (m2sq * c**2 + m1sq * s**2) / (2 * vs**2)
    kappa = (m1sq - m2sq) * s * c / (v * vs)
    muHSq = lambdaH * v**2 + kappa * vs**2 / 2
    muSSq = lambdaS * vs**2 + kappa * v**2 / 2

    return VDMLagrangianParameters(
        muHSq=float(muHSq),
        lambdaH=float(lambdaH),
        muSSq=float(muSSq),
        lambdaS=float(lambdaS),
        kappa=float(kappa),
        v=float(v),
        vs=float(vs),
    )


def cp_even_mass_matrix(parameters: VDMLagrangianParameters) -> NDArray[np.floating]:
    """2x2 CP-even mass matrix in the (φ2, φ4) subspace at the VEV."""
    p = parameters
    off = p.kappa * p.v * p.vs
    return np.array([
        [2 * p.lambdaH * p.v**2, off],
        [off, 2 * p.lambdaS * p.vs**2],
    ])


def _fill_scalar_potential(
    store: CurvatureTensorStore,
    muHSq: float,
    lambdaH: float,
    muSSq: float,
    lambdaS: float,
    kappa: float,
    tadpoles: Optional[Tuple[float, ...]] = None,
) -> None:
    """Scalar tensors of -μ_H²|H|² + λ_H|H|⁴ - μ_S²|S|² + λ_S|S|⁴ + κ|H|²|S|² (+ T_i φ_i)."""
    for block, musq, lam in ((HIGGS_DOUBLET, muHSq, lambdaH), (HIDDEN_SCALAR, muSSq, lambdaS)):
        for a, i in enumerate(block):
            store.L2.set_from_monomial((i, i), -musq / 2)
            store.L4.set_from_monomial((i, i, i, i), lam / 4)
            for j in block[a + 1:]:
                store.L4.set_from_monomial((i, i, j, j), lam / 2)

    for i in HIGGS_DOUBLET:
        for j in HIDDEN_SCALAR:
            store.L4.set_from_monomial((i, i, j, j), kappa / 4)

    if tadpoles is not None:
        for i, value in enumerate(tadpoles):
            store.L1.set_from_monomial((i,), value)


def _closed_form_potential(phi, muHSq, lambdaH, muSSq, lambdaS, kappa) -> float:
    phi = np.asarray(phi, dtype=float).reshape(-1)
    h2 = 0.5 * np.sum(phi[list(HIGGS_DOUBLET)] ** 2)
    s2 = 0.5 * np.sum(phi[list(HIDDEN_SCALAR)] ** 2)
    return float(-muHSq * h2 + lambdaH * h2**2 - muSSq * s2 + lambdaS * s2**2 + kappa * h2 * s2)


class VectorDarkMatterModel(PotentialModel):
    """
    SM + complex hidden scalar + dark U(1) vector.

    Field basis: φ0, φ1 (charged doublet components), φ2, φ3 (neutral
    doublet components), φ4, φ5 (hidden scalar); gauge bosons W¹, W², W³,
    B, X; 12 quark and 9 lepton indices.
    """

    model_id = "vdm"
    input_names = ("MH1", "MH2", "alpha", "v", "MX", "gX")
    counterterm_names = (
        "dmuHSq", "dlambdaH", "dmuSSq", "dlambdaS", "dkappa",
        "dT1", "dT2", "dT3", "dT4", "dT5", "dT6",
    )
    vev_labels = ("omega", "omega_s")
    temperature_labels = ("T_c", "v_c", "omega_c/T_c", "omega_c", "omega_sc")
    # Positional labels in ascending mass order. The four Goldstones are
    # massless at tree level, so eigh picks an arbitrary basis of that
    # subspace: G+, G-, G0, GX name slots in it, not charge eigenstates.
    particle_labels = ("G+", "G-", "G0", "GX", "H1", "H2")

    def field_basis(self) -> FieldBasis:
        return FieldBasis(
            n_neutral=4,
            n_charged=2,
            n_gauge=5,
            n_quarks=N_QUARKS,
            n_leptons=N_LEPTONS,
            vev_order=(2, 4),
            higgs_labels=("rho_1", "eta_1", "zeta_1", "psi_1", "zeta_s", "psi_s"),
        )

    def inputs_from_record(self, values, point=None) -> VDMInputs:
        return VDMInputs(*(float(x) for x in values))

    def reparametrize(self, inputs: VDMInputs, point=None) -> VDMLagrangianParameters:
        parameters = reparametrize(inputs, point=point)
        vev0 = self.constants.vev0
        if abs(inputs.v - vev0) > VEV_WARNING_TOLERANCE * vev0:
            warnings.warn(
                f"[vdm, point {point}] input v = {inputs.v} GeV differs from the SM value "
                f"{vev0:.4f} GeV; gauge and Yukawa couplings still use M_W, M_Z and v_0"
            )
        return parameters

    def tree_vev(self, inputs: VDMInputs, parameters: VDMLagrangianParameters) -> NDArray[np.floating]:
        return np.array([parameters.v, parameters.vs])

    def populate_curvature(self, store: CurvatureTensorStore) -> None:
        p: VDMLagrangianParameters = self.parameters
        _fill_scalar_potential(store, p.muHSq, p.lambdaH, p.muSSq, p.lambdaS, p.kappa)

        fill_sm_gauge(store.gauge, self.constants.g, self.constants.gs, HIGGS_DOUBLET)
        gX = self.inputs.gX
        for i in HIDDEN_SCALAR:
            store.gauge.set_symmetric((X_BOSON, X_BOSON, i, i), 2 * gX**2)

        fill_sm_quarks(store.quark, self.constants, p.v, HIGGS_DOUBLET)
        fill_sm_leptons(store.lepton, self.constants, p.v, HIGGS_DOUBLET)

    def solve_counterterms(self, derivatives: OneLoopDerivatives) -> Dict[str, float]:
        H = derivatives.hessian
        N = derivatives.gradient
        v, vs = self.parameters.v, self.parameters.vs

        result = {
            "dmuHSq": -H[2, 2] / 2 - H[2, 4] * vs / (2 * v) + 3 * H[3, 3] / 2,
            "dlambdaH": (H[3, 3] - H[2, 2]) / (2 * v**2),
            "dmuSSq": -H[2, 4] * v / (2 * vs) - H[4, 4] / 2 + 3 * H[5, 5] / 2,
            "dlambdaS": (H[5, 5] - H[4, 4]) / (2 * vs**2),
            "dkappa": -H[2, 4] / (v * vs),
        }
        for i in range(6):
            result[f"dT{i + 1}"] = -N[i]
        # CP-even tadpoles absorb the Goldstone mass shift
        result["dT3"] = H[3, 3] * v - N[2]
        result["dT5"] = H[5, 5] * vs - N[4]
        return result

    def populate_counterterm_curvature(
        self, store: CurvatureTensorStore, counterterms: CountertermParameters
    ) -> None:
        ct = counterterms
        _fill_scalar_potential(
            store,
            ct["dmuHSq"], ct["dlambdaH"], ct["dmuSSq"], ct["dlambdaS"], ct["dkappa"],
            tadpoles=tuple(ct[f"dT{i + 1}"] for i in range(6)),
        )

    def vtree_simplified(self, phi) -> float:
        require_state(self.state, ModelState.PARAMETERS_SET, "vtree_simplified", self.point)
        p = self.parameters
        return _closed_form_potential(phi, p.muHSq, p.lambdaH, p.muSSq, p.lambdaS, p.kappa)

    def vcounter_simplified(self, phi) -> float:
        require_state(self.state, ModelState.COUNTERTERMS_SET, "vcounter_simplified", self.point)
        ct = self.counterterms
        phi = np.asarray(phi, dtype=float).reshape(-1)
        tadpoles = np.array([ct[f"dT{i + 1}"] for i in range(6)])
        return _closed_form_potential(
            phi, ct["dmuHSq"], ct["dlambdaH"], ct["dmuSSq"], ct["dlambdaS"], ct["dkappa"]
        ) + float(tadpoles @ phi)

    def cp_even_masses(self) -> Tuple[float, float]:
        """Ascending CP-even masses from the reconstructed 2x2 mass matrix."""
        require_state(self.state, ModelState.PARAMETERS_SET, "cp_even_masses", self.point)
        eigenvalues = np.linalg.eigvalsh(cp_even_mass_matrix(self.parameters))
        return tuple(float(x) for x in np.sqrt(np.abs(eigenvalues)))
