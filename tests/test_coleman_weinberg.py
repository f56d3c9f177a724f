"""
Tests for the one-loop potential and finite-difference derivatives.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from curvature_solver.potentials.coleman_weinberg import (
    C_FERMION,
    C_GAUGE,
    IR_CUTOFF,
    ColemanWeinbergPotential,
    coleman_weinberg_derivatives,
    cw_function,
)
from curvature_solver.potentials.finite_difference import FiniteDifferenceDerivatives
from curvature_solver.potentials.polynomial import TensorPotential

PREFACTOR = 1.0 / (64.0 * np.pi**2)


def cw_sum(masses_squared, scale, c):
    m2 = np.asarray(masses_squared, dtype=float)
    return np.sum(m2**2 * (np.log(m2 / scale**2) - c))


@pytest.mark.unit
class TestCWFunction:
    """Test the single-sector sum."""

    def test_at_scale(self):
        """log term vanishes for m = μ."""
        assert_allclose(cw_function([100.0**2], 100.0, 1.5), -1.5 * 100.0**4)

    def test_below_cutoff_ignored(self):
        assert cw_function([0.0, IR_CUTOFF / 2, -IR_CUTOFF / 2], 100.0, 1.5) == 0.0

    def test_negative_mass_squared_uses_absolute_value(self):
        assert_allclose(cw_function([-50.0**2], 100.0, 1.5), cw_function([50.0**2], 100.0, 1.5))

    def test_invalid_scale(self, populated_model):
        with pytest.raises(ValueError):
            ColemanWeinbergPotential(populated_model.tree, scale=0.0)


@pytest.mark.unit
class TestColemanWeinbergPotential:
    """Test sector contributions at the tree VEV."""

    @pytest.fixture
    def potential(self, populated_model):
        return ColemanWeinbergPotential(populated_model.tree, scale=populated_model.scale)

    def test_sectors(self, potential, populated_model):
        contributions = potential.contributions(populated_model.vev_tree)
        assert set(contributions) == {"scalar", "gauge", "quark", "lepton"}
        assert_allclose(potential(populated_model.vev_tree), sum(contributions.values()))

    def test_gauge_sector(self, potential, populated_model):
        constants = populated_model.constants
        ratio = 246.0 / constants.vev0
        masses_squared = [
            (constants.mass_W * ratio) ** 2,
            (constants.mass_W * ratio) ** 2,
            (constants.mass_Z * ratio) ** 2,
            1000.0**2,
        ]
        expected = 3.0 * PREFACTOR * cw_sum(masses_squared, potential.scale, C_GAUGE)
        gauge = potential.contributions(populated_model.vev_tree)["gauge"]

        assert_allclose(gauge, expected, rtol=1e-8)

    def test_quark_sector(self, potential, populated_model):
        """Each quark flavour appears twice in M M†, weight -2 N_c."""
        constants = populated_model.constants
        flavours = np.concatenate([constants.up_type_masses, constants.down_type_masses])
        masses_squared = np.repeat(flavours, 2) ** 2
        expected = -6.0 * PREFACTOR * cw_sum(masses_squared, potential.scale, C_FERMION)
        quark = potential.contributions(populated_model.vev_tree)["quark"]

        assert_allclose(quark, expected, rtol=1e-8)

    def test_scalar_sector(self, potential, populated_model):
        expected = PREFACTOR * cw_sum([95.0**2, 650.0**2], potential.scale, 1.5)
        scalar = potential.contributions(populated_model.vev_tree)["scalar"]

        assert_allclose(scalar, expected, rtol=1e-6)

    def test_origin_has_only_scalar_contribution(self, potential):
        contributions = potential.contributions(np.zeros(6))
        assert contributions["gauge"] == 0.0
        assert contributions["quark"] == 0.0
        assert contributions["lepton"] == 0.0
        assert contributions["scalar"] != 0.0


@pytest.mark.unit
class TestFiniteDifferences:
    """Test the finite-difference stencils."""

    def test_exact_for_quadratic(self):
        A = np.array([[2.0, 0.5, 0.0], [0.5, 1.0, -0.3], [0.0, -0.3, 4.0]])
        b = np.array([1.0, -2.0, 0.5])
        engine = FiniteDifferenceDerivatives(lambda x: 0.5 * x @ A @ x + b @ x, step=0.1)
        x = np.array([0.3, -1.2, 2.0])

        assert_allclose(engine.gradient(x), A @ x + b, rtol=1e-9)
        assert_allclose(engine.hessian(x), A, rtol=1e-8, atol=1e-8)

    def test_third_derivative_exact_for_quartic(self, populated_model):
        potential = TensorPotential(populated_model.tree)
        engine = FiniteDifferenceDerivatives(potential, step=1.0)
        phi = np.array([10.0, -5.0, 120.0, 3.0, 90.0, -20.0])

        assert_allclose(
            engine.third_derivative(phi), potential.third_derivative(phi), rtol=1e-6, atol=1e-4
        )

    def test_third_derivative_symmetric(self):
        engine = FiniteDifferenceDerivatives(lambda x: x[0] ** 2 * x[1] + x[1] * x[2] ** 2, step=0.5)
        third = engine.third_derivative(np.array([1.0, 2.0, 3.0]))

        assert_allclose(third[0, 0, 1], 2.0, atol=1e-10)
        assert_allclose(third[1, 0, 0], 2.0, atol=1e-10)
        assert_allclose(third[2, 1, 2], 2.0, atol=1e-10)
        assert_allclose(third[0, 1, 2], 0.0, atol=1e-10)

    def test_invalid_step(self):
        with pytest.raises(ValueError):
            FiniteDifferenceDerivatives(lambda x: 0.0, step=0.0)

    def test_evaluate_without_third(self):
        engine = FiniteDifferenceDerivatives(lambda x: float(x @ x))
        result = engine.evaluate(np.ones(2), third=False, scale=80.0)

        assert result.third is None
        assert result.scale == 80.0
        assert_allclose(result.hessian, 2 * np.eye(2), rtol=1e-8)


@pytest.mark.unit
class TestOneLoopDerivatives:
    """Test Coleman-Weinberg derivatives at the tree VEV."""

    def test_shapes(self, populated_model):
        derivatives = coleman_weinberg_derivatives(populated_model, third=False)

        assert derivatives.gradient.shape == (6,)
        assert derivatives.hessian.shape == (6, 6)
        assert derivatives.third is None
        assert derivatives.scale == populated_model.scale
        assert_allclose(derivatives.hessian, derivatives.hessian.T)
        assert np.all(np.isfinite(derivatives.hessian))

    def test_goldstone_directions_have_no_tadpole(self, populated_model):
        """The potential is even in φ0, φ1, φ3 and φ5 around the VEV."""
        gradient = coleman_weinberg_derivatives(populated_model, third=False).gradient
        scale = np.abs(gradient).max()
        assert_allclose(gradient[[0, 1, 3, 5]], 0.0, atol=1e-6 * scale)

    def test_scale_dependence(self, populated_model):
        low = coleman_weinberg_derivatives(populated_model, third=False)
        populated_model.scale = 2 * populated_model.scale
        high = coleman_weinberg_derivatives(populated_model, third=False)

        assert not np.allclose(low.gradient[2], high.gradient[2])
