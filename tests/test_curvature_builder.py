"""
Tests for tree-level curvature tensor population of the vector dark
matter model.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from curvature_solver.core.lifecycle import ModelState
from curvature_solver.potentials.finite_difference import FiniteDifferenceDerivatives
from curvature_solver.potentials.polynomial import TensorPotential


@pytest.mark.unit
class TestScalarTensors:
    """Test the scalar-potential tensors."""

    def test_all_tensors_symmetric(self, populated_model):
        assert populated_model.tree.symmetry_violations() == {}

    def test_state(self, populated_model):
        assert populated_model.state == ModelState.CURVATURE_POPULATED

    def test_quadratic_entries(self, populated_model):
        """L2 is -μ² on the diagonal of each block."""
        p = populated_model.parameters
        L2 = populated_model.tree.L2.array

        for i in (0, 1, 2, 3):
            assert_allclose(L2[i, i], -p.muHSq)
        for i in (4, 5):
            assert_allclose(L2[i, i], -p.muSSq)
        assert np.count_nonzero(L2 - np.diag(np.diag(L2))) == 0

    def test_quartic_entries(self, populated_model):
        p = populated_model.parameters
        L4 = populated_model.tree.L4

        assert_allclose(L4[(2, 2, 2, 2)], 6 * p.lambdaH)
        assert_allclose(L4[(0, 2, 0, 2)], 2 * p.lambdaH)
        assert_allclose(L4[(4, 4, 4, 4)], 6 * p.lambdaS)
        assert_allclose(L4[(4, 5, 5, 4)], 2 * p.lambdaS)
        assert_allclose(L4[(2, 4, 4, 2)], p.kappa)
        assert_allclose(L4[(1, 1, 5, 5)], p.kappa)
        assert L4[(2, 2, 2, 4)] == 0.0

    def test_no_linear_or_cubic_terms(self, populated_model):
        assert not np.any(populated_model.tree.L1.data)
        assert not np.any(populated_model.tree.L3.data)

    def test_tensor_matches_closed_form(self, populated_model):
        rng = np.random.default_rng(11)
        for _ in range(5):
            phi = rng.normal(0.0, 300.0, 6)
            assert_allclose(
                populated_model.vtree(phi),
                populated_model.vtree_simplified(phi),
                rtol=1e-10, atol=1e-2,
            )

    def test_vev_is_stationary(self, populated_model):
        gradient = TensorPotential(populated_model.tree).gradient(populated_model.vev_tree)
        assert_allclose(gradient, 0.0, atol=1e-5)

    def test_vev_embedding(self, populated_model):
        assert_allclose(populated_model.vev_tree, [0, 0, 246.0, 0, 1000.0, 0])

    def test_repeated_population_is_noop(self, populated_model):
        before = populated_model.tree.copy()
        populated_model.set_curvature_arrays()

        assert populated_model.state == ModelState.CURVATURE_POPULATED
        for name, tensor in populated_model.tree.tensors().items():
            assert_allclose(tensor.data, before.tensors()[name].data)

    def test_hessian_matches_finite_differences(self, populated_model):
        phi = np.array([30.0, -20.0, 150.0, 10.0, 80.0, -40.0])
        potential = TensorPotential(populated_model.tree)
        numeric = FiniteDifferenceDerivatives(potential, step=1e-2).hessian(phi)

        assert_allclose(numeric, potential.hessian(phi), rtol=1e-6, atol=1e-2)


@pytest.mark.unit
class TestTreeSpectrum:
    """Test masses from the populated tensors at the tree VEV."""

    def test_higgs_masses(self, diagonalized_model):
        spectrum = diagonalized_model.spectrum

        assert_allclose(spectrum.higgs[:4], 0.0, atol=1e-6)
        assert_allclose(spectrum.higgs_masses[4:], [95.0, 650.0], rtol=1e-8)

    def test_gauge_masses(self, diagonalized_model):
        """W and Z scale with v/v_0; M_X = g_X v_s."""
        constants = diagonalized_model.constants
        ratio = 246.0 / constants.vev0
        mw, mz = constants.mass_W * ratio, constants.mass_Z * ratio
        expected = [0.0, mw**2, mw**2, mz**2, 1000.0**2]

        assert_allclose(diagonalized_model.spectrum.gauge, expected, rtol=1e-10, atol=1e-6)

    def test_quark_masses(self, diagonalized_model):
        constants = diagonalized_model.constants
        flavours = np.concatenate([constants.up_type_masses, constants.down_type_masses])
        expected = np.sort(np.repeat(flavours, 2))

        assert_allclose(np.sort(diagonalized_model.spectrum.quark_masses), expected, rtol=1e-8)

    def test_lepton_masses(self, diagonalized_model):
        """Three massless neutrinos, each charged lepton twice."""
        constants = diagonalized_model.constants
        expected = np.sort(np.concatenate([
            np.zeros(3), np.repeat(constants.charged_lepton_masses, 2)
        ]))

        assert_allclose(diagonalized_model.spectrum.lepton, expected**2, rtol=1e-8, atol=1e-12)

    def test_rotation_diagonalizes(self, diagonalized_model):
        rotation = diagonalized_model.rotation
        M = TensorPotential(diagonalized_model.tree).hessian(diagonalized_model.vev_tree)
        diagonal = rotation.rotate_matrix(M)

        assert_allclose(diagonal, np.diag(rotation.masses_squared), atol=1e-6)

    def test_state(self, diagonalized_model):
        assert diagonalized_model.state == ModelState.COUPLINGS_DIAGONALIZED


@pytest.mark.unit
class TestGaugeAndYukawaTensors:
    """Test the G2H2 and F2H1 tensors."""

    def test_dark_vector_entries(self, populated_model):
        gauge = populated_model.tree.gauge
        assert_allclose(gauge[(4, 4, 4, 4)], 2.0)
        assert_allclose(gauge[(4, 4, 5, 5)], 2.0)
        assert gauge[(4, 4, 2, 2)] == 0.0

    def test_hidden_scalar_has_no_sm_gauge_coupling(self, populated_model):
        gauge = populated_model.tree.gauge.array
        assert not np.any(gauge[:4, :4, 4:, :])
        assert not np.any(gauge[:4, :4, :, 4:])

    def test_yukawas_do_not_touch_hidden_scalar(self, populated_model):
        assert not np.any(populated_model.tree.quark.array[:, :, 4:])
        assert not np.any(populated_model.tree.lepton.array[:, :, 4:])

    def test_quark_tensor_is_complex(self, populated_model):
        assert np.any(np.abs(populated_model.tree.quark.array.imag) > 0)
