"""
Tests for mass matrices and mass-basis rotations.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from curvature_solver.analysis.mass_spectrum import (
    MassBasisRotation,
    MassSpectrum,
    diagonalize_mass_matrix,
    fermion_masses_squared,
    higgs_mass_matrix,
)


@pytest.mark.unit
class TestDiagonalization:
    """Test diagonalize_mass_matrix."""

    def test_two_by_two(self):
        M = np.array([[2.0, 1.0], [1.0, 2.0]])
        rotation = diagonalize_mass_matrix(M)

        assert_allclose(rotation.masses_squared, [1.0, 3.0])
        assert_allclose(rotation.rotate_matrix(M), np.diag([1.0, 3.0]), atol=1e-12)

    def test_rows_are_eigenvectors(self):
        M = np.array([[5.0, 0.0], [0.0, 1.0]])
        rotation = diagonalize_mass_matrix(M)
        assert_allclose(np.abs(rotation.matrix), [[0.0, 1.0], [1.0, 0.0]])

    def test_asymmetric_rejected(self):
        with pytest.raises(ValueError):
            diagonalize_mass_matrix(np.array([[1.0, 2.0], [0.0, 1.0]]))

    def test_non_square_rejected(self):
        with pytest.raises(ValueError):
            diagonalize_mass_matrix(np.zeros((2, 3)))


@pytest.mark.unit
class TestMassBasisRotation:
    """Test the rotation container."""

    def test_non_orthogonal_rejected(self):
        with pytest.raises(ValueError):
            MassBasisRotation(np.array([[1.0, 1.0], [0.0, 1.0]]))

    def test_reordered(self):
        rotation = MassBasisRotation(np.eye(3), masses_squared=[1.0, 2.0, 3.0])
        swapped = rotation.reordered((2, 1, 0))

        assert_allclose(swapped.masses_squared, [3.0, 2.0, 1.0])
        assert_allclose(swapped.matrix, np.eye(3)[::-1])

    def test_reordered_needs_permutation(self):
        with pytest.raises(ValueError):
            MassBasisRotation(np.eye(3)).reordered((0, 1))

    def test_mass_count(self):
        with pytest.raises(ValueError):
            MassBasisRotation(np.eye(2), masses_squared=[1.0])


@pytest.mark.unit
class TestMassMatrices:
    """Test the field-dependent mass matrices."""

    def test_loop_hessian_is_added(self, populated_model):
        phi = populated_model.vev_tree
        loop = np.diag(np.arange(6, dtype=float))
        base = higgs_mass_matrix(populated_model.tree, phi)
        shifted = higgs_mass_matrix(populated_model.tree, phi, loop_hessian=loop)

        assert_allclose(shifted - base, loop)

    def test_origin_mass_matrix(self, populated_model):
        p = populated_model.parameters
        M = higgs_mass_matrix(populated_model.tree, np.zeros(6))
        assert_allclose(np.diag(M), [-p.muHSq] * 4 + [-p.muSSq] * 2)

    def test_fermion_masses_of_empty_matrix(self):
        assert fermion_masses_squared(np.zeros((0, 0))).size == 0

    def test_fermion_masses_of_complex_matrix(self):
        M = np.array([[0.0, 2.0j], [2.0j, 0.0]])
        assert_allclose(fermion_masses_squared(M), [4.0, 4.0])

    def test_spectrum_masses(self):
        spectrum = MassSpectrum(
            higgs=np.array([-4.0, 9.0]),
            gauge=np.array([16.0]),
            quark=np.zeros(0),
            lepton=np.array([1.0]),
        )
        assert_allclose(spectrum.higgs_masses, [2.0, 3.0])
        assert_allclose(spectrum.gauge_masses, [4.0])
