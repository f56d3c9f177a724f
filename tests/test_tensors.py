"""
Tests for curvature tensors and tensor stores.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from curvature_solver.core.tensors import CurvatureTensor, CurvatureTensorStore, FieldBasis


@pytest.mark.unit
class TestOffsets:
    """Test row-major offset bookkeeping."""

    def test_strides(self):
        t = CurvatureTensor((2, 3, 4), symmetry_groups=((0,), (1,), (2,)))
        assert t.strides == (12, 4, 1)
        assert t.size == 24

    def test_offset(self):
        t = CurvatureTensor((2, 3, 4), symmetry_groups=((0,), (1,), (2,)))
        assert t.offset((1, 2, 3)) == 23
        assert t.offset((0, 0, 0)) == 0

    def test_offset_matches_shaped_view(self):
        t = CurvatureTensor((3, 3))
        t[(1, 2)] = 7.0
        assert t.array[1, 2] == 7.0
        assert t.data[t.offset((1, 2))] == 7.0

    def test_rank_one_integer_index(self):
        t = CurvatureTensor((4,))
        t[2] = 1.5
        assert t[2] == 1.5
        assert t[(2,)] == 1.5

    def test_index_out_of_range(self):
        t = CurvatureTensor((3, 3))
        with pytest.raises(IndexError):
            t.offset((0, 3))

    def test_wrong_index_length(self):
        t = CurvatureTensor((3, 3))
        with pytest.raises(ValueError):
            t.offset((0, 1, 2))


@pytest.mark.unit
class TestSymmetricWrites:
    """Test symmetric assignment and multiplicities."""

    def test_set_symmetric_writes_all_permutations(self):
        t = CurvatureTensor((3, 3, 3))
        t.set_symmetric((0, 1, 2), 5.0)

        assert np.count_nonzero(t.data) == 6
        for perm in [(0, 1, 2), (0, 2, 1), (1, 0, 2), (1, 2, 0), (2, 0, 1), (2, 1, 0)]:
            assert t[perm] == 5.0

    def test_multiplicity(self):
        t = CurvatureTensor((3, 3, 3, 3))
        assert t.multiplicity((0, 0, 0, 0)) == 1
        assert t.multiplicity((0, 0, 1, 1)) == 6
        assert t.multiplicity((0, 0, 0, 1)) == 4
        assert t.multiplicity((0, 1, 2, 2)) == 12
        assert t.multiplicity((0, 1, 2, 0)) == len(t.permutations((0, 1, 2, 0)))

    def test_set_from_monomial(self):
        """Tensor entry is the derivative of the monomial."""
        t = CurvatureTensor((2, 2, 2, 2))
        t.set_from_monomial((0, 0, 0, 0), 0.25)
        t.set_from_monomial((0, 0, 1, 1), 0.5)

        assert_allclose(t[(0, 0, 0, 0)], 6.0)
        assert_allclose(t[(1, 0, 1, 0)], 2.0)

    def test_set_from_monomial_rank_two(self):
        t = CurvatureTensor((2, 2))
        t.set_from_monomial((1, 1), -3.0)
        t.set_from_monomial((0, 1), 2.0)
        assert_allclose(t[(1, 1)], -6.0)
        assert_allclose(t[(1, 0)], 2.0)

    def test_set_from_monomial_needs_full_symmetry(self):
        t = CurvatureTensor((2, 2, 3), symmetry_groups=((0, 1), (2,)))
        with pytest.raises(ValueError):
            t.set_from_monomial((0, 1, 2), 1.0)

    def test_grouped_axes(self):
        """Gauge-type tensor is symmetric within (a, b) and (i, j) only."""
        t = CurvatureTensor((2, 2, 3, 3), symmetry_groups=((0, 1), (2, 3)))
        t.set_symmetric((0, 1, 0, 2), 1.5)

        assert np.count_nonzero(t.data) == 4
        assert t[(1, 0, 2, 0)] == 1.5
        assert t[(0, 0, 1, 2)] == 0.0
        assert t.multiplicity((0, 1, 0, 2)) == 4
        assert t.multiplicity((0, 0, 1, 1)) == 1

    def test_add_symmetric(self):
        t = CurvatureTensor((2, 2))
        t.add_symmetric((0, 1), 1.0)
        t.add_symmetric((1, 0), 2.0)
        assert t[(0, 1)] == 3.0
        assert t[(1, 0)] == 3.0

    def test_complex_entries(self):
        t = CurvatureTensor((2, 2, 1), symmetry_groups=((0, 1), (2,)), dtype=complex)
        t.set_symmetric((0, 1, 0), 1j)
        assert t[(1, 0, 0)] == 1j


@pytest.mark.unit
class TestSymmetryCheck:
    """Test mechanical symmetry verification."""

    def test_symmetric_tensor_passes(self):
        t = CurvatureTensor((3, 3, 3))
        t.set_symmetric((0, 0, 2), 1.0)
        t.set_symmetric((0, 1, 2), -2.0)
        assert t.is_symmetric()
        assert t.symmetry_violations() == []

    def test_single_entry_is_violation(self):
        t = CurvatureTensor((3, 3))
        t[(0, 1)] = 1.0
        violations = t.symmetry_violations()
        assert not t.is_symmetric()
        assert (0, 1) in violations
        assert (1, 0) in violations

    def test_grouped_violation(self):
        t = CurvatureTensor((2, 2, 2, 2), symmetry_groups=((0, 1), (2, 3)))
        t[(0, 1, 0, 0)] = 1.0
        assert not t.is_symmetric()

    def test_nan_entry_is_violation(self):
        t = CurvatureTensor((2, 2))
        t[(0, 1)] = np.nan
        assert (0, 1) in t.symmetry_violations()
        t.set_symmetric((0, 1), np.nan)
        assert not t.is_symmetric()

    def test_invalid_groups(self):
        with pytest.raises(ValueError):
            CurvatureTensor((2, 2), symmetry_groups=((0,), (0, 1)))
        with pytest.raises(ValueError):
            CurvatureTensor((2, 3), symmetry_groups=((0, 1),))

    def test_nonzero_canonical(self):
        t = CurvatureTensor((3, 3, 3))
        t.set_symmetric((2, 0, 1), 4.0)
        entries = list(t.nonzero(canonical=True))
        assert entries == [((0, 1, 2), 4.0)]
        assert len(list(t.nonzero())) == 6


@pytest.mark.unit
class TestFieldBasis:
    """Test field-basis validation."""

    def test_counts(self):
        basis = FieldBasis(4, 2, 5, 12, 9, vev_order=(2, 4))
        assert basis.n_higgs == 6
        assert basis.n_vev == 2
        assert basis.labels() == ("phi0", "phi1", "phi2", "phi3", "phi4", "phi5")

    def test_vev_order_out_of_range(self):
        with pytest.raises(ValueError):
            FieldBasis(4, 2, 5, 12, 9, vev_order=(2, 6))

    def test_repeated_vev_order(self):
        with pytest.raises(ValueError):
            FieldBasis(4, 2, 5, 12, 9, vev_order=(2, 2))

    def test_label_count(self):
        with pytest.raises(ValueError):
            FieldBasis(1, 0, 0, 0, 0, vev_order=(0,), higgs_labels=("a", "b"))


@pytest.mark.unit
class TestTensorStore:
    """Test the tensor store."""

    @pytest.fixture
    def store(self):
        return CurvatureTensorStore(FieldBasis(4, 2, 5, 12, 9, vev_order=(2, 4)))

    def test_shapes(self, store):
        assert store.L1.shape == (6,)
        assert store.L4.shape == (6, 6, 6, 6)
        assert store.gauge.shape == (5, 5, 6, 6)
        assert store.quark.shape == (12, 12, 6)
        assert store.lepton.shape == (9, 9, 6)
        assert store.quark.dtype == np.complex128

    def test_fresh_store_empty_and_symmetric(self, store):
        assert store.is_empty()
        assert store.symmetry_violations() == {}

    def test_copy_is_independent(self, store):
        store.L2.set_symmetric((0, 1), 1.0)
        clone = store.copy()
        store.zero()
        assert clone.L2[(1, 0)] == 1.0
        assert store.is_empty()

    def test_violations_reported_per_tensor(self, store):
        store.L3[(0, 1, 2)] = 1.0
        assert list(store.symmetry_violations()) == ["L3"]

    def test_non_finite_reported_per_tensor(self, store):
        assert store.non_finite() == []
        store.L1[(2,)] = np.inf
        store.quark[(0, 0, 1)] = complex(np.nan, 0.0)
        assert store.non_finite() == ["L1", "quark"]
