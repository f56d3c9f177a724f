"""
Symmetric curvature tensors for the scalar, gauge and fermion sectors.

A potential is stored through its field derivatives,

    V = L1_i φ_i + 1/2 L2_ij φ_i φ_j + 1/6 L3_ijk φ_i φ_j φ_k
        + 1/24 L4_ijkl φ_i φ_j φ_k φ_l,

together with the gauge-scalar tensor G_abij (gauge mass matrix
M_ab = 1/2 G_abij φ_i φ_j) and the Yukawa tensors Y_IJk (fermion mass
matrix M_IJ = Y_IJk φ_k).

Each tensor lives in one flat contiguous buffer addressed through
row-major strides. Axes that are interchangeable form a symmetry group;
every entry is written together with all permutations of its indices
inside each group, so the symmetry can be checked mechanically.
"""

import itertools
import math
import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

Index = Tuple[int, ...]


@dataclass(frozen=True)
class FieldBasis:
    """
    Ordered field content of a model.

    Attributes:
        n_neutral: Number of real neutral scalar components.
        n_charged: Number of real charged scalar components.
        n_gauge: Number of gauge bosons.
        n_quarks: Number of quark (Weyl) indices.
        n_leptons: Number of lepton (Weyl) indices.
        vev_order: Field indices of the independent VEV directions.
        higgs_labels: Optional names of the scalar fields.
    """
    n_neutral: int
    n_charged: int
    n_gauge: int
    n_quarks: int
    n_leptons: int
    vev_order: Tuple[int, ...]
    higgs_labels: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        if self.n_higgs < 1:
            raise ValueError(f"Need at least one scalar field, got {self.n_higgs}")
        for count, name in ((self.n_gauge, "n_gauge"), (self.n_quarks, "n_quarks"),
                            (self.n_leptons, "n_leptons")):
            if count < 0:
                raise ValueError(f"{name} must be non-negative, got {count}")
        if len(set(self.vev_order)) != len(self.vev_order):
            raise ValueError(f"vev_order has repeated entries: {self.vev_order}")
        for i in self.vev_order:
            if not 0 <= i < self.n_higgs:
                raise ValueError(f"vev_order entry {i} outside 0..{self.n_higgs - 1}")
        if self.higgs_labels and len(self.higgs_labels) != self.n_higgs:
            raise ValueError(
                f"Expected {self.n_higgs} higgs labels, got {len(self.higgs_labels)}"
            )

    @property
    def n_higgs(self) -> int:
        return self.n_neutral + self.n_charged

    @property
    def n_vev(self) -> int:
        return len(self.vev_order)

    def labels(self) -> Tuple[str, ...]:
        """Scalar field labels (phi0, phi1, ... if none were given)."""
        if self.higgs_labels:
            return self.higgs_labels
        return tuple(f"phi{i}" for i in range(self.n_higgs))


class CurvatureTensor:
    """
    Fixed-rank tensor stored in a flat row-major buffer.

    Attributes:
        shape: Extent of each axis.
        rank: Number of axes.
        strides: Row-major element strides (in entries, not bytes).
        symmetry_groups: Tuples of mutually interchangeable axes.
        data: The flat buffer.
        name: Label used in diagnostics.
    """

    def __init__(
        self,
        shape: Sequence[int],
        symmetry_groups: Optional[Sequence[Sequence[int]]] = None,
        dtype: Union[type, np.dtype] = float,
        name: str = "",
    ):
        """
        Create a zero tensor.

        Args:
            shape: Extent of each axis (rank >= 1).
            symmetry_groups: Partition of the axes into interchangeable
                groups. Defaults to a single group (fully symmetric).
            dtype: Entry type (float or complex).
            name: Label used in diagnostics.
        """
        shape = tuple(int(n) for n in shape)
        if len(shape) == 0:
            raise ValueError("CurvatureTensor needs rank >= 1")
        if any(n < 0 for n in shape):
            raise ValueError(f"Negative extent in shape {shape}")

        if symmetry_groups is None:
            groups = (tuple(range(len(shape))),)
        else:
            groups = tuple(tuple(int(a) for a in g) for g in symmetry_groups)
        flat = sorted(a for g in groups for a in g)
        if flat != list(range(len(shape))):
            raise ValueError(
                f"symmetry_groups {groups} must partition axes 0..{len(shape) - 1}"
            )
        for g in groups:
            if len({shape[a] for a in g}) > 1:
                raise ValueError(f"Axes {g} are grouped but have different extents")

        self.shape = shape
        self.rank = len(shape)
        self.symmetry_groups = groups
        self.name = name

        strides = [1] * self.rank
        for axis in range(self.rank - 2, -1, -1):
            strides[axis] = strides[axis + 1] * shape[axis + 1]
        self.strides = tuple(strides)
        self.data = np.zeros(int(np.prod(shape)), dtype=dtype)

    def __repr__(self) -> str:
        return (f"CurvatureTensor(name={self.name!r}, shape={self.shape}, "
                f"groups={self.symmetry_groups}, dtype={self.data.dtype})")

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    @property
    def size(self) -> int:
        return self.data.size

    def _as_index(self, index: Union[int, Sequence[int]]) -> Index:
        if isinstance(index, (int, np.integer)):
            index = (int(index),)
        index = tuple(int(i) for i in index)
        if len(index) != self.rank:
            raise ValueError(
                f"{self.name or 'tensor'}: index {index} has length {len(index)}, "
                f"expected rank {self.rank}"
            )
        for i, n in zip(index, self.shape):
            if not 0 <= i < n:
                raise IndexError(f"{self.name or 'tensor'}: index {index} out of range {self.shape}")
        return index

    def offset(self, index: Union[int, Sequence[int]]) -> int:
        """Flat buffer offset of a multi-index."""
        index = self._as_index(index)
        return sum(i * s for i, s in zip(index, self.strides))

    def __getitem__(self, index):
        return self.data[self.offset(index)]

    def __setitem__(self, index, value) -> None:
        # Single entry only; use set_symmetric to keep the symmetry.
        self.data[self.offset(index)] = value

    def permutations(self, index: Union[int, Sequence[int]]) -> List[Index]:
        """All distinct indices reachable by permuting within symmetry groups."""
        index = self._as_index(index)
        per_group = []
        for g in self.symmetry_groups:
            values = [index[a] for a in g]
            per_group.append(sorted(set(itertools.permutations(values))))

        result = []
        for choice in itertools.product(*per_group):
            new = list(index)
            for g, values in zip(self.symmetry_groups, choice):
                for a, v in zip(g, values):
                    new[a] = v
            result.append(tuple(new))
        return result

    def multiplicity(self, index: Union[int, Sequence[int]]) -> int:
        """Number of distinct orderings of an index under the symmetry groups."""
        index = self._as_index(index)
        count = 1
        for g in self.symmetry_groups:
            values = [index[a] for a in g]
            occurrences = [values.count(v) for v in set(values)]
            count *= math.factorial(len(values)) // math.prod(
                math.factorial(n) for n in occurrences
            )
        return count

    def set_symmetric(self, index: Union[int, Sequence[int]], value) -> None:
        """Write ``value`` at an index and every permutation of it."""
        for perm in self.permutations(index):
            self.data[self.offset(perm)] = value

    def add_symmetric(self, index: Union[int, Sequence[int]], value) -> None:
        """Add ``value`` at an index and every distinct permutation of it."""
        for perm in self.permutations(index):
            self.data[self.offset(perm)] += value

    def set_from_monomial(self, index: Union[int, Sequence[int]], coefficient) -> None:
        """
        Set the entries belonging to one monomial of the potential.

        For a term ``coefficient * φ_i1 ... φ_ik`` and the 1/k! expansion
        convention the derivative is ``coefficient * k! / m``, with m the
        number of distinct orderings of the index (e.g. φ0⁴ gets a factor
        24, φ0²φ1² a factor 4). Only meaningful for fully symmetric tensors.
        """
        if len(self.symmetry_groups) != 1:
            raise ValueError(f"{self.name or 'tensor'} is not fully symmetric")
        factor = math.factorial(self.rank) // self.multiplicity(index)
        self.set_symmetric(index, coefficient * factor)

    @property
    def array(self) -> NDArray:
        """Shaped view of the flat buffer (shares memory)."""
        return self.data.reshape(self.shape)

    def zero(self) -> None:
        self.data[:] = 0

    def copy(self) -> "CurvatureTensor":
        new = CurvatureTensor(self.shape, self.symmetry_groups, self.data.dtype, self.name)
        new.data[:] = self.data
        return new

    def canonical(self, index: Union[int, Sequence[int]]) -> Index:
        """Representative index, sorted within each symmetry group."""
        index = list(self._as_index(index))
        for g in self.symmetry_groups:
            for a, v in zip(g, sorted(index[a] for a in g)):
                index[a] = v
        return tuple(index)

    def nonzero(self, canonical: bool = False) -> Iterator[Tuple[Index, object]]:
        """
        Iterate over nonzero entries as (index, value).

        Args:
            canonical: Yield each permutation class once, using its
                sorted representative.
        """
        for flat in np.flatnonzero(self.data):
            index = tuple(int(i) for i in np.unravel_index(flat, self.shape))
            if canonical and index != self.canonical(index):
                continue
            yield index, self.data[flat]

    def symmetry_violations(self, atol: float = 1e-10, rtol: float = 1e-10) -> List[Index]:
        """
        Indices whose value differs from a permuted index in the same class.

        Returns:
            Sorted list of offending indices (empty if symmetric).
        """
        arr = self.array
        bad = set()
        for g in self.symmetry_groups:
            if len(g) < 2:
                continue
            for perm in itertools.permutations(g):
                if perm == g:
                    continue
                axes = list(range(self.rank))
                for a, p in zip(g, perm):
                    axes[a] = p
                other = arr.transpose(axes)
                # NaN compares unequal, so non-finite entries count as violations
                mismatch = ~(np.abs(arr - other) <= atol + rtol * np.abs(arr))
                for idx in np.argwhere(mismatch):
                    bad.add(tuple(int(i) for i in idx))
        return sorted(bad)

    def is_symmetric(self, atol: float = 1e-10, rtol: float = 1e-10) -> bool:
        return not self.symmetry_violations(atol=atol, rtol=rtol)


class CurvatureTensorStore:
    """
    All curvature tensors of one potential (tree or counterterm).

    Attributes:
        basis: The FieldBasis the tensors are defined over.
        L1, L2, L3, L4: Scalar tensors of rank 1-4 (real, fully symmetric).
        gauge: Gauge-scalar tensor G_abij, groups (a, b) and (i, j).
        quark: Quark Yukawa tensor Y_IJk (complex), groups (I, J) and (k).
        lepton: Lepton Yukawa tensor Y_IJk (complex), groups (I, J) and (k).
    """

    def __init__(self, basis: FieldBasis):
        self.basis = basis
        n = basis.n_higgs
        self.L1 = CurvatureTensor((n,), name="L1")
        self.L2 = CurvatureTensor((n, n), name="L2")
        self.L3 = CurvatureTensor((n, n, n), name="L3")
        self.L4 = CurvatureTensor((n, n, n, n), name="L4")
        ng = basis.n_gauge
        self.gauge = CurvatureTensor(
            (ng, ng, n, n), symmetry_groups=((0, 1), (2, 3)), name="G2H2"
        )
        nq = basis.n_quarks
        self.quark = CurvatureTensor(
            (nq, nq, n), symmetry_groups=((0, 1), (2,)), dtype=complex, name="quark F2H1"
        )
        nl = basis.n_leptons
        self.lepton = CurvatureTensor(
            (nl, nl, n), symmetry_groups=((0, 1), (2,)), dtype=complex, name="lepton F2H1"
        )

    def tensors(self) -> Dict[str, CurvatureTensor]:
        return {
            "L1": self.L1,
            "L2": self.L2,
            "L3": self.L3,
            "L4": self.L4,
            "gauge": self.gauge,
            "quark": self.quark,
            "lepton": self.lepton,
        }

    def higgs_tensors(self) -> Tuple[CurvatureTensor, ...]:
        return (self.L1, self.L2, self.L3, self.L4)

    def zero(self) -> None:
        for tensor in self.tensors().values():
            tensor.zero()

    def copy(self) -> "CurvatureTensorStore":
        new = CurvatureTensorStore(self.basis)
        for name, tensor in self.tensors().items():
            getattr(new, name).data[:] = tensor.data
        return new

    def is_empty(self) -> bool:
        return all(not np.any(t.data) for t in self.tensors().values())

    def symmetry_violations(self, atol: float = 1e-10) -> Dict[str, List[Index]]:
        """Offending indices per tensor name (only tensors with violations)."""
        result = {}
        for name, tensor in self.tensors().items():
            bad = tensor.symmetry_violations(atol=atol)
            if bad:
                result[name] = bad
        return result

    def non_finite(self) -> List[str]:
        """Names of tensors holding NaN or Inf entries."""
        return [name for name, tensor in self.tensors().items() if not np.all(np.isfinite(tensor.data))]
