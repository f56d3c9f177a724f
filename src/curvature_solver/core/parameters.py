"""
Counterterm parameter sets.

A model declares one canonical tuple of counterterm names; that tuple
is the only ordering used for the legend, the solver output and the
population of the counterterm tensors.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Dict, Mapping, Sequence, Tuple


class CountertermParameters:
    """
    Immutable, ordered set of counterterm coefficients.

    Attributes:
        names: Canonical parameter names.
        values: Values in the same order (read-only array).
    """

    __slots__ = ("names", "values")

    def __init__(self, names: Sequence[str], values: Sequence[float]):
        names = tuple(names)
        values = np.array(values, dtype=float).reshape(-1)
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate counterterm names in {names}")
        if values.size != len(names):
            raise ValueError(
                f"Expected {len(names)} counterterm values, got {values.size}"
            )
        values.setflags(write=False)
        object.__setattr__(self, "names", names)
        object.__setattr__(self, "values", values)

    def __setattr__(self, name, value):
        raise AttributeError("CountertermParameters is immutable")

    @classmethod
    def from_mapping(cls, names: Sequence[str], mapping: Mapping[str, float]) -> "CountertermParameters":
        """
        Build from a name -> value mapping, ordered by ``names``.

        Raises:
            ValueError: If a name is missing or the mapping has extra keys.
        """
        missing = [n for n in names if n not in mapping]
        extra = [k for k in mapping if k not in names]
        if missing or extra:
            raise ValueError(f"Counterterm mismatch: missing {missing}, unexpected {extra}")
        return cls(names, [mapping[n] for n in names])

    @classmethod
    def zeros(cls, names: Sequence[str]) -> "CountertermParameters":
        return cls(names, np.zeros(len(names)))

    def __len__(self) -> int:
        return len(self.names)

    def __getitem__(self, name: str) -> float:
        try:
            return float(self.values[self.names.index(name)])
        except ValueError:
            raise KeyError(name) from None

    def __iter__(self):
        return iter(self.names)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CountertermParameters):
            return NotImplemented
        return self.names == other.names and np.array_equal(self.values, other.values)

    def __repr__(self) -> str:
        body = ", ".join(f"{n}={v:.6g}" for n, v in zip(self.names, self.values))
        return f"CountertermParameters({body})"

    def as_vector(self) -> NDArray[np.floating]:
        return self.values.copy()

    def as_dict(self) -> Dict[str, float]:
        return {n: float(v) for n, v in zip(self.names, self.values)}

    def items(self) -> Tuple[Tuple[str, float], ...]:
        return tuple((n, float(v)) for n, v in zip(self.names, self.values))
