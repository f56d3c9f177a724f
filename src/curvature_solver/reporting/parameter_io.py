"""
Reading parameter files and writing result tables.

A parameter file is tab- or space-separated text. The first line is a
legend; if it starts with a tab, every data line carries a leading
index column that is skipped. Each later line is one parameter point.
"""

import math
import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from curvature_solver.core.errors import ParseError

SEPARATOR = "\t"


def detect_index_column(legend: str) -> bool:
    """True if the legend line marks a leading index column (starts with a tab)."""
    return legend.startswith("\t")


def parse_parameter_record(
    line: str,
    n_fields: int,
    use_index_col: bool = False,
    point: Optional[Union[int, str]] = None,
) -> NDArray[np.floating]:
    """
    Parse one whitespace-separated parameter record.

    Args:
        line: The record.
        n_fields: Number of numeric fields after the optional index.
        use_index_col: Skip a leading index column.
        point: Label for error messages.

    Returns:
        Array of n_fields floats.

    Raises:
        ParseError: Wrong field count, non-numeric or non-finite token.
    """
    tokens = line.split()
    if use_index_col:
        if not tokens:
            raise ParseError("empty record", stage="read_and_set", point=point)
        tokens = tokens[1:]
    if len(tokens) != n_fields:
        raise ParseError(
            f"expected {n_fields} numeric fields, found {len(tokens)}",
            stage="read_and_set",
            point=point,
        )
    values = []
    for position, token in enumerate(tokens):
        try:
            value = float(token)
        except ValueError:
            raise ParseError(
                f"field {position + 1} is not numeric: {token!r}",
                stage="read_and_set",
                point=point,
            ) from None
        if not math.isfinite(value):
            raise ParseError(
                f"field {position + 1} is not finite: {token!r}",
                stage="read_and_set",
                point=point,
            )
        values.append(value)
    return np.array(values)


@dataclass
class ParameterFile:
    """
    Contents of a parameter file.

    Attributes:
        legend: The first line (without newline).
        use_index_col: Whether data lines carry an index column.
        lines: (line number, text) of every non-empty data line,
               numbered from 2 (the legend is line 1).
    """
    legend: str
    use_index_col: bool
    lines: List[Tuple[int, str]]

    def line(self, number: int) -> str:
        for n, text in self.lines:
            if n == number:
                return text
        raise KeyError(f"No data line {number} (file has lines {self.line_numbers()})")

    def line_numbers(self) -> List[int]:
        return [n for n, _ in self.lines]


def read_parameter_file(path: Union[str, Path]) -> ParameterFile:
    """
    Read a parameter file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the file has no legend line.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read().splitlines()
    if not raw:
        raise ParseError(f"{path.name} is empty, expected a legend line", stage="read_parameter_file")
    legend = raw[0]
    lines = [(number, text) for number, text in enumerate(raw[1:], start=2) if text.strip()]
    return ParameterFile(legend=legend, use_index_col=detect_index_column(legend), lines=lines)


def format_row(values: Iterable) -> str:
    out = []
    for v in values:
        if isinstance(v, (float, np.floating)):
            out.append(repr(float(v)))
        else:
            out.append(str(v))
    return SEPARATOR.join(out)


def write_results_table(
    path: Union[str, Path],
    legend: Sequence[str],
    rows: Iterable[Sequence],
) -> int:
    """
    Write a tab-separated table with a legend header.

    Returns:
        Number of data rows written.
    """
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        f.write(SEPARATOR.join(legend) + "\n")
        for row in rows:
            if len(row) != len(legend):
                raise ValueError(f"Row has {len(row)} columns, legend has {len(legend)}")
            f.write(format_row(row) + "\n")
            count += 1
    return count
