"""
Text summaries of a model's parameter point.

Tables are rendered with tabulate in the 'grid' format.
"""

import itertools
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

from tabulate import tabulate

from curvature_solver.analysis.triple_couplings import TripleCouplings

if TYPE_CHECKING:
    from curvature_solver.models.base import PotentialModel


def _table(values: Dict[str, float], headers: Sequence[str]) -> str:
    table_data = [[name, f"{value:.10g}"] for name, value in values.items()]
    return tabulate(table_data, headers=headers, tablefmt='grid')


def format_model_summary(model: "PotentialModel") -> str:
    """
    Parameter-point summary of a model.

    Contains the input parameters, the Lagrangian parameters, the tree
    VEV, the renormalization scale and (once set) the counterterms.
    """
    lines = [
        "=" * 60,
        f"Model: {model.model_id}  (state: {model.state.label})",
        "=" * 60,
    ]
    if model.point is not None:
        lines.append(f"Parameter point: {model.point}")

    lines.append("")
    lines.append("Input parameters:")
    lines.append(_table(model.inputs.as_dict(), ["Parameter", "Value"]))

    lines.append("")
    lines.append("Lagrangian parameters:")
    lines.append(_table(model.parameter_table(), ["Parameter", "Value"]))

    vev = {label: model.vev_tree[i] for label, i in zip(model.legend_vev(), model.basis.vev_order)}
    vev["scale"] = model.scale
    lines.append("")
    lines.append("Tree-level VEV and renormalization scale (GeV):")
    lines.append(_table(vev, ["Quantity", "Value"]))

    if model.counterterms is not None:
        lines.append("")
        lines.append("Counterterms:")
        lines.append(_table(model.counterterms.as_dict(), ["Counterterm", "Value"]))

    return "\n".join(lines)


def format_triple_couplings(
    couplings: TripleCouplings,
    labels: Optional[Sequence[str]] = None,
    atol: float = 0.0,
) -> str:
    """
    Table of mass-basis triple couplings for i <= j <= k.

    Args:
        couplings: Rotated couplings.
        labels: Particle labels (default: 0..n-1).
        atol: Skip rows whose tree, CT and loop entries are all below atol.
    """
    n = couplings.n_fields
    if labels is None:
        labels = [str(i) for i in range(n)]
    if len(labels) != n:
        raise ValueError(f"Expected {n} particle labels, got {len(labels)}")

    table_data: List[List] = []
    for i, j, k in itertools.combinations_with_replacement(range(n), 3):
        tree = couplings.tree[i, j, k]
        ct = couplings.counterterm[i, j, k]
        loop = couplings.loop[i, j, k]
        if max(abs(tree), abs(ct), abs(loop)) <= atol:
            continue
        table_data.append([
            labels[i] + labels[j] + labels[k],
            f"{tree:.6g}",
            f"{ct:.6g}",
            f"{loop:.6g}",
            f"{tree + ct + loop:.6g}",
        ])
    headers = ["Coupling", "Tree", "CT", "CW", "Total"]
    return tabulate(table_data, headers=headers, tablefmt='grid')
