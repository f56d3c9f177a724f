"""
Reporting module: parameter-file I/O and text summaries.
"""

from curvature_solver.reporting.parameter_io import (
    ParameterFile,
    detect_index_column,
    parse_parameter_record,
    read_parameter_file,
    write_results_table,
)
from curvature_solver.reporting.results_reporter import (
    format_model_summary,
    format_triple_couplings,
)

__all__ = [
    "ParameterFile",
    "detect_index_column",
    "parse_parameter_record",
    "read_parameter_file",
    "write_results_table",
    "format_model_summary",
    "format_triple_couplings",
]
