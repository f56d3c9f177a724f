"""
Scan module: per-point driver and renormalization-scale scan.
"""

from curvature_solver.scan.point_processor import (
    PointStatus,
    PointResult,
    ScaleScanStep,
    output_legend,
    scale_scan_legend,
    process_parameter_point,
    process_parameter_file,
    scan_renormalization_scale,
)

__all__ = [
    "PointStatus",
    "PointResult",
    "ScaleScanStep",
    "output_legend",
    "scale_scan_legend",
    "process_parameter_point",
    "process_parameter_file",
    "scan_renormalization_scale",
]
