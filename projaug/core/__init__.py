"""Core data types: bounds, geometric maps and random sampling."""

from .bounds import (
    Bounds,
    check_ndim,
    check_sizes,
    offset_crop_bounds,
    transform_bounds,
)
from .geometry import GeometricMap
from .sampling import as_distribution, sample, sample_unit

__all__ = [
    "Bounds",
    "GeometricMap",
    "as_distribution",
    "check_ndim",
    "check_sizes",
    "offset_crop_bounds",
    "sample",
    "sample_unit",
    "transform_bounds",
]
