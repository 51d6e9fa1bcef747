"""Pixel-level operations used by the apply engine."""

from .warp import EXTRAPOLATIONS, INTERPOLATIONS, crop_to, output_grid, warp

__all__ = [
    "EXTRAPOLATIONS",
    "INTERPOLATIONS",
    "crop_to",
    "output_grid",
    "warp",
]
