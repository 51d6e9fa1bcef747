"""projaug: composable projective data augmentation for PyTorch.

Spatial transforms (scaling, rotation, reflection, crops) are tracked as
homogeneous maps together with the bounds of the valid region, so a chain
of them collapses into one map and images, masks, keypoints and boxes are
resampled once with identical random parameters.
"""

__version__ = "0.1.0"
__author__ = "projaug Team"

from .core import Bounds, GeometricMap
from .items import (
    ArrayItem,
    BoundingBox,
    Category,
    Image,
    Keypoints,
    MaskBinary,
    MaskMulti,
    Many,
    Polygon,
)
from .transforms import apply, apply_, compose, makebuffer

__all__ = [
    "Bounds",
    "GeometricMap",
    "ArrayItem",
    "BoundingBox",
    "Category",
    "Image",
    "Keypoints",
    "MaskBinary",
    "MaskMulti",
    "Many",
    "Polygon",
    "apply",
    "apply_",
    "compose",
    "makebuffer",
]
