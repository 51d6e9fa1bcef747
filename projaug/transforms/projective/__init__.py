"""Projective transforms with bounds tracking.

Transforms that move coordinates (scale, rotate, reflect, zoom, translate)
or change the valid window (crops), all composable into a single map.
"""

from .base import (
    ComposedProjectiveTransform,
    CroppedProjectiveTransform,
    ProjectiveIdentity,
    ProjectiveOneOf,
    ProjectiveTransform,
)
from .affine import FlipX, FlipY, PinOrigin, Project, Reflect, Rotate, Translate, Zoom
from .scale import ScaleFixed, ScaleKeepAspect, ScaleRatio
from .crop import (
    AbstractCrop,
    CenterCrop,
    Crop,
    CropDivisible,
    CropIndices,
    CropRatio,
    PadDivisible,
    RandomCrop,
)
from .resize import (
    CenterResizeCrop,
    RandomResizeCrop,
    ResizeDivisible,
    ResizeFixed,
    ResizePadDivisible,
    ResizeRatio,
)

__all__ = [
    # Base
    "ProjectiveTransform",
    "ComposedProjectiveTransform",
    "CroppedProjectiveTransform",
    "ProjectiveIdentity",
    "ProjectiveOneOf",
    # Affine
    "Project",
    "Rotate",
    "Reflect",
    "FlipX",
    "FlipY",
    "Zoom",
    "Translate",
    "PinOrigin",
    # Scale
    "ScaleFixed",
    "ScaleRatio",
    "ScaleKeepAspect",
    # Crop
    "AbstractCrop",
    "Crop",
    "CenterCrop",
    "RandomCrop",
    "CropRatio",
    "CropDivisible",
    "CropIndices",
    "PadDivisible",
    # Presets
    "ResizeFixed",
    "ResizeRatio",
    "ResizeDivisible",
    "RandomResizeCrop",
    "CenterResizeCrop",
    "ResizePadDivisible",
]
