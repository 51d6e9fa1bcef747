"""Transforms and the apply engine.

Structure:
    base: Transform interface, Identity, Lambda, Sequence, OneOf, Buffered, apply
    projective/: Composable spatial transforms with bounds tracking
    compose: Rewrite rules that fold chains into single maps

Example:
    >>> from projaug.transforms import CenterResizeCrop, Rotate, apply, compose
    >>> tfm = compose(Rotate(10), CenterResizeCrop((224, 224)))
    >>> image, points = apply(tfm, (image, points))
"""

# Base
from .base import (
    Buffered,
    Identity,
    Lambda,
    Maybe,
    OneOf,
    Sequence,
    Transform,
    apply,
    apply_,
    makebuffer,
)

# Projective
from .projective import (
    AbstractCrop,
    CenterCrop,
    CenterResizeCrop,
    ComposedProjectiveTransform,
    Crop,
    CropDivisible,
    CropIndices,
    CropRatio,
    CroppedProjectiveTransform,
    FlipX,
    FlipY,
    PadDivisible,
    PinOrigin,
    Project,
    ProjectiveIdentity,
    ProjectiveOneOf,
    ProjectiveTransform,
    RandomCrop,
    RandomResizeCrop,
    Reflect,
    ResizeDivisible,
    ResizeFixed,
    ResizePadDivisible,
    ResizeRatio,
    Rotate,
    ScaleFixed,
    ScaleKeepAspect,
    ScaleRatio,
    Translate,
    Zoom,
)

# Composition
from .compose import compose

__all__ = [
    # Base
    "Transform",
    "Identity",
    "Lambda",
    "Sequence",
    "OneOf",
    "Maybe",
    "Buffered",
    "apply",
    "apply_",
    "makebuffer",
    "compose",
    # Projective
    "ProjectiveTransform",
    "ComposedProjectiveTransform",
    "CroppedProjectiveTransform",
    "ProjectiveIdentity",
    "ProjectiveOneOf",
    "Project",
    "Rotate",
    "Reflect",
    "FlipX",
    "FlipY",
    "Zoom",
    "Translate",
    "PinOrigin",
    "ScaleFixed",
    "ScaleRatio",
    "ScaleKeepAspect",
    "AbstractCrop",
    "Crop",
    "CenterCrop",
    "RandomCrop",
    "CropRatio",
    "CropDivisible",
    "CropIndices",
    "PadDivisible",
    "ResizeFixed",
    "ResizeRatio",
    "ResizeDivisible",
    "RandomResizeCrop",
    "CenterResizeCrop",
    "ResizePadDivisible",
]
