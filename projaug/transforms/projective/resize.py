"""Resize presets built from scales, crops and ``PinOrigin``."""

from typing import Sequence, Union

from ..base import Transform
from ..compose import compose
from .affine import PinOrigin
from .crop import CenterCrop, CropDivisible, PadDivisible, RandomCrop
from .scale import ScaleFixed, ScaleKeepAspect, ScaleRatio


def ResizeFixed(sizes: Sequence[int]) -> Transform:
    """``ScaleFixed(sizes) >> PinOrigin()``"""
    return compose(ScaleFixed(sizes), PinOrigin())


def ResizeRatio(ratios: Sequence[float]) -> Transform:
    """``ScaleRatio(ratios) >> PinOrigin()``"""
    return compose(ScaleRatio(ratios), PinOrigin())


def ResizeDivisible(size: Sequence[int], by: Union[int, Sequence[int]] = 32) -> Transform:
    """``ScaleKeepAspect(size) >> CropDivisible(by) >> PinOrigin()``"""
    return compose(ScaleKeepAspect(size), CropDivisible(by), PinOrigin())


def RandomResizeCrop(size: Sequence[int]) -> Transform:
    """``ScaleKeepAspect(size) >> RandomCrop(size) >> PinOrigin()``"""
    return compose(ScaleKeepAspect(size), RandomCrop(size), PinOrigin())


def CenterResizeCrop(size: Sequence[int]) -> Transform:
    """``ScaleKeepAspect(size) >> CenterCrop(size) >> PinOrigin()``"""
    return compose(ScaleKeepAspect(size), CenterCrop(size), PinOrigin())


def ResizePadDivisible(size: Sequence[int], by: Union[int, Sequence[int]] = 32) -> Transform:
    """``ScaleKeepAspect(size) >> PadDivisible(by) >> PinOrigin()``"""
    return compose(ScaleKeepAspect(size), PadDivisible(by), PinOrigin())
