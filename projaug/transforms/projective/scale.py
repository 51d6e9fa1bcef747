"""Scale transforms."""

import math
from typing import Any, Sequence

from ...core.bounds import Bounds, check_ndim, check_sizes, offset_crop_bounds, transform_bounds
from ...core.geometry import GeometricMap
from .base import ProjectiveTransform


class ScaleRatio(ProjectiveTransform):
    """Scale each axis by a fixed ratio.

    Args:
        ratios: Positive factor per axis.
    """

    def __init__(self, ratios: Sequence[float]) -> None:
        self.ratios = tuple(float(r) for r in check_sizes(ratios, "ratios"))
        self.ndim = len(self.ratios)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return GeometricMap.scale(self.ratios)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.ratios})"


class ScaleFixed(ProjectiveTransform):
    """Scale sides to exactly ``sizes``, disregarding aspect ratio.

    The ratio uses ``size + 1`` so the scaled data covers the whole output
    window without a black border on one side.

    Args:
        sizes: Target size per axis.
    """

    def __init__(self, sizes: Sequence[int]) -> None:
        self.sizes = tuple(int(s) for s in check_sizes(sizes, "sizes"))
        self.ndim = len(self.sizes)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        if tuple(bounds.sizes) == self.sizes:
            return GeometricMap.identity(bounds.ndim)
        ratios = [(s + 1) / n for s, n in zip(self.sizes, bounds.sizes)]
        upperleft = [lo - 0.5 for lo in bounds.upperleft]
        return GeometricMap.scale(ratios) @ GeometricMap.translation([-u for u in upperleft])

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        if tuple(bounds.sizes) == self.sizes:
            return bounds
        scaled = transform_bounds(bounds, P)
        return offset_crop_bounds(self.sizes, scaled, (1.0,) * bounds.ndim)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.sizes})"


class ScaleKeepAspect(ProjectiveTransform):
    """Scale so the shortest side is ``minlengths``, keeping the aspect ratio.

    Args:
        minlengths: Minimum output length per axis.

    Example:
        >>> tfm = ScaleKeepAspect((200, 200))
        >>> tfm.projection(Bounds.from_size((100, 400)))[1].sizes
        (200, 800)
    """

    def __init__(self, minlengths: Sequence[int]) -> None:
        self.minlengths = tuple(int(m) for m in check_sizes(minlengths, "minlengths"))
        self.ndim = len(self.minlengths)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        if tuple(bounds.sizes) == self.minlengths:
            return GeometricMap.identity(bounds.ndim)
        # Offset by one to avoid a black border on one side.
        ratio = max((m + 1) / n for m, n in zip(self.minlengths, bounds.sizes))
        upperleft = [lo - 0.5 for lo in bounds.upperleft]
        return GeometricMap.scale((ratio,) * bounds.ndim).recenter(upperleft)

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        check_ndim(bounds, len(self.minlengths), self.__class__.__name__)
        if tuple(bounds.sizes) == self.minlengths:
            return bounds
        ratio = max(m / n for m, n in zip(self.minlengths, bounds.sizes))
        sizes = [math.floor(round(ratio * n, 6)) for n in bounds.sizes]
        scaled = transform_bounds(bounds, P)
        return offset_crop_bounds(sizes, scaled, (0.5,) * bounds.ndim)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.minlengths})"
