"""Affine transforms: rotation, reflection, zoom, translation and pinning."""

import math
from typing import Any, Optional, Sequence, Tuple, Union

import torch

from ...core.bounds import Bounds, check_ndim
from ...core.geometry import GeometricMap
from ...core.sampling import DistributionLike, as_distribution, describe, sample
from .base import ProjectiveTransform


class Project(ProjectiveTransform):
    """Applies a fixed ``GeometricMap``.

    Args:
        P: Map to apply; its dimensionality must match the items.
    """

    def __init__(self, P: GeometricMap) -> None:
        self.P = P
        self.ndim = P.ndim

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return self.P

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.P!r})"


class Rotate(ProjectiveTransform):
    """Rotate 2D data around the center of its bounds.

    The angle in degrees is drawn uniformly from ``[-|degrees|, |degrees|]``,
    from a ``(low, high)`` range or from any ``torch.distributions``
    distribution.

    Args:
        degrees: Maximum absolute angle, range or distribution.

    Example:
        >>> tfm = Rotate(10)
        >>> tfm = Rotate(torch.distributions.Normal(0.0, 5.0))
    """

    ndim = 2

    def __init__(self, degrees: DistributionLike = 10.0) -> None:
        self.dist = as_distribution(degrees, symmetric=True)

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> float:
        return sample(self.dist, generator)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        angle = self._resolve(randstate)
        return GeometricMap.rotation(math.radians(angle)).recenter(bounds.center)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({describe(self.dist)})"


class Reflect(ProjectiveTransform):
    """Reflect 2D data across a line through the center of its bounds.

    Deterministic: no parameters are sampled.

    Args:
        angle: Angle of the reflection line in degrees. 180 mirrors the
            column axis (``FlipX``), 90 mirrors the row axis (``FlipY``).
    """

    ndim = 2

    def __init__(self, angle: float) -> None:
        self.angle = float(angle)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return GeometricMap.reflection(math.radians(self.angle)).recenter(bounds.center)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.angle:g})"


def FlipX() -> Reflect:
    """Horizontal flip, ``Reflect(180)``."""
    return Reflect(180)


def FlipY() -> Reflect:
    """Vertical flip, ``Reflect(90)``."""
    return Reflect(90)


class Zoom(ProjectiveTransform):
    """Scale uniformly around the center by a random factor.

    Args:
        scales: ``(low, high)`` range of factors or a distribution. Factors
            above 1 magnify.
    """

    def __init__(self, scales: DistributionLike = (1.0, 1.2)) -> None:
        self.dist = as_distribution(scales)

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> float:
        ratio = sample(self.dist, generator)
        if ratio <= 0:
            raise ValueError(f"Zoom factor must be positive, got {ratio}")
        return ratio

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        ratio = self._resolve(randstate)
        return GeometricMap.scale((ratio,) * bounds.ndim).recenter(bounds.center)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({describe(self.dist)})"


class Translate(ProjectiveTransform):
    """Shift data by a fixed or random offset per axis.

    Args:
        offsets: One entry per axis, either a number or a ``(low, high)``
            range to sample from.
    """

    def __init__(self, offsets: Sequence[Union[float, Tuple[float, float]]]) -> None:
        self.dists = tuple(as_distribution(o) for o in offsets)
        self.ndim = len(self.dists)

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> Tuple[float, ...]:
        return tuple(sample(d, generator) for d in self.dists)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return GeometricMap.translation(self._resolve(randstate))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(({', '.join(describe(d) for d in self.dists)}))"


class PinOrigin(ProjectiveTransform):
    """Translate data so the upper-left corner of its bounds is the origin.

    Cropped data keeps the coordinates of the window it was cut from;
    consumers that assume 0-based arrays need it pinned. ``compose`` always
    runs ``PinOrigin`` as a separate step after everything before it.
    """

    pins_origin = True

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return GeometricMap.translation([-lo for lo in bounds.upperleft])

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        check_ndim(bounds, P.ndim, self.__class__.__name__)
        return bounds.shift([-lo for lo in bounds.upperleft])
