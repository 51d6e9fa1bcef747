"""Crop transforms.

A crop does not move coordinates: its map is the identity and only the
bounds change. The actual subsetting happens when an item is projected into
the cropped bounds. Windows larger than the data pad outward.
"""

import math
from typing import Any, Optional, Sequence, Tuple, Union

import torch

from ...core.bounds import Bounds, check_ndim, check_sizes, offset_crop_bounds
from ...core.geometry import GeometricMap
from ...core.sampling import sample_unit
from ...exceptions import DimensionMismatchError
from .base import ProjectiveTransform


ANCHORS = {
    "origin": 0.0,
    "center": 0.5,
    "random": None,
}


class AbstractCrop(ProjectiveTransform):
    """Base class for crops placing a window of ``target_size`` by ``from_``.

    Subclasses implement ``target_size(bounds)``.

    Args:
        from_: ``origin``, ``center`` or ``random`` placement.
        ndim: Number of axes, required for random placement.
    """

    crops = True

    def __init__(self, from_: str = "origin", ndim: Optional[int] = None) -> None:
        if from_ not in ANCHORS:
            raise ValueError(f"Unknown crop anchor: {from_!r}, expected one of {list(ANCHORS)}")
        if from_ == "random" and ndim is None:
            raise ValueError("Random crop placement needs one size entry per axis")
        self.from_ = from_
        self.ndim = ndim

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> Optional[Tuple[float, ...]]:
        if self.from_ != "random":
            return None
        return sample_unit(self.ndim, generator)

    def target_size(self, bounds: Bounds) -> Tuple[int, ...]:
        raise NotImplementedError

    def crop_bounds(self, bounds: Bounds, randstate: Any = None) -> Bounds:
        size = check_sizes(self.target_size(bounds), "crop size")
        check_ndim(bounds, len(size), self.__class__.__name__)
        anchor = ANCHORS[self.from_]
        if anchor is None:
            offsets = self._resolve(randstate)
        else:
            offsets = (anchor,) * bounds.ndim
        return offset_crop_bounds(size, bounds, offsets)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return GeometricMap.identity(bounds.ndim)

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        return self.crop_bounds(bounds, randstate)


class Crop(AbstractCrop):
    """Crop a window of fixed ``size``.

    Args:
        size: Output size per axis.
        from_: ``origin``, ``center`` or ``random`` placement.
    """

    def __init__(self, size: Sequence[int], from_: str = "origin") -> None:
        self.size = tuple(int(s) for s in check_sizes(size, "crop size"))
        super().__init__(from_, ndim=len(self.size))

    def target_size(self, bounds: Bounds) -> Tuple[int, ...]:
        return self.size

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.size}, from_={self.from_!r})"


class CenterCrop(Crop):
    """Crop a window of ``size`` from the center."""

    def __init__(self, size: Sequence[int]) -> None:
        super().__init__(size, from_="center")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.size})"


class RandomCrop(Crop):
    """Crop a window of ``size`` at a random position."""

    def __init__(self, size: Sequence[int]) -> None:
        super().__init__(size, from_="random")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.size})"


class CropRatio(AbstractCrop):
    """Crop a window whose size is a fraction of the current size.

    Args:
        ratios: Fraction per axis.
        from_: Window placement.
    """

    def __init__(self, ratios: Sequence[float], from_: str = "center") -> None:
        self.ratios = tuple(float(r) for r in check_sizes(ratios, "ratios"))
        super().__init__(from_, ndim=len(self.ratios))

    def target_size(self, bounds: Bounds) -> Tuple[int, ...]:
        check_ndim(bounds, len(self.ratios), self.__class__.__name__)
        return tuple(math.floor(round(r * n, 6)) for r, n in zip(self.ratios, bounds.sizes))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.ratios}, from_={self.from_!r})"


class CropDivisible(AbstractCrop):
    """Crop to the largest size divisible by ``factor`` along every axis.

    Args:
        factor: Divisor, one for all axes or one per axis.
        from_: Window placement; ``random`` needs one factor per axis.
    """

    def __init__(self, factor: Union[int, Sequence[int]], from_: str = "origin") -> None:
        self.factor = _as_factor(factor)
        ndim = len(self.factor) if isinstance(self.factor, tuple) else None
        super().__init__(from_, ndim=ndim)

    def target_size(self, bounds: Bounds) -> Tuple[int, ...]:
        factors = _expand(self.factor, bounds.ndim)
        return tuple((int(n) // f) * f for n, f in zip(bounds.sizes, factors))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.factor}, from_={self.from_!r})"


class PadDivisible(AbstractCrop):
    """Grow the window to the next size divisible by ``by``, centered.

    Args:
        by: Divisor, one for all axes or one per axis.
    """

    def __init__(self, by: Union[int, Sequence[int]]) -> None:
        self.by = _as_factor(by)
        super().__init__("center")

    def target_size(self, bounds: Bounds) -> Tuple[int, ...]:
        factors = _expand(self.by, bounds.ndim)
        return tuple(math.ceil(n / f) * f for n, f in zip(bounds.sizes, factors))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.by})"


class CropIndices(AbstractCrop):
    """Crop an explicit inclusive ``(lo, hi)`` range per axis.

    Ranges are coordinates in the current bounds' frame.

    Args:
        indices: One ``(lo, hi)`` pair per axis.
    """

    def __init__(self, indices: Sequence[Tuple[int, int]]) -> None:
        self.window = Bounds(*(tuple(r) for r in indices))
        super().__init__("origin", ndim=self.window.ndim)

    def target_size(self, bounds: Bounds) -> Tuple[int, ...]:
        return tuple(self.window.sizes)

    def crop_bounds(self, bounds: Bounds, randstate: Any = None) -> Bounds:
        check_ndim(bounds, self.window.ndim, self.__class__.__name__)
        return self.window

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.window.ranges})"


def _as_factor(factor: Union[int, Sequence[int]]) -> Union[int, Tuple[int, ...]]:
    if isinstance(factor, int):
        return check_sizes((factor,), "factor")[0]
    return tuple(int(f) for f in check_sizes(factor, "factor"))


def _expand(factor: Union[int, Tuple[int, ...]], ndim: int) -> Tuple[int, ...]:
    if isinstance(factor, int):
        return (factor,) * ndim
    if len(factor) != ndim:
        raise DimensionMismatchError(f"Got {len(factor)} factors for {ndim} axes")
    return factor
