"""Bounds algebra.

A ``Bounds`` value describes the valid coordinate extent of an item's data
as one inclusive ``(lo, hi)`` pair per axis. Axes follow array axis order
(row, column, ...), coordinates are 0-based and the element with index ``k``
along an axis sits at coordinate ``lo + k``.

Example:
    >>> b = Bounds.from_size((100, 200))
    >>> b.sizes
    (100, 200)
    >>> offset_crop_bounds((50, 50), b, (0.5, 0.5))
    Bounds((25, 74), (75, 124))
"""

import itertools
import math
from typing import Iterable, Sequence, Tuple, Union

import torch
from torch import Tensor

from ..exceptions import DegenerateSizeError, DimensionMismatchError


Number = Union[int, float]

# Mapped corners are rounded to this many decimals before floor/ceil so
# float noise does not grow a window by one pixel.
_ROUND_DIGITS = 6


class Bounds:
    """Immutable N-dimensional inclusive extent.

    Args:
        *ranges: One ``(lo, hi)`` pair per axis with ``lo <= hi``.
    """

    __slots__ = ("_ranges",)

    def __init__(self, *ranges: Tuple[Number, Number]) -> None:
        if not ranges:
            raise ValueError("Bounds need at least one axis")
        checked = []
        for r in ranges:
            lo, hi = r
            if hi < lo:
                raise ValueError(f"Invalid range ({lo}, {hi}): hi < lo")
            checked.append((lo, hi))
        object.__setattr__(self, "_ranges", tuple(checked))

    def __setattr__(self, name, value):
        raise AttributeError("Bounds are immutable")

    def __reduce__(self):
        return (Bounds, self._ranges)

    @classmethod
    def from_size(cls, size: Sequence[int]) -> "Bounds":
        """Bounds of an array with shape ``size`` starting at the origin."""
        for s in size:
            if s <= 0:
                raise DegenerateSizeError(f"Sizes must be positive, got {tuple(size)}")
        return cls(*((0, int(s) - 1) for s in size))

    @classmethod
    def from_points(cls, points: Union[Tensor, Sequence[Sequence[Number]]]) -> "Bounds":
        """Smallest integer bounds enclosing ``points`` of shape (K, N)."""
        points = torch.as_tensor(points, dtype=torch.float64)
        if points.ndim != 2 or points.shape[0] == 0:
            raise ValueError("Expected a non-empty (K, N) point array")
        points = torch.round(points * 10 ** _ROUND_DIGITS) / 10 ** _ROUND_DIGITS
        mins = points.min(dim=0).values
        maxs = points.max(dim=0).values
        return cls(*(
            (math.floor(lo), math.ceil(hi))
            for lo, hi in zip(mins.tolist(), maxs.tolist())
        ))

    @property
    def ranges(self) -> Tuple[Tuple[Number, Number], ...]:
        return self._ranges

    @property
    def ndim(self) -> int:
        return len(self._ranges)

    @property
    def sizes(self) -> Tuple[Number, ...]:
        """Number of addressable elements per axis."""
        return tuple(hi - lo + 1 for lo, hi in self._ranges)

    @property
    def upperleft(self) -> Tuple[Number, ...]:
        return tuple(lo for lo, _ in self._ranges)

    @property
    def lowerright(self) -> Tuple[Number, ...]:
        return tuple(hi for _, hi in self._ranges)

    @property
    def center(self) -> Tuple[float, ...]:
        return tuple((lo + hi) / 2 for lo, hi in self._ranges)

    def corners(self) -> Tensor:
        """All ``2**N`` corner coordinates as a (2**N, N) float64 tensor."""
        return torch.tensor(
            list(itertools.product(*self._ranges)), dtype=torch.float64
        )

    def shift(self, offsets: Sequence[Number]) -> "Bounds":
        check_ndim(self, len(offsets))
        return Bounds(*((lo + o, hi + o) for (lo, hi), o in zip(self._ranges, offsets)))

    def intersect(self, other: "Bounds") -> "Bounds":
        check_ndim(self, other.ndim)
        ranges = []
        for (lo1, hi1), (lo2, hi2) in zip(self._ranges, other.ranges):
            lo, hi = max(lo1, lo2), min(hi1, hi2)
            if hi < lo:
                raise ValueError(f"{self} and {other} do not overlap")
            ranges.append((lo, hi))
        return Bounds(*ranges)

    def contains(self, points: Tensor) -> Tensor:
        """Boolean mask of the (K, N) ``points`` lying inside the bounds."""
        points = torch.as_tensor(points, dtype=torch.float64)
        lo = torch.tensor(self.upperleft, dtype=torch.float64)
        hi = torch.tensor(self.lowerright, dtype=torch.float64)
        return ((points >= lo) & (points <= hi)).all(dim=-1)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bounds):
            return NotImplemented
        return self._ranges == other._ranges

    def __hash__(self) -> int:
        return hash(self._ranges)

    def __iter__(self):
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __repr__(self) -> str:
        return f"Bounds{self._ranges}" if self.ndim > 1 else f"Bounds({self._ranges[0]})"


def check_ndim(bounds: Bounds, ndim: int, name: str = "transform") -> None:
    """Raise ``DimensionMismatchError`` unless ``bounds`` has ``ndim`` axes."""
    if bounds.ndim != ndim:
        raise DimensionMismatchError(
            f"{name} expects {ndim}-dimensional bounds, got {bounds.ndim}: {bounds}"
        )


def check_sizes(sizes: Iterable[Number], name: str = "size") -> Tuple[Number, ...]:
    """Validate that every target size is positive."""
    sizes = tuple(sizes)
    if not sizes or any(s <= 0 for s in sizes):
        raise DegenerateSizeError(f"{name} must be positive, got {sizes}")
    return sizes


def transform_bounds(bounds: Bounds, P) -> Bounds:
    """Smallest integer bounds enclosing the image of ``bounds`` under ``P``."""
    return Bounds.from_points(P(bounds.corners()))


def offset_crop_bounds(
    size: Sequence[int],
    bounds: Bounds,
    offsets: Sequence[float],
) -> Bounds:
    """Window of exactly ``size`` placed inside ``bounds``.

    ``offsets`` is a fraction per axis: 0 aligns the window with the upper
    edge, 1 with the lower edge and 0.5 centers it. When ``size`` is larger
    than ``bounds`` the window grows outward by the same rule.

    Args:
        size: Target number of elements per axis.
        bounds: Bounds to place the window in.
        offsets: Fractional anchor per axis.

    Returns:
        ``bounds`` itself if it already has ``size``, else a new window.
    """
    size = tuple(int(s) for s in check_sizes(size))
    check_ndim(bounds, len(size), "offset_crop_bounds")
    if len(offsets) != len(size):
        raise DimensionMismatchError(
            f"Got {len(offsets)} offsets for {len(size)} axes"
        )
    if tuple(bounds.sizes) == size:
        return bounds

    ranges = []
    for (lo, _), length, sz, offset in zip(bounds, bounds.sizes, size, offsets):
        start = math.floor(lo + (length - sz) * offset)
        ranges.append((start, start + sz - 1))
    return Bounds(*ranges)
