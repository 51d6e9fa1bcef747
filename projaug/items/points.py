"""Point-based items: keypoints, polygons and bounding boxes.

Points are stored as ``(K, N)`` tensors in the same axis order as the
bounds. Missing keypoints can be marked with NaN rows; they stay NaN.
"""

import itertools
from typing import Any

import torch
from torch import Tensor

from ..core.bounds import Bounds
from ..core.geometry import GeometricMap
from ._base import Item, as_tensor


def _float_tensor(data: Any) -> Tensor:
    data = as_tensor(data)
    if not data.dtype.is_floating_point:
        data = data.to(torch.float32)
    return data


class Keypoints(Item):
    """Set of N-dimensional points living in ``bounds``.

    Args:
        data: Points of shape ``(K, N)``.
        bounds: Extent of the data the points annotate, e.g. the image's
            bounds.
    """

    def __init__(self, data: Any, bounds: Bounds) -> None:
        data = _float_tensor(data)
        if data.ndim != 2 or data.shape[1] != bounds.ndim:
            raise ValueError(
                f"{self.__class__.__name__} expects points of shape (K, {bounds.ndim}), "
                f"got {tuple(data.shape)}"
            )
        self.data = data
        self.bounds = bounds

    def project(self, P: GeometricMap, bounds: Bounds) -> "Keypoints":
        points = P(self.data).to(self.data.dtype)
        return self.replace(data=points, bounds=bounds)

    def visible(self) -> Tensor:
        """Mask of points that lie inside the item's bounds."""
        return self.bounds.contains(self.data)


class Polygon(Keypoints):
    """Closed polygon given by its ``(K, N)`` vertices."""


class BoundingBox(Item):
    """Axis-aligned boxes stored as ``(..., 2, N)`` min/max corners.

    After projection each box is the smallest axis-aligned box enclosing
    all ``2**N`` mapped corners, so rotations and reflections keep boxes
    valid.

    Args:
        data: Tensor of shape ``(2, N)`` or ``(B, 2, N)``.
        bounds: Extent of the data the boxes annotate.
    """

    def __init__(self, data: Any, bounds: Bounds) -> None:
        data = _float_tensor(data)
        if data.ndim < 2 or tuple(data.shape[-2:]) != (2, bounds.ndim):
            raise ValueError(
                f"BoundingBox expects corners of shape (..., 2, {bounds.ndim}), "
                f"got {tuple(data.shape)}"
            )
        self.data = data
        self.bounds = bounds

    def corners(self) -> Tensor:
        """All ``2**N`` corners per box, shape ``(..., 2**N, N)``."""
        n = self.data.shape[-1]
        corners = []
        for choice in itertools.product((0, 1), repeat=n):
            corners.append(torch.stack(
                [self.data[..., c, axis] for axis, c in enumerate(choice)], dim=-1
            ))
        return torch.stack(corners, dim=-2)

    def project(self, P: GeometricMap, bounds: Bounds) -> "BoundingBox":
        corners = self.corners()
        n = corners.shape[-1]
        mapped = P(corners.reshape(-1, n)).reshape(corners.shape)
        boxes = torch.stack([mapped.min(dim=-2).values, mapped.max(dim=-2).values], dim=-2)
        return self.replace(data=boxes.to(self.data.dtype), bounds=bounds)
