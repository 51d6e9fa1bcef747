"""Pixel items: arrays, images and masks.

Pixel data is resampled with ``projaug.ops.warp``. Maps that only shift
the data by whole pixels (crops, ``PinOrigin``, integer translations) are
served by slicing so values stay exact.
"""

from typing import Any, List, Optional, Sequence

import torch
from torch import Tensor
from PIL import Image as PILImage
import torchvision.transforms.functional as F

from ..core.bounds import Bounds
from ..core.geometry import GeometricMap
from ..ops.warp import EXTRAPOLATIONS, INTERPOLATIONS, crop_to, warp
from ._base import Item, as_tensor


def integer_shift(P: GeometricMap) -> Optional[List[int]]:
    """Offsets of ``P`` if it is a pure translation by whole units."""
    if not P.is_affine:
        return None
    if not torch.allclose(P.linear_part, torch.eye(P.ndim, dtype=torch.float64), atol=1e-9):
        return None
    t = P.translation_part
    if not torch.allclose(t, t.round(), atol=1e-9):
        return None
    return [int(v) for v in t.round().tolist()]


def resample(
    data: Tensor,
    P: GeometricMap,
    in_bounds: Bounds,
    out_bounds: Bounds,
    mode: str,
    extrapolation: str,
    fill: float,
) -> Tensor:
    """Channel-first resampling with the whole-pixel shortcut."""
    shift = integer_shift(P)
    if shift is not None:
        sliced, ok = crop_to(data, in_bounds.shift(shift), out_bounds)
        if ok:
            return sliced.clone()
    return warp(data, P, in_bounds, out_bounds, mode=mode, extrapolation=extrapolation, fill=fill)


class _PixelItem(Item):
    """Shared logic for items whose data is a dense grid."""

    # Number of leading non-spatial axes.
    channel_axes = 0
    interpolation = "bilinear"

    def __init__(
        self,
        data: Any,
        bounds: Optional[Bounds] = None,
        extrapolation: str = "constant",
        fill: float = 0.0,
    ) -> None:
        data = as_tensor(data)
        if data.ndim <= self.channel_axes:
            raise ValueError(
                f"{self.__class__.__name__} needs at least one spatial axis, "
                f"got data of shape {tuple(data.shape)}"
            )
        spatial = tuple(data.shape[self.channel_axes:])
        if bounds is None:
            bounds = Bounds.from_size(spatial)
        elif tuple(bounds.sizes) != spatial:
            raise ValueError(
                f"Bounds {bounds} do not match data of spatial shape {spatial}"
            )
        if extrapolation not in EXTRAPOLATIONS:
            raise ValueError(f"Unknown extrapolation: {extrapolation}")
        self.data = data
        self.bounds = bounds
        self.extrapolation = extrapolation
        self.fill = fill

    def _channel_first(self) -> Tensor:
        return self.data if self.channel_axes else self.data.unsqueeze(0)

    def project(self, P: GeometricMap, bounds: Bounds) -> "_PixelItem":
        out = resample(
            self._channel_first(),
            P,
            self.bounds,
            bounds,
            mode=self.interpolation,
            extrapolation=self.extrapolation,
            fill=self.fill,
        )
        if not self.channel_axes:
            out = out.squeeze(0)
        return self.replace(data=out, bounds=bounds)


class ArrayItem(_PixelItem):
    """Plain N-dimensional array without a channel axis.

    Args:
        data: Tensor or array of shape ``sizes``.
        bounds: Defaults to the array's own extent starting at 0.
    """


class Image(_PixelItem):
    """Channel-first image ``(C, H, W)`` (or ``(C, D, H, W)`` volumes).

    Args:
        data: Image tensor, any dtype.
        bounds: Spatial bounds; defaults to the data's extent.
        extrapolation: How to fill pixels mapped from outside the data.
        fill: Fill value for ``constant`` extrapolation.
        interpolation: One of ``nearest``, ``bilinear``, ``bicubic``.
    """

    channel_axes = 1

    def __init__(
        self,
        data: Any,
        bounds: Optional[Bounds] = None,
        extrapolation: str = "constant",
        fill: float = 0.0,
        interpolation: str = "bilinear",
    ) -> None:
        super().__init__(data, bounds, extrapolation=extrapolation, fill=fill)
        if interpolation not in INTERPOLATIONS:
            raise ValueError(f"Unknown interpolation mode: {interpolation}")
        self.interpolation = interpolation

    @property
    def num_channels(self) -> int:
        return self.data.shape[0]

    @classmethod
    def from_pil(cls, image: PILImage.Image, **kwargs) -> "Image":
        """uint8 ``(C, H, W)`` image from a PIL image."""
        return cls(F.pil_to_tensor(image), **kwargs)

    def to_pil(self) -> PILImage.Image:
        return F.to_pil_image(self.data)


class MaskBinary(_PixelItem):
    """Boolean ``(H, W)`` mask; nearest-neighbour resampled, pads with False."""

    interpolation = "nearest"

    def __init__(self, data: Any, bounds: Optional[Bounds] = None) -> None:
        super().__init__(as_tensor(data, torch.bool), bounds)


class MaskMulti(_PixelItem):
    """Integer ``(H, W)`` label mask; nearest-neighbour resampled, pads with 0.

    Args:
        data: Integer class indices.
        classes: Optional class names indexed by the mask values.
        bounds: Spatial bounds; defaults to the data's extent.
    """

    interpolation = "nearest"

    def __init__(
        self,
        data: Any,
        classes: Optional[Sequence[Any]] = None,
        bounds: Optional[Bounds] = None,
    ) -> None:
        data = as_tensor(data)
        if data.dtype.is_floating_point or data.dtype == torch.bool:
            raise ValueError(f"MaskMulti needs integer data, got {data.dtype}")
        super().__init__(data, bounds)
        self.classes = tuple(classes) if classes is not None else None
