"""Image resampling backed by ``torch.nn.functional.grid_sample``.

The projective engine only decides *which* map and output window to use;
this module turns them into pixels. Every output element at coordinate
``x`` in ``out_bounds`` is read from ``P.inverse()(x)`` in the input.
"""

from typing import Tuple

import torch
import torch.nn.functional as F
from torch import Tensor

from ..core.bounds import Bounds
from ..core.geometry import GeometricMap


EXTRAPOLATIONS = ("constant", "border", "reflection")
INTERPOLATIONS = ("nearest", "bilinear", "bicubic")

_PADDING_MODES = {
    "constant": "zeros",
    "border": "border",
    "reflection": "reflection",
}


def output_grid(bounds: Bounds) -> Tensor:
    """Coordinates of every element in ``bounds``, shape (*sizes, N)."""
    axes = [
        torch.arange(lo, hi + 1, dtype=torch.float64)
        for lo, hi in bounds
    ]
    mesh = torch.meshgrid(*axes, indexing="ij")
    return torch.stack(mesh, dim=-1)


def _sampling_grid(
    P: GeometricMap,
    in_bounds: Bounds,
    out_bounds: Bounds,
    dtype: torch.dtype,
) -> Tensor:
    coords = output_grid(out_bounds)
    sizes = coords.shape[:-1]
    src = P.inverse()(coords.reshape(-1, out_bounds.ndim))

    # Input coordinates -> normalized [-1, 1] sample positions
    # (align_corners=False convention: element centers at (2k + 1) / n - 1).
    lo = torch.tensor(in_bounds.upperleft, dtype=torch.float64)
    n = torch.tensor(in_bounds.sizes, dtype=torch.float64)
    normalized = (2 * (src - lo) + 1) / n - 1

    # grid_sample expects the last axis first (x, y[, z]).
    grid = torch.flip(normalized, dims=[-1]).reshape(1, *sizes, out_bounds.ndim)
    return grid.to(dtype)


def warp(
    data: Tensor,
    P: GeometricMap,
    in_bounds: Bounds,
    out_bounds: Bounds,
    mode: str = "bilinear",
    extrapolation: str = "constant",
    fill: float = 0.0,
) -> Tensor:
    """Resample channel-first ``data`` through ``P`` into ``out_bounds``.

    Args:
        data: Tensor of shape (C, *in_bounds.sizes) with 2 or 3 spatial axes.
        P: Map from input coordinates to output coordinates.
        in_bounds: Bounds of ``data``.
        out_bounds: Output window in the mapped coordinate system.
        mode: One of ``INTERPOLATIONS``. ``bicubic`` needs 2 spatial axes.
        extrapolation: One of ``EXTRAPOLATIONS``.
        fill: Value for out-of-bounds samples when ``extrapolation`` is
            ``constant``.

    Returns:
        Tensor of shape (C, *out_bounds.sizes) with the dtype of ``data``.
    """
    if mode not in INTERPOLATIONS:
        raise ValueError(f"Unknown interpolation mode: {mode}")
    if extrapolation not in EXTRAPOLATIONS:
        raise ValueError(f"Unknown extrapolation: {extrapolation}")
    ndim = in_bounds.ndim
    if ndim not in (2, 3):
        raise ValueError(f"Resampling supports 2 or 3 spatial axes, got {ndim}")
    if tuple(data.shape[1:]) != tuple(in_bounds.sizes):
        raise ValueError(
            f"Data of shape {tuple(data.shape)} does not match bounds {in_bounds}"
        )

    orig_dtype = data.dtype
    work_dtype = orig_dtype if orig_dtype.is_floating_point else torch.float32
    grid = _sampling_grid(P, in_bounds, out_bounds, work_dtype)
    inp = data.to(work_dtype).unsqueeze(0)

    out = F.grid_sample(
        inp,
        grid,
        mode=mode,
        padding_mode=_PADDING_MODES[extrapolation],
        align_corners=False,
    )

    if extrapolation == "constant" and fill != 0:
        ones = torch.ones((1, 1, *in_bounds.sizes), dtype=work_dtype)
        weight = F.grid_sample(ones, grid, mode=mode, padding_mode="zeros", align_corners=False)
        out = out + fill * (1 - weight)

    return _restore_dtype(out.squeeze(0), orig_dtype)


def _restore_dtype(out: Tensor, dtype: torch.dtype) -> Tensor:
    if dtype == torch.bool:
        return out > 0.5
    if dtype.is_floating_point:
        return out
    info = torch.iinfo(dtype)
    return out.round().clamp(info.min, info.max).to(dtype)


def crop_to(data: Tensor, in_bounds: Bounds, out_bounds: Bounds) -> Tuple[Tensor, bool]:
    """Slice ``data`` to ``out_bounds`` if the window lies fully inside.

    Returns ``(data, True)`` on success and ``(data, False)`` when the window
    needs values from outside ``in_bounds``.
    """
    slices = [slice(None)]
    for (lo_in, hi_in), (lo, hi) in zip(in_bounds, out_bounds):
        if lo < lo_in or hi > hi_in or lo != int(lo) or hi != int(hi):
            return data, False
        slices.append(slice(int(lo - lo_in), int(hi - lo_in) + 1))
    return data[tuple(slices)], True
