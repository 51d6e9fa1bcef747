"""Composable geometric maps.

A ``GeometricMap`` wraps a homogeneous ``(N+1, N+1)`` float64 matrix and
maps N-dimensional coordinates. Maps are immutable; composing returns a new
map.

Composition order follows function composition: ``P.compose(Q)`` (or
``P @ Q``) applies ``Q`` first, then ``P``.

Example:
    >>> P = GeometricMap.scale((2.0, 2.0)) @ GeometricMap.translation((1, 0))
    >>> P(torch.tensor([[0.0, 0.0]]))
    tensor([[2., 0.]], dtype=torch.float64)
"""

import math
from typing import Sequence

import torch
from torch import Tensor


_DTYPE = torch.float64


class GeometricMap:
    """Invertible projective map on N-dimensional coordinates.

    Args:
        matrix: Homogeneous ``(N+1, N+1)`` matrix.
    """

    def __init__(self, matrix: Tensor) -> None:
        matrix = torch.as_tensor(matrix, dtype=_DTYPE)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] < 2:
            raise ValueError(
                f"Expected a square homogeneous matrix, got shape {tuple(matrix.shape)}"
            )
        self._matrix = matrix.clone()

    # Constructors

    @classmethod
    def identity(cls, ndim: int) -> "GeometricMap":
        return cls(torch.eye(ndim + 1, dtype=_DTYPE))

    @classmethod
    def translation(cls, offsets: Sequence[float]) -> "GeometricMap":
        n = len(offsets)
        m = torch.eye(n + 1, dtype=_DTYPE)
        m[:n, n] = torch.as_tensor(offsets, dtype=_DTYPE)
        return cls(m)

    @classmethod
    def linear(cls, A: Tensor) -> "GeometricMap":
        A = torch.as_tensor(A, dtype=_DTYPE)
        n = A.shape[0]
        m = torch.eye(n + 1, dtype=_DTYPE)
        m[:n, :n] = A
        return cls(m)

    @classmethod
    def scale(cls, ratios: Sequence[float]) -> "GeometricMap":
        return cls.linear(torch.diag(torch.as_tensor(ratios, dtype=_DTYPE)))

    @classmethod
    def rotation(cls, radians: float) -> "GeometricMap":
        """2D rotation about the origin."""
        c, s = math.cos(radians), math.sin(radians)
        return cls.linear(torch.tensor([[c, -s], [s, c]], dtype=_DTYPE))

    @classmethod
    def reflection(cls, radians: float) -> "GeometricMap":
        """2D reflection across the line through the origin at ``radians``.

        Entries are rounded to 12 decimals so that e.g. ``sin(2 * pi)``
        becomes an exact zero.
        """
        c, s = math.cos(2 * radians), math.sin(2 * radians)
        A = torch.tensor([[c, s], [s, -c]], dtype=_DTYPE)
        return cls.linear(torch.round(A, decimals=12))

    # Properties

    @property
    def ndim(self) -> int:
        return self._matrix.shape[0] - 1

    @property
    def matrix(self) -> Tensor:
        return self._matrix.clone()

    @property
    def linear_part(self) -> Tensor:
        n = self.ndim
        return self._matrix[:n, :n].clone()

    @property
    def translation_part(self) -> Tensor:
        n = self.ndim
        return self._matrix[:n, n].clone()

    @property
    def is_affine(self) -> bool:
        n = self.ndim
        last = torch.zeros(n + 1, dtype=_DTYPE)
        last[n] = 1.0
        return bool(torch.equal(self._matrix[n], last))

    # Algebra

    def compose(self, other: "GeometricMap") -> "GeometricMap":
        """Map that applies ``other`` first and then ``self``."""
        if other.ndim != self.ndim:
            raise ValueError(
                f"Cannot compose {self.ndim}D map with {other.ndim}D map"
            )
        return GeometricMap(self._matrix @ other._matrix)

    def __matmul__(self, other: "GeometricMap") -> "GeometricMap":
        if not isinstance(other, GeometricMap):
            return NotImplemented
        return self.compose(other)

    def inverse(self) -> "GeometricMap":
        return GeometricMap(torch.linalg.inv(self._matrix))

    def recenter(self, center: Sequence[float]) -> "GeometricMap":
        """Same map, but acting around ``center`` instead of the origin."""
        c = [float(x) for x in center]
        to_origin = GeometricMap.translation([-x for x in c])
        return GeometricMap.translation(c) @ self @ to_origin

    def __call__(self, points: Tensor) -> Tensor:
        """Map points of shape (N,) or (K, N); returns float64."""
        points = torch.as_tensor(points, dtype=_DTYPE)
        single = points.ndim == 1
        if single:
            points = points.unsqueeze(0)
        n = self.ndim
        if points.shape[-1] != n:
            raise ValueError(
                f"{n}D map cannot be applied to points of shape {tuple(points.shape)}"
            )
        ones = torch.ones(points.shape[0], 1, dtype=_DTYPE)
        out = torch.cat([points, ones], dim=1) @ self._matrix.T
        out = out[:, :n] / out[:, n:]
        return out[0] if single else out

    def is_identity(self, atol: float = 1e-12) -> bool:
        return self.allclose(GeometricMap.identity(self.ndim), atol=atol)

    def allclose(self, other: "GeometricMap", atol: float = 1e-8) -> bool:
        if other.ndim != self.ndim:
            return False
        return bool(torch.allclose(self._matrix, other._matrix, atol=atol))

    def __repr__(self) -> str:
        rows = ", ".join(str([round(v, 6) for v in row]) for row in self._matrix.tolist())
        return f"{self.__class__.__name__}([{rows}])"

