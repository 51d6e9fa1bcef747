"""Random distribution source.

Transforms describe their randomness as either a ``(low, high)`` range
(sampled uniformly) or a ``torch.distributions.Distribution``. A value is
drawn once per top-level ``apply`` call and passed down explicitly.
"""

from typing import Optional, Sequence, Tuple, Union

import torch
from torch.distributions import Distribution, Uniform


DistributionLike = Union[float, Tuple[float, float], Distribution]


def as_distribution(value: DistributionLike, symmetric: bool = False) -> Distribution:
    """Normalize a distribution-like value.

    Args:
        value: A ``Distribution``, a ``(low, high)`` range, or a single number.
        symmetric: Interpret a single number ``g`` as ``(-|g|, |g|)``
            instead of a constant.
    """
    if isinstance(value, Distribution):
        return value
    if isinstance(value, (int, float)):
        if not symmetric:
            return _Constant(value)
        value = (-abs(float(value)), abs(float(value)))
    low, high = value
    low, high = float(low), float(high)
    if low > high:
        raise ValueError(f"Invalid range ({low}, {high}): low > high")
    if low == high:
        return _Constant(low)
    return Uniform(low, high)


def sample(dist: Distribution, generator: Optional[torch.Generator] = None) -> float:
    """Draw one scalar from ``dist``.

    Without ``generator`` the draw uses torch's global random state. With one,
    a uniform draw from ``generator`` is pushed through the inverse CDF so the
    result depends only on the generator.

    Raises:
        ValueError: If ``generator`` is given and ``dist`` has no ``icdf``.
    """
    if isinstance(dist, _Constant):
        return dist.value
    if generator is None:
        return float(dist.sample())
    u = torch.rand((), generator=generator, dtype=torch.float64)
    if isinstance(dist, Uniform):
        return float(dist.low + u * (dist.high - dist.low))
    try:
        return float(dist.icdf(u))
    except NotImplementedError:
        raise ValueError(
            f"{type(dist).__name__} has no icdf and cannot be sampled from a generator"
        ) from None


def sample_unit(ndim: int, generator: Optional[torch.Generator] = None) -> Tuple[float, ...]:
    """One uniform draw in [0, 1) per axis."""
    return tuple(torch.rand(ndim, generator=generator, dtype=torch.float64).tolist())


def describe(dist: Distribution) -> str:
    if isinstance(dist, _Constant):
        return str(dist.value)
    if isinstance(dist, Uniform):
        return f"Uniform({float(dist.low)}, {float(dist.high)})"
    return repr(dist)


class _Constant(Distribution):
    """Degenerate distribution for zero-width ranges."""

    arg_constraints = {}

    def __init__(self, value: float) -> None:
        self.value = float(value)
        super().__init__(batch_shape=torch.Size(), validate_args=False)

    def sample(self, sample_shape: Sequence[int] = torch.Size()):
        return torch.full(tuple(sample_shape), self.value, dtype=torch.float64)
