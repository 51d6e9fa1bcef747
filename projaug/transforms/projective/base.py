"""Projective transforms and their composed forms.

A projective transform knows two things: the ``GeometricMap`` it applies
given the current bounds (``get_projection``) and the bounds of the result
(``projection_bounds``). Items are projected once with the combined map, so
pixel data is only resampled once per chain.
"""

from typing import Any, Optional, Tuple

import torch

from ...core.bounds import Bounds, check_ndim, transform_bounds
from ...core.geometry import GeometricMap
from ...items import Item
from ..base import OneOf, Transform


class ProjectiveTransform(Transform):
    """Base class for transforms expressible as a ``GeometricMap``.

    Class attributes:
        crops: Bounds depend on more than the map (a crop). Crops end a
            foldable chain; see ``projaug.transforms.compose``.
        pins_origin: The transform re-anchors coordinates to the final
            bounds and must run as its own step after everything before it.
        ndim: Required dimensionality of the bounds, or ``None`` for any.
    """

    crops = False
    pins_origin = False
    ndim: Optional[int] = None

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        raise NotImplementedError

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        return transform_bounds(bounds, P)

    def _resolve(self, randstate: Any) -> Any:
        # Direct calls without a state draw a fresh one.
        return self.get_randstate() if randstate is None else randstate

    def projection(self, bounds: Bounds, randstate: Any = None) -> Tuple[GeometricMap, Bounds]:
        """Map and resulting bounds for ``bounds``."""
        if self.ndim is not None:
            check_ndim(bounds, self.ndim, self.__class__.__name__)
        P = self.get_projection(bounds, randstate)
        return P, self.projection_bounds(P, bounds, randstate)

    def apply(self, item: Item, randstate: Any = None) -> Item:
        if item.bounds is None:
            return item
        P, bounds = self.projection(item.bounds, randstate)
        return item.project(P, bounds)


class ComposedProjectiveTransform(ProjectiveTransform):
    """Pure projective transforms collapsed into one map.

    Each step's map is computed from the bounds produced by the previous
    step, then all maps are multiplied together.

    Args:
        *tfms: Pure projective transforms; nested compositions are
            flattened so grouping does not matter.
    """

    def __init__(self, *tfms: ProjectiveTransform) -> None:
        flat = []
        for tfm in tfms:
            if isinstance(tfm, ComposedProjectiveTransform):
                flat.extend(tfm.tfms)
            else:
                flat.append(tfm)
        self.tfms = tuple(flat)

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> tuple:
        return tuple(t.get_randstate(generator) for t in self.tfms)

    def projection(self, bounds: Bounds, randstate: Any = None) -> Tuple[GeometricMap, Bounds]:
        states = randstate if randstate is not None else (None,) * len(self.tfms)
        P = GeometricMap.identity(bounds.ndim)
        for tfm, state in zip(self.tfms, states):
            P_tfm, bounds = tfm.projection(bounds, state)
            P = P_tfm @ P
        return P, bounds

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return self.projection(bounds, randstate)[0]

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        return self.projection(bounds, randstate)[1]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(repr(t) for t in self.tfms)})"


class CroppedProjectiveTransform(ProjectiveTransform):
    """A pure projective transform followed by a crop.

    The crop window is computed from the bounds the pure part produces,
    never from the original input bounds.

    Args:
        tfm: Pure (possibly composed) projective transform.
        crop: Transform with ``crops = True``.
    """

    crops = True

    def __init__(self, tfm: ProjectiveTransform, crop: ProjectiveTransform) -> None:
        self.tfm = tfm
        self.crop = crop

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> tuple:
        return (self.tfm.get_randstate(generator), self.crop.get_randstate(generator))

    def projection(self, bounds: Bounds, randstate: Any = None) -> Tuple[GeometricMap, Bounds]:
        tfm_state, crop_state = randstate if randstate is not None else (None, None)
        P, bounds = self.tfm.projection(bounds, tfm_state)
        P_crop, bounds = self.crop.projection(bounds, crop_state)
        return P_crop @ P, bounds

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return self.projection(bounds, randstate)[0]

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        return self.projection(bounds, randstate)[1]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.tfm!r}, {self.crop!r})"


class ProjectiveIdentity(ProjectiveTransform):
    """Identity map; bounds pass through unchanged."""

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return GeometricMap.identity(bounds.ndim)

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        return bounds


class ProjectiveOneOf(ProjectiveTransform, OneOf):
    """``OneOf`` over pure projective transforms; composes like one."""

    def projection(self, bounds: Bounds, randstate: Any = None) -> Tuple[GeometricMap, Bounds]:
        index, state = randstate if randstate is not None else self.get_randstate()
        return self.tfms[index].projection(bounds, state)

    def get_projection(self, bounds: Bounds, randstate: Any = None) -> GeometricMap:
        return self.projection(bounds, randstate)[0]

    def projection_bounds(self, P: GeometricMap, bounds: Bounds, randstate: Any = None) -> Bounds:
        return self.projection(bounds, randstate)[1]

    def apply_(self, buffer: Item, item: Item, randstate: Any = None) -> Item:
        return ProjectiveTransform.apply_(self, buffer, item, randstate)
