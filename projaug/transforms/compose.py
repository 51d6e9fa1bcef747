"""Composition rewrite rules.

``compose(a, b)`` picks the first rule whose predicate matches the pair.
Pure projective transforms fold into one ``ComposedProjectiveTransform``;
a crop closes a chain into a ``CroppedProjectiveTransform``; anything that
follows a crop, and any origin-pinning transform, starts a new ``Sequence``
step so it sees the final bounds of the step before it.

Barriers are detected through the ``crops`` and ``pins_origin`` class
attributes, so custom transforms take part by setting them.
"""

import functools
import logging
from typing import Callable, List, NamedTuple

from .base import Identity, Sequence, Transform
from .projective.base import (
    ComposedProjectiveTransform,
    CroppedProjectiveTransform,
    ProjectiveTransform,
)


logger = logging.getLogger("projaug.compose")


def is_projective(tfm: Transform) -> bool:
    return isinstance(tfm, ProjectiveTransform)


def is_crop(tfm: Transform) -> bool:
    return is_projective(tfm) and tfm.crops


def pins_origin(tfm: Transform) -> bool:
    return is_projective(tfm) and tfm.pins_origin


def is_pure(tfm: Transform) -> bool:
    return is_projective(tfm) and not tfm.crops and not tfm.pins_origin


class Rule(NamedTuple):
    name: str
    matches: Callable[[Transform, Transform], bool]
    build: Callable[[Transform, Transform], Transform]


RULES: List[Rule] = [
    Rule(
        "identity-left",
        lambda a, b: isinstance(a, Identity),
        lambda a, b: b,
    ),
    Rule(
        "identity-right",
        lambda a, b: isinstance(b, Identity),
        lambda a, b: a,
    ),
    Rule(
        "into-sequence",
        lambda a, b: isinstance(b, Sequence),
        lambda a, b: Sequence(compose2(a, b.steps[0]), *b.steps[1:]),
    ),
    Rule(
        "onto-sequence",
        lambda a, b: isinstance(a, Sequence),
        lambda a, b: Sequence(*a.steps[:-1], compose2(a.steps[-1], b)),
    ),
    Rule(
        "pin-origin-barrier",
        lambda a, b: pins_origin(b),
        lambda a, b: Sequence(a, b),
    ),
    Rule(
        "crop-barrier",
        lambda a, b: is_crop(a),
        lambda a, b: Sequence(a, b),
    ),
    Rule(
        "cropped-into-cropped",
        lambda a, b: is_projective(a) and isinstance(b, CroppedProjectiveTransform),
        lambda a, b: CroppedProjectiveTransform(compose2(a, b.tfm), b.crop),
    ),
    Rule(
        "close-with-crop",
        lambda a, b: is_projective(a) and is_crop(b),
        lambda a, b: CroppedProjectiveTransform(a, b),
    ),
    Rule(
        "fold-projective",
        lambda a, b: is_projective(a) and is_pure(b),
        lambda a, b: ComposedProjectiveTransform(a, b),
    ),
]


def compose2(a: Transform, b: Transform) -> Transform:
    """Compose two transforms: ``a`` is applied first."""
    for rule in RULES:
        if rule.matches(a, b):
            result = rule.build(a, b)
            logger.debug("compose(%r, %r) -> %r [%s]", a, b, result, rule.name)
            return result
    return Sequence(a, b)


def compose(*tfms: Transform) -> Transform:
    """Compose transforms left to right.

    Example:
        >>> compose(ScaleKeepAspect((64, 64)), CenterCrop((64, 64)), PinOrigin())
    """
    if not tfms:
        return Identity()
    for tfm in tfms:
        if not isinstance(tfm, Transform):
            raise TypeError(f"Expected a Transform, got {type(tfm).__name__}")
    return functools.reduce(compose2, tfms)
