"""Build transforms from configuration entries.

A pipeline is a list of entries, each a mapping with a ``type`` key naming a
registered transform and the remaining keys passed as keyword arguments.
Lists become tuples (sizes, ranges). An optional ``p`` key wraps the entry
in ``Maybe``. Entries are combined with ``compose``.

Example:
    >>> tfm = build_transform([
    ...     {"type": "FlipX", "p": 0.5},
    ...     {"type": "Rotate", "degrees": 10},
    ...     {"type": "CenterResizeCrop", "size": [224, 224]},
    ... ])
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Union

from .. import transforms as T


logger = logging.getLogger("projaug.config")

TRANSFORMS: Dict[str, Callable[..., T.Transform]] = {}


def register_transform(name_or_fn: Union[str, Callable, None] = None):
    """Register a transform class or factory under its name.

    Can be used bare (``@register_transform``) or with an explicit name
    (``@register_transform("MyCrop")``).
    """

    def _register(fn: Callable, name: str) -> Callable:
        if name in TRANSFORMS:
            logger.debug("Overriding registered transform %s", name)
        TRANSFORMS[name] = fn
        return fn

    if callable(name_or_fn):
        return _register(name_or_fn, name_or_fn.__name__)
    return lambda fn: _register(fn, name_or_fn or fn.__name__)


for _name in (
    "Identity",
    "Project",
    "Rotate",
    "Reflect",
    "FlipX",
    "FlipY",
    "Zoom",
    "Translate",
    "PinOrigin",
    "ScaleFixed",
    "ScaleRatio",
    "ScaleKeepAspect",
    "Crop",
    "CenterCrop",
    "RandomCrop",
    "CropRatio",
    "CropDivisible",
    "CropIndices",
    "PadDivisible",
    "ResizeFixed",
    "ResizeRatio",
    "ResizeDivisible",
    "RandomResizeCrop",
    "CenterResizeCrop",
    "ResizePadDivisible",
):
    register_transform(getattr(T, _name))


def _as_args(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_as_args(v) for v in value)
    return value


def build_one(entry: Mapping[str, Any]) -> T.Transform:
    """Build a single transform from a ``{type: ..., **kwargs}`` entry.

    Raises:
        KeyError: If ``type`` is missing or not registered.
    """
    kwargs = {k: _as_args(v) for k, v in entry.items()}
    if "type" not in kwargs:
        raise KeyError(f"Transform entry has no 'type': {dict(entry)}")
    name = kwargs.pop("type")
    if name not in TRANSFORMS:
        raise KeyError(f"Unknown transform '{name}'. Available: {sorted(TRANSFORMS)}")
    p = kwargs.pop("p", None)

    tfm = TRANSFORMS[name](**kwargs)
    if p is not None:
        tfm = T.Maybe(tfm, p)
    logger.debug("Built %r from %s", tfm, name)
    return tfm


def build_transform(cfg: Union[Mapping[str, Any], List[Mapping[str, Any]]]) -> T.Transform:
    """Build one composed transform from an entry or a list of entries.

    Args:
        cfg: A single entry or a list of entries, e.g. ``config.pipeline.train``.

    Returns:
        The composed transform; ``Identity`` for an empty list.
    """
    entries = [cfg] if isinstance(cfg, Mapping) else list(cfg)
    tfm = T.compose(*(build_one(entry) for entry in entries))
    logger.info("Built pipeline from %d entries: %r", len(entries), tfm)
    return tfm
