"""Transform interface and apply engine.

``apply`` samples a transform's random state exactly once and threads it
through every nested transform and every sub-item of a ``Many``, so an image
and its annotations always receive the same parameters. ``apply_`` is the
buffer-reusing counterpart that writes into storage made by ``makebuffer``.

Example:
    >>> from projaug.transforms import Rotate, apply
    >>> from projaug.items import Image, Keypoints, Many
    >>> image = Image(torch.rand(3, 64, 64))
    >>> points = Keypoints(torch.tensor([[10.0, 20.0]]), image.bounds)
    >>> rotated_image, rotated_points = apply(Rotate(30), Many(image, points))
"""

import logging
import threading
from typing import Any, Callable, Optional
from typing import Sequence as TypingSequence

import torch

from ..exceptions import ShapeMismatchError
from ..items import Item, Many, as_item, copy_item_data_


logger = logging.getLogger("projaug.apply")


class Transform:
    """Base class for all transforms.

    Subclasses implement ``apply(item, randstate)`` for an already-sampled
    ``randstate`` and, if random, ``get_randstate``.
    """

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> Any:
        """Sample the parameters for one application. ``None`` if fixed."""
        return None

    def apply(self, item: Item, randstate: Any = None) -> Item:
        raise NotImplementedError

    def apply_(self, buffer: Item, item: Item, randstate: Any = None) -> Item:
        """Like ``apply`` but writes the result into ``buffer``'s storage."""
        return copy_item_data_(buffer, self.apply(item, randstate))

    def __call__(
        self,
        item: Any,
        randstate: Any = None,
        generator: Optional[torch.Generator] = None,
    ) -> Item:
        return apply(self, item, randstate=randstate, generator=generator)

    def __rshift__(self, other: "Transform") -> "Transform":
        from .compose import compose
        if not isinstance(other, Transform):
            return NotImplemented
        return compose(self, other)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Identity(Transform):
    """Returns items unchanged; the neutral element of ``compose``."""

    def apply(self, item: Item, randstate: Any = None) -> Item:
        return item


class Lambda(Transform):
    """Applies ``fn`` to every non-``Many`` item.

    Args:
        fn: Callable taking and returning an ``Item``.
    """

    def __init__(self, fn: Callable[[Item], Item]) -> None:
        self.fn = fn

    def apply(self, item: Item, randstate: Any = None) -> Item:
        if isinstance(item, Many):
            return Many(*(self.apply(i, randstate) for i in item))
        return self.fn(item)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"{self.__class__.__name__}({name})"


class Sequence(Transform):
    """Transforms applied one after another, each with its own step.

    Unlike composed projective transforms, every step produces its own
    intermediate item. ``compose`` creates sequences where folding into one
    map would be wrong (after crops, before ``PinOrigin``).

    Args:
        *steps: Transforms; nested sequences are flattened.
    """

    def __init__(self, *steps: Transform) -> None:
        flat = []
        for step in steps:
            if isinstance(step, Sequence):
                flat.extend(step.steps)
            else:
                flat.append(step)
        if not flat:
            raise ValueError("Sequence needs at least one step")
        self.steps = tuple(flat)

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> tuple:
        return tuple(step.get_randstate(generator) for step in self.steps)

    def apply(self, item: Item, randstate: Any = None) -> Item:
        states = _states(randstate, len(self.steps))
        for step, state in zip(self.steps, states):
            item = step.apply(item, state)
        return item

    def apply_(self, buffer: Item, item: Item, randstate: Any = None) -> Item:
        states = _states(randstate, len(self.steps))
        for step, state in zip(self.steps[:-1], states[:-1]):
            item = step.apply(item, state)
        return self.steps[-1].apply_(buffer, item, states[-1])

    def __repr__(self) -> str:
        inner = "".join(f"\n    {s}" for s in self.steps)
        return f"{self.__class__.__name__}({inner}\n)"


class OneOf(Transform):
    """Apply one transform chosen at random.

    The choice is part of the random state, so every sub-item of a ``Many``
    gets the same transform. If all options are pure projective transforms
    the result is a ``ProjectiveOneOf`` that still composes into one map.

    Args:
        tfms: Transforms to choose from.
        ps: Selection weights; uniform if ``None``.
    """

    def __new__(cls, tfms: TypingSequence[Transform] = (), ps: Optional[TypingSequence[float]] = None):
        if cls is OneOf:
            from .compose import is_pure
            from .projective.base import ProjectiveOneOf
            if tfms and all(is_pure(t) for t in tfms):
                cls = ProjectiveOneOf
        return super().__new__(cls)

    def __init__(self, tfms: TypingSequence[Transform], ps: Optional[TypingSequence[float]] = None) -> None:
        self.tfms = tuple(tfms)
        if not self.tfms:
            raise ValueError("OneOf needs at least one transform")
        if ps is None:
            ps = [1.0] * len(self.tfms)
        if len(ps) != len(self.tfms):
            raise ValueError(f"Got {len(ps)} weights for {len(self.tfms)} transforms")
        if any(p < 0 for p in ps) or sum(ps) <= 0:
            raise ValueError(f"Weights must be non-negative with a positive sum, got {list(ps)}")
        self.ps = torch.tensor(ps, dtype=torch.float64) / sum(ps)

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> tuple:
        index = int(torch.multinomial(self.ps, 1, generator=generator).item())
        return index, self.tfms[index].get_randstate(generator)

    def apply(self, item: Item, randstate: Any = None) -> Item:
        index, state = randstate if randstate is not None else self.get_randstate()
        return self.tfms[index].apply(item, state)

    def apply_(self, buffer: Item, item: Item, randstate: Any = None) -> Item:
        index, state = randstate if randstate is not None else self.get_randstate()
        return self.tfms[index].apply_(buffer, item, state)

    def __repr__(self) -> str:
        options = ", ".join(f"{t!r}: {p:.2f}" for t, p in zip(self.tfms, self.ps.tolist()))
        return f"{self.__class__.__name__}({options})"


def Maybe(tfm: Transform, p: float = 0.5) -> OneOf:
    """Apply ``tfm`` with probability ``p``, otherwise leave items unchanged."""
    from .compose import is_pure
    from .projective.base import ProjectiveIdentity

    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    skip = ProjectiveIdentity() if is_pure(tfm) else Identity()
    return OneOf((tfm, skip), (p, 1.0 - p))


class Buffered(Transform):
    """Wraps ``tfm`` and reuses one output buffer per thread.

    The first call allocates; later calls write into the same storage with
    ``apply_``. A new buffer is allocated when item shapes change. Returned
    items share the buffer and are overwritten by the next call from the
    same thread.

    Args:
        tfm: Transform to buffer.
    """

    def __init__(self, tfm: Transform) -> None:
        self.tfm = tfm
        self._local = threading.local()

    def get_randstate(self, generator: Optional[torch.Generator] = None) -> Any:
        return self.tfm.get_randstate(generator)

    def apply(self, item: Item, randstate: Any = None) -> Item:
        buffer = getattr(self._local, "buffer", None)
        if buffer is not None:
            try:
                return self.tfm.apply_(buffer, item, randstate)
            except ShapeMismatchError as e:
                logger.debug("Reallocating buffer for %r: %s", self.tfm, e)
        result = self.tfm.apply(item, randstate)
        self._local.buffer = result.copy()
        return result

    def __getstate__(self):
        return {"tfm": self.tfm}

    def __setstate__(self, state):
        self.tfm = state["tfm"]
        self._local = threading.local()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.tfm})"


def _states(randstate: Any, n: int) -> tuple:
    if randstate is None:
        return (None,) * n
    if len(randstate) != n:
        raise ValueError(f"Expected {n} random states, got {len(randstate)}")
    return tuple(randstate)


def apply(
    tfm: Transform,
    item: Any,
    randstate: Any = None,
    generator: Optional[torch.Generator] = None,
) -> Item:
    """Apply ``tfm`` to ``item`` with a single random draw.

    Args:
        tfm: Transform to apply.
        item: An ``Item`` or a tuple/list of items (treated as ``Many``).
        randstate: Fixed parameters; sampled from ``tfm`` when ``None``.
        generator: Optional random source for sampling.

    Returns:
        The transformed item.
    """
    item = as_item(item)
    if randstate is None:
        randstate = tfm.get_randstate(generator)
    logger.debug("Applying %r to %r with randstate %r", tfm, item, randstate)
    return tfm.apply(item, randstate)


def apply_(
    buffer: Item,
    tfm: Transform,
    item: Any,
    randstate: Any = None,
    generator: Optional[torch.Generator] = None,
) -> Item:
    """Buffered ``apply``: writes the result into ``buffer``'s storage.

    Raises:
        ShapeMismatchError: If ``buffer`` does not match the output.
    """
    item = as_item(item)
    if randstate is None:
        randstate = tfm.get_randstate(generator)
    return tfm.apply_(as_item(buffer), item, randstate)


def makebuffer(tfm: Transform, item: Any) -> Item:
    """Allocate a buffer that ``apply_(buffer, tfm, item)`` can reuse."""
    return apply(tfm, item)
