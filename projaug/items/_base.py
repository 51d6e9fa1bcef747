"""Item interface and the non-spatial / composite items.

An item pairs a data payload with the ``Bounds`` describing its valid
coordinate extent. Items are never mutated by transforms: projecting an item
returns a new item carrying both the new data and the new bounds.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional, Sequence, Tuple

import numpy as np
import torch
from torch import Tensor

from ..core.bounds import Bounds
from ..core.geometry import GeometricMap
from ..exceptions import ShapeMismatchError


class Item(ABC):
    """Base class for augmentable data.

    Subclasses implement ``project`` (map data through a ``GeometricMap``
    into new bounds) and may override ``_copy_data_`` for buffer reuse.
    """

    data: Any
    bounds: Optional[Bounds]

    @abstractmethod
    def project(self, P: GeometricMap, bounds: Bounds) -> "Item":
        """Return a copy of this item transformed by ``P`` into ``bounds``."""

    def replace(self, **changes) -> "Item":
        """Shallow copy with some attributes replaced."""
        new = copy.copy(self)
        for name, value in changes.items():
            object.__setattr__(new, name, value)
        return new

    def copy(self) -> "Item":
        """Independent copy whose storage can serve as a buffer."""
        data = self.data.clone() if isinstance(self.data, Tensor) else copy.deepcopy(self.data)
        return self.replace(data=data)

    def check_buffer(self, buffer: "Item") -> None:
        """Raise ``ShapeMismatchError`` unless ``buffer`` can hold this item."""
        if type(buffer) is not type(self):
            raise ShapeMismatchError(
                f"Buffer of type {type(buffer).__name__} cannot hold {type(self).__name__}"
            )
        if isinstance(self.data, Tensor):
            if buffer.data.shape != self.data.shape:
                raise ShapeMismatchError(
                    f"Buffer shape {tuple(buffer.data.shape)} does not match "
                    f"{type(self).__name__} of shape {tuple(self.data.shape)}"
                )
            if buffer.data.dtype != self.data.dtype:
                raise ShapeMismatchError(
                    f"Buffer dtype {buffer.data.dtype} does not match {self.data.dtype}"
                )

    def copy_into(self, buffer: "Item") -> "Item":
        """Copy this item's data into ``buffer``'s storage.

        Assumes ``check_buffer`` passed. Returns an item that shares
        ``buffer``'s storage and carries this item's bounds.
        """
        if isinstance(self.data, Tensor):
            buffer.data.copy_(self.data)
            return self.replace(data=buffer.data)
        return self.replace(data=copy.deepcopy(self.data))

    def __repr__(self) -> str:
        if isinstance(self.data, Tensor):
            desc = f"shape={tuple(self.data.shape)}, dtype={self.data.dtype}"
        else:
            desc = repr(self.data)
        return f"{self.__class__.__name__}({desc}, bounds={self.bounds})"


class Category(Item):
    """Class label without spatial extent; untouched by projections.

    Args:
        label: Any label value (index, name, ...).
    """

    def __init__(self, label: Any) -> None:
        self.data = label
        self.bounds = None

    @property
    def label(self) -> Any:
        return self.data

    def project(self, P: GeometricMap, bounds: Bounds) -> "Category":
        return self


class Many(Item):
    """Bundle of items transformed in lockstep with shared randomness.

    All spatial sub-items must share the same bounds.

    Args:
        *items: Sub-items; a single list or tuple argument is unpacked.
    """

    def __init__(self, *items: Item) -> None:
        if len(items) == 1 and isinstance(items[0], (list, tuple)):
            items = tuple(items[0])
        if not items:
            raise ValueError("Many needs at least one item")
        self.data = tuple(as_item(i) for i in items)
        self.bounds = _shared_bounds(self.data)

    @property
    def items(self) -> Tuple[Item, ...]:
        return self.data

    def __iter__(self) -> Iterator[Item]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, index: int) -> Item:
        return self.data[index]

    def project(self, P: GeometricMap, bounds: Bounds) -> "Many":
        return Many(*(item.project(P, bounds) for item in self.data))

    def copy(self) -> "Many":
        return Many(*(item.copy() for item in self.data))

    def check_buffer(self, buffer: Item) -> None:
        if not isinstance(buffer, Many) or len(buffer) != len(self):
            raise ShapeMismatchError(
                f"Buffer {buffer!r} does not match Many with {len(self)} items"
            )
        for item, buf in zip(self.data, buffer.items):
            item.check_buffer(buf)

    def copy_into(self, buffer: Item) -> "Many":
        return Many(*(item.copy_into(buf) for item, buf in zip(self.data, buffer.items)))

    def __repr__(self) -> str:
        inner = ", ".join(repr(i) for i in self.data)
        return f"Many({inner})"


def as_item(obj: Any) -> Item:
    """Wrap tuples and lists of items as ``Many``."""
    if isinstance(obj, Item):
        return obj
    if isinstance(obj, (list, tuple)):
        return Many(*obj)
    raise TypeError(f"Expected an Item, got {type(obj).__name__}")


def _shared_bounds(items: Sequence[Item]) -> Optional[Bounds]:
    bounds = None
    for item in items:
        if item.bounds is None:
            continue
        if bounds is None:
            bounds = item.bounds
        elif item.bounds != bounds:
            raise ValueError(
                f"Items in Many must share bounds, got {bounds} and {item.bounds}"
            )
    return bounds


def as_tensor(data: Any, dtype: Optional[torch.dtype] = None) -> Tensor:
    """Accept tensors, numpy arrays and nested sequences."""
    if isinstance(data, Tensor):
        return data if dtype is None else data.to(dtype)
    if isinstance(data, np.ndarray):
        # from_numpy rejects negative strides left by np.flip and [::-1]
        data = torch.from_numpy(np.ascontiguousarray(data))
        return data if dtype is None else data.to(dtype)
    return torch.as_tensor(data, dtype=dtype)


def copy_item_data_(buffer: Item, item: Item) -> Item:
    """Copy ``item``'s data into the storage of ``buffer``.

    Raises:
        ShapeMismatchError: If ``buffer`` was not made for an item of the
            same kind and shape. Nothing is written in that case.
    """
    item.check_buffer(buffer)
    return item.copy_into(buffer)
