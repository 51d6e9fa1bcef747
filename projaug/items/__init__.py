"""Items: typed (data, bounds) pairs that transforms operate on."""

from ._base import Category, Item, Many, as_item, copy_item_data_
from .pixels import ArrayItem, Image, MaskBinary, MaskMulti
from .points import BoundingBox, Keypoints, Polygon

__all__ = [
    "ArrayItem",
    "BoundingBox",
    "Category",
    "Image",
    "Item",
    "Keypoints",
    "Many",
    "MaskBinary",
    "MaskMulti",
    "Polygon",
    "as_item",
    "copy_item_data_",
]
