"""Exception hierarchy for projaug.

All errors subclass both ``AugmentationError`` and ``ValueError`` so callers
can catch library errors distinctly or treat them as plain invalid input.
"""


class AugmentationError(Exception):
    """Base exception for all projaug errors."""


class DimensionMismatchError(AugmentationError, ValueError):
    """Transform applied to bounds of a dimensionality it does not support."""


class DegenerateSizeError(AugmentationError, ValueError):
    """Target size of a crop or scale is zero or negative."""


class ShapeMismatchError(AugmentationError, ValueError):
    """Buffer shape does not match the freshly computed output."""
