"""
Pytest fixtures and configuration for the projaug test suite.

This module provides shared fixtures for testing transforms, including
small dummy items and helpers for comparing results.
"""

import pytest
import torch
from torch import Tensor

from projaug.core import Bounds
from projaug.items import BoundingBox, Image, Keypoints, MaskBinary


# ============================================================================
# Random Source Fixtures
# ============================================================================

@pytest.fixture
def generator() -> torch.Generator:
    """Seeded generator for reproducible sampling."""
    return torch.Generator().manual_seed(0)


# ============================================================================
# Size Fixtures
# ============================================================================

@pytest.fixture
def image_size() -> tuple:
    """Default image size (height, width)."""
    return (32, 48)


@pytest.fixture
def bounds(image_size: tuple) -> Bounds:
    """Bounds of the default image."""
    return Bounds.from_size(image_size)


# ============================================================================
# Dummy Item Fixtures
# ============================================================================

@pytest.fixture
def image(image_size: tuple) -> Image:
    """
    Create a dummy RGB image.

    Returns:
        Image with data of shape (3, height, width) in [0, 1].
    """
    torch.manual_seed(0)
    return Image(torch.rand(3, *image_size))


@pytest.fixture
def keypoints(bounds: Bounds) -> Keypoints:
    """Three keypoints inside the default image."""
    return Keypoints(torch.tensor([
        [0.0, 0.0],     # Upper-left corner
        [10.0, 20.0],   # Interior
        [31.0, 47.0],   # Lower-right corner
    ]), bounds)


@pytest.fixture
def boxes(bounds: Bounds) -> BoundingBox:
    """Two boxes as (2, 2) min/max corners each."""
    return BoundingBox(torch.tensor([
        [[2.0, 4.0], [10.0, 20.0]],
        [[15.0, 30.0], [25.0, 40.0]],
    ]), bounds)


@pytest.fixture
def single_pixel_mask(image_size: tuple) -> MaskBinary:
    """Boolean mask with exactly one True pixel at (4, 5)."""
    data = torch.zeros(image_size, dtype=torch.bool)
    data[4, 5] = True
    return MaskBinary(data)


# ============================================================================
# Helper Functions
# ============================================================================

def assert_tensor_shape(tensor: Tensor, expected_shape: tuple, name: str = "tensor"):
    """Assert tensor has expected shape with informative error message."""
    assert tuple(tensor.shape) == tuple(expected_shape), (
        f"{name} has shape {tuple(tensor.shape)}, expected {tuple(expected_shape)}"
    )


def assert_no_nan_inf(tensor: Tensor, name: str = "tensor"):
    """Assert tensor has no NaN or Inf values."""
    assert not torch.isnan(tensor).any(), f"{name} contains NaN values"
    assert not torch.isinf(tensor).any(), f"{name} contains Inf values"
