"""
Tests for the bounds algebra.

This module tests Bounds construction, the corner-based bounds transform
and window placement with offset_crop_bounds.
"""

import pickle

import pytest
import torch

from projaug.core import Bounds, GeometricMap, check_ndim, offset_crop_bounds, transform_bounds
from projaug.exceptions import AugmentationError, DegenerateSizeError, DimensionMismatchError


class TestBoundsConstruction:
    """Tests for creating Bounds."""

    def test_from_size(self):
        """Bounds of an array start at 0 and are inclusive."""
        b = Bounds.from_size((100, 200))

        assert b.ranges == ((0, 99), (0, 199))
        assert b.sizes == (100, 200)
        assert b.ndim == 2

    def test_from_size_degenerate_raises(self):
        """Zero or negative sizes are rejected."""
        with pytest.raises(DegenerateSizeError):
            Bounds.from_size((0, 5))

    def test_degenerate_is_value_error(self):
        """Library errors stay catchable as ValueError."""
        with pytest.raises(ValueError):
            Bounds.from_size((-1,))
        assert issubclass(DegenerateSizeError, AugmentationError)

    def test_inverted_range_raises(self):
        """hi < lo is invalid."""
        with pytest.raises(ValueError):
            Bounds((5, 4))

    def test_single_element_range(self):
        """lo == hi is a valid size-1 axis."""
        assert Bounds((3, 3)).sizes == (1,)

    def test_properties(self):
        """upperleft, lowerright and center."""
        b = Bounds((2, 5), (10, 20))

        assert b.upperleft == (2, 10)
        assert b.lowerright == (5, 20)
        assert b.center == (3.5, 15.0)

    def test_from_points(self):
        """Smallest integer bounds enclosing points."""
        b = Bounds.from_points(torch.tensor([[0.5, -1.2], [3.1, 2.0]]))

        assert b == Bounds((0, 4), (-2, 2))


class TestBoundsValueSemantics:
    """Bounds are immutable values."""

    def test_immutable(self):
        b = Bounds.from_size((4, 4))

        with pytest.raises(AttributeError):
            b._ranges = ((0, 1), (0, 1))

    def test_equality_and_hash(self):
        a = Bounds((0, 9), (0, 9))
        b = Bounds.from_size((10, 10))

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_pickle(self):
        """Bounds survive pickling (e.g. to DataLoader workers)."""
        b = Bounds((1, 5), (-3, 7))

        assert pickle.loads(pickle.dumps(b)) == b

    def test_corners(self):
        corners = Bounds((0, 9), (0, 19)).corners()

        assert corners.shape == (4, 2)
        assert corners.dtype == torch.float64
        assert [0.0, 19.0] in corners.tolist()
        assert [9.0, 0.0] in corners.tolist()


class TestBoundsOperations:
    """Tests for shift, intersect and contains."""

    def test_shift(self):
        assert Bounds.from_size((4, 4)).shift((2, -1)) == Bounds((2, 5), (-1, 2))

    def test_shift_wrong_dims_raises(self):
        with pytest.raises(DimensionMismatchError):
            Bounds.from_size((4, 4)).shift((1,))

    def test_intersect(self):
        a = Bounds((0, 9), (0, 9))
        b = Bounds((5, 14), (-5, 4))

        assert a.intersect(b) == Bounds((5, 9), (0, 4))

    def test_intersect_disjoint_raises(self):
        with pytest.raises(ValueError):
            Bounds((0, 1)).intersect(Bounds((5, 6)))

    def test_contains(self):
        b = Bounds.from_size((10, 10))
        points = torch.tensor([[0.0, 0.0], [9.0, 9.5], [-0.1, 3.0]])

        assert b.contains(points).tolist() == [True, False, False]

    def test_check_ndim(self):
        with pytest.raises(DimensionMismatchError):
            check_ndim(Bounds.from_size((4, 4, 4)), 2)


class TestTransformBounds:
    """Tests for transform_bounds."""

    def test_identity(self):
        b = Bounds.from_size((100, 200))

        assert transform_bounds(b, GeometricMap.identity(2)) == b

    def test_fractional_translation_grows_outward(self):
        """Fractional corners are floored/ceiled."""
        b = Bounds.from_size((100, 200))
        P = GeometricMap.translation((1.5, 0.0))

        assert transform_bounds(b, P) == Bounds((1, 101), (0, 199))

    def test_float_noise_is_rounded(self):
        """Tiny float error must not grow the window by a pixel."""
        b = Bounds.from_size((100, 200))
        P = GeometricMap.translation((1e-9, -1e-9))

        assert transform_bounds(b, P) == b

    def test_integer_scale(self):
        b = Bounds.from_size((10, 10))

        assert transform_bounds(b, GeometricMap.scale((2.0, 2.0))) == Bounds((0, 18), (0, 18))


class TestOffsetCropBounds:
    """Tests for offset_crop_bounds."""

    def test_center(self):
        b = Bounds.from_size((100, 200))

        assert offset_crop_bounds((50, 50), b, (0.5, 0.5)) == Bounds((25, 74), (75, 124))

    def test_origin_and_end(self):
        b = Bounds.from_size((10, 10))

        assert offset_crop_bounds((4, 4), b, (0.0, 0.0)) == Bounds((0, 3), (0, 3))
        assert offset_crop_bounds((4, 4), b, (1.0, 1.0)) == Bounds((6, 9), (6, 9))

    def test_same_size_is_noop(self):
        b = Bounds((3, 12), (5, 14))

        assert offset_crop_bounds((10, 10), b, (0.5, 0.5)) is b

    def test_larger_window_pads_outward(self):
        b = Bounds.from_size((100,))

        assert offset_crop_bounds((120,), b, (0.5,)) == Bounds((-10, 109))

    def test_result_size_is_exact(self):
        """The window has exactly the requested size for any offset."""
        b = Bounds((0, 36), (5, 60))
        for offset in (0.0, 0.13, 0.5, 0.77, 1.0):
            assert offset_crop_bounds((17, 30), b, (offset, offset)).sizes == (17, 30)

    def test_offsets_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            offset_crop_bounds((4, 4), Bounds.from_size((10, 10)), (0.5,))

    def test_degenerate_size_raises(self):
        with pytest.raises(DegenerateSizeError):
            offset_crop_bounds((0, 4), Bounds.from_size((10, 10)), (0.5, 0.5))
