"""
Tests for composition rewrite rules.

This module tests which structure compose produces for each pair of
transform kinds, and that folding changes the structure but not the result.
"""

import pytest
import torch

from projaug.core import Bounds
from projaug.items import Image, Keypoints, Many
from projaug.transforms import (
    CenterCrop,
    CenterResizeCrop,
    ComposedProjectiveTransform,
    CroppedProjectiveTransform,
    FlipX,
    Identity,
    Lambda,
    Maybe,
    OneOf,
    PinOrigin,
    ProjectiveOneOf,
    Rotate,
    ScaleKeepAspect,
    ScaleRatio,
    Sequence,
    Translate,
    Zoom,
    apply,
    compose,
)


class TestComposeStructure:
    """Tests for the transform produced by each rule."""

    def test_empty_is_identity(self):
        assert isinstance(compose(), Identity)

    def test_single_is_unchanged(self):
        tfm = Rotate(10)

        assert compose(tfm) is tfm

    def test_identity_is_neutral(self):
        tfm = Rotate(10)

        assert compose(Identity(), tfm) is tfm
        assert compose(tfm, Identity()) is tfm

    def test_pure_transforms_fold(self):
        tfm = compose(Rotate(10), Zoom())

        assert isinstance(tfm, ComposedProjectiveTransform)
        assert len(tfm.tfms) == 2

    def test_folding_flattens(self):
        tfm = compose(compose(Rotate(10), Zoom()), compose(FlipX(), Rotate(5)))

        assert isinstance(tfm, ComposedProjectiveTransform)
        assert len(tfm.tfms) == 4

    def test_crop_closes_chain(self):
        tfm = compose(Rotate(10), CenterCrop((8, 8)))

        assert isinstance(tfm, CroppedProjectiveTransform)
        assert tfm.crops

    def test_chain_before_crop_folds(self):
        tfm = compose(Rotate(10), Zoom(), CenterCrop((8, 8)))

        assert isinstance(tfm, CroppedProjectiveTransform)
        assert isinstance(tfm.tfm, ComposedProjectiveTransform)
        assert len(tfm.tfm.tfms) == 2

    def test_projective_into_cropped(self):
        tfm = compose(Rotate(10), compose(Zoom(), CenterCrop((8, 8))))

        assert isinstance(tfm, CroppedProjectiveTransform)
        assert isinstance(tfm.tfm, ComposedProjectiveTransform)

    def test_after_crop_is_sequence(self):
        tfm = compose(CenterCrop((8, 8)), Rotate(10))

        assert isinstance(tfm, Sequence)
        assert len(tfm.steps) == 2

    def test_pin_origin_is_own_step(self):
        tfm = compose(Rotate(10), PinOrigin())

        assert isinstance(tfm, Sequence)
        assert isinstance(tfm.steps[-1], PinOrigin)

    def test_into_sequence(self):
        """Leading pure transforms fold into the first step of a preset."""
        tfm = compose(Rotate(10), CenterResizeCrop((16, 16)))

        assert isinstance(tfm, Sequence)
        assert len(tfm.steps) == 2
        assert isinstance(tfm.steps[0], CroppedProjectiveTransform)
        assert isinstance(tfm.steps[0].tfm, ComposedProjectiveTransform)

    def test_onto_sequence(self):
        tfm = compose(compose(CenterCrop((8, 8)), Rotate(10)), Zoom())

        assert isinstance(tfm, Sequence)
        assert len(tfm.steps) == 2
        assert isinstance(tfm.steps[1], ComposedProjectiveTransform)

    def test_non_projective_is_sequence(self):
        tfm = compose(Rotate(10), Lambda(lambda item: item))

        assert isinstance(tfm, Sequence)

    def test_rshift_operator(self):
        tfm = Rotate(10) >> Zoom() >> CenterCrop((8, 8))

        assert isinstance(tfm, CroppedProjectiveTransform)

    def test_non_transform_raises(self):
        with pytest.raises(TypeError):
            compose(Rotate(10), "crop")


class TestOneOf:
    """Tests for OneOf and Maybe inside compositions."""

    def test_pure_options_stay_projective(self):
        tfm = OneOf([Rotate(10), FlipX()])

        assert isinstance(tfm, ProjectiveOneOf)
        assert isinstance(compose(tfm, Zoom()), ComposedProjectiveTransform)

    def test_crop_option_is_plain_oneof(self):
        tfm = OneOf([Rotate(10), CenterCrop((4, 4))])

        assert type(tfm) is OneOf

    def test_weights_validated(self):
        with pytest.raises(ValueError):
            OneOf([Rotate(10), FlipX()], [1.0])
        with pytest.raises(ValueError):
            OneOf([Rotate(10)], [-1.0])

    def test_choice_in_randstate(self, generator):
        tfm = OneOf([FlipX(), Zoom((2.0, 2.0))], [0.0, 1.0])

        index, state = tfm.get_randstate(generator)

        assert index == 1
        assert state == 2.0

    def test_maybe_always(self):
        b = Bounds.from_size((10, 20))
        points = Keypoints(torch.tensor([[2.0, 3.0]]), b)

        out = apply(Maybe(FlipX(), 1.0), points)

        assert torch.allclose(out.data, torch.tensor([[2.0, 16.0]]))

    def test_maybe_never(self):
        b = Bounds.from_size((10, 20))
        points = Keypoints(torch.tensor([[2.0, 3.0]]), b)

        out = apply(Maybe(FlipX(), 0.0), points)

        assert torch.equal(out.data, points.data)

    def test_maybe_probability_range(self):
        with pytest.raises(ValueError):
            Maybe(FlipX(), 1.5)


class TestComposeSemantics:
    """Folding must not change what a chain computes."""

    def _chain(self):
        return [FlipX(), ScaleRatio((2, 2)), Translate((1, -2)), CenterCrop((8, 8)), PinOrigin()]

    def test_associativity(self, keypoints):
        a, b, c, d, e = self._chain()

        left = compose(compose(compose(a, b), c), compose(d, e))
        right = compose(a, compose(b, compose(c, compose(d, e))))

        out_left = apply(left, keypoints)
        out_right = apply(right, keypoints)

        assert out_left.bounds == out_right.bounds
        assert torch.allclose(out_left.data, out_right.data)

    def test_folded_equals_stepwise(self, keypoints):
        """One folded map gives the same points as applying each step."""
        chain = self._chain()

        folded = apply(compose(*chain), keypoints)
        stepwise = keypoints
        for tfm in chain:
            stepwise = apply(tfm, stepwise)

        assert folded.bounds == stepwise.bounds
        assert torch.allclose(folded.data, stepwise.data, atol=1e-5)

    def test_crop_uses_running_bounds(self):
        """The crop window is placed in the bounds produced by the scale."""
        b = Bounds.from_size((10, 10))
        tfm = compose(ScaleRatio((2, 2)), CenterCrop((4, 4)))

        _, out_bounds = tfm.projection(b)

        assert out_bounds == Bounds((7, 10), (7, 10))

    def test_image_resampled_once(self):
        """Folded integer transforms keep the exact pixel values."""
        data = torch.rand(1, 6, 6)
        tfm = compose(Translate((2, 2)), Translate((-1, -1)), PinOrigin())

        out = apply(tfm, Image(data))

        assert torch.equal(out.data, data)

    def test_same_state_for_all_items(self, image, keypoints):
        tfm = compose(Rotate(30), ScaleKeepAspect((16, 16)), CenterCrop((16, 16)), PinOrigin())

        out_image, out_points = apply(tfm, Many(image, keypoints))

        assert out_image.bounds == out_points.bounds == Bounds.from_size((16, 16))
