"""Tests for Box class."""

import dataclasses

import numpy as np
import pytest

from mccore.system.box import Box


class TestBoxCreation:
    """Test Box creation and derived properties."""

    def test_cubic_box(self):
        """Test cubic box properties."""
        box = Box.cubic(10.0)

        assert box.length == 10.0
        assert np.allclose(box.lengths, [10.0, 10.0, 10.0])
        assert box.volume == pytest.approx(1000.0)
        assert box.cutoff == pytest.approx(5.0)

    def test_length_converted_to_float(self):
        """Test integer lengths are stored as floats."""
        box = Box(22)
        assert isinstance(box.length, float)
        assert box.volume == pytest.approx(10648.0)

    @pytest.mark.parametrize("length", [0.0, -1.0, float("nan"), float("inf")])
    def test_invalid_length(self, length):
        """Test that non-positive or non-finite lengths raise errors."""
        with pytest.raises(ValueError):
            Box(length)

    def test_box_is_immutable(self):
        """Test that the box cannot be modified after creation."""
        box = Box.cubic(10.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            box.length = 5.0


class TestWrapPositions:
    """Test periodic wrapping."""

    def test_wrap_single_crossing(self):
        """Test positions just outside the box are wrapped back in."""
        box = Box.cubic(10.0)
        wrapped = box.wrap_positions(np.array([[15.0, -3.0, 25.0]]))
        assert np.allclose(wrapped, [[5.0, 7.0, 5.0]])

    def test_wrap_multiple_box_lengths(self):
        """Test offsets of several box lengths are wrapped correctly."""
        box = Box.cubic(10.0)
        wrapped = box.wrap_positions(np.array([-25.0, 35.0, 9.5]))
        assert np.allclose(wrapped, [5.0, 5.0, 9.5])

    def test_wrap_boundaries(self):
        """Test that exactly L maps to 0 and 0 stays 0."""
        box = Box.cubic(10.0)
        wrapped = box.wrap_positions(np.array([10.0, 0.0, -10.0]))
        assert np.allclose(wrapped, [0.0, 0.0, 0.0])

    def test_tiny_negative_stays_in_box(self):
        """Test that a tiny negative coordinate does not wrap to exactly L."""
        box = Box.cubic(10.0)
        wrapped = box.wrap_positions(np.array([-1e-17, 5.0, 5.0]))
        assert box.contains(wrapped)

    def test_wrap_preserves_shape(self):
        """Test wrapping keeps the input shape."""
        box = Box.cubic(3.0)
        positions = np.random.default_rng(0).uniform(-10, 10, (7, 3))
        wrapped = box.wrap_positions(positions)
        assert wrapped.shape == positions.shape
        assert box.contains(wrapped)

    def test_contains(self):
        """Test the half-open containment check."""
        box = Box.cubic(10.0)
        assert box.contains([[0.0, 0.0, 0.0], [9.999, 5.0, 1.0]])
        assert not box.contains([[10.0, 0.0, 0.0]])
        assert not box.contains([[-0.1, 0.0, 0.0]])


class TestPairwiseDistance:
    """Test the periodic distance rule."""

    def test_short_separation(self):
        """Test separations below L/2 are used as they are."""
        box = Box.cubic(10.0)
        assert box.pairwise_distance([1.0, 1.0, 1.0], [2.0, 1.0, 1.0]) == pytest.approx(1.0)

    def test_long_separation_shortened_by_half_box(self):
        """Test separations above L/2 are shortened by L/2."""
        box = Box.cubic(10.0)
        # |dx| = 8 > 5, so dx becomes 3
        assert box.pairwise_distance([1.0, 1.0, 1.0], [9.0, 1.0, 1.0]) == pytest.approx(3.0)

    def test_every_axis_shortened(self):
        """Test the rule applies to every axis independently."""
        box = Box.cubic(10.0)
        d = box.pairwise_distance([0.0, 0.0, 0.0], [6.0, 6.0, 6.0])
        assert d == pytest.approx(np.sqrt(3.0))

    def test_exactly_half_box_not_shortened(self):
        """Test a separation of exactly L/2 is kept."""
        box = Box.cubic(10.0)
        assert box.pairwise_distance([0.0, 0.0, 0.0], [5.0, 0.0, 0.0]) == pytest.approx(5.0)

    def test_symmetric(self):
        """Test d(a, b) == d(b, a)."""
        box = Box.cubic(10.0)
        a = np.array([1.0, 7.5, 3.0])
        b = np.array([8.0, 0.5, 9.0])
        assert box.pairwise_distance(a, b) == pytest.approx(box.pairwise_distance(b, a))

    def test_batched(self):
        """Test (N, 3) inputs return one distance per row."""
        box = Box.cubic(10.0)
        r1 = np.zeros((3, 3))
        r2 = np.array([[1.0, 0.0, 0.0], [9.0, 0.0, 0.0], [3.0, 4.0, 0.0]])
        assert np.allclose(box.pairwise_distance(r1, r2), [1.0, 4.0, 5.0])
