"""
Tests for anchors and transform utilities.

Tests cover:
- Direction names
- Rotation helpers
- Anchor frames
- Mating transform
"""

import numpy as np
import pytest

from pvcfit.anchors import (
    DIRECTIONS,
    NamedAnchor,
    compute_mate_transform,
    get_position,
    get_x_axis,
    get_z_axis,
    identity_matrix,
    resolve_direction,
    rotation_between,
    rotation_matrix_z,
    transform_direction,
    transform_point,
    translation_matrix,
)


def assert_vec(actual, expected, tol=1e-6):
    assert np.allclose(actual, expected, atol=tol), f"{actual} != {expected}"


# =============================================================================
# DIRECTION TESTS
# =============================================================================


class TestDirections:
    """Test the six named directions."""

    @pytest.mark.parametrize(
        "name,vector",
        [
            ("up", (0, 0, 1)),
            ("down", (0, 0, -1)),
            ("left", (-1, 0, 0)),
            ("right", (1, 0, 0)),
            ("forward", (0, -1, 0)),
            ("back", (0, 1, 0)),
        ],
    )
    def test_names(self, name: str, vector):
        assert_vec(resolve_direction(name), vector)

    def test_vectors_are_normalized(self):
        assert_vec(resolve_direction((0, 3, 4)), (0, 0.6, 0.8))

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="sideways"):
            resolve_direction("sideways")

    def test_zero_vector(self):
        with pytest.raises(ValueError):
            resolve_direction((0, 0, 0))


# =============================================================================
# ROTATION TESTS
# =============================================================================


class TestRotationBetween:
    """rotation_between turns one direction onto another."""

    @pytest.mark.parametrize("target", list(DIRECTIONS))
    def test_z_onto_each_direction(self, target: str):
        R = rotation_between((0, 0, 1), target)
        assert_vec(transform_direction(R, (0, 0, 1)), DIRECTIONS[target])

    def test_antiparallel(self):
        R = rotation_between((0, 0, 1), (0, 0, -1))
        assert_vec(transform_direction(R, (0, 0, 1)), (0, 0, -1))
        assert np.linalg.det(R[:3, :3]) == pytest.approx(1.0)

    def test_oblique(self):
        target = resolve_direction((1, 0, 1))
        R = rotation_between((0, 0, 1), target)
        assert_vec(transform_direction(R, (0, 0, 1)), target)

    def test_transform_point(self):
        T = translation_matrix(1, 2, 3) @ rotation_matrix_z(90)
        assert_vec(transform_point(T, (1, 0, 0)), (1, 3, 3))


# =============================================================================
# ANCHOR TESTS
# =============================================================================


class TestNamedAnchor:
    """Test anchor frames."""

    def test_transform_frame(self):
        anchor = NamedAnchor.create("A", (1, 2, 3), "right")
        T = anchor.transform
        assert_vec(get_position(T), (1, 2, 3))
        assert_vec(get_z_axis(T), (1, 0, 0))

    def test_spin_turns_x_axis(self):
        plain = NamedAnchor.create("A", (0, 0, 0), "up")
        spun = NamedAnchor.create("A", (0, 0, 0), "up", spin=90)
        assert_vec(get_x_axis(plain.transform), (1, 0, 0))
        assert_vec(get_x_axis(spun.transform), (0, 1, 0))

    def test_transformed(self):
        anchor = NamedAnchor.create("B", (10, 0, 0), "right")
        moved = anchor.transformed(translation_matrix(0, 0, 5) @ rotation_matrix_z(90))
        assert_vec(moved.position, (0, 10, 5))
        assert_vec(moved.direction, (0, 1, 0))
        assert moved.name == "B"


# =============================================================================
# MATING TESTS
# =============================================================================


class TestComputeMateTransform:
    """Mated anchors coincide with opposed Z axes."""

    @pytest.mark.parametrize("direction_a", list(DIRECTIONS))
    @pytest.mark.parametrize("direction_b", ["up", "down", "left"])
    def test_faces_meet(self, direction_a: str, direction_b: str):
        a = NamedAnchor.create("A", (5, 0, 0), direction_a)
        b = NamedAnchor.create("B", (0, 0, 7), direction_b)
        T_a = translation_matrix(1, 1, 1)

        T_b = compute_mate_transform(a, b, T_a)

        world_a = T_a @ a.transform
        world_b = T_b @ b.transform
        assert_vec(get_position(world_b), get_position(world_a))
        assert_vec(get_z_axis(world_b), -np.array(get_z_axis(world_a)))

    def test_gap(self):
        a = NamedAnchor.create("A", (0, 0, 0), "up")
        b = NamedAnchor.create("B", (0, 0, 0), "down")
        T_b = compute_mate_transform(a, b, identity_matrix(), gap=3.0)
        assert_vec(get_position(T_b @ b.transform), (0, 0, 3))

    def test_x_axes_aligned(self):
        a = NamedAnchor.create("A", (0, 0, 0), "right")
        b = NamedAnchor.create("B", (0, 0, 0), "up")
        T_b = compute_mate_transform(a, b, identity_matrix())
        world_a = a.transform
        world_b = T_b @ b.transform
        assert_vec(get_x_axis(world_b), get_x_axis(world_a))
