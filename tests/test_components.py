"""Tests for part components (endpoint on a pipe segment)."""

import math

import pytest

from pvcfit.anchors import DIRECTIONS
from pvcfit.components import make_part_component
from pvcfit.errors import NegativeLength
from pvcfit.specs import lookup_spec

BBOX_TOL = 0.05


@pytest.fixture
def spec():
    return lookup_spec(40, name="1")


class TestPartComponent:
    """Test segment + endpoint composition."""

    def test_join_anchors(self, spec):
        component = make_part_component(spec, "spigot", length=20)
        assert set(component.anchors) == set(DIRECTIONS)
        for name, anchor in component.anchors.items():
            assert anchor.position == (0.0, 0.0, 0.0)
            assert anchor.direction == pytest.approx(DIRECTIONS[name])

    def test_face_offset(self, spec):
        component = make_part_component(spec, "spigot", length=20)
        assert component.face_offset == pytest.approx(20 + spec.tl)
        bb = component.shape.BoundingBox()
        assert bb.zmin == pytest.approx(0.0, abs=BBOX_TOL)
        assert bb.zmax == pytest.approx(20 + spec.tl, abs=BBOX_TOL)

    def test_default_length(self, spec):
        component = make_part_component(spec, "socket")
        assert component.length == spec.tl

    def test_zero_length(self, spec):
        component = make_part_component(spec, "spigot", length=0)
        assert component.face_offset == pytest.approx(spec.tl)
        assert component.shape.Volume() > 0

    def test_negative_length(self, spec):
        with pytest.raises(NegativeLength):
            make_part_component(spec, "spigot", length=-5)

    def test_spigot_channel_is_continuous(self, spec):
        """Segment and spigot bores join with no plug at the joint."""
        component = make_part_component(spec, "spigot", length=20)
        expected = math.pi * ((spec.od / 2) ** 2 - (spec.id / 2) ** 2) * (20 + spec.tl)
        assert component.shape.Volume() == pytest.approx(expected, rel=1e-3)

    def test_socket_volume(self, spec):
        """Segment tube plus a sleeve reaching back over it."""
        component = make_part_component(spec, "socket", length=20)
        ro, ri = spec.od / 2, spec.id / 2
        rs = ro + spec.wall / 3
        expected = (
            math.pi * (ro**2 - ri**2) * 20
            + math.pi * (rs**2 - ro**2) * (spec.tl + spec.wall)
        )
        assert component.shape.Volume() == pytest.approx(expected, rel=1e-3)

    @pytest.mark.parametrize("direction", ["right", "left", "back", "down"])
    def test_oriented(self, spec, direction: str):
        component = make_part_component(spec, "spigot", length=20)
        positive, _negative = component.oriented(direction)
        center = positive.BoundingBox().center
        d = DIRECTIONS[direction]
        half = component.face_offset / 2
        assert (center.x, center.y, center.z) == pytest.approx(
            (d[0] * half, d[1] * half, d[2] * half), abs=BBOX_TOL
        )

    def test_face_anchor(self, spec):
        component = make_part_component(spec, "spigot", length=20)
        anchor = component.face_anchor("A", "right", at=(0, 0, 5))
        assert anchor.position == pytest.approx((20 + spec.tl, 0, 5))
        assert anchor.direction == pytest.approx((1, 0, 0))

    def test_unknown_join_anchor(self, spec):
        component = make_part_component(spec, "spigot", length=20)
        with pytest.raises(ValueError, match="sideways"):
            component.get_anchor("sideways")
