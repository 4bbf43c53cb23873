"""
Tests for connection endpoints and thread solids.

Tests cover:
- Endpoint type parsing
- Plain endpoint geometry (spigot, inner spigot, socket)
- Threaded endpoints: ridge and groove present, single valid solids
- Short-thread warning
- Length validation
"""

import math
import warnings

import cadquery as cq
import pytest

from pvcfit.config import GeometryConfig
from pvcfit.endpoints import BORE_EXTENSION, EndpointType, make_endpoint
from pvcfit.errors import NegativeLength, UnknownEndpointType
from pvcfit.specs import PipeSpec, lookup_spec
from pvcfit.threads import thread_profile_spans

BBOX_TOL = 0.05


@pytest.fixture
def spec():
    return lookup_spec(40, dn="DN20")


@pytest.fixture
def small_spec():
    return lookup_spec(40, name="1/8")


def tube_volume(outer_r: float, inner_r: float, length: float) -> float:
    return math.pi * (outer_r**2 - inner_r**2) * length


# =============================================================================
# TYPE PARSING TESTS
# =============================================================================


class TestEndpointType:
    """Test endpoint type parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("spigot", EndpointType.SPIGOT),
            ("inner-spigot", EndpointType.INNER_SPIGOT),
            ("inner_spigot", EndpointType.INNER_SPIGOT),
            ("Socket", EndpointType.SOCKET),
            ("male-thread", EndpointType.MALE_THREAD),
            ("female_thread", EndpointType.FEMALE_THREAD),
            (EndpointType.SOCKET, EndpointType.SOCKET),
        ],
    )
    def test_parse(self, value, expected):
        assert EndpointType.parse(value) is expected

    @pytest.mark.parametrize("value", ["flare", "", 3, None])
    def test_unknown(self, value):
        with pytest.raises(UnknownEndpointType):
            EndpointType.parse(value)

    def test_str(self):
        assert str(EndpointType.MALE_THREAD) == "male-thread"

    def test_make_endpoint_rejects_unknown(self, spec):
        with pytest.raises(UnknownEndpointType, match="flare"):
            make_endpoint(spec, "flare")


# =============================================================================
# PLAIN ENDPOINT TESTS
# =============================================================================


class TestSpigot:
    """A spigot is a plain length of pipe."""

    def test_default_length(self, spec):
        endpoint = make_endpoint(spec, "spigot")
        assert endpoint.length == spec.tl
        bb = endpoint.positive.BoundingBox()
        assert bb.zmin == pytest.approx(0.0, abs=BBOX_TOL)
        assert bb.zmax == pytest.approx(spec.tl, abs=BBOX_TOL)
        assert bb.xmax == pytest.approx(spec.od / 2, abs=BBOX_TOL)

    def test_volume(self, spec):
        endpoint = make_endpoint(spec, "spigot", length=20)
        expected = tube_volume(spec.od / 2, spec.id / 2, 20)
        assert endpoint.shape.Volume() == pytest.approx(expected, rel=1e-3)

    def test_negative_is_bore(self, spec):
        endpoint = make_endpoint(spec, "spigot", length=20)
        bb = endpoint.negative.BoundingBox()
        assert bb.xmax == pytest.approx(spec.id / 2, abs=BBOX_TOL)
        assert bb.zmax == pytest.approx(20 + BORE_EXTENSION, abs=BBOX_TOL)


class TestSocket:
    """A socket is a sleeve whose bore takes a spigot."""

    def test_sleeve_dimensions(self, spec):
        endpoint = make_endpoint(spec, EndpointType.SOCKET, length=20)
        bb = endpoint.positive.BoundingBox()
        assert bb.xmax == pytest.approx(spec.od / 2 + spec.wall / 3, abs=BBOX_TOL)
        assert bb.zmin == pytest.approx(-spec.wall, abs=BBOX_TOL)
        assert endpoint.overlap == pytest.approx(spec.wall)
        assert endpoint.outer_radius == pytest.approx(spec.od / 2 + spec.wall / 3)

    def test_bore_takes_a_spigot(self, spec):
        endpoint = make_endpoint(spec, "socket", length=20)
        bb = endpoint.negative.BoundingBox()
        assert bb.xmax == pytest.approx(spec.socket_id / 2, abs=BBOX_TOL)
        assert bb.zmin == pytest.approx(0.0, abs=BBOX_TOL)

    def test_configured_overlap_and_wall(self, spec):
        config = GeometryConfig(socket_overlap=1.0, socket_wall_ratio=0.5)
        endpoint = make_endpoint(spec, "socket", length=20, config=config)
        bb = endpoint.positive.BoundingBox()
        assert bb.zmin == pytest.approx(-1.0, abs=BBOX_TOL)
        assert bb.xmax == pytest.approx(spec.od / 2 + spec.wall / 2, abs=BBOX_TOL)


class TestInnerSpigot:
    """An inner spigot fits inside a pipe of the same spec."""

    def test_fits_the_bore(self, spec):
        endpoint = make_endpoint(spec, "inner-spigot", length=20)
        bb = endpoint.positive.BoundingBox()
        assert bb.xmax == pytest.approx(spec.id / 2, abs=BBOX_TOL)
        assert endpoint.insert_depth == pytest.approx(spec.wall)

    def test_too_thick_walled(self):
        thick = PipeSpec(schedule=40, name="x", od=10.0, wall=3.0, dn="DNX")
        with pytest.raises(ValueError, match="inner spigot"):
            make_endpoint(thick, "inner-spigot")


class TestLength:
    """Endpoint length validation."""

    def test_negative(self, spec):
        with pytest.raises(NegativeLength):
            make_endpoint(spec, "spigot", length=-1)

    def test_zero(self, spec):
        with pytest.raises(ValueError):
            make_endpoint(spec, "spigot", length=0)


# =============================================================================
# THREAD TESTS
# =============================================================================


class TestThreadProfile:
    """Thread section widths."""

    def test_flank_span_clamped(self):
        narrow, wide = thread_profile_spans(1.0, 5.0)
        assert narrow == pytest.approx(0.019)
        assert wide == pytest.approx(0.45)

    def test_shallow_thread(self):
        narrow, wide = thread_profile_spans(2.0, 0.5)
        assert wide == pytest.approx(narrow + 0.5 * math.tan(math.radians(30)))


def ridge_volume(spec) -> float:
    """Volume of a thread ridge (or groove) running the spec's full thread length."""
    root_r = (spec.id + spec.wall) / 2
    crest_r = spec.od / 2
    depth = crest_r - root_r
    half_narrow, half_wide = thread_profile_spans(spec.pitch, depth)
    section = depth * (half_narrow + half_wide)
    turns = spec.tl / spec.pitch
    return section * 2 * math.pi * (root_r + crest_r) / 2 * turns


THREAD_SIZES = ["1/8", "3/4", "1", "2"]


class TestThreadedEndpoints:
    """Threaded endpoints across sizes."""

    def test_male_thread(self, small_spec):
        endpoint = make_endpoint(small_spec, "male-thread")
        assert endpoint.type is EndpointType.MALE_THREAD
        assert endpoint.positive.isValid()
        bb = endpoint.positive.BoundingBox()
        assert bb.xmax <= small_spec.od / 2 + 0.1
        assert bb.zmin == pytest.approx(0.0, abs=0.1)
        assert bb.zmax == pytest.approx(small_spec.tl, abs=0.1)

    @pytest.mark.parametrize("name", THREAD_SIZES)
    def test_male_ridge_is_present(self, name):
        """The ridge adds material well beyond the root tube."""
        spec = lookup_spec(40, name=name)
        endpoint = make_endpoint(spec, "male-thread")
        root_r = (spec.id + spec.wall) / 2
        core = tube_volume(root_r, spec.id / 2, spec.tl)
        assert endpoint.positive.Volume() - core > 0.5 * ridge_volume(spec)

    def test_unbevelled_thread_keeps_more_material(self, small_spec):
        bevelled = make_endpoint(small_spec, "male-thread")
        plain = make_endpoint(small_spec, "male-thread", config=GeometryConfig(thread_bevel=False))
        assert plain.positive.Volume() > bevelled.positive.Volume()

    def test_female_thread(self, small_spec):
        endpoint = make_endpoint(small_spec, "female-thread")
        assert endpoint.positive.isValid()
        bb = endpoint.positive.BoundingBox()
        assert bb.xmax == pytest.approx(small_spec.socket_od / 2, abs=BBOX_TOL)

    @pytest.mark.parametrize("name", THREAD_SIZES)
    def test_female_groove_is_present(self, name):
        """The groove takes material out of the plain threaded body."""
        spec = lookup_spec(40, name=name)
        endpoint = make_endpoint(spec, "female-thread")
        minor_r = (spec.id + spec.wall) / 2
        body = tube_volume(spec.socket_od / 2, minor_r, spec.tl)
        volume = endpoint.shape.Volume()
        assert 0 < volume < body - 0.5 * ridge_volume(spec)
        assert volume < endpoint.positive.Volume()

    @pytest.mark.parametrize("end", ["male-thread", "female-thread"])
    @pytest.mark.parametrize("name", THREAD_SIZES)
    def test_single_valid_solid(self, name, end):
        spec = lookup_spec(40, name=name)
        endpoint = make_endpoint(spec, end)
        for shape in (endpoint.positive, endpoint.shape):
            assert shape.isValid()
            assert len(shape.Solids()) == 1

    @pytest.mark.parametrize("end", ["male-thread", "female-thread"])
    def test_bore_opens_the_channel(self, spec, end):
        """Nothing is left on the axis once the negative is cut."""
        shape = make_endpoint(spec, end).shape
        probe = cq.Solid.makeCylinder(spec.id / 2 - 0.1, spec.tl)
        assert shape.intersect(probe).Volume() == pytest.approx(0.0, abs=1e-6)

    @pytest.mark.parametrize("end", ["male-thread", "female-thread"])
    def test_short_thread_warns_at_caller(self, spec, end):
        with pytest.warns(UserWarning, match="shorter than one pitch") as record:
            make_endpoint(spec, end, length=spec.pitch / 2)
        assert record[0].filename == __file__

    def test_plain_end_does_not_warn(self, spec):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            make_endpoint(spec, "socket", length=spec.pitch / 2)
