"""Tests for PipeSpec field accessors."""

from dataclasses import replace

import pytest

from pvcfit.accessors import (
    pvc_dn,
    pvc_id,
    pvc_name,
    pvc_od,
    pvc_pitch,
    pvc_schedule,
    pvc_socket_id,
    pvc_socket_od,
    pvc_tl,
    pvc_wall,
)
from pvcfit.specs import lookup_spec


@pytest.fixture
def spec():
    return lookup_spec(40, dn="DN20")


class TestReadMode:
    """Accessors return the record's field values."""

    @pytest.mark.parametrize(
        "accessor,expected",
        [
            (pvc_schedule, 40),
            (pvc_name, "3/4"),
            (pvc_dn, "DN20"),
            (pvc_od, 26.7),
            (pvc_wall, 2.87),
            (pvc_tl, 13.86078),
            (pvc_pitch, 1.814322),
        ],
    )
    def test_fields(self, spec, accessor, expected):
        assert accessor(spec) == expected

    def test_unset_fields_fall_back(self, spec):
        bare = replace(spec, thread_length=None, thread_pitch=None)
        assert pvc_tl(bare) == 10.0
        assert pvc_pitch(bare) == pytest.approx(0.940816)

    def test_default_overrides_fallback(self, spec):
        bare = replace(spec, thread_length=None)
        assert pvc_tl(bare, default=12.5) == 12.5

    def test_default_ignored_when_set(self, spec):
        assert pvc_od(spec, default=99.0) == 26.7


class TestUpdateMode:
    """``update=`` returns a modified copy."""

    def test_update_returns_new_record(self, spec):
        updated = pvc_od(spec, update=30.0)
        assert updated.od == 30.0
        assert spec.od == 26.7
        assert updated.name == spec.name

    def test_update_is_chainable(self, spec):
        updated = pvc_wall(pvc_od(spec, update=30.0), update=3.0)
        assert (updated.od, updated.wall) == (30.0, 3.0)

    def test_update_validates(self, spec):
        with pytest.raises(ValueError):
            pvc_wall(spec, update=20.0)


class TestDerived:
    """Derived diameters follow the record's current fields."""

    def test_values(self, spec):
        assert pvc_id(spec) == pytest.approx(20.96)
        assert pvc_socket_id(spec) == pytest.approx(26.7)
        assert pvc_socket_od(spec) == pytest.approx(32.44)

    def test_recomputed_after_update(self, spec):
        thicker = pvc_wall(spec, update=3.35)
        assert pvc_id(thicker) == pytest.approx(20.0)
        assert pvc_socket_od(thicker) == pytest.approx(33.4)
        assert pvc_id(spec) == pytest.approx(20.96)
