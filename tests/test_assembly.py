"""Tests for assemblies of mated fittings."""

import numpy as np
import pytest

from pvcfit.anchors import rotation_matrix_z, translation_matrix
from pvcfit.assembly import Assembly
from pvcfit.fittings import make_cap, make_elbow, make_pipe, make_tee
from pvcfit.specs import lookup_spec


@pytest.fixture
def spec():
    return lookup_spec(40, name="1")


@pytest.fixture
def tee_with_run(spec):
    asm = Assembly()
    asm.add("tee", make_tee(spec))
    asm.attach("run", make_pipe(spec, 100, ends=["spigot", "spigot"]), "A", to=("tee", "B"))
    return asm


class TestAssembly:
    """Test placing fittings by their anchors."""

    def test_pipe_follows_tee_outlet(self, tee_with_run):
        tee_b = tee_with_run.world_anchor("tee", "B")
        run_a = tee_with_run.world_anchor("run", "A")
        run_b = tee_with_run.world_anchor("run", "B")

        assert np.allclose(run_a.position, tee_b.position)
        assert np.allclose(run_a.direction, -np.array(tee_b.direction))
        assert np.allclose(run_b.position, np.array(tee_b.position) + (100, 0, 0))
        assert np.allclose(run_b.direction, (1, 0, 0))

    def test_chain(self, spec, tee_with_run):
        tee_with_run.attach("cap", make_cap(spec), "A", to=("run", "B"))
        cap_a = tee_with_run.world_anchor("cap", "A")
        run_b = tee_with_run.world_anchor("run", "B")
        assert np.allclose(cap_a.position, run_b.position)
        assert len(tee_with_run) == 3
        assert "cap" in tee_with_run

    def test_gap(self, spec):
        asm = Assembly()
        asm.add("a", make_pipe(spec, 100, ends=["spigot", "spigot"]))
        asm.attach("b", make_pipe(spec, 50, ends=["spigot", "spigot"]), "A", to=("a", "B"), gap=5)
        assert np.allclose(asm.world_anchor("b", "A").position, (0, 0, 105))
        assert np.allclose(asm.world_anchor("b", "B").position, (0, 0, 155))

    def test_placed_base_transform(self, spec):
        asm = Assembly()
        T = translation_matrix(10, 0, 0) @ rotation_matrix_z(90)
        asm.add("elbow", make_elbow(spec), T)
        b = asm.world_anchor("elbow", "B")
        assert np.allclose(b.direction, (0, -1, 0), atol=1e-9)

    def test_duplicate_name(self, spec, tee_with_run):
        with pytest.raises(ValueError, match="already"):
            tee_with_run.add("tee", make_tee(spec))

    def test_unknown_target(self, spec):
        asm = Assembly()
        with pytest.raises(ValueError, match="not found"):
            asm.attach("cap", make_cap(spec), "A", to=("nothing", "A"))

    def test_unknown_anchor(self, spec, tee_with_run):
        with pytest.raises(ValueError, match="Anchor 'Z'"):
            tee_with_run.world_anchor("tee", "Z")

    def test_mismatched_ends_warn(self, spec):
        asm = Assembly()
        asm.add("tee", make_tee(spec))
        with pytest.warns(UserWarning, match="socket"):
            asm.attach("run", make_pipe(spec, 100), "A", to=("tee", "B"))


class TestExport:
    """Test compound output."""

    def test_compound(self, tee_with_run):
        compound = tee_with_run.to_compound()
        assert len(compound.Solids()) >= 2
        bb = compound.BoundingBox()
        assert bb.xmax > tee_with_run.world_anchor("run", "B").position[0] - 0.1

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            Assembly().to_compound()

    def test_export_step(self, tmp_path, tee_with_run):
        path = tmp_path / "run.step"
        tee_with_run.export(path)
        assert path.exists()
        assert path.stat().st_size > 0
