import numpy as np
import pytest

from src.dem.mainDEM import DEM
from src.utils.constants import BASE_PLATE_TAG, BULK_TAG


def populated_domain(path):
    dem = DEM(log=False)
    dem.set_save_path(str(path))
    dem.gen_spheres_box(BULK_TAG, [-0.5, -0.5, -0.5], [0.5, 0.5, 0.5], 0.25, 2., bond_threshold=0.05, cohesion=True)
    dem.add_cube(BULK_TAG, [2., 0., 0.], 0.05, 0.5, 2.)
    dem.add_plane(BASE_PLATE_TAG, [0., 0., -1.], 0.05, 3., 3., 2.)
    dem.fix_velocity(BASE_PLATE_TAG)
    dem.set_props(BULK_TAG, Kn=10., Mu=0.3, Bn=5.)
    dem.scene.v[:] = np.arange(dem.scene.particleNum * 3, dtype=float).reshape(-1, 3)
    dem.sims.current_time = 0.25
    dem.sims.current_step = 42
    return dem


def test_checkpoint_round_trip(tmp_path):
    dem = populated_domain(tmp_path)
    filename = dem.save("stage_1")
    assert filename.endswith("stage_1.npz")

    restored = DEM(log=False)
    restored.set_save_path(str(tmp_path))
    restored.load("stage_1")
    for name in ("pid", "tag", "shape", "fix_v", "x", "v", "m", "kn", "mu", "bn", "extent", "bond_pid", "bond_area"):
        assert np.array_equal(getattr(restored.scene, name), getattr(dem.scene, name))
    assert restored.scene.vertices[:8] == [None] * 8
    assert np.array_equal(restored.scene.vertices[8], dem.scene.vertices[8])
    assert restored.sims.current_time == 0.25
    assert restored.sims.current_step == 42


def test_deleting_particles_prunes_their_bonds(tmp_path):
    dem = populated_domain(tmp_path)
    assert dem.scene.bondNum == 12
    dem.delete_particles_by_index([0])
    assert dem.scene.bondNum == 9
    assert dem.scene.bond_indices().max() < dem.scene.particleNum

    restored = DEM(log=False)
    restored.set_save_path(str(tmp_path))
    dem.save("pruned")
    restored.load("pruned")
    assert np.array_equal(restored.scene.bond_indices(), dem.scene.bond_indices())
    index = restored.add_sphere(BULK_TAG, [5., 5., 5.], 0.1, 1.)
    assert restored.scene.pid[index] == dem.scene.pid.max() + 1


def test_missing_checkpoint(tmp_path):
    dem = DEM(log=False)
    dem.set_save_path(str(tmp_path))
    with pytest.raises(FileNotFoundError):
        dem.load("stage_1")


def test_scene_iteration_yields_snapshots(tmp_path):
    dem = populated_domain(tmp_path)
    snapshots = list(dem.scene)
    assert len(snapshots) == dem.scene.particleNum
    assert [p["shape"] for p in snapshots[-2:]] == ["cube", "plane"]
    assert snapshots[-1]["fix_v"] and snapshots[-1]["tag"] == BASE_PLATE_TAG
    snapshots[0]["x"][:] = 100.
    assert not np.any(dem.scene.x == 100.)
