import os

import numpy as np
import pytest

from src.column.StageOrchestrator import Stage, StageOrchestrator
from src.utils.constants import BASE_PLATE_TAG, BULK_TAG, CONFINING_WALL_TAGS
from src.utils.Exceptions import UnsupportedPackingType


BOUNDARY_TAGS = (BASE_PLATE_TAG,) + CONFINING_WALL_TAGS


def test_scenario_cube_square(recording_dem, make_params, tmp_path):
    params = make_params(ptype="cube", CrossSection="square", Lx=1., Ly=1., Lz=1., scalingx=2, scalingy=2, scalingz=2, R=0.05, Tf=0.2)
    orchestrator = StageOrchestrator(recording_dem, params, nproc=3, log=False)
    scene = recording_dem.scene

    assert orchestrator.step() is Stage.PRESETTLE
    assert scene.particleNum == 8

    assert orchestrator.step() is Stage.CARVE
    settle = recording_dem.solves[0]
    assert settle["prefix"] == "drop_cubes"
    assert settle["tf"] == pytest.approx(0.1)
    assert settle["dtOut"] == pytest.approx(0.1 / 20.)
    assert settle["alpha"] == params.R
    assert settle["nproc"] == 3
    assert set(CONFINING_WALL_TAGS) <= settle["tags"]
    assert np.all(settle["fixed"][np.isin(settle["tag_column"], CONFINING_WALL_TAGS)])
    bulk = settle["tag_column"] == BULK_TAG
    np.testing.assert_allclose(settle["Ff"][bulk], settle["m"][bulk, None] * np.array([0., 0., params.VerticalGravity]))
    assert np.all(settle["Ff"][~bulk] == 0.)
    assert os.path.exists(tmp_path / "stage_1.npz")
    assert not np.any(np.isin(scene.tag, CONFINING_WALL_TAGS))
    # cubes still above the footprint after settling are discarded
    assert np.all(np.abs(scene.x) <= 0.5)

    remaining = scene.particleNum
    assert orchestrator.step() is Stage.FINALIZE_BOUNDARY
    assert scene.particleNum == remaining

    assert orchestrator.step() is Stage.ASSIGN_BULK
    plate = scene.indices_of_tags([BASE_PLATE_TAG])
    assert plate.size == 1 and scene.fix_v[plate[0]]

    assert orchestrator.step() is Stage.MAIN_SOLVE
    assert orchestrator.step() is Stage.DONE
    main = recording_dem.solves[1]
    assert main["prefix"] == "column"
    assert main["tf"] == pytest.approx(1.5 * params.Tf)
    assert main["dtOut"] == params.dtOut
    assert main["dt"] == pytest.approx(0.5 * recording_dem.critical_dt())
    assert len(recording_dem.solves) == 2

    assert orchestrator.step() is Stage.DONE
    assert orchestrator.history == [Stage.GENERATE, Stage.PRESETTLE, Stage.CARVE, Stage.FINALIZE_BOUNDARY, Stage.ASSIGN_BULK, Stage.MAIN_SOLVE]


def test_scenario_circle_footprint(recording_dem, make_params, tmp_path):
    params = make_params(ptype="sphereboxnormal", CrossSection="circle", Lx=4., Ly=4., Lz=1., R=0.25)
    history = StageOrchestrator(recording_dem, params, log=False).run()
    assert Stage.PRESETTLE not in history

    scene = recording_dem.scene
    bulk = scene.bulk_indices()
    assert bulk.size > 0
    x, y = scene.x[bulk, 0], scene.x[bulk, 1]
    assert np.all(x * x + y * y < 0.25 * params.Lx * params.Ly)

    assert [solve["prefix"] for solve in recording_dem.solves] == ["column"]
    assert not os.path.exists(tmp_path / "stage_1.npz")


def test_scenario_unknown_packing_generates_nothing(recording_dem, make_params, tmp_path):
    with pytest.raises(UnsupportedPackingType):
        make_params(ptype="rods")
    assert recording_dem.scene.particleNum == 0
    assert recording_dem.solves == []
    assert os.listdir(tmp_path) == []


def test_bulk_receives_scaled_properties_and_flow_gravity(recording_dem, make_params):
    params = make_params(Kn=8.0e6, Kt=4.0e6, scalingx=2, scalingy=2, LateralGravity=150., Cohesion="1")
    StageOrchestrator(recording_dem, params, log=False).run()
    scene = recording_dem.scene
    bulk = scene.bulk_indices()
    plate = scene.indices_of_tags([BASE_PLATE_TAG])
    assert np.all(scene.kn[bulk] == 2.0e6)
    assert np.all(scene.kt[bulk] == 1.0e6)
    assert np.all(scene.kn[plate] == 2.0e6)
    assert np.all(scene.mu[bulk] == params.Mu)
    assert np.all(scene.mu[plate] == params.Muw)
    assert np.all(scene.bn[bulk] == params.Bn)
    np.testing.assert_allclose(scene.Ff[bulk], scene.m[bulk, None] * np.array([150., 0., -981.]))
    assert np.all(scene.Ff[plate] == 0.)


def test_boundary_tags_never_on_bulk_particles(recording_dem, make_params):
    params = make_params(ptype="cube", CrossSection="isoscele_triangle", Lx=4., Ly=4., Lz=2., R=0.05)
    orchestrator = StageOrchestrator(recording_dem, params, log=False)
    while orchestrator.stage is not Stage.DONE:
        orchestrator.step()
        scene = recording_dem.scene
        boundary = np.isin(scene.tag, BOUNDARY_TAGS)
        assert np.all(scene.fix_v[boundary])
        assert not np.any(scene.fix_v[scene.tag == BULK_TAG])
        for tag in BOUNDARY_TAGS:
            assert np.sum(scene.tag == tag) <= 1
