import numpy as np
import pytest

from src.dem.mainDEM import DEM
from src.utils.constants import BASE_PLATE_TAG, BULK_TAG, CONFINING_WALL_TAGS, PLANE
from src.utils.Exceptions import ConfigurationError


def test_plane_orientation():
    dem = DEM(log=False)
    index = dem.add_plane(-11, [0.5, 0., 0.], 0.05, 10., 1., 1., 0.5 * np.pi, (0., 1., 0.))
    np.testing.assert_allclose(dem.scene.norm[index], [1., 0., 0.], atol=1e-12)
    np.testing.assert_allclose(dem.scene.extent[index], [5., 0.5])
    assert dem.scene.shape[index] == PLANE


def test_confining_walls_are_fixed(make_params):
    params = make_params(ptype="cube")
    dem = DEM(log=False)
    dem.add_cube(BULK_TAG, [0., 0., 0.], params.R, 0.5, params.rho)
    tags = dem.wall_generator.add_confining_walls(dem, params)
    assert tags == list(CONFINING_WALL_TAGS)
    walls = dem.scene.indices_of_tags(tags)
    assert walls.size == 5
    assert np.all(dem.scene.fix_v[walls])
    assert np.all(dem.scene.kn[walls] == params.Kn)
    base = dem.scene.indices_of_tags([CONFINING_WALL_TAGS[4]])[0]
    assert dem.scene.m[base] == 2. * params.R * params.Lx * params.Ly
    assert not np.any(np.isin(dem.scene.tag[dem.scene.bulk_indices()], tags))

    assert dem.wall_generator.remove_confining_walls(dem) == 5
    assert dem.scene.particleNum == 1


def test_base_plate_sits_one_radius_below_bulk(make_params):
    params = make_params(plane_x=2, plane_y=3, Lz=2.)
    dem = DEM(log=False)
    dem.gen_spheres_box(BULK_TAG, [-0.5, -0.5, -1.], [0.5, 0.5, 1.], params.R, params.rho)
    Xmin, _ = dem.bounding_box()
    center = dem.wall_generator.add_base_plate(dem, params, params.plate_props())
    assert center[2] == Xmin[2] - params.R

    plate = dem.scene.indices_of_tags([BASE_PLATE_TAG])
    assert plate.size == 1
    assert dem.scene.fix_v[plate[0]]
    np.testing.assert_allclose(dem.scene.extent[plate[0]], [0.5 * 2 * 2., 0.5 * 3 * 2.])
    assert dem.scene.mu[plate[0]] == params.Muw
    assert np.all(dem.scene.mu[dem.scene.bulk_indices()] == 0.)


def test_boundary_tag_cannot_be_reused(make_params):
    params = make_params()
    dem = DEM(log=False)
    dem.add_sphere(BULK_TAG, [0., 0., 0.], 0.1, 1.)
    dem.wall_generator.add_base_plate(dem, params, params.plate_props())
    with pytest.raises(ConfigurationError):
        dem.wall_generator.add_base_plate(dem, params, params.plate_props())


def test_bounding_box_is_recomputed():
    dem = DEM(log=False)
    dem.add_sphere(BULK_TAG, [0., 0., 0.], 0.1, 1.)
    Xmin, Xmax = dem.bounding_box()
    np.testing.assert_allclose(Xmin, [-0.1, -0.1, -0.1])
    dem.scene.x[0] = [1., 1., 1.]
    Xmin, Xmax = dem.bounding_box()
    np.testing.assert_allclose(Xmax, [1.1, 1.1, 1.1])
