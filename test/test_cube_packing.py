import math

import numpy as np

from src.dem.generator.InsertionKernel import cube_lattice_positions, cube_lattice_target, cube_vertices, spherocube_volume


def test_cube_target_count():
    assert cube_lattice_target(1., 1., 1., 2, 2, 2) == 8
    assert cube_lattice_target(4., 4., 6., 1, 1, 1) == 96
    position, cube_size = cube_lattice_positions(1., 1., 1., 2, 2, 2)
    assert position.shape == (8, 3)
    assert cube_size == 0.5


def test_cube_march_is_reproducible():
    first, _ = cube_lattice_positions(8., 4., 2., 1, 1, 1)
    second, _ = cube_lattice_positions(8., 4., 2., 1, 1, 1)
    assert np.array_equal(first, second)


def test_cube_march_snake_order():
    position, _ = cube_lattice_positions(8., 4., 1., 1, 1, 1)
    delta = math.sqrt(3.)
    x0, y0, z0 = -4. + delta, -2. + delta, -0.5 + delta
    expected = [
                    (x0, y0, z0), (x0, y0 + delta, z0),
                    (x0 + delta, y0, z0), (x0 + delta, y0 + delta, z0),
                    (x0 + 2. * delta, y0, z0), (x0 + 2. * delta, y0 + delta, z0),
                    (x0, y0, z0 + delta)
               ]
    np.testing.assert_allclose(position[:7], np.array(expected), atol=1e-12)


def test_cube_march_stacks_when_footprint_is_narrow():
    position, _ = cube_lattice_positions(1., 1., 1., 2, 2, 2)
    delta = 0.5 * math.sqrt(3.)
    np.testing.assert_allclose(position[:, 0], -0.5 + delta)
    np.testing.assert_allclose(position[:, 1], -0.5 + delta)
    np.testing.assert_allclose(np.diff(position[:, 2]), delta)


def test_cube_march_stays_inside_footprint_in_plane():
    position, _ = cube_lattice_positions(6., 4., 2., 2, 2, 2)
    assert np.all(np.abs(position[:, 0]) <= 3.)
    assert np.all(np.abs(position[:, 1]) <= 2.)


def test_cube_geometry():
    vertices = cube_vertices(2.)
    assert vertices.shape == (8, 3)
    assert np.allclose(np.abs(vertices), 1.)
    assert spherocube_volume(1., 0.) == 1.
    assert spherocube_volume(0., 1.) == 4. / 3. * math.pi
