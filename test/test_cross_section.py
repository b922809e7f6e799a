import numpy as np
import pytest

from src.column.CrossSectionCarver import CrossSectionCarver
from src.dem.SceneManager import myScene
from src.utils.constants import BASE_PLATE_TAG, BULK_TAG, PLANE, SPHERE
from src.utils.Exceptions import UnsupportedCrossSection
from src.utils.RegionFunction import RegionFunction


def grid_scene(Lx=4., Ly=4., spacing=0.25, order=None):
    axis_x = np.arange(-0.5 * Lx + 0.5 * spacing, 0.5 * Lx, spacing)
    axis_y = np.arange(-0.5 * Ly + 0.5 * spacing, 0.5 * Ly, spacing)
    position = np.stack(np.meshgrid(axis_x, axis_y, [0.], indexing='ij'), axis=-1).reshape(-1, 3)
    if order is not None:
        position = position[order]
    scene = myScene()
    scene.add_particles(BULK_TAG, SPHERE, position, 1., 0.1, 0.1, 0.1)
    return scene


def surviving(scene):
    rows = scene.x[scene.tag == BULK_TAG]
    return rows[np.lexsort(rows.T[::-1])]


def test_circle_predicate():
    region = RegionFunction("circle", 4., 4.)
    outside = region.outside([[1.9, 0., 0.], [1.5, 1.5, 0.], [0., 0., 5.]])
    assert outside.tolist() == [False, True, False]


def test_right_triangle_predicate():
    region = RegionFunction("right_triangle", 4., 2.)
    outside = region.outside([[1., 2., 0.], [1., 0.25, 0.], [-1., -0.6, 0.]])
    assert outside.tolist() == [True, False, False]


def test_isoscele_triangle_predicate():
    region = RegionFunction("isoscele_triangle", 4., 4.)
    outside = region.outside([[0., 0., 0.], [0., 1.9, 0.], [1.5, 0., 0.], [-1.5, 0., 0.], [0.5, -1., 0.]])
    assert outside.tolist() == [False, False, True, True, False]


def test_square_keeps_everything():
    region = RegionFunction("square", 4., 4.)
    assert not np.any(region.outside(np.random.default_rng(0).uniform(-10., 10., (50, 3))))


def test_unknown_cross_section():
    with pytest.raises(UnsupportedCrossSection):
        RegionFunction("hexagon", 1., 1.)
    with pytest.raises(UnsupportedCrossSection):
        RegionFunction.check_cross_section("box")
    RegionFunction.check_cross_section("Circle")


def test_circle_survivors_are_inside():
    scene = grid_scene()
    removed = CrossSectionCarver("circle", 4., 4., log=False).carve(scene)
    assert removed > 0
    x, y = scene.x[:, 0], scene.x[:, 1]
    assert np.all(x * x + y * y < 0.25 * 4. * 4.)


def test_classify_does_not_mutate():
    scene = grid_scene()
    carver = CrossSectionCarver("right_triangle", 4., 4., log=False)
    before = scene.x.copy()
    first = carver.classify(scene)
    second = carver.classify(scene)
    assert np.array_equal(first, second)
    assert np.array_equal(scene.x, before)
    assert carver.carve(scene) == first.size


@pytest.mark.parametrize("shape", ["circle", "right_triangle", "isoscele_triangle", "square"])
def test_carving_is_idempotent(shape):
    scene = grid_scene()
    carver = CrossSectionCarver(shape, 4., 4., log=False)
    carver.carve(scene)
    assert carver.carve(scene) == 0
    assert carver.classify(scene).size == 0


@pytest.mark.parametrize("shape", ["circle", "right_triangle", "isoscele_triangle"])
def test_carving_ignores_storage_order(shape):
    ordered = grid_scene()
    shuffled = grid_scene(order=np.random.default_rng(3).permutation(ordered.particleNum))
    CrossSectionCarver(shape, 4., 4., log=False).carve(ordered)
    CrossSectionCarver(shape, 4., 4., log=False).carve(shuffled)
    assert np.array_equal(surviving(ordered), surviving(shuffled))


def test_carving_leaves_boundary_bodies_alone():
    scene = grid_scene()
    scene.add_particles(BASE_PLATE_TAG, PLANE, [3., 3., -1.], 1., 0.1, 10., 0.1, extent=[6., 6.])
    CrossSectionCarver("circle", 4., 4., log=False).carve(scene)
    assert scene.has_tag(BASE_PLATE_TAG)


def test_box_cleanup_checks_all_axes():
    scene = myScene()
    scene.add_particles(BULK_TAG, SPHERE, [[0., 0., 0.], [0., 0., 0.6], [0.6, 0., 0.], [0., -0.6, 0.]], 1., 0.1, 0.1, 0.1)
    assert CrossSectionCarver("box", 1., 1., 1., log=False).carve(scene) == 3
    assert np.array_equal(scene.x, np.zeros((1, 3)))
