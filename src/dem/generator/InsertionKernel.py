import itertools

import numpy as np
from scipy.spatial import ConvexHull, Voronoi, cKDTree

from src.utils.constants import PI, SQRT3
from src.utils.linalg import polygon_area


# ========================================================= #
#                  Lattice-marched cubes                    #
# ========================================================= #
def cube_lattice_target(Lx, Ly, Lz, scalingx, scalingy, scalingz):
    return int(scalingx * scalingy * scalingz * Lx * Ly * Lz)

def cube_lattice_positions(Lx, Ly, Lz, scalingx, scalingy, scalingz):
    """Snake scan of the footprint: Y fastest, then X, then Z.

    Exactly ``cube_lattice_target`` positions are produced. Y and X are kept
    one march step inside the footprint, Z is not bounded.
    """
    num = cube_lattice_target(Lx, Ly, Lz, scalingx, scalingy, scalingz)
    cube_size = 1. / scalingx
    delta = cube_size * SQRT3
    x0, y0, z0 = -0.5 * Lx + delta, -0.5 * Ly + delta, -0.5 * Lz + delta
    x, y, z = x0, y0, z0

    positions = np.zeros((num, 3))
    if num == 0:
        return positions, cube_size
    positions[0] = [x, y, z]
    for n in range(1, num):
        if y < 0.5 * Ly - delta:
            y += delta
        else:
            x += delta
            y = y0
            if not x < 0.5 * Lx - delta:
                x = x0
                z += delta
        positions[n] = [x, y, z]
    return positions, cube_size

def cube_vertices(edge):
    half = 0.5 * edge
    return np.array(list(itertools.product((-half, half), repeat=3)))

def spherocube_volume(edge, R):
    return edge ** 3 + 6. * edge * edge * R + 3. * PI * edge * R * R + 4. / 3. * PI * R ** 3


# ========================================================= #
#                    Sphere lattices                        #
# ========================================================= #
def sphere_lattice_positions(xmin, xmax, radius, arrangement):
    """Centres of equal spheres fully inside the box [xmin, xmax]."""
    xmin, xmax = np.asarray(xmin, dtype=float), np.asarray(xmax, dtype=float)
    size = xmax - xmin - 2. * radius
    if np.any(size < 0.):
        return np.zeros((0, 3))
    if arrangement == "Normal":
        counts = np.floor(size / (2. * radius) + 1e-9).astype(int) + 1
        grid = np.stack(np.meshgrid(*[np.arange(c) for c in counts], indexing='ij'), axis=-1).reshape(-1, 3)
        return xmin + radius + 2. * radius * grid
    elif arrangement == "HCP":
        counts = np.array([size[0] / (2. * radius), size[1] / (SQRT3 * radius), size[2] / (2. * np.sqrt(6.) / 3. * radius)])
        counts = np.floor(counts + 1e-9).astype(int) + 2
        i, j, k = np.meshgrid(*[np.arange(c) for c in counts], indexing='ij')
        i, j, k = i.ravel(), j.ravel(), k.ravel()
        centre = np.stack([2. * i + (j + k) % 2,
                           SQRT3 * (j + (k % 2) / 3.),
                           2. * np.sqrt(6.) / 3. * k], axis=1) * radius + xmin + radius
        inside = np.all((centre - radius >= xmin - 1e-12) & (centre + radius <= xmax + 1e-12), axis=1)
        return centre[inside]
    raise RuntimeError(f"Invalid Keyword:: /Arrangement/: {arrangement}. Only the following ['Normal', 'HCP'] are valid")

def close_pairs(positions, cutoff):
    """Index pairs (i < j) whose centre distance is below ``cutoff``."""
    if positions.shape[0] < 2:
        return np.zeros((0, 2), dtype=np.int64), np.zeros(0)
    pairs = cKDTree(positions).query_pairs(r=cutoff, output_type='ndarray')
    pairs = pairs[np.lexsort((pairs[:, 1], pairs[:, 0]))] if pairs.size > 0 else np.zeros((0, 2), dtype=np.int64)
    distance = np.linalg.norm(positions[pairs[:, 1]] - positions[pairs[:, 0]], axis=1)
    return pairs.astype(np.int64), distance


# ========================================================= #
#                 Periodic Voronoi cells                    #
# ========================================================= #
def voronoi_seeds(L, N, rng):
    """One uniformly random seed point inside every cell of an N[0] x N[1] x N[2] grid."""
    L, N = np.asarray(L, dtype=float), np.asarray(N, dtype=int)
    grid = np.stack(np.meshgrid(*[np.arange(n) for n in N], indexing='ij'), axis=-1).reshape(-1, 3)
    return -0.5 * L + (grid + rng.random(grid.shape)) * L / N

def polyhedron_mass_properties(vertices):
    hull = ConvexHull(vertices)
    origin = vertices.mean(axis=0)
    tets = vertices[hull.simplices] - origin
    volume = np.abs(np.einsum('ij,ij->i', tets[:, 0], np.cross(tets[:, 1], tets[:, 2]))) / 6.
    centroid = origin + np.sum(volume[:, None] * (tets.sum(axis=1) / 4.), axis=0) / volume.sum()
    return float(volume.sum()), centroid

def voronoi_cells(seeds, L, periodic=True):
    """Cells of the tessellation of ``seeds`` in the box of size ``L`` centred on the origin.

    With ``periodic`` the seeds are repeated in the 26 neighbouring boxes,
    otherwise they are mirrored across the six box faces so that every cell
    is clipped by the box. Returns, per seed, the cell vertices, volume and
    centroid, and the face-adjacent seed pairs inside the box together with
    the shared face vertices.
    """
    L = np.asarray(L, dtype=float)
    number = seeds.shape[0]
    if periodic:
        shifts = np.array([s for s in itertools.product((0, -1, 1), repeat=3)], dtype=float) * L
        points = np.concatenate([seeds + shift for shift in shifts])
    else:
        images = [seeds]
        for axis in range(3):
            for side in (-0.5, 0.5):
                mirrored = seeds.copy()
                mirrored[:, axis] = 2. * side * L[axis] - mirrored[:, axis]
                images.append(mirrored)
        points = np.concatenate(images)
    tessellation = Voronoi(points)

    cells = []
    for k in range(number):
        region = tessellation.regions[tessellation.point_region[k]]
        vertices = tessellation.vertices[region]
        volume, centroid = polyhedron_mass_properties(vertices)
        cells.append((vertices, volume, centroid))

    faces = []
    for (p, q), ridge in zip(tessellation.ridge_points, tessellation.ridge_vertices):
        if p < number and q < number and -1 not in ridge:
            faces.append((min(p, q), max(p, q), tessellation.vertices[ridge]))
    faces.sort(key=lambda face: (face[0], face[1]))
    return cells, faces

def erode(vertices, centroid, radius):
    """Pull polyhedron vertices towards the centroid by ``radius``."""
    rel = vertices - centroid
    length = np.linalg.norm(rel, axis=1, keepdims=True)
    factor = np.clip(1. - radius / np.where(length > 0., length, 1.), 0., 1.)
    return centroid + rel * factor

def face_area(face_vertices, p, q):
    return polygon_area(face_vertices, q - p)
