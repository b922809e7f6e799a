import numpy as np

from src.dem.generator.InsertionKernel import *
from src.dem.SceneManager import myScene
from src.utils.constants import BULK_TAG, CUBE, POLYHEDRON, SPHERE
from src.utils.Exceptions import UnsupportedPackingType


class ParticleCreator(object):
    """Builds particles of a given shape straight into the scene."""
    def __init__(self, log=True) -> None:
        self.log = log

    def create_sphere(self, scene: myScene, tag, position, radius, density):
        position = np.asarray(position, dtype=float).reshape(-1, 3)
        mass = density * 4. / 3. * PI * radius ** 3
        return scene.add_particles(tag, SPHERE, position, mass, radius, radius, radius)

    def create_cube(self, scene: myScene, tag, position, radius, edge, density):
        position = np.asarray(position, dtype=float).reshape(-1, 3)
        mass = density * spherocube_volume(edge, radius)
        contact_radius = radius + 0.5 * edge
        dmax = 0.5 * SQRT3 * edge + radius
        inertia = mass * (edge + 2. * radius) ** 2 / 6.
        vertices = [cube_vertices(edge) for _ in range(position.shape[0])]
        return scene.add_particles(tag, CUBE, position, mass, contact_radius, dmax, radius, size=edge, inertia=inertia, vertices=vertices)

    def create_voronoi_pack(self, scene: myScene, tag, radius, L, N, density, cohesion, periodic, seed, fraction):
        rng = np.random.default_rng(seed)
        seeds = voronoi_seeds(L, N, rng)
        cells, faces = voronoi_cells(seeds, L, periodic)
        kept = rng.random(len(cells)) < fraction

        index_map = -np.ones(len(cells), dtype=np.int64)
        centroids, masses, radii, dmaxs, vertices = [], [], [], [], []
        for k, (cell_vertices, volume, centroid) in enumerate(cells):
            if not kept[k]:
                continue
            index_map[k] = len(centroids)
            centroids.append(centroid)
            masses.append(density * volume)
            radii.append((3. * volume / (4. * PI)) ** (1. / 3.))
            dmaxs.append(np.linalg.norm(cell_vertices - centroid, axis=1).max())
            vertices.append(erode(cell_vertices, centroid, radius) - centroid)

        if not centroids:
            return np.zeros(0, dtype=np.int64)
        centroids = np.array(centroids)
        masses = np.array(masses)
        radii = np.array(radii)
        indices = scene.add_particles(tag, POLYHEDRON, centroids, masses, radii, np.array(dmaxs), radius, size=2. * radii, vertices=vertices)

        if cohesion:
            pairs, areas, lengths = [], [], []
            for p, q, face_vertices in faces:
                if kept[p] and kept[q]:
                    i, j = index_map[p], index_map[q]
                    pairs.append((indices[i], indices[j]))
                    areas.append(face_area(face_vertices, centroids[i], centroids[j]))
                    lengths.append(np.linalg.norm(centroids[j] - centroids[i]))
            number = scene.add_bonds(pairs, areas, lengths)
            if self.log:
                print(f"# {number} cohesive bond(s) between face-adjacent cells")
        return indices

    def create_sphere_box(self, scene: myScene, tag, xmin, xmax, radius, density, arrangement, seed, fraction, bond_threshold, cohesion):
        rng = np.random.default_rng(seed)
        position = sphere_lattice_positions(xmin, xmax, radius, arrangement)
        position = position[rng.random(position.shape[0]) < fraction]
        indices = self.create_sphere(scene, tag, position, radius, density)

        if cohesion and indices.size > 1:
            pairs, distance = close_pairs(position, 2. * radius * (1. + bond_threshold))
            number = scene.add_bonds(indices[pairs], PI * radius * radius, distance)
            if self.log:
                print(f"# {number} cohesive bond(s) between touching spheres")
        return indices


class ParticleGenerator(object):
    """Fills the footprint with the bulk body under a named packing strategy.

    Every strategy goes through the domain primitives, so the generator can
    be pointed at any object honouring the same calls.
    """
    def __init__(self, domain) -> None:
        self.domain = domain
        self.generate_hashmap = {
                                    "voronoi":          self.voronoi_packing,
                                    "Voronoi":          self.voronoi_packing,
                                    "sphereboxnormal":  self.sphere_box_normal,
                                    "sphereboxhcp":     self.sphere_box_hcp,
                                    "cube":             self.cube_packing,
                                    "Cube":             self.cube_packing
                                }

    @staticmethod
    def valid_types():
        return ["voronoi", "sphereboxnormal", "sphereboxhcp", "cube"]

    @classmethod
    def check(cls, ptype):
        if ptype not in ("voronoi", "Voronoi", "sphereboxnormal", "sphereboxhcp", "cube", "Cube"):
            raise UnsupportedPackingType(ptype, cls.valid_types())

    @staticmethod
    def is_cube(ptype):
        return ptype in ("cube", "Cube")

    def begin(self, params):
        self.check(params.ptype)
        print(" Packing Generation ".center(71, '-'))
        print("Packing Type:", params.ptype)
        print("Footprint:", [params.Lx, params.Ly, params.Lz])
        print("Resolution:", params.resolution)
        indices = self.generate_hashmap[params.ptype](params)
        if len(indices) == 0:
            raise RuntimeError("Zero Particles are inserted into region!")
        print("Body Number: ", len(indices), '\n')
        return indices

    def voronoi_packing(self, params):
        return self.domain.gen_voronoi_packing(BULK_TAG, params.R, params.footprint, params.resolution, params.rho,
                                               params.Cohesion, True, params.seed, params.fraction)

    def sphere_box(self, params, arrangement):
        half = 0.5 * np.array(params.footprint)
        return self.domain.gen_spheres_box(BULK_TAG, -half, half, params.R, params.rho, arrangement,
                                           params.seed, params.fraction, params.Eps, params.Cohesion)

    def sphere_box_normal(self, params):
        return self.sphere_box(params, "Normal")

    def sphere_box_hcp(self, params):
        return self.sphere_box(params, "HCP")

    def cube_packing(self, params):
        position, cube_size = cube_lattice_positions(params.Lx, params.Ly, params.Lz, params.scalingx, params.scalingy, params.scalingz)
        print("Cube Edge Length:", cube_size)
        print("March Step:", cube_size * SQRT3)
        print("Target Number:", position.shape[0])
        return self.domain.add_cube(BULK_TAG, position, params.R, cube_size, params.rho)
