import numpy as np

from src.utils.constants import BULK_TAG, SHAPE_NAME, PLANE
from src.utils.Exceptions import ConfigurationError


class myScene(object):
    """Ordered, mutable particle collection held as parallel numpy columns.

    Index ``i`` of every column describes the same particle; the order is
    the insertion order and is preserved by every deletion. ``pid`` is a
    per-run unique identity used to keep bonds valid across compactions.
    """
    VECTOR_COLUMNS = ("x", "v", "w", "Ff", "norm", "axis0", "axis1")
    SCALAR_COLUMNS = ("m", "inertia", "rad", "dmax", "R", "size", "kn", "kt", "gn", "gt", "mu", "bn", "bt", "bm", "eps")
    PROPERTY_COLUMNS = {"Kn": "kn", "Kt": "kt", "Gn": "gn", "Gt": "gt", "Mu": "mu", "Bn": "bn", "Bt": "bt", "Bm": "bm", "Eps": "eps"}

    def __init__(self) -> None:
        self.next_pid = 0
        self.pid = np.zeros(0, dtype=np.int64)
        self.tag = np.zeros(0, dtype=np.int64)
        self.shape = np.zeros(0, dtype=np.int8)
        self.fix_v = np.zeros(0, dtype=bool)
        self.extent = np.zeros((0, 2))
        for name in self.VECTOR_COLUMNS:
            setattr(self, name, np.zeros((0, 3)))
        for name in self.SCALAR_COLUMNS:
            setattr(self, name, np.zeros(0))
        self.vertices = []

        self.bond_pid = np.zeros((0, 2), dtype=np.int64)
        self.bond_area = np.zeros(0)
        self.bond_length = np.zeros(0)

    @property
    def particleNum(self):
        return int(self.tag.shape[0])

    @property
    def bondNum(self):
        return int(self.bond_pid.shape[0])

    def __len__(self):
        return self.particleNum

    def __iter__(self):
        for i in range(self.particleNum):
            yield self.particle(i)

    def particle(self, index):
        """Snapshot of one particle as a plain dictionary."""
        info = {"pid": int(self.pid[index]), "tag": int(self.tag[index]), "shape": SHAPE_NAME[int(self.shape[index])], "fix_v": bool(self.fix_v[index])}
        for name in self.VECTOR_COLUMNS:
            info[name] = getattr(self, name)[index].copy()
        for name in self.SCALAR_COLUMNS:
            info[name] = float(getattr(self, name)[index])
        info["vertices"] = None if self.vertices[index] is None else self.vertices[index].copy()
        return info

    # ========================================================= #
    #                       Insertion                           #
    # ========================================================= #
    def add_particles(self, tag, shape, x, m, rad, dmax, R, size=0., inertia=None, vertices=None, norm=None, axis0=None, axis1=None, extent=None):
        x = np.asarray(x, dtype=float).reshape(-1, 3)
        number = x.shape[0]
        if number == 0:
            return np.zeros(0, dtype=np.int64)
        start = self.particleNum

        def expand(value, cols=None, dtype=float):
            arr = np.asarray(value, dtype=dtype)
            if cols is None:
                return np.broadcast_to(arr, (number,)).copy()
            return np.broadcast_to(arr, (number, cols)).copy()

        m = expand(m)
        rad = expand(rad)
        if inertia is None:
            inertia = 0.4 * m * rad * rad
        columns = {
                    "x": x, "v": np.zeros((number, 3)), "w": np.zeros((number, 3)), "Ff": np.zeros((number, 3)),
                    "norm": expand([0., 0., 1.] if norm is None else norm, 3),
                    "axis0": expand([1., 0., 0.] if axis0 is None else axis0, 3),
                    "axis1": expand([0., 1., 0.] if axis1 is None else axis1, 3),
                    "m": m, "inertia": expand(inertia), "rad": rad, "dmax": expand(dmax), "R": expand(R), "size": expand(size)
                  }
        for name in self.VECTOR_COLUMNS + self.SCALAR_COLUMNS:
            value = columns.get(name)
            if value is None:
                value = np.zeros(number)
            setattr(self, name, np.concatenate([getattr(self, name), value]))

        self.pid = np.concatenate([self.pid, np.arange(self.next_pid, self.next_pid + number, dtype=np.int64)])
        self.next_pid += number
        self.tag = np.concatenate([self.tag, expand(tag, dtype=np.int64)])
        self.shape = np.concatenate([self.shape, expand(shape, dtype=np.int8)])
        self.fix_v = np.concatenate([self.fix_v, np.zeros(number, dtype=bool)])
        self.extent = np.concatenate([self.extent, expand([0., 0.] if extent is None else extent, 2)])
        if vertices is None:
            self.vertices.extend([None] * number)
        else:
            if len(vertices) != number:
                raise RuntimeError(f"{len(vertices)} vertex sets are given for {number} particles")
            self.vertices.extend([None if v is None else np.asarray(v, dtype=float) for v in vertices])
        return np.arange(start, start + number)

    def add_bonds(self, index_pairs, area, length):
        index_pairs = np.asarray(index_pairs, dtype=np.int64).reshape(-1, 2)
        if index_pairs.shape[0] == 0:
            return 0
        self.bond_pid = np.concatenate([self.bond_pid, self.pid[index_pairs]])
        self.bond_area = np.concatenate([self.bond_area, np.broadcast_to(np.asarray(area, dtype=float), (index_pairs.shape[0],))])
        self.bond_length = np.concatenate([self.bond_length, np.broadcast_to(np.asarray(length, dtype=float), (index_pairs.shape[0],))])
        return index_pairs.shape[0]

    def bond_indices(self):
        """Current particle indices of both bond ends."""
        lookup = {int(p): i for i, p in enumerate(self.pid)}
        return np.array([[lookup[int(a)], lookup[int(b)]] for a, b in self.bond_pid], dtype=np.int64).reshape(-1, 2)

    def remove_bonds(self, mask):
        keep = ~np.asarray(mask, dtype=bool)
        self.bond_pid = self.bond_pid[keep]
        self.bond_area = self.bond_area[keep]
        self.bond_length = self.bond_length[keep]

    # ========================================================= #
    #                        Selection                          #
    # ========================================================= #
    def indices_of_tags(self, tags):
        tags = np.atleast_1d(np.asarray(list(tags) if isinstance(tags, (set, frozenset)) else tags, dtype=np.int64))
        return np.nonzero(np.isin(self.tag, tags))[0]

    def has_tag(self, tag):
        return bool(np.any(self.tag == int(tag)))

    def check_boundary_tag(self, tag):
        if self.has_tag(tag):
            raise ConfigurationError(f"Tag {tag} is already used by {int(np.sum(self.tag == int(tag)))} particle(s)")

    # ========================================================= #
    #                        Deletion                           #
    # ========================================================= #
    def delete_by_index(self, indices):
        """Remove all particles at ``indices`` in one compaction pass."""
        indices = np.unique(np.asarray(indices, dtype=np.int64))
        if indices.size == 0:
            return 0
        keep = np.ones(self.particleNum, dtype=bool)
        keep[indices] = False
        removed_pid = self.pid[indices]

        for name in ("pid", "tag", "shape", "fix_v", "extent") + self.VECTOR_COLUMNS + self.SCALAR_COLUMNS:
            setattr(self, name, getattr(self, name)[keep])
        self.vertices = [v for v, k in zip(self.vertices, keep) if k]
        if self.bondNum > 0:
            self.remove_bonds(np.any(np.isin(self.bond_pid, removed_pid), axis=1))
        return int(indices.size)

    def delete_by_tags(self, tags):
        return self.delete_by_index(self.indices_of_tags(tags))

    def print_delete_particles(self, number, reason):
        print(f"# {number} particle(s) deleted ({reason}), {self.particleNum} particle(s) remain", '\n')

    # ========================================================= #
    #                  Properties and forces                    #
    # ========================================================= #
    def fix_velocity(self, tag):
        index = self.indices_of_tags([tag])
        self.fix_v[index] = True
        self.v[index] = 0.
        self.w[index] = 0.
        return int(index.size)

    def assign_properties(self, tag, bundle):
        index = self.indices_of_tags([tag])
        for name, column in self.PROPERTY_COLUMNS.items():
            getattr(self, column)[index] = float(getattr(bundle, name))
        return int(index.size)

    def set_body_force(self, tag, acceleration):
        index = self.indices_of_tags([tag])
        self.Ff[index] = self.m[index, None] * np.asarray(acceleration, dtype=float)[None, :]
        return int(index.size)

    # ========================================================= #
    #                        Reductions                         #
    # ========================================================= #
    def bounding_box(self):
        """(Xmin, Xmax) over current particle extents, recomputed on every call."""
        if self.particleNum == 0:
            raise RuntimeError("Bounding box of an empty particle collection is undefined")
        slack = self.dmax[:, None]
        return (self.x - slack).min(axis=0), (self.x + slack).max(axis=0)

    def find_particle_min_mass(self):
        free = ~self.fix_v & (self.shape != PLANE)
        if not np.any(free):
            raise RuntimeError("No free particle is present in the scene")
        return float(self.m[free].min())

    def find_max_stiffness(self):
        if self.particleNum == 0:
            return 0.
        return float(max(self.kn.max(), self.kt.max(), self.bn.max()))

    def bulk_indices(self):
        return self.indices_of_tags([BULK_TAG])

    # ========================================================= #
    #                         Storage                           #
    # ========================================================= #
    def get_state(self):
        state = {name: getattr(self, name) for name in ("pid", "tag", "shape", "fix_v", "extent") + self.VECTOR_COLUMNS + self.SCALAR_COLUMNS}
        counts = np.array([0 if v is None else v.shape[0] for v in self.vertices], dtype=np.int64)
        vertices = [v for v in self.vertices if v is not None]
        state["vertex_count"] = counts
        state["vertices"] = np.concatenate(vertices) if vertices else np.zeros((0, 3))
        state["bond_pid"] = self.bond_pid
        state["bond_area"] = self.bond_area
        state["bond_length"] = self.bond_length
        return state

    def set_state(self, state):
        for name in ("pid", "tag", "shape", "fix_v", "extent") + self.VECTOR_COLUMNS + self.SCALAR_COLUMNS:
            setattr(self, name, np.array(state[name]))
        counts = np.asarray(state["vertex_count"], dtype=np.int64)
        offsets = np.concatenate([[0], np.cumsum(counts)])
        vertices = np.asarray(state["vertices"])
        self.vertices = [None if c == 0 else vertices[offsets[i]:offsets[i + 1]].copy() for i, c in enumerate(counts)]
        self.bond_pid = np.array(state["bond_pid"], dtype=np.int64).reshape(-1, 2)
        self.bond_area = np.array(state["bond_area"])
        self.bond_length = np.array(state["bond_length"])
        self.next_pid = int(self.pid.max()) + 1 if self.pid.size > 0 else 0

    def print_info(self):
        print(" Scene Information ".center(71, '-'))
        print("Particle Number: ", self.particleNum)
        for tag in np.unique(self.tag):
            index = self.indices_of_tags([tag])
            print(f"Tag {tag}: {index.size} particle(s), fixed = {bool(np.all(self.fix_v[index]))}")
        if self.bondNum > 0:
            print("Bond Number: ", self.bondNum)
        print('\n')
