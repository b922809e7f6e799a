import numpy as np

from src.utils.Exceptions import UnsupportedCrossSection


class RegionFunction(object):
    """Closed-form footprint predicates in the horizontal plane.

    Every predicate takes an (N, 3) array of positions and returns a boolean
    mask that is True for positions lying OUTSIDE the named shape. The
    footprint is centred on the origin with extents (Lx, Ly, Lz).
    """
    def __init__(self, region_type, Lx, Ly, Lz=0.):
        self.Lx = float(Lx)
        self.Ly = float(Ly)
        self.Lz = float(Lz)
        self.function_hashmap = {
                                    "circle":            self.RegionCircle,
                                    "Circle":            self.RegionCircle,
                                    "right_triangle":    self.RegionRightTriangle,
                                    "isoscele_triangle": self.RegionIsosceleTriangle,
                                    "square":            self.RegionSquare,
                                    "Square":            self.RegionSquare,
                                    "box":               self.RegionBox
                                }
        if region_type not in self.function_hashmap:
            raise UnsupportedCrossSection(region_type, self.valid_names())
        self.region_type = region_type
        self.function = self.function_hashmap[region_type]

    @staticmethod
    def valid_names():
        return ["circle", "right_triangle", "isoscele_triangle", "square"]

    @classmethod
    def check_cross_section(cls, name):
        if name not in ("circle", "Circle", "right_triangle", "isoscele_triangle", "square", "Square"):
            raise UnsupportedCrossSection(name, cls.valid_names())

    def outside(self, position):
        position = np.asarray(position, dtype=float).reshape(-1, 3)
        return self.function(position)

    def RegionCircle(self, position):
        x, y = position[:, 0], position[:, 1]
        return x * x + y * y >= 0.25 * self.Lx * self.Ly

    def RegionRightTriangle(self, position):
        x, y = position[:, 0], position[:, 1]
        return y > self.Ly / self.Lx * x

    def RegionIsosceleTriangle(self, position):
        x, y = position[:, 0], position[:, 1]
        slope = 2. * self.Ly / self.Lx
        return (y > slope * x + 0.5 * self.Ly) | (y > -slope * x + 0.5 * self.Ly)

    def RegionSquare(self, position):
        return np.zeros(position.shape[0], dtype=bool)

    def RegionBox(self, position):
        half = 0.5 * np.array([self.Lx, self.Ly, self.Lz])
        return np.any(np.abs(position) > half, axis=1)

    def print_info(self):
        print(" Cross Section Information ".center(71, "-"))
        print("Cross Section Type:", self.region_type)
        print("Footprint:", [self.Lx, self.Ly, self.Lz], '\n')
