import numpy as np

from src.dem.SceneManager import myScene
from src.utils.constants import BULK_TAG
from src.utils.RegionFunction import RegionFunction


class CrossSectionCarver(object):
    """Removes bulk particles lying outside a footprint shape.

    Carving is split in two phases: ``classify`` is a pure pass returning the
    indices to remove, ``carve`` deletes exactly those in a single compaction.
    """
    def __init__(self, region_type, Lx, Ly, Lz=0., log=True):
        self.region = RegionFunction(region_type, Lx, Ly, Lz)
        self.log = log

    def classify(self, scene: myScene):
        candidates = scene.indices_of_tags([BULK_TAG])
        if candidates.size == 0:
            return candidates
        outside = self.region.outside(scene.x[candidates])
        return np.sort(candidates[outside])

    def carve(self, scene: myScene):
        indices = self.classify(scene)
        number = scene.delete_by_index(indices)
        if self.log:
            scene.print_delete_particles(number, f"outside {self.region.region_type}")
        return number
