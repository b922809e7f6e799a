import numpy as np
import taichi as ti
from scipy.spatial import cKDTree

from src.dem.structs.BaseStruct import ContactPair
from src.utils.constants import PLANE


class PairList(object):
    """Growable device list of contact pairs with tangential history."""
    def __init__(self, name) -> None:
        self.name = name
        self.capacity = 0
        self.pairNum = 0
        self.pair = None
        self.snode_tree = None
        self.keys = np.zeros(0, dtype=np.int64)

    def allocate(self, capacity):
        if not self.snode_tree is None:
            self.snode_tree.destroy()
        field_builder = ti.FieldsBuilder()
        self.pair = ContactPair.field()
        field_builder.dense(ti.i, capacity).place(self.pair)
        self.snode_tree = field_builder.finalize()
        self.capacity = capacity

    def update(self, end1, end2, particleNum):
        """Replace the pair list, keeping the tangential history of surviving pairs."""
        number = end1.shape[0]
        keys = end1.astype(np.int64) * particleNum + end2.astype(np.int64)
        tang = np.zeros((number, 3))
        if self.pairNum > 0:
            old_tang = self.pair.tang.to_numpy()[:self.pairNum]
            position = np.searchsorted(self.keys, keys)
            position = np.clip(position, 0, self.keys.shape[0] - 1)
            found = self.keys[position] == keys
            tang[found] = old_tang[position[found]]

        if number > self.capacity:
            self.allocate(max(int(1.5 * number), 64))
        elif self.pair is None:
            self.allocate(64)
        padded = self.capacity - number
        self.pair.end1.from_numpy(np.concatenate([end1, np.zeros(padded)]).astype(np.int32))
        self.pair.end2.from_numpy(np.concatenate([end2, np.zeros(padded)]).astype(np.int32))
        self.pair.tang.from_numpy(np.concatenate([tang, np.zeros((padded, 3))]))
        self.pairNum = number
        self.keys = keys

    def destroy(self):
        if not self.snode_tree is None:
            self.snode_tree.destroy()
        self.snode_tree = None
        self.pair = None
        self.capacity = 0
        self.pairNum = 0


class VerletList(object):
    """Potential contacts within ``r1 + r2 + 2 * alpha``.

    The list stays valid until some particle has moved more than ``alpha``
    since the last build.
    """
    def __init__(self, alpha) -> None:
        self.alpha = float(alpha)
        self.particle_pairs = PairList("particle-particle")
        self.wall_pairs = PairList("particle-wall")
        self.build_num = 0

    def particle_candidates(self, position, radius, shape):
        body = np.nonzero(shape != PLANE)[0]
        if body.size < 2:
            return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64)
        tree = cKDTree(position[body])
        cutoff = 2. * radius[body].max() + 2. * self.alpha
        pairs = tree.query_pairs(r=cutoff, output_type='ndarray')
        if pairs.size == 0:
            return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64)
        end1, end2 = body[pairs[:, 0]], body[pairs[:, 1]]
        distance = np.linalg.norm(position[end2] - position[end1], axis=1)
        valid = distance < radius[end1] + radius[end2] + 2. * self.alpha
        end1, end2 = np.minimum(end1, end2)[valid], np.maximum(end1, end2)[valid]
        order = np.lexsort((end2, end1))
        return end1[order], end2[order]

    def wall_candidates(self, position, radius, shape, norm, axis0, axis1, extent, R):
        walls = np.nonzero(shape == PLANE)[0]
        body = np.nonzero(shape != PLANE)[0]
        end1, end2 = [], []
        for nw in walls:
            rel = position[body] - position[nw]
            slack = radius[body] + self.alpha
            near = np.abs(rel @ norm[nw]) < slack + R[nw] + self.alpha
            near &= np.abs(rel @ axis0[nw]) <= extent[nw, 0] + slack
            near &= np.abs(rel @ axis1[nw]) <= extent[nw, 1] + slack
            end1.append(body[near])
            end2.append(np.full(int(near.sum()), nw))
        if not end1:
            return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64)
        end1, end2 = np.concatenate(end1), np.concatenate(end2)
        order = np.lexsort((end2, end1))
        return end1[order], end2[order]

    def build(self, position, radius, shape, norm, axis0, axis1, extent, R):
        particleNum = position.shape[0]
        end1, end2 = self.particle_candidates(position, radius, shape)
        self.particle_pairs.update(end1, end2, particleNum)
        end1, end2 = self.wall_candidates(position, radius, shape, norm, axis0, axis1, extent, R)
        self.wall_pairs.update(end1, end2, particleNum)
        self.build_num += 1

    def destroy(self):
        self.particle_pairs.destroy()
        self.wall_pairs.destroy()
