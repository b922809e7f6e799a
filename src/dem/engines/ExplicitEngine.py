import numpy as np
import taichi as ti

from src.dem.engines.EngineKernel import *
from src.dem.neighbor.VerletList import VerletList
from src.dem.SceneManager import myScene
from src.dem.Simulation import Simulation
from src.dem.structs.BaseStruct import BondFamily, ParticleFamily


class ExplicitEngine(object):
    """Symplectic Euler integration of the scene on the taichi backend.

    The scene is uploaded once per solve; host columns are refreshed from
    the device on ``download``.
    """
    scene: myScene
    neighbor: VerletList

    def __init__(self) -> None:
        self.neighbor = None
        self.particle = None
        self.bond = None
        self.particleNum = 0
        self.bondNum = 0
        self.broken_bond = 0
        self.neighbor_builds = 0
        self.snode_tree = None

    def allocate(self, particleNum, bondNum):
        field_builder = ti.FieldsBuilder()
        self.particle = ParticleFamily.field()
        self.bond = BondFamily.field()
        field_builder.dense(ti.i, particleNum).place(self.particle)
        field_builder.dense(ti.i, max(bondNum, 1)).place(self.bond)
        self.snode_tree = field_builder.finalize()
        self.particleNum = particleNum
        self.bondNum = bondNum

    def pre_calculation(self, sims: Simulation, scene: myScene):
        if scene.particleNum == 0:
            raise RuntimeError("No particle is present in the scene")
        self.finalize()
        self.broken_bond = 0
        self.neighbor_builds = 0
        self.allocate(scene.particleNum, scene.bondNum)
        self.upload(scene)
        self.neighbor = VerletList(sims.verlet_distance)
        self.update_verlet_table(scene)

    def upload(self, scene: myScene):
        self.particle.fix_v.from_numpy(scene.fix_v.astype(np.uint8))
        self.particle.shapeType.from_numpy(scene.shape.astype(np.uint8))
        for name in ("m", "inertia", "rad", "R", "kn", "kt", "gn", "gt", "mu", "bn", "bt", "eps"):
            getattr(self.particle, name).from_numpy(getattr(scene, name).astype(float))
        for name in ("x", "v", "w", "Ff", "norm", "axis0", "axis1"):
            getattr(self.particle, name).from_numpy(getattr(scene, name).astype(float))
        self.particle.extent.from_numpy(scene.extent.astype(float))
        self.particle.verletDisp.from_numpy(np.zeros((scene.particleNum, 3)))
        particle_force_reset_(self.particleNum, self.particle)

        if self.bondNum > 0:
            ends = scene.bond_indices()
            self.bond.end1.from_numpy(ends[:, 0].astype(np.int32))
            self.bond.end2.from_numpy(ends[:, 1].astype(np.int32))
            self.bond.active.from_numpy(np.ones(self.bondNum, dtype=np.uint8))
            self.bond.area.from_numpy(scene.bond_area.astype(float))
            self.bond.length.from_numpy(scene.bond_length.astype(float))
            self.bond.tang.from_numpy(np.zeros((self.bondNum, 3)))

    def download(self, scene: myScene):
        scene.x = self.particle.x.to_numpy()[:self.particleNum]
        scene.v = self.particle.v.to_numpy()[:self.particleNum]
        scene.w = self.particle.w.to_numpy()[:self.particleNum]
        if self.bondNum > 0:
            active = self.bond.active.to_numpy()
            broken = active[:self.bondNum] == 0
            if np.any(broken):
                scene.remove_bonds(broken)
                order = np.concatenate([np.nonzero(~broken)[0], np.nonzero(broken)[0], np.arange(self.bondNum, active.shape[0])])
                for name in ("end1", "end2", "active", "area", "length", "tang"):
                    field = getattr(self.bond, name)
                    field.from_numpy(field.to_numpy()[order])
                self.bondNum = int(np.sum(~broken))

    def update_verlet_table(self, scene: myScene):
        position = self.particle.x.to_numpy()[:self.particleNum]
        self.neighbor.build(position, scene.rad, scene.shape, scene.norm, scene.axis0, scene.axis1, scene.extent, scene.R)
        self.neighbor_builds += 1
        reset_verlet_displacement_(self.particleNum, self.particle)

    def is_need_update_verlet_table(self):
        return max_verlet_displacement_(self.particleNum, self.particle) > self.neighbor.alpha

    def compute(self, sims: Simulation):
        dt = sims.delta
        particle_force_reset_(self.particleNum, self.particle)
        particle_contact_force_(self.neighbor.particle_pairs.pairNum, dt, self.particle, self.neighbor.particle_pairs.pair)
        wall_contact_force_(self.neighbor.wall_pairs.pairNum, dt, self.particle, self.neighbor.wall_pairs.pair)
        if self.bondNum > 0:
            self.broken_bond += bond_force_(self.bondNum, dt, self.particle, self.bond)

    def integration(self, sims: Simulation):
        move_particles_euler_(self.particleNum, sims.delta, self.particle)

    def core(self, sims: Simulation, scene: myScene):
        sims.timer.begin("force")
        self.compute(sims)
        sims.timer.end("force")
        sims.timer.begin("integration")
        self.integration(sims)
        sims.timer.end("integration")
        if self.is_need_update_verlet_table():
            sims.timer.begin("neighbor")
            self.update_verlet_table(scene)
            sims.timer.end("neighbor")

    def finalize(self):
        if not self.neighbor is None:
            self.neighbor.destroy()
            self.neighbor = None
        if not self.snode_tree is None:
            self.snode_tree.destroy()
            self.snode_tree = None
