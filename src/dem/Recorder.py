import os

import numpy as np
from pyevtk.hl import pointsToVTK

from src.dem.SceneManager import myScene
from src.dem.Simulation import Simulation
from src.utils.linalg import no_operation


class WriteFile:
    """Writes particle frames under ``{path}/{prefix}``: npz states and VTK points."""
    def __init__(self, sims: Simulation):
        self.vtk_path = None
        self.particle_path = None
        self.visualizeParticle = no_operation
        if sims.visualize:
            self.visualizeParticle = self.VisualizeParticle
        self.mkdir(sims)

    def mkdir(self, sims: Simulation):
        self.particle_path = sims.output_path() + '/particles'
        self.vtk_path = sims.output_path() + '/vtks'
        if not os.path.exists(self.particle_path):
            os.makedirs(self.particle_path)
        if not os.path.exists(self.vtk_path):
            os.makedirs(self.vtk_path)

    def frame_name(self, sims: Simulation):
        return f"{sims.prefix}_{sims.current_print:04d}"

    def output(self, sims: Simulation, scene: myScene):
        self.MonitorParticle(sims, scene)
        self.visualizeParticle(sims, scene)

    def MonitorParticle(self, sims: Simulation, scene: myScene):
        np.savez(self.particle_path + '/' + self.frame_name(sims), t_current=sims.current_time, body_num=scene.particleNum,
                 tag=scene.tag, shape=scene.shape, fix_v=scene.fix_v, mass=scene.m, radius=scene.rad,
                 position=scene.x, velocity=scene.v, omega=scene.w, bond=scene.bond_pid)

    def VisualizeParticle(self, sims: Simulation, scene: myScene):
        position = scene.x
        posx, posy, posz = np.ascontiguousarray(position[:, 0]), np.ascontiguousarray(position[:, 1]), np.ascontiguousarray(position[:, 2])
        velocity = scene.v
        data = {
                    "tag": np.ascontiguousarray(scene.tag.astype(np.float64)),
                    "rad": np.ascontiguousarray(scene.rad),
                    "dmax": np.ascontiguousarray(scene.dmax),
                    "velocity": (np.ascontiguousarray(velocity[:, 0]), np.ascontiguousarray(velocity[:, 1]), np.ascontiguousarray(velocity[:, 2]))
               }
        pointsToVTK(self.vtk_path + '/' + self.frame_name(sims), posx, posy, posz, data=data)


def save_checkpoint(filename, sims: Simulation, scene: myScene):
    """Full particle state plus the domain clock, resumable through ``load_checkpoint``."""
    directory = os.path.dirname(filename)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    state = scene.get_state()
    state.update({f"sims_{key}": value for key, value in sims.state().items()})
    np.savez(filename, **state)
    return filename if filename.endswith('.npz') else filename + '.npz'


def load_checkpoint(filename, sims: Simulation, scene: myScene):
    if not filename.endswith('.npz'):
        filename += '.npz'
    if not os.path.exists(filename):
        raise FileNotFoundError(f"Checkpoint <{filename}> not found")
    with np.load(filename) as data:
        scene.set_state(data)
        sims.restore({"current_time": data["sims_current_time"], "current_step": data["sims_current_step"]})
