import os

from taichi.lang.exception import TaichiCompilationError, TaichiRuntimeError

from src.dem.contact.Linear import LinearModel
from src.dem.DEMBase import Solver
from src.dem.engines.ExplicitEngine import ExplicitEngine
from src.dem.generator.BodyGenerator import ParticleCreator
from src.dem.generator.WallGenerator import WallGenerator
from src.dem.PropertyManager import PropertyTable
from src.dem.Recorder import WriteFile, save_checkpoint, load_checkpoint
from src.dem.SceneManager import myScene
from src.dem.Simulation import Simulation
from src.utils.Exceptions import ExternalEngineError
import src.utils.GlobalVariable as GlobalVariable


class DEM(object):
    """Simulation domain: owns the particle collection and exposes the engine primitives."""
    def __init__(self, title='Granular Column Assembly and Staging', log=True):
        if log:
            print('# =================================================================== #')
            print('#', "".center(67), '#')
            print('#', "Welcome to GeoColumn -- Discrete Element Method Engine !".center(67), '#')
            print('#', "".center(67), '#')
            print('#', title.center(67), '#')
            print('#', "".center(67), '#')
            print('# =================================================================== #', '\n')
        self.log = log
        self.sims = Simulation()
        self.scene = myScene()
        self.props = PropertyTable()
        self.creator = ParticleCreator(log=log)
        self.wall_generator = WallGenerator(log=log)
        self.contact = LinearModel()
        self.engine = ExplicitEngine()

    def set_save_path(self, path):
        self.sims.set_save_path(path)

    def set_visualize(self, visualize):
        self.sims.visualize = bool(visualize)

    # ========================================================= #
    #                      Generation                           #
    # ========================================================= #
    def gen_voronoi_packing(self, tag, R, L, N, rho, cohesion=False, periodic=True, seed=0, fraction=1.):
        return self.creator.create_voronoi_pack(self.scene, tag, R, L, N, rho, cohesion, periodic, seed, fraction)

    def gen_spheres_box(self, tag, xmin, xmax, R, rho, arrangement="Normal", seed=0, fraction=1., bond_threshold=0., cohesion=False):
        return self.creator.create_sphere_box(self.scene, tag, xmin, xmax, R, rho, arrangement, seed, fraction, bond_threshold, cohesion)

    def add_cube(self, tag, position, R, edge, rho):
        """Insert one cube or an (N, 3) batch of cubes in the given order; returns their indices."""
        return self.creator.create_cube(self.scene, tag, position, R, edge, rho)

    def add_sphere(self, tag, position, R, rho):
        return int(self.creator.create_sphere(self.scene, tag, position, R, rho)[0])

    def add_plane(self, tag, center, R, width, height, rho, angle=0., axis=(0., 0., 1.)):
        return int(self.wall_generator.create_plane(self.scene, tag, center, R, width, height, rho, angle, axis))

    # ========================================================= #
    #                  Selection and deletion                   #
    # ========================================================= #
    def fix_velocity(self, tag):
        return self.scene.fix_velocity(tag)

    def delete_particles(self, tags):
        number = self.scene.delete_by_tags(tags)
        if self.log:
            self.scene.print_delete_particles(number, f"tags {sorted(tags)}")
        return number

    def delete_particles_by_index(self, indices):
        return self.scene.delete_by_index(indices)

    def bounding_box(self):
        return self.scene.bounding_box()

    # ========================================================= #
    #                 Properties and forces                     #
    # ========================================================= #
    def set_props(self, tag, **kwargs):
        """Update the bundle of ``tag`` and copy it into every particle currently carrying the tag."""
        self.props.set(tag, **kwargs)
        return self.props.apply(self.scene, tags=[tag], log=self.log)

    def set_body_force(self, tag, acceleration):
        return self.scene.set_body_force(tag, acceleration)

    def critical_dt(self):
        return self.contact.calcu_critical_timestep(self.scene)

    # ========================================================= #
    #                         Solve                             #
    # ========================================================= #
    def print_solver_info(self):
        print(" DEM Solver Information ".center(71,"-"))
        print(("Initial Simulation Time: " + str(self.sims.current_time)).ljust(67))
        print(("Finial Simulation Time: " + str(self.sims.time)).ljust(67))
        print(("Time Step: " + str(self.sims.delta)).ljust(67))
        print(("Save Interval: " + str(self.sims.save_interval)).ljust(67))
        print(("Verlet Distance: " + str(self.sims.verlet_distance)).ljust(67))
        print(("Thread Number: " + str(self.sims.nproc)).ljust(67))
        print(("Save Path: " + str(self.sims.output_path())).ljust(67))
        print('\n')

    def solve(self, tf, dt, dtOut, prefix, alpha, nproc=1):
        """Blocking explicit solve until the domain clock reaches ``tf``."""
        if not GlobalVariable.INITIALIZED:
            raise ExternalEngineError("Taichi runtime is not initialized, call geocolumn.init() first")
        self.sims.set_simulation_time(tf)
        self.sims.set_timestep(dt)
        self.sims.set_save_interval(dtOut)
        self.sims.set_prefix(prefix)
        self.sims.set_verlet_distance(alpha)
        self.sims.set_nproc(nproc)
        if self.log:
            self.print_solver_info()

        try:
            recorder = WriteFile(self.sims)
            solver = Solver(self.sims, self.engine, recorder)
            solver.Solver(self.scene)
        except ExternalEngineError:
            raise
        except (RuntimeError, ValueError, ArithmeticError, OSError, TaichiCompilationError, TaichiRuntimeError) as error:
            self.engine.finalize()
            raise ExternalEngineError(f"Solve <{prefix}> failed at t = {self.sims.current_time}: {error}") from error
        return self.sims.current_time

    def save(self, name):
        filename = save_checkpoint(os.path.join(self.sims.path, name), self.sims, self.scene)
        if self.log:
            print('#', f"Checkpoint saved to {filename}", '\n')
        return filename

    def load(self, name):
        load_checkpoint(os.path.join(self.sims.path, name), self.sims, self.scene)
        if self.log:
            print('#', f"Checkpoint {name} loaded at t = {self.sims.current_time}", '\n')
            self.scene.print_info()
