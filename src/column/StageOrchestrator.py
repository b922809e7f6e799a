from enum import Enum

from src.column.CrossSectionCarver import CrossSectionCarver
from src.column.RunParameters import RunParameters
from src.dem.generator.BodyGenerator import ParticleGenerator
from src.utils.constants import BULK_TAG


class Stage(Enum):
    GENERATE = 0
    PRESETTLE = 1
    CARVE = 2
    FINALIZE_BOUNDARY = 3
    ASSIGN_BULK = 4
    MAIN_SOLVE = 5
    DONE = 6


class StageOrchestrator(object):
    """Drives one column run through its stages.

    Every stage is a method that mutates the domain and returns the next
    stage, so a run can be advanced one transition at a time with ``step``
    or to completion with ``run``. PRESETTLE is only entered for cube
    packings.
    """
    def __init__(self, domain, params: RunParameters, nproc=1, log=True):
        self.domain = domain
        self.params = params
        self.nproc = int(nproc)
        self.log = log
        self.stage = Stage.GENERATE
        self.history = []
        self.handler_hashmap = {
                                    Stage.GENERATE:          self.generate,
                                    Stage.PRESETTLE:         self.presettle,
                                    Stage.CARVE:             self.carve,
                                    Stage.FINALIZE_BOUNDARY: self.finalize_boundary,
                                    Stage.ASSIGN_BULK:       self.assign_bulk,
                                    Stage.MAIN_SOLVE:        self.main_solve
                               }

    def print_stage(self, stage):
        if self.log:
            print('#', f" Stage: {stage.name} ".center(67, '='), '#', '\n')

    def step(self):
        if self.stage is Stage.DONE:
            return self.stage
        self.print_stage(self.stage)
        self.history.append(self.stage)
        self.stage = self.handler_hashmap[self.stage]()
        return self.stage

    def run(self):
        while self.stage is not Stage.DONE:
            self.step()
        self.print_stage(Stage.DONE)
        return self.history

    def stable_timestep(self):
        dt = 0.5 * self.domain.critical_dt()
        if self.log:
            print('#', f"Configured time step {self.params.dt} is superseded by 0.5 x critical time step = {dt}", '\n')
        return dt

    # ========================================================= #
    #                         Stages                            #
    # ========================================================= #
    def generate(self):
        ParticleGenerator(self.domain).begin(self.params)
        if ParticleGenerator.is_cube(self.params.ptype):
            return Stage.PRESETTLE
        return Stage.CARVE

    def presettle(self):
        params = self.params
        self.domain.wall_generator.add_confining_walls(self.domain, params)
        self.domain.set_body_force(BULK_TAG, params.settle_gravity)
        self.domain.set_props(BULK_TAG, **params.contact_props())

        settle_time = 0.5 * params.Tf
        self.domain.solve(settle_time, self.stable_timestep(), settle_time / 20., "drop_cubes", params.R, self.nproc)
        self.domain.save("stage_1")

        # cubes that escaped the walls during settling
        CrossSectionCarver("box", params.Lx, params.Ly, params.Lz, log=self.log).carve(self.domain.scene)
        self.domain.wall_generator.remove_confining_walls(self.domain)
        return Stage.CARVE

    def carve(self):
        carver = CrossSectionCarver(self.params.CrossSection, self.params.Lx, self.params.Ly, log=self.log)
        if self.log:
            carver.region.print_info()
        carver.carve(self.domain.scene)
        return Stage.FINALIZE_BOUNDARY

    def finalize_boundary(self):
        self.domain.wall_generator.add_base_plate(self.domain, self.params, self.params.plate_props())
        return Stage.ASSIGN_BULK

    def assign_bulk(self):
        self.domain.set_body_force(BULK_TAG, self.params.flow_gravity)
        self.domain.set_props(BULK_TAG, **self.params.bulk_props())
        return Stage.MAIN_SOLVE

    def main_solve(self):
        params = self.params
        self.domain.solve(1.5 * params.Tf, self.stable_timestep(), params.dtOut, "column", params.R, self.nproc)
        return Stage.DONE
