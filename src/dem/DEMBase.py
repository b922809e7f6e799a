import time

from src.dem.engines.ExplicitEngine import ExplicitEngine
from src.dem.Recorder import WriteFile
from src.dem.SceneManager import myScene
from src.dem.Simulation import Simulation


class Solver(object):
    sims: Simulation
    engine: ExplicitEngine
    recorder: WriteFile

    def __init__(self, sims, engine, recorder):
        self.sims = sims
        self.engine = engine
        self.recorder = recorder
        self.last_save_time = 0.

    def save_file(self, scene: myScene):
        print('# Step =', self.sims.current_step, '   ', 'Save Number =', self.sims.current_print, '   ', 'Simulation time =', self.sims.current_time)
        self.engine.download(scene)
        self.recorder.output(self.sims, scene)
        self.sims.timer.profile0()
        print('\n')
        self.last_save_time = 1. * self.sims.current_time
        self.sims.current_print += 1

    def core(self, scene: myScene):
        self.engine.core(self.sims, scene)
        self.sims.current_time += self.sims.delta
        self.sims.current_step += 1

    def compile(self, scene: myScene):
        print("Compiling first ... ...")
        start_time = time.time()
        self.core(scene)
        end_time = time.time()
        print(f'Compiling time = {end_time - start_time} \n')

    def Solver(self, scene: myScene):
        print("#", " Start Simulation ".center(67,"="), "#")
        self.engine.pre_calculation(self.sims, scene)
        self.save_file(scene)
        if self.sims.current_time >= self.sims.time:
            print(f"Simulation time {self.sims.current_time} has already reached {self.sims.time}")
            print("#", " End Simulation ".center(67,"="), "#", '\n')
            self.engine.finalize()
            return

        self.compile(scene)
        start_time = time.time()
        while self.sims.current_time < self.sims.time:
            self.core(scene)
            if self.sims.current_time - self.last_save_time + 0.1 * self.sims.delta > self.sims.save_interval:
                self.save_file(scene)
        end_time = time.time()

        if self.sims.current_time - self.last_save_time > 0.1 * self.sims.delta:
            self.save_file(scene)
        self.engine.download(scene)
        self.engine.finalize()

        print('Neighbor list builds = ', self.engine.neighbor_builds)
        if self.engine.broken_bond > 0:
            print('Broken bonds = ', self.engine.broken_bond)
        print('Physical time = ', end_time - start_time)
        print("#", " End Simulation ".center(67,"="), "#", '\n')
