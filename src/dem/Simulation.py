from src.utils.TimeTicker import Timer


class Simulation(object):
    """Clock and solve settings of one domain.

    The clock is absolute: a solve to ``time`` runs until ``current_time``
    reaches ``time``, so consecutive solves continue from where the previous
    one stopped.
    """
    def __init__(self) -> None:
        self.timer = Timer()
        self.delta = 0.
        self.time = 0.
        self.current_time = 0.
        self.current_step = 0
        self.current_print = 0
        self.save_interval = 0.
        self.path = 'OutputData'
        self.prefix = 'output'
        self.verlet_distance = 0.
        self.nproc = 1
        self.visualize = True

    def set_timestep(self, timestep):
        if timestep <= 0.:
            raise ValueError("Time step should be larger than 0!")
        self.delta = float(timestep)

    def set_simulation_time(self, time):
        self.time = float(time)

    def set_save_interval(self, save_interval):
        if save_interval <= 0.:
            raise ValueError("Save interval should be larger than 0!")
        self.save_interval = float(save_interval)

    def set_save_path(self, path):
        self.path = path

    def set_prefix(self, prefix):
        self.prefix = str(prefix)
        self.current_print = 0

    def set_verlet_distance(self, alpha):
        if alpha < 0.:
            raise ValueError("Verlet distance should not be negative!")
        self.verlet_distance = float(alpha)

    def set_nproc(self, nproc):
        if int(nproc) < 1:
            raise ValueError("Thread number should be larger than 0!")
        self.nproc = int(nproc)

    def output_path(self):
        return self.path + '/' + self.prefix

    def state(self):
        return {"current_time": self.current_time, "current_step": self.current_step}

    def restore(self, state):
        self.current_time = float(state["current_time"])
        self.current_step = int(state["current_step"])
