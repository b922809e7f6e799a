import pytest

from src.column.RunParameters import RunParameters
from src.dem.mainDEM import DEM


BASE_DECK = {
                "CrossSection": "square", "ptype": "sphereboxnormal", "test": "collapse", "Cohesion": "0", "fraction": 1.0,
                "Kn": 1.0e6, "Kt": 5.0e5, "Gn": -0.2, "Gt": -0.2, "Mu": 0.4, "Muw": 0.6,
                "Bn": 1.0e5, "Bt": 5.0e4, "Bm": 5.0e4, "Eps": 0.05, "R": 0.25, "seed": 7,
                "dt": 1.0e-5, "dtOut": 0.05, "Lx": 1.0, "Ly": 1.0, "Lz": 1.0,
                "scalingx": 1, "scalingy": 1, "scalingz": 1, "plane_x": 3, "plane_y": 3,
                "rho": 2.65, "Tf": 0.2
            }


class RecordingDEM(DEM):
    """Domain whose solve only records its arguments and advances the clock."""
    def __init__(self):
        super().__init__(log=False)
        self.solves = []

    def solve(self, tf, dt, dtOut, prefix, alpha, nproc=1):
        self.solves.append({"tf": tf, "dt": dt, "dtOut": dtOut, "prefix": prefix, "alpha": alpha, "nproc": nproc,
                            "tags": set(int(t) for t in self.scene.tag), "fixed": self.scene.fix_v.copy(), "tag_column": self.scene.tag.copy(),
                            "Ff": self.scene.Ff.copy(), "m": self.scene.m.copy()})
        self.sims.current_time = tf
        return tf


@pytest.fixture
def deck():
    return dict(BASE_DECK)


@pytest.fixture
def make_params():
    def factory(**overrides):
        deck = dict(BASE_DECK)
        deck.update(overrides)
        return RunParameters.from_dict(deck)
    return factory


@pytest.fixture
def recording_dem(tmp_path):
    dem = RecordingDEM()
    dem.set_save_path(str(tmp_path))
    return dem


@pytest.fixture(scope="session")
def taichi_runtime():
    import geocolumn
    geocolumn.init(arch="cpu", cpu_max_num_threads=1, log=False)
    yield
