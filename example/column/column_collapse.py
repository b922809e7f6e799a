from geocolumn import *

params = load_parameters("cube_circle")

init(arch="cpu", cpu_max_num_threads=4)

dem = DEM()

dem.set_save_path("CubeColumn")

params.print_info()

column = Column(params, dem, nproc=4)

column.run()
