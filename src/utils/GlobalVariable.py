# Runtime switches shared by the taichi kernels and the host-side managers.
INITIALIZED = False
USEGPU = False
