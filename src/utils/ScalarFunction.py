import taichi as ti


@ti.func
def HarmonicMean(x, y):
    result = 0.
    if ti.abs(x + y) > 0.:
        result = 2. * x * y / (x + y)
    return result
