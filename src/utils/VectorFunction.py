import taichi as ti

from src.utils.constants import Threshold


@ti.func
def Normalize(var):
    squareLen = 0.
    for d in ti.static(range(var.n)):
        squareLen += var[d] * var[d]
    sqrt_var = ti.sqrt(squareLen)
    if sqrt_var > Threshold:
        var /= sqrt_var
    return var

@ti.func
def ProjectToPlane(var, norm):
    return var - var.dot(norm) * norm
