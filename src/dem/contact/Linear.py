import math

import taichi as ti

from src.dem.SceneManager import myScene
from src.utils.constants import PI, DBL_EPSILON
from src.utils.TypeDefination import ZEROVEC3f
from src.utils.ScalarFunction import HarmonicMean
from src.utils.VectorFunction import Normalize, ProjectToPlane


class LinearModel(object):
    """Linear spring-dashpot law with Coulomb friction.

    Pair coefficients are the harmonic mean of both particles' coefficients.
    A negative damping coefficient is read as a restitution coefficient.
    """
    def __init__(self) -> None:
        self.model_type = 1

    def calcu_critical_timestep(self, scene: myScene):
        mass = scene.find_particle_min_mass()
        stiffness = self.find_max_stiffness(scene)
        if stiffness <= 0.:
            raise RuntimeError("Critical time step is undefined: no particle carries a positive stiffness")
        return math.sqrt(mass / stiffness)

    def find_max_stiffness(self, scene: myScene):
        return scene.find_max_stiffness()


@ti.func
def damping_coefficient(g, k, m_eff):
    coeff = g * m_eff
    if g < 0.:
        loge = ti.log(ti.max(-g, DBL_EPSILON))
        beta = ti.max(-loge / ti.sqrt(PI * PI + loge * loge), 0.)
        coeff = 2. * beta * ti.sqrt(m_eff * k)
    return coeff

@ti.func
def pair_coefficients(p1, p2):
    kn = HarmonicMean(p1.kn, p2.kn)
    kt = HarmonicMean(p1.kt, p2.kt)
    gn = HarmonicMean(p1.gn, p2.gn)
    gt = HarmonicMean(p1.gt, p2.gt)
    mu = HarmonicMean(p1.mu, p2.mu)
    return kn, kt, gn, gt, mu

@ti.func
def force_assemble(kn, kt, gn, gt, mu, m_eff, gapn, norm, v_rel, tangOverlapOld, dt):
    """Force on the first end of a contact whose normal points from end 1 to end 2.

    ``v_rel`` is the velocity of end 2 relative to end 1 at the contact point.
    Returns the force and the updated tangential spring elongation.
    """
    vn = v_rel.dot(norm)
    vs = v_rel - vn * norm

    cn = damping_coefficient(gn, kn, m_eff)
    fn = ti.max(-kn * gapn - cn * vn, 0.)

    tangOverlapRot = ProjectToPlane(tangOverlapOld, norm)
    tangOverTemp = tangOverlapOld.norm() * Normalize(tangOverlapRot) + vs * dt
    ct = damping_coefficient(gt, kt, m_eff)
    tangential_force = kt * tangOverTemp + ct * vs
    if tangential_force.norm() > mu * fn:
        tangential_force = mu * fn * Normalize(tangential_force)
        tangOverTemp = ZEROVEC3f
        if kt > 0.:
            tangOverTemp = tangential_force / kt
    return -fn * norm + tangential_force, tangOverTemp

@ti.func
def bond_force(bn, bt, area, length, distance, norm, v_rel, tangOld, dt):
    """Elastic bond acting on end 1. Returns the force, the new tangential elongation and the axial strain."""
    strain = (distance - length) / length
    vs = v_rel - v_rel.dot(norm) * norm
    tang = tangOld.norm() * Normalize(ProjectToPlane(tangOld, norm)) + vs * dt
    return bn * area * strain * norm + bt * area / length * tang, tang, strain
