import taichi as ti

from src.dem.contact.Linear import pair_coefficients, force_assemble, bond_force
from src.utils.TypeDefination import vec3f, ZEROVEC3f


@ti.kernel
def particle_force_reset_(particleNum: int, particle: ti.template()):
    for np in range(particleNum):
        particle[np]._reset()

@ti.kernel
def particle_contact_force_(pairNum: int, dt: float, particle: ti.template(), pair: ti.template()):
    for nc in range(pairNum):
        end1, end2 = pair[nc].end1, pair[nc].end2
        pos1, pos2 = particle[end1].x, particle[end2].x
        rad1, rad2 = particle[end1].rad, particle[end2].rad
        distance = (pos2 - pos1).norm()
        gapn = distance - rad1 - rad2
        tang = ZEROVEC3f
        if gapn < 0. and distance > 0.:
            norm = (pos2 - pos1) / distance
            cpos = pos1 + (rad1 + 0.5 * gapn) * norm
            v_rel = particle[end2]._contact_velocity(cpos) - particle[end1]._contact_velocity(cpos)
            m1, m2 = particle[end1].m, particle[end2].m
            m_eff = m1 * m2 / (m1 + m2)
            kn, kt, gn, gt, mu = pair_coefficients(particle[end1], particle[end2])
            force, tang = force_assemble(kn, kt, gn, gt, mu, m_eff, gapn, norm, v_rel, pair[nc].tang, dt)
            particle[end1]._add_contact(force, (cpos - pos1).cross(force))
            particle[end2]._add_contact(-force, (cpos - pos2).cross(-force))
        pair[nc].tang = tang

@ti.kernel
def wall_contact_force_(pairNum: int, dt: float, particle: ti.template(), pair: ti.template()):
    for nc in range(pairNum):
        end1, end2 = pair[nc].end1, pair[nc].end2
        rel = particle[end1].x - particle[end2].x
        distance = rel.dot(particle[end2].norm)
        u, w = rel.dot(particle[end2].axis0), rel.dot(particle[end2].axis1)
        gapn = ti.abs(distance) - particle[end1].rad - particle[end2].R
        tang = ZEROVEC3f
        if gapn < 0. and ti.abs(u) <= particle[end2].extent[0] and ti.abs(w) <= particle[end2].extent[1]:
            norm = -particle[end2].norm
            if distance < 0.:
                norm = particle[end2].norm
            pos1 = particle[end1].x
            cpos = pos1 + (particle[end1].rad + 0.5 * gapn) * norm
            v_rel = particle[end2]._contact_velocity(cpos) - particle[end1]._contact_velocity(cpos)
            kn, kt, gn, gt, mu = pair_coefficients(particle[end1], particle[end2])
            force, tang = force_assemble(kn, kt, gn, gt, mu, particle[end1].m, gapn, norm, v_rel, pair[nc].tang, dt)
            particle[end1]._add_contact(force, (cpos - pos1).cross(force))
        pair[nc].tang = tang

@ti.kernel
def bond_force_(bondNum: int, dt: float, particle: ti.template(), bond: ti.template()) -> int:
    broken = 0
    for nb in range(bondNum):
        if bond[nb].active == 1:
            end1, end2 = bond[nb].end1, bond[nb].end2
            pos1, pos2 = particle[end1].x, particle[end2].x
            distance = (pos2 - pos1).norm()
            norm = (pos2 - pos1) / distance
            cpos = 0.5 * (pos1 + pos2)
            v_rel = particle[end2]._contact_velocity(cpos) - particle[end1]._contact_velocity(cpos)
            bn = 0.5 * (particle[end1].bn + particle[end2].bn)
            bt = 0.5 * (particle[end1].bt + particle[end2].bt)
            eps = 0.5 * (particle[end1].eps + particle[end2].eps)
            force, tang, strain = bond_force(bn, bt, bond[nb].area, bond[nb].length, distance, norm, v_rel, bond[nb].tang, dt)
            if eps > 0. and ti.abs(strain) > eps:
                bond[nb]._break()
                broken += 1
            else:
                bond[nb].tang = tang
                particle[end1]._add_contact(force, (cpos - pos1).cross(force))
                particle[end2]._add_contact(-force, (cpos - pos2).cross(-force))
    return broken

@ti.kernel
def move_particles_euler_(particleNum: int, dt: float, particle: ti.template()):
    for np in range(particleNum):
        if particle[np]._is_free():
            mass = particle[np].m
            av = (particle[np].contact_force + particle[np].Ff) / mass
            vel = particle[np].v + dt * av
            delta_x = dt * vel
            particle[np].v = vel
            particle[np].x += delta_x
            particle[np].verletDisp += delta_x
            particle[np].w += dt * particle[np].contact_torque / particle[np].inertia

@ti.kernel
def max_verlet_displacement_(particleNum: int, particle: ti.template()) -> float:
    max_disp = 0.
    for np in range(particleNum):
        ti.atomic_max(max_disp, particle[np].verletDisp.norm())
    return max_disp

@ti.kernel
def reset_verlet_displacement_(particleNum: int, particle: ti.template()):
    for np in range(particleNum):
        particle[np].verletDisp = vec3f(0., 0., 0.)
