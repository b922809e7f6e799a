import taichi as ti

from src.utils.TypeDefination import vec2f, vec3f, ZEROVEC3f


@ti.dataclass
class ParticleFamily:
    fix_v: ti.u8
    shapeType: ti.u8
    m: float
    inertia: float
    rad: float
    R: float
    kn: float
    kt: float
    gn: float
    gt: float
    mu: float
    bn: float
    bt: float
    eps: float
    x: vec3f
    v: vec3f
    w: vec3f
    Ff: vec3f
    contact_force: vec3f
    contact_torque: vec3f
    verletDisp: vec3f
    norm: vec3f
    axis0: vec3f
    axis1: vec3f
    extent: vec2f

    @ti.func
    def _reset(self):
        self.contact_force = ZEROVEC3f
        self.contact_torque = ZEROVEC3f

    @ti.func
    def _add_contact(self, force, torque):
        self.contact_force += force
        self.contact_torque += torque

    @ti.func
    def _is_free(self):
        return self.fix_v == 0

    @ti.func
    def _contact_velocity(self, contact_point):
        return self.v + self.w.cross(contact_point - self.x)


@ti.dataclass
class ContactPair:
    end1: int
    end2: int
    tang: vec3f


@ti.dataclass
class BondFamily:
    end1: int
    end2: int
    active: ti.u8
    area: float
    length: float
    tang: vec3f

    @ti.func
    def _break(self):
        self.active = ti.u8(0)
        self.tang = ZEROVEC3f
