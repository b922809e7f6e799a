import numpy as np

from src.dem.SceneManager import myScene
from src.utils.constants import PI, PLANE, BASE_PLATE_TAG, CONFINING_WALL_TAGS
from src.utils.linalg import axis_angle_to_matrix


class WallGenerator(object):
    """Adds immovable planar bodies and binds their contact bundles."""
    def __init__(self, log=True) -> None:
        self.log = log

    def create_plane(self, scene: myScene, tag, center, radius, width, height, density, angle=0., axis=(0., 0., 1.)):
        rotation = axis_angle_to_matrix(angle, axis)
        norm = rotation @ np.array([0., 0., 1.])
        axis0 = rotation @ np.array([1., 0., 0.])
        axis1 = rotation @ np.array([0., 1., 0.])
        mass = density * width * height * 2. * radius
        dmax = 0.5 * np.hypot(width, height) + radius
        corners = np.array([[-0.5 * width, -0.5 * height], [0.5 * width, -0.5 * height], [0.5 * width, 0.5 * height], [-0.5 * width, 0.5 * height]])
        vertices = corners[:, :1] * axis0 + corners[:, 1:] * axis1
        return scene.add_particles(tag, PLANE, center, mass, radius, dmax, radius, size=width, inertia=np.inf, vertices=[vertices],
                                   norm=norm, axis0=axis0, axis1=axis1, extent=[0.5 * width, 0.5 * height])[0]

    def print_plane_info(self, tag, center, size, angle, axis):
        print(" Wall Information ".center(71, '-'))
        print("Generate Type: Create Plane")
        print("Tag = ", tag)
        print("The center the wall = ", list(center))
        print("The size of the wall = ", list(size))
        print("Rotation = ", angle, "about", list(axis), '\n')

    def add_plane_wall(self, domain, tag, center, radius, width, height, density, angle=0., axis=(0., 0., 1.), props=None):
        domain.scene.check_boundary_tag(tag)
        domain.add_plane(tag, center, radius, width, height, density, angle, axis)
        domain.fix_velocity(tag)
        if props is not None:
            domain.set_props(tag, **props)
        if self.log:
            self.print_plane_info(tag, center, (width, height), angle, axis)

    def add_confining_walls(self, domain, params):
        """Four side walls and a transient base closing the footprint box."""
        print('#', "Start adding confining wall(s) ......")
        Lx, Ly, Lz, R, Cf = params.Lx, params.Ly, params.Lz, params.R, params.Cf
        e_x, e_y = (1., 0., 0.), (0., 1., 0.)
        walls = [
                    (CONFINING_WALL_TAGS[0], ( 0.5 * Lx, 0., 0.), Cf * Lz, Ly, 0.5 * PI, e_y),
                    (CONFINING_WALL_TAGS[1], (-0.5 * Lx, 0., 0.), Cf * Lz, Ly, 1.5 * PI, e_y),
                    (CONFINING_WALL_TAGS[2], (0.,  0.5 * Ly, 0.), Lx, Cf * Lz, 1.5 * PI, e_x),
                    (CONFINING_WALL_TAGS[3], (0., -0.5 * Ly, 0.), Lx, Cf * Lz, 0.5 * PI, e_x),
                    (CONFINING_WALL_TAGS[4], (0., 0., -0.5 * Lz), Lx, Ly, PI, e_x)
                ]
        for tag, center, width, height, angle, axis in walls:
            self.add_plane_wall(domain, tag, center, R, width, height, 1., angle, axis, props=params.contact_props())
        return [wall[0] for wall in walls]

    def remove_confining_walls(self, domain):
        number = domain.delete_particles(CONFINING_WALL_TAGS)
        if self.log:
            print('#', f"{number} confining wall(s) removed", '\n')
        return number

    def add_base_plate(self, domain, params, props):
        """Permanent base plate one radius below the lowest particle extent."""
        print('#', "Start adding base plate ......")
        Xmin, _ = domain.bounding_box()
        center = (0., 0., Xmin[2] - params.R)
        self.add_plane_wall(domain, BASE_PLATE_TAG, center, params.R, params.plane_x * params.Lz, params.plane_y * params.Lz,
                            params.rho, props=props)
        return center
