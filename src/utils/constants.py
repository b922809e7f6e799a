from math import pi, sqrt

Threshold = 1e-14
DBL_EPSILON = 2.2204460492503131e-16

PI = pi
SQRT3 = sqrt(3)

# Reserved particle tags
BULK_TAG = -1
BASE_PLATE_TAG = -2
CONFINING_WALL_TAGS = (-11, -12, -13, -14, -15)

# Shape identifiers stored with every particle
SPHERE = 0
CUBE = 1
POLYHEDRON = 2
PLANE = 3
SHAPE_NAME = {SPHERE: "sphere", CUBE: "cube", POLYHEDRON: "polyhedron", PLANE: "plane"}

# Default body forces (per unit mass) in cm/s^2
LATERAL_GRAVITY = 300.
VERTICAL_GRAVITY = -981.
WALL_HEIGHT_FACTOR = 10.
