import numpy, math


def no_operation(*args, **kwargs):
    pass

def np_normalized(array):
    norm = numpy.linalg.norm(array)
    if norm == 0.:
        return numpy.asarray(array, dtype=float)
    return numpy.asarray(array, dtype=float) / norm

def axis_angle_to_matrix(angle, axis):
    """Rodrigues rotation matrix for a right-handed rotation of `angle` about `axis`."""
    axis = np_normalized(axis)
    c, s = math.cos(angle), math.sin(angle)
    x, y, z = axis
    K = numpy.array([[0., -z, y], [z, 0., -x], [-y, x, 0.]])
    return c * numpy.eye(3) + s * K + (1. - c) * numpy.outer(axis, axis)

def polygon_area(points, normal):
    """Area of a planar convex polygon given by unordered vertices and its normal."""
    points = numpy.asarray(points, dtype=float)
    if points.shape[0] < 3:
        return 0.
    normal = np_normalized(normal)
    center = points.mean(axis=0)
    u = np_normalized(points[0] - center)
    v = numpy.cross(normal, u)
    rel = points - center
    angle = numpy.arctan2(rel @ v, rel @ u)
    ordered = rel[numpy.argsort(angle)]
    cross = numpy.cross(ordered, numpy.roll(ordered, -1, axis=0))
    return 0.5 * abs(numpy.sum(cross @ normal))
