import numpy as np
from numba import njit

from surfaces.surface import Surface, SurfaceKind
from vectors import as_vec3, normalize


@njit(cache=True)
def _sphere_intersect(ray_origin, ray_direction, center, radius):
    """
    Geometric ray-sphere intersection (JIT-compiled).

    Returns the nearest non-negative t, or np.inf when the ray misses.
    """
    l_x = center[0] - ray_origin[0]
    l_y = center[1] - ray_origin[1]
    l_z = center[2] - ray_origin[2]

    tca = l_x * ray_direction[0] + l_y * ray_direction[1] + l_z * ray_direction[2]
    if tca < 0:
        return np.inf

    d2 = l_x * l_x + l_y * l_y + l_z * l_z - tca * tca
    radius2 = radius * radius
    if d2 > radius2:
        return np.inf

    thc = np.sqrt(radius2 - d2)
    t0 = tca - thc
    t1 = tca + thc

    if t0 > t1:
        t0, t1 = t1, t0

    if t0 < 0:
        t0 = t1
        if t0 < 0:
            return np.inf

    return t0


class Sphere(Surface):
    def __init__(self, center, radius, albedo, kind=SurfaceKind.DIFFUSE):
        super().__init__(albedo, kind)
        self.center = as_vec3(center)
        self.radius = float(radius)

    def intersect(self, ray):
        t = _sphere_intersect(ray.origin, ray.direction, self.center, self.radius)
        if t == np.inf:
            return None
        return t

    def surface_data(self, hit_point):
        """
        Normal and spherical UV at hit_point.

        v is taken from the absolute height of the hit point, not from the
        normal, so it only spans [0, 1] for spheres centered on y = 0.
        """
        n = normalize(hit_point - self.center)
        u = 0.5 * (1 + np.arctan2(n[2], n[0]) / np.pi)
        # Clipped so spheres off y = 0 give a finite v instead of NaN
        v = np.arccos(np.clip(hit_point[1] / self.radius, -1.0, 1.0)) / np.pi
        return n, np.array([u, v])
